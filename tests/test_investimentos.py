from datetime import date
from math import isclose

import pytest

from joias.domain.erros import ValidationError
from joias.domain.models import DivisaoLucro, ItemVenda, Joia, Venda
from joias.infra.repositories import LoteRepo
from joias.usecases.investimentos import (
    agrupar_lotes,
    ajustar_divisao_lote,
    base_distribuicao,
    distribuicao_lucro,
    listar_lotes,
    salvar_divisao_lote,
)
from joias.usecases.registrar_venda import Carrinho, finalizar_venda


def _joia(codigo, fornecedor, data, qtd, custo, embalagem=0.0):
    return Joia(codigo=codigo, nome=codigo, categoria="anel", material="Prata",
                fornecedor=fornecedor, quantidade=qtd, data_compra=data,
                custo_aquisicao=custo, custo_embalagem=embalagem, id=codigo)


def _venda(*linhas):
    itens = [
        ItemVenda(joia_id=j.id, joia=j, quantidade=q, preco_unitario=p, subtotal=p * q)
        for j, q, p in linhas
    ]
    return Venda(nome_cliente="X", data_venda=date(2024, 4, 1), forma_pagamento="pix", itens=itens)


def test_agrupa_por_fornecedor_e_dia():
    joias = [
        _joia("A", "Sp", date(2024, 3, 10), 2, 10.0),
        _joia("B", "Sp", date(2024, 3, 10), 1, 20.0),
        _joia("C", "Sp", date(2024, 3, 11), 1, 5.0),
        _joia("D", "Rio", None, 4, 1.0),
        _joia("E", "Rio", None, 1, 1.0),
    ]
    lotes = {l.chave: l for l in agrupar_lotes(joias, [])}
    assert set(lotes) == {"Sp__2024-03-10", "Sp__2024-03-11", "Rio__sem-data"}
    assert lotes["Sp__2024-03-10"].valor_investido == 40.0
    assert lotes["Sp__2024-03-10"].total_pecas == 3
    assert lotes["Rio__sem-data"].total_pecas == 5
    assert lotes["Rio__sem-data"].percentual_vendido == 0.0
    assert lotes["Rio__sem-data"].divisao_lucro == DivisaoLucro(50, 30, 20)


def test_vendas_atribuidas_pela_fotografia():
    a = _joia("A", "Sp", date(2024, 3, 10), 2, 10.0, embalagem=2.0)
    b = _joia("B", "Rio", None, 1, 5.0)
    vendas = [_venda((a, 2, 30.0), (b, 1, 12.0)), _venda((a, 1, 25.0))]

    lotes = {l.chave: l for l in agrupar_lotes([a, b], vendas)}
    sp = lotes["Sp__2024-03-10"]
    assert sp.valor_vendido == 85.0
    assert sp.lucro_obtido == (30 - 10) * 2 + (25 - 10)
    assert sp.pecas_vendidas == 3
    assert sp.valor_embalagem_vendida == 6.0
    assert sp.percentual_vendido == 150.0
    assert base_distribuicao(sp) == 79.0

    rio = lotes["Rio__sem-data"]
    assert rio.valor_vendido == 12.0
    assert rio.pecas_vendidas == 1


def test_lote_sem_pecas_tem_percentual_zero():
    a = _joia("A", "Sp", date(2024, 3, 10), 0, 10.0)
    lote = agrupar_lotes([a], [_venda((a, 1, 30.0))])[0]
    assert lote.total_pecas == 0
    assert lote.percentual_vendido == 0.0


def test_distribuicao_desconta_embalagem_e_nunca_negativa():
    a = _joia("A", "Sp", None, 1, 10.0, embalagem=50.0)
    lote = agrupar_lotes([a], [_venda((a, 1, 30.0))])[0]
    assert base_distribuicao(lote) == 0.0
    assert distribuicao_lucro(lote) == {"reinvestimento": 0.0, "reserva_emergencia": 0.0, "lucro_liquido": 0.0}


def test_distribuicao_usa_divisao_salva():
    a = _joia("A", "Sp", None, 1, 10.0)
    configs = {"Sp__sem-data": {"id": "cfg1", "divisao_lucro": {
        "reinvestimento": 70, "reserva_emergencia": 20, "lucro_liquido": 10}}}
    lote = agrupar_lotes([a], [_venda((a, 1, 100.0))], configs)[0]
    assert lote.config_id == "cfg1"
    dist = distribuicao_lucro(lote)
    assert dist == {"reinvestimento": 70.0, "reserva_emergencia": 20.0, "lucro_liquido": 10.0}


def test_ajustar_divisao_lote():
    d = ajustar_divisao_lote(DivisaoLucro(50, 30, 20), "lucro_liquido", 40)
    assert isclose(d.reinvestimento, 37.5)
    assert isclose(d.reserva_emergencia, 22.5)


def test_salvar_divisao_lote_upsert(store):
    salvar_divisao_lote(store, "Sp", "2024-03-10", DivisaoLucro(60, 30, 10))
    salvar_divisao_lote(store, "Sp", "2024-03-10", DivisaoLucro(40, 40, 20))
    mapa = LoteRepo(store).map_by_chave()
    assert list(mapa) == ["Sp__2024-03-10"]
    assert mapa["Sp__2024-03-10"]["divisao_lucro"]["reinvestimento"] == 40


def test_salvar_divisao_que_nao_soma_100(store):
    with pytest.raises(ValidationError, match="100%"):
        salvar_divisao_lote(store, "Sp", "2024-03-10", DivisaoLucro(60, 30, 20))
    assert LoteRepo(store).map_by_chave() == {}


def test_listar_lotes_do_armazenamento(store, nova_joia):
    joia = nova_joia(quantidade=3)
    c = Carrinho()
    c.adicionar(joia, 1)
    finalizar_venda(store, c, "Ana")
    salvar_divisao_lote(store, "Atacado Sp", "2024-03-10", DivisaoLucro(60, 30, 10))

    lotes = listar_lotes(store)
    assert len(lotes) == 1
    lote = lotes[0]
    assert lote.chave == "Atacado Sp__2024-03-10"
    assert lote.total_pecas == 2
    assert isclose(lote.valor_investido, 2 * joia.custo_aquisicao)
    assert lote.pecas_vendidas == 1
    assert isclose(lote.percentual_vendido, 50.0)
    assert lote.divisao_lucro == DivisaoLucro(60, 30, 10)
