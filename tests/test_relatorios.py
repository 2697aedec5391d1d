from datetime import date

import pandas as pd
import pytest

from joias.domain.models import FiltroRelatorio, ItemVenda, Joia, Venda
from joias.usecases.registrar_venda import Carrinho, finalizar_venda
from joias.usecases.relatorios import (
    carregar_relatorio,
    estatisticas_estoque,
    exportar_relatorio,
    relatorio_geral,
    relatorio_mensal,
)


def _joia(codigo, qtd, custo, preco, status="disponivel", categoria="anel", fornecedor="Sp", data=None):
    return Joia(codigo=codigo, nome=codigo, categoria=categoria, material="Prata", fornecedor=fornecedor,
                quantidade=qtd, custo_aquisicao=custo, preco_venda_final=preco, status=status,
                data_compra=data)


def _venda(dia, total, lucro, pecas=1):
    joia = _joia("X", 0, 0, 0)
    item = ItemVenda(joia_id="x", joia=joia, quantidade=pecas, preco_unitario=total / pecas, subtotal=total)
    return Venda(nome_cliente="C", data_venda=dia, forma_pagamento="pix", itens=[item],
                 valor_total=total, lucro_real=lucro)


def test_estatisticas_estoque():
    joias = [
        _joia("A", 2, 10.0, 30.0),
        _joia("B", 1, 20.0, 50.0),
        _joia("C", 0, 15.0, 40.0, status="vendida"),
    ]
    s = estatisticas_estoque(joias)
    assert s["total_joias"] == 3
    assert s["joias_disponiveis"] == 2
    assert s["joias_vendidas"] == 1
    assert s["valor_investido"] == 40.0
    assert s["valor_estoque"] == 110.0
    assert s["lucro_total"] == 70.0


def test_relatorio_mensal_agrupa_e_ordena():
    vendas = [
        _venda(date(2024, 1, 5), 100.0, 40.0, pecas=2),
        _venda(date(2024, 3, 2), 50.0, 20.0),
        _venda(date(2024, 1, 20), 30.0, 10.0),
        _venda(date(2023, 12, 31), 10.0, 1.0),
    ]
    rel = relatorio_mensal(vendas)
    assert [r["chave"] for r in rel] == ["2024-03", "2024-01", "2023-12"]
    jan = rel[1]
    assert jan["mes"] == "janeiro de 2024"
    assert jan["joias_vendidas"] == 3
    assert jan["total_vendas"] == 130.0
    assert jan["lucro_total"] == 50.0
    assert rel[0]["mes"] == "março de 2024"


def test_relatorio_geral_com_filtros():
    joias = [
        _joia("A", 1, 10.0, 30.0, categoria="anel", fornecedor="Sp", data=date(2024, 1, 10)),
        _joia("B", 1, 10.0, 30.0, categoria="colar", fornecedor="Sp", data=date(2024, 2, 10)),
        _joia("C", 1, 10.0, 30.0, categoria="anel", fornecedor="Rio", data=date(2024, 2, 15)),
    ]
    vendas = [_venda(date(2024, 1, 15), 100.0, 40.0), _venda(date(2024, 2, 20), 60.0, 25.0)]

    tudo = relatorio_geral(joias, vendas)
    assert tudo["total_joias"] == 3
    assert tudo["total_vendas_periodo"] == 160.0
    assert tudo["quantidade_vendas_periodo"] == 2
    assert len(tudo["mensal"]) == 2

    fev = relatorio_geral(joias, vendas, FiltroRelatorio(data_inicio=date(2024, 2, 1), data_fim=date(2024, 2, 29)))
    assert fev["total_joias"] == 2
    assert fev["total_vendas_periodo"] == 60.0
    assert fev["lucro_real_periodo"] == 25.0

    aneis_sp = relatorio_geral(joias, vendas, FiltroRelatorio(categoria="anel", fornecedor="Sp"))
    assert aneis_sp["total_joias"] == 1


def test_exportar_xlsx_duas_abas(tmp_path):
    rel = relatorio_geral([_joia("A", 1, 10.0, 30.0)], [_venda(date(2024, 1, 15), 100.0, 40.0)])
    destino = exportar_relatorio(rel, str(tmp_path / "saida" / "relatorio.xlsx"))

    abas = pd.read_excel(destino, sheet_name=None)
    assert set(abas) == {"Geral", "Mensal"}
    geral = dict(zip(abas["Geral"]["indicador"], abas["Geral"]["valor"]))
    assert geral["total_vendas_periodo"] == 100.0
    assert abas["Mensal"]["mes"].tolist() == ["janeiro de 2024"]


def test_exportar_csv(tmp_path):
    rel = relatorio_geral([], [_venda(date(2024, 1, 15), 100.0, 40.0)])
    destino = exportar_relatorio(rel, str(tmp_path / "relatorio.csv"))
    df = pd.read_csv(destino)
    assert set(df["secao"]) == {"geral", "mensal"}


def test_carregar_relatorio_do_armazenamento(store, nova_joia):
    joia = nova_joia(quantidade=2)
    c = Carrinho()
    c.adicionar(joia, 1)
    venda, _ = finalizar_venda(store, c, "Ana", date(2024, 4, 2))

    rel = carregar_relatorio(store)
    assert rel["total_joias"] == 1
    assert rel["total_vendas_periodo"] == pytest.approx(venda.valor_total)
    assert rel["mensal"][0]["mes"] == "abril de 2024"
