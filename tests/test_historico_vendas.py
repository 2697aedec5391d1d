from datetime import date
from math import isclose

import pytest

from joias.domain.erros import InsufficientStockError, PersistenceError, ValidationError
from joias.domain.models import FiltroVendas, Venda
from joias.infra.repositories import JoiaRepo, VendaRepo
from joias.infra.store import Colecao
from joias.usecases.cadastrar_joia import excluir_joia
from joias.usecases.historico_vendas import (
    editar_venda,
    estatisticas_vendas,
    excluir_venda,
    filtrar_vendas,
)
from joias.usecases.registrar_venda import Carrinho, finalizar_venda, montar_item_venda
from joias.usecases.saga import FALHOU, IGNORADO, OK


def _vender(store, *linhas, cliente="Ana", pagamento="dinheiro", data=None):
    c = Carrinho()
    c.definir_pagamento(pagamento)
    for joia, q in linhas:
        c.adicionar(joia, q)
    venda, _ = finalizar_venda(store, c, cliente, data)
    return venda


def _qtd(store, joia):
    return JoiaRepo(store).get(joia.id).quantidade


# ----------------------
# Editar
# ----------------------

def test_editar_aumenta_e_reduz(store, nova_joia):
    a = nova_joia(codigo="A1", quantidade=5)
    b = nova_joia(codigo="B1", quantidade=2)
    venda = _vender(store, (a, 2), (b, 2))
    assert _qtd(store, a) == 3 and _qtd(store, b) == 0

    novos = [montar_item_venda(a, 4), montar_item_venda(b, 1)]
    editada, rel = editar_venda(store, venda.id, novos)

    assert rel.sucesso_total
    assert _qtd(store, a) == 1
    assert _qtd(store, b) == 1
    assert JoiaRepo(store).get(b.id).status == "disponivel"
    assert isclose(editada.valor_total, 4 * a.preco_venda_final + b.preco_venda_final)
    assert editada.quantidade_pecas == 5


def test_editar_sem_mudanca_nao_mexe_no_estoque(store, nova_joia):
    a = nova_joia(quantidade=5)
    venda = _vender(store, (a, 2))
    _, rel = editar_venda(store, venda.id, [montar_item_venda(a, 2, 10.0)])
    assert rel.passos == []
    assert _qtd(store, a) == 3
    assert VendaRepo(store).get(venda.id).valor_total == 20.0


def test_editar_remove_linha_devolve_tudo(store, nova_joia):
    a = nova_joia(codigo="A1", quantidade=2)
    b = nova_joia(codigo="B1", quantidade=2)
    venda = _vender(store, (a, 1), (b, 2))
    editar_venda(store, venda.id, [montar_item_venda(a, 1)])
    assert _qtd(store, b) == 2
    assert JoiaRepo(store).get(b.id).status == "disponivel"


def test_editar_baixa_ate_zerar_marca_vendida(store, nova_joia):
    a = nova_joia(quantidade=3)
    venda = _vender(store, (a, 1))
    editar_venda(store, venda.id, [montar_item_venda(a, 3)])
    assert _qtd(store, a) == 0
    assert JoiaRepo(store).get(a.id).status == "vendida"


def test_editar_estoque_insuficiente_nao_altera_nada(store, nova_joia):
    a = nova_joia(codigo="A1", quantidade=3)
    b = nova_joia(codigo="B1", quantidade=2)
    venda = _vender(store, (a, 2), (b, 1))

    # tira B da venda (devolveria 1) mas pede mais 5 de A, que só tem 1
    with pytest.raises(InsufficientStockError) as exc:
        editar_venda(store, venda.id, [montar_item_venda(a, 7)])
    assert exc.value.disponivel == 1
    assert exc.value.solicitado == 5
    assert _qtd(store, a) == 1
    assert _qtd(store, b) == 1
    assert VendaRepo(store).get(venda.id).quantidade_pecas == 3


def test_editar_joia_nova_inexistente_conta_como_zero(store, nova_joia):
    a = nova_joia(codigo="A1", quantidade=3)
    b = nova_joia(codigo="B1", quantidade=3)
    venda = _vender(store, (a, 1))
    excluir_joia(store, b.id)
    with pytest.raises(InsufficientStockError):
        editar_venda(store, venda.id, [montar_item_venda(a, 1), montar_item_venda(b, 1)])


def test_editar_reducao_de_joia_excluida_e_ignorada(store, nova_joia):
    a = nova_joia(codigo="A1", quantidade=3)
    b = nova_joia(codigo="B1", quantidade=3)
    venda = _vender(store, (a, 1), (b, 2))
    excluir_joia(store, b.id)

    editada, rel = editar_venda(store, venda.id, [montar_item_venda(a, 2)])
    assert [p.situacao for p in rel.passos] == [IGNORADO, OK]
    assert _qtd(store, a) == 1
    assert editada.quantidade_pecas == 2


def test_editar_atualiza_cliente_data_pagamento(store, nova_joia):
    a = nova_joia()
    venda = _vender(store, (a, 1))
    editada, _ = editar_venda(
        store, venda.id, [montar_item_venda(a, 1)],
        nome_cliente="joão pereira", data_venda=date(2024, 5, 1), forma_pagamento="pix",
    )
    assert editada.nome_cliente == "João Pereira"
    assert editada.data_venda == date(2024, 5, 1)
    assert editada.forma_pagamento == "pix"


def test_editar_validacoes(store, nova_joia):
    a = nova_joia()
    venda = _vender(store, (a, 1))
    with pytest.raises(ValidationError):
        editar_venda(store, venda.id, [])
    with pytest.raises(ValidationError):
        editar_venda(store, venda.id, [montar_item_venda(a, 1)], forma_pagamento="cheque")
    with pytest.raises(ValidationError):
        editar_venda(store, "nao-existe", [montar_item_venda(a, 1)])


def test_editar_falha_no_passo_continua(store, nova_joia, monkeypatch):
    a = nova_joia(codigo="A1", quantidade=3)
    b = nova_joia(codigo="B1", quantidade=3)
    venda = _vender(store, (a, 2), (b, 1))
    original = Colecao.update

    def update(self, doc_id, parcial):
        if doc_id == a.id:
            raise PersistenceError("falha simulada", self.nome, doc_id)
        return original(self, doc_id, parcial)

    monkeypatch.setattr(Colecao, "update", update)
    editada, rel = editar_venda(store, venda.id, [montar_item_venda(a, 1), montar_item_venda(b, 2)])

    assert [p.situacao for p in rel.passos] == [FALHOU, OK]
    assert _qtd(store, b) == 1
    assert editada.quantidade_pecas == 3


# ----------------------
# Excluir
# ----------------------

def test_excluir_devolve_estoque(store, nova_joia):
    a = nova_joia(codigo="A1", quantidade=2)
    b = nova_joia(codigo="B1", quantidade=1)
    venda = _vender(store, (a, 2), (b, 1))
    assert JoiaRepo(store).get(a.id).status == "vendida"

    rel = excluir_venda(store, venda.id)
    assert rel.sucesso_total
    assert _qtd(store, a) == 2 and _qtd(store, b) == 1
    assert JoiaRepo(store).get(a.id).status == "disponivel"
    assert VendaRepo(store).get(venda.id) is None


def test_excluir_com_joia_inexistente_pula_e_remove(store, nova_joia):
    a = nova_joia(codigo="A1", quantidade=2)
    b = nova_joia(codigo="B1", quantidade=2)
    venda = _vender(store, (a, 1), (b, 1))
    excluir_joia(store, a.id)

    rel = excluir_venda(store, venda.id)
    assert [p.situacao for p in rel.passos] == [IGNORADO, OK]
    assert _qtd(store, b) == 2
    assert VendaRepo(store).get(venda.id) is None


def test_excluir_com_falha_continua_e_remove_venda(store, nova_joia, monkeypatch):
    a = nova_joia(codigo="A1", quantidade=2)
    b = nova_joia(codigo="B1", quantidade=2)
    venda = _vender(store, (a, 1), (b, 1))
    original = Colecao.update

    def update(self, doc_id, parcial):
        if doc_id == a.id:
            raise PersistenceError("falha simulada", self.nome, doc_id)
        return original(self, doc_id, parcial)

    monkeypatch.setattr(Colecao, "update", update)
    rel = excluir_venda(store, venda.id)

    assert len(rel.falhas) == 1
    assert _qtd(store, a) == 1
    assert _qtd(store, b) == 2
    assert VendaRepo(store).get(venda.id) is None


def test_excluir_venda_inexistente(store):
    with pytest.raises(ValidationError):
        excluir_venda(store, "nao-existe")


# ----------------------
# Filtros e estatísticas
# ----------------------

def _v(cliente, pagamento, dia, total, lucro=0.0):
    return Venda(nome_cliente=cliente, data_venda=dia, forma_pagamento=pagamento,
                 valor_total=total, lucro_real=lucro)


def test_filtrar_vendas():
    vendas = [
        _v("Maria Silva", "pix", date(2024, 1, 10), 100),
        _v("Ana Souza", "dinheiro", date(2024, 2, 5), 50),
        _v("Mariana Lima", "credito", date(2024, 3, 1), 80),
    ]
    assert [v.nome_cliente for v in filtrar_vendas(vendas, FiltroVendas(nome_cliente="MARI"))] == [
        "Maria Silva", "Mariana Lima",
    ]
    assert len(filtrar_vendas(vendas, FiltroVendas(forma_pagamento="pix"))) == 1
    periodo = FiltroVendas(data_inicio=date(2024, 2, 1), data_fim=date(2024, 2, 29))
    assert [v.nome_cliente for v in filtrar_vendas(vendas, periodo)] == ["Ana Souza"]
    assert len(filtrar_vendas(vendas)) == 3


def test_estatisticas_vendas():
    vendas = [
        _v("A", "pix", date(2024, 1, 10), 100, 40),
        _v("B", "pix", date(2024, 1, 11), 50, 20),
        _v("C", "dinheiro", date(2024, 1, 12), 30, 10),
    ]
    s = estatisticas_vendas(vendas)
    assert s["total_vendas"] == 180
    assert s["lucro_total"] == 70
    assert s["quantidade_vendas"] == 3
    assert s["ticket_medio"] == 60
    assert s["por_pagamento"]["pix"] == {"quantidade": 2, "valor": 150}
    assert estatisticas_vendas([])["ticket_medio"] == 0.0
