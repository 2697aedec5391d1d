import sqlite3

import pytest

from joias.domain.erros import PersistenceError
from joias.infra.db import connect
from joias.infra.migrations import apply_migrations
from joias.infra.store import DocumentStore


def test_migrations_sao_idempotentes(db_path):
    apply_migrations(db_path)
    apply_migrations(db_path)
    with connect(db_path) as c:
        versao = c.execute("PRAGMA user_version").fetchone()[0]
        tabelas = {r[0] for r in c.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert versao >= 1
    assert "documento" in tabelas


def test_create_get_update_delete(store):
    col = store.colecao("joias")
    doc_id = col.create({"codigo": "AN001", "quantidade": 2})
    doc = col.get(doc_id)
    assert doc["codigo"] == "AN001"
    assert doc["id"] == doc_id
    assert doc["criado_em"] and doc["atualizado_em"]

    col.update(doc_id, {"quantidade": 1})
    doc2 = col.get(doc_id)
    assert doc2["quantidade"] == 1
    assert doc2["codigo"] == "AN001"
    assert doc2["atualizado_em"] >= doc["atualizado_em"]

    col.delete(doc_id)
    assert col.get(doc_id) is None


def test_update_inexistente_levanta_persistence_error(store):
    with pytest.raises(PersistenceError):
        store.colecao("joias").update("nao-existe", {"quantidade": 1})


def test_listar_mais_recentes_primeiro(store):
    col = store.colecao("vendas")
    a = col.create({"n": 1})
    b = col.create({"n": 2})
    c = col.create({"n": 3})
    assert [d["id"] for d in col.listar()] == [c, b, a]


def test_colecoes_sao_isoladas(store):
    store.colecao("joias").create({"x": 1})
    assert store.colecao("vendas").listar() == []


def test_set_faz_merge_em_chave_fixa(store):
    col = store.colecao("config")
    col.set("auth", {"password_hash": "abc"})
    col.set("auth", {"outro": 1})
    doc = col.get("auth")
    assert doc["password_hash"] == "abc"
    assert doc["outro"] == 1
    col.set("auth", {"so": "isso"}, merge=False)
    assert "password_hash" not in col.get("auth")


def test_subscribe_snapshot_inicial_alteracoes_e_unsubscribe(store):
    col = store.colecao("joias")
    col.create({"codigo": "AN001"})
    recebidos = []
    unsubscribe = col.subscribe(recebidos.append)
    assert len(recebidos) == 1
    assert [d["codigo"] for d in recebidos[0]] == ["AN001"]

    col.create({"codigo": "BR002"})
    assert len(recebidos) == 2
    assert [d["codigo"] for d in recebidos[1]] == ["BR002", "AN001"]

    unsubscribe()
    col.create({"codigo": "CO003"})
    assert len(recebidos) == 2


def test_subscribe_ignora_outras_colecoes(store):
    recebidos = []
    store.colecao("joias").subscribe(recebidos.append)
    store.colecao("vendas").create({"x": 1})
    assert len(recebidos) == 1


def test_erro_sqlite_vira_persistence_error(tmp_path):
    # caminho é um diretório: o sqlite não consegue abrir
    s = DocumentStore(str(tmp_path))
    with pytest.raises(PersistenceError):
        s.colecao("joias").create({"x": 1})


def test_close_remove_assinantes(db_path):
    s = DocumentStore(db_path).open()
    recebidos = []
    s.colecao("joias").subscribe(recebidos.append)
    s.close()
    s.colecao("joias").create({"x": 1})
    assert len(recebidos) == 1
