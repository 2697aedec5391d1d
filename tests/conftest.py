from pathlib import Path

import pytest

from joias.infra.store import DocumentStore
from joias.usecases.cadastrar_joia import cadastrar_joia


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "joias_test.sqlite")


@pytest.fixture
def store(db_path):
    with DocumentStore(db_path) as s:
        yield s


def dados_joia(**kw):
    base = {
        "codigo": "an001",
        "nome": "anel solitário",
        "categoria": "anel",
        "material": "prata 925",
        "fornecedor": "atacado sp",
        "quantidade": 3,
        "data_compra": "2024-03-10",
        "preco_por_peca": 40.0,
        "frete_total": 20.0,
        "total_pecas_compra": 10,
        "custo_embalagem": 3.0,
        "outros_custos": 1.0,
        "margem_lucro": 100.0,
        "taxa_credito": 5.0,
    }
    base.update(kw)
    return base


@pytest.fixture
def nova_joia(store):
    """Cadastra uma joia e devolve o objeto gravado."""
    def _criar(**kw):
        return cadastrar_joia(store, dados_joia(**kw))
    return _criar
