# joias/infra/repositories.py
"""
Repositórios para acesso e manipulação das coleções do DocumentStore.

Classes:
- JoiaRepo
- VendaRepo
- MovimentoRepo
- LoteRepo
- ConfigRepo
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any, Callable, Dict, List, Optional

from joias.domain.models import DivisaoCaixa, DivisaoLucro, Joia, Movimento, Venda
from joias.infra.store import DocumentStore


COL_JOIAS = "joias"
COL_VENDAS = "vendas"
COL_FLUXO = "fluxo"
COL_LOTES = "lotes"
COL_CONFIG = "config"


# -------------------------
# Helpers
# -------------------------

def _as_dict(row: Any) -> Dict[str, Any]:
    if isinstance(row, dict):
        return row
    if hasattr(row, "to_doc"):
        return row.to_doc()
    if is_dataclass(row):
        return asdict(row)
    raise TypeError("row must be dict or dataclass")


# -------------------------
# Joias
# -------------------------

class JoiaRepo:
    def __init__(self, store: DocumentStore):
        self.col = store.colecao(COL_JOIAS)

    def get(self, joia_id: str) -> Optional[Joia]:
        doc = self.col.get(joia_id)
        return Joia.from_doc(doc) if doc else None

    def get_all(self) -> List[Joia]:
        return [Joia.from_doc(d) for d in self.col.listar()]

    def find_by_codigo(self, codigo: str) -> Optional[Joia]:
        alvo = (codigo or "").strip().upper()
        for j in self.get_all():
            if j.codigo.upper() == alvo:
                return j
        return None

    def insert(self, joia: Any) -> str:
        return self.col.create(_as_dict(joia))

    def update(self, joia_id: str, campos: Dict[str, Any]) -> None:
        self.col.update(joia_id, campos)

    def set_estoque(self, joia_id: str, quantidade: int, status: str) -> None:
        self.col.update(joia_id, {"quantidade": quantidade, "status": status})

    def delete(self, joia_id: str) -> None:
        self.col.delete(joia_id)

    def subscribe(self, on_change: Callable[[List[Joia]], None]) -> Callable[[], None]:
        return self.col.subscribe(lambda docs: on_change([Joia.from_doc(d) for d in docs]))


# -------------------------
# Vendas
# -------------------------

class VendaRepo:
    def __init__(self, store: DocumentStore):
        self.col = store.colecao(COL_VENDAS)

    def get(self, venda_id: str) -> Optional[Venda]:
        doc = self.col.get(venda_id)
        return Venda.from_doc(doc) if doc else None

    def get_all(self) -> List[Venda]:
        return [Venda.from_doc(d) for d in self.col.listar()]

    def insert(self, venda: Any) -> str:
        return self.col.create(_as_dict(venda))

    def update(self, venda_id: str, campos: Dict[str, Any]) -> None:
        self.col.update(venda_id, campos)

    def delete(self, venda_id: str) -> None:
        self.col.delete(venda_id)

    def subscribe(self, on_change: Callable[[List[Venda]], None]) -> Callable[[], None]:
        return self.col.subscribe(lambda docs: on_change([Venda.from_doc(d) for d in docs]))


# -------------------------
# Fluxo de caixa
# -------------------------

class MovimentoRepo:
    def __init__(self, store: DocumentStore):
        self.col = store.colecao(COL_FLUXO)

    def get(self, mov_id: str) -> Optional[Movimento]:
        doc = self.col.get(mov_id)
        return Movimento.from_doc(doc) if doc else None

    def get_all(self) -> List[Movimento]:
        return [Movimento.from_doc(d) for d in self.col.listar()]

    def insert(self, mov: Any) -> str:
        return self.col.create(_as_dict(mov))

    def update(self, mov_id: str, campos: Dict[str, Any]) -> None:
        self.col.update(mov_id, campos)

    def delete(self, mov_id: str) -> None:
        self.col.delete(mov_id)

    def subscribe(self, on_change: Callable[[List[Movimento]], None]) -> Callable[[], None]:
        return self.col.subscribe(lambda docs: on_change([Movimento.from_doc(d) for d in docs]))


# -------------------------
# Configuração de lotes (divisão do lucro)
# -------------------------

class LoteRepo:
    def __init__(self, store: DocumentStore):
        self.col = store.colecao(COL_LOTES)

    def map_by_chave(self) -> Dict[str, Dict[str, Any]]:
        """Mapeia 'fornecedor__data_lote' -> documento de configuração."""
        out: Dict[str, Dict[str, Any]] = {}
        for d in self.col.listar():
            out[f"{d.get('fornecedor', '')}__{d.get('data_lote', '')}"] = d
        return out

    def upsert_divisao(self, fornecedor: str, data_lote: str, divisao: DivisaoLucro) -> str:
        existente = self.map_by_chave().get(f"{fornecedor}__{data_lote}")
        payload = {"divisao_lucro": asdict(divisao)}
        if existente:
            self.col.update(existente["id"], payload)
            return existente["id"]
        return self.col.create({"fornecedor": fornecedor, "data_lote": data_lote, **payload})


# -------------------------
# Config (chaves fixas)
# -------------------------

class ConfigRepo:
    def __init__(self, store: DocumentStore):
        self.col = store.colecao(COL_CONFIG)

    def get(self, chave: str) -> Optional[Dict[str, Any]]:
        return self.col.get(chave)

    def set(self, chave: str, dados: Dict[str, Any]) -> None:
        self.col.set(chave, dados, merge=True)

    def get_divisao_caixa(self) -> DivisaoCaixa:
        doc = self.col.get("divisao_caixa")
        padrao = DivisaoCaixa()
        if not doc:
            return padrao
        return DivisaoCaixa(
            reinvestimento=float(doc.get("reinvestimento", padrao.reinvestimento)),
            caixa_loja=float(doc.get("caixa_loja", padrao.caixa_loja)),
            salario=float(doc.get("salario", padrao.salario)),
        )

    def set_divisao_caixa(self, divisao: DivisaoCaixa) -> None:
        self.col.set("divisao_caixa", asdict(divisao))
