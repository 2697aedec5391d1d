# joias/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observação importante:
- O armazenamento trabalha com dicionários (documentos JSON); as
  dataclasses convertem de/para documento com `from_doc` / `to_doc`.
- Datas viajam como texto ISO dentro dos documentos.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from joias.config import DEFAULTS


STATUS_DISPONIVEL = "disponivel"
STATUS_VENDIDA = "vendida"

FORMAS_PAGAMENTO = ("dinheiro", "credito", "debito", "pix", "transferencia")
ORIGENS_MOVIMENTO = ("caixa", "embalagem")
SUBORIGENS_CAIXA = ("reinvestimento", "caixa_loja", "salario")

SEM_DATA = "sem-data"


def _to_date(val: Any) -> Optional[date]:
    if val is None or val == "":
        return None
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    return date.fromisoformat(str(val)[:10])


def _to_datetime(val: Any) -> Optional[datetime]:
    if val is None or val == "":
        return None
    if isinstance(val, datetime):
        return val
    return datetime.fromisoformat(str(val))


def _iso(val: Any) -> Any:
    if isinstance(val, (date, datetime)):
        return val.isoformat()
    return val


def _pick(cls, doc: Dict[str, Any]) -> Dict[str, Any]:
    nomes = {f.name for f in fields(cls)}
    return {k: v for k, v in doc.items() if k in nomes}


@dataclass
class Joia:
    """Tipo de peça em estoque, com quantidade e preços derivados."""
    codigo: str
    nome: str
    categoria: str
    material: str
    fornecedor: str
    quantidade: int = 1
    data_compra: Optional[date] = None
    preco_por_peca: float = 0.0
    frete_total: float = 0.0
    total_pecas_compra: int = 1
    frete_por_peca: float = 0.0
    custo_embalagem: float = 0.0
    outros_custos: float = 0.0
    margem_lucro: float = 100.0
    taxa_credito: float = 5.0
    custo_aquisicao: float = 0.0
    preco_venda_final: float = 0.0
    lucro_esperado: float = 0.0
    status: str = STATUS_DISPONIVEL
    id: Optional[str] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "Joia":
        d = _pick(cls, doc)
        for k in ("codigo", "nome", "categoria", "material", "fornecedor"):
            d.setdefault(k, "")
        d["data_compra"] = _to_date(d.get("data_compra"))
        d["criado_em"] = _to_datetime(d.get("criado_em"))
        d["atualizado_em"] = _to_datetime(d.get("atualizado_em"))
        if d.get("quantidade") is not None:
            d["quantidade"] = int(d["quantidade"])
        return cls(**d)

    def to_doc(self) -> Dict[str, Any]:
        return {k: _iso(v) for k, v in asdict(self).items()}

    @property
    def descricao(self) -> str:
        return f"{self.codigo} - {self.nome}"


@dataclass
class ItemVenda:
    """Linha de uma venda, com fotografia da joia no momento da venda."""
    joia_id: str
    joia: Joia
    quantidade: int
    preco_unitario: float
    subtotal: float = 0.0

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "ItemVenda":
        return cls(
            joia_id=doc["joia_id"],
            joia=Joia.from_doc(doc.get("joia") or {}),
            quantidade=int(doc.get("quantidade") or 0),
            preco_unitario=float(doc.get("preco_unitario") or 0.0),
            subtotal=float(doc.get("subtotal") or 0.0),
        )

    def to_doc(self) -> Dict[str, Any]:
        return {
            "joia_id": self.joia_id,
            "joia": self.joia.to_doc(),
            "quantidade": self.quantidade,
            "preco_unitario": self.preco_unitario,
            "subtotal": self.subtotal,
        }


@dataclass
class Venda:
    nome_cliente: str
    data_venda: date
    forma_pagamento: str
    itens: List[ItemVenda] = field(default_factory=list)
    valor_total: float = 0.0
    lucro_real: float = 0.0
    id: Optional[str] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "Venda":
        itens = doc.get("itens")
        return cls(
            nome_cliente=doc.get("nome_cliente") or "",
            data_venda=_to_date(doc.get("data_venda")),
            forma_pagamento=doc.get("forma_pagamento") or "dinheiro",
            itens=[ItemVenda.from_doc(i) for i in itens] if isinstance(itens, list) else [],
            valor_total=float(doc.get("valor_total") or 0.0),
            lucro_real=float(doc.get("lucro_real") or 0.0),
            id=doc.get("id"),
            criado_em=_to_datetime(doc.get("criado_em")),
            atualizado_em=_to_datetime(doc.get("atualizado_em")),
        )

    def to_doc(self) -> Dict[str, Any]:
        return {
            "nome_cliente": self.nome_cliente,
            "data_venda": _iso(self.data_venda),
            "forma_pagamento": self.forma_pagamento,
            "itens": [i.to_doc() for i in self.itens],
            "valor_total": self.valor_total,
            "lucro_real": self.lucro_real,
        }

    @property
    def quantidade_pecas(self) -> int:
        return sum(i.quantidade for i in self.itens)


@dataclass
class DivisaoLucro:
    """Percentuais do lucro de um lote (somam 100)."""
    reinvestimento: float = DEFAULTS.reinvestimento
    reserva_emergencia: float = DEFAULTS.reserva_emergencia
    lucro_liquido: float = DEFAULTS.lucro_liquido


@dataclass
class DivisaoCaixa:
    """Percentuais do saldo do caixa (somam 100)."""
    reinvestimento: float = DEFAULTS.caixa_reinvestimento
    caixa_loja: float = DEFAULTS.caixa_loja
    salario: float = DEFAULTS.caixa_salario


@dataclass
class LoteInvestimento:
    """Lote de compra: joias do mesmo fornecedor compradas no mesmo dia."""
    fornecedor: str
    data_lote: str                    # YYYY-MM-DD ou 'sem-data'
    joias: List[Joia] = field(default_factory=list)
    valor_investido: float = 0.0
    valor_vendido: float = 0.0
    lucro_obtido: float = 0.0
    total_pecas: int = 0
    pecas_vendidas: int = 0
    percentual_vendido: float = 0.0
    valor_embalagem_vendida: float = 0.0
    divisao_lucro: DivisaoLucro = field(default_factory=DivisaoLucro)
    config_id: Optional[str] = None

    @property
    def chave(self) -> str:
        return f"{self.fornecedor}__{self.data_lote}"


@dataclass
class Movimento:
    """Saída manual de dinheiro do caixa ou da reserva de embalagem."""
    data: date
    descricao: str
    valor: float
    origem: str = "caixa"
    suborigem: Optional[str] = None
    tipo: str = "saida"
    id: Optional[str] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "Movimento":
        d = _pick(cls, doc)
        d["data"] = _to_date(d.get("data"))
        d["valor"] = float(d.get("valor") or 0.0)
        d["criado_em"] = _to_datetime(d.get("criado_em"))
        d["atualizado_em"] = _to_datetime(d.get("atualizado_em"))
        return cls(**d)

    def to_doc(self) -> Dict[str, Any]:
        return {
            "data": _iso(self.data),
            "descricao": self.descricao,
            "valor": self.valor,
            "origem": self.origem,
            "suborigem": self.suborigem,
            "tipo": self.tipo,
        }


@dataclass
class FiltroEstoque:
    codigo: str = ""
    nome: str = ""
    categoria: str = ""
    status: str = "todos"             # 'disponivel' | 'vendida' | 'todos'
    material: str = ""
    fornecedor: str = ""


@dataclass
class FiltroVendas:
    nome_cliente: str = ""
    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None
    forma_pagamento: str = ""


@dataclass
class FiltroRelatorio:
    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None
    categoria: str = ""
    fornecedor: str = ""
