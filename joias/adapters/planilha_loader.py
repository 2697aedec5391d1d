# joias/adapters/planilha_loader.py
"""
Loader para planilhas (XLSX ou CSV) de compras de joias.

Esta função:
- lê a planilha usando pandas;
- normaliza cabeçalhos (acentos, variações, sinônimos);
- retorna uma lista de dicionários com as chaves esperadas por
  `cadastrar_joia`.

Observações:
- Valores numéricos são mantidos como texto; a conversão acontece no
  caso de uso (aceita vírgula decimal).
- Datas são normalizadas para ISO (YYYY-MM-DD) quando possível.
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd


# ---------------------------
# utilitários de normalização
# ---------------------------

def _slug(s: str) -> str:
    """Normaliza cabeçalhos: minúsculas, sem acentos, sem não-alfanumérico."""
    if s is None:
        return ""
    s = str(s).strip().lower()
    acentos = dict(zip("áàâãäéèêëíìîïóòôõöúùûüç", "aaaaaeeeeiiiiooooouuuuc"))
    s = "".join(acentos.get(ch, ch) for ch in s)
    s = re.sub(r"[^a-z0-9]+", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


def _safe_get(row, key):
    """Lê um valor da linha tratando NA do pandas."""
    val = row.get(key)
    if val is None or pd.isna(val):
        return None
    s = str(val).strip()
    return s or None


def _to_date_iso(val: Any) -> Optional[str]:
    """Converte valor para data ISO (YYYY-MM-DD) se possível."""
    if val is None:
        return None
    if isinstance(val, pd.Timestamp):
        return val.date().isoformat()
    s = str(val).strip()
    if not s:
        return None
    for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%d/%m/%y"):
        try:
            return datetime.strptime(s[:10] if fmt == "%Y-%m-%d" else s, fmt).date().isoformat()
        except ValueError:
            continue
    d = pd.to_datetime(s, dayfirst=True, errors="coerce")
    if pd.isna(d):
        return None
    return d.date().isoformat()


_ALIASES = {
    "codigo": "codigo",
    "cod": "codigo",
    "sku": "codigo",

    "nome": "nome",
    "joia": "nome",
    "produto": "nome",
    "descricao": "nome",

    "categoria": "categoria",
    "tipo": "categoria",

    "quantidade": "quantidade",
    "qtde": "quantidade",
    "qtd": "quantidade",

    "material": "material",

    "fornecedor": "fornecedor",
    "loja": "fornecedor",

    "data": "data_compra",
    "data compra": "data_compra",
    "data da compra": "data_compra",
    "data de compra": "data_compra",

    "preco": "preco_por_peca",
    "preco por peca": "preco_por_peca",
    "preco peca": "preco_por_peca",
    "valor unitario": "preco_por_peca",

    "frete": "frete_total",
    "frete total": "frete_total",

    "total pecas": "total_pecas_compra",
    "total de pecas": "total_pecas_compra",
    "total pecas compra": "total_pecas_compra",
    "pecas na compra": "total_pecas_compra",

    "embalagem": "custo_embalagem",
    "custo embalagem": "custo_embalagem",

    "outros": "outros_custos",
    "outros custos": "outros_custos",

    "margem": "margem_lucro",
    "margem lucro": "margem_lucro",
    "margem de lucro": "margem_lucro",

    "taxa": "taxa_credito",
    "taxa credito": "taxa_credito",
    "taxa cartao": "taxa_credito",
}

CAMPOS = [
    "codigo", "nome", "categoria", "quantidade", "material", "fornecedor",
    "data_compra", "preco_por_peca", "frete_total", "total_pecas_compra",
    "custo_embalagem", "outros_custos", "margem_lucro", "taxa_credito",
]


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Renomeia colunas com base em sinônimos/variações."""
    new_cols = {}
    for col in df.columns:
        key = _slug(col)
        new_cols[col] = _ALIASES.get(key, key)
    return df.rename(columns=new_cols)


def _read(path: str) -> pd.DataFrame:
    if Path(path).suffix.lower() == ".csv":
        return pd.read_csv(path, dtype=str, sep=None, engine="python")
    return pd.read_excel(path, dtype=str)


def load_joias_from_planilha(path: str) -> List[Dict[str, Any]]:
    """Lê a planilha de compras e retorna um dict por linha.

    Linhas totalmente vazias são descartadas. Colunas ausentes viram None
    (o caso de uso aplica os valores padrão).
    """
    df = _normalize_columns(_read(path))
    df = df.dropna(how="all")

    out: List[Dict[str, Any]] = []
    for _, row in df.iterrows():
        rec = {c: _safe_get(row, c) for c in CAMPOS}
        rec["data_compra"] = _to_date_iso(rec["data_compra"])
        out.append(rec)
    return out
