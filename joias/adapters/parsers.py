"""
Utilidades de parsing para valores digitados ou vindos de planilha.

Este módulo interpreta datas (ISO ou no formato brasileiro), valores
monetários com vírgula ou ponto decimal e a notação usada na CLI para
itens de venda (por exemplo, "AN001:2@149,90").
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Tuple

_VALOR_RE = re.compile(r"[-+]?[\d.,]+")
_ITEM_RE = re.compile(r"^\s*([^:@\s]+)\s*(?::\s*(\d+))?\s*(?:@\s*(\S+))?\s*$")


def parse_data(txt) -> Optional[date]:
    """Interpreta uma data.

    Aceita ``YYYY-MM-DD`` (com ou sem horário), ``DD/MM/AAAA``,
    ``DD-MM-AAAA`` e ``DD/MM/AA``. Retorna None para texto vazio.

    Raises:
        ValueError: se o texto não estiver em nenhum formato conhecido.
    """
    if txt is None:
        return None
    if isinstance(txt, datetime):
        return txt.date()
    if isinstance(txt, date):
        return txt
    s = str(txt).strip()
    if not s:
        return None
    for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%d/%m/%y"):
        try:
            return datetime.strptime(s[:10] if fmt == "%Y-%m-%d" else s, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Data inválida: {txt}")


def parse_valor(txt) -> Optional[float]:
    """Interpreta um valor numérico/monetário.

    Exemplos:
        "149,90"      → 149.9
        "R$ 1.234,56" → 1234.56
        "12.5"        → 12.5
        "1,234.56"    → 1234.56

    Returns:
        O número, ou None se não houver número no texto.
    """
    if txt is None:
        return None
    if isinstance(txt, (int, float)):
        return float(txt)
    m = _VALOR_RE.search(str(txt))
    if not m:
        return None
    s = m.group(0)
    if "," in s and "." in s:
        # o separador que aparece por último é o decimal
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif "," in s:
        s = s.replace(",", ".")
    try:
        return float(s)
    except ValueError:
        return None


def parse_item_venda(txt: str) -> Tuple[str, int, Optional[float]]:
    """Interpreta ``CODIGO[:QTD][@PRECO]``.

    A quantidade padrão é 1; o preço é opcional (None = preço da joia).

    Raises:
        ValueError: se o texto não seguir o formato.
    """
    m = _ITEM_RE.match(txt or "")
    if not m:
        raise ValueError(f"Item inválido: {txt!r} (use CODIGO[:QTD][@PRECO])")
    codigo, qtd, preco = m.groups()
    preco_num = None
    if preco is not None:
        preco_num = parse_valor(preco)
        if preco_num is None:
            raise ValueError(f"Preço inválido em {txt!r}")
    return codigo.upper(), int(qtd) if qtd else 1, preco_num
