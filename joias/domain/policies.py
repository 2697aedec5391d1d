"""
Políticas e utilidades de regra de negócio para o sistema de joias.

Este módulo contém funções que encapsulam a regra de status de uma
joia, as divisões percentuais (lucro do lote e saldo do caixa) e
pequenas normalizações de texto. São usadas pela camada de aplicação
ao registrar vendas, montar lotes e exibir o fluxo de caixa.
"""

from __future__ import annotations

import re
from dataclasses import asdict, fields, replace
from datetime import date, datetime
from typing import Any, Dict, Optional, TypeVar

from joias.domain.erros import ValidationError
from joias.domain.models import SEM_DATA, STATUS_DISPONIVEL, STATUS_VENDIDA

D = TypeVar("D")

_PALAVRA_RE = re.compile(r"\S+")


def status_por_quantidade(quantidade: int) -> str:
    """Classifica a joia pelo estoque.

    Regras:
        - ``quantidade == 0`` → ``'vendida'``
        - qualquer outro valor → ``'disponivel'``
    """
    return STATUS_VENDIDA if quantidade == 0 else STATUS_DISPONIVEL


def to_title_case(s: Optional[str]) -> str:
    """Primeira letra de cada palavra maiúscula, resto minúsculo."""
    if not s:
        return ""
    return _PALAVRA_RE.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), s)


def chave_data(d: Any) -> str:
    """Data truncada no dia (YYYY-MM-DD) ou ``'sem-data'``."""
    if d is None or d == "":
        return SEM_DATA
    if isinstance(d, datetime):
        return d.date().isoformat()
    if isinstance(d, date):
        return d.isoformat()
    return str(d)[:10]


def chave_lote(fornecedor: Optional[str], data_compra: Any) -> str:
    return f"{fornecedor or ''}__{chave_data(data_compra)}"


def ajustar_divisao(divisao: D, campo: str, valor: float, limitar: bool = False) -> D:
    """Altera um percentual e redistribui o excesso entre os demais.

    Quando a soma passa de 100, o excesso é retirado dos outros dois
    campos proporcionalmente ao valor atual de cada um (nunca abaixo
    de zero). Se os outros somam zero, nada é redistribuído.

    Args:
        divisao: dataclass com três percentuais.
        campo: nome do campo alterado.
        valor: novo valor do campo.
        limitar: se True, o valor informado é limitado a [0, 100] antes.

    Returns:
        Nova instância da divisão (a original não é modificada).
    """
    nomes = [f.name for f in fields(divisao)]
    if campo not in nomes:
        raise ValidationError(f"Campo de divisão desconhecido: {campo}", campo=campo)
    if limitar:
        valor = max(0.0, min(100.0, float(valor)))
    novo = asdict(divisao)
    novo[campo] = float(valor)
    total = sum(novo.values())
    if total > 100:
        outros = [k for k in nomes if k != campo]
        excesso = total - 100
        valor_outros = sum(novo[k] for k in outros)
        if valor_outros > 0:
            for k in outros:
                proporcao = novo[k] / valor_outros
                novo[k] = max(0.0, novo[k] - excesso * proporcao)
    return replace(divisao, **novo)


def validar_divisao(divisao: Any) -> None:
    """Levanta ValidationError se os percentuais não somam exatamente 100."""
    valores = asdict(divisao)
    for k, v in valores.items():
        if v is None or float(v) < 0 or float(v) > 100:
            raise ValidationError(f"Percentual inválido em {k}: {v}", campo=k)
    total = sum(float(v) for v in valores.values())
    if abs(total - 100.0) > 1e-9:
        raise ValidationError("A soma das porcentagens deve ser igual a 100%")


def distribuir(valor: float, divisao: Any) -> Dict[str, float]:
    """Aplica os percentuais da divisão sobre um valor."""
    return {k: (float(valor) * float(p)) / 100 for k, p in asdict(divisao).items()}
