"""
Pricing formulas for jewelry items.

These functions implement the cost roll-up and sale-price rules used
when a purchase is registered: freight allocation per piece, the
acquisition cost, the final sale price (margin over the acquisition-side
costs, packaging added after the margin, then a gross-up so the seller
still nets the pre-fee amount after the card processor's cut) and the
expected profit.

All functions are pure: they depend solely on their inputs and do
not modify any external state. Negative inputs are not rejected here;
validation belongs to the caller.
"""

from typing import Any, Dict, Iterable, Tuple, Union

Number = Union[int, float]


def _clamp_taxa(taxa: Number) -> float:
    return max(0.0, min(100.0, float(taxa)))


def frete_por_peca(frete_total: Number, total_pecas: Number) -> float:
    """Split the batch freight evenly among the pieces bought together.

    Returns 0 when ``total_pecas`` is 0 instead of dividing by zero.
    """
    if total_pecas == 0:
        return 0.0
    return float(frete_total) / float(total_pecas)


def custo_aquisicao(
    preco_por_peca: Number,
    frete_peca: Number,
    custo_embalagem: Number,
    outros_custos: Number,
) -> float:
    """Per-unit acquisition cost.

    Packaging is counted once per unit, it is not amortized over the batch.
    """
    return float(preco_por_peca) + float(frete_peca) + float(custo_embalagem) + float(outros_custos)


def preco_venda_final(
    preco_por_peca: Number,
    frete_peca: Number,
    outros_custos: Number,
    margem: Number,
    custo_embalagem: Number,
    taxa: Number,
) -> float:
    """Compute the final sale price with the payment-fee gross-up.

    Steps
    -----
    1. ``base = preco_por_peca + frete_peca + outros_custos``
    2. ``com_margem = base * (1 + margem/100)``
    3. ``antes_taxa = com_margem + custo_embalagem``
    4. ``taxa`` is clamped to [0, 100]
    5. ``divisor = 1 - taxa/100``
    6. ``antes_taxa / divisor`` when the divisor is positive, otherwise
       ``antes_taxa`` unchanged (a fee of 100% cannot be grossed up).

    The margin applies only to the acquisition-side costs; packaging is
    added after it.
    """
    base = float(preco_por_peca) + float(frete_peca) + float(outros_custos)
    com_margem = base * (1 + float(margem) / 100)
    antes_taxa = com_margem + float(custo_embalagem)
    divisor = 1 - (_clamp_taxa(taxa) / 100)
    return antes_taxa / divisor if divisor > 0 else antes_taxa


def lucro_esperado(preco_final: Number, custo_aq: Number) -> float:
    """Expected profit per unit: final price minus the acquisition cost."""
    return float(preco_final) - float(custo_aq)


def preco_com_desconto_taxa(preco_final: Number, taxa: Number) -> float:
    """Cash price with the estimated card fee taken off the final price."""
    return float(preco_final) * (1 - (_clamp_taxa(taxa) / 100))


def calcular_precificacao(
    preco_por_peca: Number = 0,
    frete_total: Number = 0,
    total_pecas_compra: Number = 1,
    custo_embalagem: Number = 0,
    outros_custos: Number = 0,
    margem_lucro: Number = 0,
    taxa_credito: Number = 0,
) -> Dict[str, float]:
    """Derive every computed pricing field of an item from its raw inputs."""
    frete = frete_por_peca(frete_total, total_pecas_compra)
    custo = custo_aquisicao(preco_por_peca, frete, custo_embalagem, outros_custos)
    final = preco_venda_final(
        preco_por_peca, frete, outros_custos, margem_lucro, custo_embalagem, taxa_credito
    )
    return {
        "frete_por_peca": frete,
        "custo_aquisicao": custo,
        "preco_venda_final": final,
        "lucro_esperado": lucro_esperado(final, custo),
    }


def totais_venda(itens: Iterable[Any]) -> Tuple[float, float]:
    """Return ``(valor_total, lucro_real)`` for a list of sale line items.

    The realized profit uses the acquisition cost snapshotted on each line.
    """
    valor_total = 0.0
    lucro_real = 0.0
    for item in itens:
        valor_total += float(item.subtotal)
        lucro_real += (float(item.preco_unitario) - float(item.joia.custo_aquisicao)) * item.quantidade
    return valor_total, lucro_real
