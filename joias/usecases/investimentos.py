# joias/usecases/investimentos.py
"""
UC: Gestão de investimentos por lote de compra.

Um lote reúne as joias do mesmo fornecedor compradas no mesmo dia
(joias sem data caem no lote 'sem-data' do fornecedor). As vendas são
atribuídas ao lote pela fotografia da joia gravada em cada linha.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from joias.domain.models import DivisaoLucro, Joia, LoteInvestimento, Venda
from joias.domain.policies import ajustar_divisao, chave_data, chave_lote, distribuir, validar_divisao
from joias.infra.logger import log_transaction
from joias.infra.repositories import JoiaRepo, LoteRepo, VendaRepo
from joias.infra.store import DocumentStore


def _divisao_de(doc: Optional[Dict[str, Any]]) -> DivisaoLucro:
    dados = (doc or {}).get("divisao_lucro") or {}
    padrao = DivisaoLucro()
    return DivisaoLucro(
        reinvestimento=float(dados.get("reinvestimento", padrao.reinvestimento)),
        reserva_emergencia=float(dados.get("reserva_emergencia", padrao.reserva_emergencia)),
        lucro_liquido=float(dados.get("lucro_liquido", padrao.lucro_liquido)),
    )


def agrupar_lotes(
    joias: List[Joia],
    vendas: List[Venda],
    configs: Optional[Dict[str, Dict[str, Any]]] = None,
) -> List[LoteInvestimento]:
    """Monta os lotes com as métricas de investimento e venda.

    Args:
        joias: estoque atual (quantidades ao vivo).
        vendas: todas as vendas registradas.
        configs: documentos de divisão salvos, por chave 'fornecedor__data'.
    """
    configs = configs or {}
    lotes: Dict[str, LoteInvestimento] = {}
    for j in joias:
        chave = chave_lote(j.fornecedor, j.data_compra)
        if chave not in lotes:
            lotes[chave] = LoteInvestimento(fornecedor=j.fornecedor, data_lote=chave_data(j.data_compra))
        lote = lotes[chave]
        lote.joias.append(j)
        lote.valor_investido += j.custo_aquisicao * j.quantidade
        lote.total_pecas += j.quantidade

    for v in vendas:
        for item in v.itens:
            lote = lotes.get(chave_lote(item.joia.fornecedor, item.joia.data_compra))
            if lote is None:
                continue
            lote.valor_vendido += item.subtotal
            lote.lucro_obtido += (item.preco_unitario - item.joia.custo_aquisicao) * item.quantidade
            lote.pecas_vendidas += item.quantidade
            lote.valor_embalagem_vendida += item.joia.custo_embalagem * item.quantidade

    for chave, lote in lotes.items():
        lote.percentual_vendido = (
            lote.pecas_vendidas / lote.total_pecas * 100 if lote.total_pecas > 0 else 0.0
        )
        cfg = configs.get(chave)
        lote.divisao_lucro = _divisao_de(cfg)
        lote.config_id = cfg.get("id") if cfg else None

    return list(lotes.values())


def base_distribuicao(lote: LoteInvestimento) -> float:
    """Valor vendido sem a parte de embalagem (nunca negativo)."""
    return max(0.0, lote.valor_vendido - lote.valor_embalagem_vendida)


def distribuicao_lucro(lote: LoteInvestimento) -> Dict[str, float]:
    return distribuir(base_distribuicao(lote), lote.divisao_lucro)


def listar_lotes(store: DocumentStore) -> List[LoteInvestimento]:
    return agrupar_lotes(
        JoiaRepo(store).get_all(),
        VendaRepo(store).get_all(),
        LoteRepo(store).map_by_chave(),
    )


def ajustar_divisao_lote(divisao: DivisaoLucro, campo: str, valor: float) -> DivisaoLucro:
    return ajustar_divisao(divisao, campo, valor)


def salvar_divisao_lote(store: DocumentStore, fornecedor: str, data_lote: str, divisao: DivisaoLucro) -> str:
    """Grava a divisão do lote; a soma precisa ser exatamente 100."""
    validar_divisao(divisao)
    config_id = LoteRepo(store).upsert_divisao(fornecedor, data_lote, divisao)
    log_transaction(
        "salvar_divisao_lote",
        {"fornecedor": fornecedor, "data_lote": data_lote},
        result=config_id,
    )
    return config_id
