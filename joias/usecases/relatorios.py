# joias/usecases/relatorios.py
"""
Relatórios:
- estatísticas do estoque (investido, valor em estoque, lucro potencial)
- relatório mensal de vendas (mais recente primeiro)
- relatório geral com filtros de período, categoria e fornecedor
- exportação para XLSX (duas abas) ou CSV
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from joias.domain.models import STATUS_DISPONIVEL, STATUS_VENDIDA, FiltroRelatorio, Joia, Venda
from joias.infra.logger import log_file_operation, log_system_event
from joias.infra.repositories import JoiaRepo, VendaRepo
from joias.infra.store import DocumentStore


MESES = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)


# ----------------------
# util
# ----------------------

def _rotulo_mes(ano: int, mes: int) -> str:
    # "2024-03" -> "março de 2024"
    return f"{MESES[mes - 1]} de {ano}"


def _no_periodo(d, inicio, fim) -> bool:
    if inicio is None and fim is None:
        return True
    if d is None:
        return False
    return (inicio is None or d >= inicio) and (fim is None or d <= fim)


# ----------------------
# 1) Estoque
# ----------------------

def estatisticas_estoque(joias: List[Joia]) -> Dict[str, Any]:
    disponiveis = [j for j in joias if j.status == STATUS_DISPONIVEL]
    valor_investido = sum(j.custo_aquisicao * j.quantidade for j in joias)
    valor_estoque = sum(j.preco_venda_final * j.quantidade for j in disponiveis)
    return {
        "total_joias": len(joias),
        "joias_disponiveis": len(disponiveis),
        "joias_vendidas": sum(1 for j in joias if j.status == STATUS_VENDIDA),
        "valor_investido": valor_investido,
        "valor_estoque": valor_estoque,
        "lucro_total": valor_estoque - valor_investido,
    }


# ----------------------
# 2) Mensal
# ----------------------

def relatorio_mensal(vendas: List[Venda]) -> List[Dict[str, Any]]:
    """Agrupa as vendas por mês (YYYY-MM), do mais recente ao mais antigo."""
    por_mes: Dict[str, Dict[str, Any]] = {}
    for v in vendas:
        if v.data_venda is None:
            continue
        chave = f"{v.data_venda.year}-{v.data_venda.month:02d}"
        rel = por_mes.setdefault(chave, {
            "chave": chave,
            "mes": _rotulo_mes(v.data_venda.year, v.data_venda.month),
            "ano": v.data_venda.year,
            "joias_vendidas": 0,
            "total_vendas": 0.0,
            "lucro_total": 0.0,
        })
        rel["joias_vendidas"] += v.quantidade_pecas
        rel["total_vendas"] += v.valor_total
        rel["lucro_total"] += v.lucro_real
    return [por_mes[k] for k in sorted(por_mes, reverse=True)]


# ----------------------
# 3) Geral
# ----------------------

def filtrar_dados(
    joias: List[Joia], vendas: List[Venda], filtro: Optional[FiltroRelatorio] = None
) -> Tuple[List[Joia], List[Venda]]:
    f = filtro or FiltroRelatorio()
    joias_f = [
        j for j in joias
        if (f.categoria == "" or j.categoria == f.categoria)
        and (f.fornecedor == "" or j.fornecedor == f.fornecedor)
        and _no_periodo(j.data_compra, f.data_inicio, f.data_fim)
    ]
    vendas_f = [v for v in vendas if _no_periodo(v.data_venda, f.data_inicio, f.data_fim)]
    return joias_f, vendas_f


def relatorio_geral(
    joias: List[Joia], vendas: List[Venda], filtro: Optional[FiltroRelatorio] = None
) -> Dict[str, Any]:
    joias_f, vendas_f = filtrar_dados(joias, vendas, filtro)
    geral = estatisticas_estoque(joias_f)
    geral.update({
        "total_vendas_periodo": sum(v.valor_total for v in vendas_f),
        "lucro_real_periodo": sum(v.lucro_real for v in vendas_f),
        "quantidade_vendas_periodo": len(vendas_f),
    })
    geral["mensal"] = relatorio_mensal(vendas_f)
    return geral


def carregar_relatorio(store: DocumentStore, filtro: Optional[FiltroRelatorio] = None) -> Dict[str, Any]:
    return relatorio_geral(JoiaRepo(store).get_all(), VendaRepo(store).get_all(), filtro)


# ----------------------
# 4) Exportação
# ----------------------

def exportar_relatorio(relatorio: Dict[str, Any], path: str) -> str:
    """Grava o relatório geral e o mensal.

    XLSX: abas 'Geral' e 'Mensal'. CSV: uma tabela com a coluna 'secao'.
    """
    geral = {k: v for k, v in relatorio.items() if k != "mensal"}
    df_geral = pd.DataFrame(list(geral.items()), columns=["indicador", "valor"])
    df_mensal = pd.DataFrame(
        relatorio.get("mensal") or [],
        columns=["chave", "mes", "ano", "joias_vendidas", "total_vendas", "lucro_total"],
    )

    destino = Path(path)
    destino.parent.mkdir(parents=True, exist_ok=True)
    if destino.suffix.lower() == ".csv":
        df = pd.concat(
            [df_geral.assign(secao="geral"), df_mensal.assign(secao="mensal")],
            ignore_index=True,
        )
        df.to_csv(destino, index=False)
    else:
        with pd.ExcelWriter(destino, engine="openpyxl") as writer:
            df_geral.to_excel(writer, sheet_name="Geral", index=False)
            df_mensal.to_excel(writer, sheet_name="Mensal", index=False)

    log_file_operation("export", str(destino), rows_processed=len(df_geral) + len(df_mensal))
    log_system_event("relatorio_exportado", {"arquivo": str(destino)})
    return str(destino)
