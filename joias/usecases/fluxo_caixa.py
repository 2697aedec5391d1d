# joias/usecases/fluxo_caixa.py
"""
UC: Fluxo de caixa.

Dois saldos, nunca negativos:
- caixa: total das vendas menos as saídas com origem 'caixa';
- embalagem: embalagem das peças vendidas menos as saídas com origem
  'embalagem'.

A divisão do saldo do caixa (reinvestimento / caixa da loja / salário)
é só para exibição; não limita o registro de saídas.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from joias.adapters.parsers import parse_valor
from joias.domain.erros import ValidationError
from joias.domain.models import ORIGENS_MOVIMENTO, SUBORIGENS_CAIXA, DivisaoCaixa, Movimento, Venda
from joias.domain.policies import ajustar_divisao, distribuir, to_title_case, validar_divisao
from joias.infra.logger import log_system_event, log_transaction
from joias.infra.repositories import ConfigRepo, MovimentoRepo, VendaRepo
from joias.infra.store import DocumentStore


def resumo_caixa(vendas: List[Venda], saidas: List[Movimento]) -> Dict[str, float]:
    total_vendas = sum(v.valor_total for v in vendas)
    lucro_total = sum(v.lucro_real for v in vendas)
    valor_embalagem = sum(
        i.joia.custo_embalagem * i.quantidade for v in vendas for i in v.itens
    )
    saidas_caixa = sum(m.valor for m in saidas if m.origem == "caixa")
    saidas_embalagem = sum(m.valor for m in saidas if m.origem == "embalagem")
    return {
        "total_vendas": total_vendas,
        "lucro_total": lucro_total,
        "valor_embalagem": valor_embalagem,
        "saidas_caixa": saidas_caixa,
        "saidas_embalagem": saidas_embalagem,
        "saldo_caixa": max(0.0, total_vendas - saidas_caixa),
        "saldo_embalagem": max(0.0, valor_embalagem - saidas_embalagem),
    }


def carregar_resumo(store: DocumentStore) -> Dict[str, float]:
    return resumo_caixa(VendaRepo(store).get_all(), MovimentoRepo(store).get_all())


def _validar_movimento(dados: Dict[str, Any]) -> Movimento:
    descricao = (dados.get("descricao") or "").strip()
    if not descricao:
        raise ValidationError("Descrição é obrigatória", campo="descricao")
    valor = dados.get("valor")
    if not isinstance(valor, (int, float)):
        valor = parse_valor(valor)
    if valor is None or valor <= 0:
        raise ValidationError("Valor deve ser maior que zero", campo="valor")
    origem = dados.get("origem") or "caixa"
    if origem not in ORIGENS_MOVIMENTO:
        raise ValidationError(f"Origem inválida: {origem}", campo="origem")
    suborigem = None
    if origem == "caixa":
        suborigem = dados.get("suborigem") or "reinvestimento"
        if suborigem not in SUBORIGENS_CAIXA:
            raise ValidationError(f"Suborigem inválida: {suborigem}", campo="suborigem")
    return Movimento(
        data=dados.get("data") or date.today(),
        descricao=to_title_case(descricao),
        valor=float(valor),
        origem=origem,
        suborigem=suborigem,
    )


def registrar_saida(store: DocumentStore, dados: Dict[str, Any]) -> Movimento:
    """Registra uma saída manual de dinheiro."""
    mov = _validar_movimento(dados)
    repo = MovimentoRepo(store)
    mov.id = repo.insert(mov)
    log_transaction(
        "registrar_saida",
        {"descricao": mov.descricao, "origem": mov.origem, "suborigem": mov.suborigem},
        result={"id": mov.id, "valor": mov.valor},
    )
    return repo.get(mov.id) or mov


def editar_saida(store: DocumentStore, mov_id: str, dados: Dict[str, Any]) -> Movimento:
    repo = MovimentoRepo(store)
    atual = repo.get(mov_id)
    if atual is None:
        raise ValidationError(f"Saída {mov_id} não encontrada")
    base = atual.to_doc()
    base["data"] = atual.data
    base.update({k: v for k, v in dados.items() if v is not None})
    mov = _validar_movimento(base)
    repo.update(mov_id, mov.to_doc())
    log_transaction("editar_saida", {"id": mov_id}, result={"valor": mov.valor})
    return repo.get(mov_id)


def excluir_saida(store: DocumentStore, mov_id: str) -> None:
    repo = MovimentoRepo(store)
    if repo.get(mov_id) is None:
        raise ValidationError(f"Saída {mov_id} não encontrada")
    repo.delete(mov_id)
    log_system_event("saida_excluida", {"id": mov_id}, level="warning")


def listar_saidas(store: DocumentStore, origem: Optional[str] = None) -> List[Movimento]:
    saidas = MovimentoRepo(store).get_all()
    if origem:
        saidas = [m for m in saidas if m.origem == origem]
    return saidas


def ajustar_divisao_caixa(divisao: DivisaoCaixa, campo: str, valor: float) -> DivisaoCaixa:
    return ajustar_divisao(divisao, campo, valor, limitar=True)


def salvar_divisao_caixa(store: DocumentStore, divisao: DivisaoCaixa) -> None:
    validar_divisao(divisao)
    ConfigRepo(store).set_divisao_caixa(divisao)
    log_transaction("salvar_divisao_caixa", {"divisao": vars(divisao)})


def dividir_saldo(saldo_caixa: float, divisao: DivisaoCaixa) -> Dict[str, float]:
    return distribuir(saldo_caixa, divisao)
