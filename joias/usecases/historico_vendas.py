# joias/usecases/historico_vendas.py
"""
UC: Histórico de vendas (editar, excluir, filtrar, estatísticas).

Editar e excluir devolvem o estoque das joias envolvidas. Cada ajuste de
estoque é um passo independente (ver `saga.RelatorioOperacao`); a
gravação da venda é uma escrita única e propaga PersistenceError.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from joias.domain.erros import JoiasError, ValidationError
from joias.domain.formulas import totais_venda
from joias.domain.models import FORMAS_PAGAMENTO, STATUS_DISPONIVEL, FiltroVendas, ItemVenda, Venda
from joias.domain.policies import status_por_quantidade, to_title_case
from joias.infra.logger import log_estoque, log_system_event, log_transaction, log_venda
from joias.infra.repositories import JoiaRepo, VendaRepo
from joias.infra.store import DocumentStore
from joias.usecases.registrar_venda import conferir_estoque
from joias.usecases.saga import PoliticaFalha, RelatorioOperacao


def _quantidades(itens: List[ItemVenda]) -> Counter:
    total: Counter = Counter()
    for item in itens:
        total[item.joia_id] += item.quantidade
    return total


def _venda_ou_erro(repo: VendaRepo, venda_id: str) -> Venda:
    venda = repo.get(venda_id)
    if venda is None:
        raise ValidationError(f"Venda {venda_id} não encontrada")
    return venda


def editar_venda(
    store: DocumentStore,
    venda_id: str,
    novos_itens: List[ItemVenda],
    nome_cliente: Optional[str] = None,
    data_venda: Optional[date] = None,
    forma_pagamento: Optional[str] = None,
) -> Tuple[Venda, RelatorioOperacao]:
    """Substitui as linhas de uma venda e reconcilia o estoque.

    Passos:
        1. quantidades originais por joia;
        2. quantidades novas por joia;
        3. para cada aumento, o estoque atual precisa cobrir a diferença
           (senão InsufficientStockError, sem nenhuma alteração);
        4. reduções primeiro: devolve a diferença e marca 'disponivel';
        5. aumentos depois: baixa a diferença ('vendida' se zerar);
        6. grava a venda com as novas linhas e totais recalculados.
    """
    vendas = VendaRepo(store)
    joias = JoiaRepo(store)
    venda = _venda_ou_erro(vendas, venda_id)

    if not novos_itens:
        raise ValidationError("A venda precisa ter pelo menos uma joia")
    if any(i.quantidade <= 0 for i in novos_itens):
        raise ValidationError("Quantidade deve ser maior que zero", campo="quantidade")
    if forma_pagamento is not None and forma_pagamento not in FORMAS_PAGAMENTO:
        raise ValidationError(f"Forma de pagamento inválida: {forma_pagamento}", campo="forma_pagamento")
    if nome_cliente is not None and not nome_cliente.strip():
        raise ValidationError("Nome do cliente é obrigatório", campo="nome_cliente")

    original = _quantidades(venda.itens)
    atual = _quantidades(novos_itens)
    descricoes = {i.joia_id: i.joia.descricao for i in venda.itens + novos_itens}

    aumentos = {j: atual[j] - original[j] for j in atual if atual[j] > original[j]}
    reducoes = {j: original[j] - atual[j] for j in original if original[j] > atual[j]}

    log_system_event("editar_venda_start", {"venda_id": venda_id, "aumentos": aumentos, "reducoes": reducoes})
    try:
        ao_vivo = conferir_estoque(joias, {j: (q, descricoes[j]) for j, q in aumentos.items()})
    except JoiasError as e:
        log_transaction("editar_venda", {"venda_id": venda_id}, error=str(e))
        raise

    relatorio = RelatorioOperacao("editar_venda", PoliticaFalha.CONTINUE_ON_FAILURE)

    for joia_id, diff in reducoes.items():
        joia = joias.get(joia_id)
        if joia is None:
            relatorio.ignorar(f"devolução {descricoes[joia_id]}", joia_id, "joia não existe mais")
            continue
        novo = joia.quantidade + diff

        def devolver(joia_id=joia_id, novo=novo):
            joias.set_estoque(joia_id, novo, STATUS_DISPONIVEL)

        if relatorio.executar(f"devolução {descricoes[joia_id]}", devolver, joia_id):
            log_estoque("devolucao", joia_id, novo, venda_id=venda_id)

    for joia_id, diff in aumentos.items():
        novo = ao_vivo[joia_id].quantidade - diff

        def baixar(joia_id=joia_id, novo=novo):
            joias.set_estoque(joia_id, novo, status_por_quantidade(novo))

        if relatorio.executar(f"baixa {descricoes[joia_id]}", baixar, joia_id):
            log_estoque("baixa", joia_id, novo, venda_id=venda_id)

    valor_total, lucro_real = totais_venda(novos_itens)
    venda.itens = list(novos_itens)
    venda.valor_total = valor_total
    venda.lucro_real = lucro_real
    if nome_cliente is not None:
        venda.nome_cliente = to_title_case(nome_cliente.strip())
    if data_venda is not None:
        venda.data_venda = data_venda
    if forma_pagamento is not None:
        venda.forma_pagamento = forma_pagamento
    vendas.update(venda_id, venda.to_doc())

    log_venda("editar", venda_id, valor_total, lucro=lucro_real, falhas=len(relatorio.falhas))
    log_transaction("editar_venda", {"venda_id": venda_id}, result={"valor_total": valor_total})
    return vendas.get(venda_id) or venda, relatorio


def excluir_venda(
    store: DocumentStore,
    venda_id: str,
    politica: PoliticaFalha = PoliticaFalha.CONTINUE_ON_FAILURE,
) -> RelatorioOperacao:
    """Devolve ao estoque tudo o que a venda baixou e remove a venda."""
    vendas = VendaRepo(store)
    joias = JoiaRepo(store)
    venda = _venda_ou_erro(vendas, venda_id)

    relatorio = RelatorioOperacao("excluir_venda", politica)
    for item in venda.itens:
        descricao = f"devolução {item.joia.descricao}"
        joia = joias.get(item.joia_id)
        if joia is None:
            relatorio.ignorar(descricao, item.joia_id, "joia não existe mais")
            continue
        novo = joia.quantidade + item.quantidade

        def devolver(joia_id=item.joia_id, novo=novo):
            joias.set_estoque(joia_id, novo, STATUS_DISPONIVEL)

        if relatorio.executar(descricao, devolver, item.joia_id):
            log_estoque("devolucao", item.joia_id, novo, venda_id=venda_id)

    vendas.delete(venda_id)
    log_venda("excluir", venda_id, venda.valor_total, falhas=len(relatorio.falhas))
    log_system_event("venda_excluida", {"venda_id": venda_id}, level="warning")
    return relatorio


def filtrar_vendas(vendas: List[Venda], filtro: Optional[FiltroVendas] = None) -> List[Venda]:
    f = filtro or FiltroVendas()
    termo = f.nome_cliente.strip().lower()
    out = []
    for v in vendas:
        if termo and termo not in v.nome_cliente.lower():
            continue
        if f.forma_pagamento and v.forma_pagamento != f.forma_pagamento:
            continue
        if f.data_inicio and (v.data_venda is None or v.data_venda < f.data_inicio):
            continue
        if f.data_fim and (v.data_venda is None or v.data_venda > f.data_fim):
            continue
        out.append(v)
    return out


def estatisticas_vendas(vendas: List[Venda]) -> Dict[str, Any]:
    """Totais do histórico: valor, lucro, quantidade, ticket médio e por pagamento."""
    total = sum(v.valor_total for v in vendas)
    lucro = sum(v.lucro_real for v in vendas)
    por_pagamento: Dict[str, Dict[str, float]] = {}
    for v in vendas:
        agg = por_pagamento.setdefault(v.forma_pagamento, {"quantidade": 0, "valor": 0.0})
        agg["quantidade"] += 1
        agg["valor"] += v.valor_total
    return {
        "total_vendas": total,
        "lucro_total": lucro,
        "quantidade_vendas": len(vendas),
        "ticket_medio": total / len(vendas) if vendas else 0.0,
        "por_pagamento": por_pagamento,
    }
