# joias/usecases/registrar_venda.py
"""
UC: Registrar VENDA.

- Carrinho: rascunho em memória (nada é gravado até finalizar).
- finalizar_venda(): confere o estoque atual, grava a venda e baixa o
  estoque item a item, devolvendo um relatório dos passos.

Obs.:
- O preço unitário de cada linha é o preço final da joia, ou o preço
  sem a taxa do cartão quando o pagamento é em dinheiro com desconto.
- A venda guarda uma fotografia da joia em cada linha.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional, Tuple

from joias.domain.erros import InsufficientStockError, JoiasError, ValidationError
from joias.domain.formulas import preco_com_desconto_taxa, totais_venda
from joias.domain.models import FORMAS_PAGAMENTO, STATUS_DISPONIVEL, ItemVenda, Joia, Venda
from joias.domain.policies import status_por_quantidade, to_title_case
from joias.infra.logger import log_estoque, log_system_event, log_transaction, log_venda
from joias.infra.repositories import JoiaRepo, VendaRepo
from joias.infra.store import DocumentStore
from joias.usecases.saga import PoliticaFalha, RelatorioOperacao


def preco_efetivo(joia: Joia, forma_pagamento: str = "dinheiro", descontar_taxa: bool = False) -> float:
    if forma_pagamento == "dinheiro" and descontar_taxa:
        return preco_com_desconto_taxa(joia.preco_venda_final, joia.taxa_credito)
    return joia.preco_venda_final


def montar_item_venda(joia: Joia, quantidade: int, preco_unitario: Optional[float] = None) -> ItemVenda:
    """Cria uma linha de venda com a fotografia da joia."""
    if quantidade <= 0:
        raise ValidationError("Quantidade deve ser maior que zero", campo="quantidade")
    preco = joia.preco_venda_final if preco_unitario is None else float(preco_unitario)
    if preco < 0:
        raise ValidationError("Preço unitário não pode ser negativo", campo="preco_unitario")
    return ItemVenda(
        joia_id=joia.id,
        joia=joia,
        quantidade=int(quantidade),
        preco_unitario=preco,
        subtotal=preco * int(quantidade),
    )


class Carrinho:
    """Rascunho de uma venda."""

    def __init__(self, forma_pagamento: str = "dinheiro", descontar_taxa: bool = False):
        self._linhas: Dict[str, ItemVenda] = {}
        self.forma_pagamento = forma_pagamento
        self.descontar_taxa = descontar_taxa

    def __len__(self) -> int:
        return len(self._linhas)

    @property
    def itens(self) -> List[ItemVenda]:
        return list(self._linhas.values())

    def preco_efetivo(self, joia: Joia) -> float:
        return preco_efetivo(joia, self.forma_pagamento, self.descontar_taxa)

    def adicionar(self, joia: Joia, quantidade: int = 1) -> ItemVenda:
        """Adiciona a joia ou incrementa a linha existente.

        O incremento é limitado ao estoque da joia, sem erro.
        """
        if joia.status != STATUS_DISPONIVEL or joia.quantidade <= 0:
            raise ValidationError(f"{joia.descricao} não está disponível")
        if quantidade <= 0:
            raise ValidationError("Quantidade deve ser maior que zero", campo="quantidade")

        linha = self._linhas.get(joia.id)
        if linha is not None:
            linha.quantidade = min(linha.quantidade + quantidade, joia.quantidade)
            linha.subtotal = linha.preco_unitario * linha.quantidade
            return linha

        linha = montar_item_venda(joia, min(quantidade, joia.quantidade), self.preco_efetivo(joia))
        self._linhas[joia.id] = linha
        return linha

    def remover(self, joia_id: str) -> None:
        self._linhas.pop(joia_id, None)

    def alterar_quantidade(self, joia_id: str, quantidade: int) -> None:
        linha = self._linhas.get(joia_id)
        if linha is None:
            return
        if quantidade <= 0:
            self.remover(joia_id)
            return
        linha.quantidade = min(quantidade, linha.joia.quantidade)
        linha.subtotal = linha.preco_unitario * linha.quantidade

    def alterar_preco(self, joia_id: str, preco: float) -> None:
        if preco < 0:
            raise ValidationError("Preço unitário não pode ser negativo", campo="preco_unitario")
        linha = self._linhas.get(joia_id)
        if linha is None:
            return
        linha.preco_unitario = float(preco)
        linha.subtotal = linha.preco_unitario * linha.quantidade

    def definir_pagamento(self, forma_pagamento: str, descontar_taxa: bool = False) -> None:
        """Troca a forma de pagamento e recalcula o preço de todas as linhas."""
        if forma_pagamento not in FORMAS_PAGAMENTO:
            raise ValidationError(f"Forma de pagamento inválida: {forma_pagamento}", campo="forma_pagamento")
        self.forma_pagamento = forma_pagamento
        self.descontar_taxa = descontar_taxa
        for linha in self._linhas.values():
            linha.preco_unitario = self.preco_efetivo(linha.joia)
            linha.subtotal = linha.preco_unitario * linha.quantidade

    def totais(self) -> Tuple[float, float]:
        return totais_venda(self._linhas.values())

    def limpar(self) -> None:
        self._linhas.clear()


def conferir_estoque(repo: JoiaRepo, necessidade: Dict[str, Tuple[int, str]]) -> Dict[str, Optional[Joia]]:
    """Confere o estoque atual; levanta InsufficientStockError no primeiro falta.

    `necessidade` mapeia joia_id -> (quantidade pedida, descrição).
    """
    atuais: Dict[str, Optional[Joia]] = {}
    for joia_id, (pedido, descricao) in necessidade.items():
        joia = repo.get(joia_id)
        disponivel = joia.quantidade if joia else 0
        if pedido > disponivel:
            raise InsufficientStockError(joia_id, descricao, disponivel, pedido)
        atuais[joia_id] = joia
    return atuais


def finalizar_venda(
    store: DocumentStore,
    carrinho: Carrinho,
    nome_cliente: str,
    data_venda: Optional[date] = None,
    politica: PoliticaFalha = PoliticaFalha.CONTINUE_ON_FAILURE,
) -> Tuple[Venda, RelatorioOperacao]:
    """Grava a venda e baixa o estoque de cada linha."""
    nome = (nome_cliente or "").strip()
    if not nome:
        raise ValidationError("Nome do cliente é obrigatório", campo="nome_cliente")
    if len(carrinho) == 0:
        raise ValidationError("Adicione pelo menos uma joia à venda")
    if carrinho.forma_pagamento not in FORMAS_PAGAMENTO:
        raise ValidationError(f"Forma de pagamento inválida: {carrinho.forma_pagamento}", campo="forma_pagamento")

    joias = JoiaRepo(store)
    vendas = VendaRepo(store)
    itens = carrinho.itens
    log_system_event("finalizar_venda_start", {"cliente": nome, "linhas": len(itens)})

    try:
        atuais = conferir_estoque(
            joias, {i.joia_id: (i.quantidade, i.joia.descricao) for i in itens}
        )
    except JoiasError as e:
        log_transaction("finalizar_venda", {"cliente": nome}, error=str(e))
        raise

    valor_total, lucro_real = totais_venda(itens)
    venda = Venda(
        nome_cliente=to_title_case(nome),
        data_venda=data_venda or date.today(),
        forma_pagamento=carrinho.forma_pagamento,
        itens=itens,
        valor_total=valor_total,
        lucro_real=lucro_real,
    )
    venda.id = vendas.insert(venda)
    log_venda("registrar", venda.id, valor_total, lucro=lucro_real, pecas=venda.quantidade_pecas)

    relatorio = RelatorioOperacao("finalizar_venda", politica)
    for item in itens:
        restante = atuais[item.joia_id].quantidade - item.quantidade

        def baixar(joia_id=item.joia_id, restante=restante):
            joias.set_estoque(joia_id, restante, status_por_quantidade(restante))

        if relatorio.executar(f"baixa {item.joia.descricao}", baixar, joia_id=item.joia_id):
            log_estoque("baixa", item.joia_id, restante, venda_id=venda.id)

    log_transaction(
        "finalizar_venda",
        {"cliente": venda.nome_cliente, "linhas": len(itens)},
        result={"venda_id": venda.id, "valor_total": valor_total, "falhas": len(relatorio.falhas)},
    )
    carrinho.limpar()
    return venda, relatorio
