"""
Painel (Textual) com estoque, vendas, lotes e caixa.

As tabelas assinam as coleções do DocumentStore e são redesenhadas a
cada alteração; 'r' relê tudo do banco (útil quando outra instância da
CLI gravou no mesmo arquivo).
"""

from __future__ import annotations

from typing import Callable, List, Optional

from textual.app import App, ComposeResult
from textual.containers import ScrollableContainer
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Static, TabbedContent, TabPane

from joias.config import DB_PATH
from joias.domain.models import Joia, LoteInvestimento, Movimento, Venda
from joias.infra.logger import LOGS_DIR, get_log_summary, log_system_event
from joias.infra.repositories import ConfigRepo, JoiaRepo, LoteRepo, MovimentoRepo, VendaRepo
from joias.infra.store import DocumentStore
from joias.usecases.cadastrar_joia import filtrar_joias
from joias.usecases.fluxo_caixa import dividir_saldo, resumo_caixa
from joias.usecases.investimentos import agrupar_lotes, distribuicao_lucro


COLUNAS_ESTOQUE = ("Código", "Nome", "Categoria", "Fornecedor", "Qtd", "Custo", "Preço", "Status")
COLUNAS_VENDAS = ("Data", "Cliente", "Pagamento", "Peças", "Total", "Lucro")
COLUNAS_LOTES = ("Fornecedor", "Data", "Investido", "Vendido", "Lucro", "% Vendido", "Reinvest.", "Reserva", "Líquido")
COLUNAS_SAIDAS = ("Data", "Descrição", "Origem", "Suborigem", "Valor")


def _moeda(v: float) -> str:
    return f"R$ {v:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def linhas_estoque(joias: List[Joia]) -> List[tuple]:
    return [
        (j.codigo, j.nome, j.categoria, j.fornecedor, str(j.quantidade),
         _moeda(j.custo_aquisicao), _moeda(j.preco_venda_final), j.status)
        for j in filtrar_joias(joias)
    ]


def linhas_vendas(vendas: List[Venda]) -> List[tuple]:
    return [
        (v.data_venda.strftime("%d/%m/%Y") if v.data_venda else "", v.nome_cliente,
         v.forma_pagamento, str(v.quantidade_pecas), _moeda(v.valor_total), _moeda(v.lucro_real))
        for v in vendas
    ]


def linhas_lotes(lotes: List[LoteInvestimento]) -> List[tuple]:
    out = []
    for lote in lotes:
        dist = distribuicao_lucro(lote)
        out.append((
            lote.fornecedor, lote.data_lote, _moeda(lote.valor_investido), _moeda(lote.valor_vendido),
            _moeda(lote.lucro_obtido), f"{lote.percentual_vendido:.1f}%",
            _moeda(dist["reinvestimento"]), _moeda(dist["reserva_emergencia"]), _moeda(dist["lucro_liquido"]),
        ))
    return out


def linhas_saidas(saidas: List[Movimento]) -> List[tuple]:
    return [
        (m.data.strftime("%d/%m/%Y") if m.data else "", m.descricao, m.origem,
         m.suborigem or "", _moeda(m.valor))
        for m in saidas
    ]


def texto_caixa(resumo: dict, partes: dict) -> str:
    return (
        f"Total de vendas: {_moeda(resumo['total_vendas'])}   "
        f"Lucro: {_moeda(resumo['lucro_total'])}\n"
        f"Saldo do caixa: {_moeda(resumo['saldo_caixa'])}   "
        f"Saldo de embalagem: {_moeda(resumo['saldo_embalagem'])}\n"
        f"Reinvestimento: {_moeda(partes['reinvestimento'])}   "
        f"Caixa da loja: {_moeda(partes['caixa_loja'])}   "
        f"Salário: {_moeda(partes['salario'])}"
    )


class LogScreen(Screen):
    """Mostra o resumo dos logs recentes."""
    BINDINGS = [
        ("escape", "app.pop_screen", "Voltar"),
        ("q", "app.pop_screen", "Voltar"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with ScrollableContainer():
            conteudo = get_log_summary("system", lines=50)
            yield Static(conteudo or f"Logging desativado (diretório: {LOGS_DIR})")
        yield Footer()


class PainelJoiasApp(App):
    """Painel de acompanhamento da loja."""

    CSS = """
    #resumo-caixa {
        background: #3b2a4a;
        color: #ffffff;
        padding: 1;
    }
    DataTable {
        height: 1fr;
    }
    """

    TITLE = "Solarie Joias - Painel"
    BINDINGS = [
        ("q", "quit", "Sair"),
        ("r", "recarregar", "Recarregar"),
        ("l", "logs", "Logs"),
    ]

    def __init__(self, store: DocumentStore) -> None:
        super().__init__()
        self.store = store
        self.joias: List[Joia] = []
        self.vendas: List[Venda] = []
        self.saidas: List[Movimento] = []
        self.texto_resumo = ""
        self._cancelar: List[Callable[[], None]] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="resumo-caixa")
        with TabbedContent():
            with TabPane("Estoque", id="aba-estoque"):
                yield DataTable(id="tabela-estoque", zebra_stripes=True)
            with TabPane("Vendas", id="aba-vendas"):
                yield DataTable(id="tabela-vendas", zebra_stripes=True)
            with TabPane("Lotes", id="aba-lotes"):
                yield DataTable(id="tabela-lotes", zebra_stripes=True)
            with TabPane("Saídas", id="aba-saidas"):
                yield DataTable(id="tabela-saidas", zebra_stripes=True)
        yield Footer()

    def on_mount(self) -> None:
        for tabela, colunas in (
            ("#tabela-estoque", COLUNAS_ESTOQUE),
            ("#tabela-vendas", COLUNAS_VENDAS),
            ("#tabela-lotes", COLUNAS_LOTES),
            ("#tabela-saidas", COLUNAS_SAIDAS),
        ):
            self.query_one(tabela, DataTable).add_columns(*colunas)

        self._cancelar = [
            JoiaRepo(self.store).subscribe(self._on_joias),
            VendaRepo(self.store).subscribe(self._on_vendas),
            MovimentoRepo(self.store).subscribe(self._on_saidas),
        ]
        log_system_event("painel_aberto", {"db_path": self.store.db_path})

    def on_unmount(self) -> None:
        for cancelar in self._cancelar:
            cancelar()
        self._cancelar = []

    # --------- assinaturas ---------

    def _on_joias(self, joias: List[Joia]) -> None:
        self.joias = joias
        self._preencher("#tabela-estoque", linhas_estoque(joias))
        self._atualizar_derivados()

    def _on_vendas(self, vendas: List[Venda]) -> None:
        self.vendas = vendas
        self._preencher("#tabela-vendas", linhas_vendas(vendas))
        self._atualizar_derivados()

    def _on_saidas(self, saidas: List[Movimento]) -> None:
        self.saidas = saidas
        self._preencher("#tabela-saidas", linhas_saidas(saidas))
        self._atualizar_derivados()

    def _atualizar_derivados(self) -> None:
        lotes = agrupar_lotes(self.joias, self.vendas, LoteRepo(self.store).map_by_chave())
        self._preencher("#tabela-lotes", linhas_lotes(lotes))
        resumo = resumo_caixa(self.vendas, self.saidas)
        partes = dividir_saldo(resumo["saldo_caixa"], ConfigRepo(self.store).get_divisao_caixa())
        self.texto_resumo = texto_caixa(resumo, partes)
        self.query_one("#resumo-caixa", Static).update(self.texto_resumo)

    def _preencher(self, seletor: str, linhas: List[tuple]) -> None:
        tabela = self.query_one(seletor, DataTable)
        tabela.clear()
        for linha in linhas:
            tabela.add_row(*linha)

    # --------- ações ---------

    def action_recarregar(self) -> None:
        self._on_joias(JoiaRepo(self.store).get_all())
        self._on_vendas(VendaRepo(self.store).get_all())
        self._on_saidas(MovimentoRepo(self.store).get_all())

    def action_logs(self) -> None:
        self.push_screen(LogScreen())


def main(db_path: Optional[str] = None) -> None:
    """Abre o armazenamento e roda o painel."""
    with DocumentStore(db_path or DB_PATH) as store:
        PainelJoiasApp(store).run()


if __name__ == "__main__":
    main()
