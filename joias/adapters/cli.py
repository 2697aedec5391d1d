# joias/adapters/cli.py
"""
CLI do sistema de joias (Typer).

Comandos principais:
- migrate                          -> aplica migrações
- joia cadastrar|listar|atualizar|excluir|importar
- venda registrar|listar|editar|excluir|stats
- lotes listar|dividir             -> investimentos por lote de compra
- caixa resumo|saida|saidas|excluir-saida|divisao
- rel geral|mensal|exportar        -> relatórios
- senha verificar|alterar
- painel                           -> painel interativo (Textual)
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from joias.adapters.parsers import parse_data, parse_item_venda
from joias.config import DB_PATH
from joias.domain.erros import InsufficientStockError, JoiasError, ValidationError
from joias.domain.models import (
    FORMAS_PAGAMENTO, DivisaoCaixa, DivisaoLucro, FiltroEstoque, FiltroRelatorio, FiltroVendas, Joia, Venda,
)
from joias.infra.migrations import apply_migrations
from joias.infra.repositories import ConfigRepo, JoiaRepo, VendaRepo
from joias.infra.store import DocumentStore
from joias.usecases.autenticacao import alterar_senha, verificar_senha
from joias.usecases.cadastrar_joia import (
    atualizar_joia, cadastrar_joia, excluir_joia, filtrar_joias, importar_planilha,
)
from joias.usecases.fluxo_caixa import (
    ajustar_divisao_caixa, carregar_resumo, dividir_saldo, excluir_saida, listar_saidas,
    registrar_saida, salvar_divisao_caixa,
)
from joias.usecases.historico_vendas import editar_venda, estatisticas_vendas, excluir_venda, filtrar_vendas
from joias.usecases.investimentos import distribuicao_lucro, listar_lotes, salvar_divisao_lote
from joias.usecases.registrar_venda import Carrinho, finalizar_venda, montar_item_venda
from joias.usecases.relatorios import carregar_relatorio, exportar_relatorio, relatorio_mensal
from joias.usecases.saga import PoliticaFalha, RelatorioOperacao


app = typer.Typer(help="Solarie Joias — CLI")
console = Console()

DbOpt = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    """Fallback para impressão de JSON quando necessário."""
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2, default=str))


def _fmt(val: Any) -> str:
    if isinstance(val, bool):
        return "sim" if val else "não"
    if isinstance(val, (int, float)):
        if isinstance(val, int):
            return str(val)
        return f"{val:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    if isinstance(val, datetime):
        return val.strftime("%d/%m/%Y %H:%M")
    if isinstance(val, date):
        return val.strftime("%d/%m/%Y")
    return "" if val is None else str(val)


def _display_table(data: Dict[str, Any] | List[Dict[str, Any]], title: str = "Resultado") -> None:
    """Exibe os dados em tabelas formatadas usando Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    # Lista de itens - formato mais comum
    if isinstance(data, list) and isinstance(data[0], dict):
        table = Table(title=title, box=box.ROUNDED)
        columns = list(data[0].keys())
        for column in columns:
            if isinstance(data[0][column], (int, float)) and not isinstance(data[0][column], bool):
                table.add_column(column, justify="right")
            elif column.lower() in ("data", "data_venda", "data_compra"):
                table.add_column(column, justify="center")
            else:
                table.add_column(column)
        for row in data:
            values = []
            for col in columns:
                val = row.get(col, "")
                if col == "status" and val == "vendida":
                    values.append(f"[bold red]{val}[/]")
                elif col == "status" and val == "disponivel":
                    values.append(f"[bold green]{val}[/]")
                else:
                    values.append(_fmt(val))
            table.add_row(*values)
        console.print(table)
        return

    # Importação em lote
    if isinstance(data, dict) and "registros" in data and "total" in data:
        titulo = f"{data['tipo']} em Lote" if "tipo" in data else "Registros em Lote"
        panel_content = [
            f"Total de registros: {data['total']}",
            f"Processados com sucesso: {data.get('sucessos', 0)}",
        ]
        if data.get("erros"):
            panel_content.append(f"Erros: {len(data['erros'])}")
        console.print(Panel("\n".join(panel_content), title=titulo))

        if data.get("erros"):
            erro_table = Table(title="Erros Encontrados")
            erro_table.add_column("Linha")
            erro_table.add_column("Erro")
            for erro in data["erros"]:
                erro_table.add_row(str(erro.get("linha", "?")), erro.get("mensagem", "Erro desconhecido"))
            console.print(erro_table)
        return

    # Dicionário simples: campo / valor
    if isinstance(data, dict):
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Campo")
        table.add_column("Valor", justify="right")
        for chave, valor in data.items():
            if isinstance(valor, (dict, list)):
                continue
            table.add_row(chave, _fmt(valor))
        console.print(table)
        return

    _print_json(data)


def _display_relatorio(rel: RelatorioOperacao) -> None:
    if rel.sucesso_total and not rel.ignorados:
        return
    table = Table(title=f"Passos de {rel.operacao} ({rel.politica.value})", box=box.ROUNDED)
    table.add_column("Passo")
    table.add_column("Situação")
    table.add_column("Erro")
    for p in rel.passos:
        cor = {"ok": "green", "falhou": "red", "ignorado": "yellow"}.get(p.situacao, "dim")
        table.add_row(p.descricao, f"[{cor}]{p.situacao}[/]", p.erro or "")
    console.print(table)


@contextmanager
def _store(db_path: str) -> Iterator[DocumentStore]:
    """Abre o armazenamento e traduz erros de negócio em saída vermelha + exit 1."""
    try:
        with DocumentStore(db_path) as store:
            yield store
    except (ValidationError, InsufficientStockError) as e:
        console.print(f"[bold red]Erro:[/] {e}")
        raise typer.Exit(code=1)
    except JoiasError as e:
        console.print(f"[bold red]Falha no armazenamento:[/] {e}")
        raise typer.Exit(code=2)


def _joia_por_codigo(store: DocumentStore, codigo: str) -> Joia:
    joia = JoiaRepo(store).find_by_codigo(codigo)
    if joia is None:
        raise ValidationError(f"Joia {codigo.upper()} não encontrada", campo="codigo")
    return joia


def _venda_por_id(store: DocumentStore, venda_id: str) -> Venda:
    """Aceita o id completo ou um prefixo único."""
    repo = VendaRepo(store)
    venda = repo.get(venda_id)
    if venda:
        return venda
    candidatas = [v for v in repo.get_all() if v.id.startswith(venda_id)]
    if len(candidatas) != 1:
        raise ValidationError(f"Venda {venda_id} não encontrada")
    return candidatas[0]


def _linha_joia(j: Joia) -> Dict[str, Any]:
    return {
        "codigo": j.codigo,
        "nome": j.nome,
        "categoria": j.categoria,
        "material": j.material,
        "fornecedor": j.fornecedor,
        "qtd": j.quantidade,
        "custo": j.custo_aquisicao,
        "preco": j.preco_venda_final,
        "lucro": j.lucro_esperado,
        "status": j.status,
    }


def _linha_venda(v: Venda) -> Dict[str, Any]:
    return {
        "id": v.id[:8],
        "data_venda": v.data_venda,
        "cliente": v.nome_cliente,
        "pagamento": v.forma_pagamento,
        "pecas": v.quantidade_pecas,
        "total": v.valor_total,
        "lucro": v.lucro_real,
    }


def _data_opt(txt: Optional[str]) -> Optional[date]:
    try:
        return parse_data(txt)
    except ValueError as e:
        raise ValidationError(str(e), campo="data") from e


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = DbOpt):
    """Aplica as migrações do banco."""
    apply_migrations(db_path)
    typer.echo(f">> Migrações aplicadas em: {db_path}")


@app.command("painel")
def cmd_painel(db_path: str = DbOpt):
    """
    Inicia o painel interativo (Textual) com estoque, vendas, lotes e caixa.

    As tabelas se atualizam sozinhas a cada alteração no armazenamento.
    """
    from joias.adapters.painel_tui import main as painel_main
    try:
        painel_main(db_path)
    except KeyboardInterrupt:
        typer.echo("\nSaindo do painel...")
        raise typer.Exit(0)


# -----------------------
# joias
# -----------------------

joia_app = typer.Typer(help="Cadastro e estoque de joias")
app.add_typer(joia_app, name="joia")


@joia_app.command("cadastrar")
def cmd_joia_cadastrar(
    codigo: str = typer.Option(..., help="Código único (ex.: AN001)"),
    nome: str = typer.Option(...),
    categoria: str = typer.Option(..., help="anel, colar, brinco, pulseira..."),
    material: str = typer.Option(...),
    fornecedor: str = typer.Option(...),
    preco: float = typer.Option(..., "--preco", help="Preço pago por peça"),
    quantidade: int = typer.Option(1),
    data_compra: Optional[str] = typer.Option(None, help="DD/MM/AAAA ou AAAA-MM-DD"),
    frete: float = typer.Option(0.0, help="Frete total da compra"),
    total_pecas: Optional[int] = typer.Option(None, help="Peças na compra (rateio do frete)"),
    embalagem: float = typer.Option(0.0),
    outros: float = typer.Option(0.0),
    margem: Optional[float] = typer.Option(None, help="Margem de lucro (%)"),
    taxa: Optional[float] = typer.Option(None, help="Taxa do cartão (%)"),
    db_path: str = DbOpt,
):
    """Registra a compra de uma joia."""
    with _store(db_path) as store:
        joia = cadastrar_joia(store, {
            "codigo": codigo, "nome": nome, "categoria": categoria, "material": material,
            "fornecedor": fornecedor, "preco_por_peca": preco, "quantidade": quantidade,
            "data_compra": _data_opt(data_compra), "frete_total": frete,
            "total_pecas_compra": total_pecas, "custo_embalagem": embalagem,
            "outros_custos": outros, "margem_lucro": margem, "taxa_credito": taxa,
        })
        _display_table([_linha_joia(joia)], title="Joia Cadastrada")


@joia_app.command("listar")
def cmd_joia_listar(
    codigo: str = typer.Option(""),
    nome: str = typer.Option(""),
    categoria: str = typer.Option(""),
    status: str = typer.Option("todos", help="disponivel | vendida | todos"),
    material: str = typer.Option(""),
    fornecedor: str = typer.Option(""),
    db_path: str = DbOpt,
):
    """Lista o estoque (disponíveis primeiro)."""
    with _store(db_path) as store:
        filtro = FiltroEstoque(codigo, nome, categoria, status, material, fornecedor)
        joias = filtrar_joias(JoiaRepo(store).get_all(), filtro)
        _display_table([_linha_joia(j) for j in joias], title="Estoque")


@joia_app.command("atualizar")
def cmd_joia_atualizar(
    codigo: str = typer.Argument(..., help="Código atual da joia"),
    novo_codigo: Optional[str] = typer.Option(None),
    nome: Optional[str] = typer.Option(None),
    categoria: Optional[str] = typer.Option(None),
    material: Optional[str] = typer.Option(None),
    fornecedor: Optional[str] = typer.Option(None),
    quantidade: Optional[int] = typer.Option(None),
    preco: Optional[float] = typer.Option(None, "--preco"),
    frete: Optional[float] = typer.Option(None),
    total_pecas: Optional[int] = typer.Option(None),
    embalagem: Optional[float] = typer.Option(None),
    outros: Optional[float] = typer.Option(None),
    margem: Optional[float] = typer.Option(None),
    taxa: Optional[float] = typer.Option(None),
    db_path: str = DbOpt,
):
    """Edita uma joia (apenas os campos informados)."""
    with _store(db_path) as store:
        joia = _joia_por_codigo(store, codigo)
        joia = atualizar_joia(store, joia.id, {
            "codigo": novo_codigo, "nome": nome, "categoria": categoria, "material": material,
            "fornecedor": fornecedor, "quantidade": quantidade, "preco_por_peca": preco,
            "frete_total": frete, "total_pecas_compra": total_pecas, "custo_embalagem": embalagem,
            "outros_custos": outros, "margem_lucro": margem, "taxa_credito": taxa,
        })
        _display_table([_linha_joia(joia)], title="Joia Atualizada")


@joia_app.command("excluir")
def cmd_joia_excluir(
    codigo: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y", help="Não pedir confirmação"),
    db_path: str = DbOpt,
):
    """Remove uma joia do estoque."""
    with _store(db_path) as store:
        joia = _joia_por_codigo(store, codigo)
        if not yes and not typer.confirm(f"Excluir {joia.descricao}?"):
            raise typer.Exit(0)
        excluir_joia(store, joia.id)
        typer.echo(f">> {joia.descricao} excluída.")


@joia_app.command("importar")
def cmd_joia_importar(
    path: str = typer.Argument(..., help="Caminho do XLSX/CSV de compras"),
    db_path: str = DbOpt,
):
    """Cadastra joias em lote a partir de uma planilha."""
    with _store(db_path) as store:
        info = importar_planilha(store, path)
        _display_table(info, title="Importação de Joias")


# -----------------------
# vendas
# -----------------------

venda_app = typer.Typer(help="Registro e histórico de vendas")
app.add_typer(venda_app, name="venda")


def _montar_carrinho(store: DocumentStore, itens: List[str], pagamento: str, descontar_taxa: bool) -> Carrinho:
    carrinho = Carrinho()
    carrinho.definir_pagamento(pagamento, descontar_taxa)
    for txt in itens:
        try:
            codigo, qtd, preco = parse_item_venda(txt)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        joia = _joia_por_codigo(store, codigo)
        linha = carrinho.adicionar(joia, qtd)
        if linha.quantidade < qtd:
            console.print(f"[yellow]{joia.descricao}: quantidade limitada a {linha.quantidade}[/]")
        if preco is not None:
            carrinho.alterar_preco(joia.id, preco)
    return carrinho


@venda_app.command("registrar")
def cmd_venda_registrar(
    cliente: str = typer.Option(..., help="Nome do cliente"),
    item: List[str] = typer.Option(..., "--item", "-i", help="CODIGO[:QTD][@PRECO] (repetível)"),
    pagamento: str = typer.Option("dinheiro", help=" | ".join(FORMAS_PAGAMENTO)),
    descontar_taxa: bool = typer.Option(False, help="Em dinheiro, remove a taxa do cartão do preço"),
    data: Optional[str] = typer.Option(None, help="Data da venda (padrão: hoje)"),
    interromper: bool = typer.Option(False, help="Parar a baixa de estoque na primeira falha"),
    db_path: str = DbOpt,
):
    """Registra uma venda e baixa o estoque."""
    politica = PoliticaFalha.HALT_ON_FAILURE if interromper else PoliticaFalha.CONTINUE_ON_FAILURE
    with _store(db_path) as store:
        carrinho = _montar_carrinho(store, item, pagamento, descontar_taxa)
        venda, rel = finalizar_venda(store, carrinho, cliente, _data_opt(data), politica)
        _display_table([_linha_venda(venda)], title="Venda Registrada")
        _display_relatorio(rel)


@venda_app.command("listar")
def cmd_venda_listar(
    cliente: str = typer.Option(""),
    pagamento: str = typer.Option(""),
    inicio: Optional[str] = typer.Option(None),
    fim: Optional[str] = typer.Option(None),
    db_path: str = DbOpt,
):
    """Lista as vendas (mais recentes primeiro)."""
    with _store(db_path) as store:
        filtro = FiltroVendas(cliente, _data_opt(inicio), _data_opt(fim), pagamento)
        vendas = filtrar_vendas(VendaRepo(store).get_all(), filtro)
        _display_table([_linha_venda(v) for v in vendas], title="Histórico de Vendas")


@venda_app.command("editar")
def cmd_venda_editar(
    venda_id: str = typer.Argument(..., help="Id (ou prefixo) da venda"),
    item: List[str] = typer.Option(..., "--item", "-i", help="Novas linhas CODIGO[:QTD][@PRECO]"),
    cliente: Optional[str] = typer.Option(None),
    pagamento: Optional[str] = typer.Option(None),
    data: Optional[str] = typer.Option(None),
    db_path: str = DbOpt,
):
    """Substitui as linhas de uma venda e ajusta o estoque."""
    with _store(db_path) as store:
        venda = _venda_por_id(store, venda_id)
        anteriores = {i.joia.codigo: i for i in venda.itens}
        novos = []
        for txt in item:
            try:
                codigo, qtd, preco = parse_item_venda(txt)
            except ValueError as e:
                raise ValidationError(str(e)) from e
            # linhas já vendidas mantêm a fotografia da joia
            if codigo in anteriores:
                joia = anteriores[codigo].joia
            else:
                joia = JoiaRepo(store).find_by_codigo(codigo)
            if joia is None:
                raise ValidationError(f"Joia {codigo} não encontrada", campo="codigo")
            if preco is None and codigo in anteriores:
                preco = anteriores[codigo].preco_unitario
            novos.append(montar_item_venda(joia, qtd, preco))
        venda, rel = editar_venda(store, venda.id, novos, cliente, _data_opt(data), pagamento)
        _display_table([_linha_venda(venda)], title="Venda Editada")
        _display_relatorio(rel)


@venda_app.command("excluir")
def cmd_venda_excluir(
    venda_id: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y"),
    db_path: str = DbOpt,
):
    """Exclui a venda e devolve as peças ao estoque."""
    with _store(db_path) as store:
        venda = _venda_por_id(store, venda_id)
        if not yes and not typer.confirm(f"Excluir a venda de {venda.nome_cliente}?"):
            raise typer.Exit(0)
        rel = excluir_venda(store, venda.id)
        typer.echo(f">> Venda {venda.id[:8]} excluída.")
        _display_relatorio(rel)


@venda_app.command("stats")
def cmd_venda_stats(db_path: str = DbOpt):
    """Estatísticas do histórico de vendas."""
    with _store(db_path) as store:
        stats = estatisticas_vendas(VendaRepo(store).get_all())
        _display_table(stats, title="Resumo de Vendas")
        _display_table(
            [{"pagamento": k, **v} for k, v in stats["por_pagamento"].items()],
            title="Por Forma de Pagamento",
        )


# -----------------------
# lotes
# -----------------------

lotes_app = typer.Typer(help="Investimentos por lote de compra")
app.add_typer(lotes_app, name="lotes")


@lotes_app.command("listar")
def cmd_lotes_listar(db_path: str = DbOpt):
    """Lista os lotes com investimento, vendas e divisão do lucro."""
    with _store(db_path) as store:
        linhas = []
        for lote in listar_lotes(store):
            dist = distribuicao_lucro(lote)
            linhas.append({
                "fornecedor": lote.fornecedor,
                "data": lote.data_lote,
                "investido": lote.valor_investido,
                "vendido": lote.valor_vendido,
                "lucro": lote.lucro_obtido,
                "% vendido": lote.percentual_vendido,
                "reinvestimento": dist["reinvestimento"],
                "reserva": dist["reserva_emergencia"],
                "liquido": dist["lucro_liquido"],
            })
        _display_table(linhas, title="Lotes de Investimento")


@lotes_app.command("dividir")
def cmd_lotes_dividir(
    fornecedor: str = typer.Argument(...),
    data_lote: str = typer.Argument(..., help="AAAA-MM-DD ou sem-data"),
    reinvestimento: float = typer.Option(...),
    reserva: float = typer.Option(...),
    liquido: float = typer.Option(...),
    db_path: str = DbOpt,
):
    """Salva a divisão do lucro de um lote (soma 100%)."""
    with _store(db_path) as store:
        divisao = DivisaoLucro(reinvestimento, reserva, liquido)
        salvar_divisao_lote(store, fornecedor, data_lote, divisao)
        typer.echo(">> Divisão do lote salva.")


# -----------------------
# caixa
# -----------------------

caixa_app = typer.Typer(help="Fluxo de caixa")
app.add_typer(caixa_app, name="caixa")


@caixa_app.command("resumo")
def cmd_caixa_resumo(db_path: str = DbOpt):
    """Saldos do caixa e da embalagem, com a divisão do caixa."""
    with _store(db_path) as store:
        resumo = carregar_resumo(store)
        _display_table(resumo, title="Fluxo de Caixa")
        divisao = ConfigRepo(store).get_divisao_caixa()
        partes = dividir_saldo(resumo["saldo_caixa"], divisao)
        _display_table(
            [{"parte": k, "%": getattr(divisao, k), "valor": v} for k, v in partes.items()],
            title="Divisão do Saldo do Caixa",
        )


@caixa_app.command("saida")
def cmd_caixa_saida(
    descricao: str = typer.Option(...),
    valor: float = typer.Option(...),
    origem: str = typer.Option("caixa", help="caixa | embalagem"),
    suborigem: Optional[str] = typer.Option(None, help="reinvestimento | caixa_loja | salario"),
    data: Optional[str] = typer.Option(None),
    db_path: str = DbOpt,
):
    """Registra uma saída de dinheiro."""
    with _store(db_path) as store:
        mov = registrar_saida(store, {
            "descricao": descricao, "valor": valor, "origem": origem,
            "suborigem": suborigem, "data": _data_opt(data),
        })
        typer.echo(f">> Saída {mov.id[:8]} registrada.")


@caixa_app.command("saidas")
def cmd_caixa_saidas(
    origem: Optional[str] = typer.Option(None),
    db_path: str = DbOpt,
):
    """Lista as saídas registradas."""
    with _store(db_path) as store:
        _display_table(
            [
                {"id": m.id[:8], "data": m.data, "descricao": m.descricao, "origem": m.origem,
                 "suborigem": m.suborigem or "", "valor": m.valor}
                for m in listar_saidas(store, origem)
            ],
            title="Saídas",
        )


@caixa_app.command("excluir-saida")
def cmd_caixa_excluir_saida(
    mov_id: str = typer.Argument(..., help="Id (ou prefixo) da saída"),
    db_path: str = DbOpt,
):
    """Exclui uma saída."""
    with _store(db_path) as store:
        candidatas = [m for m in listar_saidas(store) if m.id.startswith(mov_id)]
        if len(candidatas) != 1:
            raise ValidationError(f"Saída {mov_id} não encontrada")
        excluir_saida(store, candidatas[0].id)
        typer.echo(">> Saída excluída.")


@caixa_app.command("divisao")
def cmd_caixa_divisao(
    campo: str = typer.Argument(..., help="reinvestimento | caixa_loja | salario"),
    valor: float = typer.Argument(...),
    db_path: str = DbOpt,
):
    """Ajusta um percentual da divisão do caixa e redistribui o excesso."""
    with _store(db_path) as store:
        divisao = ajustar_divisao_caixa(ConfigRepo(store).get_divisao_caixa(), campo, valor)
        salvar_divisao_caixa(store, divisao)
        _display_table(vars(divisao), title="Divisão do Caixa")


# -----------------------
# relatórios
# -----------------------

rel_app = typer.Typer(help="Relatórios")
app.add_typer(rel_app, name="rel")


def _filtro_rel(inicio, fim, categoria, fornecedor) -> FiltroRelatorio:
    return FiltroRelatorio(_data_opt(inicio), _data_opt(fim), categoria, fornecedor)


@rel_app.command("geral")
def rel_geral(
    inicio: Optional[str] = typer.Option(None),
    fim: Optional[str] = typer.Option(None),
    categoria: str = typer.Option(""),
    fornecedor: str = typer.Option(""),
    db_path: str = DbOpt,
):
    """Estatísticas do estoque e vendas do período."""
    with _store(db_path) as store:
        rel = carregar_relatorio(store, _filtro_rel(inicio, fim, categoria, fornecedor))
        _display_table(rel, title="Relatório Geral")


@rel_app.command("mensal")
def rel_mensal(db_path: str = DbOpt):
    """Vendas e lucro por mês."""
    with _store(db_path) as store:
        linhas = relatorio_mensal(VendaRepo(store).get_all())
        _display_table(
            [{k: v for k, v in r.items() if k not in ("chave", "ano")} for r in linhas],
            title="Relatório Mensal",
        )


@rel_app.command("exportar")
def rel_exportar(
    path: str = typer.Argument(..., help="Destino .xlsx ou .csv"),
    inicio: Optional[str] = typer.Option(None),
    fim: Optional[str] = typer.Option(None),
    categoria: str = typer.Option(""),
    fornecedor: str = typer.Option(""),
    db_path: str = DbOpt,
):
    """Exporta o relatório geral e o mensal."""
    with _store(db_path) as store:
        rel = carregar_relatorio(store, _filtro_rel(inicio, fim, categoria, fornecedor))
        destino = exportar_relatorio(rel, path)
        typer.echo(f">> Relatório exportado para: {destino}")


# -----------------------
# senha
# -----------------------

senha_app = typer.Typer(help="Senha de acesso")
app.add_typer(senha_app, name="senha")


@senha_app.command("verificar")
def cmd_senha_verificar(db_path: str = DbOpt):
    """Confere a senha de acesso."""
    senha = typer.prompt("Senha", hide_input=True)
    with _store(db_path) as store:
        if not verificar_senha(store, senha):
            console.print("[bold red]Senha incorreta[/]")
            raise typer.Exit(code=1)
        typer.echo(">> Senha correta.")


@senha_app.command("alterar")
def cmd_senha_alterar(db_path: str = DbOpt):
    """Troca a senha de acesso."""
    atual = typer.prompt("Senha atual", hide_input=True)
    nova = typer.prompt("Nova senha", hide_input=True)
    confirmacao = typer.prompt("Confirme a nova senha", hide_input=True)
    with _store(db_path) as store:
        alterar_senha(store, atual, nova, confirmacao)
        typer.echo(">> Senha alterada.")


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
