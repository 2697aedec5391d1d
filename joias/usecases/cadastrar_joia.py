# joias/usecases/cadastrar_joia.py
"""
UC: Cadastrar JOIAS (única e por planilha), atualizar, excluir e filtrar.

Obs.:
- Campos derivados (frete por peça, custo de aquisição, preço final e
  lucro esperado) são sempre recalculados a partir dos dados brutos.
- Código fica em maiúsculas; nome, material e fornecedor em Title Case.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from joias.adapters.parsers import parse_data, parse_valor
from joias.adapters.planilha_loader import load_joias_from_planilha
from joias.config import DEFAULTS
from joias.domain.erros import JoiasError, ValidationError
from joias.domain.formulas import calcular_precificacao
from joias.domain.models import STATUS_DISPONIVEL, FiltroEstoque, Joia
from joias.domain.policies import status_por_quantidade, to_title_case
from joias.infra.logger import (
    log_transaction, log_estoque, log_system_event, log_file_operation, print_system
)
from joias.infra.repositories import JoiaRepo
from joias.infra.store import DocumentStore


_OBRIGATORIOS = {
    "codigo": "Código é obrigatório",
    "nome": "Nome é obrigatório",
    "categoria": "Categoria é obrigatória",
    "material": "Material é obrigatório",
    "fornecedor": "Fornecedor é obrigatório",
}


def _normalize_str(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def _num(dados: Dict[str, Any], chave: str, padrao: float) -> float:
    val = dados.get(chave)
    if val is None or val == "":
        return padrao
    if isinstance(val, (int, float)):
        return float(val)
    convertido = parse_valor(val)
    if convertido is None:
        raise ValidationError(f"Valor numérico inválido em {chave}: {val}", campo=chave)
    return convertido


def _montar_joia(dados: Dict[str, Any], permitir_zero: bool = False) -> Joia:
    """Valida e normaliza os dados de entrada, calculando os derivados."""
    textos = {k: _normalize_str(dados.get(k)) for k in _OBRIGATORIOS}
    for k, msg in _OBRIGATORIOS.items():
        if not textos[k]:
            raise ValidationError(msg, campo=k)

    quantidade = _num(dados, "quantidade", 1)
    preco = _num(dados, "preco_por_peca", 0.0)
    total_pecas = _num(dados, "total_pecas_compra", DEFAULTS.total_pecas_compra)
    minimo = 0 if permitir_zero else 1
    if quantidade < minimo or quantidade != int(quantidade):
        raise ValidationError("Quantidade deve ser um inteiro maior que zero", campo="quantidade")
    if preco <= 0:
        raise ValidationError("Preço por peça deve ser maior que zero", campo="preco_por_peca")
    if total_pecas <= 0 or total_pecas != int(total_pecas):
        raise ValidationError("Total de peças da compra deve ser maior que zero", campo="total_pecas_compra")

    entrada = {
        "preco_por_peca": preco,
        "frete_total": _num(dados, "frete_total", 0.0),
        "total_pecas_compra": int(total_pecas),
        "custo_embalagem": _num(dados, "custo_embalagem", 0.0),
        "outros_custos": _num(dados, "outros_custos", 0.0),
        "margem_lucro": _num(dados, "margem_lucro", DEFAULTS.margem_lucro),
        "taxa_credito": _num(dados, "taxa_credito", DEFAULTS.taxa_credito),
    }
    derivados = calcular_precificacao(**entrada)

    data_compra = dados.get("data_compra")
    if data_compra is not None and not hasattr(data_compra, "isoformat"):
        data_compra = parse_data(data_compra)

    return Joia(
        codigo=textos["codigo"].upper(),
        nome=to_title_case(textos["nome"]),
        categoria=textos["categoria"],
        material=to_title_case(textos["material"]),
        fornecedor=to_title_case(textos["fornecedor"]),
        quantidade=int(quantidade),
        data_compra=data_compra,
        status=STATUS_DISPONIVEL,
        **entrada,
        **derivados,
    )


def cadastrar_joia(store: DocumentStore, dados: Dict[str, Any]) -> Joia:
    """Registra a compra de uma joia (status inicial: disponível)."""
    log_system_event("cadastrar_joia_start", {"codigo": dados.get("codigo")})
    repo = JoiaRepo(store)
    try:
        joia = _montar_joia(dados)
        if repo.find_by_codigo(joia.codigo):
            raise ValidationError(f"Já existe uma joia com o código {joia.codigo}", campo="codigo")
        joia.id = repo.insert(joia)
        log_estoque("cadastro", joia.id, joia.quantidade, codigo=joia.codigo)
        log_transaction("cadastrar_joia", {"codigo": joia.codigo}, result=joia.id)
        return repo.get(joia.id) or joia
    except JoiasError as e:
        log_transaction("cadastrar_joia", {"codigo": dados.get("codigo")}, error=str(e))
        raise


def atualizar_joia(store: DocumentStore, joia_id: str, dados: Dict[str, Any]) -> Joia:
    """Edita uma joia já cadastrada, recalculando derivados e status."""
    repo = JoiaRepo(store)
    atual = repo.get(joia_id)
    if atual is None:
        raise ValidationError(f"Joia {joia_id} não encontrada")

    base = atual.to_doc()
    base.update({k: v for k, v in dados.items() if v is not None})
    joia = _montar_joia(base, permitir_zero=True)
    outra = repo.find_by_codigo(joia.codigo)
    if outra and outra.id != joia_id:
        raise ValidationError(f"Já existe uma joia com o código {joia.codigo}", campo="codigo")

    campos = joia.to_doc()
    campos["status"] = status_por_quantidade(joia.quantidade)
    repo.update(joia_id, campos)
    log_estoque("atualizacao", joia_id, joia.quantidade, codigo=joia.codigo)
    return repo.get(joia_id)


def excluir_joia(store: DocumentStore, joia_id: str) -> None:
    """Remoção manual. Vendas antigas mantêm a fotografia da joia."""
    repo = JoiaRepo(store)
    if repo.get(joia_id) is None:
        raise ValidationError(f"Joia {joia_id} não encontrada")
    repo.delete(joia_id)
    log_estoque("exclusao", joia_id)
    log_system_event("joia_excluida", {"joia_id": joia_id}, level="warning")


def filtrar_joias(joias: List[Joia], filtro: Optional[FiltroEstoque] = None) -> List[Joia]:
    """Aplica os filtros da tela de estoque e ordena (disponíveis primeiro)."""
    f = filtro or FiltroEstoque()

    def contem(valor: str, termo: str) -> bool:
        return termo == "" or termo.lower() in (valor or "").lower()

    filtradas = [
        j for j in joias
        if contem(j.codigo, f.codigo)
        and contem(j.nome, f.nome)
        and (f.categoria == "" or j.categoria == f.categoria)
        and (f.status == "todos" or j.status == f.status)
        and contem(j.material, f.material)
        and contem(j.fornecedor, f.fornecedor)
    ]
    return sorted(
        filtradas,
        key=lambda j: (j.status != STATUS_DISPONIVEL, j.codigo.lower(), j.nome.lower()),
    )


def importar_planilha(store: DocumentStore, path: str) -> Dict[str, Any]:
    """Lê um XLSX/CSV de compras e cadastra cada linha."""
    log_system_event("importar_planilha_start", {"file_path": path})
    rows = load_joias_from_planilha(path)
    log_file_operation("import", path, rows_processed=len(rows))

    sucessos = 0
    erros: List[Dict[str, Any]] = []
    for n, row in enumerate(rows, start=2):  # linha 1 é o cabeçalho
        try:
            cadastrar_joia(store, row)
            sucessos += 1
        except ValidationError as e:
            erros.append({"linha": n, "mensagem": str(e)})
            print_system(f"Linha {n}: {e}")

    result = {
        "tipo": "Cadastro",
        "arquivo": path,
        "total": len(rows),
        "registros": len(rows),
        "sucessos": sucessos,
        "erros": erros,
    }
    log_transaction("importar_planilha", {"file": path, "rows_count": len(rows)}, result=result)
    return result
