# joias/infra/logger.py
"""
Sistema de logging para as operações da loja.

Este módulo configura e fornece loggers para registrar as operações
críticas do sistema: cadastro de joias, vendas (registro, edição,
exclusão), movimentos de caixa e operações no armazenamento.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional


def _env_flag(nome: str, padrao: bool = False) -> bool:
    val = os.environ.get(nome)
    if val is None:
        return padrao
    return val.strip().lower() in {"1", "true", "sim", "yes", "on"}


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = _env_flag("JOIAS_LOGGING")
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = _env_flag("JOIAS_OUTPUT")

def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O arquivo só é criado na primeira mensagem emitida.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = _LazyDirFileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


class _LazyDirFileHandler(logging.FileHandler):
    """FileHandler que cria o diretório de logs apenas ao abrir o arquivo."""

    def _open(self):
        Path(self.baseFilename).parent.mkdir(parents=True, exist_ok=True)
        return super()._open()


# Diretório base para logs
LOGS_DIR = Path(os.environ.get("JOIAS_LOG_DIR") or Path(os.getcwd()) / "logs")

# Loggers específicos para cada operação
transaction_logger = setup_logger(
    'joias.transactions',
    str(LOGS_DIR / 'transactions.log')
)

venda_logger = setup_logger(
    'joias.vendas',
    str(LOGS_DIR / 'vendas.log')
)

estoque_logger = setup_logger(
    'joias.estoque',
    str(LOGS_DIR / 'estoque.log')
)

database_logger = setup_logger(
    'joias.database',
    str(LOGS_DIR / 'database.log')
)

system_logger = setup_logger(
    'joias.system',
    str(LOGS_DIR / 'system.log')
)

def _ativo() -> bool:
    return ENABLE_LOGGING or ENABLE_OUTPUT

def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra uma transação completa no log.

    Args:
        operation: Tipo de operação (registrar_venda, editar_venda, ...)
        data: Dados da transação
        result: Resultado da operação (opcional)
        error: Mensagem de erro (opcional)
    """
    if not _ativo():
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")

def log_venda(action: str, venda_id: Optional[str], valor_total: float = 0.0, **kwargs) -> None:
    """
    Log específico para operações de venda.

    Args:
        action: Ação realizada (registrar, editar, excluir)
        venda_id: Identificador da venda
        valor_total: Valor total da venda
        **kwargs: Dados adicionais
    """
    if not _ativo():
        return
    log_data = {
        "action": action,
        "venda_id": venda_id,
        "valor_total": valor_total,
        **kwargs
    }
    venda_logger.info(f"VENDA_{action.upper()}: {log_data}")

def log_estoque(action: str, joia_id: Optional[str], quantidade: Optional[int] = None, **kwargs) -> None:
    """
    Log específico para alterações de estoque de uma joia.

    Args:
        action: Ação realizada (cadastro, baixa, reposicao, exclusao)
        joia_id: Identificador da joia
        quantidade: Nova quantidade em estoque (opcional)
        **kwargs: Dados adicionais
    """
    if not _ativo():
        return
    log_data = {
        "action": action,
        "joia_id": joia_id,
        "quantidade": quantidade,
        **kwargs
    }
    estoque_logger.info(f"ESTOQUE_{action.upper()}: {log_data}")

def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """
    Log específico para operações no armazenamento.

    Args:
        table: Nome da coleção
        operation: Operação (CREATE, UPDATE, DELETE, SET)
        affected_rows: Número de documentos afetados
        **kwargs: Dados adicionais
    """
    if not _ativo():
        return
    log_data = {
        "table": table,
        "operation": operation,
        "affected_rows": affected_rows,
        **kwargs
    }
    database_logger.info(f"DB_{operation}: {log_data}")

def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Avisos e erros são sempre registrados, mesmo com o logging desligado.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not _ativo() and level.lower() not in ("warning", "error"):
        return
    log_data = {
        "event": event,
        "details": details or {}
    }
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")

def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """
    Log para operações de arquivo (importação/exportação).

    Args:
        operation: Tipo de operação (import, export)
        file_path: Caminho do arquivo
        rows_processed: Número de linhas processadas
        **kwargs: Dados adicionais
    """
    if not _ativo():
        return
    log_data = {
        "operation": operation,
        "file_path": file_path,
        "rows_processed": rows_processed,
        "at": datetime.now().isoformat(),
        **kwargs
    }
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")

def get_log_summary(log_type: str = "transactions", lines: int = 100) -> Optional[str]:
    """
    Obtém um resumo dos logs recentes.

    Args:
        log_type: Tipo de log (transactions, vendas, estoque, database, system)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    if not _ativo():
        return None

    log_files = {
        "transactions": LOGS_DIR / "transactions.log",
        "vendas": LOGS_DIR / "vendas.log",
        "estoque": LOGS_DIR / "estoque.log",
        "database": LOGS_DIR / "database.log",
        "system": LOGS_DIR / "system.log"
    }

    log_file = log_files.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
            recent_lines = all_lines[-lines:] if len(all_lines) > lines else all_lines
            return ''.join(recent_lines)
    except OSError as e:
        return f"Erro ao ler log {log_type}: {str(e)}"
