# joias/domain/erros.py
"""
Erros do domínio.

- ValidationError: dado obrigatório ausente, valor não positivo, divisão
  que não soma 100, registro inexistente. Levantado antes de qualquer escrita.
- InsufficientStockError: quantidade pedida maior que o estoque atual.
- PersistenceError: falha de escrita/leitura no armazenamento.
"""

from __future__ import annotations

from typing import Optional


class JoiasError(Exception):
    """Base de todos os erros do sistema."""


class ValidationError(JoiasError, ValueError):
    def __init__(self, mensagem: str, campo: Optional[str] = None):
        super().__init__(mensagem)
        self.campo = campo


class InsufficientStockError(JoiasError):
    def __init__(self, joia_id: str, descricao: str, disponivel: int, solicitado: int):
        self.joia_id = joia_id
        self.descricao = descricao
        self.disponivel = disponivel
        self.solicitado = solicitado
        super().__init__(
            f"Estoque insuficiente para {descricao}. "
            f"Disponível: {disponivel}, solicitado: {solicitado}"
        )


class PersistenceError(JoiasError):
    def __init__(self, mensagem: str, colecao: Optional[str] = None, doc_id: Optional[str] = None):
        super().__init__(mensagem)
        self.colecao = colecao
        self.doc_id = doc_id
