# joias/usecases/autenticacao.py
"""
UC: Senha de acesso.

Uma senha única para o sistema. O hash SHA-256 (hex) fica no documento
'auth' da coleção 'config'; na primeira execução é gravado o hash da
senha padrão.
"""

from __future__ import annotations

import hashlib
from typing import Optional

from joias.config import DEFAULTS
from joias.domain.erros import ValidationError
from joias.infra.logger import log_system_event
from joias.infra.repositories import ConfigRepo
from joias.infra.store import DocumentStore

CHAVE_AUTH = "auth"


def sha256_hex(texto: str) -> str:
    return hashlib.sha256(texto.encode("utf-8")).hexdigest()


def get_password_hash(store: DocumentStore) -> Optional[str]:
    doc = ConfigRepo(store).get(CHAVE_AUTH)
    return (doc or {}).get("password_hash")


def garantir_senha_padrao(store: DocumentStore) -> str:
    """Grava o hash da senha padrão se ainda não houver senha."""
    atual = get_password_hash(store)
    if atual:
        return atual
    novo = sha256_hex(DEFAULTS.senha_padrao)
    ConfigRepo(store).set(CHAVE_AUTH, {"password_hash": novo})
    log_system_event("senha_padrao_gravada", level="warning")
    return novo


def verificar_senha(store: DocumentStore, senha: str) -> bool:
    ok = sha256_hex(senha or "") == garantir_senha_padrao(store)
    if not ok:
        log_system_event("senha_incorreta", level="warning")
    return ok


def alterar_senha(store: DocumentStore, atual: str, nova: str, confirmacao: str) -> None:
    if not verificar_senha(store, atual):
        raise ValidationError("Senha atual incorreta", campo="atual")
    if len(nova or "") < DEFAULTS.tamanho_minimo_senha:
        raise ValidationError(
            f"A nova senha deve ter pelo menos {DEFAULTS.tamanho_minimo_senha} caracteres",
            campo="nova",
        )
    if nova != confirmacao:
        raise ValidationError("A confirmação não confere com a nova senha", campo="confirmacao")
    ConfigRepo(store).set(CHAVE_AUTH, {"password_hash": sha256_hex(nova)})
    log_system_event("senha_alterada")
