# joias/infra/migrations.py
"""
Migrações de schema usando PRAGMA user_version.

V1: tabela de documentos (coleções chave/documento JSON)
V2: índices por coleção e data de criação
"""

from __future__ import annotations

from typing import List
from .db import connect


SCHEMA_V1: List[str] = [
    # Documentos JSON agrupados por coleção (joias, vendas, fluxo, lotes, config)
    """
    CREATE TABLE IF NOT EXISTS documento (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        colecao TEXT NOT NULL,
        id TEXT NOT NULL,
        dados TEXT NOT NULL,
        criado_em TEXT NOT NULL,
        atualizado_em TEXT NOT NULL,
        UNIQUE (colecao, id)
    );
    """,
]

SCHEMA_V2: List[str] = [
    "CREATE INDEX IF NOT EXISTS idx_documento_colecao ON documento(colecao);",
    "CREATE INDEX IF NOT EXISTS idx_documento_criado ON documento(colecao, criado_em);",
]


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.executescript(sql)


def _apply_v2(conn) -> None:
    for sql in SCHEMA_V2:
        conn.execute(sql)


def apply_migrations(db_path: str) -> None:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply_v1(conn)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1

        if ver < 2:
            _apply_v2(conn)
            conn.execute("PRAGMA user_version = 2;")
            ver = 2
