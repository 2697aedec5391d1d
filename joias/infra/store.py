# joias/infra/store.py
"""
Armazenamento de documentos por coleção sobre SQLite.

Cada coleção (joias, vendas, fluxo, lotes, config) guarda documentos
JSON identificados por uma chave. A interface oferecida é:

- subscribe(on_change) -> unsubscribe: entrega o snapshot atual e um
  novo snapshot a cada alteração (mais recentes primeiro);
- create / update (merge parcial) / set (merge em chave fixa) / delete;
- get / listar.

O `DocumentStore` é aberto no início do processo (aplica migrações) e
fechado no fim; os casos de uso recebem a instância por parâmetro.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from collections import defaultdict
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from joias.domain.erros import PersistenceError
from joias.infra.db import connect
from joias.infra.logger import log_database_operation, log_system_event
from joias.infra.migrations import apply_migrations

Documento = Dict[str, Any]
Ouvinte = Callable[[List[Documento]], None]


def _agora() -> str:
    return datetime.now().isoformat(timespec="microseconds")


def _row_to_doc(row: sqlite3.Row) -> Documento:
    doc = json.loads(row["dados"])
    doc["id"] = row["id"]
    doc["criado_em"] = row["criado_em"]
    doc["atualizado_em"] = row["atualizado_em"]
    return doc


def _sem_meta(dados: Documento) -> Documento:
    return {k: v for k, v in dados.items() if k not in ("id", "criado_em", "atualizado_em")}


class Colecao:
    """Coleção de documentos dentro de um DocumentStore."""

    def __init__(self, store: "DocumentStore", nome: str):
        self.store = store
        self.nome = nome

    # --------- leitura ---------

    def listar(self) -> List[Documento]:
        try:
            with connect(self.store.db_path) as c:
                rows = c.execute(
                    """
                    SELECT id, dados, criado_em, atualizado_em
                    FROM documento
                    WHERE colecao = ?
                    ORDER BY criado_em DESC, seq DESC
                    """,
                    (self.nome,),
                ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Falha ao ler {self.nome}: {e}", colecao=self.nome) from e
        return [_row_to_doc(r) for r in rows]

    def get(self, doc_id: str) -> Optional[Documento]:
        try:
            with connect(self.store.db_path) as c:
                row = c.execute(
                    "SELECT id, dados, criado_em, atualizado_em FROM documento WHERE colecao = ? AND id = ?",
                    (self.nome, doc_id),
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Falha ao ler {self.nome}/{doc_id}: {e}", self.nome, doc_id) from e
        return _row_to_doc(row) if row else None

    # --------- escrita ---------

    def create(self, dados: Documento) -> str:
        doc_id = uuid.uuid4().hex
        agora = _agora()
        try:
            with connect(self.store.db_path) as c:
                c.execute(
                    """
                    INSERT INTO documento (colecao, id, dados, criado_em, atualizado_em)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (self.nome, doc_id, json.dumps(_sem_meta(dados), ensure_ascii=False), agora, agora),
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Falha ao criar em {self.nome}: {e}", colecao=self.nome) from e
        log_database_operation(self.nome, "CREATE", 1, id=doc_id)
        self.store._notificar(self.nome)
        return doc_id

    def update(self, doc_id: str, parcial: Documento) -> None:
        """Merge parcial; documento inexistente levanta PersistenceError."""
        try:
            with connect(self.store.db_path) as c:
                row = c.execute(
                    "SELECT dados FROM documento WHERE colecao = ? AND id = ?",
                    (self.nome, doc_id),
                ).fetchone()
                if row is None:
                    raise PersistenceError(
                        f"Documento {self.nome}/{doc_id} não existe", self.nome, doc_id
                    )
                dados = json.loads(row["dados"])
                dados.update(_sem_meta(parcial))
                c.execute(
                    """
                    UPDATE documento SET dados = ?, atualizado_em = ?
                    WHERE colecao = ? AND id = ?
                    """,
                    (json.dumps(dados, ensure_ascii=False), _agora(), self.nome, doc_id),
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Falha ao atualizar {self.nome}/{doc_id}: {e}", self.nome, doc_id) from e
        log_database_operation(self.nome, "UPDATE", 1, id=doc_id, campos=sorted(parcial))
        self.store._notificar(self.nome)

    def set(self, doc_id: str, dados: Documento, merge: bool = True) -> None:
        """Grava em chave fixa, criando o documento se necessário."""
        agora = _agora()
        try:
            with connect(self.store.db_path) as c:
                row = c.execute(
                    "SELECT dados FROM documento WHERE colecao = ? AND id = ?",
                    (self.nome, doc_id),
                ).fetchone()
                if row is None:
                    c.execute(
                        """
                        INSERT INTO documento (colecao, id, dados, criado_em, atualizado_em)
                        VALUES (?, ?, ?, ?, ?)
                        """,
                        (self.nome, doc_id, json.dumps(_sem_meta(dados), ensure_ascii=False), agora, agora),
                    )
                else:
                    atual = json.loads(row["dados"]) if merge else {}
                    atual.update(_sem_meta(dados))
                    c.execute(
                        """
                        UPDATE documento SET dados = ?, atualizado_em = ?
                        WHERE colecao = ? AND id = ?
                        """,
                        (json.dumps(atual, ensure_ascii=False), agora, self.nome, doc_id),
                    )
        except sqlite3.Error as e:
            raise PersistenceError(f"Falha ao gravar {self.nome}/{doc_id}: {e}", self.nome, doc_id) from e
        log_database_operation(self.nome, "SET", 1, id=doc_id)
        self.store._notificar(self.nome)

    def delete(self, doc_id: str) -> None:
        try:
            with connect(self.store.db_path) as c:
                cur = c.execute(
                    "DELETE FROM documento WHERE colecao = ? AND id = ?",
                    (self.nome, doc_id),
                )
                removidos = cur.rowcount
        except sqlite3.Error as e:
            raise PersistenceError(f"Falha ao excluir {self.nome}/{doc_id}: {e}", self.nome, doc_id) from e
        log_database_operation(self.nome, "DELETE", removidos, id=doc_id)
        self.store._notificar(self.nome)

    # --------- assinaturas ---------

    def subscribe(self, on_change: Ouvinte) -> Callable[[], None]:
        """Registra um ouvinte e entrega imediatamente o snapshot atual."""
        self.store._assinantes[self.nome].append(on_change)
        on_change(self.listar())

        def unsubscribe() -> None:
            ouvintes = self.store._assinantes.get(self.nome, [])
            if on_change in ouvintes:
                ouvintes.remove(on_change)

        return unsubscribe


class DocumentStore:
    """Contexto de armazenamento compartilhado pelos casos de uso."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._assinantes: Dict[str, List[Ouvinte]] = defaultdict(list)
        self._colecoes: Dict[str, Colecao] = {}
        self.aberto = False

    def open(self) -> "DocumentStore":
        apply_migrations(self.db_path)
        self.aberto = True
        log_system_event("store_open", {"db_path": self.db_path})
        return self

    def close(self) -> None:
        self._assinantes.clear()
        self.aberto = False
        log_system_event("store_close", {"db_path": self.db_path})

    def __enter__(self) -> "DocumentStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def colecao(self, nome: str) -> Colecao:
        if nome not in self._colecoes:
            self._colecoes[nome] = Colecao(self, nome)
        return self._colecoes[nome]

    def _notificar(self, nome: str) -> None:
        ouvintes = list(self._assinantes.get(nome, []))
        if not ouvintes:
            return
        snapshot = self.colecao(nome).listar()
        for ouvinte in ouvintes:
            ouvinte(snapshot)
