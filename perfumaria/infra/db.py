# perfumaria/infra/db.py
"""
Conexão SQLite usada pelos repositórios.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


@contextmanager
def connect(db_path: str) -> Iterator[sqlite3.Connection]:
    """
    Abre o banco da perfumaria e devolve a conexão:
    - cria a pasta do arquivo, se preciso
    - row_factory = sqlite3.Row e foreign_keys ON
    - cada bloco ``with`` é uma leitura/escrita completa: commit ao sair,
      rollback se algo falhar
    """
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
