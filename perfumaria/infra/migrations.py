# perfumaria/infra/migrations.py
"""
Migrações de schema usando PRAGMA user_version.

V1: cadastros (produto, cliente), vendas e parcelas
V2: colunas de entrega/frete na venda (tipo de entrega, frete, preço final
    e preço ajustado)
"""

from __future__ import annotations

from typing import List
from .db import connect


SCHEMA_V1: List[str] = [
    # Produtos (perfumes)
    """
    CREATE TABLE IF NOT EXISTS produto (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        purchase_price REAL DEFAULT 0,
        sale_price REAL DEFAULT 0,
        margin REAL DEFAULT 0,
        stock INTEGER DEFAULT 0,
        supplier TEXT
    );
    """,
    # Clientes
    """
    CREATE TABLE IF NOT EXISTS cliente (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        cpf TEXT,
        phone TEXT,
        address TEXT,
        registration_date TEXT
    );
    """,
    # Vendas (sem FK para produto/cliente: exclusões de cadastro não apagam vendas)
    """
    CREATE TABLE IF NOT EXISTS venda (
        id TEXT PRIMARY KEY,
        date TEXT,
        client_id TEXT,
        product_id TEXT,
        quantity INTEGER,
        unit_price REAL,
        discount REAL DEFAULT 0,
        total_value REAL,
        payment_method TEXT,
        fee REAL,
        net_profit REAL,
        status TEXT,
        num_installments INTEGER DEFAULT 1,
        installment_value REAL DEFAULT 0
    );
    """,
    # Parcelas do Pix Parcelado
    """
    CREATE TABLE IF NOT EXISTS parcela (
        id TEXT PRIMARY KEY,
        sale_id TEXT NOT NULL,
        installment_number INTEGER,
        total_installments INTEGER,
        value REAL,
        due_date TEXT,
        payment_date TEXT,
        status TEXT DEFAULT 'Pendente',
        FOREIGN KEY (sale_id) REFERENCES venda(id) ON DELETE CASCADE
    );
    """,
]


def _ensure_column(conn, table: str, column: str, ddl: str) -> None:
    """Adiciona coluna se não existir."""
    cur = conn.execute(f"PRAGMA table_info({table});")
    cols = [r[1] for r in cur.fetchall()]  # r[1] é o nome da coluna
    if column not in cols:
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {ddl};")


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.executescript(sql)


def _apply_v2(conn) -> None:
    _ensure_column(conn, "venda", "delivery_type", "delivery_type TEXT DEFAULT 'RETIRADA'")
    _ensure_column(conn, "venda", "shipping_cost", "shipping_cost REAL DEFAULT 0")
    _ensure_column(conn, "venda", "final_product_price", "final_product_price REAL DEFAULT 0")
    _ensure_column(conn, "venda", "adjusted_price", "adjusted_price REAL DEFAULT 0")


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


def schema_version(db_path: str) -> int:
    with connect(db_path) as conn:
        return conn.execute("PRAGMA user_version;").fetchone()[0] or 0
