# perfumaria/infra/instances.py
"""
Montagem dos repositórios concretos (SQLite) para os adaptadores.

Os casos de uso recebem os repositórios como argumento; CLI e TUI usam
``abrir_repositorios`` para obtê-los a partir do caminho do banco.
"""

from __future__ import annotations

from dataclasses import dataclass

from perfumaria.config import DB_PATH
from perfumaria.infra.migrations import apply_migrations
from perfumaria.infra.repositories import ClienteRepo, ParcelaRepo, ProdutoRepo, VendaRepo


@dataclass
class Repositorios:
    produtos: ProdutoRepo
    clientes: ClienteRepo
    vendas: VendaRepo
    parcelas: ParcelaRepo


def abrir_repositorios(db_path: str = DB_PATH, migrar: bool = True) -> Repositorios:
    """Instancia os repositórios, aplicando as migrações pendentes."""
    if migrar:
        apply_migrations(db_path)
    return Repositorios(
        produtos=ProdutoRepo(db_path),
        clientes=ClienteRepo(db_path),
        vendas=VendaRepo(db_path),
        parcelas=ParcelaRepo(db_path),
    )
