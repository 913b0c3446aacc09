# perfumaria/domain/ports.py
"""
Portas (protocolos) de persistência.

Os casos de uso recebem os repositórios como argumento e dependem apenas
destes contratos; a implementação em SQLite fica em
``perfumaria.infra.repositories``. As funções de cálculo não dependem de
nenhum repositório: recebem as entidades já carregadas.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol


Registro = Dict[str, Any]


class CrudRepository(Protocol):
    """Operações comuns a todas as entidades (substituição por id)."""

    def get_all(self) -> List[Registro]: ...

    def get(self, item_id: str) -> Optional[Registro]: ...

    def add(self, row: Any) -> Registro: ...

    def update(self, item_id: str, changes: Any) -> Optional[Registro]: ...

    def delete(self, item_id: str) -> None: ...


class ProdutoRepository(CrudRepository, Protocol):

    def next_id(self) -> str: ...

    def search(self, term: str) -> List[Registro]: ...


class ClienteRepository(CrudRepository, Protocol):

    def next_id(self) -> str: ...

    def get_by_cpf(self, cpf: str) -> Optional[Registro]: ...


class VendaRepository(CrudRepository, Protocol):

    def next_id(self) -> str: ...


class ParcelaRepository(CrudRepository, Protocol):

    def add_many(self, rows: Iterable[Any]) -> List[Registro]: ...

    def get_by_sale(self, sale_id: str) -> List[Registro]: ...

    def delete_by_sale(self, sale_id: str) -> int: ...
