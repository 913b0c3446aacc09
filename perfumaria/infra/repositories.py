# perfumaria/infra/repositories.py
"""
Repositórios (DAO) para acesso e manipulação de dados no SQLite.

Classes:
- ProdutoRepo
- ClienteRepo
- VendaRepo
- ParcelaRepo

Todos aceitam dicionários ou dataclasses de ``perfumaria.domain.models``
e devolvem dicionários. ``update`` mescla as alterações no registro
existente e regrava a linha inteira (substituição por id).
"""

from __future__ import annotations

import re
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .db import connect


# -------------------------
# Helpers
# -------------------------

def _as_dict(row: Any) -> Dict[str, Any]:
    if isinstance(row, dict):
        return row
    if is_dataclass(row):
        return asdict(row)
    raise TypeError("row must be dict or dataclass")


def generate_id(prefix: str, ids: Iterable[str]) -> str:
    """Próximo id sequencial no formato ``<prefixo><NNN>`` (P001, C001, V001).

    Ids que não seguem o padrão do prefixo são ignorados.
    """
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    nums = [int(m.group(1)) for m in (pattern.match(str(i)) for i in ids) if m]
    next_num = max(nums) + 1 if nums else 1
    return f"{prefix}{next_num:03d}"


class _TabelaRepo:
    """Operações CRUD de uma tabela com chave primária ``id``."""

    table: str = ""
    columns: Tuple[str, ...] = ()
    id_prefix: str = ""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _payload(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {c: row.get(c) for c in self.columns}

    def get_all(self) -> List[Dict[str, Any]]:
        with connect(self.db_path) as c:
            cur = c.execute(f"SELECT {', '.join(self.columns)} FROM {self.table} ORDER BY id")
            return [dict(r) for r in cur.fetchall()]

    def get(self, item_id: str) -> Optional[Dict[str, Any]]:
        with connect(self.db_path) as c:
            row = c.execute(
                f"SELECT {', '.join(self.columns)} FROM {self.table} WHERE id = ?", (item_id,)
            ).fetchone()
            return dict(row) if row else None

    def add(self, row: Any) -> Dict[str, Any]:
        data = dict(_as_dict(row))
        if not data.get("id"):
            data["id"] = self.next_id()
        payload = self._payload(data)
        cols = ", ".join(payload.keys())
        vals = ", ".join(f":{k}" for k in payload.keys())
        with connect(self.db_path) as c:
            c.execute(f"INSERT INTO {self.table} ({cols}) VALUES ({vals})", payload)
        return payload

    def update(self, item_id: str, changes: Any) -> Optional[Dict[str, Any]]:
        current = self.get(item_id)
        if current is None:
            return None
        merged = {**current, **{k: v for k, v in _as_dict(changes).items() if k in self.columns}}
        merged["id"] = item_id
        sets = ", ".join(f"{c} = :{c}" for c in self.columns if c != "id")
        with connect(self.db_path) as c:
            c.execute(f"UPDATE {self.table} SET {sets} WHERE id = :id", merged)
        return merged

    def delete(self, item_id: str) -> None:
        with connect(self.db_path) as c:
            c.execute(f"DELETE FROM {self.table} WHERE id = ?", (item_id,))

    def next_id(self) -> str:
        with connect(self.db_path) as c:
            ids = [r[0] for r in c.execute(f"SELECT id FROM {self.table}").fetchall()]
        return generate_id(self.id_prefix, ids)


# -------------------------
# Produto
# -------------------------

class ProdutoRepo(_TabelaRepo):
    table = "produto"
    columns = ("id", "name", "purchase_price", "sale_price", "margin", "stock", "supplier")
    id_prefix = "P"

    def search(self, term: str) -> List[Dict[str, Any]]:
        """Busca por nome ou id, sem diferenciar maiúsculas."""
        like = f"%{(term or '').lower()}%"
        with connect(self.db_path) as c:
            cur = c.execute(
                f"""SELECT {', '.join(self.columns)} FROM produto
                    WHERE lower(name) LIKE ? OR lower(id) LIKE ?
                    ORDER BY id""",
                (like, like),
            )
            return [dict(r) for r in cur.fetchall()]


# -------------------------
# Cliente
# -------------------------

class ClienteRepo(_TabelaRepo):
    table = "cliente"
    columns = ("id", "name", "cpf", "phone", "address", "registration_date")
    id_prefix = "C"

    def get_by_cpf(self, cpf: str) -> Optional[Dict[str, Any]]:
        with connect(self.db_path) as c:
            row = c.execute(
                f"SELECT {', '.join(self.columns)} FROM cliente WHERE cpf = ?", (cpf,)
            ).fetchone()
            return dict(row) if row else None


# -------------------------
# Venda
# -------------------------

class VendaRepo(_TabelaRepo):
    table = "venda"
    columns = (
        "id", "date", "client_id", "product_id", "quantity", "unit_price", "discount",
        "delivery_type", "shipping_cost", "final_product_price", "adjusted_price",
        "total_value", "payment_method", "fee", "net_profit", "status",
        "num_installments", "installment_value",
    )
    id_prefix = "V"


# -------------------------
# Parcela
# -------------------------

class ParcelaRepo(_TabelaRepo):
    table = "parcela"
    columns = (
        "id", "sale_id", "installment_number", "total_installments", "value",
        "due_date", "payment_date", "status",
    )

    def get_all(self) -> List[Dict[str, Any]]:
        with connect(self.db_path) as c:
            cur = c.execute(
                f"SELECT {', '.join(self.columns)} FROM parcela ORDER BY sale_id, installment_number"
            )
            return [dict(r) for r in cur.fetchall()]

    def add_many(self, rows: Iterable[Any]) -> List[Dict[str, Any]]:
        payloads = [self._payload(_as_dict(r)) for r in rows]
        if not payloads:
            return []
        cols = ", ".join(self.columns)
        vals = ", ".join(f":{k}" for k in self.columns)
        with connect(self.db_path) as c:
            c.executemany(f"INSERT INTO parcela ({cols}) VALUES ({vals})", payloads)
        return payloads

    def get_by_sale(self, sale_id: str) -> List[Dict[str, Any]]:
        with connect(self.db_path) as c:
            cur = c.execute(
                f"""SELECT {', '.join(self.columns)} FROM parcela
                    WHERE sale_id = ? ORDER BY installment_number""",
                (sale_id,),
            )
            return [dict(r) for r in cur.fetchall()]

    def delete_by_sale(self, sale_id: str) -> int:
        with connect(self.db_path) as c:
            cur = c.execute("DELETE FROM parcela WHERE sale_id = ?", (sale_id,))
            return cur.rowcount
