# perfumaria/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observação importante:
- Os repositórios aceitam dicionários; as dataclasses são opcionais
  e servem para tipagem/clareza. Use-as quando fizer sentido.
- Campos derivados (margem, total, taxa, lucro) nunca são digitados:
  vêm sempre das funções de cálculo.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Produto:
    """Perfume em estoque."""
    id: str
    name: str
    purchase_price: float = 0.0
    sale_price: float = 0.0
    margin: float = 0.0              # derivada de purchase/sale
    stock: int = 0
    supplier: Optional[str] = None


@dataclass
class Cliente:
    id: str
    name: str
    cpf: str                          # 11 dígitos, sem máscara
    phone: str = ""
    address: str = ""
    registration_date: Optional[str] = None   # ISO (YYYY-MM-DD)


@dataclass
class Venda:
    """Venda de um produto para um cliente."""
    id: str
    date: str
    client_id: str
    product_id: str
    quantity: int = 1
    unit_price: float = 0.0
    discount: float = 0.0
    delivery_type: str = "RETIRADA"
    shipping_cost: float = 0.0
    final_product_price: float = 0.0
    adjusted_price: float = 0.0
    total_value: float = 0.0
    payment_method: str = ""
    fee: float = 0.0
    net_profit: float = 0.0
    status: str = "Pendente"         # 'Pendente' | 'Pago' | 'Entregue'
    num_installments: int = 1
    installment_value: float = 0.0


@dataclass
class Parcela:
    id: str
    sale_id: str
    installment_number: int
    total_installments: int
    value: float
    due_date: Optional[str] = None
    payment_date: Optional[str] = None
    status: str = "Pendente"         # 'Pendente' | 'Recebida' | 'Atrasada'
