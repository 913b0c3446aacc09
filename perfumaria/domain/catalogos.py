# perfumaria/domain/catalogos.py
"""
Catálogos estáticos do domínio.

Formas de pagamento (com a taxa cobrada pelo processador), tabela
progressiva do IR 2025, tipos de entrega e os status possíveis de
vendas e parcelas. Os catálogos são somente leitura: mapeamentos
envoltos em ``MappingProxyType`` e tuplas de dataclasses congeladas.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple


FEE_PERCENTAGE = "percentage"
FEE_FIXED = "fixed"
FEE_NONE = "none"


@dataclass(frozen=True)
class FormaPagamento:
    """Forma de pagamento e sua taxa.

    ``rate`` é uma fração (0.0099 = 0,99%) para taxas percentuais, um valor
    em reais para taxas fixas e é ignorado quando ``fee_type`` é ``none``.
    """
    label: str
    rate: float
    fee_type: str


@dataclass(frozen=True)
class FaixaIR:
    """Faixa da tabela progressiva (limite superior inclusivo)."""
    max: float
    rate: float
    deduction: float


@dataclass(frozen=True)
class TipoEntrega:
    label: str
    has_shipping: bool


PAYMENT_METHODS: Mapping[str, FormaPagamento] = MappingProxyType({
    "PIX_MP": FormaPagamento("Pix via Link MP", 0.0099, FEE_PERCENTAGE),
    "CREDIT_NOW": FormaPagamento("Cartão Crédito na hora (Link MP)", 0.0498, FEE_PERCENTAGE),
    "CREDIT_14": FormaPagamento("Cartão Crédito 14 dias (Link MP)", 0.0449, FEE_PERCENTAGE),
    "CREDIT_30": FormaPagamento("Cartão Crédito 30 dias (Link MP)", 0.0399, FEE_PERCENTAGE),
    "DEBIT_CAIXA": FormaPagamento("Débito Virtual Caixa (Link MP)", 0.0399, FEE_PERCENTAGE),
    "BOLETO": FormaPagamento("Boleto (Link MP)", 3.49, FEE_FIXED),
    "PIX_INSTALLMENT": FormaPagamento("Pix Parcelado Conhecidos", 0.0, FEE_NONE),
    "CASH": FormaPagamento("Dinheiro", 0.0, FEE_NONE),
})

# Única forma de pagamento que gera parcelas
INSTALLMENT_METHOD = "PIX_INSTALLMENT"

# Dedução simplificada do carnê-leão
SIMPLIFIED_DEDUCTION = 0.20

IR_TAX_BRACKETS_2025: Tuple[FaixaIR, ...] = (
    FaixaIR(2259.20, 0.0, 0.0),
    FaixaIR(2826.65, 0.075, 169.44),
    FaixaIR(4664.68, 0.15, 381.44),
    FaixaIR(5839.45, 0.225, 662.77),
    FaixaIR(float("inf"), 0.275, 896.00),
)

DELIVERY_TYPES: Mapping[str, TipoEntrega] = MappingProxyType({
    "RETIRADA": TipoEntrega("Retirada em mãos", False),
    "ENTREGA_PROPRIA": TipoEntrega("Entrega própria", True),
    "CORREIOS": TipoEntrega("Correios / Transportadora", True),
})

SALE_STATUSES: Tuple[str, ...] = ("Pendente", "Pago", "Entregue")
# Status que baixam estoque quando a venda é criada
STOCK_CONSUMING_STATUSES: Tuple[str, ...] = ("Pago", "Entregue")

INSTALLMENT_STATUSES: Tuple[str, ...] = ("Pendente", "Recebida", "Atrasada")
