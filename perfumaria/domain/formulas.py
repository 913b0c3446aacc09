"""
Financial formulas for the perfume resale operation.

These functions compute processor fees, product margin, sale totals,
net profit and installment values. They are the building blocks used
by the shipping-aware pricing (``frete``) and by the sale recomputation
performed on every form edit.

All functions are pure and never raise for numeric input: every
division by zero or unknown payment method is guarded with an explicit
fallback of ``0``. Input validity (required fields, stock, discount
limits) is checked earlier by ``perfumaria.domain.policies``.
"""

from __future__ import annotations

from math import floor
from typing import Dict, List, Union

from perfumaria.domain.catalogos import FEE_FIXED, FEE_PERCENTAGE, PAYMENT_METHODS

Number = Union[int, float]


def round_currency(value: Number, places: int = 2) -> float:
    """Round half-up to ``places`` decimals.

    Python's ``round`` uses banker's rounding, so 0.125 would become 0.12.
    Money is rounded the way a cashier does it: ``floor(x * 10^p + 0.5) / 10^p``.
    """
    factor = 10 ** places
    return floor(float(value) * factor + 0.5) / factor


def calculate_fee(payment_method: str, amount: Number) -> float:
    """Return the processor fee in R$ for ``amount`` paid with ``payment_method``.

    - unknown method -> 0
    - ``percentage`` -> ``amount * rate``
    - ``fixed``      -> ``rate`` regardless of the amount
    - ``none``       -> 0

    Negative amounts are passed through (a percentage fee becomes negative).
    """
    method = PAYMENT_METHODS.get(payment_method) if payment_method else None
    if method is None:
        return 0.0
    if method.fee_type == FEE_PERCENTAGE:
        return float(amount) * method.rate
    if method.fee_type == FEE_FIXED:
        return float(method.rate)
    return 0.0


def calculate_margin(purchase_price: Number, sale_price: Number) -> float:
    """Margin over cost, in percent.

    A zero (or negative) purchase price yields ``0`` instead of a division
    by zero, which also reports 0% for products that genuinely cost nothing.
    Selling below cost gives a negative margin.
    """
    purchase = float(purchase_price)
    if purchase <= 0:
        return 0.0
    return (float(sale_price) - purchase) / purchase * 100


def calculate_sale_total(unit_price: Number, quantity: Number, discount: Number) -> float:
    """Total of a sale without shipping, clamped at zero."""
    total = float(unit_price) * float(quantity) - float(discount)
    return max(0.0, total)


def calculate_net_profit(
    sale_total: Number,
    purchase_price: Number,
    quantity: Number,
    fee: Number,
) -> float:
    """Revenue minus cost of goods minus processor fee. May be negative."""
    total_cost = float(purchase_price) * float(quantity)
    return float(sale_total) - total_cost - float(fee)


def calculate_installments(total_value: Number, num_installments: int) -> Dict[str, Number]:
    """Split ``total_value`` in equal installments rounded to the cent.

    The remainder is not distributed: 1000 in 3 gives 333.33 each, which
    adds up to 999.99. ``split_installment_values`` is the variant used
    when the installments are actually stored.
    """
    n = int(num_installments)
    if n <= 0:
        return {"num_installments": n, "installment_value": 0.0}
    return {
        "num_installments": n,
        "installment_value": round_currency(float(total_value) / n),
    }


def split_installment_values(total_value: Number, num_installments: int) -> List[float]:
    """Values of each stored installment; the last one absorbs the rounding."""
    n = int(num_installments)
    if n <= 0:
        return []
    value = calculate_installments(total_value, n)["installment_value"]
    last = round_currency(float(total_value) - value * (n - 1))
    return [value] * (n - 1) + [last]
