"""
Shipping-aware pricing.

When a sale carries a shipping cost, the processor fee is charged on the
product subtotal *plus* the shipping, which erodes the seller's profit.
This module implements the three-stage pipeline used to expose that:

1. ``calculate_profit_without_shipping`` establishes the baseline profit
   of the sale at the original price;
2. ``calculate_adjusted_price`` solves for the per-unit price that
   protects that baseline once shipping enters the fee base;
3. ``calculate_totals_with_shipping`` computes what is actually charged
   and earned at the price the seller finally types.

``compare_shipping_profit`` summarises the difference between stages 1
and 3. The adjusted price is a suggestion only; the final price remains
editable and a lower entry is flagged by the caller, never rejected.
"""

from __future__ import annotations

from typing import Any, Dict, Union

from perfumaria.domain.catalogos import FEE_FIXED, FEE_PERCENTAGE, PAYMENT_METHODS
from perfumaria.domain.formulas import calculate_fee, round_currency

Number = Union[int, float]

# Diferença abaixo de um centavo é considerada igual
SAME_PROFIT_TOLERANCE = 0.01


def calculate_profit_without_shipping(
    original_price: Number,
    purchase_price: Number,
    quantity: Number,
    discount: Number,
    payment_method: str,
) -> float:
    """Baseline profit of the sale as if there were no shipping.

    Unlike ``calculate_sale_total`` the subtotal is not clamped at zero.
    """
    subtotal = float(original_price) * float(quantity) - float(discount)
    fee = calculate_fee(payment_method, subtotal)
    return subtotal - float(purchase_price) * float(quantity) - fee


def calculate_adjusted_price(
    profit_without_shipping: Number,
    purchase_price: Number,
    quantity: Number,
    shipping_cost: Number,
    payment_method: str,
    discount: Number = 0,
) -> float:
    """Per-unit price that restores ``profit_without_shipping`` with shipping.

    For percentage fees the price ``P`` is the solution of::

        P*q - d - cost*q - rate*(P*q - d + shipping) = profit

    that is ``P = (profit + cost*q + d*(1 - rate) + shipping*rate) / (q*(1 - rate))``,
    so the net profit at ``P`` (see ``calculate_totals_with_shipping``)
    matches the baseline to the cent.

    For fixed fees the shipping is spread over the units without the fee:
    ``(profit + cost*q + shipping) / q``.
    Methods without a fee (or unknown ones) need no adjustment and give 0,
    as does a shipping cost of zero. The result is rounded to the cent.
    """
    shipping = float(shipping_cost)
    if shipping <= 0:
        return 0.0
    method = PAYMENT_METHODS.get(payment_method) if payment_method else None
    if method is None:
        return 0.0
    q = float(quantity)
    if q <= 0:
        return 0.0
    base = float(profit_without_shipping) + float(purchase_price) * q

    if method.fee_type == FEE_PERCENTAGE:
        rate = method.rate
        price = (base + float(discount) * (1 - rate) + shipping * rate) / (q * (1 - rate))
    elif method.fee_type == FEE_FIXED:
        price = (base + shipping) / q
    else:
        return 0.0
    return round_currency(price)


def calculate_totals_with_shipping(
    final_product_price: Number,
    purchase_price: Number,
    quantity: Number,
    discount: Number,
    shipping_cost: Number,
    payment_method: str,
) -> Dict[str, float]:
    """Amounts charged and earned at ``final_product_price`` with shipping.

    The fee is computed on the combined amount (products + shipping).
    Shipping is passed through to the carrier at cost, so it enters
    ``total_cost`` but not the cost term of ``net_profit``.
    """
    q = float(quantity)
    shipping = float(shipping_cost)
    cost_of_goods = float(purchase_price) * q

    product_subtotal = float(final_product_price) * q - float(discount)
    total_charged = product_subtotal + shipping
    fee = calculate_fee(payment_method, total_charged)
    return {
        "product_subtotal": product_subtotal,
        "total_charged": total_charged,
        "fee": fee,
        "total_cost": cost_of_goods + shipping,
        "net_profit": product_subtotal - cost_of_goods - fee,
    }


def compare_shipping_profit(profit_without_shipping: Number, profit_with_shipping: Number) -> Dict[str, Any]:
    """Compare the baseline profit with the profit once shipping is added."""
    baseline = float(profit_without_shipping)
    difference = float(profit_with_shipping) - baseline
    is_same = abs(difference) < SAME_PROFIT_TOLERANCE
    percentage = difference / abs(baseline) * 100 if baseline != 0 else 0.0
    return {
        "difference": round_currency(difference),
        "percentage_change": round_currency(percentage),
        "is_lower": not is_same and difference < 0,
        "is_higher": not is_same and difference > 0,
        "is_same": is_same,
    }
