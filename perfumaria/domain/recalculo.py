"""
Recalculation of a sale form.

``recompute_sale`` is called by the host (CLI, TUI) every time a field of
the sale changes. It takes the current form state and the selected
product and returns a *new* dict in which every derived field (total,
fee, net profit, prices, installment value) has been refreshed from the
calculators. Nothing is cached: the computation is cheap and idempotent.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from perfumaria.domain.catalogos import INSTALLMENT_METHOD
from perfumaria.domain.formulas import (
    calculate_fee,
    calculate_installments,
    calculate_net_profit,
    calculate_sale_total,
    round_currency,
)
from perfumaria.domain.frete import (
    calculate_adjusted_price,
    calculate_profit_without_shipping,
    calculate_totals_with_shipping,
    compare_shipping_profit,
)


def _num(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def recompute_sale(sale: Mapping[str, Any], product: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Return ``sale`` with all derived fields recomputed.

    Without shipping the sale total is clamped at zero and the fee applies
    to it. With a shipping cost the three-stage shipping pipeline runs: the
    suggested ``adjusted_price`` is filled in, ``final_product_price``
    defaults to it unless the seller already typed a price, and a
    ``shipping`` block reports the profit comparison and whether the final
    price is below the suggestion.

    When no product is selected the cost is unknown and ``net_profit`` is
    left as it was.
    """
    out: Dict[str, Any] = dict(sale)
    quantity = _int(sale.get("quantity"))
    unit_price = _num(sale.get("unit_price"))
    discount = _num(sale.get("discount"))
    shipping_cost = _num(sale.get("shipping_cost"))
    payment_method = sale.get("payment_method") or ""
    purchase_price = _num(product.get("purchase_price")) if product else 0.0

    if shipping_cost <= 0:
        total = calculate_sale_total(unit_price, quantity, discount)
        fee = calculate_fee(payment_method, total)
        out["total_value"] = round_currency(total)
        out["fee"] = round_currency(fee)
        out["adjusted_price"] = 0.0
        out["final_product_price"] = unit_price
        out["shipping"] = None
        if product:
            out["net_profit"] = round_currency(calculate_net_profit(total, purchase_price, quantity, fee))
    else:
        baseline = calculate_profit_without_shipping(unit_price, purchase_price, quantity, discount, payment_method)
        adjusted = calculate_adjusted_price(
            baseline, purchase_price, quantity, shipping_cost, payment_method, discount=discount
        )

        typed = sale.get("final_product_price")
        if typed in (None, "") or _num(typed) <= 0:
            final_price = adjusted if adjusted > 0 else unit_price
        else:
            final_price = _num(typed)

        totals = calculate_totals_with_shipping(
            final_price, purchase_price, quantity, discount, shipping_cost, payment_method
        )
        out["total_value"] = round_currency(totals["total_charged"])
        out["fee"] = round_currency(totals["fee"])
        out["adjusted_price"] = adjusted
        out["final_product_price"] = final_price
        if product:
            out["net_profit"] = round_currency(totals["net_profit"])
        out["shipping"] = {
            "profit_without_shipping": round_currency(baseline),
            "profit_with_shipping": round_currency(totals["net_profit"]),
            "total_cost": round_currency(totals["total_cost"]),
            "comparison": compare_shipping_profit(baseline, totals["net_profit"]),
            "below_suggested_price": adjusted > 0 and round_currency(final_price) < adjusted,
        }

    if payment_method == INSTALLMENT_METHOD:
        n = _int(sale.get("num_installments"), 1) or 1
        out["num_installments"] = n
        out["installment_value"] = calculate_installments(out["total_value"], n)["installment_value"]
    else:
        out["installment_value"] = 0.0

    return out
