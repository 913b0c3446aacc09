# perfumaria/usecases/financeiro.py
"""
UC: Estimativa de IR (carnê-leão) a partir de valores informados ou das
vendas recentes.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, Iterable, Mapping, Optional

from perfumaria.config import DEFAULTS
from perfumaria.domain.formulas import round_currency
from perfumaria.domain.impostos import (
    calculate_annual_ir_projection,
    calculate_ir_with_real_costs,
    calculate_monthly_ir,
    get_bracket_info,
)
from perfumaria.infra.logger import log_system_event


def calcular_ir(monthly_revenue: float, real_costs: Optional[float] = None) -> Optional[Dict[str, Any]]:
    """IR do mês com projeção anual e a faixa aplicada.

    Usa a visão com custos reais quando ``real_costs`` é positivo.
    Faturamento zero ou negativo não gera cálculo (``None``).
    """
    if monthly_revenue is None or monthly_revenue <= 0:
        return None
    if real_costs is not None and real_costs > 0:
        result = calculate_ir_with_real_costs(monthly_revenue, real_costs)
    else:
        result = calculate_monthly_ir(monthly_revenue)
    result["annual_projection"] = calculate_annual_ir_projection(monthly_revenue)
    result["bracket"] = get_bracket_info(result["calculation_base"])
    return result


def receita_e_custos_recentes(
    sales: Iterable[Mapping[str, Any]],
    hoje: Optional[date] = None,
    dias: int = DEFAULTS.ir_window_days,
) -> Dict[str, float]:
    """Faturamento e custos das vendas dos últimos ``dias`` dias.

    O custo de cada venda é a diferença entre o preço unitário e o preço
    final praticado (multiplicada pela quantidade) somada ao frete.
    """
    inicio = ((hoje or date.today()) - timedelta(days=dias)).isoformat()
    revenue = 0.0
    costs = 0.0
    for sale in sales:
        if (sale.get("date") or "") < inicio:
            continue
        revenue += float(sale.get("total_value") or 0)
        unit_price = float(sale.get("unit_price") or 0)
        final_price = float(sale.get("final_product_price") or 0) or unit_price
        costs += (unit_price - final_price) * int(sale.get("quantity") or 0)
        costs += float(sale.get("shipping_cost") or 0)
    return {"revenue": round_currency(revenue), "costs": round_currency(costs)}


def calcular_ir_das_vendas(
    sales: Iterable[Mapping[str, Any]],
    hoje: Optional[date] = None,
    dias: int = DEFAULTS.ir_window_days,
) -> Dict[str, Any]:
    """Calcula o IR com base nas vendas recentes (cálculo automático)."""
    base = receita_e_custos_recentes(sales, hoje, dias)
    log_system_event("calcular_ir_das_vendas", {"dias": dias, **base})
    return {**base, "result": calcular_ir(base["revenue"], base["costs"])}
