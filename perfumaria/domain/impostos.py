# perfumaria/domain/impostos.py
"""
Estimativa do carnê-leão (IR mensal de pessoa física).

Regras aplicadas:
- base de cálculo = faturamento × 0,80 (dedução simplificada de 20%);
- a primeira faixa da tabela 2025 cujo limite superior cobre a base é
  aplicada: ``IR = base × alíquota − parcela a deduzir``, nunca negativo;
- alíquota efetiva = IR / faturamento × 100.

Valores monetários são arredondados para centavos; ``applied_rate`` e
``effective_rate`` já vêm em percentual. A projeção anual multiplica os
valores mensais por 12, pois o carnê-leão é apurado mês a mês.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from perfumaria.domain.catalogos import IR_TAX_BRACKETS_2025, SIMPLIFIED_DEDUCTION, FaixaIR
from perfumaria.domain.formulas import round_currency

Number = Union[int, float]


# Cenários de conferência (faturamento, base, IR) usados na tela financeira
IR_REFERENCE_SCENARIOS = (
    {"revenue": 3000.0, "base": 2400.0, "ir": 10.56},
    {"revenue": 5000.0, "base": 4000.0, "ir": 218.56},
    {"revenue": 11400.0, "base": 9120.0, "ir": 1612.00},
)


def _find_bracket(calculation_base: float) -> Optional[tuple[int, FaixaIR]]:
    for idx, bracket in enumerate(IR_TAX_BRACKETS_2025, start=1):
        if calculation_base <= bracket.max:
            return idx, bracket
    return None


def calculate_monthly_ir(monthly_revenue: Number) -> Dict[str, float]:
    """Calcula o IR devido no mês para um faturamento bruto.

    Returns:
        Dicionário com ``monthly_revenue``, ``calculation_base``, ``ir_due``,
        ``applied_rate`` (%) e ``effective_rate`` (%).
    """
    revenue = float(monthly_revenue)
    calculation_base = revenue * (1 - SIMPLIFIED_DEDUCTION)

    ir_due = 0.0
    applied_rate = 0.0
    found = _find_bracket(calculation_base)
    if found is not None:
        _, bracket = found
        ir_due = calculation_base * bracket.rate - bracket.deduction
        applied_rate = bracket.rate

    ir_due = max(0.0, ir_due)
    effective_rate = ir_due / revenue * 100 if revenue > 0 else 0.0

    return {
        "monthly_revenue": round_currency(revenue),
        "calculation_base": round_currency(calculation_base),
        "ir_due": round_currency(ir_due),
        "applied_rate": applied_rate * 100,
        "effective_rate": round_currency(effective_rate),
    }


def calculate_ir_with_real_costs(monthly_revenue: Number, real_costs: Number) -> Dict[str, float]:
    """IR mensal acrescido da visão de lucro real (faturamento − custos)."""
    result: Dict[str, float] = dict(calculate_monthly_ir(monthly_revenue))
    real_profit = float(monthly_revenue) - float(real_costs)
    ir_due = result["ir_due"]
    on_profit = ir_due / real_profit * 100 if real_profit > 0 else 0.0
    result.update({
        "real_costs": round_currency(real_costs),
        "real_profit": round_currency(real_profit),
        "profit_after_ir": round_currency(real_profit - ir_due),
        "ir_percentage_on_profit": round_currency(on_profit),
    })
    return result


def calculate_annual_ir_projection(monthly_revenue: Number) -> Dict[str, float]:
    """Projeção anual linear (12 × valores mensais)."""
    monthly = calculate_monthly_ir(monthly_revenue)
    return {
        "monthly_ir_due": monthly["ir_due"],
        "annual_revenue": monthly["monthly_revenue"] * 12,
        "annual_calculation_base": monthly["calculation_base"] * 12,
        "annual_ir_due": monthly["ir_due"] * 12,
        "effective_rate": monthly["effective_rate"],
    }


def get_bracket_info(calculation_base: Number) -> Optional[Dict[str, Any]]:
    """Descreve a faixa em que a base de cálculo se enquadra."""
    found = _find_bracket(float(calculation_base))
    if found is None:
        return None
    number, bracket = found
    return {
        "bracket_number": number,
        "rate": bracket.rate * 100,
        "deduction": bracket.deduction,
        "is_exempt": bracket.rate == 0,
    }
