from math import isclose

import pytest

from perfumaria.domain.impostos import (
    IR_REFERENCE_SCENARIOS,
    calculate_monthly_ir,
    calculate_ir_with_real_costs,
    calculate_annual_ir_projection,
    get_bracket_info,
)


@pytest.mark.parametrize("cenario", IR_REFERENCE_SCENARIOS)
def test_cenarios_de_referencia(cenario):
    res = calculate_monthly_ir(cenario["revenue"])
    assert isclose(res["calculation_base"], cenario["base"], abs_tol=1e-9)
    assert isclose(res["ir_due"], cenario["ir"], abs_tol=1e-9)


def test_faixa_isenta():
    res = calculate_monthly_ir(2000)
    assert res["calculation_base"] == 1600
    assert res["ir_due"] == 0
    assert res["applied_rate"] == 0
    assert res["effective_rate"] == 0


def test_aliquotas_em_percentual():
    res = calculate_monthly_ir(5000)
    assert isclose(res["applied_rate"], 15.0)
    # 218,56 / 5000
    assert isclose(res["effective_rate"], 4.37)


def test_faturamento_zero_nao_divide_por_zero():
    res = calculate_monthly_ir(0)
    assert res["ir_due"] == 0
    assert res["effective_rate"] == 0


def test_ir_com_custos_reais():
    res = calculate_ir_with_real_costs(5000, 1000)
    assert isclose(res["ir_due"], 218.56)
    assert res["real_costs"] == 1000
    assert res["real_profit"] == 4000
    assert isclose(res["profit_after_ir"], 3781.44)
    assert isclose(res["ir_percentage_on_profit"], 5.46)


def test_ir_com_custos_maiores_que_faturamento():
    res = calculate_ir_with_real_costs(3000, 4000)
    assert res["real_profit"] == -1000
    assert res["ir_percentage_on_profit"] == 0


def test_projecao_anual_e_doze_vezes_o_mensal():
    for revenue in (3000, 5000, 11400):
        mensal = calculate_monthly_ir(revenue)
        anual = calculate_annual_ir_projection(revenue)
        assert anual["monthly_ir_due"] == mensal["ir_due"]
        assert isclose(anual["annual_ir_due"], mensal["ir_due"] * 12)
        assert isclose(anual["annual_revenue"], revenue * 12)
        assert isclose(anual["annual_calculation_base"], mensal["calculation_base"] * 12)


def test_bracket_info():
    isenta = get_bracket_info(1000)
    assert isenta["bracket_number"] == 1
    assert isenta["is_exempt"] is True

    segunda = get_bracket_info(2400)
    assert segunda["bracket_number"] == 2
    assert isclose(segunda["rate"], 7.5)
    assert segunda["deduction"] == 169.44
    assert segunda["is_exempt"] is False

    ultima = get_bracket_info(9120)
    assert ultima["bracket_number"] == 5
    assert isclose(ultima["rate"], 27.5)


def test_limite_da_faixa_e_inclusivo():
    assert get_bracket_info(2259.20)["bracket_number"] == 1
    assert get_bracket_info(2259.21)["bracket_number"] == 2
