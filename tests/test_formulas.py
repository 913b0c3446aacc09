from math import isclose

from perfumaria.domain.formulas import (
    round_currency,
    calculate_fee,
    calculate_margin,
    calculate_sale_total,
    calculate_net_profit,
    calculate_installments,
    split_installment_values,
)


def test_round_currency_half_up():
    # round() do Python daria 0.12 (arredondamento bancário)
    assert round_currency(0.125) == 0.13
    assert round_currency(10.0) == 10.0
    assert round_currency(1.994) == 1.99


def test_fee_percentual_fixa_e_sem_taxa():
    assert isclose(calculate_fee("PIX_MP", 100), 0.99, abs_tol=1e-9)
    assert isclose(calculate_fee("CREDIT_NOW", 200), 9.96, abs_tol=1e-9)
    # boleto: taxa fixa independe do valor
    assert calculate_fee("BOLETO", 500) == 3.49
    assert calculate_fee("BOLETO", 10) == 3.49
    assert calculate_fee("CASH", 500) == 0
    assert calculate_fee("PIX_INSTALLMENT", 500) == 0


def test_fee_forma_desconhecida_ou_vazia():
    assert calculate_fee("CHEQUE", 100) == 0
    assert calculate_fee("", 100) == 0
    assert calculate_fee(None, 100) == 0


def test_margin():
    assert isclose(calculate_margin(100, 150), 50.0)
    assert isclose(calculate_margin(100, 80), -20.0)
    # custo zero não divide por zero
    assert calculate_margin(0, 100) == 0


def test_sale_total_nao_fica_negativo():
    assert calculate_sale_total(100, 2, 50) == 150
    assert calculate_sale_total(10, 1, 50) == 0


def test_net_profit():
    fee = calculate_fee("PIX_MP", 150)
    lucro = calculate_net_profit(150, 50, 2, fee)
    assert isclose(lucro, 150 - 100 - 1.485, abs_tol=1e-9)
    # prejuízo é permitido
    assert calculate_net_profit(50, 60, 1, 0) == -10


def test_installments_sem_distribuir_resto():
    res = calculate_installments(1000, 3)
    assert res["num_installments"] == 3
    assert res["installment_value"] == 333.33
    # o resto de um centavo não é distribuído
    assert round_currency(res["installment_value"] * 3) == 999.99
    assert calculate_installments(1000, 0)["installment_value"] == 0


def test_split_installment_values_ultima_absorve_resto():
    valores = split_installment_values(1000, 3)
    assert valores == [333.33, 333.33, 333.34]
    assert isclose(sum(valores), 1000, abs_tol=1e-9)
    assert split_installment_values(300, 3) == [100.0, 100.0, 100.0]
    assert split_installment_values(100, 0) == []
