from math import isclose

from perfumaria.domain.recalculo import recompute_sale

PRODUTO = {"id": "P001", "purchase_price": 120.0, "sale_price": 200.0, "stock": 5}


def test_sem_frete():
    venda = {"quantity": 2, "unit_price": 100, "discount": 10, "shipping_cost": 0, "payment_method": "PIX_MP"}
    res = recompute_sale(venda, {"purchase_price": 60})
    assert res["total_value"] == 190
    assert res["fee"] == 1.88
    assert res["net_profit"] == 68.12
    assert res["adjusted_price"] == 0
    assert res["final_product_price"] == 100
    assert res["shipping"] is None
    assert res["installment_value"] == 0


def test_sem_frete_total_limitado_em_zero():
    venda = {"quantity": 1, "unit_price": 10, "discount": 50, "payment_method": "CASH"}
    res = recompute_sale(venda, {"purchase_price": 5})
    assert res["total_value"] == 0
    assert res["net_profit"] == -5


def test_sem_produto_nao_calcula_lucro():
    venda = {"quantity": 1, "unit_price": 100, "payment_method": "PIX_MP", "net_profit": 7.0}
    res = recompute_sale(venda)
    assert res["total_value"] == 100
    assert res["net_profit"] == 7.0


def test_nao_altera_a_venda_recebida():
    venda = {"quantity": 1, "unit_price": 200, "shipping_cost": 20, "payment_method": "CREDIT_NOW"}
    copia = dict(venda)
    recompute_sale(venda, PRODUTO)
    assert venda == copia


def test_com_frete_usa_preco_ajustado():
    venda = {"quantity": 1, "unit_price": 200, "discount": 0, "shipping_cost": 20, "payment_method": "CREDIT_NOW"}
    res = recompute_sale(venda, PRODUTO)
    assert isclose(res["adjusted_price"], 201.05)
    assert isclose(res["final_product_price"], 201.05)
    assert isclose(res["total_value"], 221.05)
    assert res["fee"] == 11.01
    # o preço ajustado devolve o lucro de antes do frete
    assert res["net_profit"] == 70.04

    ship = res["shipping"]
    assert ship["profit_without_shipping"] == 70.04
    assert ship["profit_with_shipping"] == 70.04
    assert ship["total_cost"] == 140
    assert ship["comparison"]["is_same"] is True
    assert ship["below_suggested_price"] is False


def test_com_frete_preco_digitado_abaixo_do_sugerido():
    venda = {"quantity": 1, "unit_price": 200, "shipping_cost": 20,
             "payment_method": "CREDIT_NOW", "final_product_price": 195}
    res = recompute_sale(venda, PRODUTO)
    assert res["final_product_price"] == 195
    assert res["total_value"] == 215
    assert res["net_profit"] == 64.29
    assert res["shipping"]["comparison"]["is_lower"] is True
    # apenas sinaliza, não rejeita
    assert res["shipping"]["below_suggested_price"] is True


def test_com_frete_sem_taxa_mantem_preco_original():
    venda = {"quantity": 1, "unit_price": 200, "shipping_cost": 20, "payment_method": "CASH"}
    res = recompute_sale(venda, PRODUTO)
    assert res["adjusted_price"] == 0
    assert res["final_product_price"] == 200
    assert res["total_value"] == 220
    assert res["net_profit"] == 80
    assert res["shipping"]["below_suggested_price"] is False


def test_pix_parcelado_calcula_parcela():
    venda = {"quantity": 1, "unit_price": 1000, "payment_method": "PIX_INSTALLMENT", "num_installments": 3}
    res = recompute_sale(venda, {"purchase_price": 500})
    assert res["fee"] == 0
    assert res["installment_value"] == 333.33
    assert res["num_installments"] == 3


def test_recalculo_e_idempotente():
    venda = {"quantity": 2, "unit_price": 189.9, "shipping_cost": 15, "payment_method": "CREDIT_14"}
    primeiro = recompute_sale(venda, PRODUTO)
    segundo = recompute_sale({**venda, "final_product_price": primeiro["final_product_price"]}, PRODUTO)
    assert segundo["total_value"] == primeiro["total_value"]
    assert segundo["net_profit"] == primeiro["net_profit"]
