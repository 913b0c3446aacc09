from math import isclose

from perfumaria.usecases.relatorios import (
    calculate_dashboard_stats,
    filter_sales,
    relatorio_dashboard,
    tabela_vendas,
)

SALES = [
    {"id": "V001", "date": "2025-06-01", "product_id": "P001", "client_id": "C001", "quantity": 2,
     "total_value": 400.0, "fee": 3.96, "net_profit": 150.0, "payment_method": "PIX_MP", "status": "Pago"},
    {"id": "V002", "date": "2025-06-10", "product_id": "P002", "client_id": "C002", "quantity": 1,
     "total_value": 100.0, "fee": 0.0, "net_profit": 50.0, "payment_method": "CASH", "status": "Pendente"},
    {"id": "V003", "date": "2025-07-01", "product_id": "P002", "client_id": "C001", "quantity": 1,
     "total_value": 100.0, "fee": 0.0, "net_profit": -10.0, "payment_method": "CASH", "status": "Entregue"},
]

PRODUCTS = [
    {"id": "P001", "name": "Sauvage", "stock": 10},
    {"id": "P002", "name": "Eros", "stock": 2},
]


def test_filter_sales():
    assert filter_sales(SALES) == SALES
    assert filter_sales(SALES, {"status": "", "qualquer": "x"}) == SALES
    assert [s["id"] for s in filter_sales(SALES, {"start_date": "2025-06-05", "end_date": "2025-06-30"})] == ["V002"]
    # limites inclusivos
    assert [s["id"] for s in filter_sales(SALES, {"start_date": "2025-06-01", "end_date": "2025-06-01"})] == ["V001"]
    assert [s["id"] for s in filter_sales(SALES, {"client_id": "C001"})] == ["V001", "V003"]
    assert [s["id"] for s in filter_sales(SALES, {"payment_method": "CASH", "status": "Entregue"})] == ["V003"]


def test_dashboard_stats():
    stats = calculate_dashboard_stats(SALES, PRODUCTS)
    assert stats["total_revenue"] == 600
    assert stats["total_profit"] == 190
    assert isclose(stats["average_margin"], 190 / 600 * 100)
    assert stats["total_sales"] == 3
    assert stats["average_ticket"] == 200
    assert stats["total_stock"] == 12
    assert [p["id"] for p in stats["low_stock_products"]] == ["P002"]
    # empate em quantidade: vence o primeiro que apareceu
    assert stats["most_sold_product"] == "P001"
    assert stats["most_used_payment_method"] == "CASH"
    assert stats["payment_methods_count"] == {"PIX_MP": 1, "CASH": 2}


def test_dashboard_sem_vendas():
    stats = calculate_dashboard_stats([], [])
    assert stats["average_margin"] == 0
    assert stats["average_ticket"] == 0
    assert stats["most_sold_product"] is None
    assert stats["most_used_payment_method"] is None


def _popular(repos):
    for p in PRODUCTS:
        repos.produtos.add({**p, "purchase_price": 100, "sale_price": 200})
    repos.clientes.add({"id": "C001", "name": "Maria", "cpf": "52998224725"})
    for s in SALES:
        repos.vendas.add(s)


def test_relatorio_dashboard_com_nomes(repos):
    _popular(repos)
    stats = relatorio_dashboard(repos.produtos, repos.vendas, {"end_date": "2025-06-30"})
    assert stats["total_sales"] == 2
    assert stats["most_sold_product_name"] == "Sauvage"
    assert stats["most_used_payment_method_label"] == "Pix via Link MP"


def test_tabela_vendas(repos):
    _popular(repos)
    cols, rows = tabela_vendas(repos.vendas, repos.produtos, repos.clientes, {"product_id": "P002"})
    assert cols[:4] == ["id", "data", "cliente", "produto"]
    assert [r[0] for r in rows] == ["V002", "V003"]
    # cliente sem cadastro aparece pelo id
    assert rows[0][2] == "C002"
    assert rows[1][2] == "Maria"
    assert rows[0][3] == "Eros"
    assert rows[0][8] == "Dinheiro"
