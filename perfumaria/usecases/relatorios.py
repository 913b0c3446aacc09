# perfumaria/usecases/relatorios.py
"""
Relatórios da perfumaria:
- filtro de vendas (período, forma de pagamento, status, produto, cliente)
- indicadores do dashboard (faturamento, lucro, margem média, ticket médio,
  estoque, produto mais vendido, forma de pagamento mais usada)
- tabela de vendas pronta para exibição
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from perfumaria.config import DEFAULTS
from perfumaria.domain.catalogos import PAYMENT_METHODS
from perfumaria.domain.policies import is_low_stock
from perfumaria.domain.ports import ClienteRepository, ProdutoRepository, VendaRepository
from perfumaria.infra.logger import log_system_event, system_logger


FILTER_KEYS = ("start_date", "end_date", "payment_method", "status", "product_id", "client_id")


def filter_sales(sales: Iterable[Mapping[str, Any]], filters: Optional[Mapping[str, Any]] = None) -> List[Mapping[str, Any]]:
    """Aplica os filtros informados; filtros vazios são ignorados.

    Datas são comparadas como texto ISO (YYYY-MM-DD), com limites inclusivos.
    """
    f = {k: v for k, v in (filters or {}).items() if k in FILTER_KEYS and v}
    out = []
    for sale in sales:
        if "start_date" in f and (sale.get("date") or "") < f["start_date"]:
            continue
        if "end_date" in f and (sale.get("date") or "") > f["end_date"]:
            continue
        if any(sale.get(k) != f[k] for k in ("payment_method", "status", "product_id", "client_id") if k in f):
            continue
        out.append(sale)
    return out


def _most_common(counts: Counter) -> Optional[str]:
    # em caso de empate vence o primeiro que apareceu
    best, best_count = None, 0
    for key, count in counts.items():
        if count > best_count:
            best, best_count = key, count
    return best


def calculate_dashboard_stats(
    sales: List[Mapping[str, Any]],
    products: List[Mapping[str, Any]],
    low_stock_threshold: int = DEFAULTS.low_stock_threshold,
) -> Dict[str, Any]:
    """Indicadores agregados das vendas (já filtradas) e do estoque."""
    total_revenue = sum(float(s.get("total_value") or 0) for s in sales)
    total_profit = sum(float(s.get("net_profit") or 0) for s in sales)
    total_sales = len(sales)

    sold: Counter = Counter()
    methods: Counter = Counter()
    for s in sales:
        sold[s.get("product_id")] += int(s.get("quantity") or 0)
        methods[s.get("payment_method")] += 1

    return {
        "total_revenue": total_revenue,
        "total_profit": total_profit,
        "average_margin": total_profit / total_revenue * 100 if total_revenue > 0 else 0.0,
        "total_sales": total_sales,
        "average_ticket": total_revenue / total_sales if total_sales > 0 else 0.0,
        "total_stock": sum(int(p.get("stock") or 0) for p in products),
        "low_stock_products": [p for p in products if is_low_stock(p, low_stock_threshold)],
        "most_sold_product": _most_common(sold),
        "most_used_payment_method": _most_common(methods),
        "payment_methods_count": dict(methods),
    }


def relatorio_dashboard(
    produtos: ProdutoRepository,
    vendas: VendaRepository,
    filters: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Dashboard completo a partir dos repositórios."""
    log_system_event("relatorio_dashboard_start", {"filters": dict(filters or {})})
    products = produtos.get_all()
    sales = filter_sales(vendas.get_all(), filters)
    system_logger.debug(f"REPORT_DASHBOARD: {len(sales)} vendas após filtros")

    stats = calculate_dashboard_stats(sales, products)
    names = {p["id"]: p["name"] for p in products}
    stats["most_sold_product_name"] = names.get(stats["most_sold_product"])
    method = PAYMENT_METHODS.get(stats["most_used_payment_method"] or "")
    stats["most_used_payment_method_label"] = method.label if method else None
    return stats


def tabela_vendas(
    vendas: VendaRepository,
    produtos: ProdutoRepository,
    clientes: ClienteRepository,
    filters: Optional[Mapping[str, Any]] = None,
) -> Tuple[List[str], List[List[Any]]]:
    """Colunas e linhas das vendas filtradas, com nomes no lugar dos ids."""
    prod_names = {p["id"]: p["name"] for p in produtos.get_all()}
    cli_names = {c["id"]: c["name"] for c in clientes.get_all()}
    cols = ["id", "data", "cliente", "produto", "qtd", "total", "taxa", "lucro", "pagamento", "status"]
    rows = []
    for s in filter_sales(vendas.get_all(), filters):
        method = PAYMENT_METHODS.get(s.get("payment_method") or "")
        rows.append([
            s["id"],
            s["date"],
            cli_names.get(s["client_id"], s["client_id"]),
            prod_names.get(s["product_id"], s["product_id"]),
            s["quantity"],
            s["total_value"],
            s["fee"],
            s["net_profit"],
            method.label if method else s.get("payment_method"),
            s["status"],
        ])
    return cols, rows
