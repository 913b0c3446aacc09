# perfumaria/usecases/vendas.py
"""
UC: Registrar, editar e excluir VENDAS.

Fluxo de ``registrar_venda``:
1. normaliza o formulário e valida (``validate_sale``) contra o estoque;
2. recalcula os campos derivados (``recompute_sale``);
3. grava a venda;
4. se o status na criação for Pago/Entregue, baixa o estoque por meio de
   um ajuste explícito (``ajustar_estoque``);
5. se a forma de pagamento for o Pix Parcelado, grava o lote de parcelas.

Se os passos 4 ou 5 falharem, os passos anteriores são compensados
(ajuste desfeito e venda removida) antes de propagar o erro. Mudanças de
status posteriores não mexem no estoque. Na edição (``atualizar_venda``)
o lote de parcelas acompanha o total e a forma de pagamento da venda.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from perfumaria.config import DEFAULTS
from perfumaria.domain.catalogos import (
    INSTALLMENT_METHOD,
    SALE_STATUSES,
    STOCK_CONSUMING_STATUSES,
)
from perfumaria.domain.exceptions import (
    DadosInvalidosError,
    StatusInvalidoError,
    VendaNaoEncontradaError,
)
from perfumaria.domain.formulas import split_installment_values
from perfumaria.domain.policies import validate_sale
from perfumaria.domain.ports import ParcelaRepository, ProdutoRepository, VendaRepository
from perfumaria.domain.recalculo import recompute_sale
from perfumaria.infra.logger import (
    log_database_operation,
    log_system_event,
    log_transaction,
    log_venda,
)
from perfumaria.usecases.estoque import AjusteEstoque, ajustar_estoque, desfazer_ajuste


# campos que invalidam o preço final gravado quando mudam
_CAMPOS_DE_PRECO = ("product_id", "quantity", "unit_price", "discount", "shipping_cost", "payment_method")


def _normalize_str(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def _to_float(x: Any, default: float = 0.0) -> float:
    if x is None or x == "":
        return default
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def _to_int(x: Any, default: int = 0) -> int:
    try:
        return int(float(x))
    except (TypeError, ValueError):
        return default


def _normalizar_venda(dados: Mapping[str, Any], produto: Optional[Mapping[str, Any]], hoje: date) -> Dict[str, Any]:
    unit_price = _to_float(dados.get("unit_price"), default=-1.0)
    if unit_price < 0:
        # preço sugerido do cadastro quando o vendedor não informa
        unit_price = _to_float(produto.get("sale_price")) if produto else 0.0
    final_price = dados.get("final_product_price")
    return {
        "date": _normalize_str(dados.get("date")) or hoje.isoformat(),
        "client_id": _normalize_str(dados.get("client_id")),
        "product_id": _normalize_str(dados.get("product_id")),
        "quantity": _to_int(dados.get("quantity"), 1),
        "unit_price": unit_price,
        "discount": _to_float(dados.get("discount")),
        "delivery_type": _normalize_str(dados.get("delivery_type")) or "RETIRADA",
        "shipping_cost": _to_float(dados.get("shipping_cost")),
        "final_product_price": _to_float(final_price) if final_price not in (None, "") else None,
        "payment_method": _normalize_str(dados.get("payment_method")),
        "status": _normalize_str(dados.get("status")) or "Pendente",
        "num_installments": _to_int(dados.get("num_installments"), 1),
        "net_profit": 0.0,
    }


def _validar(rec: Mapping[str, Any], produto: Optional[Mapping[str, Any]], available_stock: float) -> None:
    errors = dict(validate_sale(rec, available_stock)["errors"])
    if rec.get("product_id") and produto is None:
        errors["product_id"] = "Produto não encontrado"
    if rec.get("payment_method") == INSTALLMENT_METHOD and rec["num_installments"] > DEFAULTS.max_installments:
        errors["num_installments"] = f"Máximo de {DEFAULTS.max_installments} parcelas"
    if errors:
        raise DadosInvalidosError(errors)


def _montar_parcelas(venda: Mapping[str, Any]) -> List[Dict[str, Any]]:
    n = int(venda["num_installments"])
    values = split_installment_values(venda["total_value"], n)
    return [
        {
            "id": f"{venda['id']}-P{i}",
            "sale_id": venda["id"],
            "installment_number": i,
            "total_installments": n,
            "value": value,
            "due_date": None,
            "payment_date": None,
            "status": "Pendente",
        }
        for i, value in enumerate(values, start=1)
    ]


def registrar_venda(
    dados: Mapping[str, Any],
    produtos: ProdutoRepository,
    vendas: VendaRepository,
    parcelas: ParcelaRepository,
    hoje: Optional[date] = None,
) -> Dict[str, Any]:
    """Registra uma venda nova.

    Returns:
        ``{"venda": dict, "ajuste": AjusteEstoque | None, "parcelas": list}``.
        O ajuste devolvido permite estornar a baixa de estoque depois.
    """
    hoje = hoje or date.today()
    log_system_event("registrar_venda_start", {"product_id": dados.get("product_id")})

    produto = produtos.get(dados["product_id"]) if dados.get("product_id") else None
    rec = _normalizar_venda(dados, produto, hoje)
    try:
        _validar(rec, produto, _to_float(produto.get("stock")) if produto else 0)
    except DadosInvalidosError as e:
        log_transaction("registrar_venda", rec, error=str(e.errors))
        raise

    venda = recompute_sale(rec, produto)
    venda.pop("shipping", None)
    venda["id"] = _normalize_str(dados.get("id")) or vendas.next_id()
    venda = vendas.add(venda)
    log_database_operation("venda", "INSERT", 1, id=venda["id"])
    log_venda("insert", venda["id"], venda["total_value"], status=venda["status"])

    ajuste: Optional[AjusteEstoque] = None
    criadas: List[Dict[str, Any]] = []
    try:
        if venda["status"] in STOCK_CONSUMING_STATUSES:
            ajuste = ajustar_estoque(
                produtos, venda["product_id"], -int(venda["quantity"]), motivo=f"venda {venda['id']}"
            )
        if venda["payment_method"] == INSTALLMENT_METHOD:
            criadas = parcelas.add_many(_montar_parcelas(venda))
            log_database_operation("parcela", "INSERT_MANY", len(criadas), sale_id=venda["id"])
            log_venda("parcelas", venda["id"], venda["total_value"], parcelas=len(criadas))
    except Exception as e:
        if ajuste is not None:
            desfazer_ajuste(produtos, ajuste)
        vendas.delete(venda["id"])
        log_transaction("registrar_venda", {"id": venda["id"]}, error=str(e))
        log_system_event("registrar_venda_error", {"id": venda["id"], "error": str(e)}, level="error")
        raise

    log_transaction("registrar_venda", {"id": venda["id"]}, result=venda["total_value"])
    return {"venda": venda, "ajuste": ajuste, "parcelas": criadas}


def _lote_desatualizado(venda: Mapping[str, Any], existentes: List[Dict[str, Any]]) -> bool:
    """Diz se as parcelas gravadas não correspondem mais à venda."""
    if venda["payment_method"] != INSTALLMENT_METHOD:
        return bool(existentes)
    esperado = split_installment_values(venda["total_value"], int(venda["num_installments"]))
    return [p["value"] for p in existentes] != esperado


def atualizar_venda(
    venda_id: str,
    dados: Mapping[str, Any],
    produtos: ProdutoRepository,
    vendas: VendaRepository,
    parcelas: ParcelaRepository,
    hoje: Optional[date] = None,
) -> Dict[str, Any]:
    """Edita uma venda (substituição completa) recalculando os derivados.

    O estoque não é reavaliado. O preço final gravado vale só enquanto os
    campos de preço não mudam; se mudarem e ``dados`` não trouxer um preço
    final, o preço ajustado é sugerido de novo.

    Quando a forma de pagamento, o número de parcelas ou o total mudam, o
    lote de parcelas é refeito. Se alguma parcela já foi recebida a edição
    é recusada com ``DadosInvalidosError``.
    """
    hoje = hoje or date.today()
    atual = vendas.get(venda_id)
    if atual is None:
        raise VendaNaoEncontradaError(venda_id)

    merged = {**atual, **dict(dados)}
    produto = produtos.get(merged["product_id"]) if merged.get("product_id") else None
    rec = _normalizar_venda(merged, produto, hoje)
    anterior = _normalizar_venda(atual, produto, hoje)
    if "final_product_price" not in dados and any(rec[k] != anterior[k] for k in _CAMPOS_DE_PRECO):
        rec["final_product_price"] = None

    available = _to_float(produto.get("stock")) if produto else 0
    if atual["status"] in STOCK_CONSUMING_STATUSES and atual["product_id"] == rec["product_id"]:
        # a quantidade desta venda já saiu do estoque
        available += _to_float(atual["quantity"])
    try:
        _validar(rec, produto, available)
    except DadosInvalidosError as e:
        log_transaction("atualizar_venda", rec, error=str(e.errors))
        raise

    venda = recompute_sale(rec, produto)
    venda.pop("shipping", None)

    existentes = parcelas.get_by_sale(venda_id)
    refazer = _lote_desatualizado(venda, existentes)
    if refazer and any(p["status"] == "Recebida" for p in existentes):
        errors = {"num_installments": "Venda com parcelas recebidas: valor e parcelas não podem mudar"}
        log_transaction("atualizar_venda", {"id": venda_id}, error=str(errors))
        raise DadosInvalidosError(errors)

    saved = vendas.update(venda_id, venda)
    log_database_operation("venda", "UPDATE", 1, id=venda_id)
    log_venda("update", venda_id, saved["total_value"], status=saved["status"])

    if refazer:
        removidas = parcelas.delete_by_sale(venda_id)
        criadas = parcelas.add_many(_montar_parcelas(saved)) if saved["payment_method"] == INSTALLMENT_METHOD else []
        log_database_operation("parcela", "REBUILD", len(criadas), sale_id=venda_id, removidas=removidas)
    return saved


def alterar_status_venda(venda_id: str, status: str, vendas: VendaRepository) -> Dict[str, Any]:
    """Troca o status de uma venda sem efeito no estoque."""
    if status not in SALE_STATUSES:
        raise StatusInvalidoError(status, SALE_STATUSES)
    saved = vendas.update(venda_id, {"status": status})
    if saved is None:
        raise VendaNaoEncontradaError(venda_id)
    log_venda("status", venda_id, saved["total_value"], status=status)
    return saved


def excluir_venda(
    venda_id: str,
    vendas: VendaRepository,
    parcelas: ParcelaRepository,
    produtos: Optional[ProdutoRepository] = None,
    estornar_estoque: bool = False,
) -> Optional[AjusteEstoque]:
    """Exclui a venda e suas parcelas.

    Com ``estornar_estoque`` a quantidade volta ao estoque quando a venda
    havia baixado estoque (status Pago/Entregue).
    """
    venda = vendas.get(venda_id)
    if venda is None:
        raise VendaNaoEncontradaError(venda_id)

    removidas = parcelas.delete_by_sale(venda_id)
    vendas.delete(venda_id)
    log_database_operation("venda", "DELETE", 1, id=venda_id, parcelas=removidas)
    log_venda("delete", venda_id, venda["total_value"])

    if estornar_estoque and produtos is not None and venda["status"] in STOCK_CONSUMING_STATUSES:
        return ajustar_estoque(
            produtos, venda["product_id"], int(venda["quantity"]),
            motivo=f"exclusão da venda {venda_id}",
        )
    return None
