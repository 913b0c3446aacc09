"""
Políticas de validação para cadastros e vendas.

Este módulo é a barreira que roda *antes* das funções de cálculo: as
fórmulas assumem entradas numéricas já validadas e nunca levantam
exceções. Cada validador devolve um resultado estruturado::

    {"is_valid": bool, "errors": {"campo": "mensagem"}}

que a interface usa para bloquear o envio do formulário e exibir a
mensagem junto ao campo correspondente.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

from perfumaria.domain.catalogos import (
    DELIVERY_TYPES,
    INSTALLMENT_METHOD,
    PAYMENT_METHODS,
    SALE_STATUSES,
)


def _result(errors: Dict[str, str]) -> Dict[str, Any]:
    return {"is_valid": not errors, "errors": errors}


def _blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def _num(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def validate_cpf(cpf: Optional[str]) -> bool:
    """Valida um CPF (com ou sem máscara) pelos dígitos verificadores.

    Rejeita tamanhos diferentes de 11 dígitos e sequências repetidas
    (``111.111.111-11``), que passariam no cálculo dos dígitos.
    """
    if cpf is None:
        return False
    digits = re.sub(r"\D", "", str(cpf))
    if len(digits) != 11:
        return False
    if digits == digits[0] * 11:
        return False

    nums = [int(d) for d in digits]
    for size in (9, 10):
        total = sum(n * (size + 1 - i) for i, n in enumerate(nums[:size]))
        check = (total * 10) % 11
        if check == 10:
            check = 0
        if check != nums[size]:
            return False
    return True


def validate_discount(discount: float, total: float) -> bool:
    """Desconto não pode ser negativo nem maior que o total."""
    if discount < 0:
        return False
    if discount > total:
        return False
    return True


def is_low_stock(product: Mapping[str, Any], threshold: int = 3) -> bool:
    """Produto com estoque igual ou abaixo do limite de alerta."""
    return _num(product.get("stock")) <= threshold


def validate_product(product: Mapping[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    purchase = _num(product.get("purchase_price"))
    sale = _num(product.get("sale_price"))

    if _blank(product.get("name")):
        errors["name"] = "Nome do produto é obrigatório"

    if purchase <= 0:
        errors["purchase_price"] = "Valor de compra deve ser maior que zero"

    if sale <= 0:
        errors["sale_price"] = "Valor de venda deve ser maior que zero"

    if purchase > 0 and sale > 0 and purchase > sale:
        errors["sale_price"] = "Valor de venda deve ser maior que o valor de compra"

    if _num(product.get("stock")) < 0:
        errors["stock"] = "Estoque não pode ser negativo"

    return _result(errors)


def validate_client(client: Mapping[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}

    if _blank(client.get("name")):
        errors["name"] = "Nome do cliente é obrigatório"

    if _blank(client.get("cpf")):
        errors["cpf"] = "CPF é obrigatório"
    elif not validate_cpf(client.get("cpf")):
        errors["cpf"] = "CPF inválido"

    if _blank(client.get("phone")):
        errors["phone"] = "Telefone é obrigatório"

    if _blank(client.get("address")):
        errors["address"] = "Endereço é obrigatório"

    return _result(errors)


def validate_sale(sale: Mapping[str, Any], available_stock: float) -> Dict[str, Any]:
    """Valida uma venda contra o estoque disponível do produto escolhido."""
    errors: Dict[str, str] = {}
    quantity = _num(sale.get("quantity"))
    unit_price = _num(sale.get("unit_price"))
    discount = _num(sale.get("discount"))
    payment_method = sale.get("payment_method")

    if _blank(sale.get("client_id")):
        errors["client_id"] = "Cliente é obrigatório"

    if _blank(sale.get("product_id")):
        errors["product_id"] = "Produto é obrigatório"

    if quantity <= 0:
        errors["quantity"] = "Quantidade deve ser maior que zero"
    if quantity > available_stock:
        errors["quantity"] = f"Quantidade em estoque insuficiente. Disponível: {available_stock:g}"

    if unit_price <= 0:
        errors["unit_price"] = "Valor unitário deve ser maior que zero"

    if discount < 0:
        errors["discount"] = "Desconto não pode ser negativo"
    if discount > unit_price * quantity:
        errors["discount"] = "Desconto não pode ser maior que o valor total"

    shipping_cost = _num(sale.get("shipping_cost"))
    if shipping_cost < 0:
        errors["shipping_cost"] = "Frete não pode ser negativo"

    delivery_type = sale.get("delivery_type")
    if not _blank(delivery_type):
        if delivery_type not in DELIVERY_TYPES:
            errors["delivery_type"] = "Tipo de entrega inválido"
        elif shipping_cost > 0 and not DELIVERY_TYPES[delivery_type].has_shipping:
            errors["shipping_cost"] = f"{DELIVERY_TYPES[delivery_type].label} não tem frete"

    if _blank(payment_method):
        errors["payment_method"] = "Forma de pagamento é obrigatória"
    elif payment_method not in PAYMENT_METHODS:
        errors["payment_method"] = "Forma de pagamento inválida"

    status = sale.get("status")
    if _blank(status):
        errors["status"] = "Status é obrigatório"
    elif status not in SALE_STATUSES:
        errors["status"] = "Status inválido"

    if _blank(sale.get("date")):
        errors["date"] = "Data da venda é obrigatória"

    if payment_method == INSTALLMENT_METHOD and _num(sale.get("num_installments")) <= 0:
        errors["num_installments"] = "Número de parcelas é obrigatório para Pix Parcelado"

    return _result(errors)
