# perfumaria/usecases/cadastros.py
"""
UC: Cadastro de produtos e clientes.

- salvar_produto(): valida, recalcula a margem e grava (novo ou edição).
- salvar_cliente(): valida CPF/telefone/endereço e grava (novo ou edição).
- excluir_produto() / excluir_cliente(): exclusão definitiva.
- buscar_produtos(): busca por nome ou código.
- importar_produtos(): cadastro em lote a partir de XLSX/CSV.

A margem nunca é editada diretamente: é sempre derivada dos preços.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from perfumaria.adapters.planilhas import load_produtos
from perfumaria.domain.exceptions import (
    ClienteNaoEncontradoError,
    DadosInvalidosError,
    ProdutoNaoEncontradoError,
)
from perfumaria.domain.formulas import calculate_margin, round_currency
from perfumaria.domain.policies import validate_client, validate_product
from perfumaria.domain.ports import ClienteRepository, ProdutoRepository
from perfumaria.infra.logger import (
    log_database_operation,
    log_file_operation,
    log_system_event,
    log_transaction,
)


def _normalize_str(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def _to_float(x: Any) -> float:
    try:
        return float(x)
    except (TypeError, ValueError):
        return 0.0


def _to_int(x: Any) -> int:
    try:
        return int(float(x))
    except (TypeError, ValueError):
        return 0


# -------------------------
# Produtos
# -------------------------

def salvar_produto(
    dados: Mapping[str, Any],
    produtos: ProdutoRepository,
    produto_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Valida e grava um produto; ``produto_id`` indica edição."""
    rec = {
        "name": _normalize_str(dados.get("name")),
        "purchase_price": _to_float(dados.get("purchase_price")),
        "sale_price": _to_float(dados.get("sale_price")),
        "stock": _to_int(dados.get("stock")),
        "supplier": _normalize_str(dados.get("supplier")),
    }
    validation = validate_product(rec)
    if not validation["is_valid"]:
        log_transaction("salvar_produto", rec, error=str(validation["errors"]))
        raise DadosInvalidosError(validation["errors"])

    rec["margin"] = round_currency(calculate_margin(rec["purchase_price"], rec["sale_price"]))

    if produto_id:
        saved = produtos.update(produto_id, rec)
        if saved is None:
            raise ProdutoNaoEncontradoError(produto_id)
        log_database_operation("produto", "UPDATE", 1, id=produto_id)
    else:
        rec["id"] = _normalize_str(dados.get("id")) or produtos.next_id()
        saved = produtos.add(rec)
        log_database_operation("produto", "INSERT", 1, id=rec["id"])

    log_transaction("salvar_produto", rec, result=saved["id"])
    return saved


def excluir_produto(produto_id: str, produtos: ProdutoRepository) -> None:
    if produtos.get(produto_id) is None:
        raise ProdutoNaoEncontradoError(produto_id)
    produtos.delete(produto_id)
    log_database_operation("produto", "DELETE", 1, id=produto_id)


def buscar_produtos(term: str, produtos: ProdutoRepository) -> List[Dict[str, Any]]:
    """Produtos cujo nome ou código contém ``term`` (todos se vazio)."""
    if not term or not term.strip():
        return produtos.get_all()
    return produtos.search(term.strip())


def importar_produtos(path: str, produtos: ProdutoRepository) -> Dict[str, Any]:
    """Importa produtos de uma planilha; códigos já cadastrados são atualizados.

    Linhas inválidas não interrompem a importação: entram em ``erros`` com o
    número da linha na planilha (a linha 1 é o cabeçalho).
    """
    log_system_event("importar_produtos_start", {"file_path": path})
    rows = load_produtos(path)
    log_file_operation("import", path, rows_processed=len(rows))

    sucessos = 0
    erros: List[Dict[str, Any]] = []
    for linha, row in enumerate(rows, start=2):
        existente = row.get("id") and produtos.get(row["id"])
        try:
            salvar_produto(row, produtos, produto_id=row["id"] if existente else None)
            sucessos += 1
        except DadosInvalidosError as e:
            mensagem = "; ".join(f"{campo}: {msg}" for campo, msg in e.errors.items())
            erros.append({"linha": linha, "mensagem": mensagem})

    result = {"tipo": "Produtos", "arquivo": path, "total": len(rows), "sucessos": sucessos, "erros": erros}
    log_transaction("importar_produtos", {"file": path}, result={"sucessos": sucessos, "erros": len(erros)})
    return result


# -------------------------
# Clientes
# -------------------------

def salvar_cliente(
    dados: Mapping[str, Any],
    clientes: ClienteRepository,
    cliente_id: Optional[str] = None,
    hoje: Optional[date] = None,
) -> Dict[str, Any]:
    """Valida e grava um cliente; o CPF é armazenado só com dígitos."""
    rec = {
        "name": _normalize_str(dados.get("name")),
        "cpf": _normalize_str(dados.get("cpf")),
        "phone": _normalize_str(dados.get("phone")),
        "address": _normalize_str(dados.get("address")),
    }
    validation = validate_client(rec)
    errors = dict(validation["errors"])

    if "cpf" not in errors:
        rec["cpf"] = re.sub(r"\D", "", rec["cpf"])
        dono = clientes.get_by_cpf(rec["cpf"])
        if dono is not None and dono["id"] != cliente_id:
            errors["cpf"] = "CPF já cadastrado"

    if errors:
        log_transaction("salvar_cliente", rec, error=str(errors))
        raise DadosInvalidosError(errors)

    if cliente_id:
        saved = clientes.update(cliente_id, rec)
        if saved is None:
            raise ClienteNaoEncontradoError(cliente_id)
        log_database_operation("cliente", "UPDATE", 1, id=cliente_id)
    else:
        rec["id"] = _normalize_str(dados.get("id")) or clientes.next_id()
        rec["registration_date"] = (
            _normalize_str(dados.get("registration_date")) or (hoje or date.today()).isoformat()
        )
        saved = clientes.add(rec)
        log_database_operation("cliente", "INSERT", 1, id=rec["id"])

    log_transaction("salvar_cliente", {"id": saved["id"]}, result="success")
    return saved


def excluir_cliente(cliente_id: str, clientes: ClienteRepository) -> None:
    if clientes.get(cliente_id) is None:
        raise ClienteNaoEncontradoError(cliente_id)
    clientes.delete(cliente_id)
    log_database_operation("cliente", "DELETE", 1, id=cliente_id)
