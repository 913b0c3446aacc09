# perfumaria/usecases/estoque.py
"""
UC: Ajuste de estoque.

A baixa de estoque de uma venda é um comando explícito, separado da
gravação da venda: ``ajustar_estoque`` devolve um ``AjusteEstoque`` que
pode ser desfeito com ``desfazer_ajuste`` (por exemplo, ao excluir a
venda ou quando uma etapa seguinte falha).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from perfumaria.domain.exceptions import EstoqueInsuficienteError, ProdutoNaoEncontradoError
from perfumaria.domain.ports import ProdutoRepository
from perfumaria.infra.logger import log_database_operation, log_transaction


@dataclass(frozen=True)
class AjusteEstoque:
    product_id: str
    delta: int
    stock_before: int
    stock_after: int
    motivo: Optional[str] = None


def ajustar_estoque(
    produtos: ProdutoRepository,
    product_id: str,
    delta: int,
    motivo: Optional[str] = None,
    permitir_negativo: bool = False,
) -> AjusteEstoque:
    """Soma ``delta`` ao estoque do produto (negativo para baixa)."""
    produto = produtos.get(product_id)
    if produto is None:
        raise ProdutoNaoEncontradoError(product_id)

    before = int(produto.get("stock") or 0)
    after = before + int(delta)
    if after < 0 and not permitir_negativo:
        log_transaction("ajustar_estoque", {"product_id": product_id, "delta": delta},
                        error="estoque insuficiente")
        raise EstoqueInsuficienteError(product_id, before, -int(delta))

    produtos.update(product_id, {"stock": after})
    log_database_operation("produto", "UPDATE", 1, id=product_id, stock=after, motivo=motivo)

    ajuste = AjusteEstoque(product_id, int(delta), before, after, motivo)
    log_transaction("ajustar_estoque", {"product_id": product_id, "delta": delta}, result=after)
    return ajuste


def desfazer_ajuste(produtos: ProdutoRepository, ajuste: AjusteEstoque) -> AjusteEstoque:
    """Compensa um ajuste anterior aplicando o delta inverso."""
    return ajustar_estoque(
        produtos,
        ajuste.product_id,
        -ajuste.delta,
        motivo=f"estorno: {ajuste.motivo}" if ajuste.motivo else "estorno",
        permitir_negativo=True,
    )
