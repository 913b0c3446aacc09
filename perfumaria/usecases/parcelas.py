# perfumaria/usecases/parcelas.py
"""
UC: Gestão das parcelas do Pix Parcelado.

- listar_parcelas(): parcelas de uma venda, em ordem.
- alterar_status_parcela(): Recebida grava a data de pagamento (hoje);
  os demais status limpam a data.
- definir_vencimento(): grava a data de vencimento.
- marcar_atrasadas(): parcelas pendentes com vencimento passado viram Atrasada.
- resumo_parcelas(): quantas foram recebidas e quanto falta receber.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from perfumaria.domain.catalogos import INSTALLMENT_STATUSES
from perfumaria.domain.exceptions import ParcelaNaoEncontradaError, StatusInvalidoError
from perfumaria.domain.formulas import round_currency
from perfumaria.domain.ports import ParcelaRepository
from perfumaria.infra.logger import log_database_operation, log_venda


def listar_parcelas(sale_id: str, parcelas: ParcelaRepository) -> List[Dict[str, Any]]:
    return parcelas.get_by_sale(sale_id)


def alterar_status_parcela(
    parcela_id: str,
    status: str,
    parcelas: ParcelaRepository,
    hoje: Optional[date] = None,
) -> Dict[str, Any]:
    if status not in INSTALLMENT_STATUSES:
        raise StatusInvalidoError(status, INSTALLMENT_STATUSES)
    payment_date = (hoje or date.today()).isoformat() if status == "Recebida" else None
    saved = parcelas.update(parcela_id, {"status": status, "payment_date": payment_date})
    if saved is None:
        raise ParcelaNaoEncontradaError(parcela_id)
    log_venda("parcela_status", saved["sale_id"], saved["value"], parcela=parcela_id, status=status)
    return saved


def definir_vencimento(parcela_id: str, due_date: str, parcelas: ParcelaRepository) -> Dict[str, Any]:
    due = date.fromisoformat(due_date).isoformat() if due_date else None
    saved = parcelas.update(parcela_id, {"due_date": due})
    if saved is None:
        raise ParcelaNaoEncontradaError(parcela_id)
    log_database_operation("parcela", "UPDATE", 1, id=parcela_id, due_date=due)
    return saved


def marcar_atrasadas(parcelas: ParcelaRepository, hoje: Optional[date] = None) -> List[Dict[str, Any]]:
    """Marca como Atrasada as parcelas pendentes vencidas antes de ``hoje``."""
    ref = (hoje or date.today()).isoformat()
    atrasadas = []
    for p in parcelas.get_all():
        if p["status"] == "Pendente" and p.get("due_date") and p["due_date"] < ref:
            atrasadas.append(parcelas.update(p["id"], {"status": "Atrasada"}))
    if atrasadas:
        log_database_operation("parcela", "UPDATE", len(atrasadas), status="Atrasada")
    return atrasadas


def resumo_parcelas(sale_id: str, parcelas: ParcelaRepository) -> Dict[str, Any]:
    itens = parcelas.get_by_sale(sale_id)
    recebidas = [p for p in itens if p["status"] == "Recebida"]
    pendentes = [p for p in itens if p["status"] != "Recebida"]
    return {
        "received_count": len(recebidas),
        "total_count": len(itens),
        "total_received": round_currency(sum(p["value"] for p in recebidas)),
        "total_pending": round_currency(sum(p["value"] for p in pendentes)),
    }
