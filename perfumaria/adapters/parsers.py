"""
Utilidades de parsing e formatação no padrão brasileiro.

Valores monetários digitados ou lidos de planilhas podem vir como
"R$ 1.234,56", "1234,56" ou "1234.56"; ``parse_decimal_br`` aceita todos.
As funções ``format_*`` são apenas de exibição: os cálculos trabalham
sempre com ``float`` e nunca com o texto formatado.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional

_NUM_RE = re.compile(r"[-+]?[\d.,]+")


def only_digits(txt: Optional[str]) -> str:
    return re.sub(r"\D", "", str(txt or ""))


def parse_decimal_br(txt: Any) -> Optional[float]:
    """Interpreta um número escrito no padrão brasileiro ou internacional.

    Exemplos:
        "R$ 1.234,56" → 1234.56
        "89,90"       → 89.9
        "89.90"       → 89.9
        "1.234.567"   → 1234567.0

    Returns:
        O número, ou None se o texto não contiver um número.
    """
    if txt is None:
        return None
    if isinstance(txt, (int, float)):
        return float(txt)
    s = str(txt).strip()
    m = _NUM_RE.search(s)
    if not m:
        return None
    num = m.group(0)
    if "," in num:
        num = num.replace(".", "").replace(",", ".")
    elif num.count(".") > 1:
        num = num.replace(".", "")
    try:
        return float(num)
    except ValueError:
        return None


def format_currency(value: Optional[float]) -> str:
    """Formata em reais: 1234.5 → "R$ 1.234,50"."""
    v = float(value or 0)
    txt = f"{abs(v):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"-R$ {txt}" if v < 0 else f"R$ {txt}"


def format_percent(value: Optional[float]) -> str:
    return f"{float(value or 0):.2f}%".replace(".", ",")


def format_cpf(cpf: Optional[str]) -> str:
    digits = only_digits(cpf)
    if len(digits) != 11:
        return digits
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def format_phone(phone: Optional[str]) -> str:
    """(11) 98765-4321 para celulares e (11) 3456-7890 para fixos."""
    digits = only_digits(phone)
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return digits


def format_date(value: Any) -> str:
    """Data ISO (ou ``date``) para DD/MM/AAAA; vazio se não houver data."""
    if not value:
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime("%d/%m/%Y")
    try:
        return date.fromisoformat(str(value)[:10]).strftime("%d/%m/%Y")
    except ValueError:
        return str(value)
