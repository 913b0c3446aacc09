# perfumaria/adapters/planilhas.py
"""
Loader de planilhas de PRODUTOS (XLSX ou CSV).

Esta função:
- lê a planilha usando pandas;
- normaliza cabeçalhos (acentos, variações, sinônimos);
- converte preços no padrão brasileiro ("R$ 89,90") e estoque;
- retorna uma lista de dicionários com as chaves de ``produto``.

Linhas totalmente vazias são descartadas. Valores ausentes viram None;
a validação fica a cargo do caso de uso de cadastro.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from perfumaria.adapters.parsers import parse_decimal_br


def _slug(s: str) -> str:
    """Normaliza cabeçalhos: minúsculas, sem acentos, sem não-alfanumérico."""
    if s is None:
        return ""
    s = str(s).strip().lower()
    acentos = dict(zip("áàâãäéèêëíìîïóòôõöúùûüç", "aaaaaeeeeiiiiooooouuuuc"))
    s = "".join(acentos.get(ch, ch) for ch in s)
    s = re.sub(r"[^a-z0-9]+", " ", s)
    return re.sub(r"\s+", " ", s).strip()


def _safe_get(row, key) -> Optional[Any]:
    val = row.get(key)
    if val is None or pd.isna(val):
        return None
    val = str(val).strip()
    return val or None


def _to_int(val: Any) -> Optional[int]:
    num = parse_decimal_br(val)
    return int(num) if num is not None else None


_ALIASES = {
    "codigo": "id",
    "cod": "id",
    "id": "id",

    "produto": "name",
    "nome": "name",
    "nome do produto": "name",
    "perfume": "name",

    "valor de compra": "purchase_price",
    "preco de compra": "purchase_price",
    "custo": "purchase_price",
    "compra": "purchase_price",

    "valor de venda": "sale_price",
    "preco de venda": "sale_price",
    "preco": "sale_price",
    "venda": "sale_price",

    "estoque": "stock",
    "quantidade": "stock",
    "qtd": "stock",
    "qtde": "stock",

    "fornecedor": "supplier",
    "marca": "supplier",
}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Renomeia colunas com base em sinônimos/variações."""
    new_cols = {}
    for col in df.columns:
        key = _slug(col)
        new_cols[col] = _ALIASES.get(key, key)
    return df.rename(columns=new_cols)


def _read(path: str) -> pd.DataFrame:
    if Path(path).suffix.lower() == ".csv":
        # separador detectado (planilhas brasileiras costumam usar ';')
        return pd.read_csv(path, dtype="string", sep=None, engine="python")
    return pd.read_excel(path, dtype="string")


def load_produtos(path: str) -> List[Dict[str, Any]]:
    """Lê a planilha de produtos.

    Campos de saída (chaves do dict por linha):
      - id: str | None (código informado na planilha)
      - name: str | None
      - purchase_price: float | None
      - sale_price: float | None
      - stock: int | None
      - supplier: str | None
    """
    df = _normalize_columns(_read(path))
    df = df.dropna(how="all")
    out: List[Dict[str, Any]] = []
    for _, row in df.iterrows():
        out.append({
            "id": _safe_get(row, "id"),
            "name": _safe_get(row, "name"),
            "purchase_price": parse_decimal_br(_safe_get(row, "purchase_price")),
            "sale_price": parse_decimal_br(_safe_get(row, "sale_price")),
            "stock": _to_int(_safe_get(row, "stock")),
            "supplier": _safe_get(row, "supplier"),
        })
    return out
