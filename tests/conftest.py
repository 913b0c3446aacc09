from datetime import date
from pathlib import Path

import pytest

from perfumaria.infra.instances import abrir_repositorios

HOJE = date(2025, 6, 15)


@pytest.fixture
def repos(tmp_path: Path):
    return abrir_repositorios(str(tmp_path / "perfumaria_test.sqlite"))


@pytest.fixture
def produto(repos):
    row = {"id": "P001", "name": "Sauvage EDT 100ml", "purchase_price": 120.0,
           "sale_price": 200.0, "margin": 66.67, "stock": 5, "supplier": "Dior"}
    repos.produtos.add(row)
    return row


@pytest.fixture
def cliente(repos):
    row = {"id": "C001", "name": "Maria Souza", "cpf": "52998224725",
           "phone": "11987654321", "address": "Rua das Flores, 10", "registration_date": "2025-01-10"}
    repos.clientes.add(row)
    return row
