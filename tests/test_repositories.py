import sqlite3
from pathlib import Path

import pytest

from perfumaria.domain.models import Produto, Venda, Parcela
from perfumaria.infra.db import connect
from perfumaria.infra.migrations import apply_migrations, schema_version
from perfumaria.infra.repositories import generate_id


def test_generate_id():
    assert generate_id("P", []) == "P001"
    assert generate_id("P", ["P001", "P009", "X100", "Pabc"]) == "P010"
    assert generate_id("V", ["V999"]) == "V1000"


def test_migrations_idempotentes(tmp_path: Path):
    db = str(tmp_path / "m.sqlite")
    apply_migrations(db)
    apply_migrations(db)
    assert schema_version(db) == 2
    with connect(db) as c:
        cols = [r[1] for r in c.execute("PRAGMA table_info(venda)").fetchall()]
    for col in ("delivery_type", "shipping_cost", "final_product_price", "adjusted_price"):
        assert col in cols


def test_produto_crud_com_dataclass(repos):
    repos.produtos.add(Produto(id="", name="Sauvage EDT", purchase_price=120, sale_price=200, stock=5))
    repos.produtos.add({"name": "Bleu de Chanel", "purchase_price": 300, "sale_price": 450, "stock": 1})

    todos = repos.produtos.get_all()
    assert [p["id"] for p in todos] == ["P001", "P002"]
    assert repos.produtos.next_id() == "P003"

    saved = repos.produtos.update("P001", {"stock": 2, "campo_inexistente": 1})
    assert saved["stock"] == 2
    assert saved["name"] == "Sauvage EDT"
    assert repos.produtos.get("P001")["stock"] == 2
    assert repos.produtos.update("P999", {"stock": 1}) is None

    assert [p["id"] for p in repos.produtos.search("chanel")] == ["P002"]
    assert [p["id"] for p in repos.produtos.search("p001")] == ["P001"]

    repos.produtos.delete("P002")
    assert repos.produtos.get("P002") is None


def test_cliente_get_by_cpf(repos, cliente):
    assert repos.clientes.get_by_cpf("52998224725")["id"] == "C001"
    assert repos.clientes.get_by_cpf("11144477735") is None


def test_parcelas_removidas_junto_com_a_venda(repos):
    repos.vendas.add(Venda(id="V001", date="2025-06-01", client_id="C001", product_id="P001",
                           payment_method="PIX_INSTALLMENT", num_installments=2))
    repos.parcelas.add_many([
        Parcela(id="V001-P2", sale_id="V001", installment_number=2, total_installments=2, value=50),
        Parcela(id="V001-P1", sale_id="V001", installment_number=1, total_installments=2, value=50),
    ])
    assert [p["id"] for p in repos.parcelas.get_by_sale("V001")] == ["V001-P1", "V001-P2"]

    repos.vendas.delete("V001")
    assert repos.parcelas.get_all() == []


def test_parcela_exige_venda_existente(repos):
    with pytest.raises(sqlite3.IntegrityError):
        repos.parcelas.add_many([{"id": "X-P1", "sale_id": "X", "installment_number": 1,
                                  "total_installments": 1, "value": 10, "status": "Pendente"}])
    assert repos.parcelas.get_all() == []


def test_delete_by_sale(repos):
    repos.vendas.add({"id": "V001", "date": "2025-06-01"})
    repos.parcelas.add_many([{"id": f"V001-P{i}", "sale_id": "V001", "installment_number": i,
                              "total_installments": 3, "value": 10, "status": "Pendente"} for i in (1, 2, 3)])
    assert repos.parcelas.delete_by_sale("V001") == 3
    assert repos.parcelas.delete_by_sale("V001") == 0
