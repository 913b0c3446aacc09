import json
from pathlib import Path

import pandas as pd
from typer.testing import CliRunner

from perfumaria.adapters.cli import app
from perfumaria.config import DEFAULTS

runner = CliRunner()


def _cadastros(db: str):
    result = runner.invoke(app, ["produto", "add", "--db", db, "--nome", "Sauvage EDT",
                                 "--compra", "120", "--venda", "200", "--estoque", "5"])
    assert result.exit_code == 0, result.output
    result = runner.invoke(app, ["cliente", "add", "--db", db, "--nome", "Maria Souza",
                                 "--cpf", "529.982.247-25", "--telefone", "11987654321",
                                 "--endereco", "Rua das Flores, 10"])
    assert result.exit_code == 0, result.output


def test_cli_migrate(tmp_path: Path):
    db = str(tmp_path / "perfumaria_test.sqlite")
    result = runner.invoke(app, ["migrate", "--db", db])
    assert result.exit_code == 0, result.output
    assert "versão 2" in result.output


def test_cli_produto_e_cliente(tmp_path: Path):
    db = str(tmp_path / "perfumaria_test.sqlite")
    result = runner.invoke(app, ["produto", "add", "--db", db, "--nome", "Sauvage EDT",
                                 "--compra", "120", "--venda", "200", "--estoque", "5"])
    assert result.exit_code == 0, result.output
    assert "Produto P001 cadastrado" in result.output
    assert "66,67%" in result.output

    result = runner.invoke(app, ["produto", "edit", "P001", "--db", db, "--venda", "240"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["produto", "list", "--db", db, "--json"])
    assert result.exit_code == 0, result.output
    produtos = json.loads(result.stdout)
    assert produtos[0]["sale_price"] == 240
    assert produtos[0]["margin"] == 100

    result = runner.invoke(app, ["cliente", "add", "--db", db, "--nome", "X", "--cpf", "123",
                                 "--telefone", "1", "--endereco", "R"])
    assert result.exit_code == 1

    result = runner.invoke(app, ["produto", "rm", "P999", "--db", db])
    assert result.exit_code == 1
    assert "não encontrado" in result.output


def test_cli_venda_dashboard_e_estorno(tmp_path: Path):
    db = str(tmp_path / "perfumaria_test.sqlite")
    _cadastros(db)

    result = runner.invoke(app, ["venda", "nova", "--db", db, "--cliente", "C001", "--produto", "P001",
                                 "--pagamento", "PIX_MP", "--qtd", "2", "--status", "Pago", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["venda"]["total_value"] == 400
    assert data["estoque_apos"] == 3

    result = runner.invoke(app, ["venda", "nova", "--db", db, "--cliente", "C001", "--produto", "P001",
                                 "--pagamento", "PIX_MP", "--qtd", "10"])
    assert result.exit_code == 1

    result = runner.invoke(app, ["dashboard", "--db", db, "--json"])
    assert result.exit_code == 0, result.output
    stats = json.loads(result.stdout)
    assert stats["total_sales"] == 1
    assert stats["total_revenue"] == 400
    assert stats["most_sold_product_name"] == "Sauvage EDT"

    result = runner.invoke(app, ["venda", "list", "--db", db])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["venda", "status", "V001", "Entregue", "--db", db])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["venda", "rm", "V001", "--estornar", "--db", db])
    assert result.exit_code == 0, result.output
    assert "Estoque de P001: 5" in result.output


def test_cli_parcelas(tmp_path: Path):
    db = str(tmp_path / "perfumaria_test.sqlite")
    _cadastros(db)
    result = runner.invoke(app, ["venda", "nova", "--db", db, "--cliente", "C001", "--produto", "P001",
                                 "--pagamento", "PIX_INSTALLMENT", "--parcelas", "3", "--preco", "100"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["parcelas", "status", "V001-P1", "Recebida", "--db", db])
    assert result.exit_code == 0, result.output
    result = runner.invoke(app, ["parcelas", "vencimento", "V001-P2", "2000-01-31", "--db", db])
    assert result.exit_code == 0, result.output
    result = runner.invoke(app, ["parcelas", "vencimento", "V001-P3", "31/01/2000", "--db", db])
    assert result.exit_code == 1

    result = runner.invoke(app, ["parcelas", "atrasadas", "--db", db])
    assert result.exit_code == 0, result.output
    assert "1 parcela(s)" in result.output

    result = runner.invoke(app, ["parcelas", "list", "V001", "--db", db])
    assert result.exit_code == 0, result.output
    assert "Recebidas: 1/3" in result.output


def test_cli_cliente_edit(tmp_path: Path):
    db = str(tmp_path / "perfumaria_test.sqlite")
    _cadastros(db)

    result = runner.invoke(app, ["cliente", "edit", "C001", "--db", db, "--telefone", "21912345678"])
    assert result.exit_code == 0, result.output
    assert "Cliente C001 atualizado" in result.output

    result = runner.invoke(app, ["cliente", "list", "--db", db, "--json"])
    clientes = json.loads(result.stdout)
    assert clientes[0]["phone"] == "21912345678"
    assert clientes[0]["name"] == "Maria Souza"
    assert clientes[0]["cpf"] == "52998224725"

    result = runner.invoke(app, ["cliente", "edit", "C001", "--db", db, "--cpf", "111.111.111-11"])
    assert result.exit_code == 1

    result = runner.invoke(app, ["cliente", "edit", "C999", "--db", db, "--nome", "Ana"])
    assert result.exit_code == 1
    assert "não encontrado" in result.output


def test_cli_venda_edit_refaz_parcelas(tmp_path: Path):
    db = str(tmp_path / "perfumaria_test.sqlite")
    _cadastros(db)
    result = runner.invoke(app, ["venda", "nova", "--db", db, "--cliente", "C001", "--produto", "P001",
                                 "--pagamento", "PIX_INSTALLMENT", "--parcelas", "3", "--preco", "100"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["venda", "edit", "V001", "--db", db, "--qtd", "2", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["venda"]["total_value"] == 200
    assert [p["value"] for p in data["parcelas"]] == [66.67, 66.67, 66.66]

    result = runner.invoke(app, ["venda", "edit", "V001", "--db", db, "--pagamento", "PIX_MP", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["parcelas"] == []

    result = runner.invoke(app, ["venda", "edit", "V001", "--db", db, "--qtd", "10"])
    assert result.exit_code == 1

    result = runner.invoke(app, ["venda", "edit", "V999", "--db", db, "--qtd", "1"])
    assert result.exit_code == 1
    assert "não encontrada" in result.output


def test_cli_frete_simular():
    result = runner.invoke(app, ["frete", "simular", "--preco", "200", "--custo", "120",
                                 "--frete", "20", "--pagamento", "CREDIT_NOW", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["adjusted_price"] == 201.05
    assert data["shipping"]["below_suggested_price"] is False

    result = runner.invoke(app, ["frete", "simular", "--preco", "200", "--custo", "120",
                                 "--frete", "20", "--pagamento", "CREDIT_NOW", "--preco-final", "195"])
    assert result.exit_code == 0, result.output
    assert "abaixo do preço ajustado" in result.output


def test_cli_ir():
    result = runner.invoke(app, ["ir", "calcular", "--faturamento", "5000", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["ir_due"] == 218.56
    assert data["bracket"]["bracket_number"] == 3

    result = runner.invoke(app, ["ir", "calcular", "--faturamento", "11400", "--custos", "3000"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["ir", "calcular", "--faturamento", "0"])
    assert result.exit_code == 1

    result = runner.invoke(app, ["ir", "faixas"])
    assert result.exit_code == 0, result.output


def test_cli_ir_vendas_sem_vendas(tmp_path: Path):
    db = str(tmp_path / "perfumaria_test.sqlite")
    result = runner.invoke(app, ["ir", "vendas", "--db", db])
    assert result.exit_code == 1
    assert f"Faturamento ({DEFAULTS.ir_window_days} dias)" in result.output
    assert "faturamento maior que zero" in result.output


def test_cli_importar_produtos(tmp_path: Path):
    db = str(tmp_path / "perfumaria_test.sqlite")
    xlsx = tmp_path / "produtos.xlsx"
    pd.DataFrame({
        "Nome": ["Invictus", "Eros"],
        "Valor de Compra": ["180,00", "200,00"],
        "Valor de Venda": ["259,90", "150,00"],
        "Estoque": ["4", "1"],
    }).to_excel(xlsx, index=False)

    result = runner.invoke(app, ["importar", "produtos", str(xlsx), "--db", db])
    assert result.exit_code == 0, result.output
    assert "Produtos em Lote" in result.output

    result = runner.invoke(app, ["produto", "list", "--db", db, "--json"])
    assert [p["name"] for p in json.loads(result.stdout)] == ["Invictus"]
