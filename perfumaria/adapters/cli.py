# perfumaria/adapters/cli.py
"""
CLI da perfumaria (Typer).

Comandos principais:
- migrate                      -> aplica migrações
- produto add/edit/list/rm     -> cadastro de perfumes
- cliente add/edit/list/rm     -> cadastro de clientes
- venda nova/edit/list/status/rm -> vendas (com frete e parcelas)
- parcelas list/status/vencimento/atrasadas
- frete simular                -> simula o preço ajustado com frete
- ir calcular/vendas/faixas    -> estimativa do carnê-leão
- dashboard                    -> indicadores com filtros
- importar produtos <arquivo>  -> cadastro em lote (XLSX/CSV)
- tui                          -> interface terminal interativa
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from perfumaria.adapters.parsers import format_cpf, format_currency, format_date, format_percent, format_phone
from perfumaria.config import DB_PATH, DEFAULTS
from perfumaria.domain.catalogos import DELIVERY_TYPES, IR_TAX_BRACKETS_2025, PAYMENT_METHODS
from perfumaria.domain.exceptions import (
    BaseErroCore,
    ClienteNaoEncontradoError,
    DadosInvalidosError,
    ProdutoNaoEncontradoError,
)
from perfumaria.domain.recalculo import recompute_sale
from perfumaria.infra.instances import abrir_repositorios
from perfumaria.infra.migrations import apply_migrations, schema_version
from perfumaria.usecases.cadastros import (
    buscar_produtos,
    excluir_cliente,
    excluir_produto,
    importar_produtos,
    salvar_cliente,
    salvar_produto,
)
from perfumaria.usecases.financeiro import calcular_ir, calcular_ir_das_vendas
from perfumaria.usecases.parcelas import (
    alterar_status_parcela,
    definir_vencimento,
    listar_parcelas,
    marcar_atrasadas,
    resumo_parcelas,
)
from perfumaria.usecases.relatorios import relatorio_dashboard, tabela_vendas
from perfumaria.usecases.vendas import (
    alterar_status_venda,
    atualizar_venda,
    excluir_venda,
    registrar_venda,
)


app = typer.Typer(help="Perfumaria: gestão de revenda de perfumes")
console = Console()

MONEY_COLS = {"purchase_price", "sale_price", "total", "taxa", "lucro", "value", "unit_price",
              "total_value", "fee", "net_profit", "valor"}

DB_OPTION = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2, default=str))


def _fmt(col: str, val: Any) -> str:
    if val is None:
        return ""
    if col in MONEY_COLS and isinstance(val, (int, float)):
        return format_currency(val)
    if col == "margin":
        return format_percent(val)
    if col in ("date", "data", "due_date", "payment_date", "registration_date"):
        return format_date(val)
    return str(val)


def _display_table(data: List[Dict[str, Any]], title: str = "Resultado") -> None:
    """Exibe uma lista de registros em tabela Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return
    table = Table(title=title, box=box.ROUNDED)
    columns = list(data[0].keys())
    for col in columns:
        justify = "right" if col in MONEY_COLS or col in ("stock", "quantity", "margin") else "left"
        table.add_column(col, justify=justify)
    for row in data:
        table.add_row(*[_fmt(c, row.get(c)) for c in columns])
    console.print(table)


def _display_kv(data: Dict[str, Any], title: str) -> None:
    table = Table(title=title, box=box.ROUNDED, show_header=False)
    table.add_column("Campo")
    table.add_column("Valor", justify="right")
    for k, v in data.items():
        if isinstance(v, float):
            v = format_percent(v) if "rate" in k or "percentage" in k else format_currency(v)
        table.add_row(k, str(v))
    console.print(table)


def _display_batch(data: Dict[str, Any]) -> None:
    """Resumo de operações em lote (importação)."""
    content = [
        f"Arquivo: {data['arquivo']}",
        f"Total de registros: {data['total']}",
        f"Processados com sucesso: {data.get('sucessos', 0)}",
    ]
    if data.get("erros"):
        content.append(f"Erros: {len(data['erros'])}")
    console.print(Panel("\n".join(content), title=f"{data['tipo']} em Lote"))

    if data.get("erros"):
        erro_table = Table(title="Erros Encontrados")
        erro_table.add_column("Linha")
        erro_table.add_column("Erro")
        for erro in data["erros"]:
            erro_table.add_row(str(erro.get("linha", "?")), erro.get("mensagem", "Erro desconhecido"))
        console.print(erro_table)


def _fail(e: BaseErroCore) -> None:
    """Mostra o erro de negócio e encerra com código 1."""
    if isinstance(e, DadosInvalidosError) and e.errors:
        table = Table(title="Dados inválidos", border_style="red")
        table.add_column("Campo")
        table.add_column("Erro")
        for campo, msg in e.errors.items():
            table.add_row(campo, msg)
        console.print(table)
    else:
        console.print(f"[bold red]Erro:[/] {e}")
    raise typer.Exit(code=1)


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = DB_OPTION):
    """Aplica migrações do banco."""
    apply_migrations(db_path)
    typer.echo(f">> Migrações aplicadas em: {db_path} (versão {schema_version(db_path)})")


# -----------------------
# produtos
# -----------------------

produto_app = typer.Typer(help="Cadastro de produtos (perfumes).")
app.add_typer(produto_app, name="produto")


@produto_app.command("add")
def cmd_produto_add(
    name: str = typer.Option(..., "--nome", help="Nome do perfume"),
    purchase_price: float = typer.Option(..., "--compra", help="Valor de compra (R$)"),
    sale_price: float = typer.Option(..., "--venda", help="Valor de venda (R$)"),
    stock: int = typer.Option(0, "--estoque", help="Unidades em estoque"),
    supplier: Optional[str] = typer.Option(None, "--fornecedor"),
    db_path: str = DB_OPTION,
):
    """Cadastra um produto; a margem é calculada automaticamente."""
    repos = abrir_repositorios(db_path)
    try:
        saved = salvar_produto(
            {"name": name, "purchase_price": purchase_price, "sale_price": sale_price,
             "stock": stock, "supplier": supplier},
            repos.produtos,
        )
    except BaseErroCore as e:
        _fail(e)
    typer.echo(f">> Produto {saved['id']} cadastrado (margem {format_percent(saved['margin'])}).")


@produto_app.command("edit")
def cmd_produto_edit(
    produto_id: str = typer.Argument(..., help="Código do produto (ex.: P001)"),
    name: Optional[str] = typer.Option(None, "--nome"),
    purchase_price: Optional[float] = typer.Option(None, "--compra"),
    sale_price: Optional[float] = typer.Option(None, "--venda"),
    stock: Optional[int] = typer.Option(None, "--estoque"),
    supplier: Optional[str] = typer.Option(None, "--fornecedor"),
    db_path: str = DB_OPTION,
):
    """Edita um produto (apenas os campos informados são alterados)."""
    repos = abrir_repositorios(db_path)
    atual = repos.produtos.get(produto_id)
    if atual is None:
        _fail(ProdutoNaoEncontradoError(produto_id))
    changes = {k: v for k, v in {
        "name": name, "purchase_price": purchase_price, "sale_price": sale_price,
        "stock": stock, "supplier": supplier,
    }.items() if v is not None}
    try:
        saved = salvar_produto({**atual, **changes}, repos.produtos, produto_id=produto_id)
    except BaseErroCore as e:
        _fail(e)
    typer.echo(f">> Produto {saved['id']} atualizado (margem {format_percent(saved['margin'])}).")


@produto_app.command("list")
def cmd_produto_list(
    busca: str = typer.Option("", "--busca", help="Filtra por nome ou código"),
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = DB_OPTION,
):
    """Lista os produtos cadastrados."""
    repos = abrir_repositorios(db_path)
    rows = buscar_produtos(busca, repos.produtos)
    if as_json:
        _print_json(rows)
    else:
        _display_table(rows, title="Produtos")


@produto_app.command("rm")
def cmd_produto_rm(produto_id: str = typer.Argument(...), db_path: str = DB_OPTION):
    """Exclui um produto."""
    repos = abrir_repositorios(db_path)
    try:
        excluir_produto(produto_id, repos.produtos)
    except BaseErroCore as e:
        _fail(e)
    typer.echo(f">> Produto {produto_id} excluído.")


# -----------------------
# clientes
# -----------------------

cliente_app = typer.Typer(help="Cadastro de clientes.")
app.add_typer(cliente_app, name="cliente")


@cliente_app.command("add")
def cmd_cliente_add(
    name: str = typer.Option(..., "--nome"),
    cpf: str = typer.Option(..., "--cpf"),
    phone: str = typer.Option(..., "--telefone"),
    address: str = typer.Option(..., "--endereco"),
    db_path: str = DB_OPTION,
):
    """Cadastra um cliente (CPF validado)."""
    repos = abrir_repositorios(db_path)
    try:
        saved = salvar_cliente(
            {"name": name, "cpf": cpf, "phone": phone, "address": address}, repos.clientes
        )
    except BaseErroCore as e:
        _fail(e)
    typer.echo(f">> Cliente {saved['id']} cadastrado.")


@cliente_app.command("edit")
def cmd_cliente_edit(
    cliente_id: str = typer.Argument(..., help="Código do cliente (ex.: C001)"),
    name: Optional[str] = typer.Option(None, "--nome"),
    cpf: Optional[str] = typer.Option(None, "--cpf"),
    phone: Optional[str] = typer.Option(None, "--telefone"),
    address: Optional[str] = typer.Option(None, "--endereco"),
    db_path: str = DB_OPTION,
):
    """Edita um cliente (apenas os campos informados são alterados)."""
    repos = abrir_repositorios(db_path)
    atual = repos.clientes.get(cliente_id)
    if atual is None:
        _fail(ClienteNaoEncontradoError(cliente_id))
    changes = {k: v for k, v in {
        "name": name, "cpf": cpf, "phone": phone, "address": address,
    }.items() if v is not None}
    try:
        saved = salvar_cliente({**atual, **changes}, repos.clientes, cliente_id=cliente_id)
    except BaseErroCore as e:
        _fail(e)
    typer.echo(f">> Cliente {saved['id']} atualizado.")


@cliente_app.command("list")
def cmd_cliente_list(
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = DB_OPTION,
):
    """Lista os clientes."""
    repos = abrir_repositorios(db_path)
    rows = repos.clientes.get_all()
    if as_json:
        _print_json(rows)
        return
    _display_table(
        [{**c, "cpf": format_cpf(c["cpf"]), "phone": format_phone(c["phone"])} for c in rows],
        title="Clientes",
    )


@cliente_app.command("rm")
def cmd_cliente_rm(cliente_id: str = typer.Argument(...), db_path: str = DB_OPTION):
    """Exclui um cliente."""
    repos = abrir_repositorios(db_path)
    try:
        excluir_cliente(cliente_id, repos.clientes)
    except BaseErroCore as e:
        _fail(e)
    typer.echo(f">> Cliente {cliente_id} excluído.")


# -----------------------
# vendas
# -----------------------

venda_app = typer.Typer(help="Registro de vendas.")
app.add_typer(venda_app, name="venda")


@venda_app.command("nova")
def cmd_venda_nova(
    client_id: str = typer.Option(..., "--cliente"),
    product_id: str = typer.Option(..., "--produto"),
    payment_method: str = typer.Option(..., "--pagamento", help=", ".join(PAYMENT_METHODS)),
    quantity: int = typer.Option(1, "--qtd"),
    unit_price: Optional[float] = typer.Option(None, "--preco", help="Padrão: valor de venda do produto"),
    discount: float = typer.Option(0.0, "--desconto"),
    delivery_type: str = typer.Option("RETIRADA", "--entrega", help=", ".join(DELIVERY_TYPES)),
    shipping_cost: float = typer.Option(0.0, "--frete"),
    final_product_price: Optional[float] = typer.Option(None, "--preco-final", help="Padrão: preço ajustado"),
    status: str = typer.Option("Pendente", "--status", help="Pendente, Pago ou Entregue"),
    num_installments: int = typer.Option(1, "--parcelas"),
    sale_date: Optional[str] = typer.Option(None, "--data", help="YYYY-MM-DD (padrão: hoje)"),
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = DB_OPTION,
):
    """Registra uma venda, baixando estoque e gerando parcelas quando aplicável."""
    repos = abrir_repositorios(db_path)
    dados = {
        "date": sale_date, "client_id": client_id, "product_id": product_id,
        "quantity": quantity, "unit_price": unit_price, "discount": discount,
        "delivery_type": delivery_type, "shipping_cost": shipping_cost,
        "final_product_price": final_product_price, "payment_method": payment_method,
        "status": status, "num_installments": num_installments,
    }
    try:
        res = registrar_venda(dados, repos.produtos, repos.vendas, repos.parcelas)
    except BaseErroCore as e:
        _fail(e)

    venda = res["venda"]
    if as_json:
        _print_json({"venda": venda, "parcelas": res["parcelas"],
                     "estoque_apos": res["ajuste"].stock_after if res["ajuste"] else None})
        return
    _display_kv(
        {k: venda[k] for k in ("id", "total_value", "fee", "net_profit", "adjusted_price",
                               "final_product_price", "status")},
        title="Venda Registrada",
    )
    if res["parcelas"]:
        _display_table(res["parcelas"], title="Parcelas")


@venda_app.command("edit")
def cmd_venda_edit(
    venda_id: str = typer.Argument(..., help="Código da venda (ex.: V001)"),
    client_id: Optional[str] = typer.Option(None, "--cliente"),
    product_id: Optional[str] = typer.Option(None, "--produto"),
    payment_method: Optional[str] = typer.Option(None, "--pagamento", help=", ".join(PAYMENT_METHODS)),
    quantity: Optional[int] = typer.Option(None, "--qtd"),
    unit_price: Optional[float] = typer.Option(None, "--preco"),
    discount: Optional[float] = typer.Option(None, "--desconto"),
    delivery_type: Optional[str] = typer.Option(None, "--entrega", help=", ".join(DELIVERY_TYPES)),
    shipping_cost: Optional[float] = typer.Option(None, "--frete"),
    final_product_price: Optional[float] = typer.Option(None, "--preco-final"),
    status: Optional[str] = typer.Option(None, "--status", help="Pendente, Pago ou Entregue"),
    num_installments: Optional[int] = typer.Option(None, "--parcelas"),
    sale_date: Optional[str] = typer.Option(None, "--data", help="YYYY-MM-DD"),
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = DB_OPTION,
):
    """Edita uma venda (apenas os campos informados); derivados e parcelas são refeitos."""
    repos = abrir_repositorios(db_path)
    changes = {k: v for k, v in {
        "date": sale_date, "client_id": client_id, "product_id": product_id,
        "quantity": quantity, "unit_price": unit_price, "discount": discount,
        "delivery_type": delivery_type, "shipping_cost": shipping_cost,
        "final_product_price": final_product_price, "payment_method": payment_method,
        "status": status, "num_installments": num_installments,
    }.items() if v is not None}
    try:
        venda = atualizar_venda(venda_id, changes, repos.produtos, repos.vendas, repos.parcelas)
    except BaseErroCore as e:
        _fail(e)

    lote = repos.parcelas.get_by_sale(venda_id)
    if as_json:
        _print_json({"venda": venda, "parcelas": lote})
        return
    _display_kv(
        {k: venda[k] for k in ("id", "total_value", "fee", "net_profit", "adjusted_price",
                               "final_product_price", "status")},
        title="Venda Atualizada",
    )
    if lote:
        _display_table(lote, title="Parcelas")


@venda_app.command("list")
def cmd_venda_list(
    start_date: Optional[str] = typer.Option(None, "--de", help="YYYY-MM-DD"),
    end_date: Optional[str] = typer.Option(None, "--ate", help="YYYY-MM-DD"),
    status: Optional[str] = typer.Option(None, "--status"),
    payment_method: Optional[str] = typer.Option(None, "--pagamento"),
    client_id: Optional[str] = typer.Option(None, "--cliente"),
    product_id: Optional[str] = typer.Option(None, "--produto"),
    db_path: str = DB_OPTION,
):
    """Lista vendas com filtros."""
    repos = abrir_repositorios(db_path)
    filters = {"start_date": start_date, "end_date": end_date, "status": status,
               "payment_method": payment_method, "client_id": client_id, "product_id": product_id}
    cols, rows = tabela_vendas(repos.vendas, repos.produtos, repos.clientes, filters)
    _display_table([dict(zip(cols, r)) for r in rows], title="Vendas")


@venda_app.command("status")
def cmd_venda_status(
    venda_id: str = typer.Argument(...),
    status: str = typer.Argument(..., help="Pendente, Pago ou Entregue"),
    db_path: str = DB_OPTION,
):
    """Altera o status de uma venda (sem efeito no estoque)."""
    repos = abrir_repositorios(db_path)
    try:
        alterar_status_venda(venda_id, status, repos.vendas)
    except BaseErroCore as e:
        _fail(e)
    typer.echo(f">> Venda {venda_id}: {status}.")


@venda_app.command("rm")
def cmd_venda_rm(
    venda_id: str = typer.Argument(...),
    estornar: bool = typer.Option(False, "--estornar", help="Devolve a quantidade ao estoque"),
    db_path: str = DB_OPTION,
):
    """Exclui uma venda e suas parcelas."""
    repos = abrir_repositorios(db_path)
    try:
        ajuste = excluir_venda(venda_id, repos.vendas, repos.parcelas, repos.produtos, estornar_estoque=estornar)
    except BaseErroCore as e:
        _fail(e)
    msg = f">> Venda {venda_id} excluída."
    if ajuste:
        msg += f" Estoque de {ajuste.product_id}: {ajuste.stock_after}."
    typer.echo(msg)


# -----------------------
# parcelas
# -----------------------

parcelas_app = typer.Typer(help="Parcelas do Pix Parcelado.")
app.add_typer(parcelas_app, name="parcelas")


@parcelas_app.command("list")
def cmd_parcelas_list(venda_id: str = typer.Argument(...), db_path: str = DB_OPTION):
    """Lista as parcelas de uma venda com o resumo de recebimento."""
    repos = abrir_repositorios(db_path)
    _display_table(listar_parcelas(venda_id, repos.parcelas), title=f"Parcelas da venda {venda_id}")
    resumo = resumo_parcelas(venda_id, repos.parcelas)
    console.print(
        f"Recebidas: {resumo['received_count']}/{resumo['total_count']} | "
        f"Recebido: {format_currency(resumo['total_received'])} | "
        f"Pendente: {format_currency(resumo['total_pending'])}"
    )


@parcelas_app.command("status")
def cmd_parcelas_status(
    parcela_id: str = typer.Argument(..., help="Ex.: V001-P1"),
    status: str = typer.Argument(..., help="Pendente, Recebida ou Atrasada"),
    db_path: str = DB_OPTION,
):
    """Altera o status de uma parcela."""
    repos = abrir_repositorios(db_path)
    try:
        saved = alterar_status_parcela(parcela_id, status, repos.parcelas)
    except BaseErroCore as e:
        _fail(e)
    typer.echo(f">> Parcela {parcela_id}: {saved['status']}.")


@parcelas_app.command("vencimento")
def cmd_parcelas_vencimento(
    parcela_id: str = typer.Argument(...),
    due_date: str = typer.Argument(..., help="YYYY-MM-DD"),
    db_path: str = DB_OPTION,
):
    """Define a data de vencimento de uma parcela."""
    repos = abrir_repositorios(db_path)
    try:
        definir_vencimento(parcela_id, due_date, repos.parcelas)
    except BaseErroCore as e:
        _fail(e)
    except ValueError:
        console.print(f"[bold red]Erro:[/] data inválida: {due_date}")
        raise typer.Exit(code=1)
    typer.echo(f">> Parcela {parcela_id} vence em {format_date(due_date)}.")


@parcelas_app.command("atrasadas")
def cmd_parcelas_atrasadas(db_path: str = DB_OPTION):
    """Marca como Atrasada as parcelas pendentes vencidas."""
    repos = abrir_repositorios(db_path)
    atrasadas = marcar_atrasadas(repos.parcelas)
    typer.echo(f">> {len(atrasadas)} parcela(s) marcada(s) como Atrasada.")


# -----------------------
# frete
# -----------------------

frete_app = typer.Typer(help="Simulações de preço com frete.")
app.add_typer(frete_app, name="frete")


@frete_app.command("simular")
def cmd_frete_simular(
    unit_price: float = typer.Option(..., "--preco", help="Preço unitário original"),
    purchase_price: float = typer.Option(..., "--custo", help="Valor de compra unitário"),
    shipping_cost: float = typer.Option(..., "--frete"),
    payment_method: str = typer.Option(..., "--pagamento", help=", ".join(PAYMENT_METHODS)),
    quantity: int = typer.Option(1, "--qtd"),
    discount: float = typer.Option(0.0, "--desconto"),
    final_product_price: Optional[float] = typer.Option(None, "--preco-final"),
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
):
    """Mostra o preço sugerido para manter o lucro ao incluir o frete."""
    res = recompute_sale(
        {"quantity": quantity, "unit_price": unit_price, "discount": discount,
         "shipping_cost": shipping_cost, "payment_method": payment_method,
         "final_product_price": final_product_price},
        {"purchase_price": purchase_price},
    )
    if as_json:
        _print_json(res)
        return
    _display_kv(
        {"preço original": float(unit_price), "preço ajustado": res["adjusted_price"],
         "preço final": float(res["final_product_price"]), "total cobrado": res["total_value"],
         "taxa": res["fee"], "lucro líquido": res["net_profit"]},
        title="Simulação de Frete",
    )
    ship = res.get("shipping")
    if ship:
        comp = ship["comparison"]
        cor = "green" if comp["is_same"] else ("red" if comp["is_lower"] else "cyan")
        console.print(
            f"[{cor}]Lucro sem frete {format_currency(ship['profit_without_shipping'])} → "
            f"com frete {format_currency(ship['profit_with_shipping'])} "
            f"({format_percent(comp['percentage_change'])})[/]"
        )
        if ship["below_suggested_price"]:
            console.print("[bold yellow]Atenção: preço final abaixo do preço ajustado sugerido.[/]")


# -----------------------
# imposto de renda
# -----------------------

ir_app = typer.Typer(help="Carnê-leão (dedução simplificada de 20%).")
app.add_typer(ir_app, name="ir")


def _show_ir(res: Optional[Dict[str, Any]], as_json: bool) -> None:
    if res is None:
        typer.echo("Informe um faturamento maior que zero.")
        raise typer.Exit(code=1)
    if as_json:
        _print_json(res)
        return
    flat = {k: v for k, v in res.items() if not isinstance(v, dict)}
    _display_kv(flat, title="IR Mensal")
    _display_kv(res["annual_projection"], title="Projeção Anual")
    faixa = res.get("bracket")
    if faixa:
        console.print(
            "[green]Faixa isenta[/]" if faixa["is_exempt"]
            else f"Faixa {faixa['bracket_number']}: {format_percent(faixa['rate'])}, "
                 f"dedução {format_currency(faixa['deduction'])}"
        )


@ir_app.command("calcular")
def cmd_ir_calcular(
    monthly_revenue: float = typer.Option(..., "--faturamento", help="Faturamento mensal (R$)"),
    real_costs: Optional[float] = typer.Option(None, "--custos", help="Custos reais do mês (R$)"),
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
):
    """Calcula o IR mensal e a projeção anual."""
    _show_ir(calcular_ir(monthly_revenue, real_costs), as_json)


@ir_app.command("vendas")
def cmd_ir_vendas(
    dias: int = typer.Option(DEFAULTS.ir_window_days, "--dias", help="Janela de vendas em dias"),
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = DB_OPTION,
):
    """Calcula o IR a partir das vendas recentes."""
    repos = abrir_repositorios(db_path)
    res = calcular_ir_das_vendas(repos.vendas.get_all(), dias=dias)
    if not as_json:
        console.print(
            f"Faturamento ({dias} dias): {format_currency(res['revenue'])} | "
            f"Custos: {format_currency(res['costs'])}"
        )
    _show_ir(res["result"], as_json)


@ir_app.command("faixas")
def cmd_ir_faixas():
    """Exibe a tabela progressiva 2025."""
    table = Table(title="Tabela Progressiva 2025", box=box.ROUNDED)
    table.add_column("Faixa")
    table.add_column("Base até", justify="right")
    table.add_column("Alíquota", justify="right")
    table.add_column("Dedução", justify="right")
    for i, b in enumerate(IR_TAX_BRACKETS_2025, start=1):
        limite = "acima" if b.max == float("inf") else format_currency(b.max)
        table.add_row(str(i), limite, format_percent(b.rate * 100), format_currency(b.deduction))
    console.print(table)


# -----------------------
# dashboard e importação
# -----------------------

@app.command("dashboard")
def cmd_dashboard(
    start_date: Optional[str] = typer.Option(None, "--de", help="YYYY-MM-DD"),
    end_date: Optional[str] = typer.Option(None, "--ate", help="YYYY-MM-DD"),
    status: Optional[str] = typer.Option(None, "--status"),
    payment_method: Optional[str] = typer.Option(None, "--pagamento"),
    client_id: Optional[str] = typer.Option(None, "--cliente"),
    product_id: Optional[str] = typer.Option(None, "--produto"),
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = DB_OPTION,
):
    """Indicadores de vendas e estoque."""
    repos = abrir_repositorios(db_path)
    filters = {"start_date": start_date, "end_date": end_date, "status": status,
               "payment_method": payment_method, "client_id": client_id, "product_id": product_id}
    stats = relatorio_dashboard(repos.produtos, repos.vendas, filters)
    if as_json:
        _print_json(stats)
        return
    _display_kv(
        {"faturamento": stats["total_revenue"], "lucro": stats["total_profit"],
         "margem média (%)": format_percent(stats["average_margin"]),
         "vendas": stats["total_sales"], "ticket médio": stats["average_ticket"],
         "estoque total": stats["total_stock"],
         "mais vendido": stats["most_sold_product_name"] or "-",
         "pagamento mais usado": stats["most_used_payment_method_label"] or "-"},
        title="Dashboard",
    )
    if stats["low_stock_products"]:
        _display_table(
            [{"id": p["id"], "name": p["name"], "stock": p["stock"]} for p in stats["low_stock_products"]],
            title="Estoque Baixo",
        )


importar_app = typer.Typer(help="Importação de planilhas.")
app.add_typer(importar_app, name="importar")


@importar_app.command("produtos")
def cmd_importar_produtos(
    path: str = typer.Argument(..., help="Caminho do XLSX/CSV de PRODUTOS"),
    db_path: str = DB_OPTION,
):
    """Cadastra/atualiza produtos a partir de uma planilha."""
    repos = abrir_repositorios(db_path)
    _display_batch(importar_produtos(path, repos.produtos))


@app.command("tui")
def cmd_tui(db_path: str = DB_OPTION):
    """Inicia a interface terminal interativa (simulador de vendas e dashboard)."""
    from perfumaria.adapters.tui import main as tui_main
    try:
        tui_main(db_path)
    except KeyboardInterrupt:
        typer.echo("\nSaindo...")
        raise typer.Exit(0)


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
