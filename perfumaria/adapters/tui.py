from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, ScrollableContainer, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, DataTable, Footer, Header, Input, Label, Static, Tree

from perfumaria.adapters.parsers import format_currency, format_percent, parse_decimal_br
from perfumaria.config import DB_PATH
from perfumaria.domain.catalogos import PAYMENT_METHODS
from perfumaria.domain.recalculo import recompute_sale
from perfumaria.infra.instances import abrir_repositorios
from perfumaria.infra.logger import ENABLE_LOGGING, ENABLE_OUTPUT, log_system_event
from perfumaria.usecases.financeiro import calcular_ir, calcular_ir_das_vendas
from perfumaria.usecases.parcelas import marcar_atrasadas
from perfumaria.usecases.relatorios import relatorio_dashboard, tabela_vendas


SIMULADOR_CAMPOS = (
    ("unit_price", "Preço unitário (R$)", "189,90"),
    ("purchase_price", "Valor de compra (R$)", "120,00"),
    ("quantity", "Quantidade", "1"),
    ("discount", "Desconto (R$)", "0"),
    ("shipping_cost", "Frete (R$)", "0"),
    ("final_product_price", "Preço final (opcional)", ""),
    ("payment_method", "Forma de pagamento", "PIX_MP"),
)


def simular_venda(valores: Dict[str, str]) -> str:
    """Texto do simulador a partir dos valores digitados (em formato BR)."""
    metodo = (valores.get("payment_method") or "").strip().upper()
    if metodo not in PAYMENT_METHODS:
        return f"Forma de pagamento inválida. Opções: {', '.join(PAYMENT_METHODS)}"

    def num(key: str) -> float:
        return parse_decimal_br(valores.get(key)) or 0.0

    res = recompute_sale(
        {"quantity": int(num("quantity")), "unit_price": num("unit_price"),
         "discount": num("discount"), "shipping_cost": num("shipping_cost"),
         "final_product_price": num("final_product_price") or None,
         "payment_method": metodo},
        {"purchase_price": num("purchase_price")},
    )
    linhas = [
        f"Total cobrado:  {format_currency(res['total_value'])}",
        f"Taxa ({PAYMENT_METHODS[metodo].label}):  {format_currency(res['fee'])}",
        f"Lucro líquido:  {format_currency(res['net_profit'])}",
    ]
    ship = res.get("shipping")
    if ship:
        comp = ship["comparison"]
        linhas += [
            "",
            f"Preço ajustado sugerido:  {format_currency(res['adjusted_price'])}",
            f"Lucro sem frete:  {format_currency(ship['profit_without_shipping'])}",
            f"Diferença:  {format_currency(comp['difference'])} ({format_percent(comp['percentage_change'])})",
        ]
        if ship["below_suggested_price"]:
            linhas.append("⚠️ Preço final abaixo do sugerido")
    if res.get("installment_value"):
        linhas.append(f"Parcela:  {format_currency(res['installment_value'])}")
    return "\n".join(linhas)


class OutputDataTableScreen(Screen):
    """Screen to display a DataTable with query results."""
    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
        ("q", "app.pop_screen", "Back"),
    ]

    def __init__(self, title: str, columns: list, rows: list) -> None:
        super().__init__()
        self.title = title
        self.columns = columns
        self.rows = rows

    def compose(self) -> ComposeResult:
        yield Header()
        with ScrollableContainer():
            yield Static(f"📋 {self.title}", classes="output-title")
            dt = DataTable(zebra_stripes=True)
            dt.add_columns(*self.columns)
            for row in self.rows:
                dt.add_row(*[str(cell) if cell is not None else "" for cell in row])
            yield dt
        yield Footer()


class OutputScreen(Screen):
    """Screen to display plain text output."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
        ("q", "app.pop_screen", "Back"),
    ]

    def __init__(self, title: str, content: str) -> None:
        super().__init__()
        self.title = title
        self.content = content

    def compose(self) -> ComposeResult:
        yield Header()
        with ScrollableContainer():
            yield Static(f"📋 {self.title}", classes="output-title")
            yield Static(self.content, markup=False)
        yield Footer()


class SimuladorVendaScreen(Screen):
    """Simulador de venda: recalcula a cada tecla digitada."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            with Vertical(id="simulador-form"):
                yield Static("🧮 Simulador de Venda", classes="modal-title")
                for key, label, default in SIMULADOR_CAMPOS:
                    yield Label(label)
                    yield Input(value=default, id=f"sim-{key}")
            yield Static("", id="simulador-resultado")
        yield Footer()

    def on_mount(self) -> None:
        self._recalcular()

    def on_input_changed(self, event: Input.Changed) -> None:
        self._recalcular()

    def _recalcular(self) -> None:
        valores = {key: self.query_one(f"#sim-{key}", Input).value for key, _, _ in SIMULADOR_CAMPOS}
        self.query_one("#simulador-resultado", Static).update(simular_venda(valores))


class IRForm(ModalScreen):
    """Modal form for the monthly IR estimate."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Cancel"),
    ]

    def compose(self) -> ComposeResult:
        with Container(id="ir-modal"):
            yield Static("💰 Carnê-Leão", classes="modal-title")
            with Vertical():
                yield Label("Faturamento mensal (R$):")
                yield Input(placeholder="5.000,00", id="ir-faturamento")
                yield Label("Custos reais (opcional):")
                yield Input(placeholder="0", id="ir-custos")
                with Horizontal():
                    yield Button("Calcular", variant="primary", id="calc-btn")
                    yield Button("Cancelar", id="cancel-btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "calc-btn":
            faturamento = parse_decimal_br(self.query_one("#ir-faturamento", Input).value)
            if not faturamento or faturamento <= 0:
                self.notify("❌ Informe um faturamento maior que zero!", severity="warning")
                return
            custos = parse_decimal_br(self.query_one("#ir-custos", Input).value)
            self.dismiss({"revenue": faturamento, "costs": custos})
        elif event.button.id == "cancel-btn":
            self.app.pop_screen()


def formatar_ir(res: Optional[Dict[str, Any]]) -> str:
    if res is None:
        return "Sem faturamento no período."
    linhas = [
        f"Faturamento:      {format_currency(res['monthly_revenue'])}",
        f"Base de cálculo:  {format_currency(res['calculation_base'])}",
        f"IR devido:        {format_currency(res['ir_due'])}",
        f"Alíquota:         {format_percent(res['applied_rate'])}",
        f"Alíquota efetiva: {format_percent(res['effective_rate'])}",
    ]
    if "real_profit" in res:
        linhas += [
            f"Lucro real:       {format_currency(res['real_profit'])}",
            f"Lucro após IR:    {format_currency(res['profit_after_ir'])}",
        ]
    anual = res["annual_projection"]
    linhas += ["", f"IR anual projetado: {format_currency(anual['annual_ir_due'])}"]
    return "\n".join(linhas)


class StatusDisplay(Static):
    """Display current system status."""

    def __init__(self, db_path: str = DB_PATH) -> None:
        super().__init__()
        self.db_path = db_path
        self.refresh_status()

    def refresh_status(self) -> None:
        db_path = Path(self.db_path)
        status_info = []
        if db_path.exists():
            size_mb = db_path.stat().st_size / (1024 * 1024)
            status_info.append(f"✅ Database: {db_path} ({size_mb:.1f}MB)")
        else:
            status_info.append(f"❌ Database: {db_path} (Not Found)")
        status_info.append("✅ Logging: Ativo" if ENABLE_LOGGING else "❌ Logging: Desativado")
        status_info.append("✅ Output: Ativo" if ENABLE_OUTPUT else "❌ Output: Desativado")
        self.update("\n".join(status_info))


class MenuTreeWidget(Tree):
    """Main navigation tree widget."""

    def __init__(self) -> None:
        super().__init__("🌸 Perfumaria - Menu Principal")
        self.setup_menu_tree()

    def setup_menu_tree(self) -> None:
        vendas_node = self.root.add("🛍️ Vendas", data="vendas")
        vendas_node.add_leaf("🧮 Simulador de Venda", data="simulador")
        vendas_node.add_leaf("📋 Ver Vendas", data="ver-vendas")

        cad_node = self.root.add("🗃️ Cadastros", data="cadastros")
        cad_node.add_leaf("🧴 Ver Produtos", data="ver-produtos")
        cad_node.add_leaf("👤 Ver Clientes", data="ver-clientes")

        fin_node = self.root.add("💰 Financeiro", data="financeiro")
        fin_node.add_leaf("📊 Dashboard", data="dashboard")
        fin_node.add_leaf("🧾 IR (valores informados)", data="ir-manual")
        fin_node.add_leaf("🧾 IR (vendas dos últimos 30 dias)", data="ir-vendas")
        fin_node.add_leaf("⏰ Marcar Parcelas Atrasadas", data="atrasadas")

    def on_mount(self) -> None:
        self.root.expand_all()


class PerfumariaApp(App):
    """Main TUI Application for the perfume store."""

    CSS = """
    Screen {
        background: #1a0f1f;
    }

    .modal-title {
        background: #4a1f5c;
        color: #ffffff;
        text-align: center;
        padding: 1;
        margin-bottom: 1;
    }

    .output-title {
        background: #6b2c84;
        color: #ffffff;
        text-align: center;
        padding: 1;
        margin-bottom: 1;
    }

    Container#ir-modal {
        background: #2a1533;
        border: solid #c77dff;
        width: 60;
        height: 20;
        margin: 2;
    }

    Vertical#simulador-form {
        width: 50;
    }

    Static#simulador-resultado {
        padding: 2;
    }

    StatusDisplay {
        background: #4a1f5c;
        color: #ffffff;
        padding: 1;
    }

    Button {
        margin: 1;
    }
    """

    TITLE = "🌸 Perfumaria - Terminal UI"
    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh Status"),
    ]

    def __init__(self, db_path: str = DB_PATH) -> None:
        super().__init__()
        self.db_path = db_path
        self.status_display: Optional[StatusDisplay] = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            with Container(classes="left-panel"):
                yield MenuTreeWidget()
            with Vertical(classes="right-panel"):
                self.status_display = StatusDisplay(self.db_path)
                yield self.status_display
                yield Static(
                    "Use as setas ↑↓ para navegar e ENTER para executar.\n"
                    "Pressione 'r' para atualizar o status e 'q' para sair.",
                    classes="info-panel",
                )
        yield Footer()

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        if event.node.data:
            self.execute_action(event.node.data)

    def execute_action(self, action: str) -> None:
        log_system_event("tui_action", {"action": action})
        if action == "simulador":
            self.push_screen(SimuladorVendaScreen())
            return
        if action == "ir-manual":
            self.push_screen(IRForm(), self.on_ir_result)
            return

        repos = abrir_repositorios(self.db_path)
        if action == "ver-vendas":
            cols, rows = tabela_vendas(repos.vendas, repos.produtos, repos.clientes)
            self.push_screen(OutputDataTableScreen("Vendas", cols, rows))
        elif action == "ver-produtos":
            cols = ["id", "name", "purchase_price", "sale_price", "margin", "stock", "supplier"]
            rows = [[p.get(c) for c in cols] for p in repos.produtos.get_all()]
            self.push_screen(OutputDataTableScreen("Produtos", cols, rows))
        elif action == "ver-clientes":
            cols = ["id", "name", "cpf", "phone", "address", "registration_date"]
            rows = [[c.get(k) for k in cols] for c in repos.clientes.get_all()]
            self.push_screen(OutputDataTableScreen("Clientes", cols, rows))
        elif action == "dashboard":
            self.push_screen(OutputDataTableScreen("Dashboard", ["Indicador", "Valor"],
                                                   self._linhas_dashboard(repos)))
        elif action == "ir-vendas":
            res = calcular_ir_das_vendas(repos.vendas.get_all())
            self.push_screen(OutputScreen("IR das vendas recentes", formatar_ir(res["result"])))
        elif action == "atrasadas":
            atrasadas = marcar_atrasadas(repos.parcelas)
            self.notify(f"{len(atrasadas)} parcela(s) marcada(s) como Atrasada.")

    @staticmethod
    def _linhas_dashboard(repos) -> List[List[str]]:
        stats = relatorio_dashboard(repos.produtos, repos.vendas)
        return [
            ["Faturamento", format_currency(stats["total_revenue"])],
            ["Lucro", format_currency(stats["total_profit"])],
            ["Margem média", format_percent(stats["average_margin"])],
            ["Vendas", str(stats["total_sales"])],
            ["Ticket médio", format_currency(stats["average_ticket"])],
            ["Estoque total", str(stats["total_stock"])],
            ["Estoque baixo", ", ".join(p["name"] for p in stats["low_stock_products"]) or "-"],
            ["Mais vendido", stats["most_sold_product_name"] or "-"],
            ["Pagamento mais usado", stats["most_used_payment_method_label"] or "-"],
        ]

    def on_ir_result(self, params: Optional[Dict[str, Any]]) -> None:
        if not params:
            return
        res = calcular_ir(params["revenue"], params.get("costs"))
        self.push_screen(OutputScreen("IR mensal", formatar_ir(res)))

    def action_refresh(self) -> None:
        if self.status_display:
            self.status_display.refresh_status()
        self.notify("Status atualizado")


def main(db_path: str = DB_PATH) -> None:
    """Run the TUI application."""
    app = PerfumariaApp(db_path)
    app.run()


if __name__ == "__main__":
    main()
