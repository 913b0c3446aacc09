# perfumaria/config.py
"""
Configurações globais e valores padrão do sistema da perfumaria.
"""

import os
from dataclasses import dataclass


# Caminho padrão do banco de dados SQLite
DB_PATH = os.path.join(os.getcwd(), "perfumaria.db")


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do sistema."""
    low_stock_threshold: int = 3   # alerta de estoque baixo (unidades)
    ir_window_days: int = 30       # janela de vendas usada no cálculo automático do IR
    max_installments: int = 12     # limite de parcelas no Pix Parcelado


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
