# perfumaria/infra/logger.py
"""
Sistema de logging das operações da perfumaria.

Cada área tem o seu logger com arquivo próprio em ``perfumaria/logs``:
transações (casos de uso), vendas, banco de dados e eventos do sistema.
As funções de cálculo não registram nada; quem registra são os casos de
uso e os adaptadores.
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = False
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = False


def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger com saída apenas para arquivo.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging

    Returns:
        Logger configurado
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = BASE_DIR / "logs"

LOG_FILES = {
    "transactions": LOGS_DIR / "transactions.log",
    "vendas": LOGS_DIR / "vendas.log",
    "database": LOGS_DIR / "database.log",
    "system": LOGS_DIR / "system.log",
}

transaction_logger = setup_logger('perfumaria.transactions', str(LOG_FILES["transactions"]))
venda_logger = setup_logger('perfumaria.vendas', str(LOG_FILES["vendas"]))
database_logger = setup_logger('perfumaria.database', str(LOG_FILES["database"]))
system_logger = setup_logger('perfumaria.system', str(LOG_FILES["system"]))


def _enabled() -> bool:
    return ENABLE_LOGGING or ENABLE_OUTPUT


def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra o resultado de um caso de uso.

    Args:
        operation: Nome da operação (registrar_venda, salvar_produto, ...)
        data: Dados de entrada
        result: Resultado da operação (opcional)
        error: Mensagem de erro (opcional)
    """
    if not _enabled():
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")


def log_venda(action: str, venda_id: str, total_value: Any = None, **kwargs) -> None:
    """Log específico para vendas (criação, edição, exclusão, parcelas)."""
    if not _enabled():
        return
    log_data = {"action": action, "venda_id": venda_id, "total_value": total_value, **kwargs}
    venda_logger.info(f"VENDA_{action.upper()}: {log_data}")


def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """Log de operações no banco (INSERT, UPDATE, DELETE, SELECT)."""
    if not _enabled():
        return
    log_data = {"table": table, "operation": operation, "affected_rows": affected_rows, **kwargs}
    database_logger.info(f"DB_{operation}: {log_data}")


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """Log para eventos do sistema (info, warning, error)."""
    if not _enabled():
        return
    log_data = {"event": event, "details": details or {}}
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")


def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """Log para importação de planilhas."""
    if not _enabled():
        return
    log_data = {"operation": operation, "file_path": file_path, "rows_processed": rows_processed, **kwargs}
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")


def get_log_summary(log_type: str = "transactions", lines: int = 100) -> Optional[str]:
    """
    Últimas linhas de um dos arquivos de log.

    Args:
        log_type: transactions, vendas, database ou system
        lines: Número de linhas a retornar
    """
    if not _enabled():
        return None

    log_file = LOG_FILES.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            recent_lines = f.readlines()[-lines:]
            return ''.join(recent_lines)
    except OSError as e:
        return f"Erro ao ler log {log_type}: {e}"
