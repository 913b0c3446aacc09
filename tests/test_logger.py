from pathlib import Path

from perfumaria.infra import logger


def test_log_summary_desativado(monkeypatch):
    monkeypatch.setattr(logger, "ENABLE_LOGGING", False)
    monkeypatch.setattr(logger, "ENABLE_OUTPUT", False)
    assert logger.get_log_summary("transactions") is None


def test_log_summary_arquivo_inexistente(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(logger, "ENABLE_LOGGING", True)
    monkeypatch.setattr(logger, "LOG_FILES", {"vendas": tmp_path / "vendas.log"})
    assert logger.get_log_summary("vendas") == "Log vendas não encontrado."
    assert logger.get_log_summary("desconhecido") == "Log desconhecido não encontrado."


def test_log_venda_grava_no_arquivo(monkeypatch, tmp_path: Path):
    log_file = tmp_path / "vendas.log"
    monkeypatch.setattr(logger, "ENABLE_LOGGING", True)
    monkeypatch.setattr(logger, "LOG_FILES", {"vendas": log_file})
    monkeypatch.setattr(logger, "venda_logger", logger.setup_logger("perfumaria.vendas.test", str(log_file)))

    logger.log_venda("insert", "V001", 400.0, status="Pago")
    for handler in logger.venda_logger.handlers:
        handler.flush()

    summary = logger.get_log_summary("vendas", lines=5)
    assert "VENDA_INSERT" in summary
    assert "V001" in summary


def test_print_system_respeita_flag(monkeypatch, capsys):
    monkeypatch.setattr(logger, "ENABLE_OUTPUT", False)
    logger.print_system("silencioso")
    assert capsys.readouterr().out == ""
    monkeypatch.setattr(logger, "ENABLE_OUTPUT", True)
    logger.print_system("visível")
    assert "visível" in capsys.readouterr().out
