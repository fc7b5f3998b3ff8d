"""
Logging setup: per-component file names and idempotent configuration.
"""
import logging

from app.core import logging_config


def test_log_file_is_named_after_component() -> None:
    assert logging_config.log_file_for("api").name == "comanda-api.log"
    assert logging_config.log_file_for("worker").name == "comanda-worker.log"
    assert logging_config.log_file_for("worker").parent == logging_config.LOG_DIR


def test_setup_logging_does_not_stack_handlers() -> None:
    root = logging.getLogger()
    logging_config.setup_logging("api")
    before = list(root.handlers)

    logging_config.setup_logging("worker")

    assert root.handlers == before
