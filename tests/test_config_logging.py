"""Tests for settings and logging setup."""

import json
import logging
import sys

import pytest

from components.core.config import Settings
from components.core.logging import JsonFormatter, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        assert s.DEFAULT_INTEREST_RATE == 15.0
        assert s.DEFAULT_LOAN_DURATION_MONTHS == 12
        assert s.LOG_LEVEL == "INFO"
        assert s.LOG_FORMAT == "standard"
        assert s.async_db_url == "mysql+aiomysql://root:@localhost:3306/lending_pool"
        assert s.sync_db_url == "mysql+pymysql://root:@localhost:3306/lending_pool"

    def test_explicit_url(self) -> None:
        s = Settings(_env_file=None, DB_URL="mysql+aiomysql://u:p@db:3306/pool")
        assert s.async_db_url == "mysql+aiomysql://u:p@db:3306/pool"
        assert s.sync_db_url == "mysql+pymysql://u:p@db:3306/pool"

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("CASH_BILL_TITLE", "CASH BILL MEETING 90")
        monkeypatch.setenv("DEFAULT_INTEREST_RATE", "1.5")
        s = Settings(_env_file=None)
        assert s.CASH_BILL_TITLE == "CASH BILL MEETING 90"
        assert s.DEFAULT_INTEREST_RATE == 1.5


class TestLogging:
    def test_setup_replaces_handlers(self) -> None:
        setup_logging("debug")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stdout
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging("chatty")
        assert logging.getLogger().level == logging.INFO

    def test_json_format(self) -> None:
        setup_logging("INFO", "json")
        assert isinstance(logging.getLogger().handlers[0].formatter, JsonFormatter)

    def test_json_formatter_output(self) -> None:
        record = logging.LogRecord("components.loan", logging.INFO, __file__, 1, "paid %s", ("7",), None)
        record.extra = {"loan_id": 7}
        data = json.loads(JsonFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["logger"] == "components.loan"
        assert data["message"] == "paid 7"
        assert data["loan_id"] == 7
        assert "timestamp" in data

    def test_get_logger(self) -> None:
        assert get_logger("components.bill").name == "components.bill"
