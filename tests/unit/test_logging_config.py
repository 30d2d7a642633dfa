import logging

import pytest

from portfolio import logging_config
from portfolio.logging_config import configure_logging, resolve_level


def test_resolve_level_falls_back_to_info() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("WARNING") == logging.WARNING
    assert resolve_level("chatty") == logging.INFO
    assert resolve_level(None) == logging.INFO


def test_configure_logging_runs_once_and_quiets_access_log(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logging_config, "_LOG_CONFIGURED", False)
    access = logging.getLogger("uvicorn.access")
    access.setLevel(logging.NOTSET)

    configure_logging("debug")
    assert access.level == logging.WARNING
    assert logging_config._LOG_CONFIGURED is True

    access.setLevel(logging.NOTSET)
    configure_logging("debug")
    assert access.level == logging.NOTSET
