import logging
import sys

import pytest
from pydantic import ValidationError

from fiber_inspector_mcp.config import ServerConfig, setup_logging


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    # Keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    for name in ("HOOK_PATH", "TARGET_URL", "TRANSPORT", "PORT", "DEFAULT_MAX_DEPTH"):
        monkeypatch.delenv(f"FIBER_INSPECTOR_{name}", raising=False)


def test_defaults() -> None:
    config = ServerConfig()
    assert config.hook_path is None
    assert config.transport == "stdio"
    assert config.default_max_depth == 20
    assert config.default_max_results == 20


def test_environment_prefix(monkeypatch) -> None:
    monkeypatch.setenv("FIBER_INSPECTOR_HOOK_PATH", "myapp.runtime:DEVTOOLS_HOOK")
    monkeypatch.setenv("FIBER_INSPECTOR_DEFAULT_MAX_DEPTH", "5")
    monkeypatch.setenv("FIBER_INSPECTOR_TARGET_URL", "app://main")

    config = ServerConfig()

    assert config.hook_path == "myapp.runtime:DEVTOOLS_HOOK"
    engine = config.get_engine_config()
    assert engine.default_max_depth == 5
    assert engine.target_url == "app://main"
    assert engine.search_instance_limit == 10


def test_dotenv_file(tmp_path) -> None:
    (tmp_path / ".env").write_text("FIBER_INSPECTOR_PORT=9001\n", encoding="utf-8")
    assert ServerConfig().port == 9001


def test_invalid_values_rejected() -> None:
    with pytest.raises(ValidationError):
        ServerConfig(transport="carrier-pigeon")
    with pytest.raises(ValidationError):
        ServerConfig(default_max_results=0)


def test_setup_logging_adds_one_stderr_handler() -> None:
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging("debug")
        setup_logging("debug")
        added = [h for h in root.handlers if h not in before]
        assert len(added) <= 1
        assert root.level == logging.DEBUG
        assert any(getattr(h, "stream", None) is sys.stderr for h in root.handlers)
    finally:
        root.handlers[:] = before
        root.setLevel(level)
