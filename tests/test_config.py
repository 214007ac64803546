import logging
from pathlib import Path

import pytest

from smb_dashboard.config import default_app_config, load_app_config
from smb_dashboard.logging_config import configure_logging


def write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "smb_dashboard_config.toml"
    path.write_text(content, encoding="utf-8")
    return path


def test_defaults_when_no_file(tmp_path, monkeypatch) -> None:
    """Without a config file in the working directory, defaults apply."""
    monkeypatch.chdir(tmp_path)

    cfg = load_app_config()

    assert cfg == default_app_config()
    assert cfg.api.base_url == "http://localhost:5001/api"
    assert cfg.page_size == 10
    assert cfg.purchase_category == "Compra de Inventario"


def test_load_full_config(tmp_path) -> None:
    path = write_config(
        tmp_path,
        """
[api]
base_url = "https://erp.example.com/api"
timeout = 5

[reports]
page_size = 25

[inventory]
purchase_category = "Stock Purchase"

[display]
month_labels = "ES"

[logging]
level = "debug"
""",
    )

    cfg = load_app_config(str(path))

    assert cfg.api.base_url == "https://erp.example.com/api"
    assert cfg.api.timeout == pytest.approx(5.0)
    assert cfg.page_size == 25
    assert cfg.purchase_category == "Stock Purchase"
    assert cfg.month_labels == "es"
    assert cfg.log_level == "DEBUG"


def test_partial_config_keeps_defaults(tmp_path) -> None:
    path = write_config(tmp_path, '[reports]\npage_size = 5\n')

    cfg = load_app_config(str(path))

    assert cfg.page_size == 5
    assert cfg.api == default_app_config().api


def test_explicit_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_app_config(str(tmp_path / "missing.toml"))


@pytest.mark.parametrize(
    "content",
    [
        '[api]\nbase_url = "ftp://nowhere"\n',
        "[api]\ntimeout = 0\n",
        '[reports]\npage_size = "many"\n',
        "[reports]\npage_size = 0\n",
        '[display]\nmonth_labels = "fr"\n',
        '[logging]\nlevel = "LOUD"\n',
        "this is not toml = = =",
    ],
)
def test_invalid_values_raise(tmp_path, content) -> None:
    path = write_config(tmp_path, content)

    with pytest.raises(ValueError):
        load_app_config(str(path))


def test_configure_logging_is_idempotent(monkeypatch) -> None:
    """Repeated calls update the level without stacking handlers."""
    monkeypatch.delenv("SMB_DASHBOARD_LOG_LEVEL", raising=False)

    logger = configure_logging("warning")
    count = len(logger.handlers)
    logger = configure_logging("DEBUG")

    assert len(logger.handlers) == count
    assert logger.level == logging.DEBUG

    monkeypatch.setenv("SMB_DASHBOARD_LOG_LEVEL", "ERROR")
    assert configure_logging("DEBUG").level == logging.ERROR
