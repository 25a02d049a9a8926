from __future__ import annotations

from price_compare.engines.browser_engine import app_data_dir, configure_browsers_path


def test_browsers_path_defaults_to_app_data_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
    monkeypatch.delenv("PLAYWRIGHT_BROWSERS_PATH", raising=False)

    path = configure_browsers_path()

    assert path == str(tmp_path / "price-compare" / "ms-playwright")
    assert app_data_dir().is_dir()


def test_existing_browsers_path_is_kept(monkeypatch, tmp_path):
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
    monkeypatch.setenv("PLAYWRIGHT_BROWSERS_PATH", "/opt/browsers")
    assert configure_browsers_path() == "/opt/browsers"
