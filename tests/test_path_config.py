from __future__ import annotations

from infra import path as path_mod


def test_data_dir_override_is_created(monkeypatch, tmp_path):
    target = tmp_path / "ledger-data"
    monkeypatch.setenv("OLL_DATA_DIR", str(target))

    assert path_mod.user_data_dir() == target
    assert target.is_dir()
    assert path_mod.default_db_path() == target / "order_ledger.db"


def test_db_url_defaults_to_sqlite_in_the_data_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("OLL_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("OLL_DB_URL", raising=False)

    assert path_mod.default_db_url() == f"sqlite:///{(tmp_path / 'order_ledger.db').as_posix()}"


def test_db_url_override(monkeypatch):
    monkeypatch.setenv("OLL_DB_URL", "sqlite:///:memory:")

    assert path_mod.default_db_url() == "sqlite:///:memory:"
