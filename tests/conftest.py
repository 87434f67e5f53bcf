import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the real user config."""
    monkeypatch.setenv("APPDATA", str(tmp_path))
    return tmp_path / "mkpw" / "config.json"
