import pytest

from app.custreg import create_store
from app.custreg.config import ConfigurationError, load_settings
from scripts.customers import main


@pytest.fixture()
def db_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "test.db"
    monkeypatch.setenv("CUSTREG_DATABASE_PATH", str(path))
    monkeypatch.setenv("CUSTREG_ENV", "test")
    monkeypatch.delenv("CUSTREG_LOG_LEVEL", raising=False)
    return path


def test_load_settings_from_env(db_path):
    s = load_settings()
    assert s.database_path == str(db_path)
    assert s.env == "test"
    assert s.log_level == "INFO"
    assert s.database_url == f"sqlite:///{db_path}"


def test_create_store_from_env(db_path):
    store = create_store()
    assert db_path.exists()
    assert store.list_all() == []


def test_create_store_requires_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CUSTREG_DATABASE_PATH", "")
    with pytest.raises(ConfigurationError):
        create_store()


def test_cli_add_list_update_delete(db_path, capsys):
    assert main(["add", "(555) 123-4567", "Ada", "12 Main St", "--email", "ada@example.com"]) == 0
    assert main(["add", "555 123 4567", "Again", "1 St"]) == 1
    assert "Phone already exists." in capsys.readouterr().out

    assert main(["list"]) == 0
    out = capsys.readouterr().out
    assert "5551234567\tAda\t12 Main St\tada@example.com" in out
    assert "rows=1" in out

    assert main(["update", "5551234567", "Ada King", "12 Main St"]) == 0
    assert main(["show", "5551234567"]) == 0
    assert "Ada King" in capsys.readouterr().out

    assert main(["delete", "5551234567"]) == 0
    assert main(["delete", "5551234567"]) == 1
    assert main(["update", "5551234567", "Ada", "12 Main St"]) == 1


def test_cli_add_rejects_invalid_input(db_path, capsys):
    assert main(["add", "123", "Ada", "12 Main St"]) == 1
    assert "Phone must be 7-11 digits. Name and Address required." in capsys.readouterr().out
    assert main(["add", "5551234567", "Ada", "12 Main St", "--email", "bad"]) == 1
    assert "Invalid email" in capsys.readouterr().out


def test_cli_import_export(db_path, tmp_path, capsys):
    src = tmp_path / "in.csv"
    src.write_text("phone,name,address,email\n5551234567,Ada,12 Main St,\n", encoding="utf-8")
    assert main(["import", str(src)]) == 0
    assert "Imported 1, skipped 1 (2 lines read)." in capsys.readouterr().out

    out = tmp_path / "out.csv"
    assert main(["export", str(out)]) == 0
    assert out.read_text(encoding="utf-8") == "5551234567,Ada,12 Main St,\n"

    assert main(["import", str(tmp_path / "missing.csv")]) == 1


def test_cli_db_flag_overrides_env(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CUSTREG_DATABASE_PATH", raising=False)
    assert main(["list"]) == 2
    assert "Database path not set" in capsys.readouterr().out
    assert main(["--db", str(tmp_path / "other.db"), "init"]) == 0
    assert (tmp_path / "other.db").exists()
