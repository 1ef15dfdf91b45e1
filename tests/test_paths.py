import pytest

from linkadmin.db import paths


def test_user_data_dir_with_override(monkeypatch, tmp_path):
    monkeypatch.setenv("LINKADMIN_DATA_DIR", str(tmp_path))
    p = paths.user_data_dir()
    assert p == tmp_path.resolve()
    assert p.exists()


@pytest.mark.parametrize("system_name", ["Windows", "Darwin", "Linux"])
def test_user_data_dir_per_os(monkeypatch, tmp_path, system_name):
    monkeypatch.delenv("LINKADMIN_DATA_DIR", raising=False)
    monkeypatch.setenv("APPDATA", str(tmp_path))
    monkeypatch.setattr(paths.Path, "home", lambda: tmp_path)
    monkeypatch.setattr(paths.platform, "system", lambda: system_name)
    p = paths.user_data_dir()
    assert p.name == "LinkAdmin"
    assert p.exists()


def test_db_path_points_to_links_db(monkeypatch, tmp_path):
    monkeypatch.setenv("LINKADMIN_DATA_DIR", str(tmp_path))
    p = paths.db_path()
    assert p.name == "links.db"
    assert p.parent == tmp_path.resolve()


def test_lang_dir_default_and_override(monkeypatch, tmp_path):
    monkeypatch.setenv("LINKADMIN_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("LINKADMIN_LANG_DIR", raising=False)
    assert paths.lang_dir() == tmp_path.resolve() / "languages"

    monkeypatch.setenv("LINKADMIN_LANG_DIR", str(tmp_path / "mo"))
    assert paths.lang_dir() == (tmp_path / "mo").resolve()


def test_alembic_dir_with_override(monkeypatch, tmp_path):
    override = tmp_path / "alembic_override"
    override.mkdir()
    monkeypatch.setenv("LINKADMIN_ALEMBIC_DIR", str(override))
    assert paths.alembic_dir() == override.resolve()


def test_alembic_dir_with_project_root(monkeypatch, tmp_path):
    project_root = tmp_path / "proj"
    alembic_dir = project_root / "alembic_migrations"
    alembic_dir.mkdir(parents=True)
    monkeypatch.delenv("LINKADMIN_ALEMBIC_DIR", raising=False)
    monkeypatch.setattr(paths, "__file__", str(project_root / "linkadmin" / "db" / "paths.py"))
    assert paths.alembic_dir() == alembic_dir


def test_alembic_dir_fallback(monkeypatch, tmp_path):
    monkeypatch.setenv("LINKADMIN_ALEMBIC_DIR", str(tmp_path / "does_not_exist"))
    monkeypatch.setattr(paths, "__file__", str(tmp_path / "linkadmin" / "db" / "paths.py"))
    monkeypatch.setenv("LINKADMIN_DATA_DIR", str(tmp_path / "data"))
    p = paths.alembic_dir()
    assert p == (tmp_path / "data").resolve() / "alembic_migrations"
    assert p.exists()


def test_database_url_default_and_override(monkeypatch, tmp_path):
    monkeypatch.setenv("LINKADMIN_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("LINKADMIN_DATABASE_URL", raising=False)
    assert paths.database_url() == f"sqlite:///{(tmp_path.resolve() / 'links.db').as_posix()}"

    monkeypatch.setenv("LINKADMIN_DATABASE_URL", "sqlite:////srv/shared/links.db")
    assert paths.database_url() == "sqlite:////srv/shared/links.db"
