import os

import pytest

from stayscore.core import env
from stayscore.core.env import load_dotenv_if_present, resolve_project_path


@pytest.fixture
def project_root(monkeypatch, tmp_path):
    monkeypatch.setenv("STAYSCORE_PROJECT_ROOT", str(tmp_path))
    env._project_root.cache_clear()
    load_dotenv_if_present.cache_clear()
    yield tmp_path
    env._project_root.cache_clear()
    load_dotenv_if_present.cache_clear()


def test_relative_paths_resolve_against_project_root(project_root, tmp_path_factory):
    assert resolve_project_path("data/catalogs/x.json") == project_root / "data" / "catalogs" / "x.json"

    elsewhere = tmp_path_factory.mktemp("abs") / "kv"
    assert resolve_project_path(elsewhere) == elsewhere


def test_dotenv_loads_without_overriding_existing_vars(project_root, monkeypatch):
    (project_root / ".env").write_text("STAYSCORE_TEST_NEW=from-file\nSTAYSCORE_TEST_SET=from-file\n", encoding="utf-8")
    monkeypatch.delenv("STAYSCORE_TEST_NEW", raising=False)
    monkeypatch.setenv("STAYSCORE_TEST_SET", "from-process")

    assert load_dotenv_if_present() == project_root / ".env"
    assert os.environ["STAYSCORE_TEST_NEW"] == "from-file"
    assert os.environ["STAYSCORE_TEST_SET"] == "from-process"
    monkeypatch.delenv("STAYSCORE_TEST_NEW")


def test_missing_dotenv_is_not_an_error(project_root):
    assert load_dotenv_if_present() is None
