"""
Shared fixtures: a temporary SQLite database per test.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Garante que o pacote tagclear seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tagclear.core import config as core_config  # noqa: E402
from tagclear.db import models  # noqa: E402
from tagclear.db import session as db_session  # noqa: E402


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Configura um SQLite temporário e garante teardown completo para não deixar o arquivo bloqueado no Windows."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.delenv("UNLOADED_COLLECTION_POLICY", raising=False)
    _clear_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    engine.dispose()
    _clear_caches()


@pytest.fixture()
def unreachable_db(tmp_path, monkeypatch):
    """Aponta para um arquivo dentro de um diretório que não existe."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'missing' / 'nowhere.db'}")
    _clear_caches()
    yield
    db_session.get_engine().dispose()
    _clear_caches()
