from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from agenda.config import Settings
from agenda.main import create_app


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    """Settings pointing at a fresh SQLite file and public dir per test."""
    public = tmp_path / "public"
    public.mkdir()
    (public / "formulario.html").write_text("<html><body>form</body></html>", encoding="utf-8")
    (public / "style.css").write_text("body { color: black; }", encoding="utf-8")
    monkeypatch.setenv("DB_PATH", str(tmp_path / "data" / "agenda.db"))
    monkeypatch.setenv("PUBLIC_DIR", str(public))
    return Settings()


@pytest.fixture
def client(settings):
    # entering the client runs the lifespan, which creates the tables
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def engine(client):
    return client.app.state.engine


def add_user(client, name='Ana', email='ana@x.com', password='p1'):
    return client.post('/usuarios-add', data={'name': name, 'email': email, 'password': password})
