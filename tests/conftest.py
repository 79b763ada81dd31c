import pytest
from fastapi.testclient import TestClient

import database.database as db
from handlers.common import get_verifier
from server import app
from utils.auth import AuthError


class FakeVerifier:
    """Accepts tokens of the form ``uid:<uid>``."""

    def __init__(self):
        self.tokens = []

    def verify(self, token):
        self.tokens.append(token)
        if not token.startswith('uid:'):
            raise AuthError('bad token')
        uid = token[len('uid:'):]
        return {'uid': uid, 'email': f'{uid}@example.com'}


@pytest.fixture()
def tdb(tmp_path, monkeypatch):
    """Patch DB_PATH to a fresh temp file and initialise the schema."""
    db_path = str(tmp_path / "test.db")
    monkeypatch.setattr(db, 'DB_PATH', db_path)
    db.init_db()
    return db_path


@pytest.fixture()
def verifier():
    return FakeVerifier()


@pytest.fixture()
def api(tdb, verifier):
    """TestClient against the sync service with the fake verifier plugged in."""
    app.dependency_overrides[get_verifier] = lambda: verifier
    yield TestClient(app)
    app.dependency_overrides.clear()
