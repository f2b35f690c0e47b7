import os

# must be set before the app modules read their config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["WITH_AUTH"] = "false"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["PERSIST_DEBOUNCE_SECONDS"] = "30"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel

from app.db import engine, init_db
from app.main import app
from app.services.persistence import writer


@pytest.fixture(autouse=True)
def fresh_db():
    init_db()
    yield
    writer.flush_all()
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c