"""Pytest configuration and fixtures."""

import json
import os
import sys
import tempfile
from pathlib import Path

# Add backend/ to sys.path for imports
BACKEND_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(BACKEND_ROOT))

# Settings are read at import time, so the environment must be ready first
_DB_DIR = tempfile.mkdtemp(prefix="educa-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/test.db"
os.environ["JWT_SECRET_KEY"] = "test-secret"
for _name in ("LLM_API_KEY", "BREVO_API_KEY", "EMAIL_SENDER", "FRONTEND_URL"):
    os.environ.pop(_name, None)

import httpx
import pytest
from fastapi.testclient import TestClient

from educa.db import Base, SessionLocal, engine, get_db
from educa.generation import ResourceGenerator
from educa.llm_client import ChatCompletionClient, LLMConfig
from educa.main import app
from educa.routers.resources import get_generator


TEST_LLM_CONFIG = LLMConfig(base_url="http://llm.test/v1", api_key="test-key", model="test-model")


def completion_body(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class ScriptedLLM:
    """Chat completions endpoint that answers from a queue of replies.

    A str reply is returned as the message content, a dict as the raw response
    body, an int as an HTTP error status. An exhausted queue answers 500.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        reply = self.replies.pop(0) if self.replies else 500
        if isinstance(reply, int):
            return httpx.Response(reply, text="upstream error")
        if isinstance(reply, dict):
            return httpx.Response(200, json=reply)
        return httpx.Response(200, json=completion_body(reply))

    def client(self) -> ChatCompletionClient:
        return ChatCompletionClient(TEST_LLM_CONFIG, transport=httpx.MockTransport(self.handler))

    def generator(self) -> ResourceGenerator:
        return ResourceGenerator(self.client())


@pytest.fixture
def llm():
    return ScriptedLLM()


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def api(db, llm):
    def _get_db():
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_generator] = llm.generator
    # Not used as a context manager: the startup hook (cleanup watcher) stays off
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def register_and_login(api, email="docente@example.com", password="secreto123", nombre="Docente"):
    api.post("/api/auth/register", json={"nombre": nombre, "email": email, "password": password})
    res = api.post("/api/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['token']}"}


@pytest.fixture
def auth_headers(api):
    return register_and_login(api)


@pytest.fixture
def login(api):
    def _login(email, password="secreto123", nombre="Docente"):
        return register_and_login(api, email=email, password=password, nombre=nombre)
    return _login
