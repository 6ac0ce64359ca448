import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_chat_service, get_message_store
from app.main import app
from app.services.chat_service import ChatService
from app.services.message_store import MessageStore


@pytest.fixture
def store():
    return MessageStore()


@pytest.fixture
def service(store):
    return ChatService(store=store)


@pytest.fixture
def client(store, service):
    app.dependency_overrides[get_message_store] = lambda: store
    app.dependency_overrides[get_chat_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
