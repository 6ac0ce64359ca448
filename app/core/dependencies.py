from app.config import get_settings
from app.services.chat_service import chat_service
from app.services.message_store import message_store


def get_chat_service():
    """Dependency to get the chat service."""
    return chat_service


def get_message_store():
    """Dependency to get the shared message log."""
    return message_store


def get_app_settings():
    """Dependency to get application settings."""
    return get_settings()
