"""
Chat message API endpoints.

Provides endpoints for:
- Encrypting and sharing a message to the log
- Decrypting pasted ciphertext
- Inline decryption of a stored message
- Paginated and live (Server-Sent Events) views of the log
- Configuration endpoint for frontend
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from app.config import Settings
from app.core.crypto.errors import CipherError
from app.core.crypto.key_derivation import supported_versions
from app.core.dependencies import get_app_settings, get_chat_service, get_message_store
from app.models.message import MessageRecord
from app.models.schemas import (
    ConfigResponse,
    DecryptRecordRequest,
    DecryptResponse,
    DecryptTextRequest,
    ErrorResponse,
    MessagePage,
    ShareMessageRequest,
)
from app.services.chat_service import ChatService
from app.services.message_store import MessageNotFoundError, MessageStore


router = APIRouter(prefix="/messages", tags=["Messages"])
config_router = APIRouter(tags=["Configuration"])

_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}

# User-facing wording per error kind
_CIPHER_MESSAGES = {
    "invalid_encoding": "Not a valid ciphertext (expected padded Base64)",
    "invalid_text": "Decryption failed: wrong password or corrupted ciphertext",
    "invalid_key": "Decryption failed: unusable key",
}


def _bad_request(detail: str, code: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"detail": detail, "code": code},
    )


def _cipher_error(e: CipherError) -> HTTPException:
    return _bad_request(_CIPHER_MESSAGES.get(e.code, str(e)), e.code)


# ===========================================================
# Configuration
# ===========================================================

@config_router.get(
    "/config",
    response_model=ConfigResponse,
    summary="Get configuration",
    description="Get page size and key derivation settings for the frontend."
)
async def get_config(settings: Settings = Depends(get_app_settings)):
    return ConfigResponse(
        messages_per_page=settings.messages_per_page,
        default_key_version=settings.default_key_version,
        supported_key_versions=supported_versions(),
    )


# ===========================================================
# Log
# ===========================================================

@router.get(
    "",
    response_model=MessagePage,
    summary="List messages",
    description="Get one page of the message log, newest first."
)
async def list_messages(
    page: int = Query(1, description="1-based page number"),
    service: ChatService = Depends(get_chat_service),
):
    return MessagePage(**service.get_page(page))


@router.get(
    "/stream",
    summary="Live message feed",
    description="Server-Sent Events stream: existing messages oldest-first, then new ones as they arrive."
)
async def stream_messages(store: MessageStore = Depends(get_message_store)):
    async def events():
        async for record in store.subscribe():
            yield f"id: {record.id}\nevent: message\ndata: {record.model_dump_json()}\n\n"

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


# ===========================================================
# Encrypt / Decrypt
# ===========================================================

@router.post(
    "/encrypt",
    response_model=MessageRecord,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Encrypt and share",
    description="Encrypt a message with a shared password and append it to the log."
)
async def share_message(
    request: ShareMessageRequest,
    service: ChatService = Depends(get_chat_service),
):
    """
    The stored record carries only a password placeholder; the
    ciphertext is padded Base64 in ``text``.
    """
    try:
        return service.share_encrypted(
            sender=request.sender,
            password=request.password,
            text=request.text,
        )
    except CipherError as e:
        raise _cipher_error(e)
    except ValueError as e:
        raise _bad_request(str(e), "invalid_request")


@router.post(
    "/decrypt",
    response_model=DecryptResponse,
    responses=_ERRORS,
    summary="Decrypt ciphertext",
    description="Decrypt pasted ciphertext. Nothing is stored."
)
async def decrypt_text(
    request: DecryptTextRequest,
    service: ChatService = Depends(get_chat_service),
):
    """
    Note that a wrong password can still yield valid (garbage) text;
    success does not prove the password was correct.
    """
    try:
        text = service.decrypt_text(request.text, request.password, request.key_version)
    except CipherError as e:
        raise _cipher_error(e)
    except ValueError as e:
        raise _bad_request(str(e), "invalid_request")
    return DecryptResponse(text=text)


@router.post(
    "/{message_id}/decrypt",
    response_model=DecryptResponse,
    responses=_ERRORS,
    summary="Decrypt a stored message",
    description="Decrypt a message from the log using the key version it was written with."
)
async def decrypt_message(
    message_id: str,
    request: DecryptRecordRequest,
    service: ChatService = Depends(get_chat_service),
):
    try:
        text = service.decrypt_record(message_id, request.password)
    except MessageNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"detail": str(e), "code": e.code},
        )
    except CipherError as e:
        raise _cipher_error(e)
    except ValueError as e:
        raise _bad_request(str(e), "invalid_request")
    return DecryptResponse(text=text, message_id=message_id)
