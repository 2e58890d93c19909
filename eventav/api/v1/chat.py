"""
Chat API endpoints.

Provides the conversational interface to the property-grounded orchestrator.

Endpoints:
    POST /api/v1/chat         — JSON body { "messages": [...], "property_id": int }
    POST /api/v1/chat/upload  — multipart form: messages (JSON string), property_id, file
    GET  /api/v1/chat/health  — service status

Error mapping:
    400  unsupported attachment type (raised before any model call)
    413  attachment larger than files.max_upload_bytes
    422  malformed messages
    503  model provider failure or orchestrator not initialised
    500  anything else, including unreadable PDFs
"""

import asyncio
import uuid
from pathlib import Path

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from pydantic import TypeAdapter, ValidationError

from eventav.agents.orchestrator import ChatOrchestrator, ModelProviderError
from eventav.config import get_settings
from eventav.models.chat import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    FileDescriptor,
    ProcessedFile,
)
from eventav.services.file_processor import (
    FileProcessingError,
    UnsupportedFileTypeError,
    process_file,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

_messages_adapter = TypeAdapter(list[ChatMessage])


def get_orchestrator(request: Request) -> ChatOrchestrator:
    """FastAPI dependency returning the orchestrator built at startup."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Chat service unavailable")
    return orchestrator


async def run_conversation(
    orchestrator: ChatOrchestrator,
    messages: list[ChatMessage],
    property_id: int,
    file: ProcessedFile | None = None,
) -> ChatResponse:
    """Run the orchestrator and map its failures to HTTP errors."""
    try:
        result = await orchestrator.process_conversation(messages, property_id, file=file)
    except ModelProviderError as e:
        logger.error("chat_model_provider_error", error=str(e))
        raise HTTPException(status_code=503, detail=f"Model provider error: {e}")
    except Exception:
        logger.exception("chat_request_failed")
        raise HTTPException(
            status_code=500, detail="An error occurred while processing your request"
        )

    logger.info(
        "chat_response_generated",
        response_length=len(result.message or ""),
        function_call_count=result.function_call_count,
        usage=result.usage.model_dump() if result.usage else None,
    )
    return ChatResponse(
        message=result.message,
        usage=result.usage,
        function_call_count=result.function_call_count,
    )


@router.post("", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> ChatResponse:
    """
    Answer the latest turn of a conversation about one property.

    The assistant may look up inventory, room capabilities, order validity and
    labor requirements for that property before answering.
    """
    structlog.contextvars.bind_contextvars(property_id=body.property_id)
    logger.info(
        "chat_request_received",
        message_count=len(body.messages),
        has_file=False,
        last_message=body.messages[-1].content[:100] if body.messages else None,
    )
    return await run_conversation(orchestrator, body.messages, body.property_id)


async def _store_upload(upload: UploadFile, upload_dir: str, max_bytes: int) -> FileDescriptor:
    """Persist an upload under upload_dir with a unique name, enforcing the size cap."""
    content = await upload.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413, detail=f"File exceeds the {max_bytes} byte upload limit"
        )

    suffix = Path(upload.filename or "").suffix
    path = Path(upload_dir) / f"file-{uuid.uuid4().hex}{suffix}"

    def _write() -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    await asyncio.to_thread(_write)
    return FileDescriptor(
        mime_type=upload.content_type or "application/octet-stream",
        path=str(path),
        original_name=upload.filename,
        size=len(content),
    )


@router.post("/upload", response_model=ChatResponse)
async def chat_with_file(
    messages: str = Form(..., description="JSON array of {role, content} turns"),
    property_id: int = Form(...),
    file: UploadFile = File(...),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> ChatResponse:
    """
    Same as POST /chat, with one image or PDF attached to the conversation.

    The stored upload is deleted once the request finishes, successfully or not.
    """
    try:
        turns = _messages_adapter.validate_json(messages)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid messages: {e}")

    structlog.contextvars.bind_contextvars(property_id=property_id)
    settings = get_settings()
    descriptor = await _store_upload(
        file, settings.files.upload_dir, settings.files.max_upload_bytes
    )
    logger.info(
        "chat_request_received",
        message_count=len(turns),
        has_file=True,
        file_type=descriptor.mime_type,
        file_size=descriptor.size,
    )

    try:
        try:
            payload = await process_file(descriptor)
        except UnsupportedFileTypeError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except FileProcessingError as e:
            logger.error("chat_file_processing_failed", error=str(e))
            raise HTTPException(
                status_code=500, detail="An error occurred while processing your file"
            )

        return await run_conversation(orchestrator, turns, property_id, file=payload)
    finally:
        try:
            await asyncio.to_thread(Path(descriptor.path).unlink, missing_ok=True)
        except OSError as e:
            logger.warning("chat_upload_cleanup_failed", path=descriptor.path, error=str(e))


@router.get("/health")
async def health_check() -> dict:
    """Health check for the chat service. Does not call the model."""
    settings = get_settings()
    return {
        "status": "healthy",
        "service": "eventav-chat",
        "openai_configured": bool(settings.openai_api_key),
    }
