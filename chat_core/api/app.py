"""HTTP 传输层。

POST /api/chat 接收 {messages, model}，调用 ResponseDispatcher，
再把上游字节流原样、逐块转发给调用方（不缓冲整段响应）。
"""

from __future__ import annotations

from typing import AsyncIterator, List, Literal, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel
from starlette.background import BackgroundTask

from chat_core.api.service import ResponseDispatcher, get_default_dispatcher
from chat_core.domain.exceptions import BusinessError, StreamInterruptedError
from chat_core.domain.models import ChatMessage
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers import ResponseStream
from chat_core.providers.registry import resolve_default

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"


class MessageIn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequestBody(BaseModel):
    messages: List[MessageIn]
    model: Optional[str] = None


async def _relay(stream: ResponseStream) -> AsyncIterator[bytes]:
    try:
        async for chunk in stream:
            yield chunk
    except StreamInterruptedError as exc:
        logger.warning(
            "upstream stream interrupted",
            extra={"extra": {"provider": stream.provider, "model": stream.model, "error": exc.message}},
        )
        raise
    finally:
        # 调用方断开时同样要关闭上游连接
        await stream.aclose()


def create_app(dispatcher: ResponseDispatcher | None = None) -> FastAPI:
    app = FastAPI(title="chat_core", version="0.1.0")

    def _dispatcher() -> ResponseDispatcher:
        return dispatcher or get_default_dispatcher()

    @app.exception_handler(BusinessError)
    async def handle_business_error(_request: Request, exc: BusinessError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.http_status,
            content={"code": exc.code, "message": exc.message, **exc.extra},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info(
            "rejected malformed chat request",
            extra={"extra": {"path": request.url.path, "errors": len(exc.errors())}},
        )
        return await request_validation_exception_handler(request, exc)

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/models")
    async def models() -> dict:
        return {
            "default": resolve_default().id,
            "models": [{"id": m.id, "name": m.name} for m in _dispatcher().get_available_models()],
        }

    @app.post("/api/chat")
    async def chat(payload: ChatRequestBody) -> StreamingResponse:
        messages = [ChatMessage(role=m.role, content=m.content) for m in payload.messages]
        stream = await _dispatcher().generate_response(messages, payload.model or "")
        return StreamingResponse(
            _relay(stream),
            media_type=STREAM_MEDIA_TYPE,
            background=BackgroundTask(stream.aclose),
        )

    return app


app = create_app()
