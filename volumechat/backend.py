from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse, StreamingResponse
from pydantic import BaseModel, field_validator
from pathlib import Path
from typing import Any, Dict, List
import json
import logging
from .config.settings import LOG_LEVEL
from .exceptions import ConversationBusyError, ReplyNotFoundError, SessionNotFoundError
from .services.conversation import ConversationService

# Set up logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

app = FastAPI(
    title="Chatbot with Binance integration for checking ticker volume",
    description="A chatbot integrated with Binance to fetch ticker data, specifically volume",
)
app.state.conversation_service = ConversationService()

class ChatRequest(BaseModel):
    session_id: str
    message: str

    @field_validator("session_id", "message")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("field must not be empty")
        return value

def get_service() -> ConversationService:
    return app.state.conversation_service

@app.get("/")
async def index():
    """Serve the chat page"""
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

@app.post("/chat")
async def chat(req: ChatRequest) -> Dict[str, Any]:
    try:
        message = await get_service().continue_conversation(req.session_id, req.message)
    except ConversationBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Session {req.session_id}: started reply {message.id}")
    return message.to_dict()

@app.get("/chat/{session_id}/replies/{message_id}")
async def reply_stream(session_id: str, message_id: str):
    """Stream reply snapshots as newline-delimited JSON until the reply is final"""
    try:
        reply = get_service().get_reply(session_id, message_id)
    except (SessionNotFoundError, ReplyNotFoundError) as e:
        raise HTTPException(status_code=404, detail=e.args[0])

    async def stream_snapshots():
        async for snapshot in reply.updates():
            yield json.dumps(snapshot).encode("utf-8") + b"\n"

    return StreamingResponse(stream_snapshots(), media_type="application/x-ndjson")

@app.get("/chat/{session_id}/messages")
async def messages(session_id: str) -> List[Dict[str, Any]]:
    try:
        return [m.to_dict() for m in get_service().get_messages(session_id)]
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.args[0])

@app.get("/chat/{session_id}/history")
async def history(session_id: str) -> List[Dict[str, str]]:
    try:
        return [turn.to_message() for turn in get_service().get_history(session_id)]
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.args[0])

@app.delete("/chat/{session_id}")
async def end_session(session_id: str) -> Dict[str, str]:
    try:
        get_service().end_session(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.args[0])
    return {"status": "ended"}
