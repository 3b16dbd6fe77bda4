import asyncio
import logging
import time
import uuid
from typing import Dict, List, Optional, Set
from fastapi.concurrency import iterate_in_threadpool, run_in_threadpool
from volumechat.config.settings import SESSION_TTL_SECONDS
from volumechat.exceptions import (
    ConversationBusyError,
    ReplyNotFoundError,
    SessionNotFoundError
)
from volumechat.models.conversation import ChatSession, ConversationTurn, DisplayMessage
from volumechat.services import render
from volumechat.services.binance import BinanceService
from volumechat.services.intent import extract_symbol, is_volume_query
from volumechat.services.llm import LLMService
from volumechat.streamable import StreamableReply

logger = logging.getLogger(__name__)

def generate_id() -> str:
    return uuid.uuid4().hex


class ConversationService:
    """In-memory chat sessions routing each message to Binance or the LLM"""

    def __init__(self, llm_service: Optional[LLMService] = None,
                 binance_service: Optional[BinanceService] = None,
                 session_ttl: float = SESSION_TTL_SECONDS):
        self.llm_service = llm_service or LLMService()
        self.binance_service = binance_service or BinanceService()
        self.session_ttl = session_ttl
        self.sessions: Dict[str, ChatSession] = {}
        self._tasks: Set[asyncio.Task] = set()

    async def continue_conversation(self, session_id: str, user_input: str) -> DisplayMessage:
        """Start answering user_input and return the assistant message immediately.

        The reply is filled in by a background task; follow it through
        ``get_reply(session_id, message.id).updates()``.
        """
        if not session_id or not session_id.strip():
            raise ValueError("session_id is required")
        if not user_input or not user_input.strip():
            raise ValueError("message is required")

        self._purge_expired()
        session = self.sessions.get(session_id) or self._create_session(session_id)
        if session.busy:
            raise ConversationBusyError(f"Session {session_id} already has a reply in progress")
        session.busy = True
        session.updated_at = time.time()

        session.messages.append(
            DisplayMessage(id=generate_id(), role="user", display=render.user_text(user_input))
        )
        reply = StreamableReply(generate_id(), render.thinking())
        message = DisplayMessage(id=reply.id, role="assistant", display=reply)
        session.messages.append(message)

        task = asyncio.create_task(self._respond(session, user_input, reply))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return message

    def get_session(self, session_id: str) -> ChatSession:
        self._purge_expired()
        session = self.sessions.get(session_id)
        if not session:
            raise SessionNotFoundError(f"No chat session found for id '{session_id}'")
        return session

    def end_session(self, session_id: str) -> None:
        """Forget a session and its history, e.g. when the page is closed"""
        session = self.get_session(session_id)
        del self.sessions[session_id]
        logger.info(f"Session {session_id} ended after {len(session.history)} turn(s)")

    def get_messages(self, session_id: str) -> List[DisplayMessage]:
        return list(self.get_session(session_id).messages)

    def get_history(self, session_id: str) -> List[ConversationTurn]:
        return list(self.get_session(session_id).history)

    def get_reply(self, session_id: str, message_id: str) -> StreamableReply:
        for message in self.get_session(session_id).messages:
            if message.id == message_id and isinstance(message.display, StreamableReply):
                return message.display
        raise ReplyNotFoundError(f"No reply '{message_id}' in session '{session_id}'")

    async def _respond(self, session: ChatSession, user_input: str, reply: StreamableReply) -> None:
        try:
            if is_volume_query(user_input):
                symbol = extract_symbol(user_input)
                if symbol:
                    await self._reply_with_volume(session, user_input, symbol, reply)
                    return

            await self._reply_with_stream(session, user_input, reply)
        except Exception as e:
            logger.error(f"Error in continue_conversation: {e}", exc_info=True)
            if not reply.finished:
                reply.fail(render.stream_error())
        finally:
            session.busy = False

    async def _reply_with_volume(self, session: ChatSession, user_input: str, symbol: str,
                                 reply: StreamableReply) -> None:
        reply.update(render.fetching(symbol))

        try:
            snapshot = await run_in_threadpool(self.binance_service.get_trading_day, symbol)
            card = render.ticker_card(snapshot)
        except Exception as e:
            logger.error(f"Error fetching Binance data for {symbol}: {e}", exc_info=True)
            self._commit(session, user_input, f"Failed to fetch volume for {symbol}")
            reply.done(render.fetch_error(symbol))
            return

        self._commit(session, user_input, f"Fetched volume for {symbol}")
        reply.done(card)

    async def _reply_with_stream(self, session: ChatSession, user_input: str,
                                 reply: StreamableReply) -> None:
        messages = [turn.to_message() for turn in session.history]
        messages.append({"role": "user", "content": user_input})

        full_text = ""
        async for delta in iterate_in_threadpool(self.llm_service.stream_chat(messages)):
            full_text += delta
            reply.update(render.assistant_text(full_text))

        self._commit(session, user_input, full_text)
        reply.done(render.assistant_text(full_text))

    def _create_session(self, session_id: str) -> ChatSession:
        session = ChatSession(session_id=session_id)
        self.sessions[session_id] = session
        return session

    def _purge_expired(self) -> None:
        cutoff = time.time() - self.session_ttl
        expired = [
            session_id for session_id, session in self.sessions.items()
            if not session.busy and session.updated_at < cutoff
        ]
        for session_id in expired:
            del self.sessions[session_id]
        if expired:
            logger.info(f"Dropped {len(expired)} idle session(s)")

    @staticmethod
    def _commit(session: ChatSession, user_input: str, assistant_text: str) -> None:
        session.history.extend([
            ConversationTurn(role="user", content=user_input),
            ConversationTurn(role="assistant", content=assistant_text),
        ])
        session.updated_at = time.time()
