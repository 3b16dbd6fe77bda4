"""A reply whose rendered content changes while background work runs.

The request handler returns a ``StreamableReply`` right away. The background
task pushes fragments into it with ``update`` and finalises it exactly once
with ``done`` or ``fail``. Readers follow the changes through ``updates``.
"""
import asyncio
import logging
from typing import Any, AsyncIterator, Dict, Optional
from volumechat.exceptions import ReplyClosedError
from volumechat.models.conversation import ReplyState

logger = logging.getLogger(__name__)

class StreamableReply:
    def __init__(self, reply_id: str, initial: str):
        self.id = reply_id
        self.state = ReplyState.PENDING
        self._current = initial
        self._version = 0
        self._changed = asyncio.Event()
        self._finished = asyncio.Event()

    @property
    def current(self) -> str:
        return self._current

    @property
    def finished(self) -> bool:
        return self.state.terminal

    def snapshot(self) -> Dict[str, Any]:
        return {"id": self.id, "state": self.state.value, "display": self._current}

    def update(self, display: str) -> None:
        self._ensure_open()
        self.state = ReplyState.STREAMING
        self._publish(display)

    def done(self, display: Optional[str] = None) -> None:
        self._finish(ReplyState.DONE, display)

    def fail(self, display: str) -> None:
        self._finish(ReplyState.FAILED, display)

    async def wait(self) -> ReplyState:
        await self._finished.wait()
        return self.state

    async def updates(self) -> AsyncIterator[Dict[str, Any]]:
        """Yield a snapshot per change, ending with the terminal one"""
        seen = -1
        while True:
            if seen != self._version:
                seen = self._version
                yield self.snapshot()
                if self.finished:
                    return
            else:
                await self._changed.wait()

    def _finish(self, state: ReplyState, display: Optional[str]) -> None:
        self._ensure_open()
        self.state = state
        self._publish(self._current if display is None else display)
        self._finished.set()
        logger.debug(f"Reply {self.id} finalised as {state.value}")

    def _publish(self, display: str) -> None:
        self._current = display
        self._version += 1
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    def _ensure_open(self) -> None:
        if self.finished:
            raise ReplyClosedError(f"Reply {self.id} is already {self.state.value}")
