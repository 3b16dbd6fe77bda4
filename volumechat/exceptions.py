from typing import Optional


class BinanceFetchError(Exception):
    """Binance answered with a non-2xx status"""

    def __init__(self, symbol: str, status_code: int, reason: Optional[str] = None):
        self.symbol = symbol
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Failed to fetch data for {symbol}: {status_code} {reason or ''}".strip())


class ConversationBusyError(Exception):
    """A reply is still in flight for this session"""


class SessionNotFoundError(KeyError):
    pass


class ReplyNotFoundError(KeyError):
    pass


class ReplyClosedError(RuntimeError):
    """The reply was already finalised"""
