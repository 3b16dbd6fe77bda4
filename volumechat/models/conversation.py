import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Union

if TYPE_CHECKING:
    from volumechat.streamable import StreamableReply


class ReplyState(str, Enum):
    PENDING = "pending"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (ReplyState.DONE, ReplyState.FAILED)


@dataclass
class ConversationTurn:
    role: str  # "user|assistant"
    content: str

    def to_message(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class DisplayMessage:
    id: str
    role: str  # "user|assistant"
    display: Union[str, "StreamableReply"]  # html fragment or live reply

    def to_dict(self) -> Dict[str, Any]:
        display = self.display if isinstance(self.display, str) else self.display.current
        return {"id": self.id, "role": self.role, "display": display}


@dataclass
class TickerSnapshot:
    symbol: str
    volume: float
    quote_volume: float
    price_change: float
    price_change_percent: float
    last_price: float

    @classmethod
    def from_binance(cls, symbol: str, data: Dict[str, Any]) -> "TickerSnapshot":
        """Parse a tradingDay payload. Missing or non-numeric fields become NaN."""
        return cls(
            symbol=symbol,
            volume=_parse_float(data.get("volume")),
            quote_volume=_parse_float(data.get("quoteVolume")),
            price_change=_parse_float(data.get("priceChange")),
            price_change_percent=_parse_float(data.get("priceChangePercent")),
            last_price=_parse_float(data.get("lastPrice")),
        )

    @property
    def base_asset(self) -> str:
        return self.symbol.replace("USDT", "")


@dataclass
class ChatSession:
    session_id: str
    history: List[ConversationTurn] = field(default_factory=list)
    messages: List[DisplayMessage] = field(default_factory=list)
    busy: bool = False
    updated_at: float = field(default_factory=time.time)


def _parse_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan
