import asyncio
import pytest
from unittest.mock import MagicMock

from volumechat.services.binance import BinanceService
from volumechat.services.conversation import ConversationService
from volumechat.services.llm import LLMService


@pytest.fixture
def ticker_payload():
    """Trimmed Binance /ticker/tradingDay response."""
    return {
        "symbol": "BTCUSDT",
        "priceChange": "1250.50000000",
        "priceChangePercent": "2.563",
        "weightedAvgPrice": "49500.12000000",
        "openPrice": "48749.50000000",
        "highPrice": "50500.00000000",
        "lowPrice": "48100.00000000",
        "lastPrice": "50000.00000000",
        "volume": "1000.00000000",
        "quoteVolume": "49500120.00000000",
        "openTime": 1760832000000,
        "closeTime": 1760918399999,
        "count": 1843211,
    }


@pytest.fixture
def make_response():
    def _make(status_code=200, payload=None, reason="OK"):
        response = MagicMock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 300
        response.reason = reason
        response.text = str(payload)
        response.json.return_value = payload or {}
        return response
    return _make


@pytest.fixture
def fake_llm():
    llm = MagicMock(spec=LLMService)
    llm.stream_chat.side_effect = lambda messages: iter(["Hello", ", ", "world"])
    return llm


@pytest.fixture
def fake_binance():
    return MagicMock(spec=BinanceService)


@pytest.fixture
def service(fake_llm, fake_binance):
    return ConversationService(llm_service=fake_llm, binance_service=fake_binance)


@pytest.fixture
def ask():
    """Submit a message and wait for the background reply to finish."""
    def _ask(service, text, session_id="session-1"):
        async def run():
            message = await service.continue_conversation(session_id, text)
            state = await message.display.wait()
            return message, state
        return asyncio.run(run())
    return _ask
