import requests
import logging
from volumechat.config.settings import BINANCE_API_BASE_URL
from volumechat.exceptions import BinanceFetchError
from volumechat.models.conversation import TickerSnapshot

logger = logging.getLogger(__name__)

class BinanceService:
    def __init__(self, base_url: str = BINANCE_API_BASE_URL):
        self.base_url = base_url.rstrip("/")

    def get_trading_day(self, symbol: str) -> TickerSnapshot:
        """Get the trading day ticker (24h volume, price change, last price) for a symbol"""
        logger.info(f"Fetching {symbol} trading day ticker from Binance")
        response = requests.get(
            f"{self.base_url}/ticker/tradingDay",
            params={"symbol": symbol}
        )

        if not response.ok:
            logger.error(f"Binance returned {response.status_code} for {symbol}: {response.text}")
            raise BinanceFetchError(symbol, response.status_code, response.reason)

        snapshot = TickerSnapshot.from_binance(symbol, response.json())
        logger.info(f"Binance {symbol}: volume={snapshot.volume}, lastPrice={snapshot.last_price}")
        return snapshot
