import re
from typing import Dict, Optional

VOLUME_KEYWORDS = ("volume", "binance")

# Insertion order matters: the first alias found in the message wins
CRYPTO_SYMBOLS: Dict[str, str] = {
    "bitcoin": "BTCUSDT",
    "btc": "BTCUSDT",
    "ethereum": "ETHUSDT",
    "eth": "ETHUSDT",
    "bnb": "BNBUSDT",
    "binance coin": "BNBUSDT",
    "cardano": "ADAUSDT",
    "ada": "ADAUSDT",
    "solana": "SOLUSDT",
    "sol": "SOLUSDT",
    "xrp": "XRPUSDT",
    "ripple": "XRPUSDT",
    "dogecoin": "DOGEUSDT",
    "doge": "DOGEUSDT",
}

SYMBOL_PATTERN = re.compile(r"([A-Z]{3,10}USDT)", re.IGNORECASE)


def is_volume_query(user_input: str) -> bool:
    """Check whether the user is asking about Binance volume"""
    lowered = user_input.lower()
    return any(keyword in lowered for keyword in VOLUME_KEYWORDS)


def extract_symbol(user_input: str) -> Optional[str]:
    """Extract a Binance symbol (e.g. BTCUSDT) from user input"""
    lowered = user_input.lower()

    for alias, symbol in CRYPTO_SYMBOLS.items():
        if alias in lowered:
            return symbol

    # Direct symbol format, e.g. "pepeusdt"
    symbol_match = SYMBOL_PATTERN.search(user_input)
    if symbol_match:
        return symbol_match.group(1).upper()

    return None
