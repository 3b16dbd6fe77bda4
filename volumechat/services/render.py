"""HTML fragments pushed to the chat page."""
import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from html import escape
from typing import Optional
from volumechat.models.conversation import TickerSnapshot

SPINNER = '<div class="spinner" role="status" aria-label="{label}"></div>'


def format_number(value: float, max_fraction_digits: int) -> str:
    """Group thousands and keep at most max_fraction_digits, trimming zeros"""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    text = f"{_round_half_up(value, max_fraction_digits):,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_fixed(value: float, fraction_digits: int) -> str:
    """Fixed number of fraction digits, halves rounded away from zero"""
    if not math.isfinite(value):
        return format_number(value, fraction_digits)
    return f"{_round_half_up(value, fraction_digits):f}"


def _round_half_up(value: float, fraction_digits: int) -> Decimal:
    return Decimal(value).quantize(Decimal(1).scaleb(-fraction_digits), rounding=ROUND_HALF_UP)


def thinking() -> str:
    return (
        '<section class="status">'
        + SPINNER.format(label="Loading")
        + "<span>Thinking...</span></section>"
    )


def user_text(text: str) -> str:
    return f"<p>{escape(text)}</p>"


def assistant_text(text: str) -> str:
    return f'<p class="assistant-text">{escape(text)}</p>'


def stream_error() -> str:
    return '<p class="error-text">Error occurred</p>'


def fetching(symbol: str) -> str:
    return (
        '<article class="card card-loading"><div class="status">'
        + SPINNER.format(label="Fetching data")
        + f"<span>Fetching {escape(symbol)} data from Binance...</span></div></article>"
    )


def fetch_error(symbol: str) -> str:
    return (
        '<article class="card card-error"><p>'
        f"<strong>Error:</strong> Failed to fetch data for {escape(symbol)}. "
        "Make sure the symbol is valid (e.g., BTCUSDT, ETHUSDT)."
        "</p></article>"
    )


def ticker_card(snapshot: TickerSnapshot, updated_at: Optional[datetime] = None) -> str:
    updated_at = updated_at or datetime.now()
    rising = snapshot.price_change >= 0
    symbol = escape(snapshot.symbol)
    percent = format_fixed(snapshot.price_change_percent, 2)

    return (
        '<article class="card card-ticker">'
        '<header>'
        f"<h3>{symbol}</h3>"
        f'<p class="{"change-up" if rising else "change-down"}">{"↑" if rising else "↓"} {percent}%</p>'
        "</header>"
        "<section>"
        '<div><p class="label">Current Price</p>'
        f'<p class="price">${format_number(snapshot.last_price, 3)}</p></div>'
        '<div class="grid">'
        '<div class="cell"><p class="label">24h Volume</p>'
        f'<p class="value">{format_number(snapshot.volume, 2)}</p>'
        f'<p class="label">{escape(snapshot.base_asset)}</p></div>'
        '<div class="cell"><p class="label">24h Volume (USDT)</p>'
        f'<p class="value">${format_number(snapshot.quote_volume, 0)}</p></div>'
        "</div>"
        "</section>"
        f'<footer>Data from Binance • Last updated: {updated_at.strftime("%H:%M:%S")}</footer>'
        "</article>"
    )
