"""
Exchange rate service backed by fxratesapi.com.

Only fetches rates; conversion itself is a multiplication. Failures are
raised as FXServiceError and are turned into user-facing messages by the
API layer.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

import httpx
from dateutil.relativedelta import relativedelta

from fincalc.config import get_settings

logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEY = "your_api_key_here"

SUPPORTED_CURRENCIES: Dict[str, Dict[str, str]] = {
    # Major currencies
    "USD": {"name": "US Dollar", "symbol": "$"},
    "EUR": {"name": "Euro", "symbol": "€"},
    "GBP": {"name": "British Pound", "symbol": "£"},
    "JPY": {"name": "Japanese Yen", "symbol": "¥"},
    "CHF": {"name": "Swiss Franc", "symbol": "CHF"},
    # North America & Oceania
    "CAD": {"name": "Canadian Dollar", "symbol": "C$"},
    "AUD": {"name": "Australian Dollar", "symbol": "A$"},
    "NZD": {"name": "New Zealand Dollar", "symbol": "NZ$"},
    # Asia
    "CNY": {"name": "Chinese Yuan", "symbol": "¥"},
    "HKD": {"name": "Hong Kong Dollar", "symbol": "HK$"},
    "SGD": {"name": "Singapore Dollar", "symbol": "S$"},
    "KRW": {"name": "South Korean Won", "symbol": "₩"},
    "INR": {"name": "Indian Rupee", "symbol": "₹"},
    "MYR": {"name": "Malaysian Ringgit", "symbol": "RM"},
    "THB": {"name": "Thai Baht", "symbol": "฿"},
    "PHP": {"name": "Philippine Peso", "symbol": "₱"},
    "IDR": {"name": "Indonesian Rupiah", "symbol": "Rp"},
    # Other
    "SEK": {"name": "Swedish Krona", "symbol": "kr"},
    "NOK": {"name": "Norwegian Krone", "symbol": "kr"},
}

TIME_RANGES = ("5D", "1M", "1Y", "5Y", "Max")
MAX_HISTORY_START = date(1999, 1, 1)
RANGE_OFFSETS = {
    "5D": relativedelta(days=5),
    "1M": relativedelta(months=1),
    "1Y": relativedelta(years=1),
    "5Y": relativedelta(years=5),
}


class FXServiceError(Exception):
    """Raised when exchange rates cannot be fetched."""


class FXConfigurationError(FXServiceError):
    """Raised when the rate provider is not configured."""


def convert_amount(amount: float, rate: float) -> float:
    """Convert an amount with a quoted rate."""
    return amount * rate


def time_range_start(time_range: str, today: Optional[date] = None) -> date:
    """
    Start date of a historical time range.

    Raises:
        ValueError: If the range is not one of TIME_RANGES
    """
    if today is None:
        today = date.today()

    if time_range == "Max":
        return MAX_HISTORY_START
    if time_range not in RANGE_OFFSETS:
        raise ValueError(f"Unknown time range: {time_range}")
    return today - RANGE_OFFSETS[time_range]


class FXService:
    """Client for the exchange rate provider."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.fx_api_base_url).rstrip("/")
        self.api_key = settings.fx_api_key if api_key is None else api_key
        self.timeout = timeout or settings.fx_request_timeout
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    async def _get(self, path: str, params: Dict[str, str]) -> Dict:
        """Issue a GET against the provider and decode the JSON body."""
        if not self.is_configured:
            raise FXConfigurationError("API key not configured")

        query = {**params, "api_key": self.api_key}
        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url, params=query)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"FX API request to {path} failed: {e}")
            raise FXServiceError(f"FX API error: {e}") from e
        except ValueError as e:
            logger.error(f"FX API returned invalid JSON for {path}: {e}")
            raise FXServiceError(f"Invalid FX API response: {e}") from e

        if isinstance(data, dict) and data.get("success") is False:
            logger.error(f"FX API reported failure for {path}: {data}")
            raise FXServiceError(data.get("description") or "FX API reported failure")

        return data

    async def get_latest(self, base: str = "USD", currencies: Optional[List[str]] = None) -> Dict:
        """Latest rates from base to each of the given currencies."""
        if currencies is None:
            currencies = ["EUR", "GBP", "JPY"]
        return await self._get(
            "/latest", {"base": base, "currencies": ",".join(currencies)}
        )

    async def convert(self, from_currency: str, to_currency: str, amount: float = 1.0) -> Dict:
        """Convert an amount between two currencies at the latest rate."""
        return await self._get(
            "/convert",
            {"from": from_currency, "to": to_currency, "amount": str(amount)},
        )

    async def get_history(
        self,
        from_currency: str,
        to_currency: str,
        time_range: str = "1M",
        today: Optional[date] = None,
    ) -> List[Dict]:
        """
        Historical rates for a currency pair.

        Returns:
            List of {"date", "rate"} dicts ordered by date
        """
        if today is None:
            today = date.today()
        start = time_range_start(time_range, today)

        data = await self._get(
            "/timeseries",
            {
                "start_date": start.isoformat(),
                "end_date": today.isoformat(),
                "base": from_currency,
                "currencies": to_currency,
            },
        )

        try:
            series = [
                {"date": day[:10], "rate": float(rates[to_currency])}
                for day, rates in data["rates"].items()
                if to_currency in rates
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Failed to parse FX timeseries: {e}")
            raise FXServiceError(f"Invalid FX timeseries format: {e}") from e

        return sorted(series, key=lambda point: point["date"])


def get_fx_service() -> FXService:
    """Get an FX service configured from settings."""
    return FXService()
