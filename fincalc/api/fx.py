"""
Exchange rate API endpoints.

Proxies the rate provider so the API key stays on the server. Provider
failures are reported as a message the front end can display.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from fincalc.services.fx import (
    SUPPORTED_CURRENCIES,
    TIME_RANGES,
    FXConfigurationError,
    FXService,
    FXServiceError,
    convert_amount,
    get_fx_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_currency(code: str) -> str:
    code = code.strip().upper()
    if code not in SUPPORTED_CURRENCIES:
        raise HTTPException(status_code=400, detail=f"Unsupported currency: {code}")
    return code


def _provider_error(e: FXServiceError) -> HTTPException:
    if isinstance(e, FXConfigurationError):
        return HTTPException(status_code=500, detail=str(e))
    return HTTPException(status_code=502, detail="Failed to fetch exchange rates")


@router.get("/currencies")
async def list_currencies():
    """Currencies offered by the converter, and history ranges."""
    return {
        "currencies": [
            {"code": code, **details} for code, details in SUPPORTED_CURRENCIES.items()
        ],
        "time_ranges": list(TIME_RANGES),
    }


@router.get("/latest")
async def latest_rates(
    base: str = "USD",
    currencies: str = "EUR,GBP,JPY",
    service: FXService = Depends(get_fx_service),
):
    """Latest rates from a base currency."""
    base = _check_currency(base)
    targets = [_check_currency(code) for code in currencies.split(",") if code.strip()]

    try:
        return await service.get_latest(base, targets)
    except FXServiceError as e:
        logger.error(f"Latest rates for {base} unavailable: {e}")
        raise _provider_error(e)


@router.get("/convert")
async def convert(
    from_currency: str = Query(..., alias="from"),
    to_currency: str = Query(..., alias="to"),
    amount: float = 1.0,
    service: FXService = Depends(get_fx_service),
):
    """Convert an amount at the latest rate."""
    from_currency = _check_currency(from_currency)
    to_currency = _check_currency(to_currency)

    try:
        data = await service.convert(from_currency, to_currency, amount)
    except FXServiceError as e:
        logger.error(f"Conversion {from_currency}->{to_currency} unavailable: {e}")
        raise _provider_error(e)

    rate = (data.get("info") or {}).get("rate")
    if rate is not None and data.get("result") is None:
        data["result"] = convert_amount(amount, rate)
    return data


@router.get("/history")
async def rate_history(
    from_currency: str = Query(..., alias="from"),
    to_currency: str = Query(..., alias="to"),
    time_range: str = Query("1M", alias="range"),
    end_date: Optional[date] = None,
    service: FXService = Depends(get_fx_service),
):
    """Historical rates for a currency pair over a time range."""
    from_currency = _check_currency(from_currency)
    to_currency = _check_currency(to_currency)
    if time_range not in TIME_RANGES:
        raise HTTPException(status_code=400, detail=f"Unknown time range: {time_range}")

    try:
        series = await service.get_history(from_currency, to_currency, time_range, end_date)
    except FXServiceError as e:
        logger.error(f"History {from_currency}->{to_currency} unavailable: {e}")
        raise _provider_error(e)

    return {
        "from": from_currency,
        "to": to_currency,
        "range": time_range,
        "data": series,
    }
