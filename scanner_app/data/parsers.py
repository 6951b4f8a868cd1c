"""
Parsers converting raw data-layer records into canonical input models.

Records arrive as dictionaries decoded from JSON or database rows. Both the
camelCase API field names and the snake_case column names are accepted.
"""

import math
from typing import Any, Iterable, Optional

from ..errors import MalformedDataError
from ..utils.time import date_from_timestamp
from .models import OptionQuote, PricePoint, StrikeQuote


def _first_present(record: dict[str, Any], *keys: str) -> Any:
    """Return the value of the first key present with a non-None value."""
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return None


def _to_float(value: Any, field: str, default: Optional[float] = None) -> Optional[float]:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise MalformedDataError(
            f"Invalid numeric value for {field}: {value!r}",
            raw_data=str(value),
            expected_format="number"
        ) from e


def _to_int(value: Any, field: str, default: int = 0) -> int:
    number = _to_float(value, field)
    if number is None or not math.isfinite(number):
        return default
    return int(round(number))


def parse_price_point(record: dict[str, Any]) -> PricePoint:
    """
    Parse a single price bar record.

    Accepted keys: ``timestampSeconds``/``timestamp_seconds``/``timestamp``,
    ``date``, ``open``, ``high``, ``low``, ``close``, ``volume``.

    Args:
        record: Raw bar dictionary

    Returns:
        PricePoint (values are not range-checked; see PriceSeriesValidator)

    Raises:
        MalformedDataError: If required fields are missing or not numeric
    """
    if not isinstance(record, dict):
        raise MalformedDataError("Price record must be a dictionary", raw_data=str(record)[:100])

    timestamp = _first_present(record, "timestampSeconds", "timestamp_seconds", "timestamp")
    if timestamp is None:
        raise MalformedDataError("Price record missing timestamp", raw_data=str(record)[:100])
    try:
        timestamp_seconds = int(timestamp)
    except (TypeError, ValueError) as e:
        raise MalformedDataError(
            f"Invalid timestamp: {timestamp!r}",
            raw_data=str(timestamp),
            expected_format="unix seconds"
        ) from e

    prices = {}
    for field in ("open", "high", "low", "close"):
        if record.get(field) is None:
            raise MalformedDataError(f"Price record missing {field}", raw_data=str(record)[:100])
        prices[field] = _to_float(record[field], field)

    return PricePoint(
        date=record.get("date") or date_from_timestamp(timestamp_seconds),
        timestamp_seconds=timestamp_seconds,
        open=prices["open"],
        high=prices["high"],
        low=prices["low"],
        close=prices["close"],
        volume=_to_int(record.get("volume"), "volume"),
    )


def parse_price_history(records: Iterable[dict[str, Any]]) -> list[PricePoint]:
    """Parse bar records and return them sorted by timestamp ascending."""
    points = [parse_price_point(record) for record in records]
    return sorted(points, key=lambda p: p.timestamp_seconds)


def _parse_option_side(record: dict[str, Any], side: str) -> OptionQuote:
    """Parse one side of a strike row from nested or flat shapes."""
    nested = record.get(side)
    if isinstance(nested, dict):
        source = nested
        oi = _first_present(source, "oi", "openInterest", "open_interest")
        volume = _first_present(source, "volume")
        iv = _first_present(source, "iv", "impliedVolatility")
        greeks = source
    else:
        # Flat wire shape: callOpenInterest / call_oi / callIV, shared greeks
        source = record
        oi = _first_present(record, f"{side}OpenInterest", f"{side}_oi", f"{side}_open_interest")
        volume = _first_present(record, f"{side}Volume", f"{side}_volume")
        iv = _first_present(record, f"{side}IV", f"{side}_iv")
        greeks = {
            name: _first_present(record, f"{side}_{name}", f"{side}{name.capitalize()}", name)
            for name in ("gamma", "charm", "vanna", "vomma")
        }

    return OptionQuote(
        open_interest=_to_int(oi, f"{side}.oi"),
        volume=_to_int(volume, f"{side}.volume"),
        iv=_to_float(iv, f"{side}.iv"),
        gamma=_to_float(greeks.get("gamma"), f"{side}.gamma", 0.0),
        charm=_to_float(greeks.get("charm"), f"{side}.charm", 0.0),
        vanna=_to_float(greeks.get("vanna"), f"{side}.vanna", 0.0),
        vomma=_to_float(greeks.get("vomma"), f"{side}.vomma", 0.0),
    )


def parse_strike_quote(record: dict[str, Any]) -> StrikeQuote:
    """
    Parse a strike row of an options chain.

    Args:
        record: Either ``{"strike", "call": {...}, "put": {...}}`` or the flat
            shape with ``callOpenInterest``, ``putOpenInterest``, ``callVolume``,
            ``putVolume``, ``callIV``, ``putIV`` and shared greeks

    Returns:
        StrikeQuote

    Raises:
        MalformedDataError: If the strike is missing, not a positive
            finite number, or other fields are not numeric
    """
    if not isinstance(record, dict):
        raise MalformedDataError("Strike record must be a dictionary", raw_data=str(record)[:100])

    strike = _first_present(record, "strike", "strike_price", "strikePrice")
    if strike is None:
        raise MalformedDataError("Strike record missing strike", raw_data=str(record)[:100])

    strike_value = _to_float(strike, "strike")
    if not math.isfinite(strike_value) or strike_value <= 0:
        raise MalformedDataError(
            f"Strike must be a positive finite number: {strike!r}",
            raw_data=str(strike),
            expected_format="positive number"
        )

    return StrikeQuote(
        strike=strike_value,
        call=_parse_option_side(record, "call"),
        put=_parse_option_side(record, "put"),
    )


def parse_options_chain(records: Iterable[dict[str, Any]]) -> list[StrikeQuote]:
    """
    Parse strike rows into a chain ordered by ascending strike.

    Duplicate strikes keep the last row seen.
    """
    by_strike: dict[float, StrikeQuote] = {}
    for record in records:
        quote = parse_strike_quote(record)
        by_strike[quote.strike] = quote
    return [by_strike[strike] for strike in sorted(by_strike)]
