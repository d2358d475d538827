"""Coordinate parsing, range validation and cache-key normalisation."""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from geocode_api.lib.geocoder.base import CoordinateValidationError

MIN_LAT = Decimal(-90)
MAX_LAT = Decimal(90)
MIN_LON = Decimal(-180)
MAX_LON = Decimal(180)

DEFAULT_KEY_PRECISION = 6

# Bound on the exponent of parsed input, so fixed-point rendering stays short.
# Float input such as 0.30000000000000004 needs 17 places.
MAX_DECIMAL_PLACES = 20


@dataclass(frozen=True)
class Coordinate:
    """A validated WGS84 point in decimal degrees."""

    latitude: Decimal
    longitude: Decimal

    def __post_init__(self) -> None:
        if not (MIN_LAT <= self.latitude <= MAX_LAT):
            msg = f"latitude must be between -90 and 90, got {self.latitude}"
            raise CoordinateValidationError(msg)
        if not (MIN_LON <= self.longitude <= MAX_LON):
            msg = f"longitude must be between -180 and 180, got {self.longitude}"
            raise CoordinateValidationError(msg)

    @property
    def lat_text(self) -> str:
        """Latitude in plain fixed-point notation, for URL substitution."""
        return format(self.latitude, "f")

    @property
    def lon_text(self) -> str:
        """Longitude in plain fixed-point notation, for URL substitution."""
        return format(self.longitude, "f")


def _parse_decimal(name: str, value: Any) -> Decimal:
    """Parse a single coordinate field from a string or number.

    Raises:
        CoordinateValidationError: If the value is missing, empty or not a
            finite decimal number, or has an exponent too
            large to render in fixed-point notation.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        msg = "Lat and/or Lon positions error - not set"
        raise CoordinateValidationError(msg)
    # bool is an int subclass; "lat": true is not a coordinate
    if isinstance(value, bool) or not isinstance(value, str | int | float | Decimal):
        msg = f"{name} must be a string or number, got {type(value).__name__}"
        raise CoordinateValidationError(msg)

    try:
        parsed = Decimal(value.strip()) if isinstance(value, str) else Decimal(str(value))
    except InvalidOperation as e:
        msg = f"{name} is not a valid decimal number: {value!r}"
        raise CoordinateValidationError(msg) from e

    if not parsed.is_finite():
        msg = f"{name} must be a finite number, got {value!r}"
        raise CoordinateValidationError(msg)
    exponent = parsed.as_tuple().exponent
    if exponent < -MAX_DECIMAL_PLACES:
        msg = f"{name} has more than {MAX_DECIMAL_PLACES} decimal places: {value!r}"
        raise CoordinateValidationError(msg)
    if exponent > MAX_DECIMAL_PLACES:
        msg = f"{name} is out of range: {value!r}"
        raise CoordinateValidationError(msg)
    return parsed


def validate_coordinates(raw: Any) -> Coordinate:
    """Validate an untrusted ``{"lat": ..., "lon": ...}`` payload.

    Args:
        raw: Decoded request body. Field values may be strings or numbers.

    Returns:
        The validated Coordinate, with fields equal to the parsed input.

    Raises:
        CoordinateValidationError: If the payload is not a mapping, a field
            is missing or unparseable, or a value is out of range.
    """
    if not isinstance(raw, Mapping):
        msg = "Request body must be a JSON object with 'lat' and 'lon' fields"
        raise CoordinateValidationError(msg)

    latitude = _parse_decimal("lat", raw.get("lat"))
    longitude = _parse_decimal("lon", raw.get("lon"))
    return Coordinate(latitude=latitude, longitude=longitude)


def _fixed(value: Decimal, precision: int) -> str:
    text = format(value, f".{precision}f")
    # -0.000000 and 0.000000 are the same place
    if text.startswith("-") and Decimal(text) == 0:
        text = text[1:]
    return text


def cache_key(coordinate: Coordinate, precision: int = DEFAULT_KEY_PRECISION) -> str:
    """Derive the cache key for a coordinate.

    Both values are rounded to ``precision`` decimal places, so nearby
    repeated queries share an entry.

    Args:
        coordinate: Validated coordinate.
        precision: Number of decimal places kept in the key.

    Returns:
        Key of the form ``"<lat>,<lon>"``.
    """
    if precision < 0:
        msg = f"precision must be non-negative, got {precision}"
        raise ValueError(msg)
    return f"{_fixed(coordinate.latitude, precision)},{_fixed(coordinate.longitude, precision)}"
