"""Pydantic models and their encoders."""

from dexcom_segment.models.glucose import (
    Reading,
    EGVSResponse,
    parse_envelope,
    parse_reading,
    serialize_reading
)
from dexcom_segment.models.tokens import (
    TokenPair,
    TokenResponse
)

__all__ = [
    # Glucose reading models
    "Reading",
    "EGVSResponse",
    "parse_envelope",
    "parse_reading",
    "serialize_reading",

    # Token models
    "TokenPair",
    "TokenResponse"
]
