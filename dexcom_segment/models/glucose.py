"""Models for Dexcom estimated glucose values and their cache encoding."""

from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dexcom_segment.utils.error_handling import DecodeError


class Reading(BaseModel):
    """A single estimated glucose value.

    Only the fields the segment needs are modeled; the rest of a Dexcom
    record (recordId, systemTime, trendRate, ...) is ignored on decode.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    value: int = Field(..., description="Sensor glucose value")
    status: str = Field("", description="Dexcom status code, carried through opaquely")
    trend: str = Field("", description="Dexcom trend code, e.g. 'flat' or 'doubleUp'")

    @field_validator("status", "trend", mode="before")
    @classmethod
    def null_to_empty(cls, value):
        """The v3 API sends null for status and trend on some records."""
        return "" if value is None else value


class EGVSResponse(BaseModel):
    """Envelope returned by ``/v3/users/self/egvs``. Records are newest first."""

    model_config = ConfigDict(extra="ignore")

    records: List[Reading] = Field(default_factory=list, description="Readings, most recent first")

    @property
    def latest(self):
        """The current reading, or None when the window held no records."""
        return self.records[0] if self.records else None


def parse_envelope(payload: Union[bytes, str]) -> EGVSResponse:
    """
    Decode an egvs API response body.

    Raises:
        DecodeError: If the payload is not the expected JSON structure
    """
    try:
        return EGVSResponse.model_validate_json(payload)
    except ValidationError as e:
        raise DecodeError(f"Failed to parse Dexcom egvs response: {e}") from e


def parse_reading(payload: Union[bytes, str]) -> Reading:
    """
    Decode a cached reading.

    Raises:
        DecodeError: If the payload is not a serialized Reading
    """
    try:
        return Reading.model_validate_json(payload)
    except ValidationError as e:
        raise DecodeError(f"Failed to parse cached reading: {e}") from e


def serialize_reading(reading: Reading) -> str:
    """Encode a reading for the cache."""
    return reading.model_dump_json()
