"""Test configuration and shared fixtures."""

import json
import os
import sys
from datetime import datetime, timezone
from unittest import mock

import httpx
import pytest

# Make sure the package directory is in the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Set up environment variables for testing
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from dexcom_segment.data.cache import MemoryCache
from dexcom_segment.models.glucose import EGVSResponse, Reading


def build_egvs_body(*records):
    """Build a Dexcom v3 egvs response body around *records*."""
    full_records = []
    for i, record in enumerate(records):
        full = {
            "recordId": f"rec-{i}",
            "systemTime": "2024-06-01T11:59:00",
            "displayTime": "2024-06-01T13:59:00",
            "transmitterId": "abc123",
            "transmitterTicks": 1000 + i,
            "trendRate": -0.5,
            "unit": "mg/dL",
            "rateUnit": "mg/dL/min",
            "displayDevice": "iOS",
            "transmitterGeneration": "g7",
        }
        full.update(record)
        full_records.append(full)
    return {
        "recordType": "egv",
        "recordVersion": "3.0",
        "userId": "user-1",
        "records": full_records,
    }


@pytest.fixture
def sample_reading():
    """Create a sample reading for testing."""
    return Reading(value=150, status="ok", trend="flat")


@pytest.fixture
def sample_envelope(sample_reading):
    """An envelope holding the sample reading followed by an older one."""
    return EGVSResponse(records=[sample_reading, Reading(value=145, status="ok", trend="singleUp")])


@pytest.fixture
def mock_api(sample_envelope):
    """A Dexcom API double returning the sample envelope."""
    api = mock.MagicMock()
    api.get_estimated_glucose_values.return_value = sample_envelope
    return api


@pytest.fixture
def memory_cache():
    return MemoryCache()


@pytest.fixture
def mock_cache():
    """A cache double that always misses."""
    cache = mock.MagicMock()
    cache.get.return_value = (None, False)
    return cache


@pytest.fixture
def fixed_now():
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def handler_calls():
    return []


@pytest.fixture
def make_http_client(handler_calls):
    """Build a sync httpx client whose requests are answered by *handler*."""
    def _make(handler):
        def _recording(request: httpx.Request) -> httpx.Response:
            handler_calls.append(request)
            return handler(request)
        return httpx.Client(transport=httpx.MockTransport(_recording))
    return _make


@pytest.fixture
def egvs_body():
    """Factory for Dexcom v3 egvs response bodies."""
    return build_egvs_body


@pytest.fixture
def egvs_json():
    return json.dumps(build_egvs_body({"value": 150, "status": "ok", "trend": "flat"}))
