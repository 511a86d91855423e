from prometheus_client import Counter, Histogram

# Histogram for API call latency (seconds)
dexcom_api_call_latency_seconds = Histogram(
    'dexcom_api_call_latency_seconds',
    'Latency of Dexcom API calls in seconds',
    ['endpoint']
)

# Counter for total API calls
# status: success, error
dexcom_api_call_total = Counter(
    'dexcom_api_call_total',
    'Total Dexcom API calls',
    ['endpoint', 'status']
)

# Counter for OAuth refreshes, status: success, error
dexcom_token_refresh_total = Counter(
    'dexcom_token_refresh_total',
    'Total Dexcom OAuth token refreshes',
    ['status']
)

# result: hit, miss, error, disabled
segment_cache_lookups_total = Counter(
    'segment_cache_lookups_total',
    'Total reading cache lookups',
    ['result']
)

# status: success, error
segment_cache_writes_total = Counter(
    'segment_cache_writes_total',
    'Total reading cache writes',
    ['status']
)

__all__ = [
    'dexcom_api_call_latency_seconds',
    'dexcom_api_call_total',
    'dexcom_token_refresh_total',
    'segment_cache_lookups_total',
    'segment_cache_writes_total',
]
