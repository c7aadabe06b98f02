from prometheus_client import Counter, Histogram

REQUESTS = Counter("relay_api_requests_total", "Total API requests", ["endpoint", "method", "status"])
LATENCY = Histogram("relay_api_latency_seconds", "API latency seconds", ["endpoint"])
ATS_CALLS = Counter("relay_ats_calls_total", "Outbound ATS calls", ["operation", "outcome"])
SUBMISSIONS = Counter("relay_submissions_total", "Submissions by final state", ["state"])
