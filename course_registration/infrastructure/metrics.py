from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# HTTP
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Enrollment outcomes: operation=register|drop, outcome=ok|conflict|not_found
enrollment_operations_total = Counter(
    'enrollment_operations_total',
    'Enrollment operations by outcome',
    ['operation', 'outcome']
)

db_queries_total = Counter('db_queries_total', 'Total database queries')

def metrics_endpoint():
    """Endpoint for Prometheus metrics"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
