"""
Prometheus metrics configuration
"""
import os

from prometheus_client import (CONTENT_TYPE_LATEST, Counter, Gauge, Histogram,
                               Info, generate_latest)
from prometheus_client.multiprocess import MultiProcessCollector
from prometheus_client.registry import REGISTRY

if os.environ.get('PROMETHEUS_MULTIPROC_DIR'):
    REGISTRY = MultiProcessCollector(REGISTRY)

# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

http_errors_total = Counter(
    'http_errors_total',
    'Total number of HTTP errors',
    ['method', 'endpoint', 'status_code', 'error_type']
)

# ============================================================================
# Database Metrics
# ============================================================================

db_queries_total = Counter(
    'db_queries_total',
    'Total number of database queries',
    ['operation']
)

db_query_duration_seconds = Histogram(
    'db_query_duration_seconds',
    'Database query duration in seconds',
    ['operation'],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0)
)

db_transactions_rolled_back_total = Counter(
    'db_transactions_rolled_back_total',
    'Counter-adjusting transactions rolled back',
    ['operation']
)

# ============================================================================
# Token Blacklist Metrics
# ============================================================================

tokens_blacklisted_total = Counter(
    'tokens_blacklisted_total',
    'Total number of tokens added to the blacklist',
    ['reason']
)

token_cleanup_runs_total = Counter(
    'token_cleanup_runs_total',
    'Blacklist sweeps by schedule and outcome',
    ['schedule', 'status']  # status: 'success', 'failed'
)

token_cleanup_deleted_total = Counter(
    'token_cleanup_deleted_total',
    'Blacklist rows removed by sweeps',
    ['schedule']
)

token_blacklist_size = Gauge(
    'token_blacklist_size',
    'Blacklist rows observed at the last sweep',
    ['state']  # state: 'active', 'expired'
)

# ============================================================================
# Upload Metrics
# ============================================================================

uploads_total = Counter(
    'uploads_total',
    'Stored uploads by kind',
    ['kind']  # kind: 'project_file', 'post_image', 'post_video', 'profile_image', 'video'
)

upload_bytes_total = Counter(
    'upload_bytes_total',
    'Bytes written by uploads',
    ['kind']
)

upload_rejections_total = Counter(
    'upload_rejections_total',
    'Uploads rejected by validation',
    ['kind', 'reason']  # reason: 'mime_type', 'type_mismatch', 'size', 'empty'
)

# ============================================================================
# Logging
# ============================================================================

log_records_total = Counter(
    'log_records_total',
    'Log records emitted by level',
    ['level']
)

# ============================================================================
# System Info
# ============================================================================

app_info = Info(
    'app_info',
    'Application information'
)


def set_app_info(app_name: str, app_env: str, version: str) -> None:
    app_info.info({
        'app_name': app_name,
        'app_env': app_env,
        'version': version,
    })


def get_metrics():
    """
    Get Prometheus metrics in text format

    Returns:
        bytes: Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_metrics_content_type():
    """Content type for the metrics endpoint"""
    return CONTENT_TYPE_LATEST
