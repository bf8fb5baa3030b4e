"""Metrics and monitoring utilities."""

from prometheus_client import Counter

from fxmoney.core.config import settings

# Conversion metrics
conversions_total = Counter(
    'fxmoney_conversions_total',
    'Total number of currency conversions',
    ['path', 'status']
)

# Configuration metrics
conversion_table_updates_total = Counter(
    'fxmoney_conversion_table_updates_total',
    'Number of times a conversion table was configured'
)

# Arithmetic metrics
operations_total = Counter(
    'fxmoney_operations_total',
    'Total Money arithmetic operations',
    ['operation']
)


def track_conversion(path: str, status: str):
    """Track conversion metrics."""
    if settings.ENABLE_METRICS:
        conversions_total.labels(path=path, status=status).inc()


def track_table_update():
    """Track conversion table update."""
    if settings.ENABLE_METRICS:
        conversion_table_updates_total.inc()


def track_operation(operation: str):
    """Track Money arithmetic operation."""
    if settings.ENABLE_METRICS:
        operations_total.labels(operation=operation).inc()
