"""
Structured Logging for herd_map
===============================

Bounded Context: Observability

JSON-structured logging for the clustering and geofence core.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from herd_map.logging import create_logger, LogEvent
    >>> logger = create_logger("clustering")
    >>> logger.warning(
    ...     event=LogEvent.CLUSTER_MARKERS_EXCLUDED,
    ...     message="Excluded 2 markers with invalid coordinates",
    ...     metadata={'excluded_ids': ['tag-07', 'tag-19']}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, JSONFormatter, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'JSONFormatter',
    'create_logger',
]
