"""Platform catalogue and scheduling helpers."""

from content_factory.content.platforms import (
    DAYS,
    PILLARS,
    PLATFORM_OPTIMAL_TIMES,
    PLATFORM_SPECS,
    validate_content,
)
from content_factory.content.scheduling import (
    get_optimal_time_for_platform,
    minutes_to_time_string,
    parse_time_to_minutes,
)

__all__ = [
    "DAYS",
    "PILLARS",
    "PLATFORM_OPTIMAL_TIMES",
    "PLATFORM_SPECS",
    "get_optimal_time_for_platform",
    "minutes_to_time_string",
    "parse_time_to_minutes",
    "validate_content",
]
