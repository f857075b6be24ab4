"""Platform catalogue: posting constraints and research-based posting times."""

from __future__ import annotations

from typing import Any

DAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

PILLARS: tuple[str, ...] = ("teach", "demo", "psych", "proof", "founder", "trending")

EXAM_LEVELS: tuple[str, ...] = ("GCSE", "A-Level", "IB")

PLATFORM_SPECS: dict[str, dict[str, Any]] = {
    "tiktok": {"max_caption_length": 2200, "max_hashtags": 5, "content_types": ("video",)},
    "shorts": {"max_caption_length": 100, "max_hashtags": 3, "content_types": ("video",)},
    "reels": {"max_caption_length": 2200, "max_hashtags": 10, "content_types": ("video",)},
    "facebook": {"max_caption_length": 63206, "max_hashtags": 3, "content_types": ("video", "text")},
    "linkedin": {"max_caption_length": 3000, "max_hashtags": 5, "content_types": ("video", "text")},
    "snapchat": {"max_caption_length": 250, "max_hashtags": 0, "content_types": ("video",)},
    "ytlong": {"max_caption_length": 5000, "max_hashtags": 15, "content_types": ("video",)},
}

PLATFORM_OPTIMAL_TIMES: dict[str, dict[str, tuple[str, ...]]] = {
    "tiktok": {
        "best_times": ("7:00 AM", "12:00 PM", "7:00 PM", "10:00 PM"),
        "best_days": ("Tuesday", "Thursday", "Saturday"),
    },
    "shorts": {
        "best_times": ("10:00 AM", "2:00 PM", "6:00 PM"),
        "best_days": ("Wednesday", "Friday", "Saturday"),
    },
    "reels": {
        "best_times": ("11:00 AM", "3:00 PM", "8:00 PM"),
        "best_days": ("Monday", "Wednesday", "Friday"),
    },
    "facebook": {
        "best_times": ("9:00 AM", "1:00 PM", "5:00 PM"),
        "best_days": ("Tuesday", "Thursday"),
    },
    "linkedin": {
        "best_times": ("8:00 AM", "12:00 PM"),
        "best_days": ("Tuesday", "Wednesday", "Thursday"),
    },
    "snapchat": {
        "best_times": ("4:00 PM", "9:00 PM"),
        "best_days": ("Friday", "Saturday"),
    },
    "ytlong": {
        "best_times": ("2:00 PM", "4:00 PM"),
        "best_days": ("Thursday", "Saturday", "Sunday"),
    },
}

KNOWN_PLATFORMS = frozenset(PLATFORM_SPECS)


def resolve_content_type(platform: str, requested: str | None) -> str:
    """Pick the content type a platform supports, preferring *requested*.

    Text is only kept for platforms that accept text posts; everything else
    falls back to the platform's primary type.
    """
    types = PLATFORM_SPECS.get(platform, {}).get("content_types", ("video",))
    if requested == "text" and "text" in types:
        return "text"
    return types[0]


def validate_content(item: Any) -> tuple[bool, list[str]]:
    """Check caption length and hashtag count against platform limits.

    *item* needs ``platform``, ``caption`` and ``hashtags`` attributes.
    Returns ``(valid, warnings)``.
    """
    specs = PLATFORM_SPECS.get(item.platform)
    if specs is None:
        return True, ["Unknown platform"]

    warnings: list[str] = []
    if len(item.caption) > specs["max_caption_length"]:
        warnings.append(
            f"Caption exceeds {specs['max_caption_length']} characters for {item.platform}"
        )
    if len(item.hashtags) > specs["max_hashtags"]:
        warnings.append(
            f"Too many hashtags ({len(item.hashtags)}) for {item.platform}. "
            f"Max: {specs['max_hashtags']}"
        )
    return not warnings, warnings
