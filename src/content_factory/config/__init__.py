"""Settings loading."""

from content_factory.config.settings import build_context, load_settings, settings_from_dict

__all__ = ["build_context", "load_settings", "settings_from_dict"]
