from chatdesk.core.config.settings import Settings, get_settings, reset_settings
from chatdesk.core.config.validation import SettingsError, validate_all

__all__ = ["Settings", "SettingsError", "get_settings", "reset_settings", "validate_all"]
