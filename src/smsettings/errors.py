class SettingsError(Exception):
    """Base class for settings errors."""


class SettingsLoadError(SettingsError):
    """Raised when a store backend fails to parse its file."""


class OptionPathError(SettingsError, ValueError):
    """Raised when a field id uses an unsupported addressing form."""


class ActionFailedError(SettingsError):
    """Raised when a settings submission fails anti-forgery verification."""
