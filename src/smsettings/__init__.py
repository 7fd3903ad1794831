from .codec import CallbackRegistry, ValueCodec, as_flag
from .engine import SettingsEngine
from .errors import ActionFailedError, OptionPathError, SettingsError
from .hooks import Hooks
from .keys import OptionAddress, resolve
from .manager import SettingsManager, SettingsPage, SettingsRequest
from .render import Renderer, render_field
from .schema import FieldSchema
from .store import FileOptionStore, MemoryOptionStore


__all__ = [
    "ActionFailedError",
    "CallbackRegistry",
    "FieldSchema",
    "FileOptionStore",
    "Hooks",
    "MemoryOptionStore",
    "OptionAddress",
    "OptionPathError",
    "Renderer",
    "SettingsEngine",
    "SettingsError",
    "SettingsManager",
    "SettingsPage",
    "SettingsRequest",
    "ValueCodec",
    "as_flag",
    "render_field",
    "resolve",
]
