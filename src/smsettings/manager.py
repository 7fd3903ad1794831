"""Settings screen glue: tabs, submissions and post-save side effects.

The current tab and section are parsed from the request by
:meth:`SettingsManager.handle_request` and passed along explicitly.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Literal, Protocol

from markupsafe import Markup

from .engine import SaveStatus, SettingsEngine
from .errors import ActionFailedError
from .hooks import Hooks
from .nonce import SETTINGS_ACTION, NonceVerifier
from .render import Renderer
from .sanitize import sanitize_title
from .schema import FieldSchema
from .store import delete_matching

logger = logging.getLogger(__name__)

DEFAULT_TAB = "general"
FEED_CACHE_PATTERNS = ("_transient_feed_*", "_transient_timeout_feed_*")
ACTION_FAILED_MESSAGE = "Action failed. Please refresh the page and retry."
SAVED_MESSAGE = "Your settings have been saved."

FieldList = Sequence[FieldSchema | Mapping[str, Any]]


# ---------------------------------------------------------------------------
# collaborators
# ---------------------------------------------------------------------------


@dataclass
class Notice:
    level: Literal["success", "error", "info"]
    message: str


class Notices:
    """Messages shown above the settings form."""

    def __init__(self) -> None:
        self.items: list[Notice] = []

    def add_success(self, message: str) -> None:
        self.items.append(Notice("success", message))

    def add_error(self, message: str) -> None:
        self.items.append(Notice("error", message))

    def add_info(self, message: str) -> None:
        self.items.append(Notice("info", message))

    def render(self) -> Markup:
        return Markup("").join(
            Markup('<div class="notice notice-{}"><p>{}</p></div>').format(n.level, n.message)
            for n in self.items
        )


class Scheduler(Protocol):
    def schedule_single_event(self, timestamp: float, event: str, *args: Any) -> None:
        ...


@dataclass(order=True)
class ScheduledEvent:
    timestamp: float
    event: str = dataclass_field(compare=False)
    args: tuple[Any, ...] = dataclass_field(default=(), compare=False)


class DeferredScheduler:
    """Queue single events and fire them through *hooks* when due."""

    def __init__(self, hooks: Hooks, clock: Callable[[], float] = time.time) -> None:
        self.hooks = hooks
        self._clock = clock
        self.pending: list[ScheduledEvent] = []

    def schedule_single_event(self, timestamp: float, event: str, *args: Any) -> None:
        # Identical pending events are collapsed.
        if any(e.event == event and e.args == args for e in self.pending):
            return
        self.pending.append(ScheduledEvent(timestamp, event, args))

    def run_due(self) -> int:
        now = self._clock()
        due = sorted(e for e in self.pending if e.timestamp <= now)
        self.pending = [e for e in self.pending if e.timestamp > now]
        for scheduled in due:
            self.hooks.emit(scheduled.event, *scheduled.args)
        return len(due)


@dataclass(frozen=True)
class SettingsPage:
    """One tab of the settings screen."""

    id: str
    label: str
    fields: FieldList | Callable[[str], FieldList] = ()

    def get_settings(self, section: str = "") -> FieldList:
        if callable(self.fields):
            return self.fields(section)
        return self.fields


@dataclass(frozen=True)
class SettingsRequest:
    method: str = "GET"
    form: Mapping[str, Any] = dataclass_field(default_factory=dict)
    query: Mapping[str, Any] = dataclass_field(default_factory=dict)

    @property
    def tab(self) -> str:
        return sanitize_title(self.query.get("tab") or "") or DEFAULT_TAB

    @property
    def section(self) -> str:
        raw = self.query.get("section") or self.form.get("section") or ""
        return sanitize_title(raw)


# ---------------------------------------------------------------------------
# manager
# ---------------------------------------------------------------------------


class SettingsManager:
    def __init__(
        self,
        engine: SettingsEngine,
        pages: Iterable[SettingsPage],
        *,
        nonces: NonceVerifier,
        hooks: Hooks | None = None,
        notices: Notices | None = None,
        scheduler: Scheduler | None = None,
        renderer: Renderer | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.engine = engine
        self.hooks = hooks if hooks is not None else engine.codec.hooks
        self.nonces = nonces
        self.notices = notices if notices is not None else Notices()
        self.scheduler = scheduler if scheduler is not None else DeferredScheduler(self.hooks, clock)
        self.renderer = renderer if renderer is not None else Renderer(engine, hooks=self.hooks)
        self._pages = list(pages)
        self._clock = clock

    # ----- pages -----

    def get_settings_pages(self) -> list[SettingsPage]:
        return list(self.hooks.apply_filters("sm_get_settings_pages", list(self._pages)))

    def get_page(self, tab: str) -> SettingsPage | None:
        for page in self.get_settings_pages():
            if page.id == tab:
                return page
        return None

    def tabs(self) -> dict[str, str]:
        tabs = {page.id: page.label for page in self.get_settings_pages()}
        return dict(self.hooks.apply_filters("sm_settings_tabs_array", tabs))

    # ----- request handling -----

    def handle_request(self, request: SettingsRequest) -> SaveStatus | None:
        """Process a settings screen request.

        Returns the save status for submissions and ``None`` otherwise.
        Raises :class:`ActionFailedError` before anything is stored when the
        submission is not covered by a valid ``sm-settings`` nonce.
        """
        status: SaveStatus | None = None
        if request.method.upper() == "POST" and request.form:
            token = request.form.get("_wpnonce") or request.query.get("_wpnonce")
            if not self.nonces.verify(token, SETTINGS_ACTION):
                raise ActionFailedError(ACTION_FAILED_MESSAGE)
            status = self.save_settings(request.tab, request.form, request.section)

        if request.query.get("sm_error"):
            self.notices.add_error(str(request.query["sm_error"]))
        if request.query.get("sm_message"):
            self.notices.add_info(str(request.query["sm_message"]))
        return status

    def save_settings(self, tab: str, payload: Mapping[str, Any], section: str = "") -> SaveStatus:
        if tab == "general" and self.engine.get_option("archive_slug") != payload.get("archive_slug"):
            self.hooks.emit("flush_rewrite_rules", True)

        status: SaveStatus = "skipped"
        page = self.get_page(tab)
        if page is not None:
            status = self.engine.save_fields(page.get_settings(section), payload)
        else:
            logger.debug("no settings page registered for tab %s", tab)

        self.hooks.emit(f"sm_settings_save_{tab}", payload)
        self.hooks.emit(f"sm_update_options_{tab}")
        self.hooks.emit("sm_update_options")

        self.notices.add_success(SAVED_MESSAGE)
        self.scheduler.schedule_single_event(self._clock(), "sm_flush_rewrite_rules")

        if tab == "podcast" and self.hooks.apply_filters("sm_clear_feed_transients", True):
            removed = delete_matching(self.engine.store, FEED_CACHE_PATTERNS)
            logger.info("cleared %d feed cache entries", len(removed))

        self.hooks.emit("sm_settings_saved")
        return status

    # ----- output -----

    def output(self, tab: str = DEFAULT_TAB, section: str = "") -> Markup:
        self.hooks.emit("sm_settings_start")
        page = self.get_page(tab)
        fields = page.get_settings(section) if page is not None else ()
        return self.notices.render() + self.renderer.output_fields(fields)


__all__ = [
    "Notice",
    "Notices",
    "DeferredScheduler",
    "SettingsPage",
    "SettingsRequest",
    "SettingsManager",
]
