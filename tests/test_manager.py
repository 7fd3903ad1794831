from __future__ import annotations

import pytest

from smsettings.codec import ValueCodec
from smsettings.engine import SettingsEngine
from smsettings.errors import ActionFailedError
from smsettings.hooks import Hooks
from smsettings.manager import (
    ACTION_FAILED_MESSAGE,
    SAVED_MESSAGE,
    DeferredScheduler,
    SettingsManager,
    SettingsPage,
    SettingsRequest,
)
from smsettings.nonce import NonceManager
from smsettings.store import MemoryOptionStore

NOW = 1_700_000_000.0

GENERAL = [
    {"id": "general_settings", "type": "title", "title": "General"},
    {"id": "archive_slug", "type": "text", "default": "sermons"},
    {"id": "notify[email]", "type": "checkbox"},
    {"id": "general_settings", "type": "sectionend"},
]

PODCAST = [
    {"id": "podcast_title", "type": "text"},
]


def _podcast_fields(section: str):
    if section == "itunes":
        return [{"id": "itunes_author", "type": "text"}]
    return PODCAST


def make_manager(data=None):
    hooks = Hooks()
    store = MemoryOptionStore(data)
    engine = SettingsEngine(store, ValueCodec(hooks=hooks))
    nonces = NonceManager("secret", clock=lambda: NOW)
    pages = [
        SettingsPage("general", "General", GENERAL),
        SettingsPage("podcast", "Podcast", _podcast_fields),
    ]
    manager = SettingsManager(engine, pages, nonces=nonces, hooks=hooks, clock=lambda: NOW)
    return manager, store, hooks, nonces


def record(hooks, *names):
    seen: list[str] = []
    for name in names:
        hooks.on(name, lambda *a, _n=name: seen.append(_n))
    return seen


def test_request_tab_and_section():
    assert SettingsRequest().tab == "general"
    assert SettingsRequest(query={"tab": "Podcast Feed"}).tab == "podcast-feed"
    assert SettingsRequest(query={"section": "itunes"}).section == "itunes"
    assert SettingsRequest(form={"section": "itunes"}).section == "itunes"


def test_post_without_nonce_is_rejected():
    manager, store, _, _ = make_manager()
    request = SettingsRequest("POST", form={"archive_slug": "talks"})
    with pytest.raises(ActionFailedError, match=ACTION_FAILED_MESSAGE):
        manager.handle_request(request)
    assert store.keys() == []


def test_post_with_bad_nonce_is_rejected():
    manager, store, _, _ = make_manager()
    request = SettingsRequest("POST", form={"_wpnonce": "0123456789", "archive_slug": "talks"})
    with pytest.raises(ActionFailedError):
        manager.handle_request(request)
    assert store.keys() == []


def test_valid_submission_saves_and_fires_events():
    manager, store, hooks, nonces = make_manager()
    seen = record(
        hooks,
        "flush_rewrite_rules",
        "sm_settings_save_general",
        "sm_update_options_general",
        "sm_update_options",
        "sm_settings_saved",
    )
    form = {"_wpnonce": nonces.create(), "archive_slug": "talks", "notify": {"email": "1"}}
    status = manager.handle_request(SettingsRequest("POST", form=form))

    assert status == "ok"
    assert store.get("sermonmanager_archive_slug") == "talks"
    assert store.get("sermonmanager_notify") == {"email": "yes"}
    assert seen == [
        "flush_rewrite_rules",
        "sm_settings_save_general",
        "sm_update_options_general",
        "sm_update_options",
        "sm_settings_saved",
    ]
    assert [n.message for n in manager.notices.items] == [SAVED_MESSAGE]


def test_unchanged_archive_slug_does_not_flush_rewrites():
    manager, _, hooks, _ = make_manager({"sermonmanager_archive_slug": "talks"})
    seen = record(hooks, "flush_rewrite_rules")
    manager.save_settings("general", {"archive_slug": "talks"})
    assert seen == []


def test_rewrite_flush_is_scheduled_once():
    manager, _, hooks, _ = make_manager()
    seen = record(hooks, "sm_flush_rewrite_rules")
    manager.save_settings("general", {"archive_slug": "a"})
    manager.save_settings("general", {"archive_slug": "b"})
    assert len(manager.scheduler.pending) == 1
    assert manager.scheduler.run_due() == 1
    assert seen == ["sm_flush_rewrite_rules"]
    assert manager.scheduler.pending == []


def test_podcast_save_clears_feed_cache():
    manager, store, _, _ = make_manager(
        {
            "_transient_feed_abc": "x",
            "_transient_timeout_feed_abc": 1,
            "_transient_other": "y",
        }
    )
    manager.save_settings("podcast", {"podcast_title": "Sunday"})
    assert store.get("sermonmanager_podcast_title") == "Sunday"
    assert sorted(store.keys()) == ["_transient_other", "sermonmanager_podcast_title"]


def test_feed_cache_cleanup_can_be_disabled():
    manager, store, hooks, _ = make_manager({"_transient_feed_abc": "x"})
    hooks.add_filter("sm_clear_feed_transients", lambda enabled: False)
    manager.save_settings("podcast", {"podcast_title": "Sunday"})
    assert store.get("_transient_feed_abc") == "x"


def test_section_selects_fields():
    manager, store, _, _ = make_manager()
    manager.save_settings("podcast", {"itunes_author": "Pastor", "podcast_title": "x"}, "itunes")
    assert store.get("sermonmanager_itunes_author") == "Pastor"
    assert store.get("sermonmanager_podcast_title") is None


def test_unknown_tab_still_fires_events():
    manager, store, hooks, _ = make_manager()
    seen = record(hooks, "sm_settings_save_misc", "sm_settings_saved")
    assert manager.save_settings("misc", {"x": "1"}) == "skipped"
    assert seen == ["sm_settings_save_misc", "sm_settings_saved"]
    assert store.keys() == []


def test_get_request_collects_messages():
    manager, store, _, _ = make_manager()
    status = manager.handle_request(
        SettingsRequest(query={"sm_message": "Imported", "sm_error": "Broken"})
    )
    assert status is None
    assert [(n.level, n.message) for n in manager.notices.items] == [
        ("error", "Broken"),
        ("info", "Imported"),
    ]
    assert store.keys() == []


def test_tabs_and_pages_filters():
    manager, _, hooks, _ = make_manager()
    assert manager.tabs() == {"general": "General", "podcast": "Podcast"}
    hooks.add_filter("sm_get_settings_pages", lambda pages: pages + [SettingsPage("extra", "Extra")])
    hooks.add_filter("sm_settings_tabs_array", lambda tabs: {**tabs, "help": "Help"})
    assert manager.tabs() == {"general": "General", "podcast": "Podcast", "extra": "Extra", "help": "Help"}
    assert manager.get_page("extra").label == "Extra"
    assert manager.get_page("nope") is None


def test_output_renders_notices_and_fields():
    manager, _, hooks, _ = make_manager({"sermonmanager_archive_slug": "talks"})
    seen = record(hooks, "sm_settings_start")
    manager.notices.add_success(SAVED_MESSAGE)
    html = manager.output("general")
    assert seen == ["sm_settings_start"]
    assert html.index("notice-success") < html.index('value="talks"')
    assert '<h2 class="forminp-title">General</h2>' in html


def test_deferred_scheduler_waits_until_due():
    hooks = Hooks()
    now = [100.0]
    fired: list[tuple] = []
    hooks.on("later", lambda *a: fired.append(a))
    scheduler = DeferredScheduler(hooks, clock=lambda: now[0])
    scheduler.schedule_single_event(150.0, "later", 1)
    scheduler.schedule_single_event(120.0, "later", 2)
    assert scheduler.run_due() == 0
    now[0] = 130.0
    assert scheduler.run_due() == 1
    now[0] = 200.0
    assert scheduler.run_due() == 1
    assert fired == [(2,), (1,)]
