from __future__ import annotations

from pathlib import Path

from smsettings.engine import SettingsEngine
from smsettings.store import FileOptionStore, MemoryOptionStore


class CountingStore(MemoryOptionStore):
    def __init__(self, data=None):
        super().__init__(data)
        self.reads: list[str] = []
        self.writes: list[str] = []

    def get(self, key, fallback=None):
        self.reads.append(key)
        return super().get(key, fallback)

    def set(self, key, value):
        self.writes.append(key)
        return super().set(key, value)


def test_scenario_flat_text_round_trip():
    store = MemoryOptionStore()
    engine = SettingsEngine(store)
    schema = [{"id": "archive_slug", "type": "text", "default": "sermons"}]
    assert engine.save_fields(schema, {"archive_slug": "talks"}) == "ok"
    assert store.get("sermonmanager_archive_slug") == "talks"
    assert engine.get_option("archive_slug", "sermons") == "talks"


def test_scenario_absent_checkbox_member_stored_as_no():
    store = MemoryOptionStore()
    engine = SettingsEngine(store)
    schema = [{"id": "notify[email]", "type": "checkbox"}]
    assert engine.save_fields(schema, {"_wpnonce": "abc"}) == "ok"
    assert store.get("sermonmanager_notify") == {"email": "no"}


def test_scenario_invalid_select_falls_back_to_default():
    store = MemoryOptionStore()
    engine = SettingsEngine(store)
    schema = [{"id": "display_style", "type": "select", "options": {"a": "A", "b": "B"}, "default": "a"}]
    engine.save_fields(schema, {"display_style": "z"})
    assert store.get("sermonmanager_display_style") == "a"


def test_empty_payload_is_skipped():
    store = MemoryOptionStore()
    engine = SettingsEngine(store)
    assert engine.save_fields([{"id": "notify[email]", "type": "checkbox"}], {}) == "skipped"
    assert engine.save_fields([{"id": "notify[email]", "type": "checkbox"}], None) == "skipped"
    assert store.keys() == []


def test_save_is_idempotent():
    store = MemoryOptionStore({"sermonmanager_group": {"y": "keep"}})
    engine = SettingsEngine(store)
    schema = [
        {"id": "archive_slug", "type": "text"},
        {"id": "group[x]", "type": "checkbox"},
        {"id": "tags", "type": "multiselect"},
    ]
    payload = {"archive_slug": "talks", "group": {"x": "1"}, "tags": ["a", "b"]}
    engine.save_fields(schema, payload)
    once = store.as_dict()
    engine.save_fields(schema, payload)
    assert store.as_dict() == once


def test_nested_member_merge_keeps_siblings():
    store = MemoryOptionStore({"sermonmanager_group": {"y": "keep"}})
    engine = SettingsEngine(store)
    engine.save_fields([{"id": "group[x]", "type": "text"}], {"group": {"x": "new"}})
    assert store.get("sermonmanager_group") == {"y": "keep", "x": "new"}


def test_container_read_once_and_written_once():
    store = CountingStore({"sermonmanager_group": {"z": "old"}})
    engine = SettingsEngine(store)
    schema = [
        {"id": "group[a]", "type": "text"},
        {"id": "group[b]", "type": "checkbox"},
    ]
    engine.save_fields(schema, {"group": {"a": "1", "b": "yes"}})
    assert store.reads == ["sermonmanager_group"]
    assert store.writes == ["sermonmanager_group"]
    assert store.get("sermonmanager_group") == {"z": "old", "a": "1", "b": "yes"}


def test_non_mapping_container_is_replaced():
    store = MemoryOptionStore({"sermonmanager_group": "oops"})
    engine = SettingsEngine(store)
    engine.save_fields([{"id": "group[x]", "type": "text"}], {"group": {"x": "v"}})
    assert store.get("sermonmanager_group") == {"x": "v"}


def test_transient_fields_are_never_written():
    store = MemoryOptionStore()
    engine = SettingsEngine(store)
    schema = [{"id": "__preview", "type": "text"}, {"id": "__x[y]", "type": "checkbox"}]
    engine.save_fields(schema, {"__preview": "x", "__x": {"y": "1"}})
    assert store.keys() == []


def test_malformed_descriptors_are_skipped():
    store = MemoryOptionStore()
    engine = SettingsEngine(store)
    schema = [{"type": "text"}, {"id": "a"}, "junk", {"id": "b", "type": "text"}]
    assert engine.save_fields(schema, {"a": "z", "b": "v"}) == "ok"
    assert store.keys() == ["sermonmanager_b"]


def test_layout_fields_are_not_stored():
    store = MemoryOptionStore()
    engine = SettingsEngine(store)
    schema = [
        {"id": "general_settings", "type": "title", "title": "General"},
        {"id": "general_settings", "type": "sectionend"},
    ]
    engine.save_fields(schema, {"general_settings": "x"})
    assert store.keys() == []


def test_none_sanitized_value_is_not_written():
    store = MemoryOptionStore()
    engine = SettingsEngine(store)
    engine.save_fields([{"id": "style", "type": "select", "options": {}}], {"style": "z"})
    assert store.keys() == []


def test_raw_values_are_unslashed():
    store = MemoryOptionStore()
    engine = SettingsEngine(store)
    engine.save_fields([{"id": "label", "type": "text"}], {"label": "it\\'s"})
    assert store.get("sermonmanager_label") == "it's"


def test_get_option_default_only_when_absent():
    store = MemoryOptionStore(
        {
            "sermonmanager_empty": "",
            "sermonmanager_zero": 0,
            "sermonmanager_off": False,
            "sermonmanager_group": {"blank": "", "none": None},
            "sermonmanager_scalar": "x",
        }
    )
    engine = SettingsEngine(store)
    assert engine.get_option("empty", "d") == ""
    assert engine.get_option("zero", "d") == 0
    assert engine.get_option("off", "d") is False
    assert engine.get_option("missing", "d") == "d"
    assert engine.get_option("group[blank]", "d") == ""
    assert engine.get_option("group[none]", "d") == "d"
    assert engine.get_option("group[missing]", "d") == "d"
    assert engine.get_option("scalar[member]", "d") == "d"
    assert engine.get_option("missing") == ""


def test_get_option_returns_stored_values_unchanged():
    store = MemoryOptionStore(
        {
            "sermonmanager_flag": "yes",
            "sermonmanager_quote": "it\\'s",
            "sermonmanager_list": ["a\\'b"],
        }
    )
    engine = SettingsEngine(store)
    assert engine.get_option("flag") == "yes"
    assert engine.get_option("quote") == "it\\'s"
    assert engine.get_option("list") == ["a\\'b"]


def test_backslashes_survive_save_and_read():
    store = MemoryOptionStore()
    engine = SettingsEngine(store)
    engine.save_fields(
        [{"id": "path", "type": "text"}, {"id": "dirs[home]", "type": "text"}],
        {"path": "C:\\\\temp", "dirs": {"home": "D:\\\\users"}},
    )
    assert store.get("sermonmanager_path") == "C:\\temp"
    assert engine.get_option("path") == "C:\\temp"
    assert engine.get_option("dirs[home]") == "D:\\users"
    engine.save_fields([{"id": "dirs[work]", "type": "text"}], {"dirs": {"work": "x"}})
    assert engine.get_option("dirs[home]") == "D:\\users"


def test_get_flag():
    store = MemoryOptionStore({"sermonmanager_notify": {"email": "yes", "sms": "no"}})
    engine = SettingsEngine(store)
    assert engine.get_flag("notify[email]") is True
    assert engine.get_flag("notify[sms]") is False
    assert engine.get_flag("notify[push]") is None
    assert engine.get_flag("notify[push]", False) is False


def test_save_to_file_store(tmp_path: Path):
    path = tmp_path / "options.json"
    engine = SettingsEngine(FileOptionStore(path))
    schema = [
        {"id": "archive_slug", "type": "text"},
        {"id": "notify[email]", "type": "checkbox"},
    ]
    engine.save_fields(schema, {"archive_slug": "talks", "notify": {"email": "1"}})
    reopened = SettingsEngine(FileOptionStore(path))
    assert reopened.get_option("archive_slug") == "talks"
    assert reopened.get_option("notify[email]") == "yes"
