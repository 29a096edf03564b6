"""
Tests for cookie persistence.
"""

import json

from monitoring.session_store import SessionStore


def test_missing_file_loads_none(tmp_path):
    assert SessionStore(tmp_path / "cookies.json").load() is None


def test_save_then_load(tmp_path):
    store = SessionStore(tmp_path / "nested" / "cookies.json")
    cookies = [{"name": "session", "value": "abc", "domain": ".example.com", "secure": True}]

    store.save(cookies)

    assert store.load() == cookies


def test_save_overwrites_and_leaves_no_temp_files(tmp_path):
    store = SessionStore(tmp_path / "cookies.json")
    store.save([{"name": "a", "value": "1"}])
    store.save([{"name": "b", "value": "2"}])

    assert store.load() == [{"name": "b", "value": "2"}]
    assert [p.name for p in tmp_path.iterdir()] == ["cookies.json"]


def test_corrupt_file_loads_none(tmp_path):
    path = tmp_path / "cookies.json"
    path.write_text("{not json", encoding="utf-8")

    assert SessionStore(path).load() is None


def test_non_list_file_loads_none(tmp_path):
    path = tmp_path / "cookies.json"
    path.write_text(json.dumps({"name": "session"}), encoding="utf-8")

    assert SessionStore(path).load() is None
