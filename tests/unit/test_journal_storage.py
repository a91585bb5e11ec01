"""
Unit tests for JournalStorage.

Covers:
    - load on a missing file (empty store, file not created)
    - one JSON line per put, with the uuid/short_url/original_url keys
    - replay after restart reproduces every lookup
    - corrupt line is fatal at load time
    - failed append leaves the table untouched
    - batch_insert keeps the prefix written before a failure
"""

import json
import os

import pytest

from shortlink_service.exceptions import BackendUnavailableError, JournalCorruptError, NotFoundError
from shortlink_service.models import Conflict, Created, ShortLink
from shortlink_service.storage.journal_storage import JournalStorage


def _lines(path):
    with open(path, encoding="utf-8") as fh:
        return [json.loads(line) for line in fh]


def test_load_missing_file_is_empty_store(journal_path):
    storage = JournalStorage(journal_path)
    storage.load()
    assert not os.path.exists(journal_path)
    with pytest.raises(NotFoundError):
        storage.get("-8eOIgoJ")


def test_put_appends_one_json_line(journal_storage, journal_path):
    link = ShortLink.new("-8eOIgoJ", "https://rcimbvs.com/iuymedy")
    assert journal_storage.put(link) == Created("-8eOIgoJ")

    records = _lines(journal_path)
    assert records == [{"uuid": link.uuid, "short_url": "-8eOIgoJ", "original_url": "https://rcimbvs.com/iuymedy"}]
    assert journal_storage.get("-8eOIgoJ") == "https://rcimbvs.com/iuymedy"


def test_resubmission_is_conflict_and_not_journaled(journal_storage, journal_path):
    journal_storage.put(ShortLink.new("abc", "https://one.com"))
    assert journal_storage.put(ShortLink.new("abc", "https://one.com")) == Conflict("abc")
    assert len(_lines(journal_path)) == 1


def test_restart_replays_in_file_order(journal_storage, journal_path):
    journal_storage.put(ShortLink.new("a1", "https://a.com"))
    journal_storage.put(ShortLink.new("b2", "https://b.com/ünïcode"))

    restarted = JournalStorage(journal_path)
    restarted.load()
    assert restarted.get("a1") == "https://a.com"
    assert restarted.get("b2") == "https://b.com/ünïcode"
    assert restarted.find_code_by_original("https://a.com") == "a1"


def test_corrupt_line_is_fatal(journal_path):
    with open(journal_path, "w", encoding="utf-8") as fh:
        fh.write(ShortLink.new("a1", "https://a.com").to_json() + "\n")
        fh.write("{not json\n")

    storage = JournalStorage(journal_path)
    with pytest.raises(JournalCorruptError) as excinfo:
        storage.load()
    assert excinfo.value.line_no == 2


def test_record_missing_field_is_fatal(journal_path):
    with open(journal_path, "w", encoding="utf-8") as fh:
        fh.write(json.dumps({"uuid": "u", "short_url": "a1"}) + "\n")

    with pytest.raises(JournalCorruptError):
        JournalStorage(journal_path).load()


def test_failed_append_does_not_update_table(tmp_path):
    # A directory cannot be opened for appending.
    storage = JournalStorage(str(tmp_path))
    with pytest.raises(BackendUnavailableError):
        storage.put(ShortLink.new("abc", "https://one.com"))
    with pytest.raises(NotFoundError):
        storage.get("abc")
    assert storage.find_code_by_original("https://one.com") is None


def test_batch_failure_keeps_written_prefix(journal_storage, journal_path, monkeypatch):
    real_append = journal_storage._append
    calls = []

    def flaky_append(link):
        calls.append(link)
        if len(calls) == 2:
            raise BackendUnavailableError("disk full")
        real_append(link)

    monkeypatch.setattr(journal_storage, "_append", flaky_append)

    links = [
        ShortLink.new("a1", "https://a.com"),
        ShortLink.new("b2", "https://b.com"),
        ShortLink.new("c3", "https://c.com"),
    ]
    with pytest.raises(BackendUnavailableError):
        journal_storage.batch_insert(links)

    assert [r["short_url"] for r in _lines(journal_path)] == ["a1"]
    restarted = JournalStorage(journal_path)
    restarted.load()
    assert restarted.get("a1") == "https://a.com"
    with pytest.raises(NotFoundError):
        restarted.get("b2")


def test_batch_skips_taken_codes(journal_storage, journal_path):
    journal_storage.put(ShortLink.new("a1", "https://a.com"))
    journal_storage.batch_insert([ShortLink.new("a1", "https://a.com"), ShortLink.new("b2", "https://b.com")])
    assert [r["short_url"] for r in _lines(journal_path)] == ["a1", "b2"]


def test_ping_ok_for_writable_directory(journal_storage):
    assert journal_storage.ping() is None
