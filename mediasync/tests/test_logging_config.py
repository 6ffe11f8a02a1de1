"""Tests for structured sync event logging."""

import json
import logging

from mediasync.logging_config import log_sync_event, setup_logging


class TestLogSyncEvent:
    def _entries(self, log_dir):
        files = list(log_dir.glob("sync_*.jsonl"))
        assert len(files) == 1
        return [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]

    def test_event_type_used_when_message_is_none(self, tmp_path):
        setup_logging(log_to_console=False, log_dir=tmp_path)

        log_sync_event("sync_complete", {"attached": 2, "skipped": 1, "message": None})

        entry = self._entries(tmp_path)[0]
        assert entry["message"] == "sync_complete"
        assert entry["event_type"] == "sync_complete"
        assert entry["attached"] == 2

    def test_explicit_message_is_kept(self, tmp_path):
        setup_logging(log_to_console=False, log_dir=tmp_path)

        log_sync_event("product_missing", {"code": "CS1", "message": "No product for CS1"}, level=logging.WARNING)

        entry = self._entries(tmp_path)[0]
        assert entry["message"] == "No product for CS1"
        assert entry["level"] == "WARNING"
        assert entry["code"] == "CS1"
