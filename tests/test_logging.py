"""Tests for logging helpers."""

import logging

from histquery.database import weigh
from histquery.logging_config import format_bytes, get_logger, log_event


class TestGetLogger:
    def test_names_are_namespaced(self):
        assert get_logger().name == "histquery"
        assert get_logger("database").name == "histquery.database"
        assert get_logger("histquery.query").name == "histquery.query"


class TestLogEvent:
    def test_summary_reports_count_and_weight(self, caplog):
        logger = get_logger("tests")
        with caplog.at_level(logging.INFO, logger="histquery"):
            with log_event(logger, "loading commits from cache") as event:
                event.counted(3)
                event.weighed([1, 2, 3])
        message = caplog.records[-1].getMessage()
        assert message.startswith("loading commits from cache | 3 items | ~")
        assert message.endswith("s")

    def test_cache_operations_are_logged(self, database, caplog):
        from histquery.objects import ProjectId

        with caplog.at_level(logging.INFO, logger="histquery"):
            database.project_commit_count(ProjectId(1))
        assert "loading project_commit_count from source" in caplog.text
        assert "storing project_commit_count into cache" in caplog.text


class TestWeights:
    def test_nested_collections_weigh_more(self):
        assert weigh([[1, 2, 3], {"a": "b"}]) > weigh([])

    def test_shared_objects_count_once(self):
        shared = list(range(100))
        assert weigh([shared, shared]) < 2 * weigh(shared)


class TestFormatBytes:
    def test_units(self):
        assert format_bytes(512) == "512B"
        assert format_bytes(2048) == "2.0KiB"
        assert format_bytes(5 * 1024 * 1024) == "5.0MiB"
