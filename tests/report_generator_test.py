"""
Unit tests for ReportGenerator

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import json
import pytest
from datetime import date
from unittest.mock import patch
import sqlite3

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
sys.path.insert(0, os.path.dirname(__file__))

from errors import NoMessagesError, PersistenceFailed, StoreUnavailable, SummarizationFailed
from report_generator import ReportGenerator
from test_data_factory import FakeSummarizer, TestDataFactory, failing_summarizer, fixed_clock


JAN_1 = date(2024, 1, 1)


@pytest.fixture
def factory():
    return TestDataFactory()


class TestTargetDate:

    def test_yesterday_from_clock(self, factory):
        generator = ReportGenerator(factory.store, FakeSummarizer(), clock=fixed_clock(2024, 1, 2))
        assert generator.target_date() == JAN_1

    def test_just_before_midnight(self, factory):
        generator = ReportGenerator(factory.store, FakeSummarizer(), clock=fixed_clock(2024, 3, 1, 23, 59))
        assert generator.target_date() == date(2024, 2, 29)


class TestGenerateReport:

    def test_happy_path(self, factory):
        factory.create_messages_on(JAN_1, [{"text": "hi"}, {"text": "bye"}])
        summarizer = FakeSummarizer(digest="People greeted and left.")
        generator = ReportGenerator(factory.store, summarizer, clock=fixed_clock(2024, 1, 2))

        digest = generator.generate_report()

        assert digest == "People greeted and left."
        assert len(summarizer.calls) == 1
        assert json.loads(summarizer.calls[0]) == [{"text": "hi"}, {"text": "bye"}]
        assert factory.summary_rows() == [(1, "People greeted and left.", "2024-01-01")]

    def test_only_target_day_is_summarized(self, factory):
        factory.create_messages_on(date(2023, 12, 31), [{"text": "too early"}], hour=23)
        factory.create_messages_on(JAN_1, [{"text": "hi"}])
        factory.create_messages_on(date(2024, 1, 2), [{"text": "too late"}], hour=0)
        summarizer = FakeSummarizer()
        generator = ReportGenerator(factory.store, summarizer, clock=fixed_clock(2024, 1, 2))

        generator.generate_report()

        assert json.loads(summarizer.calls[0]) == [{"text": "hi"}]

    def test_explicit_target_date(self, factory):
        factory.create_messages_on(date(2023, 6, 15), [{"text": "old"}])
        summarizer = FakeSummarizer(digest="Old news")
        generator = ReportGenerator(factory.store, summarizer, clock=fixed_clock(2024, 1, 2))

        generator.generate_report(date(2023, 6, 15))

        assert factory.summary_rows() == [(1, "Old news", "2023-06-15")]

    def test_serialization_is_pretty_and_ordered(self, factory):
        factory.create_messages_on(JAN_1, [{"text": "first", "user": "ann"}, {"text": "second"}])
        summarizer = FakeSummarizer()
        generator = ReportGenerator(factory.store, summarizer, clock=fixed_clock(2024, 1, 2))

        generator.generate_report()

        raw = summarizer.calls[0]
        assert raw.startswith("[\n  {")
        assert raw.index("first") < raw.index("second")

    def test_no_messages(self, factory):
        factory.create_messages_on(date(2023, 12, 30), [{"text": "older"}])
        summarizer = FakeSummarizer()
        generator = ReportGenerator(factory.store, summarizer, clock=fixed_clock(2024, 1, 2))

        with pytest.raises(NoMessagesError) as exc_info:
            generator.generate_report()

        assert exc_info.value.target_date == JAN_1
        assert "2024-01-01" in str(exc_info.value)
        assert summarizer.calls == []
        assert factory.summary_rows() == []

    def test_rerun_appends_second_summary(self, factory):
        factory.create_messages_on(JAN_1, [{"text": "hi"}])
        generator = ReportGenerator(factory.store, FakeSummarizer(digest="Digest"), clock=fixed_clock(2024, 1, 2))

        generator.generate_report()
        generator.generate_report()

        rows = factory.summary_rows()
        assert len(rows) == 2
        assert {r[2] for r in rows} == {"2024-01-01"}

    def test_summarizer_failure_writes_nothing(self, factory):
        factory.create_messages_on(JAN_1, [{"text": "hi"}])
        generator = ReportGenerator(factory.store, failing_summarizer(), clock=fixed_clock(2024, 1, 2))

        with pytest.raises(SummarizationFailed):
            generator.generate_report()

        assert factory.summary_rows() == []

    def test_unexpected_summarizer_error_is_wrapped(self, factory):
        factory.create_messages_on(JAN_1, [{"text": "hi"}])
        generator = ReportGenerator(
            factory.store, FakeSummarizer(error=KeyError("choices")), clock=fixed_clock(2024, 1, 2)
        )

        with pytest.raises(SummarizationFailed) as exc_info:
            generator.generate_report()

        assert isinstance(exc_info.value.__cause__, KeyError)
        assert factory.summary_rows() == []

    def test_store_unavailable_propagates(self, factory):
        summarizer = FakeSummarizer()
        generator = ReportGenerator(factory.store, summarizer, clock=fixed_clock(2024, 1, 2))

        with patch.object(factory.db, "query_parameterized", side_effect=sqlite3.OperationalError("locked")):
            with pytest.raises(StoreUnavailable):
                generator.generate_report()

        assert summarizer.calls == []

    def test_persistence_failure_carries_digest(self, factory):
        factory.create_messages_on(JAN_1, [{"text": "hi"}])
        generator = ReportGenerator(factory.store, FakeSummarizer(digest="Lost digest"), clock=fixed_clock(2024, 1, 2))

        with patch.object(factory.db, "insert", side_effect=sqlite3.OperationalError("disk I/O error")):
            with pytest.raises(PersistenceFailed) as exc_info:
                generator.generate_report()

        assert exc_info.value.digest == "Lost digest"
        assert exc_info.value.target_date == JAN_1
        assert factory.summary_rows() == []
