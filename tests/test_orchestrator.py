"""
Tests for on-demand and scheduled leaderboard delivery.
"""

import asyncio
import time

import pytest

from scorebot.config import (
    COMMAND_FAILED_MESSAGE,
    NO_SCORES_MESSAGE,
    NO_TABLES_MESSAGE,
    TABLE_NOT_FOUND_MESSAGE,
)
from scorebot.delivery.orchestrator import LeaderboardOrchestrator
from scorebot.ingestion.sheets import DataSourceError, TableNotFoundError
from scorebot.scoring.course import ParTable


SCORES = [["Team", "H1", "H2", "H3"], ["Red", "4", "5", "4"], ["Blue", "3", "6", "3"]]
PARS = ParTable({"Test Course": [4, 4, 4]})


class FakeSource:
    """In-memory data source: tab title -> rows."""

    def __init__(self, tables, fail_fetches=0):
        self.tables = tables
        self.fail_fetches = fail_fetches
        self.fetched = []

    def list_tables(self):
        return list(self.tables)

    def get_rows(self, table_name):
        self.fetched.append(table_name)
        if self.fail_fetches > 0:
            self.fail_fetches -= 1
            raise RuntimeError("transport error")
        if table_name not in self.tables:
            raise TableNotFoundError(table_name)
        return self.tables[table_name]


class BrokenListSource(FakeSource):
    def list_tables(self):
        raise DataSourceError("spreadsheet unavailable")


class SlowSource(FakeSource):
    def get_rows(self, table_name):
        time.sleep(0.5)
        return super().get_rows(table_name)


class FakeChannel:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send(self, text):
        if self.fail:
            raise ConnectionError("chat unavailable")
        self.sent.append(text)


def _run(coro):
    return asyncio.run(coro)


class TestBuildLeaderboard:
    """Tests for LeaderboardOrchestrator.build_leaderboard."""

    def test_defaults_to_first_table(self):
        source = FakeSource({"Test Course '25": SCORES, "Other": []})
        orchestrator = LeaderboardOrchestrator(source, PARS)

        text = _run(orchestrator.build_leaderboard())

        assert source.fetched == ["Test Course '25"]
        lines = text.splitlines()
        assert "Test Course '25" in lines[0]
        assert lines[1].startswith(" 1. Blue")
        assert lines[1].endswith("(E)")
        assert lines[2].startswith(" 2. Red")
        assert lines[2].endswith("(+1)")

    def test_explicit_table_name(self):
        source = FakeSource({"First": [], "Test Course '25": SCORES})
        orchestrator = LeaderboardOrchestrator(source, PARS)

        text = _run(orchestrator.build_leaderboard("Test Course '25"))

        assert source.fetched == ["Test Course '25"]
        assert "Blue" in text

    def test_unknown_course_has_no_par_annotation(self):
        source = FakeSource({"Mystery Links": SCORES})
        orchestrator = LeaderboardOrchestrator(source, PARS)

        text = _run(orchestrator.build_leaderboard())

        assert "(E)" not in text
        assert "(+1)" not in text
        assert text.splitlines()[1].endswith("(3 holes)")

    def test_no_tables(self):
        orchestrator = LeaderboardOrchestrator(FakeSource({}), PARS)
        assert _run(orchestrator.build_leaderboard()) == NO_TABLES_MESSAGE

    def test_table_not_found(self):
        orchestrator = LeaderboardOrchestrator(FakeSource({"A": SCORES}), PARS)
        text = _run(orchestrator.build_leaderboard("Missing"))
        assert text == TABLE_NOT_FOUND_MESSAGE.format(name="Missing")

    def test_transport_error_reports_not_found(self):
        source = FakeSource({"A": SCORES}, fail_fetches=1)
        orchestrator = LeaderboardOrchestrator(source, PARS)
        text = _run(orchestrator.build_leaderboard("A"))
        assert text == TABLE_NOT_FOUND_MESSAGE.format(name="A")

    def test_fetch_timeout_reports_not_found(self):
        orchestrator = LeaderboardOrchestrator(SlowSource({"A": SCORES}), PARS, fetch_timeout=0.05)
        text = _run(orchestrator.build_leaderboard("A"))
        assert text == TABLE_NOT_FOUND_MESSAGE.format(name="A")

    def test_empty_rows_report_no_scores(self):
        orchestrator = LeaderboardOrchestrator(FakeSource({"A": []}), PARS)
        assert _run(orchestrator.build_leaderboard("A")) == NO_SCORES_MESSAGE.format(name="A")

    def test_header_only_reports_no_scores(self):
        orchestrator = LeaderboardOrchestrator(FakeSource({"A": [SCORES[0]]}), PARS)
        assert _run(orchestrator.build_leaderboard("A")) == NO_SCORES_MESSAGE.format(name="A")

    def test_list_failure_propagates(self):
        orchestrator = LeaderboardOrchestrator(BrokenListSource({}), PARS)
        with pytest.raises(DataSourceError):
            _run(orchestrator.build_leaderboard())


class TestHandleCommand:
    """Tests for the on-demand trigger."""

    def test_posts_leaderboard(self):
        channel = FakeChannel()
        orchestrator = LeaderboardOrchestrator(FakeSource({"Test Course '25": SCORES}), PARS)

        delivered = _run(orchestrator.handle_command(channel, None))

        assert delivered is True
        assert len(channel.sent) == 1
        assert "Blue" in channel.sent[0]

    def test_failure_becomes_reply(self):
        channel = FakeChannel()
        orchestrator = LeaderboardOrchestrator(BrokenListSource({}), PARS)

        delivered = _run(orchestrator.handle_command(channel, None))

        assert delivered is True
        assert channel.sent == [COMMAND_FAILED_MESSAGE.format(error="spreadsheet unavailable")]

    def test_send_failure_is_not_raised(self):
        orchestrator = LeaderboardOrchestrator(FakeSource({"A": SCORES}), PARS)
        assert _run(orchestrator.handle_command(FakeChannel(fail=True), "A")) is False


class TestSchedule:
    """Tests for the scheduled trigger."""

    def test_failed_iteration_does_not_stop_schedule(self):
        source = FakeSource({"Test Course '25": SCORES})
        source.list_calls = 0
        original_list = source.list_tables

        def flaky_list():
            source.list_calls += 1
            if source.list_calls == 1:
                raise DataSourceError("first tick fails")
            return original_list()

        source.list_tables = flaky_list
        channel = FakeChannel()
        orchestrator = LeaderboardOrchestrator(source, PARS)

        async def scenario():
            task = orchestrator.start_schedule(channel, interval_seconds=0.01)
            for _ in range(200):
                if channel.sent:
                    break
                await asyncio.sleep(0.01)
            await orchestrator.stop_schedule()
            return task

        task = _run(scenario())

        assert source.list_calls >= 2
        assert "Blue" in channel.sent[0]
        assert task.cancelled()

    def test_fetch_exception_each_tick_keeps_looping(self):
        source = FakeSource({"A": SCORES}, fail_fetches=2)
        channel = FakeChannel()
        orchestrator = LeaderboardOrchestrator(source, PARS)

        async def scenario():
            orchestrator.start_schedule(channel, interval_seconds=0.01)
            for _ in range(200):
                if len(channel.sent) >= 3:
                    break
                await asyncio.sleep(0.01)
            await orchestrator.stop_schedule()

        _run(scenario())

        assert channel.sent[:2] == [TABLE_NOT_FOUND_MESSAGE.format(name="A")] * 2
        assert "Blue" in channel.sent[2]

    def test_send_failure_keeps_looping(self):
        source = FakeSource({"A": SCORES})
        orchestrator = LeaderboardOrchestrator(source, PARS)

        async def scenario():
            orchestrator.start_schedule(FakeChannel(fail=True), interval_seconds=0.01)
            for _ in range(200):
                if len(source.fetched) >= 2:
                    break
                await asyncio.sleep(0.01)
            await orchestrator.stop_schedule()

        _run(scenario())

        assert len(source.fetched) >= 2

    def test_cannot_start_twice(self):
        orchestrator = LeaderboardOrchestrator(FakeSource({"A": SCORES}), PARS)

        async def scenario():
            orchestrator.start_schedule(FakeChannel(), interval_seconds=60)
            try:
                with pytest.raises(RuntimeError):
                    orchestrator.start_schedule(FakeChannel(), interval_seconds=60)
            finally:
                await orchestrator.stop_schedule()

        _run(scenario())

    def test_stop_without_start(self):
        orchestrator = LeaderboardOrchestrator(FakeSource({}), PARS)
        _run(orchestrator.stop_schedule())
