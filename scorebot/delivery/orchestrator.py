"""
Leaderboard Delivery

This module drives the leaderboard pipeline end to end:
resolve tab -> fetch rows -> parse -> rank -> render -> send.

It has two entry points sharing one code path:
- handle_command: on-demand, from a chat command; failures become a reply
- run_schedule: recurring background loop; failures are logged and the loop
  carries on at the next tick

Usage:
    orchestrator = LeaderboardOrchestrator(source, load_par_table())
    await orchestrator.handle_command(channel, "Charlotte National '25")
    orchestrator.start_schedule(channel)
"""

import asyncio
from typing import Protocol, Sequence

from scorebot.config import (
    COMMAND_FAILED_MESSAGE,
    FETCH_TIMEOUT_SECONDS,
    LEADERBOARD_INTERVAL_MINUTES,
    NO_SCORES_MESSAGE,
    NO_TABLES_MESSAGE,
    SEND_TIMEOUT_SECONDS,
    TABLE_NOT_FOUND_MESSAGE,
)
from scorebot.scoring.course import ParTable, normalize_course_name
from scorebot.scoring.leaderboard import compute_leaderboard, parse_score_table
from scorebot.scoring.render import render_leaderboard
from scorebot.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class DataSource(Protocol):
    def list_tables(self) -> Sequence[str]: ...

    def get_rows(self, table_name: str) -> Sequence[Sequence]: ...


class DeliveryChannel(Protocol):
    async def send(self, text: str) -> None: ...


class LeaderboardOrchestrator:
    """Builds leaderboards from a data source and posts them to chat channels."""

    def __init__(
        self,
        data_source: DataSource,
        par_table: ParTable,
        fetch_timeout: float = FETCH_TIMEOUT_SECONDS,
        send_timeout: float = SEND_TIMEOUT_SECONDS,
    ):
        self.data_source = data_source
        self.par_table = par_table
        self.fetch_timeout = fetch_timeout
        self.send_timeout = send_timeout
        self._schedule_task: asyncio.Task | None = None

    async def _fetch(self, func, *args):
        return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=self.fetch_timeout)

    async def build_leaderboard(self, table_name: str | None = None) -> str:
        """
        Produce the message for one leaderboard request.

        Args:
            table_name: Tab to read; defaults to the first tab of the spreadsheet

        Returns:
            Rendered leaderboard, or a user-facing message when there is
            nothing to show (no tabs, unknown tab, no scores)

        Raises:
            Exception: If listing the tabs fails
        """
        if not table_name:
            titles = await self._fetch(self.data_source.list_tables)
            if not titles:
                return NO_TABLES_MESSAGE
            table_name = titles[0]

        course_key = normalize_course_name(table_name)

        try:
            rows = await self._fetch(self.data_source.get_rows, table_name)
        except Exception as e:
            logger.warning(f"Fetch failed for '{table_name}': {type(e).__name__}: {e}")
            return TABLE_NOT_FOUND_MESSAGE.format(name=table_name)

        if not rows:
            return NO_SCORES_MESSAGE.format(name=table_name)

        records = parse_score_table(rows)
        entries = compute_leaderboard(records, course_key, self.par_table)
        if not entries:
            return NO_SCORES_MESSAGE.format(name=table_name)

        logger.info(f"Built leaderboard for '{table_name}' ({len(entries)} teams, course '{course_key}')")
        return render_leaderboard(table_name, entries)

    async def deliver(self, channel: DeliveryChannel, text: str) -> bool:
        """Send text to a channel. Failures are logged, not retried."""
        try:
            await asyncio.wait_for(channel.send(text), timeout=self.send_timeout)
        except Exception as e:
            logger.error(f"Failed to send message: {type(e).__name__}: {e}")
            return False
        return True

    async def post_leaderboard(self, channel: DeliveryChannel, table_name: str | None = None) -> bool:
        text = await self.build_leaderboard(table_name)
        return await self.deliver(channel, text)

    async def handle_command(self, channel: DeliveryChannel, table_name: str | None = None) -> bool:
        """
        On-demand trigger. Errors are reported once to the requester.

        Args:
            channel: Where the reply goes
            table_name: Space-joined command arguments, or None for the default tab

        Returns:
            True if a reply was delivered
        """
        try:
            text = await self.build_leaderboard(table_name)
        except Exception as e:
            logger.exception(f"Leaderboard command failed (table={table_name!r})")
            text = COMMAND_FAILED_MESSAGE.format(error=str(e) or type(e).__name__)
        return await self.deliver(channel, text)

    async def run_schedule(
        self,
        channel: DeliveryChannel,
        interval_seconds: float = LEADERBOARD_INTERVAL_MINUTES * 60,
    ) -> None:
        """
        Scheduled trigger: post the default leaderboard every interval.

        Runs until cancelled. An iteration that fails is logged and the next
        one still runs after the full interval.
        """
        logger.info(f"Leaderboard schedule started (every {interval_seconds:g}s)")
        while True:
            try:
                await self.post_leaderboard(channel)
            except Exception:
                logger.exception("Error posting scheduled leaderboard")

            await asyncio.sleep(interval_seconds)

    def start_schedule(
        self,
        channel: DeliveryChannel,
        interval_seconds: float = LEADERBOARD_INTERVAL_MINUTES * 60,
    ) -> asyncio.Task:
        """Start the scheduled loop as a background task on the running loop."""
        if self._schedule_task is not None and not self._schedule_task.done():
            raise RuntimeError("Leaderboard schedule is already running")
        self._schedule_task = asyncio.create_task(
            self.run_schedule(channel, interval_seconds), name="leaderboard-schedule"
        )
        return self._schedule_task

    async def stop_schedule(self) -> None:
        """Cancel the scheduled loop and wait for it to finish."""
        task, self._schedule_task = self._schedule_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Leaderboard schedule stopped")
