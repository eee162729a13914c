"""
Telegram Leaderboard Bot

Chat front end for the leaderboard pipeline:
- /leaderboard [tab name] (or !leaderboard) posts the leaderboard for a tab,
  defaulting to the first tab of the spreadsheet
- /ping (or !ping) replies with the message latency
- A background task posts the default leaderboard to LEADERBOARD_CHAT_ID
  once an hour

In group chats, plain-text !commands only reach the bot when its privacy
mode is disabled (@BotFather -> /setprivacy). /commands always arrive.

Env:
  TELEGRAM_BOT_TOKEN=...    (from @BotFather)
  SPREADSHEET_ID=...        (Google spreadsheet holding the score tabs)
  GOOGLE_CREDENTIALS=...    (service-account JSON, inline)
  LEADERBOARD_CHAT_ID=...   (optional, chat for scheduled posts)
  COURSE_PARS_FILE=...      (optional, JSON with extra course pars)

Usage:
    python -m scorebot.bot
"""

import html
import os
from datetime import datetime, timezone
from typing import Sequence

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from scorebot.config import (
    BANG_PREFIX,
    LEADERBOARD_CHAT_ENV,
    LEADERBOARD_COMMAND,
    LEADERBOARD_INTERVAL_MINUTES,
    PING_COMMAND,
    TELEGRAM_TOKEN_ENV,
)
from scorebot.delivery.orchestrator import LeaderboardOrchestrator
from scorebot.ingestion.sheets import GoogleSheetsSource
from scorebot.scoring.course import load_par_table
from scorebot.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def parse_command(text: str) -> tuple[str, list[str]] | None:
    """
    Split a chat message into a command and its arguments.

    Line breaks are folded into spaces. Commands start with "!" or "/"; a
    "@botname" suffix on the command is dropped.

    Returns:
        (command, args) with the command lowercased and unprefixed, or None
        if the message is not a command
    """
    content = text.replace("\r", "").replace("\n", " ").strip()
    parts = content.split()
    if not parts:
        return None

    head = parts[0].lower()
    if head[0] not in (BANG_PREFIX, "/"):
        return None

    command = head[1:].split("@", 1)[0]
    if not command:
        return None
    return command, parts[1:]


def table_name_from_args(args: Sequence[str] | None) -> str | None:
    """Space-join command arguments into a tab name; None when there are none."""
    if not args:
        return None
    return " ".join(args)


def format_message_html(text: str) -> str:
    """First line in bold, the rest as a preformatted block."""
    header, _, body = text.partition("\n")
    if not body:
        return html.escape(text)
    return f"<b>{html.escape(header)}</b>\n<pre>{html.escape(body)}</pre>"


def message_latency_ms(sent_at: datetime, now: datetime | None = None) -> int:
    now = now or datetime.now(timezone.utc)
    return max(0, int((now - sent_at).total_seconds() * 1000))


class TelegramChannel:
    """Delivery channel bound to one Telegram chat."""

    def __init__(self, bot, chat_id: int):
        self.bot = bot
        self.chat_id = chat_id

    async def send(self, text: str) -> None:
        await self.bot.send_message(
            chat_id=self.chat_id,
            text=format_message_html(text),
            parse_mode=ParseMode.HTML,
        )

    def __repr__(self) -> str:
        return f"TelegramChannel(chat_id={self.chat_id})"


def _from_bot(update: Update) -> bool:
    user = update.effective_user
    return bool(user and user.is_bot)


async def leaderboard_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if _from_bot(update):
        return
    await _post_leaderboard(update, context, table_name_from_args(context.args))


async def ping_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if _from_bot(update):
        return
    await _reply_ping(update)


async def bang_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle !leaderboard / !ping typed as plain text."""
    msg = update.effective_message
    if msg is None or not msg.text or _from_bot(update):
        return

    parsed = parse_command(msg.text)
    if parsed is None:
        return
    command, args = parsed

    if command == LEADERBOARD_COMMAND:
        await _post_leaderboard(update, context, table_name_from_args(args))
    elif command == PING_COMMAND:
        await _reply_ping(update)


async def _post_leaderboard(update: Update, context: ContextTypes.DEFAULT_TYPE, table_name: str | None) -> None:
    orchestrator: LeaderboardOrchestrator = context.bot_data["orchestrator"]
    channel = TelegramChannel(context.bot, update.effective_chat.id)
    logger.info(f"Leaderboard requested in chat {channel.chat_id} (table={table_name!r})")
    await orchestrator.handle_command(channel, table_name)


async def _reply_ping(update: Update) -> None:
    msg = update.effective_message
    latency = message_latency_ms(msg.date)
    await msg.reply_text(f"Pong! Latency: {latency}ms")


async def _start_schedule(application: Application) -> None:
    orchestrator: LeaderboardOrchestrator = application.bot_data["orchestrator"]
    chat_id = application.bot_data.get("leaderboard_chat_id")
    if chat_id is None:
        logger.warning(f"{LEADERBOARD_CHAT_ENV} not set, scheduled leaderboard disabled")
        return
    orchestrator.start_schedule(
        TelegramChannel(application.bot, chat_id),
        application.bot_data.get("interval_seconds", LEADERBOARD_INTERVAL_MINUTES * 60),
    )


async def _stop_schedule(application: Application) -> None:
    orchestrator: LeaderboardOrchestrator = application.bot_data["orchestrator"]
    await orchestrator.stop_schedule()


def build_application(
    token: str,
    orchestrator: LeaderboardOrchestrator,
    leaderboard_chat_id: int | None = None,
    interval_seconds: float = LEADERBOARD_INTERVAL_MINUTES * 60,
) -> Application:
    """
    Wire handlers and the schedule lifecycle into a Telegram application.

    The scheduled loop starts once the bot is initialized and is cancelled
    when the application stops, before the bot itself shuts down.
    """
    app = (
        Application.builder()
        .token(token)
        .post_init(_start_schedule)
        .post_stop(_stop_schedule)
        .build()
    )
    app.bot_data["orchestrator"] = orchestrator
    app.bot_data["leaderboard_chat_id"] = leaderboard_chat_id
    app.bot_data["interval_seconds"] = interval_seconds

    app.add_handler(CommandHandler([LEADERBOARD_COMMAND], leaderboard_cmd))
    app.add_handler(CommandHandler([PING_COMMAND], ping_cmd))
    app.add_handler(MessageHandler(filters.TEXT & filters.Regex(r"^\s*!"), bang_command))
    return app


def parse_chat_id(raw: str | None) -> int | None:
    """
    Parse LEADERBOARD_CHAT_ID (group chats are negative).

    Raises:
        ValueError: If the value is set but not an integer
    """
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid {LEADERBOARD_CHAT_ENV}: {raw!r}")


def main() -> None:
    token = os.getenv(TELEGRAM_TOKEN_ENV)
    if not token:
        raise SystemExit(f"Missing {TELEGRAM_TOKEN_ENV} env var")

    try:
        source = GoogleSheetsSource.from_env()
        chat_id = parse_chat_id(os.getenv(LEADERBOARD_CHAT_ENV))
    except ValueError as e:
        raise SystemExit(str(e))

    par_table = load_par_table()
    orchestrator = LeaderboardOrchestrator(source, par_table)

    logger.info(
        f"Bot starting (spreadsheet={source.spreadsheet_id}, "
        f"scheduled_chat={chat_id}, courses={par_table.courses})"
    )

    app = build_application(token, orchestrator, chat_id)
    app.run_polling(close_loop=False)


if __name__ == "__main__":
    main()
