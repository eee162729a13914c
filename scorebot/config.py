"""
Central configuration for the Golf Scorebot.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

from pathlib import Path

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent

# --- Course Configuration ---
# Par per hole, keyed by base course name (sheet title without the '25 suffix)
COURSE_PARS = {
    "Charlotte National": (4, 3, 5, 4, 4, 3, 5, 4, 4),
}

# --- Schedule Configuration ---
LEADERBOARD_INTERVAL_MINUTES = 60  # Automatic leaderboard post, once an hour
FETCH_TIMEOUT_SECONDS = 30  # Upper bound for one spreadsheet request
SEND_TIMEOUT_SECONDS = 15  # Upper bound for one chat message send

# --- Google Sheets Configuration ---
SHEETS_SCOPES = ("https://www.googleapis.com/auth/spreadsheets.readonly",)

# --- Chat Commands ---
LEADERBOARD_COMMAND = "leaderboard"
PING_COMMAND = "ping"
BANG_PREFIX = "!"

# --- User-facing Messages ---
LEADERBOARD_HEADER = "🏌️ Leaderboard for {title} 🏌️"
NO_TABLES_MESSAGE = "No sheets found in the spreadsheet."
TABLE_NOT_FOUND_MESSAGE = "No sheet/tab found with the name \"{name}\"."
NO_SCORES_MESSAGE = "No scores found in \"{name}\"."
COMMAND_FAILED_MESSAGE = "Could not build the leaderboard: {error}"

# --- Environment Variables ---
TELEGRAM_TOKEN_ENV = "TELEGRAM_BOT_TOKEN"
GOOGLE_CREDENTIALS_ENV = "GOOGLE_CREDENTIALS"  # Service-account JSON, inline
SPREADSHEET_ID_ENV = "SPREADSHEET_ID"
LEADERBOARD_CHAT_ENV = "LEADERBOARD_CHAT_ID"
COURSE_PARS_FILE_ENV = "COURSE_PARS_FILE"
LOG_LEVEL_ENV = "LOG_LEVEL"
