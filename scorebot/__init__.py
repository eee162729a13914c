"""
Golf Scorebot - Core Package

This package contains the core modules for:
- Leaderboard scoring (scorebot.scoring)
- Score sheet ingestion (scorebot.ingestion)
- Leaderboard delivery, on demand and on a schedule (scorebot.delivery)
- The Telegram bot front end (scorebot.bot)
"""

__version__ = "1.0.0"

from scorebot.config import *
