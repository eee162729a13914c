"""
Leaderboard Delivery

Modules:
- orchestrator: On-demand and scheduled leaderboard posting
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "LeaderboardOrchestrator":
        from scorebot.delivery.orchestrator import LeaderboardOrchestrator
        return LeaderboardOrchestrator
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
