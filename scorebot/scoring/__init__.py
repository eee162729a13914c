"""
Leaderboard Scoring

Modules:
- course: Course name normalization and par registry
- leaderboard: Score sheet parsing and ranking
- render: Fixed-width text output
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "normalize_course_name":
        from scorebot.scoring.course import normalize_course_name
        return normalize_course_name
    if name == "load_par_table":
        from scorebot.scoring.course import load_par_table
        return load_par_table
    if name == "parse_score_table":
        from scorebot.scoring.leaderboard import parse_score_table
        return parse_score_table
    if name == "compute_leaderboard":
        from scorebot.scoring.leaderboard import compute_leaderboard
        return compute_leaderboard
    if name == "render_leaderboard":
        from scorebot.scoring.render import render_leaderboard
        return render_leaderboard
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
