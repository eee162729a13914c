"""
Score Ingestion

Modules:
- sheets: Read score tabs from Google Sheets
"""


def __getattr__(name):
    """Lazy imports so the Google client is only loaded when needed."""
    if name == "GoogleSheetsSource":
        from scorebot.ingestion.sheets import GoogleSheetsSource
        return GoogleSheetsSource
    if name == "TableNotFoundError":
        from scorebot.ingestion.sheets import TableNotFoundError
        return TableNotFoundError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
