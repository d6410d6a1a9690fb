from typing import Sequence


def quote_filter_value(value: str) -> str:
    """
    Double-quote a value for a PostgREST logic filter (or=/and=).

    Inside those filters ',' '.' ':' '(' and ')' are reserved, so user text
    must be quoted, with backslashes and double quotes escaped.
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def ilike_any(columns: Sequence[str], text: str) -> str:
    """or_() expression matching text as a case-insensitive substring of any column"""
    pattern = quote_filter_value(f"%{text}%")
    return ",".join(f"{column}.ilike.{pattern}" for column in columns)
