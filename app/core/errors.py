def error_message(exc: Exception) -> str:
    """Human readable message of a backend error (PostgREST and Auth errors carry .message)"""
    return getattr(exc, "message", None) or str(exc)
