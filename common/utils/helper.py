ELLIPSIS = " [...]"


def limit_string_length(text: str, max_length: int) -> str:
    """
    Clip `text` to `max_length` characters, marking the cut with ' [...]'.
    """
    if len(text) <= max_length:
        return text
    if max_length <= len(ELLIPSIS):
        return text[:max_length]
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def describe_exception(e: BaseException) -> str:
    """Message of an exception, falling back to its class name when empty."""
    return str(e) or type(e).__name__
