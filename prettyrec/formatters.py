"""
Robust one-line formatters for exception and warning messages.

Every failure raised while rendering names the offending value; these helpers keep that
message readable when the value has a broken or huge __repr__.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import class_name

# Methods --------------------------------------------------------------------------------------------------------------


def fmt_type(obj: Any, *, fully_qualified: bool = False) -> str:
    """Format the type of obj (or obj itself when it is a class) as '<Name>'.

    Examples:
        >>> fmt_type(42)
        '<int>'

        >>> fmt_type({})
        '<dict>'
    """
    return f"<{class_name(obj, fully_qualified=fully_qualified)}>"


def fmt_value(obj: Any, *, max_repr: int = 80, ellipsis: str = "...") -> str:
    """
    Format a single value as a '<type: repr>' pair for exception messages.

    Args:
        obj: Any Python object to format.
        max_repr: Maximum length of the repr before truncation.
        ellipsis: Truncation token appended to cut reprs.

    Returns:
        Formatted string like "<int: 42>" or "<str: 'sem=title'>".

    Notes:
        - Broken __repr__ methods are handled with a fallback token.
        - Quoted reprs keep their closing quote after truncation.

    Examples:
        >>> fmt_value("ord=1,sem")
        "<str: 'ord=1,sem'>"

        >>> fmt_value("x" * 100, max_repr=5)
        "<str: 'xxxxx...'>"
    """
    repr_ = _fmt_truncate(_safe_repr(obj), max_repr, ellipsis=ellipsis)
    return f"<{class_name(obj)}: {repr_}>"


# Private Methods ------------------------------------------------------------------------------------------------------


def _fmt_truncate(repr_: str, max_len: int, ellipsis: str = "...") -> str:
    """
    Truncate repr_ to max_len visible characters and append the ellipsis.

    For quoted str reprs max_len counts the content only, and the quote is kept.
    """
    if max_len <= 0:
        return ""
    if len(repr_) <= max_len:
        return repr_

    if len(repr_) >= 2 and repr_[0] in ("'", '"') and repr_[-1] == repr_[0]:
        quote = repr_[0]
        inner = repr_[1:-1]
        if len(inner) <= max_len:
            return repr_
        return f"{quote}{inner[:max_len]}{ellipsis}{quote}"

    return repr_[:max_len] + ellipsis


def _safe_repr(obj: Any) -> str:
    """
    Defensive repr() call - handle broken __repr__ methods gracefully
    """
    try:
        return repr(obj)
    except Exception as e:
        return f"<{type(obj).__name__} object (repr failed: {type(e).__name__})>"
