# gitclient/process/escaping.py

"""Escaping of values written into Windows batch files."""

# Characters cmd.exe treats specially in an unquoted argument; each is
# prefixed with a caret.
CARET_SPECIAL_CHARS = frozenset("^&\\<>| \"\t")


def escape_windows_chars_for_unquoted_string(text: str) -> str:
    """
    Escape ``text`` for use as a single unquoted cmd.exe argument.

    Every caret-class character gets a ``^`` prefix and every ``%``
    becomes ``%%``. Each character is mapped independently, so
    ``escape(a + b) == escape(a) + escape(b)``. Applying the function to
    its own output adds another layer of escaping.
    """
    if not text:
        return ""
    escaped = []
    for ch in text:
        if ch in CARET_SPECIAL_CHARS:
            escaped.append("^" + ch)
        elif ch == "%":
            escaped.append("%%")
        else:
            escaped.append(ch)
    return "".join(escaped)
