"""Shell-like command line tokenizer.

Splits one line of shell text into argument tokens, resolving single quotes,
double quotes and backslash escapes the way a POSIX shell would for the
purposes of finding path arguments. Unterminated quotes are not an error.
"""

from __future__ import annotations

# Characters a backslash may escape inside double quotes.
_DQUOTE_ESCAPABLE = frozenset('"\\$`')


def split_command_line(line: str) -> list[str]:
    """Split *line* into trimmed argument tokens.

    A closing quote ends the current token immediately, so ``"a b"c`` yields
    ``["a b", "c"]``. Empty tokens are never emitted.
    """
    tokens: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escape = False

    def flush() -> None:
        token = "".join(current).strip()
        current.clear()
        if token:
            tokens.append(token)

    for ch in line:
        if escape:
            if quote == '"' and ch not in _DQUOTE_ESCAPABLE:
                current.append("\\")
            current.append(ch)
            escape = False
        elif ch == "\\" and quote != "'":
            escape = True
        elif quote is not None:
            if ch == quote:
                quote = None
                flush()
            else:
                current.append(ch)
        elif ch in ("'", '"'):
            quote = ch
        elif ch.isspace():
            flush()
        else:
            current.append(ch)

    flush()
    return tokens
