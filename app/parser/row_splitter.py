"""
Row Splitter
============
Turns a whole file's text into logical rows for the tokenizer.

Rules:
    - "\\n" and "\\r\\n" both end a row
    - A terminator seen while an odd number of (non-doubled) quotes is open is
      literal content of a multi-line quoted field, stored as "\\n"
    - Rows that are empty or whitespace-only are dropped

Rows are returned as raw text: quotes and doubled quotes are preserved so the
tokenizer applies the same escaping rules.
"""
import logging

logger = logging.getLogger(__name__)


def split_rows(text: str, quote_char: str = '"') -> list[str]:
    """
    Split file text into logical rows, respecting quoted newlines.

    Parameters
    ----------
    text : str
        Entire decoded file content.
    quote_char : str
        Quote character that opens / closes quoted spans.

    Returns
    -------
    list[str]
        Non-empty logical rows in source order. The first is the header.
    """
    if not text or not text.strip():
        return []

    rows: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    length = len(text)

    def _flush() -> None:
        row = "".join(current)
        if row.strip():
            rows.append(row)

    while i < length:
        char = text[i]
        next_char = text[i + 1] if i + 1 < length else ""

        if char == quote_char:
            if next_char == quote_char:
                # Doubled quote: escaped literal, parity unchanged
                current.append(char)
                current.append(next_char)
                i += 2
                continue
            in_quotes = not in_quotes
            current.append(char)
            i += 1
            continue

        is_crlf = char == "\r" and next_char == "\n"
        if char == "\n" or is_crlf:
            step = 2 if is_crlf else 1
            if in_quotes:
                current.append("\n")
            else:
                _flush()
                current = []
            i += step
            continue

        current.append(char)
        i += 1

    _flush()

    if in_quotes:
        logger.warning("Unterminated quoted field at end of input; last row kept as-is")

    logger.debug("Split %d chars into %d logical row(s)", length, len(rows))
    return rows
