"""
Quoted-Field Tokenizer
======================
Turns one logical delimited row into its ordered field values.

Rules:
    1. Delimiter between a matched pair of quotes is literal text
    2. Doubled quote inside an open quoted span → one literal quote, span stays open
    3. Any other quote toggles the "inside quotes" state and is not emitted
    4. Each field is trimmed; a value still wrapped in quotes is unwrapped
    5. Unterminated quote at end of row → flush what was accumulated

Contract:
    - Never raises on malformed quoting.
    - Empty / whitespace-only row → [] (not [""]).
"""


def strip_wrapping_quotes(value: str, quote_char: str = '"') -> str:
    """Remove one surrounding pair of quotes from a trimmed value, if present."""
    value = value.strip()
    if len(value) >= 2 and value.startswith(quote_char) and value.endswith(quote_char):
        return value[1:-1].strip()
    return value


def tokenize_row(row: str, delimiter: str = ",", quote_char: str = '"') -> list[str]:
    """
    Split a single logical row into field values.

    Parameters
    ----------
    row : str
        One logical row (may contain newlines inside quoted fields).
    delimiter : str
        Field separator character.
    quote_char : str
        Quote character used for wrapping and doubled-quote escaping.

    Returns
    -------
    list[str]
        Trimmed, unquoted field values in source order.
    """
    if not row or not row.strip():
        return []

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    length = len(row)

    while i < length:
        char = row[i]

        if char == quote_char:
            if in_quotes and i + 1 < length and row[i + 1] == quote_char:
                current.append(quote_char)
                i += 2
                continue
            in_quotes = not in_quotes
            i += 1
            continue

        if char == delimiter and not in_quotes:
            fields.append(strip_wrapping_quotes("".join(current), quote_char))
            current = []
            i += 1
            continue

        current.append(char)
        i += 1

    # Last field; also covers an unterminated quoted span
    fields.append(strip_wrapping_quotes("".join(current), quote_char))
    return fields
