"""Quote-aware CSV tokenizer.

A two-state scanner (unquoted / quoted). Inside quotes a doubled quote is a
literal quote and commas or newlines are field content. Outside quotes a
comma ends the field, a newline ends the row and carriage returns are
dropped. An unterminated quote runs to end of input without error.
"""

from __future__ import annotations

from typing import List

RawRow = List[str]

QUOTE = '"'
DELIMITER = ","


def tokenize(text: str) -> List[RawRow]:
    rows: List[RawRow] = []
    row: RawRow = []
    field: List[str] = []
    in_quotes = False
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if in_quotes:
            if ch == QUOTE:
                if i + 1 < n and text[i + 1] == QUOTE:
                    field.append(QUOTE)
                    i += 2
                    continue
                in_quotes = False
            else:
                field.append(ch)
        elif ch == QUOTE:
            in_quotes = True
        elif ch == DELIMITER:
            row.append("".join(field))
            field = []
        elif ch == "\n":
            row.append("".join(field))
            rows.append(row)
            row, field = [], []
        elif ch != "\r":
            field.append(ch)
        i += 1

    # last row has no trailing newline to flush it
    row.append("".join(field))
    rows.append(row)
    return [r for r in rows if not _is_blank(r)]


def _is_blank(row: RawRow) -> bool:
    return not "".join(row).strip()
