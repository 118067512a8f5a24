"""
Marker tokenizer. Scans one line of script text and moves its markers into a token:

    $[id]       id of the dialog or decision
    $T[id]      link to another tree, `$t[` works too
    $D[id]      link to another dialog of the same tree, `$d[` works too

Anything else following `$` is kept as literal text, so is a marker opening at the end of a line.
"""

from textengine.errors import MalformedMarkerError
from textengine.models import Token

MARKER = "$"
TREE_LINKS = "Tt"
DIALOG_LINKS = "Dd"


def parse_marker_value(line: str, pos: int, trim: bool = True) -> tuple[str, int]:
    """
    Read a marker body starting at the opening bracket at `pos`.
    Returns the body and the position right after the closing bracket and any trimmed spaces.
    An unterminated marker takes the rest of the line.
    """
    end = line.find("]", pos + 1)
    if end == -1:
        return line[pos + 1 :], len(line)

    value = line[pos + 1 : end]
    pos = end + 1
    if trim:
        while pos < len(line) and line[pos] == " ":
            pos += 1
    return value, pos


def parse_line(line: str, token: Token | None = None, trim: bool = True) -> Token:
    """
    Tokenize a line into `token`, which accumulates text across calls.
    A second id or link marker within the same token is fatal.
    """
    if token is None:
        token = Token()

    text = []
    pos = 0
    while pos < len(line):
        char = line[pos]
        if char != MARKER:
            text.append(char)
            pos += 1
            continue

        pos += 1
        if pos == len(line):
            text.append(MARKER)
            break

        kind = line[pos]
        if kind == "[":
            if pos + 1 == len(line):
                # nothing follows the bracket, restore the text
                text.append(MARKER + kind)
                break
            value, pos = parse_marker_value(line, pos, trim)
            if token.has_id:
                raise MalformedMarkerError(f"found another id within token: {value}")
            token.id, token.has_id = value, True

        elif kind in TREE_LINKS or kind in DIALOG_LINKS:
            pos += 1
            if pos == len(line):
                text.append(MARKER + kind)
                break
            if line[pos] != "[" or pos + 1 == len(line):
                # not a marker, restore the text
                text.append(MARKER + kind + line[pos])
                pos += 1
                continue
            value, pos = parse_marker_value(line, pos, trim)
            if token.has_link:
                raise MalformedMarkerError(f"found another link within token: {value}")
            token.link, token.has_link = value, True
            token.tree_link = kind in TREE_LINKS

        else:
            text.append(MARKER + kind)
            pos += 1

    token.text += "".join(text)
    return token
