"""
Turns PGN text into a Document tree. We're not validating chess here: move
text is kept exactly as written and gets played (or not) later on, when
the tree is linearized. All we care about is structure: headers, comments,
move numbers, NAGs, results and (possibly nested) variations.
"""

import logging
import re
from dataclasses import dataclass
from typing import Literal, Optional

from pgntree import settings
from pgntree.errors import ParseError
from pgntree.models import Container, Document, Header, Move, Variation

logger = logging.getLogger(__name__)


@dataclass
class Chunk:
    type_: Literal[
        "header", "comment", "start", "end", "number", "nag", "result", "move"
    ]
    data: str


HEADER_RE = re.compile(r'^\[\s*(\w+)\s+"((?:[^"\\]|\\.)*)"\s*\]$')
# the same tag, found anywhere; a quoted value may itself contain "]"
HEADER_SCAN_RE = re.compile(r'\[\s*\w+\s+"(?:[^"\\]|\\.)*"\s*\]')

MOVE_NUMBER_RE = re.compile(
    r"""(?x)
    ^(\d+)          # move number
    (\.*)           # dots, "." or "..." (or none: "12 e4" is seen in the wild)
    (.*)$           # whatever is glued on, e.g. the e4 of 1.e4
    """
)
NAG_RE = re.compile(r"^\$(\d+)$")

# free-standing glyphs, e.g. "e4 !?", are the same as the matching NAG
GLYPH_NAGS = {"!": 1, "?": 2, "!!": 3, "??": 4, "!?": 5, "?!": 6}

# a move token ends at whitespace or at anything with structural meaning
TOKEN_BREAKS = "{}()[];"


def extract_chunks(text: str) -> list[Chunk]:
    chunks = []
    i = 0
    length = len(text)

    def at_line_start(index):
        return index == 0 or text[index - 1] == "\n"

    while i < length:  # ➡️ Every branch must advance `i`
        c = text[i]

        if c.isspace():
            i += 1

        # Escape mechanism: a line starting with % is ignored entirely
        elif c == "%" and at_line_start(i):
            end = text.find("\n", i)
            i = length if end == -1 else end

        elif c == "{":
            end = text.find("}", i + 1)
            if end == -1:
                logger.warning("Didn't find closing comment brace: %s", text[i:][:30])
                end = length
            chunks.append(Chunk("comment", text[i + 1 : end]))  # noqa: E203
            i = end + 1

        # Rest-of-line comment
        elif c == ";":
            end = text.find("\n", i)
            end = length if end == -1 else end
            chunks.append(Chunk("comment", text[i + 1 : end]))  # noqa: E203
            i = end

        elif c == "[":
            if m := HEADER_SCAN_RE.match(text, i):
                end = m.end() - 1
            else:
                end = text.find("]", i + 1)
            if end == -1:
                raise ParseError(f"Unclosed header tag: {text[i:][:30]}")
            chunks.append(Chunk("header", text[i : end + 1]))  # noqa: E203
            i = end + 1

        elif c == "(":
            chunks.append(Chunk("start", c))
            i += 1

        elif c == ")":
            chunks.append(Chunk("end", c))
            i += 1

        elif c in "}]":
            raise ParseError(f"Unexpected '{c}' at index {i}: {text[i:][:30]}")

        else:
            start = i
            while i < length and not text[i].isspace() and text[i] not in TOKEN_BREAKS:
                i += 1
            chunks.extend(classify_token(text[start:i]))

    return chunks


def classify_token(token: str) -> list[Chunk]:
    if token in settings.RESULT_TOKENS:
        return [Chunk("result", token)]

    if NAG_RE.match(token):
        return [Chunk("nag", token[1:])]

    if token in GLYPH_NAGS:
        return [Chunk("nag", str(GLYPH_NAGS[token]))]

    m = MOVE_NUMBER_RE.match(token)
    # "0-0" castling also starts with a digit; only dots or nothing may follow
    if m and (m.group(2) or not m.group(3)):
        chunks = [Chunk("number", m.group(1))]
        if rest := m.group(3):
            chunks.extend(classify_token(rest))
        return chunks

    # dangling dots, as in "2 ... Nc6", or "...Nc6"
    move = token.lstrip(".")
    if not move:
        return []
    return [Chunk("move", move)]


def parse_header(raw: str) -> Header:
    m = HEADER_RE.match(raw.strip())
    if not m:
        raise ParseError(f"Invalid PGN header: {raw}")
    name, value = m.groups()
    value = value.replace('\\"', '"').replace("\\\\", "\\")
    return Header(name=name, value=value)


def build_document(chunks: list[Chunk]) -> Document:
    document = Document(result="")
    stack: list[Container] = [document]
    pending_number: Optional[int] = None
    seen_move = False

    for index, chunk in enumerate(chunks):
        container = stack[-1]

        if chunk.type_ == "header":
            if seen_move:
                raise ParseError(f"Header after movetext: {chunk.data}")
            document.headers.append(parse_header(chunk.data))

        elif chunk.type_ == "comment":
            comment = chunk.data.strip()
            if container.moves:
                container.moves[-1].comments.append(comment)
            elif container is not document:
                container.comments.append(comment)
            elif document.headers:
                document.comments.append(comment)
            else:
                document.comments_above_header.append(comment)

        elif chunk.type_ == "start":
            if not container.moves:
                raise ParseError("Variation has no move to attach to")
            variation = Variation()
            container.moves[-1].variations.append(variation)
            stack.append(variation)
            pending_number = None

        elif chunk.type_ == "end":
            if len(stack) == 1:
                raise ParseError("Unbalanced parentheses: unexpected ')'")
            stack.pop()
            pending_number = None

        elif chunk.type_ == "number":
            pending_number = int(chunk.data)

        elif chunk.type_ == "nag":
            if container.moves:
                container.moves[-1].nags.append(int(chunk.data))
            else:
                logger.debug("Ignoring NAG with no move: $%s", chunk.data)

        elif chunk.type_ == "result":
            if container is document:
                document.result = chunk.data
                rest = chunks[index + 1 :]  # noqa: E203
                if leftover := [c for c in rest if c.type_ != "comment"]:
                    logger.warning("Ignoring %d chunks after result", len(leftover))
                break
            container.result = chunk.data

        else:
            assert chunk.type_ == "move", f"Unexpected chunk type: {chunk.type_}"
            container.moves.append(Move(move=chunk.data, move_number=pending_number))
            pending_number = None
            seen_move = True

    if len(stack) > 1:
        raise ParseError(f"Unbalanced parentheses, depth {len(stack) - 1}")

    if not document.result:
        header_result = document.header("Result")
        if header_result in settings.RESULT_TOKENS:
            document.result = header_result
        else:
            document.result = settings.DEFAULT_RESULT

    return document


def parse_pgn(text: str) -> Document:
    """
    Parse a single PGN game into a Document.

    Raises ParseError for structural problems (bad header tags, unbalanced
    parentheses); bad *moves* are not a parse problem.
    """
    return build_document(extract_chunks(text))
