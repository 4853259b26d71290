"""Lexical analysis for fcalc: turns source text into a flat stream of tokens.

Token patterns are tried at the cursor in declaration order. The longest match wins, and on ties the earlier pattern
wins, which is how `let` and `f` become keywords while `letter` and `foo` stay identifiers. Whitespace is matched and
discarded. If nothing matches, a LexicalError carrying the offending character is raised.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from fcalc.lang.error import LexicalError


class TokenKind(Enum):
    OPEN_PAREN = auto()
    CLOSE_PAREN = auto()
    COMMA = auto()
    EXPONENT = auto()
    MULTIPLICATIVE = auto()  # * / // %
    ADDITIVE = auto()        # + -
    FACT = auto()
    ARROW = auto()
    ASSIGN = auto()
    NUMERIC = auto()
    LET = auto()
    FUNC = auto()
    ID = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    start: int = 0  # offset into the source, used for error display

    @property
    def end(self):
        return self.start + len(self.text)

    def __str__(self):
        return self.text if self.kind is not TokenKind.EOF else "<eof>"


class Lexer:
    """Restartable scanner over one source string."""
    SPECS = [
        (re.compile(r"\s+"), None),
        (re.compile(r"\("), TokenKind.OPEN_PAREN),
        (re.compile(r"\)"), TokenKind.CLOSE_PAREN),
        (re.compile(r","), TokenKind.COMMA),
        (re.compile(r"\^"), TokenKind.EXPONENT),
        (re.compile(r"\*|//|/|%"), TokenKind.MULTIPLICATIVE),
        (re.compile(r"\+|-"), TokenKind.ADDITIVE),
        (re.compile(r"!"), TokenKind.FACT),
        (re.compile(r"=>"), TokenKind.ARROW),
        (re.compile(r"="), TokenKind.ASSIGN),
        (re.compile(r"\d+(\.\d+)?|\.\d+"), TokenKind.NUMERIC),
        (re.compile(r"let"), TokenKind.LET),
        (re.compile(r"f"), TokenKind.FUNC),
        (re.compile(r"[a-zA-Z_]\w*"), TokenKind.ID),
    ]

    def __init__(self, src=""):
        self.src = src
        self.cursor = 0

    def init(self, src):
        """Restarts the scanner on src."""
        self.src = src
        self.cursor = 0

    def has_next_token(self):
        return self.cursor < len(self.src)

    def next_token(self):
        """Returns the next non-whitespace token. Once the source is exhausted, keeps returning EOF."""
        while self.has_next_token():
            match, kind = None, None
            for pattern, spec_kind in Lexer.SPECS:
                current = pattern.match(self.src, self.cursor)
                if current and (match is None or len(current.group()) > len(match.group())):
                    match, kind = current, spec_kind

            if match is None:
                start = self.cursor
                msg = "'{}' contains illegal character '{}'"
                raise LexicalError(msg, (self.src, self.src[start]), start=start, end=start + 1)

            self.cursor = match.end()
            if kind is not None:
                return Token(kind, match.group(), match.start())

        return Token(TokenKind.EOF, "", len(self.src))

    def tokens(self):
        """Returns every token of the source, EOF included. Restarts the scanner first."""
        self.cursor = 0
        result = [self.next_token()]
        while result[-1].kind is not TokenKind.EOF:
            result.append(self.next_token())
        return result

    def __iter__(self):
        return iter(self.tokens())
