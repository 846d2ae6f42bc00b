"""
Lexical analyzer for the softver teaching language.

This module converts raw source text into the flat token sequence consumed by
the reduction engine in `softver.softver_parser`.

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: A single immutable token with kind, payload and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Functions:
    tokenize(source): Lex a whole string and return its tokens (EOF excluded).

Features:
    - Skips whitespace and single-line comments (`#`)
    - Longest-match recognition of operators (`<=` before `<`, `++` before `+`)
    - Numerals carry an `int` payload, identifiers their name
    - Keywords are lowercase (`if`, `while`, `skip`, `true`, ...)

Raises:
    LexError: On characters that start no token (including a lone `&`, `|` or `:`).

Example:
    >>> tokenize("x + 1")
    [Token(IDENT, 'x'), Token(PLUS, '+'), Token(NUMERAL, 1)]
"""

from typing import Any

from softver.softver_constants import EOF, IDENT, NUMERAL, token_hashmap
from softver.softver_errors import LexError

_MAX_OPERATOR_LEN = max(len(k) for k in token_hashmap if not k.isalpha())


class CharacterStream:
    """
    Reads characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """A single lexical token.

    Tokens are immutable once built: the reduction engine replaces whole slots
    and never edits a token in place.

    Attributes:
        type (str): The canonical kind (e.g. 'NUMERAL', 'IDENT', 'PLUS').
        value (int | str): `int` for numerals, the name for identifiers,
            the lexeme for everything else.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("type", "value", "line", "col")

    def __init__(self, type_: str, value: int | str, line: int = 0, col: int = 0):
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "col", col)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable; cannot set {name!r}")

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r})"

    def __eq__(self, other: Any) -> bool:
        """Tokens compare by kind and payload; source location is ignored."""
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value))


class Lexer:
    """Lexical analyzer for the softver language.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "#":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest operator or punctuation lexeme.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(_MAX_OPERATOR_LEN):
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap and not candidate.isalpha():
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexError: If the next character starts no valid token.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token(EOF, EOF, self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if ch.isalpha() or ch == "_":
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                ident += self.advance()
            if ident in token_hashmap:
                return Token(token_hashmap[ident], ident, line, col)
            return Token(IDENT, ident, line, col)

        # 2. Numeral
        if ch.isdecimal():
            num = ""
            while not self.stream.end_of_file() and self.peek().isdecimal():
                num += self.advance()
            return Token(NUMERAL, int(num), line, col)

        # 3. Operator or punctuation
        token = self.match_operator()
        if token:
            return token

        raise LexError(f"Unexpected character {ch!r}", line, col)


def tokenize(source: str) -> list[Token]:
    """Lex `source` completely and return its tokens, without the EOF marker."""
    lexer = Lexer(CharacterStream(source))
    tokens = []
    while True:
        tok = lexer.next_token()
        if tok.type == EOF:
            break
        tokens.append(tok)
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize", "token_hashmap"]
