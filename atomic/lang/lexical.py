"""Lexical analysis for the Atomic language. Source text is split on whitespace into words, and each word (or group of
words, for assignments and string literals) becomes a Token.

All grammar can be loosely defined as follows:

```
<print_stmt> ::= "print" <string>
<let_stmt>   ::= "let" <name> "=" <number>          ; lexed as a unit: Let, Identifier, Number
<op_stmt>    ::= <op> <operand> <operand>
<op>         ::= "add" | "subtract" | "multiply" | "divide" | "mod"
<operand>    ::= <number> | <name>

<number>     ::= ["+" | "-"] <digit>+               ; must fit in a 32-bit signed integer
<name>       ::= <alpha>+
<string>     ::= '"' <word>* <word> '"'              ; no escapes, words are rejoined with single spaces;
                                                    ; the opening word never closes the string, even if it
                                                    ; ends with '"'
```

There are no comments and no line structure: a newline is whitespace like any other. Line numbers are only kept for
error messages.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from atomic.lang.error import GenericException
from atomic.lang.numerical import parse_int32

# \s, minus the information separators \x1c-\x1f, which are not whitespace in Atomic source
_WORD = re.compile(r"(?:[^\s]|[\x1c-\x1f])+")


def debug_str(value):
    """Formats value for the Tokens:/AST: dumps: strings are double-quoted with '\\' and '"' escaped."""
    if isinstance(value, str):
        return "\"" + value.replace("\\", "\\\\").replace("\"", "\\\"") + "\""
    return str(value)


class TokenType(Enum):
    PRINT = "Print"
    ADD = "Add"
    SUBTRACT = "Subtract"
    MULTIPLY = "Multiply"
    DIVIDE = "Divide"
    MODULUS = "Modulus"
    LET = "Let"
    IDENTIFIER = "Identifier"
    NUMBER = "Number"
    STRING = "String"


KEYWORDS = {
    "print": TokenType.PRINT,
    "add": TokenType.ADD,
    "subtract": TokenType.SUBTRACT,
    "multiply": TokenType.MULTIPLY,
    "divide": TokenType.DIVIDE,
    "mod": TokenType.MODULUS,
    "let": TokenType.LET,
}


@dataclass(frozen=True)
class Token:
    """A single lexical unit. value is only set for Identifier (name), Number (int) and String (text) tokens."""
    type: TokenType
    value: object = None
    line_num: int = field(default=None, compare=False)

    @property
    def keyword(self):
        """Source keyword of this token, or None if it isn't a keyword token."""
        for keyword, token_type in KEYWORDS.items():
            if token_type is self.type:
                return keyword
        return None

    def __repr__(self):
        if self.value is not None:
            return f"{self.type.value}({debug_str(self.value)})"
        return self.type.value


@dataclass(frozen=True)
class Word:
    """Whitespace-delimited run of source text, and where it was found (used for error messages)."""
    text: str
    line_num: int
    col: int
    line: str

    def error(self, msg, exprs=None):
        return GenericException(msg, exprs, label=GenericException.SYNTAX, line_num=self.line_num, source=self.line,
                                start=self.col, end=self.col + len(self.text))


class Lexer:
    """Consumes words from the front of the source with a lookahead of one word."""

    def __init__(self, source):
        self.words = []
        for line_num, line in enumerate(source.split("\n")):
            for match in _WORD.finditer(line):
                self.words.append(Word(match.group(), line_num + 1, match.start(), line))

        self.pos = 0
        self.tokens = []
        self.errors = []

    def next(self):
        """Consumes and returns the next word, or None at end of input."""
        if self.pos >= len(self.words):
            return None
        self.pos += 1
        return self.words[self.pos - 1]

    def peek(self):
        """Returns the next word without consuming it, or None at end of input."""
        if self.pos >= len(self.words):
            return None
        return self.words[self.pos]

    def push(self, token_type, word, value=None):
        self.tokens.append(Token(token_type, value, word.line_num))

    def lex(self):
        """Tokenizes every word of the source. Returns (tokens, errors); never raises."""
        word = self.next()
        while word is not None:
            if word.text in KEYWORDS:
                self.push(KEYWORDS[word.text], word)
                if KEYWORDS[word.text] is TokenType.LET:
                    self.lex_assignment(word)

            elif parse_int32(word.text) is not None:
                self.push(TokenType.NUMBER, word, parse_int32(word.text))

            elif word.text.startswith("\""):
                self.lex_string(word)

            elif word.text.isalpha():
                self.push(TokenType.IDENTIFIER, word, word.text)

            else:
                self.errors.append(word.error("unknown token '{}'", word.text))

            word = self.next()

        return self.tokens, self.errors

    def lex_assignment(self, let):
        """Lexes the '<name> = <number>' that follows a 'let'. Consumed words are not given back on failure."""
        name = self.next()
        if name is not None and self.peek() is not None and self.peek().text == "=":
            self.next()
            value = self.next()
            if value is not None and parse_int32(value.text) is not None:
                self.push(TokenType.IDENTIFIER, name, name.text)
                self.push(TokenType.NUMBER, value, parse_int32(value.text))
                return

        self.errors.append(let.error("invalid variable assignment syntax, expected 'let NAME = NUMBER'"))

    def lex_string(self, first):
        """Lexes a string literal starting at first. An unterminated literal runs to the end of the source."""
        words = [first.text]
        closed = False

        while not closed and self.peek() is not None:
            word = self.next()
            words.append(word.text)
            closed = word.text.endswith("\"")

        self.push(TokenType.STRING, first, " ".join(words).strip("\""))


def lex(source):
    """Returns (tokens, errors) for source. errors are non-fatal GenericExceptions; the words they refer to produced
    no tokens.
    """
    return Lexer(source).lex()
