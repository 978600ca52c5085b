"""Lexical analysis for the parens language. Raw text is turned into a forward-only stream of tokens:

```
<token> ::= "("                                  ; LEFT_PAREN
          | ")"                                  ; RIGHT_PAREN
          | <digit> (<digit> | ".")*             ; VALUE/NUMBER, ends at a number delimiter
          | '"' (<char> | "\\" <escape>)* '"'    ; VALUE/STRING, escapes are \\n, \\t and \\\\
          | <char>+                              ; IDENTIFIER, ends at a boundary character
```

The tokenizer only recognizes lexical shape: numbers like "1.2.3" are returned as-is and rejected by the reader.
"""

from dataclasses import dataclass, field
from enum import Enum

from parens.lang.error import (
    InvalidNumberCharacter, NotAnEscapableCharacter, UnexpectedCharacter, UnexpectedEndOfInput
)


class TokenKind(Enum):
    IDENTIFIER = "identifier"
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    VALUE = "value"


class ValueType(Enum):
    STRING = "string"
    NUMBER = "number"


@dataclass(frozen=True)
class Token:
    """A single lexical unit. start and end are offsets into the tokenized text and do not take part in equality."""
    kind: TokenKind
    text: str = ""
    value_type: ValueType = None
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)

    @classmethod
    def identifier(cls, text, start=0, end=0):
        return cls(TokenKind.IDENTIFIER, text, start=start, end=end)

    @classmethod
    def left_paren(cls, start=0):
        return cls(TokenKind.LEFT_PAREN, "(", start=start, end=start + 1)

    @classmethod
    def right_paren(cls, start=0):
        return cls(TokenKind.RIGHT_PAREN, ")", start=start, end=start + 1)

    @classmethod
    def value(cls, text, value_type, start=0, end=0):
        return cls(TokenKind.VALUE, text, value_type, start=start, end=end)

    def __repr__(self):
        if self.kind is TokenKind.VALUE:
            return f"Value({self.text!r}, {self.value_type.name})"
        elif self.kind is TokenKind.IDENTIFIER:
            return f"Identifier({self.text!r})"
        return self.kind.name.title().replace("_", "")


class Tokenizer:
    """Pull-based tokenizer over a string. Every call to next_token advances the cursor; it never rewinds."""
    DIGITS = "0123456789"
    WHITESPACE = " \t\n"
    NUMBER_DELIMITERS = " ,)]}\n\t"
    IDENTIFIER_BOUNDARIES = "[]{}() \n\t"
    ESCAPES = {"n": "\n", "t": "\t", "\\": "\\"}

    def __init__(self, code):
        self.code = code
        self.position = 0

    def _error(self, error_cls, *args, start=None):
        """Builds a lexical error located at start (defaults to the cursor)."""
        start = self.position if start is None else start
        return error_cls(*args, source=self.code, start=start, end=start + 1)

    def _peek(self):
        return self.code[self.position] if self.position < len(self.code) else None

    def skip_whitespace(self):
        while self.position < len(self.code) and self.code[self.position] in Tokenizer.WHITESPACE:
            self.position += 1

    def at_end(self):
        """Whether or not only whitespace remains. Consumes that whitespace."""
        self.skip_whitespace()
        return self.position >= len(self.code)

    def next_token(self):
        """Returns the next Token, raising UnexpectedEndOfInput if there is none."""
        if self.at_end():
            raise self._error(UnexpectedEndOfInput)

        char = self.code[self.position]
        if char == "(":
            self.position += 1
            return Token.left_paren(self.position - 1)
        elif char == ")":
            self.position += 1
            return Token.right_paren(self.position - 1)
        elif char in Tokenizer.DIGITS:
            return self.read_number()
        elif char == '"':
            return self.read_string()
        return self.read_identifier()

    def read_number(self):
        """Reads digits and '.' up to a number delimiter. Any other character is an error."""
        start = self.position
        while self._peek() is not None and self._peek() not in Tokenizer.NUMBER_DELIMITERS:
            char = self._peek()
            if char not in Tokenizer.DIGITS and char != ".":
                raise self._error(InvalidNumberCharacter, char)
            self.position += 1

        return Token.value(self.code[start:self.position], ValueType.NUMBER, start, self.position)

    def read_string(self):
        """Reads a double-quoted string, resolving escapes. The quotes are not part of the token text."""
        start = self.position
        self.position += 1  # opening quote

        text = []
        while True:
            char = self._peek()
            if char is None:
                raise self._error(UnexpectedEndOfInput)

            self.position += 1
            if char == '"':
                break
            elif char == "\\":
                escaped = self._peek()
                if escaped is None:
                    raise self._error(UnexpectedEndOfInput)
                elif escaped not in Tokenizer.ESCAPES:
                    raise self._error(NotAnEscapableCharacter, escaped, start=self.position - 1)
                text.append(Tokenizer.ESCAPES[escaped])
                self.position += 1
            else:
                text.append(char)

        return Token.value("".join(text), ValueType.STRING, start, self.position)

    def read_identifier(self):
        """Reads everything up to a boundary character. Boundary characters are not consumed."""
        start = self.position
        while self._peek() is not None and self._peek() not in Tokenizer.IDENTIFIER_BOUNDARIES:
            self.position += 1

        if self.position == start:
            raise self._error(UnexpectedCharacter, self.code[start])
        return Token.identifier(self.code[start:self.position], start, self.position)

    def __iter__(self):
        """Yields tokens until only whitespace remains."""
        while not self.at_end():
            yield self.next_token()
