"""Recursive-descent reader: pulls tokens from a Tokenizer on demand and assembles one complete Expression per read.

```
<form> ::= <atom>
         | "(" <form>* ")"
```
"""

import math

from parens.core.expression import Float, Identifier, Integer, List, String
from parens.core.tokenizer import Tokenizer, TokenKind, ValueType
from parens.lang.error import MalformedNumber, NestingTooDeep, UnbalancedParenthesis


class Reader:
    """Reads forms from code. Lists may be nested at most max_depth levels deep."""
    MAX_DEPTH = 100

    def __init__(self, code, max_depth=None):
        self.code = code
        self.tokenizer = Tokenizer(code)
        self.max_depth = Reader.MAX_DEPTH if max_depth is None else max_depth

    @classmethod
    def from_string(cls, code, max_depth=None):
        return cls(code, max_depth)

    def read(self):
        """Reads exactly one complete form. Raises UnexpectedEndOfInput if the code runs out first."""
        return self.read_form(self.tokenizer.next_token(), 0)

    def read_all(self):
        """Yields every form until only whitespace remains."""
        while not self.at_end():
            yield self.read()

    def at_end(self):
        return self.tokenizer.at_end()

    def read_form(self, token, depth):
        if token.kind is TokenKind.IDENTIFIER:
            return Identifier(token.text)
        elif token.kind is TokenKind.LEFT_PAREN:
            return self.read_list(token, depth + 1)
        elif token.kind is TokenKind.RIGHT_PAREN:
            raise UnbalancedParenthesis(source=self.code, start=token.start, end=token.end)
        elif token.value_type is ValueType.STRING:
            return String(token.text)
        return self.read_number(token)

    def read_number(self, token):
        """Parses a NUMBER token as a Float if it contains '.', else as an Integer."""
        try:
            if "." in token.text:
                value = float(token.text)
                if math.isinf(value):
                    raise OverflowError(token.text)
                return Float(value)
            return Integer(int(token.text))
        except (ValueError, OverflowError):
            raise MalformedNumber(token.text, source=self.code, start=token.start, end=token.end) from None

    def read_list(self, open_paren, depth):
        if depth > self.max_depth:
            raise NestingTooDeep(self.max_depth, source=self.code, start=open_paren.start, end=open_paren.end)

        items = []
        while True:
            token = self.tokenizer.next_token()
            if token.kind is TokenKind.RIGHT_PAREN:
                return List(items)
            items.append(self.read_form(token, depth))
