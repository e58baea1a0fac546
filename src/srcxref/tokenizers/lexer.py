# Copyright (C) 2025 The srcxref Authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


"""
Tokenizers built on pygments lexers.
"""

import re
from typing import BinaryIO, Iterable, Iterator, List, Tuple

from pygments.lexers import get_lexer_by_name
from pygments.token import Comment, Keyword, Name, Punctuation, _TokenType
from typing_extensions import override

from ..buffer import decode, encode
from ..tags import Namespace, TagKind
from . import Tokenizer

Line = List[Tuple[_TokenType, str]]

IDENTIFIER = re.compile(r"(?<!\w)[^\W\d]\w*")


def split_lines(tokens: Iterable[Tuple[_TokenType, str]]) -> Iterator[Line]:
    """
    Regroup a token stream into physical lines. Tokens spanning several
    lines are cut at the line breaks, which are dropped.
    """
    line: Line = []
    for ttype, value in tokens:
        for index, part in enumerate(value.split("\n")):
            if index:
                yield line
                line = []
            if part:
                line.append((ttype, part))
    if line:
        yield line


class LexerTokenizer(Tokenizer):
    """
    Renders the tokens of a pygments lexer, one physical line per step.

    Keywords become reserved words, comments are wrapped (and closed) on
    every line they cover, and identifiers are looked up in the anchor
    index of the file.
    """

    lexer_name: str = "text"

    _lines: Iterator[Line]
    _lineno: int
    _depth: int

    @override
    def initialize(self, stream: BinaryIO) -> None:
        """
        Lex the whole of `stream`.
        """
        text = decode(stream.read())

        lexer = get_lexer_by_name(
            self.lexer_name,
            stripnl=False,
            ensurenl=True,
            tabsize=self.renderer.options.tabs,
        )

        if text:
            self._lines = split_lines(lexer.get_tokens(text))
        else:
            self._lines = iter(())

        self._lineno = 0
        self._depth = 0

    @override
    def step(self) -> bool:
        """
        Render one line.
        """
        try:
            tokens = next(self._lines)
        except StopIteration:
            return False

        self._lineno += 1
        renderer = self.renderer
        renderer.begin_of_line(self._lineno)
        self.line(tokens)
        renderer.end_of_line(self._lineno)
        return True

    @property
    def lineno(self) -> int:
        """
        Number of the line being rendered.
        """
        return self._lineno

    def line(self, tokens: Line) -> None:
        """
        Render the tokens of the current line.
        """
        for ttype, value in tokens:
            self.token(ttype, value)

    def token(self, ttype: _TokenType, value: str) -> None:
        """
        Render a single token.
        """
        renderer = self.renderer
        if ttype in Keyword:
            renderer.put_reserved_word(value)
        elif ttype in Comment:
            renderer.put_comment(value)
        elif ttype in Name:
            self.put_names(value)
        elif ttype in Punctuation:
            self.put_punctuation(value)
        else:
            renderer.put_string(value)

    def put_names(self, text: str) -> None:
        """
        Render `text`, resolving every identifier in it.
        """
        renderer = self.renderer
        position = 0
        for match in IDENTIFIER.finditer(text):
            renderer.put_string(text[position : match.start()])
            self.put_symbol(match.group())
            position = match.end()
        renderer.put_string(text[position:])

    def put_symbol(self, name: str) -> None:
        """
        Render an identifier occurring on the current line.
        """
        renderer = self.renderer
        anchor = renderer.anchors.get(name, self._lineno)

        if anchor is not None:
            kind = TagKind.from_anchor_type(anchor.type)
            renderer.put_anchor(name, kind, self._lineno)
        elif renderer.tags.is_empty(Namespace.REFERENCES):
            raw = encode(name)
            renderer.put_anchor_force(raw, len(raw), self._lineno)
        else:
            renderer.put_string(name)

    def put_punctuation(self, text: str) -> None:
        """
        Render punctuation, keeping track of brace nesting.
        """
        renderer = self.renderer
        for c in text:
            if c == "{":
                self._depth += 1
                renderer.put_brace(c)
            elif c == "}":
                if self._depth:
                    self._depth -= 1
                else:
                    renderer.missing_left("{", self._lineno)
                renderer.put_brace(c)
            else:
                renderer.put_char(c)
