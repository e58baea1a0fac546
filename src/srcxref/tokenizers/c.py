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
C, C++ and yacc.
"""

import re
from pathlib import PurePosixPath
from typing import FrozenSet, Optional

from pygments.token import Comment, Text, _TokenType
from typing_extensions import override

from .lexer import Line, LexerTokenizer

DIRECTIVE = re.compile(r"(\s*)([A-Za-z_]\w*)")

C_DIRECTIVES: FrozenSet[str] = frozenset(
    {
        "assert",
        "define",
        "elif",
        "else",
        "endif",
        "error",
        "ident",
        "if",
        "ifdef",
        "ifndef",
        "import",
        "include",
        "include_next",
        "line",
        "pragma",
        "sccs",
        "unassert",
        "undef",
        "warning",
    }
)

YACC_DIRECTIVE = re.compile(r"%(?:[%{}]|[A-Za-z_][\w-]*)")

YACC_DIRECTIVES: FrozenSet[str] = frozenset(
    {
        "%%",
        "%{",
        "%}",
        "%code",
        "%debug",
        "%define",
        "%defines",
        "%destructor",
        "%error-verbose",
        "%expect",
        "%expect-rr",
        "%file-prefix",
        "%glr-parser",
        "%initial-action",
        "%left",
        "%lex-param",
        "%locations",
        "%name-prefix",
        "%no-lines",
        "%nonassoc",
        "%output",
        "%parse-param",
        "%prec",
        "%precedence",
        "%printer",
        "%pure-parser",
        "%pure_parser",
        "%require",
        "%right",
        "%skeleton",
        "%start",
        "%token",
        "%token-table",
        "%type",
        "%union",
        "%verbose",
        "%yacc",
    }
)


class CTokenizer(LexerTokenizer):
    """
    C source. Preprocessor directives are rendered as macros and the
    targets of `#include` link to the included file.
    """

    lexer_name = "c"
    directives: FrozenSet[str] = C_DIRECTIVES

    _line_start: bool = True
    _sharp: Optional[str] = None

    @override
    def line(self, tokens: Line) -> None:
        self._line_start = True
        self._sharp = None

        for ttype, value in tokens:
            self.token(ttype, value)
            if value.strip():
                self._line_start = False

        self._flush_sharp()

    @override
    def token(self, ttype: _TokenType, value: str) -> None:
        if ttype in Comment.PreprocFile:
            self._flush_sharp()
            self.put_include(value)
        elif ttype in Comment.Preproc:
            self.put_preprocessor(value)
        elif self._sharp is not None and ttype in Text and not value.strip():
            self._sharp += value
        else:
            self._flush_sharp()
            super().token(ttype, value)

    def _flush_sharp(self) -> None:
        if self._sharp is not None:
            self.renderer.put_string(self._sharp)
            self._sharp = None

    def put_preprocessor(self, value: str) -> None:
        """
        Render part of a preprocessor line.
        """
        renderer = self.renderer

        if self._sharp is None:
            stripped = value.lstrip()
            if not (self._line_start and stripped.startswith("#")):
                self.put_names(value)
                return
            renderer.put_string(value[: len(value) - len(stripped)])
            self._sharp = "#"
            value = stripped[1:]

        if not value.strip():
            self._sharp += value
            return

        match = DIRECTIVE.match(value)
        if match is None:
            self._flush_sharp()
            self.put_names(value)
            return

        word = self._sharp + match.group()
        self._sharp = None

        if match.group(2) in self.directives:
            renderer.put_macro(word)
        else:
            renderer.unknown_preprocessing_directive(word, self.lineno)
            renderer.put_string(word)

        self.put_names(value[match.end() :])

    def put_include(self, value: str) -> None:
        """
        Render the target of an `#include`, such as `<stdio.h>`.
        """
        renderer = self.renderer

        if len(value) < 2 or value[0] not in "<\"":
            renderer.put_string(value)
            return

        path = value[1:-1]
        inclusion = renderer.includes.get(PurePosixPath(path).name)

        renderer.put_char(value[0])
        if inclusion is None:
            renderer.put_string(path)
        else:
            renderer.put_include_anchor(inclusion, path)
        renderer.put_char(value[-1])


class CppTokenizer(CTokenizer):
    """
    C++ source.
    """

    lexer_name = "cpp"


class YaccTokenizer(CTokenizer):
    """
    Yacc and bison grammars. Lines starting with `%` hold directives;
    everything else is lexed as C.
    """

    @override
    def line(self, tokens: Line) -> None:
        text = "".join(value for _, value in tokens)
        match = YACC_DIRECTIVE.match(text)
        if match is None:
            super().line(tokens)
            return

        renderer = self.renderer
        word = match.group()
        if word in YACC_DIRECTIVES:
            renderer.put_macro(word)
        else:
            renderer.unknown_yacc_directive(word, self.lineno)
            renderer.put_string(word)

        super().line(skip(tokens, match.end()))


def skip(tokens: Line, count: int) -> Line:
    """
    `tokens` without their first `count` characters. A token straddling the
    cut keeps its type.
    """
    rest: Line = []
    for ttype, value in tokens:
        if count >= len(value):
            count -= len(value)
        elif count:
            rest.append((ttype, value[count:]))
            count = 0
        else:
            rest.append((ttype, value))
    return rest
