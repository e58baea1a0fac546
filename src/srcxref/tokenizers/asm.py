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
Assembly.
"""

from pygments.token import Name, Punctuation, _TokenType
from typing_extensions import override

from .lexer import LexerTokenizer


class AsmTokenizer(LexerTokenizer):
    """
    Assembly in GNU as syntax. Registers and directives are not looked up,
    and braces carry no nesting.
    """

    lexer_name = "gas"

    @override
    def token(self, ttype: _TokenType, value: str) -> None:
        if ttype in Name.Variable or ttype in Name.Attribute:
            self.renderer.put_string(value)
        elif ttype in Punctuation:
            self.renderer.put_string(value)
        else:
            super().token(ttype, value)
