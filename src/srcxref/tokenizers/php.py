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
PHP.
"""

from pygments.token import Comment, Name, Other, _TokenType
from typing_extensions import override

from .lexer import LexerTokenizer


class PhpTokenizer(LexerTokenizer):
    """
    PHP source. Text outside of `<?php ... ?>`, and the markers themselves,
    are copied as they are. A variable renders as `$` followed by its
    resolved name.
    """

    lexer_name = "php"

    @override
    def token(self, ttype: _TokenType, value: str) -> None:
        if ttype in Other or ttype in Comment.Preproc:
            self.renderer.put_string(value)
        elif ttype in Name.Variable and value.startswith("$"):
            self.renderer.put_char("$")
            self.put_names(value[1:])
        else:
            super().token(ttype, value)
