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
Output primitives handed to tokenizers. Everything a tokenizer writes for
the current line accumulates in one `Buffer` until the line ends.
"""

from typing import Final

from .anchors import AnchorIndex
from .buffer import Buffer
from .context import RenderContext
from .diagnostics import RenderWarning, WarningSink
from .includes import IncludeIndex, Inclusion
from .lines import LineEmitter
from .markup import Vocabulary
from .paths import PathEncoder
from .resolver import Resolver, upperdir
from .settings import Options
from .tags import TagKind, TagStore

INCLUDES: Final[str] = "I"
"""
Directory holding the "several files carry this name" include pages.
"""


class Renderer:
    """
    Rendering state and output primitives for one file.
    """

    options: Final[Options]
    vocabulary: Final[Vocabulary]
    tags: Final[TagStore]
    anchors: Final[AnchorIndex]
    includes: Final[IncludeIndex]
    paths: Final[PathEncoder]
    warnings: Final[WarningSink]
    resolver: Final[Resolver]
    lines: Final[LineEmitter]
    context: Final[RenderContext]
    buffer: Final[Buffer]

    def __init__(
        self,
        context: RenderContext,
        options: Options,
        vocabulary: Vocabulary,
        tags: TagStore,
        anchors: AnchorIndex,
        includes: IncludeIndex,
        paths: PathEncoder,
        warnings: WarningSink,
        lines: LineEmitter,
    ) -> None:
        self.context = context
        self.options = options
        self.vocabulary = vocabulary
        self.tags = tags
        self.anchors = anchors
        self.includes = includes
        self.paths = paths
        self.warnings = warnings
        self.lines = lines
        self.resolver = Resolver(options, vocabulary, tags, warnings)
        self.buffer = Buffer()

    #
    # Line control:
    #

    def begin_of_line(self, lineno: int) -> None:
        """
        Start line `lineno`.
        """
        self.lines.begin_of_line(self.context, lineno)

    def end_of_line(self, lineno: int) -> None:
        """
        Finish line `lineno` and write it out.
        """
        self.lines.end_of_line(self.context, self.buffer, lineno)

    #
    # Raw and escaped text:
    #

    def echoc(self, c: str) -> None:
        """
        Put a character as it is. Use this for markup characters.
        """
        self.buffer.append(c)

    def echos(self, s: str) -> None:
        """
        Put a string as it is. Use this for markup.
        """
        self.buffer.append(s)

    def put_char(self, c: str) -> None:
        """
        Put a character, quoting it if necessary.
        """
        quoted = self.vocabulary.quote(c)
        if quoted is None:
            self.echoc(c)
        else:
            self.echos(quoted)

    def put_string(self, s: str) -> None:
        """
        Put a string, quoting characters as necessary.
        """
        for c in s:
            self.put_char(c)

    def put_reserved_word(self, word: str) -> None:
        """
        Put a reserved word (`if`, `while`, ...).
        """
        self.echos(self.vocabulary.reserved_begin)
        self.put_string(word)
        self.echos(self.vocabulary.reserved_end)

    def put_macro(self, word: str) -> None:
        """
        Put a preprocessor directive (`#define`, `#undef`, ...).
        """
        self.echos(self.vocabulary.sharp_begin)
        self.put_string(word)
        self.echos(self.vocabulary.sharp_end)

    def put_brace(self, text: str) -> None:
        """
        Put a brace (`{`, `}`).
        """
        self.echos(self.vocabulary.brace_begin)
        self.put_string(text)
        self.echos(self.vocabulary.brace_end)

    def put_comment(self, text: str) -> None:
        """
        Put part of a comment lying on the current line.
        """
        self.echos(self.vocabulary.comment_begin)
        self.put_string(text)
        self.echos(self.vocabulary.comment_end)

    #
    # Hyperlinks:
    #

    def put_anchor(self, name: str, kind: TagKind, lineno: int) -> None:
        """
        Put `name`, linked according to the tag store.
        """
        self.buffer.append(
            self.resolver.resolve(self.context, name, kind, lineno)
        )

    def put_anchor_force(self, name: bytes, length: int, lineno: int) -> None:
        """
        Put the first `length` bytes of `name`, linked to its definition,
        without warning.
        """
        self.buffer.append(
            self.resolver.resolve_forced(self.context, name, length, lineno)
        )

    def put_include_anchor(self, inclusion: Inclusion, path: str) -> None:
        """
        Put `path` linked to the file it includes, or to the list of
        candidates when several files carry the name.
        """
        vocabulary = self.vocabulary
        if inclusion.count == 1:
            self.buffer.append(
                vocabulary.href_begin(
                    None,
                    self.paths.path_to_id(inclusion.files[0]),
                    vocabulary.suffix,
                    None,
                )
            )
        else:
            self.buffer.append(
                vocabulary.href_begin(
                    upperdir(INCLUDES),
                    str(inclusion.id),
                    vocabulary.suffix,
                    None,
                )
            )
        self.put_string(path)
        self.buffer.append(vocabulary.href_end())

    #
    # Diagnostics:
    #

    def _warn(self, message: str, lineno: int) -> None:
        if not self.options.warnings:
            return
        self.warnings(RenderWarning(message, lineno, self.context.path))
        if self.options.colorize_warned_line:
            self.context.warned = True

    def unknown_preprocessing_directive(self, word: str, lineno: int) -> None:
        """
        Report a preprocessing directive nobody has heard of.
        """
        self._warn(
            f"unknown preprocessing directive '{word.strip()}'.", lineno
        )

    def unknown_yacc_directive(self, word: str, lineno: int) -> None:
        """
        Report an unknown yacc directive.
        """
        self._warn(f"unknown yacc directive '{word}'.", lineno)

    def missing_left(self, word: str, lineno: int) -> None:
        """
        Report a closing bracket without an opening one.
        """
        self._warn(f"missing left '{word}'.", lineno)
