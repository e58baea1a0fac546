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
Per-line lifecycle: deciding on a definition guide when a line starts, and
flushing the assembled line with its anchor, warning markers and guide when
it ends.
"""

import logging
from typing import BinaryIO, Final

from .anchors import AnchorIndex
from .buffer import Buffer, put, put_nl
from .context import LineState, RenderContext
from .errors import StateError
from .markup import Vocabulary
from .navigation import Navigation
from .settings import HeaderPosition, Options


class LineEmitter:
    """
    Drives a `RenderContext` through `AWAITING_LINE`, `IN_LINE` and
    `FLUSHING` for every physical line.
    """

    options: Final[Options]
    vocabulary: Final[Vocabulary]
    navigation: Final[Navigation]
    anchors: Final[AnchorIndex]
    out: Final[BinaryIO]

    def __init__(
        self,
        options: Options,
        vocabulary: Vocabulary,
        navigation: Navigation,
        anchors: AnchorIndex,
        out: BinaryIO,
    ) -> None:
        self.options = options
        self.vocabulary = vocabulary
        self.navigation = navigation
        self.anchors = anchors
        self.out = out

    def generate_guide(self, context: RenderContext, lineno: int) -> str:
        """
        Guide comment for the definition on `lineno`.
        """
        options = self.options
        vocabulary = self.vocabulary

        if options.header_position is HeaderPosition.RIGHT:
            indent = 4
        elif options.line_numbers:
            indent = options.number_width + 1
        else:
            indent = 0

        sb = Buffer()
        sb.append(" " * indent)
        sb.append(vocabulary.comment_begin)
        sb.append("/* ")
        sb.append(self.navigation.link_format(self.anchors.links_for(lineno)))
        if options.show_position:
            sb.append(vocabulary.quote_space)
            sb.append(vocabulary.position_begin)
            sb.append(f"[+{lineno} {context.path}]")
            sb.append(vocabulary.position_end)
        sb.append(" */")
        sb.append(vocabulary.comment_end)
        return sb.text()

    def begin_of_line(self, context: RenderContext, lineno: int) -> None:
        """
        Start assembling `lineno`.
        """
        if context.state is not LineState.AWAITING_LINE:
            raise StateError(
                f"line {lineno} of `{context.path}` began while "
                f"{context.state.name}"
            )

        position = self.options.header_position
        if position is not HeaderPosition.NONE:
            if self.anchors.is_definition_line(lineno):
                context.guide = self.generate_guide(context, lineno)
            else:
                context.guide = None

        if context.guide is not None and position is HeaderPosition.BEFORE:
            put_nl(self.out, context.guide)
            context.guide = None

        context.lineno = lineno
        context.state = LineState.IN_LINE

    def end_of_line(
        self, context: RenderContext, buffer: Buffer, lineno: int
    ) -> None:
        """
        Write out `lineno`, as assembled in `buffer`, and clear `buffer`.
        """
        if context.state is not LineState.IN_LINE:
            raise StateError(
                f"line {lineno} of `{context.path}` ended while "
                f"{context.state.name}"
            )

        context.state = LineState.FLUSHING

        options = self.options
        vocabulary = self.vocabulary
        out = self.out

        put(out, vocabulary.name_number(lineno))

        if options.line_numbers:
            prefix = Buffer(options.number_width + 1)
            prefix.append_number(lineno, options.number_width)
            prefix.push_back(0x20)
            put(out, prefix.value())

        if context.warned:
            logging.debug("highlighting line %d of %s", lineno, context.path)
            put(out, vocabulary.warned_line_begin)

        put(out, buffer.value())
        buffer.clear()

        if context.warned:
            put(out, vocabulary.warned_line_end)

        guide = context.guide
        if guide is None:
            put(out, "\n")
        else:
            if options.header_position is HeaderPosition.RIGHT:
                put(out, guide)
            put(out, "\n")
            if options.header_position is HeaderPosition.AFTER:
                put_nl(out, guide)
            context.guide = None

        context.warned = False
        context.last_lineno = lineno
        context.state = LineState.AWAITING_LINE
