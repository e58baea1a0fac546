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


from io import BytesIO
from typing import Tuple

import pytest

from srcxref.anchors import Anchor, AnchorIndex
from srcxref.buffer import Buffer
from srcxref.context import LineState, RenderContext
from srcxref.errors import StateError
from srcxref.lines import LineEmitter
from srcxref.markup import Vocabulary
from srcxref.navigation import Navigation
from srcxref.settings import HeaderPosition, Options

NAV = (
    "[&lt;][&gt;][^][v]"
    "<a href='#TOP'>[top]</a><a href='#BOTTOM'>[bottom]</a>"
    "<a href='../mains.html'>[index]</a><a href='../help.html'>[help]</a>"
)
GUIDE = f"<em class='comment'>/* {NAV} */</em>"


def make(options: Options) -> Tuple[LineEmitter, BytesIO]:
    vocabulary = Vocabulary()
    out = BytesIO()
    emitter = LineEmitter(
        options,
        vocabulary,
        Navigation(vocabulary, icons=False),
        AnchorIndex([Anchor(10, "D", "main")]),
        out,
    )
    return emitter, out


def emit(
    emitter: LineEmitter, context: RenderContext, lineno: int, text: str
) -> None:
    buffer = Buffer()
    emitter.begin_of_line(context, lineno)
    buffer.append(text)
    emitter.end_of_line(context, buffer, lineno)
    assert buffer.empty()


def test_guide_before(context: RenderContext) -> None:
    emitter, out = make(Options(header_position=HeaderPosition.BEFORE))

    emitter.begin_of_line(context, 10)
    # The guide is out before any content is assembled.
    assert out.getvalue().decode() == GUIDE + "\n"

    buffer = Buffer()
    buffer.append("int main;")
    emitter.end_of_line(context, buffer, 10)

    assert out.getvalue().decode() == (
        GUIDE + "\n" + "<a id='L10' name='L10'></a>int main;\n"
    )


def test_guide_right(context: RenderContext) -> None:
    emitter, out = make(Options(header_position=HeaderPosition.RIGHT))

    emit(emitter, context, 10, "int main;")

    assert out.getvalue().decode() == (
        "<a id='L10' name='L10'></a>int main;    " + GUIDE + "\n"
    )


def test_guide_after(context: RenderContext) -> None:
    emitter, out = make(Options(header_position=HeaderPosition.AFTER))

    emit(emitter, context, 10, "int main;")

    assert out.getvalue().decode() == (
        "<a id='L10' name='L10'></a>int main;\n" + GUIDE + "\n"
    )


def test_no_guide(context: RenderContext) -> None:
    emitter, out = make(Options(header_position=HeaderPosition.NONE))

    emit(emitter, context, 10, "int main;")

    assert out.getvalue().decode() == (
        "<a id='L10' name='L10'></a>int main;\n"
    )
    assert context.guide is None


def test_no_guide_off_definition_lines(context: RenderContext) -> None:
    emitter, out = make(Options(header_position=HeaderPosition.BEFORE))

    emit(emitter, context, 9, "")
    emit(emitter, context, 11, "}")

    assert out.getvalue().decode() == (
        "<a id='L9' name='L9'></a>\n<a id='L11' name='L11'></a>}\n"
    )


def test_line_numbers_and_indent(context: RenderContext) -> None:
    emitter, out = make(
        Options(header_position=HeaderPosition.AFTER, line_numbers=True)
    )

    emit(emitter, context, 10, "x")

    assert out.getvalue().decode() == (
        "<a id='L10' name='L10'></a>  10 x\n" + "     " + GUIDE + "\n"
    )


def test_position_in_guide(context: RenderContext) -> None:
    emitter, _ = make(
        Options(header_position=HeaderPosition.RIGHT, show_position=True)
    )

    guide = emitter.generate_guide(context, 10)

    assert guide.startswith("    <em class='comment'>/* ")
    assert guide.endswith(
        "&nbsp;<em class='position'>[+10 foo.c]</em> */</em>"
    )


def test_warned_line(context: RenderContext) -> None:
    emitter, out = make(Options())

    emitter.begin_of_line(context, 3)
    context.warned = True
    buffer = Buffer()
    buffer.append("bad")
    emitter.end_of_line(context, buffer, 3)
    emit(emitter, context, 4, "good")

    assert out.getvalue().decode() == (
        "<a id='L3' name='L3'></a><span class='curline'>bad</span>\n"
        "<a id='L4' name='L4'></a>good\n"
    )
    assert not context.warned
    assert context.last_lineno == 4
    assert context.state is LineState.AWAITING_LINE


def test_end_without_begin(context: RenderContext) -> None:
    emitter, _ = make(Options())

    with pytest.raises(StateError):
        emitter.end_of_line(context, Buffer(), 1)


def test_begin_twice(context: RenderContext) -> None:
    emitter, _ = make(Options())

    emitter.begin_of_line(context, 1)
    with pytest.raises(StateError):
        emitter.begin_of_line(context, 2)
