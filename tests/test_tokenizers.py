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
from typing import Any, List, Type

import pytest

from srcxref.anchors import Anchor
from srcxref.diagnostics import CollectingSink
from srcxref.includes import IncludeIndex, Inclusion
from srcxref.settings import Options
from srcxref.tags import Namespace, TagCache
from srcxref.tokenizers import Registry, Tokenizer
from srcxref.tokenizers.asm import AsmTokenizer
from srcxref.tokenizers.c import CTokenizer, YaccTokenizer, skip
from srcxref.tokenizers.java import JavaTokenizer
from srcxref.tokenizers.lexer import split_lines
from srcxref.tokenizers.php import PhpTokenizer


def run(
    make_renderer: Any,
    class_: Type[Tokenizer],
    source: str,
    **kwargs: object,
) -> List[str]:
    renderer, out = make_renderer(**kwargs)
    tokenizer = class_(renderer)
    tokenizer.initialize(BytesIO(source.encode("utf-8")))
    while tokenizer.step():
        pass
    return out.getvalue().decode("utf-8").splitlines()


def test_registry_order() -> None:
    registry = Registry.builtin()

    assert [e.tag for e in registry] == [
        "c",
        "yacc",
        "cpp",
        "java",
        "php",
        "asm",
    ]
    assert registry.get("java").factory is JavaTokenizer


@pytest.mark.parametrize("tag", [None, "", "cobol"])
def test_registry_falls_back_to_first(tag: str) -> None:
    registry = Registry.builtin()
    assert registry.get(tag) is registry.default
    assert registry.default.factory is CTokenizer


def test_registry_needs_entries() -> None:
    with pytest.raises(ValueError):
        Registry([])


def test_split_lines_cuts_tokens() -> None:
    tokens = [("a", "x\ny"), ("b", "z\n"), ("c", "\n")]
    assert list(split_lines(tokens)) == [  # type: ignore[arg-type]
        [("a", "x")],
        [("a", "y"), ("b", "z")],
        [],
    ]


def test_reserved_word_and_plain_name(make_renderer: Any) -> None:
    lines = run(make_renderer, CTokenizer, "int x;\n")

    assert lines == [
        "<a id='L1' name='L1'></a><strong class='reserved'>int</strong> x;"
    ]


def test_empty_file(make_renderer: Any) -> None:
    assert run(make_renderer, CTokenizer, "") == []


def test_anchors_resolve(
    make_renderer: Any, tags: TagCache
) -> None:
    tags.put_single(Namespace.DEFINITIONS, "foo", 1, "foo.c")
    tags.put_single(Namespace.REFERENCES, "foo", 2, "foo.c")
    anchors = [Anchor(1, "D", "foo"), Anchor(2, "R", "foo")]

    lines = run(
        make_renderer, CTokenizer, "int foo;\nfoo = bar;\n", anchors=anchors
    )

    assert lines == [
        "<a id='L1' name='L1'></a><strong class='reserved'>int</strong> "
        "<a href='../S/F1.html#L2' title='Referred from 2 in foo.c.'>foo</a>;",
        "<a id='L2' name='L2'></a>"
        "<a href='../S/F1.html#L1' title='Defined at 1 in foo.c.'>foo</a>"
        " = bar;",
    ]


def test_forced_when_no_references(
    make_renderer: Any, tags: TagCache
) -> None:
    tags.put_single(Namespace.DEFINITIONS, "bar", 9, "./bar.c")

    lines = run(make_renderer, CTokenizer, "bar;\n")

    assert lines == [
        "<a id='L1' name='L1'></a>"
        "<a href='../S/F3.html#L9' title='Defined at 9 in bar.c.'>bar</a>;"
    ]


def test_preprocessor(
    make_renderer: Any, warnings: CollectingSink
) -> None:
    includes = IncludeIndex(
        [("stdio.h", Inclusion(1, ("inc/stdio.h",), ("1 foo.c",)))]
    )
    source = "#include <stdio.h>\n#define MAX 10\n#frob x\n"

    lines = run(
        make_renderer,
        CTokenizer,
        source,
        options=Options(warnings=True),
        includes=includes,
    )

    assert lines[0].startswith(
        "<a id='L1' name='L1'></a>"
        "<em class='sharp'>#include</em> &lt;<a href='"
    )
    assert lines[0].endswith(".html'>stdio.h</a>&gt;")
    assert lines[1] == (
        "<a id='L2' name='L2'></a><em class='sharp'>#define</em> MAX 10"
    )
    assert lines[2] == (
        "<a id='L3' name='L3'></a><span class='curline'>#frob x</span>"
    )
    assert [str(w) for w in warnings.warnings] == [
        "unknown preprocessing directive '#frob'. [+3 foo.c]"
    ]


def test_include_with_several_candidates(
    make_renderer: Any,
) -> None:
    includes = IncludeIndex(
        [("util.h", Inclusion(4, ("a/util.h", "b/util.h"), ()))]
    )

    lines = run(
        make_renderer, CTokenizer, '#include "util.h"\n', includes=includes
    )

    assert "&quot;" not in lines[0]
    assert "\"<a href='../I/4.html'>util.h</a>\"" in lines[0]


def test_comments_close_on_every_line(make_renderer: Any) -> None:
    lines = run(make_renderer, CTokenizer, "/* a\n b */\n")

    assert lines == [
        "<a id='L1' name='L1'></a><em class='comment'>/* a</em>",
        "<a id='L2' name='L2'></a><em class='comment'> b */</em>",
    ]


def test_missing_left_brace(
    make_renderer: Any, warnings: CollectingSink
) -> None:
    lines = run(
        make_renderer, CTokenizer, "}\n", options=Options(warnings=True)
    )

    assert lines == [
        "<a id='L1' name='L1'></a>"
        "<span class='curline'><em class='brace'>}</em></span>"
    ]
    assert warnings.warnings[0].message == "missing left '{'."


def test_missing_left_brace_quiet(
    make_renderer: Any, warnings: CollectingSink
) -> None:
    run(make_renderer, CTokenizer, "}\n")
    assert warnings.warnings == []


def test_yacc_directives(
    make_renderer: Any, warnings: CollectingSink
) -> None:
    source = "%token NUM\n%frob\n%%\nexpr: NUM ;\n"

    lines = run(
        make_renderer, YaccTokenizer, source, options=Options(warnings=True)
    )

    assert lines[0] == (
        "<a id='L1' name='L1'></a>"
        "<em class='sharp'>%token</em> NUM"
    )
    assert lines[1] == (
        "<a id='L2' name='L2'></a>"
        "<span class='curline'>%frob</span>"
    )
    assert lines[2] == "<a id='L3' name='L3'></a><em class='sharp'>%%</em>"
    assert len(lines) == 4
    assert [w.message for w in warnings.warnings] == [
        "unknown yacc directive '%frob'."
    ]


def test_yacc_union_block(
    make_renderer: Any, warnings: CollectingSink
) -> None:
    source = "%union {\n  int ival;\n}\n%%\n"

    lines = run(
        make_renderer, YaccTokenizer, source, options=Options(warnings=True)
    )

    assert lines[0] == (
        "<a id='L1' name='L1'></a>"
        "<em class='sharp'>%union</em> <em class='brace'>{</em>"
    )
    assert lines[2] == "<a id='L3' name='L3'></a><em class='brace'>}</em>"
    assert warnings.warnings == []


def test_yacc_directive_comment(make_renderer: Any) -> None:
    lines = run(make_renderer, YaccTokenizer, "%token NUM /* a < b */\n")

    assert lines[0] == (
        "<a id='L1' name='L1'></a>"
        "<em class='sharp'>%token</em> NUM "
        "<em class='comment'>/* a &lt; b */</em>"
    )


def test_skip_cuts_inside_token() -> None:
    tokens = [("a", "%"), ("b", "union"), ("c", " {")]

    assert skip(tokens, 6) == [("c", " {")]  # type: ignore[arg-type]
    assert skip(tokens, 3) == [  # type: ignore[arg-type]
        ("b", "ion"),
        ("c", " {"),
    ]
    assert skip(tokens, 0) == tokens  # type: ignore[arg-type]


def test_java(make_renderer: Any) -> None:
    lines = run(make_renderer, JavaTokenizer, "class A { }\n")

    assert lines[0].startswith(
        "<a id='L1' name='L1'></a><strong class='reserved'>class</strong>"
    )
    assert "<em class='brace'>{</em>" in lines[0]
    assert "<em class='brace'>}</em>" in lines[0]


def test_php_variables(make_renderer: Any, tags: TagCache) -> None:
    tags.put_single(Namespace.DEFINITIONS, "foo", 3, "./bar.c")

    lines = run(
        make_renderer,
        PhpTokenizer,
        "<?php $foo = 1; ?>\n",
        anchors=[Anchor(1, "R", "foo")],
    )

    assert lines == [
        "<a id='L1' name='L1'></a>&lt;?php "
        "$<a href='../S/F3.html#L3' title='Defined at 3 in bar.c.'>foo</a>"
        " = 1; ?&gt;"
    ]


def test_asm(make_renderer: Any) -> None:
    lines = run(make_renderer, AsmTokenizer, "movl %eax, %ebx\n")

    assert lines == ["<a id='L1' name='L1'></a>movl %eax, %ebx"]
