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


import pytest

from srcxref.markup import Pages, Vocabulary
from srcxref.settings import SettingsError


def test_overrides() -> None:
    vocabulary = Vocabulary.from_mapping(
        {"suffix": "xhtml", "anchor_labels": list("abcdefgh")}
    )

    assert vocabulary.suffix == "xhtml"
    assert vocabulary.anchor_labels == tuple("abcdefgh")
    assert vocabulary.hr == "<hr />"


@pytest.mark.parametrize(
    "overrides",
    [
        {"nosuch": "x"},
        {"hr": 1},
        {"anchor_labels": ["a", "b"]},
        {"anchor_labels": "abcdefgh"},
    ],
)
def test_rejected_overrides(overrides: dict) -> None:
    with pytest.raises(SettingsError):
        Vocabulary.from_mapping(overrides)


def test_quote(vocabulary: Vocabulary) -> None:
    assert vocabulary.quote("<") == "&lt;"
    assert vocabulary.quote("a") is None
    assert vocabulary.quote_string("a<b>&c") == "a&lt;b&gt;&amp;c"
    assert vocabulary.quote_string("plain text") == "plain text"


def test_href_begin(vocabulary: Vocabulary) -> None:
    assert vocabulary.href_begin("../S", "F3", "html", "42") == (
        "<a href='../S/F3.html#L42'>"
    )
    assert vocabulary.href_begin(None, None, None, "TOP") == (
        "<a href='#TOP'>"
    )
    assert vocabulary.href_begin(None, "F1", "html", None, "it's") == (
        "<a href='F1.html' title='it&#39;s'>"
    )


def test_anchors_and_images(vocabulary: Vocabulary) -> None:
    assert vocabulary.name_number(7) == "<a id='L7' name='L7'></a>"
    assert vocabulary.name_string("TOP") == "<a id='TOP' name='TOP'></a>"
    assert vocabulary.image(False, "left", "previous") == (
        "<img class='icon' src='icons/left.png' alt='[previous]' />"
    )


def test_page_head(vocabulary: Vocabulary) -> None:
    pages = Pages()

    head = pages.begin(vocabulary, "a<b>.c", True)

    assert "<title>a&lt;b&gt;.c</title>" in head
    assert "href='../style.css'" in head
    assert "content='srcxref'" in head
    assert pages.end() == "</html>"
