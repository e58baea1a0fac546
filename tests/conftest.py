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
from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple

import pytest

from srcxref.anchors import Anchor, AnchorIndex
from srcxref.context import RenderContext
from srcxref.diagnostics import CollectingSink
from srcxref.includes import IncludeIndex
from srcxref.lines import LineEmitter
from srcxref.markup import Vocabulary
from srcxref.navigation import Navigation
from srcxref.page import PageRenderer
from srcxref.paths import PathMap
from srcxref.render import Renderer
from srcxref.settings import Options, Settings
from srcxref.tags import TagCache


@pytest.fixture
def settings() -> Settings:
    return Settings(Path("."), {})


@pytest.fixture
def options(settings: Settings) -> Options:
    return settings.options


@pytest.fixture
def vocabulary() -> Vocabulary:
    return Vocabulary()


@pytest.fixture
def paths() -> PathMap:
    return PathMap({"./bar.c": "F3", "foo.c": "F1", "inc/foo.h": "F2"})


@pytest.fixture
def tags(paths: PathMap) -> TagCache:
    return TagCache(paths)


@pytest.fixture
def warnings() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def context() -> RenderContext:
    return RenderContext("foo.c")


MakeRenderer = Callable[..., Tuple[Renderer, BytesIO]]


@pytest.fixture
def make_renderer(
    vocabulary: Vocabulary,
    tags: TagCache,
    paths: PathMap,
    warnings: CollectingSink,
) -> MakeRenderer:
    def make(
        options: Optional[Options] = None,
        anchors: Iterable[Anchor] = (),
        includes: Optional[IncludeIndex] = None,
        path: str = "foo.c",
    ) -> Tuple[Renderer, BytesIO]:
        if options is None:
            options = Options()
        out = BytesIO()
        index = AnchorIndex(anchors)
        lines = LineEmitter(
            options,
            vocabulary,
            Navigation(vocabulary, options.icons),
            index,
            out,
        )
        renderer = Renderer(
            RenderContext(path),
            options,
            vocabulary,
            tags,
            index,
            includes if includes is not None else IncludeIndex(),
            paths,
            warnings,
            lines,
        )
        return renderer, out

    return make


RenderPage = Callable[..., str]


@pytest.fixture
def render_page(
    vocabulary: Vocabulary,
    tags: TagCache,
    paths: PathMap,
    warnings: CollectingSink,
) -> RenderPage:
    def render(
        source: str,
        path: str = "foo.c",
        options: Optional[Options] = None,
        anchors: Iterable[Anchor] = (),
        includes: Optional[IncludeIndex] = None,
        not_source: bool = False,
    ) -> str:
        renderer = PageRenderer(
            options if options is not None else Options(),
            vocabulary,
            tags,
            includes if includes is not None else IncludeIndex(),
            paths,
            warnings=warnings,
        )
        out = BytesIO()
        renderer.render(
            path,
            BytesIO(source.encode("utf-8")),
            out,
            AnchorIndex(anchors),
            not_source,
        )
        return out.getvalue().decode("utf-8")

    return render
