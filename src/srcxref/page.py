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
Render one file, from the page head to the page foot.
"""

import gzip
import logging
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Dict, Final, Optional

from .anchors import BOTTOM_OF_PAGE, TOP_OF_PAGE, AnchorIndex
from .breadcrumb import fill_anchor
from .buffer import Buffer, decode, put, put_nl
from .context import LineState, RenderContext
from .diagnostics import WarningSink, log_warning
from .errors import StateError
from .includes import IncludeIndex
from .lines import LineEmitter
from .markup import Pages, Vocabulary
from .navigation import Navigation, NavRecord
from .paths import LanguageMap, PathEncoder, strip_dot_slash, url_encode
from .performance import measure
from .render import Renderer
from .resolver import tooltip, upperdir
from .settings import Options
from .tags import DEFINED, INCLUDED, TagStore
from .tokenizers import Registry

INCLUDE_REFERRERS: Final[str] = "J"
"""
Directory holding the "included from several places" pages.
"""


class PageRenderer:
    """
    Turns source files into pages. One instance can render any number of
    files, one after the other.
    """

    options: Final[Options]
    vocabulary: Final[Vocabulary]
    tags: Final[TagStore]
    includes: Final[IncludeIndex]
    paths: Final[PathEncoder]
    registry: Final[Registry]
    languages: Final[LanguageMap]
    warnings: Final[WarningSink]
    navigation: Final[Navigation]
    pages: Final[Pages]
    root: Final[Path]

    _header: Optional[bytes]
    _footer: Optional[bytes]
    _cvs_modules: Dict[str, Optional[str]]

    def __init__(
        self,
        options: Options,
        vocabulary: Vocabulary,
        tags: TagStore,
        includes: IncludeIndex,
        paths: PathEncoder,
        registry: Optional[Registry] = None,
        warnings: WarningSink = log_warning,
        root: Optional[Path] = None,
    ) -> None:
        """
        Create a renderer. `root` is the directory source paths are
        relative to.
        """
        self.options = options
        self.vocabulary = vocabulary
        self.tags = tags
        self.includes = includes
        self.paths = paths
        if registry is None:
            registry = Registry.builtin()
        self.registry = registry
        self.languages = LanguageMap(options.langmap)
        self.warnings = warnings
        self.navigation = Navigation(vocabulary, options.icons)
        self.pages = Pages()
        self.root = root if root is not None else Path.cwd()

        self._header = None
        if options.insert_header is not None:
            self._header = options.insert_header.read_bytes()

        self._footer = None
        if options.insert_footer is not None:
            self._footer = options.insert_footer.read_bytes()

        self._cvs_modules = {}

    def render_file(
        self,
        path: str,
        destination: Path,
        anchors: AnchorIndex,
        not_source: bool = False,
    ) -> RenderContext:
        """
        Render the file at `path` (relative to `root`) into `destination`,
        compressing it if configured to.
        """
        destination.parent.mkdir(parents=True, exist_ok=True)

        with (self.root / path).open("rb") as source:
            if self.options.compress:
                with gzip.open(destination, "wb") as out:
                    return self.render(path, source, out, anchors, not_source)
            else:
                with destination.open("wb") as out:
                    return self.render(path, source, out, anchors, not_source)

    def render(
        self,
        path: str,
        source: BinaryIO,
        out: BinaryIO,
        anchors: AnchorIndex,
        not_source: bool = False,
    ) -> RenderContext:
        """
        Render `source`, known to readers as `path`, into `out`.
        """
        context = RenderContext(path)

        with measure("rendered %s in %.3fs", path):
            self._begin(context, anchors, out)
            if not_source:
                self._verbatim(context, source, out)
            else:
                self._source(context, source, out, anchors)
            self._end(context, anchors, out)

        return context

    def _navigation_comment(
        self, record: NavRecord, lineno: int, path: str
    ) -> str:
        vocabulary = self.vocabulary

        sb = Buffer()
        sb.append(vocabulary.comment_begin)
        sb.append("/* ")
        sb.append(self.navigation.link_format(record))
        if self.options.show_position:
            sb.append(vocabulary.quote_space)
            sb.append(vocabulary.position_begin)
            sb.append(f"[+{lineno} {path}]")
            sb.append(vocabulary.position_end)
        sb.append(" */")
        sb.append(vocabulary.comment_end)
        return sb.text()

    def _begin(
        self, context: RenderContext, anchors: AnchorIndex, out: BinaryIO
    ) -> None:
        vocabulary = self.vocabulary
        path = context.path

        put_nl(out, self.pages.begin(vocabulary, path, True))
        put_nl(out, vocabulary.body_begin)

        if self.options.fixed_guide:
            put(
                out,
                self.navigation.fixed_guide_link_format(
                    anchors.links_for(TOP_OF_PAGE),
                    fill_anchor(vocabulary, self.paths, None, path),
                ),
            )

        if self._header is not None:
            put(out, self._header)

        put(out, vocabulary.name_string("TOP"))
        put(out, vocabulary.header_begin)
        put(
            out,
            fill_anchor(
                vocabulary,
                self.paths,
                f"../mains.{vocabulary.suffix}",
                path,
            ),
        )
        if self.options.cvsweb_url is not None:
            put_nl(out, self.cvs_link(path))
        put_nl(out, vocabulary.header_end)

        put_nl(
            out,
            self._navigation_comment(anchors.links_for(TOP_OF_PAGE), 1, path),
        )
        put_nl(out, vocabulary.hr)

    def _end(
        self, context: RenderContext, anchors: AnchorIndex, out: BinaryIO
    ) -> None:
        vocabulary = self.vocabulary

        put_nl(out, vocabulary.hr)
        put_nl(out, vocabulary.name_string("BOTTOM"))
        put_nl(
            out,
            self._navigation_comment(
                anchors.links_for(BOTTOM_OF_PAGE),
                context.last_lineno,
                context.path,
            ),
        )

        if self._footer is not None:
            put(out, vocabulary.br)
            put(out, self._footer)

        put_nl(out, vocabulary.body_end)
        put_nl(out, self.pages.end())

    def cvs_link(self, path: str) -> str:
        """
        Link to `path` in the version control web interface.
        """
        options = self.options
        vocabulary = self.vocabulary
        assert options.cvsweb_url is not None

        url = options.cvsweb_url
        module = None
        if options.use_cvs_module:
            module = self.cvs_module(path)

        if module is None:
            url += url_encode(path)
        else:
            url += url_encode(module)
            url += "/"
            url += url_encode(PurePosixPath(path).name)

        if options.cvsweb_cvsroot is not None:
            url += f"?cvsroot={options.cvsweb_cvsroot}"

        return (
            vocabulary.quote_space
            + vocabulary.href_begin_simple(url)
            + vocabulary.cvslink_begin
            + "[CVS]"
            + vocabulary.cvslink_end
            + vocabulary.href_end()
        )

    def cvs_module(self, path: str) -> Optional[str]:
        """
        Repository path of the directory holding `path`, read from its
        `CVS/Repository` file.
        """
        directory = str(PurePosixPath(path).parent)

        try:
            return self._cvs_modules[directory]
        except KeyError:
            pass

        repository = self.root / directory / "CVS" / "Repository"
        module: Optional[str]
        try:
            with repository.open("rb") as f:
                module = decode(f.readline()).rstrip("\r\n") or None
        except FileNotFoundError:
            logging.debug("no CVS module for `%s`", directory)
            module = None

        self._cvs_modules[directory] = module
        return module

    def _verbatim(
        self, context: RenderContext, source: BinaryIO, out: BinaryIO
    ) -> None:
        vocabulary = self.vocabulary

        lines = decode(source.read()).split("\n")
        if lines[-1] == "":
            lines.pop()

        put_nl(out, vocabulary.verbatim_begin)
        for lineno, line in enumerate(lines, start=1):
            text = line.rstrip("\r").expandtabs(self.options.tabs)
            put(out, vocabulary.name_number(lineno))
            put_nl(out, vocabulary.quote_string(text))
            context.last_lineno = lineno
        put_nl(out, vocabulary.verbatim_end)

    def _included_from(self, path: str, out: BinaryIO) -> None:
        vocabulary = self.vocabulary

        inclusion = self.includes.included(PurePosixPath(path).name)
        if inclusion is None:
            return

        if inclusion.ref_count > 1:
            link = vocabulary.href_begin(
                upperdir(INCLUDE_REFERRERS),
                str(inclusion.id),
                vocabulary.suffix,
                None,
                tooltip(INCLUDED, -1, str(inclusion.ref_count)),
            )
        else:
            lineno, filename = inclusion.referrer(0)
            filename = strip_dot_slash(filename)
            link = vocabulary.href_begin(
                None,
                self.paths.path_to_id(filename),
                vocabulary.suffix,
                lineno,
                tooltip(INCLUDED, int(lineno), filename),
            )

        put(out, vocabulary.header_begin)
        put(out, link)
        put(out, vocabulary.title_included_from)
        put(out, vocabulary.href_end())
        put_nl(out, vocabulary.header_end)
        put_nl(out, vocabulary.hr)

    def _definitions_index(self, anchors: AnchorIndex, out: BinaryIO) -> None:
        vocabulary = self.vocabulary

        index = Buffer()
        for anchor in anchors.iterate_definitions():
            index.append(vocabulary.item_begin)
            index.append(
                vocabulary.href_begin(
                    None,
                    None,
                    None,
                    str(anchor.lineno),
                    tooltip(DEFINED, anchor.lineno, None),
                )
            )
            index.append(vocabulary.quote_string(anchor.tag))
            index.append(vocabulary.href_end())
            index.append(vocabulary.item_end)
            index.push_back(0x0A)

        if index.empty():
            return

        put(out, vocabulary.header_begin)
        put(out, vocabulary.title_define_index)
        put_nl(out, vocabulary.header_end)
        put_nl(out, vocabulary.definition_index_note)
        put_nl(out, vocabulary.list_begin)
        put(out, index.value())
        put_nl(out, vocabulary.list_end)
        put_nl(out, vocabulary.hr)

    def _source(
        self,
        context: RenderContext,
        source: BinaryIO,
        out: BinaryIO,
        anchors: AnchorIndex,
    ) -> None:
        vocabulary = self.vocabulary
        path = context.path

        self._included_from(path, out)
        self._definitions_index(anchors, out)

        entry = self.registry.get(self.languages.language_of(path))
        logging.debug("tokenizing %s as `%s`", path, entry.tag)

        lines = LineEmitter(
            self.options, vocabulary, self.navigation, anchors, out
        )
        renderer = Renderer(
            context,
            self.options,
            vocabulary,
            self.tags,
            anchors,
            self.includes,
            self.paths,
            self.warnings,
            lines,
        )

        put_nl(out, vocabulary.verbatim_begin)

        tokenizer = entry.factory(renderer)
        tokenizer.initialize(source)
        while tokenizer.step():
            pass

        if context.state is not LineState.AWAITING_LINE:
            raise StateError(
                f"tokenizer `{entry.tag}` left line {context.lineno} of "
                f"`{path}` unfinished"
            )

        put_nl(out, vocabulary.verbatim_end)
