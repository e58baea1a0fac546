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
Command line interface to srcxref.
"""

import argparse
import logging
import sys
from pathlib import Path, PurePosixPath

from .errors import RenderError
from .facts import Facts
from .markup import Vocabulary
from .page import PageRenderer
from .paths import strip_dot_slash
from .performance import measure
from .resolver import SOURCES
from .settings import Settings, SettingsError
from .tokenizers import Registry


def main() -> None:
    """
    Entry-point for the command line tool.
    """
    logging.basicConfig()
    logging.getLogger().setLevel(logging.INFO)

    parser = argparse.ArgumentParser(
        description="Render source files into cross-referenced hypertext."
    )

    parser.add_argument(
        "--output", help="The directory to write pages to."
    )
    parser.add_argument(
        "--facts",
        help="JSON file holding the tags, anchors and inclusions to link.",
    )
    parser.add_argument(
        "--not-source",
        action="store_true",
        help="Copy the files verbatim instead of tokenizing them.",
    )
    parser.add_argument(
        "--dump-anchors",
        action="store_true",
        help="Print the anchors of each file instead of rendering it.",
    )
    parser.add_argument(
        "sources",
        nargs="+",
        metavar="SOURCE",
        help="Source file, relative to the current directory.",
    )

    args = parser.parse_args()

    try:
        settings = Settings(Path.cwd())
    except SettingsError as error:
        logging.info("%s; using default settings", error)
        settings = Settings(Path.cwd(), {})

    try:
        _run(args, settings)
    except (RenderError, SettingsError, OSError) as error:
        logging.critical("%s", error)
        sys.exit(1)


def _run(args: argparse.Namespace, settings: Settings) -> None:
    options = settings.options
    vocabulary = Vocabulary.from_mapping(settings.markup)

    if args.facts is None:
        facts = Facts.empty()
    else:
        with measure("Loaded facts (%.4f s)", level=logging.INFO):
            facts = Facts.load(Path(args.facts))

    sources = [
        strip_dot_slash(PurePosixPath(s).as_posix()) for s in args.sources
    ]

    if args.dump_anchors:
        for path in sources:
            logging.info("anchors of `%s`", path)
            facts.anchors_for(path).dump()
        return

    if args.output is None:
        output_root = settings.output

        if output_root is None:
            logging.critical(
                "Output path is required. "
                "Either define `tool.srcxref.output` in `pyproject.toml` "
                "or use `--output foo/bar` on the command line."
            )
            sys.exit(1)
    else:
        output_root = Path(args.output)

    with measure("Loaded tokenizers (%.4f s)", level=logging.INFO):
        registry = Registry.discover()

    renderer = PageRenderer(
        options,
        vocabulary,
        facts.tags,
        facts.includes,
        facts.paths,
        registry,
        root=Path.cwd(),
    )

    suffix = vocabulary.suffix
    if options.compress:
        suffix += ".gz"

    with measure("Rendered files (%.4f s)", level=logging.INFO):
        for path in sources:
            file_id = facts.paths.path_to_id(path)
            destination = output_root / SOURCES / f"{file_id}.{suffix}"
            context = renderer.render_file(
                path, destination, facts.anchors_for(path), args.not_source
            )
            logging.debug(
                "wrote %d lines of `%s` to %s",
                context.last_lineno,
                path,
                destination,
            )
