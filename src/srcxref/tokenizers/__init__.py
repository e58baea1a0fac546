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
Tokenizers turn the lines of a source file into markup, one line per step.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    BinaryIO,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
)

from ..loader import load_plugins

if TYPE_CHECKING:
    from ..render import Renderer


class Tokenizer(ABC):
    """
    Reads one source file and writes it through a `Renderer`.
    """

    renderer: "Renderer"

    def __init__(self, renderer: "Renderer") -> None:
        self.renderer = renderer

    @abstractmethod
    def initialize(self, stream: BinaryIO) -> None:
        """
        Prepare to read from `stream`.
        """

    @abstractmethod
    def step(self) -> bool:
        """
        Render the next unit of input. Returns `False` once the input is
        exhausted.
        """


TokenizerFactory = Callable[["Renderer"], Tokenizer]


@dataclass(frozen=True)
class TokenizerEntry:
    """
    A language tag and the tokenizer that handles it.
    """

    tag: str
    factory: TokenizerFactory


class Registry:
    """
    Ordered table of tokenizers. The first entry is the default.
    """

    _entries: List[TokenizerEntry]
    _by_tag: Dict[str, TokenizerEntry]

    def __init__(self, entries: List[TokenizerEntry]) -> None:
        if not entries:
            raise ValueError("a registry needs at least one tokenizer")

        self._entries = list(entries)
        self._by_tag = {}
        for entry in self._entries:
            self._by_tag.setdefault(entry.tag, entry)

    @classmethod
    def builtin(cls) -> "Registry":
        """
        The tokenizers shipped with this package.
        """
        from .asm import AsmTokenizer
        from .c import CppTokenizer, CTokenizer, YaccTokenizer
        from .java import JavaTokenizer
        from .php import PhpTokenizer

        return cls(
            [
                TokenizerEntry("c", CTokenizer),
                TokenizerEntry("yacc", YaccTokenizer),
                TokenizerEntry("cpp", CppTokenizer),
                TokenizerEntry("java", JavaTokenizer),
                TokenizerEntry("php", PhpTokenizer),
                TokenizerEntry("asm", AsmTokenizer),
            ]
        )

    @classmethod
    def discover(cls) -> "Registry":
        """
        Built-in tokenizers followed by those registered by installed
        distributions. Plugins never replace a built-in tag.
        """
        registry = cls.builtin()
        entries = list(registry)

        for name, class_ in load_plugins(Tokenizer):
            logging.debug("found tokenizer plugin `%s`", name)
            entries.append(TokenizerEntry(name, class_))

        return cls(entries)

    def __iter__(self) -> Iterator[TokenizerEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def default(self) -> TokenizerEntry:
        """
        Entry used when no other applies.
        """
        return self._entries[0]

    def get(self, tag: Optional[str]) -> TokenizerEntry:
        """
        Entry for `tag`, or the default when `tag` is unset or unknown.
        """
        if tag is None:
            return self.default

        try:
            return self._by_tag[tag]
        except KeyError:
            logging.debug("no tokenizer for `%s`, using default", tag)
            return self.default
