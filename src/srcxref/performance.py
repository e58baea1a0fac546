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
Timing measurement utilities.
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator


@contextmanager
def measure(
    message: str, *args: object, level: int = logging.DEBUG
) -> Iterator[None]:
    """
    Log how long a block took. The elapsed seconds are passed to `message`
    after `args`.
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        logging.log(level, message, *args, time.perf_counter() - start)
