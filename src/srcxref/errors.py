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
Exceptions raised while rendering.
"""


class RenderError(Exception):
    """
    Unrecoverable problem encountered while rendering a file.
    """


class RecordError(RenderError):
    """
    A record handed over by an external collaborator is malformed.
    """

    record: bytes

    def __init__(self, message: str, record: bytes) -> None:
        super().__init__(f"{message}: {record!r}")
        self.record = record


class StateError(RenderError):
    """
    The line emission state machine was driven out of order.
    """
