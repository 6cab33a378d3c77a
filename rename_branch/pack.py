# pack.py -- The empty pack sent along with ref updates
# Copyright (C) 2026 The git-rename-remote-branch authors
#
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later
# This program is dual-licensed under the Apache License, Version 2.0 and the
# GNU General Public License as published by the Free Software Foundation;
# version 2.0 or (at your option) any later version. You can redistribute it
# and/or modify it under the terms of either of these two licenses.
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# You should have received a copy of the licenses; if not, see
# <http://www.gnu.org/licenses/> for a copy of the GNU General Public License
# and <http://www.apache.org/licenses/LICENSE-2.0> for a copy of the Apache
# License, Version 2.0.
#

"""Pack file construction.

receive-pack expects a pack after the update commands unless every
command is a delete. Renaming only moves an existing object to a new
name, so the pack it gets has no objects in it: a 12 byte header followed
by the SHA-1 of that header.
"""

__all__ = [
    "EMPTY_PACK",
    "PACK_VERSION",
    "empty_pack",
    "pack_header_chunks",
]

import struct
from collections.abc import Iterator
from hashlib import sha1

PACK_VERSION = 2


def pack_header_chunks(num_objects: int) -> Iterator[bytes]:
    """Yield chunks for a pack header."""
    yield b"PACK"  # Pack header
    yield struct.pack(b">L", PACK_VERSION)  # Pack version
    yield struct.pack(b">L", num_objects)  # Number of objects in pack


def _build_empty_pack() -> bytes:
    header = b"".join(pack_header_chunks(0))
    return header + sha1(header).digest()


EMPTY_PACK = _build_empty_pack()


def empty_pack() -> bytes:
    """Return a valid pack file containing no objects."""
    return EMPTY_PACK
