# test_pack.py -- Tests for the empty pack
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

"""Tests for rename_branch.pack."""

import struct
from hashlib import sha1

from rename_branch.pack import EMPTY_PACK, empty_pack, pack_header_chunks

from . import TestCase


class PackHeaderTests(TestCase):
    def test_header(self) -> None:
        self.assertEqual(
            b"PACK\x00\x00\x00\x02\x00\x00\x00\x2a", b"".join(pack_header_chunks(42))
        )


class EmptyPackTests(TestCase):
    def test_length(self) -> None:
        self.assertEqual(32, len(empty_pack()))

    def test_layout(self) -> None:
        pack = empty_pack()
        self.assertEqual(b"PACK", pack[:4])
        self.assertEqual((2, 0), struct.unpack(">LL", pack[4:12]))
        self.assertEqual(sha1(pack[:12]).digest(), pack[12:])

    def test_constant(self) -> None:
        self.assertIs(EMPTY_PACK, empty_pack())
        self.assertEqual(empty_pack(), empty_pack())

    def test_known_value(self) -> None:
        self.assertEqual(
            "5041434b0000000200000000029d08823bd8a8eab510ad6ac75c823cfd3ed31e",
            empty_pack().hex(),
        )
