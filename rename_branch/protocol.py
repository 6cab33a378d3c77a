# protocol.py -- The pkt-line framing of the git smart protocol
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

"""Generic functions for talking the git smart server protocol."""

__all__ = [
    "CAPABILITY_AGENT",
    "CAPABILITY_REPORT_STATUS",
    "FLUSH_PKT",
    "MAX_PKT_LEN",
    "ZERO_SHA",
    "agent_string",
    "capability_agent",
    "extract_capabilities",
    "iter_pkt_lines",
    "pkt_line",
    "pkt_lines",
]

from collections.abc import Iterator
from typing import Optional

import rename_branch

from .errors import DecodingError, EncodingError

ZERO_SHA = b"0" * 40

FLUSH_PKT = b"0000"

# The length prefix is four hex digits and counts itself.
MAX_PKT_LEN = 0xFFFF

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")

CAPABILITY_AGENT = b"agent"
CAPABILITY_REPORT_STATUS = b"report-status"


def agent_string() -> bytes:
    """Return the agent string announced to the remote."""
    version = ".".join(str(part) for part in rename_branch.__version__)
    return f"git-rename-remote-branch/{version}".encode("ascii")


def capability_agent() -> bytes:
    """Return the ``agent=`` capability."""
    return CAPABILITY_AGENT + b"=" + agent_string()


def extract_capabilities(text: bytes) -> tuple[bytes, list[bytes]]:
    """Extract a capabilities list from a string, if present.

    Args:
      text: String to extract from
    Returns: Tuple with text with capabilities removed and list of capabilities
    """
    if b"\0" not in text:
        return text, []
    text, capabilities = text.rstrip().split(b"\0", 1)
    return (text, capabilities.strip().split(b" "))


def pkt_line(data: Optional[bytes], sideband: int = 0) -> bytes:
    """Wrap data in a pkt-line.

    Args:
      data: The data to wrap, as bytes or None. Empty data and None both
        produce a flush-pkt.
      sideband: Optional side-band channel; when non-zero a single channel
        byte is written between the length and the data.
    Returns: The data prefixed with its length in pkt-line format; if data
      was empty, returns the flush-pkt ('0000').
    Raises:
      EncodingError: if the resulting line would not fit in a pkt-line
    """
    if not data:
        return FLUSH_PKT
    prefix = b""
    if sideband:
        prefix = bytes([sideband])
    length = len(prefix) + len(data) + 4
    if length > MAX_PKT_LEN:
        raise EncodingError(f"pkt-line too long: {length} bytes")
    return (f"{length:04X}").encode("ascii") + prefix + data


def iter_pkt_lines(data: bytes) -> Iterator[bytes]:
    """Iterate over the payloads of a buffer of concatenated pkt-lines.

    Flush-pkts are skipped. Lines with a declared length below 4 are
    treated as empty lines and skipped as well; the protocol forbids them
    but some servers emit them. A single trailing newline is stripped from
    every payload.

    Args:
      data: Buffer to decode
    Raises:
      DecodingError: on a short or non-hex length prefix, or a truncated line
    """
    offset = 0
    while offset < len(data):
        sizestr = data[offset : offset + 4]
        if len(sizestr) < 4:
            raise DecodingError(f"incomplete pkt-line length at offset {offset}")
        if not _HEX_DIGITS.issuperset(sizestr):
            raise DecodingError(f"invalid pkt-line length {sizestr!r}")
        size = int(sizestr, 16)
        # flush-pkt, or an empty line that should never have been sent
        if size <= 4:
            offset += 4
            continue
        if offset + size > len(data):
            raise DecodingError(
                f"truncated pkt-line at offset {offset}: "
                f"need {size} bytes, have {len(data) - offset}"
            )
        pkt = data[offset + 4 : offset + size]
        if pkt.endswith(b"\n"):
            pkt = pkt[:-1]
        yield pkt
        offset += size


def pkt_lines(data: bytes) -> list[bytes]:
    """Decode a buffer of concatenated pkt-lines into a list of payloads."""
    return list(iter_pkt_lines(data))
