# refs.py -- Ref names and the reference advertisement
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

"""Ref handling and parsing of the refs advertised by receive-pack."""

__all__ = [
    "BAD_REF_CHARS",
    "CAPABILITIES_REF",
    "LOCAL_BRANCH_PREFIX",
    "Advertisement",
    "Ref",
    "check_ref_format",
    "extract_branch_name",
    "find_refs",
    "local_branch_name",
    "parse_advertisement",
]

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from dataclasses import dataclass, field
from typing import Optional

from .protocol import FLUSH_PKT, extract_capabilities

Ref = bytes

LOCAL_BRANCH_PREFIX = b"refs/heads/"
BAD_REF_CHARS = set(b"\177 ~^:?*[")

# Placeholder ref sent by servers with no refs at all.
CAPABILITIES_REF = b"capabilities^{}"

# An advertised ref, optionally still carrying its pkt-line length prefix.
_REF_LINE_RE = re.compile(
    rb"^(?:[0-9a-fA-F]{4})?([0-9a-f]{40})\s+([^\s\0]+)(.*)$", re.S
)
_ERR_LINE_RE = re.compile(rb"^(?:[0-9a-fA-F]{4})?ERR (.*)$", re.S)

logger = logging.getLogger(__name__)


def check_ref_format(refname: Ref) -> bool:
    """Check if a refname is correctly formatted.

    Implements all the same rules as git-check-ref-format[1].

    [1]
    http://www.kernel.org/pub/software/scm/git/docs/git-check-ref-format.html

    Args:
      refname: The refname to check
    Returns: True if refname is valid, False otherwise
    """
    # These could be combined into one big expression, but are listed
    # separately to parallel [1].
    if b"/." in refname or refname.startswith(b"."):
        return False
    if b"/" not in refname:
        return False
    if b".." in refname:
        return False
    for i, c in enumerate(refname):
        if ord(refname[i : i + 1]) < 0o40 or c in BAD_REF_CHARS:
            return False
    if refname[-1] in b"/.":
        return False
    if refname.endswith(b".lock"):
        return False
    if b"@{" in refname:
        return False
    if b"\\" in refname:
        return False
    return True


def local_branch_name(name: bytes) -> Ref:
    """Build a full branch ref from a short name.

    Args:
      name: Short branch name (e.g., b"master") or full ref

    Returns:
      Full branch ref name (e.g., b"refs/heads/master")

    Examples:
      >>> local_branch_name(b"master")
      b'refs/heads/master'
      >>> local_branch_name(b"refs/heads/master")
      b'refs/heads/master'
    """
    if name.startswith(LOCAL_BRANCH_PREFIX):
        return name
    return LOCAL_BRANCH_PREFIX + name


def extract_branch_name(ref: Ref) -> bytes:
    """Extract branch name from a full branch ref.

    Raises:
      ValueError: If ref is not a local branch

    Examples:
      >>> extract_branch_name(b"refs/heads/feature/foo")
      b'feature/foo'
    """
    if not ref.startswith(LOCAL_BRANCH_PREFIX):
        raise ValueError(f"Not a local branch ref: {ref!r}")
    return ref[len(LOCAL_BRANCH_PREFIX) :]


@dataclass(frozen=True)
class Advertisement:
    """Refs advertised by a receive-pack server.

    Attributes:
      refs: Ref name to object id, in the order the server sent them
      capabilities: Capabilities announced on the first ref line
      error: Message of an ``ERR`` line, if the server sent one
    """

    refs: Mapping[Ref, bytes] = field(default_factory=dict)
    capabilities: frozenset[bytes] = frozenset()
    error: Optional[str] = None

    def __post_init__(self) -> None:
        # Read-only copy of whatever mapping was passed in
        object.__setattr__(self, "refs", MappingProxyType(dict(self.refs)))

    def get(self, refname: Ref) -> Optional[bytes]:
        """Return the object id advertised for refname, or None."""
        return self.refs.get(refname)

    def __contains__(self, refname: object) -> bool:
        return refname in self.refs


def parse_advertisement(data: bytes) -> Advertisement:
    """Parse the reference advertisement sent by receive-pack.

    The advertisement is read as plain newline separated lines rather than
    as pkt-lines: each line is an object id followed by a ref name, with the
    capabilities tucked behind a NUL on the first one. Anything else is
    skipped, and parsing stops at the flush-pkt.

    Args:
      data: Raw bytes as received from the server
    Returns: An `Advertisement`
    """
    refs: dict[Ref, bytes] = {}
    capabilities: Optional[list[bytes]] = None
    error = None
    for line in data.split(b"\n"):
        if line == FLUSH_PKT:
            break
        m = _REF_LINE_RE.match(line)
        if m is None:
            m = _ERR_LINE_RE.match(line)
            if m is not None and error is None:
                error = m.group(1).decode("utf-8", "replace")
            elif line:
                logger.debug("ignoring advertisement line %r", line)
            continue
        sha, refname, rest = m.groups()
        if capabilities is None:
            _, capabilities = extract_capabilities(rest)
        if refname != CAPABILITIES_REF:
            refs[refname] = sha
    return Advertisement(
        refs=refs, capabilities=frozenset(capabilities or []), error=error
    )


def find_refs(
    data: bytes, old_ref: Ref, new_ref: Ref
) -> tuple[Optional[bytes], Optional[bytes]]:
    """Look up two refs in a raw advertisement.

    Args:
      data: Raw bytes as received from the server
      old_ref: Name of the ref being renamed
      new_ref: Name it is being renamed to
    Returns: Tuple with the object ids of old_ref and new_ref; either is
      None when the server does not advertise it
    """
    advertisement = parse_advertisement(data)
    return advertisement.get(old_ref), advertisement.get(new_ref)
