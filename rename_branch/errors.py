# errors.py -- errors for git-rename-remote-branch
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

"""Exception classes raised while renaming a remote branch.

Every failure is fatal to a run. The ``exit_code`` attribute carries the
process exit status the command line reports for it.
"""

__all__ = [
    "DecodingError",
    "EncodingError",
    "GitProtocolError",
    "HangupException",
    "IncompleteRename",
    "InvalidStatusLine",
    "NewRefAlreadyExists",
    "OldRefNotFound",
    "RemoteRejected",
    "RenameError",
    "SendPackError",
    "TransportTimeout",
    "UnexpectedLineCount",
    "UnpackFailed",
    "UsageError",
    "WriteIncomplete",
]

from collections.abc import Sequence
from typing import Optional


class RenameError(Exception):
    """Base class for all rename failures."""

    exit_code = 2


class UsageError(RenameError):
    """Invalid arguments, detected before any network I/O."""

    exit_code = 1


class OldRefNotFound(RenameError):
    """The branch to rename is not advertised by the remote."""

    def __init__(self, refname: bytes) -> None:
        """Initialize an OldRefNotFound exception.

        Args:
            refname: Full name of the missing ref.
        """
        self.refname = refname
        super().__init__(
            f"{refname.decode('utf-8', 'replace')} does not exist on the remote"
        )


class NewRefAlreadyExists(RenameError):
    """The target branch name is already taken on the remote."""

    def __init__(self, refname: bytes) -> None:
        """Initialize a NewRefAlreadyExists exception.

        Args:
            refname: Full name of the existing ref.
        """
        self.refname = refname
        super().__init__(
            f"{refname.decode('utf-8', 'replace')} already exists on the remote"
        )


class GitProtocolError(RenameError):
    """Git protocol exception."""

    def __eq__(self, other: object) -> bool:
        """Check equality between GitProtocolError instances.

        Args:
            other: The object to compare with.

        Returns:
            True if both are instances of the same class with same args.
        """
        return (
            isinstance(other, GitProtocolError)
            and type(self) is type(other)
            and self.args == other.args
        )

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class EncodingError(GitProtocolError):
    """A payload is too large to fit in a single pkt-line."""


class DecodingError(GitProtocolError):
    """Malformed pkt-line data: bad length prefix or truncated frame."""


class HangupException(GitProtocolError):
    """The remote side went away without saying anything useful."""

    def __init__(self, stderr_lines: Optional[Sequence[bytes]] = None) -> None:
        """Initialize a HangupException.

        Args:
            stderr_lines: Optional list of stderr output lines from the remote.
        """
        if stderr_lines:
            super().__init__(
                "\n".join(
                    line.decode("utf-8", "surrogateescape") for line in stderr_lines
                )
            )
        else:
            super().__init__("The remote server unexpectedly closed the connection.")
        self.stderr_lines = stderr_lines


class TransportTimeout(GitProtocolError):
    """No data arrived from the remote before the deadline."""


class WriteIncomplete(GitProtocolError):
    """The update command could not be written in a single attempt."""

    def __init__(self, written: int, expected: int) -> None:
        """Initialize a WriteIncomplete exception.

        Args:
            written: Number of bytes actually written.
            expected: Number of bytes that should have been written.
        """
        self.written = written
        self.expected = expected
        super().__init__(f"wrote {written} of {expected} bytes to the remote")


class RemoteRejected(GitProtocolError):
    """The remote printed a diagnostic and exited."""

    def __init__(self, message: str) -> None:
        """Initialize a RemoteRejected exception.

        Args:
            message: Diagnostic text received from the remote.
        """
        self.message = message
        super().__init__(f"remote rejected the request: {message}")


class SendPackError(GitProtocolError):
    """The status report does not confirm the rename."""


class UnexpectedLineCount(SendPackError):
    """The status report does not have exactly three lines."""

    def __init__(self, lines: Sequence[bytes]) -> None:
        """Initialize an UnexpectedLineCount exception.

        Args:
            lines: The decoded status report lines.
        """
        self.lines = list(lines)
        super().__init__(
            f"expected 3 lines in status report, got {len(self.lines)}: {self.lines!r}"
        )


class UnpackFailed(SendPackError):
    """The remote could not unpack the (empty) pack."""

    def __init__(self, status: bytes) -> None:
        self.status = status
        super().__init__(status.decode("utf-8", "replace"))


class InvalidStatusLine(SendPackError):
    """A ref status line is not an ``ok`` line."""

    def __init__(self, line: bytes) -> None:
        self.line = line
        super().__init__(f"invalid ref status {line!r}")


class IncompleteRename(SendPackError):
    """The status report does not acknowledge both refs."""

    def __init__(self, missing: Sequence[bytes]) -> None:
        self.missing = sorted(missing)
        super().__init__(
            "status report does not acknowledge "
            + ", ".join(ref.decode("utf-8", "replace") for ref in self.missing)
        )
