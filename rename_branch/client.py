# client.py -- Client side of the receive-pack exchange used for renames
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

"""Client side support for renaming a branch over the git protocol.

A rename is a single exchange with ``git-receive-pack`` run over ssh:

 1. the server advertises its refs;
 2. the client sends two commands, creating the new ref at the old ref's
    object and deleting the old ref, followed by an empty pack;
 3. the server answers with a status report.

The client supports the following capabilities:

 * report-status

Everything else, side-band-64k in particular, is never requested: the
status report is read as plain pkt-lines.
"""

__all__ = [
    "RECEIVE_CAPABILITIES",
    "Channel",
    "PipeChannel",
    "RenameClient",
    "RenameResult",
    "RenameState",
    "ReportStatusParser",
    "SSHVendor",
    "StrangeHostname",
    "SubprocessSSHVendor",
    "SubprocessWrapper",
    "build_rename_commands",
    "get_ssh_vendor",
    "parse_location",
    "parse_report_status",
    "read_until_idle",
]

import enum
import logging
import os
import re
import select
import shlex
import subprocess
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from typing import IO, Callable, Optional, Protocol, Union

from .config import RenameConfig
from .errors import (
    GitProtocolError,
    HangupException,
    IncompleteRename,
    InvalidStatusLine,
    NewRefAlreadyExists,
    OldRefNotFound,
    RemoteRejected,
    TransportTimeout,
    UnexpectedLineCount,
    UnpackFailed,
    UsageError,
    WriteIncomplete,
)
from .pack import EMPTY_PACK
from .protocol import (
    CAPABILITY_REPORT_STATUS,
    ZERO_SHA,
    capability_agent,
    pkt_line,
    pkt_lines,
)
from .refs import Ref, check_ref_format, local_branch_name, parse_advertisement

RECEIVE_CAPABILITIES = [CAPABILITY_REPORT_STATUS]

UNPACK_OK = b"unpack ok"

_REF_STATUS_RE = re.compile(rb"^ok\s+(\S+)$", re.IGNORECASE)

_READ_SIZE = 65536

logger = logging.getLogger(__name__)


def build_rename_commands(
    old_ref: Ref,
    new_ref: Ref,
    sha: bytes,
    capabilities: Optional[Iterable[bytes]] = None,
) -> bytes:
    """Build the request that renames old_ref to new_ref.

    The request creates new_ref at sha, deletes old_ref, ends the command
    list with a flush-pkt and appends an empty pack. The server applies
    both commands together or not at all.

    Args:
      old_ref: Branch being renamed (short name or full ref)
      new_ref: New name of the branch (short name or full ref)
      sha: Object id old_ref currently points at
      capabilities: Capabilities to announce on the first command
    Returns: The bytes to write to receive-pack
    """
    old_ref = local_branch_name(old_ref)
    new_ref = local_branch_name(new_ref)
    if capabilities is None:
        capabilities = [*RECEIVE_CAPABILITIES, capability_agent()]
    create = (
        ZERO_SHA
        + b" "
        + sha
        + b" "
        + new_ref
        + b"\0"
        + b" ".join(sorted(capabilities))
        + b"\n"
    )
    delete = sha + b" " + ZERO_SHA + b" " + old_ref + b"\n"
    logger.debug("Sending updated ref %r: %r -> %r", new_ref, ZERO_SHA, sha)
    logger.debug("Sending updated ref %r: %r -> %r", old_ref, sha, ZERO_SHA)
    return pkt_line(create) + pkt_line(delete) + pkt_line(None) + EMPTY_PACK


class ReportStatusParser:
    """Check the status report of a rename.

    The report must consist of ``unpack ok`` followed by an ``ok`` line for
    each of the two refs, in either order.
    """

    def __init__(self, old_ref: Ref, new_ref: Ref) -> None:
        """Initialize ReportStatusParser.

        Args:
          old_ref: Full name of the ref being renamed
          new_ref: Full name of the ref it is renamed to
        """
        self.old_ref = old_ref
        self.new_ref = new_ref
        self._lines: list[bytes] = []

    def handle_packet(self, pkt: bytes) -> None:
        """Handle a decoded status report line."""
        self._lines.append(pkt)

    def check(self) -> set[Ref]:
        """Check the report, raising if it does not confirm the rename.

        Raises:
          UnexpectedLineCount: the report does not have three lines
          UnpackFailed: the server could not unpack
          InvalidStatusLine: a ref was not updated
          IncompleteRename: one of the refs was not acknowledged
        Returns: The acknowledged refs
        """
        if len(self._lines) != 3:
            raise UnexpectedLineCount(self._lines)
        pack_status, *ref_statuses = self._lines
        if pack_status != UNPACK_OK:
            raise UnpackFailed(pack_status)
        acknowledged = set()
        for status in ref_statuses:
            m = _REF_STATUS_RE.match(status)
            if m is None:
                raise InvalidStatusLine(status)
            acknowledged.add(m.group(1))
        missing = {self.old_ref, self.new_ref} - acknowledged
        if missing:
            raise IncompleteRename(sorted(missing))
        return acknowledged


def parse_report_status(data: bytes, old_ref: Ref, new_ref: Ref) -> set[Ref]:
    """Decode a status report and check that it confirms the rename.

    Args:
      data: Raw bytes as received from the server
      old_ref: Full name of the ref being renamed
      new_ref: Full name of the ref it is renamed to
    Returns: The acknowledged refs
    """
    parser = ReportStatusParser(old_ref, new_ref)
    for pkt in pkt_lines(data):
        parser.handle_packet(pkt)
    return parser.check()


class Channel(Protocol):
    """Readable byte channel."""

    def recv(self, timeout: Optional[float]) -> Optional[bytes]:
        """Read whatever is available.

        Returns: The bytes read, b"" at end of data, or None if nothing
          arrived within timeout seconds
        """
        ...


def read_until_idle(
    channel: Channel, first_timeout: Optional[float], idle_timeout: Optional[float]
) -> bytes:
    """Read from a channel until it closes or goes quiet.

    Neither the advertisement nor the status report announce their size up
    front, so a message is considered complete once the remote closes its
    end or stops sending. The first read waits longer to give the remote
    time to start up.

    Args:
      channel: Channel to read from
      first_timeout: Seconds to wait for the first chunk
      idle_timeout: Seconds to wait for each following chunk
    Returns: Everything read, possibly empty
    """
    chunks = []
    timeout = first_timeout
    while True:
        data = channel.recv(timeout)
        if not data:
            break
        chunks.append(data)
        timeout = idle_timeout
    return b"".join(chunks)


class PipeChannel:
    """One end of a pipe, waited on with select()."""

    def __init__(self, fileobj: IO[bytes]) -> None:
        self._fileobj = fileobj

    def fileno(self) -> int:
        return self._fileobj.fileno()

    @property
    def closed(self) -> bool:
        return self._fileobj.closed

    def recv(self, timeout: Optional[float]) -> Optional[bytes]:
        if self.closed:
            return b""
        readable, _, _ = select.select([self.fileno()], [], [], timeout)
        if not readable:
            return None
        return os.read(self.fileno(), _READ_SIZE)

    def wait_writable(self, timeout: Optional[float]) -> bool:
        """Wait until the pipe accepts data."""
        if self.closed:
            return False
        _, writable, _ = select.select([], [self.fileno()], [], timeout)
        return bool(writable)

    def write(self, data: bytes) -> int:
        """Write data in a single system call.

        Returns: Number of bytes written
        """
        return os.write(self.fileno(), data)

    def close(self) -> None:
        self._fileobj.close()


class SubprocessWrapper:
    """The three pipes of a transport subprocess."""

    def __init__(self, proc: "subprocess.Popen[bytes]") -> None:
        """Initialize a SubprocessWrapper.

        Args:
          proc: Subprocess.Popen instance to wrap
        """
        self.proc = proc
        assert proc.stdin is not None
        assert proc.stdout is not None
        assert proc.stderr is not None
        self.stdin = PipeChannel(proc.stdin)
        self.stdout = PipeChannel(proc.stdout)
        self.stderr = PipeChannel(proc.stderr)

    def exited(self, timeout: float = 0) -> bool:
        """Check whether the subprocess has terminated.

        Args:
          timeout: Seconds to wait for it to terminate
        """
        if not timeout:
            return self.proc.poll() is not None
        try:
            self.proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            return False
        return True

    def close(self, timeout: Optional[float] = 60) -> int:
        """Close the subprocess and wait for it to terminate.

        Args:
          timeout: Maximum time to wait for subprocess to terminate (seconds)

        Returns: The exit status of the subprocess

        Raises:
          GitProtocolError: If subprocess doesn't terminate within timeout
        """
        for channel in (self.stdin, self.stdout, self.stderr):
            if not channel.closed:
                channel.close()
        try:
            return self.proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            self.proc.kill()
            self.proc.wait()
            raise GitProtocolError(
                f"Remote subprocess did not terminate within {timeout} seconds; "
                "killed it."
            ) from e


class SSHVendor:
    """A client side SSH implementation."""

    def run_command(
        self,
        host: str,
        command: str,
        username: Optional[str] = None,
        ssh_command: Optional[str] = None,
    ) -> SubprocessWrapper:
        """Connect to an SSH server.

        Run a command remotely and return the pipes for interaction with
        the remote command.

        Args:
          host: Host name
          command: Command to run on the remote side
          username: Optional name of user to log in as
          ssh_command: Optional SSH command
        """
        raise NotImplementedError(self.run_command)


class StrangeHostname(UsageError):
    """Refusing to connect to strange SSH hostname."""

    def __init__(self, hostname: str) -> None:
        """Initialize StrangeHostname exception.

        Args:
            hostname: The strange hostname that was rejected
        """
        super().__init__(f"refusing to connect to strange hostname {hostname!r}")
        self.hostname = hostname


class SubprocessSSHVendor(SSHVendor):
    """SSH vendor that shells out to the local 'ssh' command."""

    def run_command(
        self,
        host: str,
        command: str,
        username: Optional[str] = None,
        ssh_command: Optional[str] = None,
    ) -> SubprocessWrapper:
        if ssh_command:
            try:
                split_command = shlex.split(ssh_command, posix=sys.platform != "win32")
            except ValueError as e:
                raise UsageError(f"invalid ssh command {ssh_command!r}: {e}") from e
            if not split_command:
                raise UsageError(f"invalid ssh command {ssh_command!r}")
            args = [*split_command, "-x"]
        else:
            args = ["ssh", "-x"]

        if username:
            host = f"{username}@{host}"
        if host.startswith("-"):
            raise StrangeHostname(hostname=host)
        args.append(host)

        logger.debug("Running %r", [*args, command])
        try:
            proc = subprocess.Popen(
                [*args, command],
                bufsize=0,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise GitProtocolError(f"unable to run {args[0]!r}: {e}") from e
        return SubprocessWrapper(proc)


# Can be overridden by users
get_ssh_vendor: Callable[[], SSHVendor] = SubprocessSSHVendor


def parse_location(location: str) -> tuple[Optional[str], str, str]:
    """Parse a ``[user@]host:path`` repository location.

    The path gets a ``.git`` suffix if it does not already have one.

    Args:
      location: Repository location
    Returns: Tuple with user (or None), host and path
    Raises:
      UsageError: if location is not of that form
    """
    if "://" in location:
        raise UsageError(
            f"unsupported repository location {location!r}: "
            "use [user@]host:path instead of a URL"
        )
    if ":" not in location:
        raise UsageError(
            f"invalid repository location {location!r}: expected [user@]host:path"
        )
    user_host, path = location.split(":", 1)
    if "@" in user_host:
        user, host = user_host.rsplit("@", 1)
    else:
        user = None
        host = user_host
    path = path.rstrip("/")
    if not host or not path:
        raise UsageError(
            f"invalid repository location {location!r}: expected [user@]host:path"
        )
    if not path.endswith(".git"):
        path += ".git"
    return (user or None, host, path)


def _sq_quote(text: str) -> str:
    return "'" + text.replace("'", "'\\''") + "'"


class RenameState(enum.Enum):
    """Progress of a rename."""

    CONNECTING = "connecting"
    AWAITING_ADVERTISEMENT = "awaiting-advertisement"
    CHECKING_EARLY_ERROR = "checking-early-error"
    SENDING_COMMAND = "sending-command"
    AWAITING_REPORT = "awaiting-report"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class RenameResult:
    """Outcome of a successful rename.

    Attributes:
      old_ref: Full name of the renamed ref
      new_ref: Full name it now has
      sha: Object id the ref points at
      already_renamed: True if the remote already had the new name and not
        the old one, so nothing was sent
    """

    old_ref: Ref
    new_ref: Ref
    sha: bytes
    already_renamed: bool = False


class RenameClient:
    """Rename branches on a remote reachable over SSH."""

    def __init__(
        self,
        host: str,
        username: Optional[str] = None,
        config: Optional[RenameConfig] = None,
        vendor: Optional[SSHVendor] = None,
    ) -> None:
        """Initialize RenameClient.

        Args:
            host: SSH hostname
            username: Optional username
            config: Settings; defaults to `RenameConfig.from_environ()`
            vendor: Optional SSH vendor
        """
        self.host = host
        self.username = username
        if config is None:
            config = RenameConfig.from_environ()
        self.config = config
        if vendor is not None:
            self.ssh_vendor = vendor
        else:
            self.ssh_vendor = get_ssh_vendor()
        self._send_capabilities = [*RECEIVE_CAPABILITIES, capability_agent()]
        self.state: Optional[RenameState] = None

    @classmethod
    def from_location(
        cls,
        location: str,
        config: Optional[RenameConfig] = None,
        vendor: Optional[SSHVendor] = None,
    ) -> tuple["RenameClient", str]:
        """Create a client for a ``[user@]host:path`` location.

        Returns: Tuple with the client and the repository path
        """
        user, host, path = parse_location(location)
        return cls(host, username=user, config=config, vendor=vendor), path

    def _set_state(self, state: RenameState) -> None:
        logger.debug("rename state: %s -> %s", self.state, state)
        self.state = state

    def _connect(self, path: str) -> SubprocessWrapper:
        if path.startswith("/~"):
            path = path[1:]
        command = self.config.receive_pack + " " + _sq_quote(path)
        return self.ssh_vendor.run_command(
            self.host,
            command,
            username=self.username,
            ssh_command=self.config.ssh_command,
        )

    def rename(
        self,
        path: str,
        old_branch: Union[str, bytes],
        new_branch: Union[str, bytes],
    ) -> RenameResult:
        """Rename a branch in the repository at path.

        Args:
          path: Repository path on the remote host
          old_branch: Branch to rename (short name or full ref)
          new_branch: New name for the branch (short name or full ref)
        Returns: A `RenameResult`
        Raises:
          UsageError: if the branch names are unusable; nothing is sent
          RenameError: if the rename failed or could not be confirmed
        """
        old_ref, new_ref = _check_branch_names(old_branch, new_branch)
        self.state = None
        self._set_state(RenameState.CONNECTING)
        try:
            con = self._connect(path)
        except BaseException:
            self._set_state(RenameState.FAILED)
            raise
        try:
            return self._rename(con, old_ref, new_ref)
        except BaseException as e:
            self._set_state(RenameState.FAILED)
            logger.debug("rename failed: %r", e)
            raise
        finally:
            self._close(con)

    def _rename(
        self, con: SubprocessWrapper, old_ref: Ref, new_ref: Ref
    ) -> RenameResult:
        config = self.config
        self._set_state(RenameState.AWAITING_ADVERTISEMENT)
        data = read_until_idle(con.stdout, config.connect_timeout, config.idle_timeout)
        if not data:
            raise self._hangup_error(con)
        advertisement = parse_advertisement(data)
        logger.debug(
            "remote advertised %d refs, capabilities: %s",
            len(advertisement.refs),
            b" ".join(sorted(advertisement.capabilities)).decode("ascii", "replace"),
        )
        if advertisement.error is not None:
            raise RemoteRejected(advertisement.error)

        self._set_state(RenameState.CHECKING_EARLY_ERROR)
        old_sha = advertisement.get(old_ref)
        new_sha = advertisement.get(new_ref)
        if old_sha is None and new_sha is not None:
            logger.debug("%r is gone and %r exists; nothing to do", old_ref, new_ref)
            self._set_state(RenameState.DONE)
            return RenameResult(old_ref, new_ref, new_sha, already_renamed=True)
        if old_sha is None:
            raise OldRefNotFound(old_ref)
        if new_sha is not None:
            raise NewRefAlreadyExists(new_ref)
        early = con.stderr.recv(config.stderr_timeout)
        if early:
            if con.exited():
                raise RemoteRejected(_decode_remote_text(early))
            _log_remote_messages(early)

        self._set_state(RenameState.SENDING_COMMAND)
        request = build_rename_commands(
            old_ref, new_ref, old_sha, capabilities=self._send_capabilities
        )
        if not con.stdin.wait_writable(config.write_timeout):
            raise TransportTimeout(
                f"remote did not accept data within {config.write_timeout} seconds"
            )
        try:
            written = con.stdin.write(request)
        except OSError as e:
            raise WriteIncomplete(0, len(request)) from e
        if written != len(request):
            raise WriteIncomplete(written, len(request))

        self._set_state(RenameState.AWAITING_REPORT)
        report = read_until_idle(
            con.stdout, config.connect_timeout, config.idle_timeout
        )
        messages = read_until_idle(
            con.stderr, config.stderr_timeout, config.stderr_timeout
        )
        if messages:
            _log_remote_messages(messages)
        if not report:
            if messages:
                raise RemoteRejected(_decode_remote_text(messages))
            raise self._hangup_error(con)
        parse_report_status(report, old_ref, new_ref)
        self._set_state(RenameState.DONE)
        return RenameResult(old_ref, new_ref, old_sha)

    def _hangup_error(self, con: SubprocessWrapper) -> GitProtocolError:
        """Explain why the remote did not send anything."""
        messages = read_until_idle(
            con.stderr, self.config.stderr_timeout, self.config.stderr_timeout
        )
        if con.exited(self.config.stderr_timeout):
            if messages:
                return RemoteRejected(_decode_remote_text(messages))
            return HangupException()
        return TransportTimeout(
            f"no data from remote within {self.config.connect_timeout} seconds"
        )

    def _close(self, con: SubprocessWrapper) -> None:
        try:
            returncode = con.close(self.config.close_timeout)
        except GitProtocolError as e:
            logger.warning("%s", e)
            return
        if returncode:
            logger.warning("remote command exited with status %d", returncode)


def _check_branch_names(
    old_branch: Union[str, bytes], new_branch: Union[str, bytes]
) -> tuple[Ref, Ref]:
    refs = []
    for name in (old_branch, new_branch):
        if isinstance(name, str):
            name = name.encode("utf-8")
        ref = local_branch_name(name)
        if not check_ref_format(ref):
            display = name.decode("utf-8", "replace")
            raise UsageError(f"invalid branch name {display!r}")
        refs.append(ref)
    old_ref, new_ref = refs
    if old_ref == new_ref:
        raise UsageError("old and new branch names are the same")
    return old_ref, new_ref


def _decode_remote_text(data: bytes) -> str:
    return data.decode("utf-8", "replace").strip()


def _log_remote_messages(data: bytes) -> None:
    for line in _decode_remote_text(data).splitlines():
        logger.info("remote: %s", line)
