# cli.py -- Command line interface
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

"""Command line interface.

Usage: git-rename-remote-branch [-v|-q] <repository> <old_branch> <new_branch>

Exit status is 0 on success (including when the branch had already been
renamed), 1 for usage errors and 2 when the rename failed.
"""

__all__ = [
    "main",
    "signal_int",
    "signal_quit",
]

import argparse
import logging
import os
import signal
import sys
import types
from collections.abc import Mapping, Sequence
from typing import NoReturn, Optional

import rename_branch

from .client import RenameClient, SSHVendor
from .config import RenameConfig
from .errors import RenameError, UsageError
from .log_utils import default_logging_config
from .refs import extract_branch_name

logger = logging.getLogger(__name__)

PROG = "git-rename-remote-branch"


def signal_int(signal: int, frame: Optional[types.FrameType]) -> None:
    """Handle interrupt signal by exiting.

    SystemExit unwinds the stack, so the remote command still gets reaped.

    Args:
        signal: Signal number
        frame: Current stack frame
    """
    sys.exit(1)


def signal_quit(signal: int, frame: Optional[types.FrameType]) -> None:
    """Handle quit signal by entering debugger.

    Args:
        signal: Signal number
        frame: Current stack frame
    """
    import pdb

    pdb.set_trace()


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports errors as `UsageError`."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        raise UsageError(message)


def _make_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        description=(
            "Rename a branch on a remote git repository without fetching it. "
            "The branch is renamed by talking to git-receive-pack over ssh."
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Be more verbose; may be repeated",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="count",
        default=0,
        help="Be less verbose; may be repeated",
    )
    parser.add_argument(
        "--receive-pack",
        type=str,
        metavar="PROGRAM",
        help="Path to git-receive-pack on the remote side",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s " + ".".join(str(x) for x in rename_branch.__version__),
    )
    parser.add_argument("repository", type=str, help="Repository as [user@]host:path")
    parser.add_argument("old_branch", type=str, help="Branch to rename")
    parser.add_argument("new_branch", type=str, help="New name of the branch")
    return parser


def _display_branch(ref: bytes) -> str:
    return extract_branch_name(ref).decode("utf-8", "replace")


def main(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    vendor: Optional[SSHVendor] = None,
) -> int:
    """Main entry point for the command line.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])
        environ: Environment (defaults to os.environ)
        vendor: SSH implementation to use

    Returns:
        Exit code
    """
    if argv is None:
        argv = sys.argv[1:]
    if environ is None:
        environ = os.environ

    config = RenameConfig.from_environ(environ)
    try:
        args = _make_parser().parse_args(argv)
    except UsageError as e:
        sys.stderr.write(f"{PROG}: error: {e}\n")
        return e.exit_code

    config = config.replace(verbosity=config.verbosity + args.verbose - args.quiet)
    if args.receive_pack:
        config = config.replace(receive_pack=args.receive_pack)
    default_logging_config(config.verbosity, environ)

    try:
        client, path = RenameClient.from_location(
            args.repository, config=config, vendor=vendor
        )
        result = client.rename(path, args.old_branch, args.new_branch)
    except RenameError as e:
        logger.error("error: %s", e)
        return e.exit_code

    old_name = _display_branch(result.old_ref)
    new_name = _display_branch(result.new_ref)
    if result.already_renamed:
        logger.info("%s has already been renamed to %s", old_name, new_name)
    else:
        logger.info("Renamed %s to %s", old_name, new_name)
    return 0


def _main() -> None:
    if "RENAME_BRANCH_PDB" in os.environ and getattr(signal, "SIGQUIT", None):
        signal.signal(signal.SIGQUIT, signal_quit)  # type: ignore[attr-defined]
    signal.signal(signal.SIGINT, signal_int)

    sys.exit(main())


if __name__ == "__main__":
    _main()
