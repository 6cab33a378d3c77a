# log_utils.py -- Logging related utility functions
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

"""Logging utilities.

The package is usable as a library, so by default its loggers carry a
no-op handler and nothing is printed. The command line calls
`default_logging_config` to send messages to stderr, at a level chosen from
the verbosity, or to wherever ``GIT_TRACE`` points.
"""

import logging
import os
import sys
from collections.abc import Mapping
from typing import Optional, Union

getLogger = logging.getLogger


class _NullHandler(logging.Handler):
    """No-op logging handler to avoid unexpected logging warnings."""

    def emit(self, record: logging.LogRecord) -> None:
        pass


_NULL_HANDLER = _NullHandler()
_PACKAGE_LOGGER = getLogger("rename_branch")
_PACKAGE_LOGGER.addHandler(_NULL_HANDLER)

TRACE_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def verbosity_to_level(verbosity: int) -> int:
    """Map a verbosity count to a logging level.

    Args:
      verbosity: 0 for normal output; each -q subtracts one, each -v adds one
    Returns: A logging level
    """
    if verbosity <= -2:
        return logging.ERROR
    if verbosity == -1:
        return logging.WARNING
    if verbosity == 0:
        return logging.INFO
    return logging.DEBUG


def _get_trace_target(
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[Union[str, int]]:
    """Get the trace target from GIT_TRACE environment variable.

    Returns:
        - None if tracing is disabled
        - 2 for stderr output (values "1", "2", "true")
        - int (3-9) for file descriptor
        - str for file path (absolute paths or directories)
    """
    if environ is None:
        environ = os.environ
    trace_value = environ.get("GIT_TRACE", "")

    if not trace_value or trace_value.lower() in ("0", "false"):
        return None

    if trace_value.lower() in ("1", "2", "true"):
        return 2  # stderr

    try:
        fd = int(trace_value)
        if 3 <= fd <= 9:
            return fd
    except ValueError:
        pass

    if os.path.isabs(trace_value):
        return trace_value

    return None


def _configure_logging_from_trace(
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """Configure logging based on GIT_TRACE environment variable.

    Returns True if trace configuration was successful, False otherwise.
    """
    trace_target = _get_trace_target(environ)
    if trace_target is None:
        return False

    if trace_target == 2:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format=TRACE_FORMAT)
        return True

    if isinstance(trace_target, int):
        try:
            stream = os.fdopen(trace_target, "w", buffering=1)
        except OSError as e:
            sys.stderr.write(
                f"Warning: Failed to open GIT_TRACE fd {trace_target}: {e}\n"
            )
            return False
        logging.basicConfig(level=logging.DEBUG, stream=stream, format=TRACE_FORMAT)
        return True

    if os.path.isdir(trace_target):
        # One file per process
        filename = os.path.join(trace_target, f"trace.{os.getpid()}")
    else:
        filename = trace_target
    try:
        logging.basicConfig(
            level=logging.DEBUG, filename=filename, filemode="a", format=TRACE_FORMAT
        )
    except OSError as e:
        sys.stderr.write(
            f"Warning: Failed to open GIT_TRACE file {trace_target}: {e}\n"
        )
        return False
    return True


def default_logging_config(
    verbosity: int = 0, environ: Optional[Mapping[str, str]] = None
) -> None:
    """Set up logging for command line use.

    GIT_TRACE, when set, wins over the verbosity and produces timestamped
    debug output; when that output goes to a file or descriptor, errors are
    also printed on stderr. Otherwise plain messages go to stderr at the
    level given by `verbosity_to_level`.

    Args:
      verbosity: Verbosity count
      environ: Environment to read GIT_TRACE from (defaults to os.environ)
    """
    remove_null_handler()

    if not _configure_logging_from_trace(environ):
        logging.basicConfig(
            level=verbosity_to_level(verbosity),
            stream=sys.stderr,
            format="%(message)s",
        )
    elif _get_trace_target(environ) != 2:
        # Trace output goes to a file or descriptor; errors still go to stderr
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.ERROR)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logging.getLogger().addHandler(handler)


def remove_null_handler() -> None:
    """Remove the null handler from the package loggers.

    If a caller wants to set up logging using something other than
    default_logging_config, calling this function first is a minor optimization
    to avoid the overhead of using the _NullHandler.
    """
    _PACKAGE_LOGGER.removeHandler(_NULL_HANDLER)
