# config.py -- Settings for a rename run
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

"""Configuration for renaming a remote branch.

Settings are collected into a single `RenameConfig` value that is handed to
the client explicitly. The environment is only consulted by
`RenameConfig.from_environ`:

 * ``GIT_SSH_COMMAND`` -- ssh command line, split like a shell would
 * ``GIT_SSH`` -- ssh program, used when GIT_SSH_COMMAND is not set
 * ``GIT_RENAME_VERBOSITY`` -- initial verbosity level (an integer)
"""

__all__ = [
    "DEFAULT_RECEIVE_PACK",
    "DEFAULT_SSH_COMMAND",
    "RenameConfig",
]

import dataclasses
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

DEFAULT_SSH_COMMAND = "ssh"
DEFAULT_RECEIVE_PACK = "git-receive-pack"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenameConfig:
    """Settings for a single rename.

    Attributes:
      ssh_command: ssh client command line
      receive_pack: Name of the receive-pack program on the remote
      verbosity: 0 is normal, negative is quieter, positive more verbose
      connect_timeout: Seconds to wait for the first bytes of a message
      idle_timeout: Seconds of silence after which a message is complete
      stderr_timeout: Seconds to wait for early diagnostics from the remote
      write_timeout: Seconds to wait for the remote to accept the command
      close_timeout: Seconds to wait for the remote to exit before killing it
    """

    ssh_command: str = DEFAULT_SSH_COMMAND
    receive_pack: str = DEFAULT_RECEIVE_PACK
    verbosity: int = 0
    connect_timeout: float = 30.0
    idle_timeout: float = 1.0
    stderr_timeout: float = 0.1
    write_timeout: float = 10.0
    close_timeout: float = 60.0

    @classmethod
    def from_environ(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides: object
    ) -> "RenameConfig":
        """Create a configuration from environment variables.

        Args:
          environ: Environment to read (defaults to os.environ)
          overrides: Explicit values that take precedence over the environment
        Returns: A `RenameConfig`
        """
        if environ is None:
            environ = os.environ
        kwargs: dict[str, object] = {}
        # GIT_SSH_COMMAND takes precedence over GIT_SSH
        ssh_command = environ.get("GIT_SSH_COMMAND") or environ.get("GIT_SSH")
        if ssh_command:
            kwargs["ssh_command"] = ssh_command
        verbosity = environ.get("GIT_RENAME_VERBOSITY")
        if verbosity:
            try:
                kwargs["verbosity"] = int(verbosity)
            except ValueError:
                logger.warning(
                    "ignoring invalid GIT_RENAME_VERBOSITY value %r", verbosity
                )
        kwargs.update(overrides)
        return cls(**kwargs)  # type: ignore[arg-type]

    def replace(self, **changes: object) -> "RenameConfig":
        """Return a copy with some settings changed."""
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]
