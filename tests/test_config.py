# test_config.py -- Tests for rename settings
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

"""Tests for rename_branch.config."""

from rename_branch.config import (
    DEFAULT_RECEIVE_PACK,
    DEFAULT_SSH_COMMAND,
    RenameConfig,
)

from . import TestCase


class RenameConfigTests(TestCase):
    def test_defaults(self) -> None:
        config = RenameConfig()
        self.assertEqual(DEFAULT_SSH_COMMAND, config.ssh_command)
        self.assertEqual(DEFAULT_RECEIVE_PACK, config.receive_pack)
        self.assertEqual(0, config.verbosity)
        self.assertEqual(30.0, config.connect_timeout)
        self.assertEqual(1.0, config.idle_timeout)
        self.assertEqual(0.1, config.stderr_timeout)
        self.assertEqual(10.0, config.write_timeout)
        self.assertEqual(60.0, config.close_timeout)

    def test_empty_environ(self) -> None:
        self.assertEqual(RenameConfig(), RenameConfig.from_environ({}))

    def test_git_ssh_command(self) -> None:
        config = RenameConfig.from_environ({"GIT_SSH_COMMAND": "ssh -p 2222"})
        self.assertEqual("ssh -p 2222", config.ssh_command)

    def test_git_ssh(self) -> None:
        config = RenameConfig.from_environ({"GIT_SSH": "/usr/bin/myssh"})
        self.assertEqual("/usr/bin/myssh", config.ssh_command)

    def test_git_ssh_command_wins(self) -> None:
        config = RenameConfig.from_environ(
            {"GIT_SSH": "/usr/bin/myssh", "GIT_SSH_COMMAND": "ssh -i key"}
        )
        self.assertEqual("ssh -i key", config.ssh_command)

    def test_empty_git_ssh_command(self) -> None:
        config = RenameConfig.from_environ({"GIT_SSH_COMMAND": "", "GIT_SSH": ""})
        self.assertEqual(DEFAULT_SSH_COMMAND, config.ssh_command)

    def test_verbosity(self) -> None:
        config = RenameConfig.from_environ({"GIT_RENAME_VERBOSITY": "-2"})
        self.assertEqual(-2, config.verbosity)

    def test_invalid_verbosity(self) -> None:
        with self.assertLogs("rename_branch.config", level="WARNING") as cm:
            config = RenameConfig.from_environ({"GIT_RENAME_VERBOSITY": "loud"})
        self.assertEqual(0, config.verbosity)
        self.assertIn("loud", cm.output[0])

    def test_overrides(self) -> None:
        config = RenameConfig.from_environ(
            {"GIT_SSH_COMMAND": "ssh -p 2222"},
            ssh_command="plink",
            idle_timeout=0.5,
        )
        self.assertEqual("plink", config.ssh_command)
        self.assertEqual(0.5, config.idle_timeout)

    def test_replace(self) -> None:
        config = RenameConfig()
        changed = config.replace(receive_pack="/opt/git/bin/git-receive-pack")
        self.assertEqual("/opt/git/bin/git-receive-pack", changed.receive_pack)
        self.assertEqual(DEFAULT_RECEIVE_PACK, config.receive_pack)
        self.assertEqual(config.connect_timeout, changed.connect_timeout)

    def test_frozen(self) -> None:
        config = RenameConfig()
        with self.assertRaises(AttributeError):
            config.verbosity = 3  # type: ignore[misc]
