# test_log_utils.py -- Tests for logging utilities
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

"""Tests for rename_branch.log_utils."""

import logging
import os
import sys
import tempfile

from rename_branch.log_utils import (
    _NULL_HANDLER,
    _PACKAGE_LOGGER,
    _configure_logging_from_trace,
    _get_trace_target,
    _NullHandler,
    default_logging_config,
    getLogger,
    remove_null_handler,
    verbosity_to_level,
)

from . import TestCase


class LogUtilsTests(TestCase):
    """Tests for log_utils."""

    def setUp(self) -> None:
        super().setUp()
        # Save original handler configuration
        self.original_handlers = list(_PACKAGE_LOGGER.handlers)
        root_logger = logging.getLogger()
        self.original_root_handlers = list(root_logger.handlers)
        self.original_root_level = root_logger.level
        root_logger.handlers = []

    def tearDown(self) -> None:
        _PACKAGE_LOGGER.handlers = self.original_handlers
        root_logger = logging.getLogger()
        for handler in root_logger.handlers:
            if handler not in self.original_root_handlers:
                handler.close()
        root_logger.handlers = self.original_root_handlers
        root_logger.setLevel(self.original_root_level)
        super().tearDown()

    def test_null_handler(self) -> None:
        """Test the _NullHandler class."""
        handler = _NullHandler()
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="test_log_utils.py",
            lineno=1,
            msg="Test message",
            args=(),
            exc_info=None,
        )
        # Should not raise any exceptions
        handler.emit(record)

    def test_get_logger(self) -> None:
        logger = getLogger("rename_branch.test")
        self.assertIsInstance(logger, logging.Logger)
        self.assertEqual(logger.name, "rename_branch.test")

    def test_null_handler_installed(self) -> None:
        self.assertIn(_NULL_HANDLER, self.original_handlers)

    def test_remove_null_handler(self) -> None:
        """Test removing the null handler."""
        if _NULL_HANDLER not in _PACKAGE_LOGGER.handlers:
            _PACKAGE_LOGGER.addHandler(_NULL_HANDLER)

        remove_null_handler()

        self.assertNotIn(_NULL_HANDLER, _PACKAGE_LOGGER.handlers)

    def test_verbosity_to_level(self) -> None:
        self.assertEqual(logging.ERROR, verbosity_to_level(-5))
        self.assertEqual(logging.ERROR, verbosity_to_level(-2))
        self.assertEqual(logging.WARNING, verbosity_to_level(-1))
        self.assertEqual(logging.INFO, verbosity_to_level(0))
        self.assertEqual(logging.DEBUG, verbosity_to_level(1))
        self.assertEqual(logging.DEBUG, verbosity_to_level(3))

    def test_default_logging_config(self) -> None:
        """Test the default logging configuration."""
        default_logging_config(environ={})

        self.assertNotIn(_NULL_HANDLER, _PACKAGE_LOGGER.handlers)
        root_logger = logging.getLogger()
        self.assertEqual(1, len(root_logger.handlers))
        self.assertIs(sys.stderr, root_logger.handlers[0].stream)
        self.assertEqual(logging.INFO, root_logger.level)

    def test_default_logging_config_quiet(self) -> None:
        default_logging_config(-1, environ={})
        self.assertEqual(logging.WARNING, logging.getLogger().level)

    def test_default_logging_config_trace_wins(self) -> None:
        default_logging_config(-2, environ={"GIT_TRACE": "1"})
        self.assertEqual(logging.DEBUG, logging.getLogger().level)

    def test_default_logging_config_trace_file_keeps_errors_on_stderr(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            trace_file = os.path.join(tmpdir, "trace.log")
            default_logging_config(environ={"GIT_TRACE": trace_file})
            root_logger = logging.getLogger()
            stderr_handlers = [
                h for h in root_logger.handlers if type(h) is logging.StreamHandler
            ]
            self.assertEqual(1, len(stderr_handlers))
            self.assertIs(sys.stderr, stderr_handlers[0].stream)
            self.assertEqual(logging.ERROR, stderr_handlers[0].level)
            self.assertEqual(logging.DEBUG, root_logger.level)
            for handler in root_logger.handlers:
                handler.close()

    def test_default_logging_config_trace_stderr_single_handler(self) -> None:
        default_logging_config(environ={"GIT_TRACE": "1"})
        self.assertEqual(1, len(logging.getLogger().handlers))

    def test_get_trace_target_disabled(self) -> None:
        self.assertIsNone(_get_trace_target({}))
        self.assertIsNone(_get_trace_target({"GIT_TRACE": ""}))
        self.assertIsNone(_get_trace_target({"GIT_TRACE": "0"}))
        self.assertIsNone(_get_trace_target({"GIT_TRACE": "false"}))
        self.assertIsNone(_get_trace_target({"GIT_TRACE": "FALSE"}))

    def test_get_trace_target_stderr(self) -> None:
        for value in ("1", "2", "true", "TRUE"):
            self.assertEqual(2, _get_trace_target({"GIT_TRACE": value}))

    def test_get_trace_target_file_descriptor(self) -> None:
        for fd in range(3, 10):
            self.assertEqual(fd, _get_trace_target({"GIT_TRACE": str(fd)}))

        # Out of range and not a path
        self.assertIsNone(_get_trace_target({"GIT_TRACE": "10"}))

    def test_get_trace_target_relative_path(self) -> None:
        self.assertIsNone(_get_trace_target({"GIT_TRACE": "trace.log"}))

    def test_get_trace_target_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            trace_file = os.path.join(tmpdir, "trace.log")
            self.assertEqual(trace_file, _get_trace_target({"GIT_TRACE": trace_file}))

    def test_configure_logging_from_trace_disabled(self) -> None:
        self.assertFalse(_configure_logging_from_trace({}))
        self.assertEqual([], logging.getLogger().handlers)

    def test_configure_logging_from_trace_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            trace_file = os.path.join(tmpdir, "trace.log")
            self.assertTrue(_configure_logging_from_trace({"GIT_TRACE": trace_file}))
            logging.getLogger("rename_branch.test").debug("traced message")
            for handler in logging.getLogger().handlers:
                handler.flush()
            with open(trace_file) as f:
                content = f.read()
            self.assertIn("traced message", content)
            self.assertIn("rename_branch.test DEBUG", content)
            for handler in logging.getLogger().handlers:
                handler.close()

    def test_configure_logging_from_trace_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            self.assertTrue(_configure_logging_from_trace({"GIT_TRACE": tmpdir}))
            logging.getLogger("rename_branch.test").debug("traced message")
            for handler in logging.getLogger().handlers:
                handler.close()
            self.assertEqual([f"trace.{os.getpid()}"], os.listdir(tmpdir))

    def test_configure_logging_from_trace_bad_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            trace_file = os.path.join(tmpdir, "missing", "trace.log")
            self.assertFalse(
                _configure_logging_from_trace({"GIT_TRACE": trace_file})
            )
