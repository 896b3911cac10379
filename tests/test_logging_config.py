# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for logging setup."""

import logging
import os
import queue
import shutil
import sys
import tempfile
import unittest
from logging.handlers import QueueHandler, RotatingFileHandler

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from logging_config import (
    get_logger, init_worker_logging, setup_logging, worker_log_listener
)


class TestSetupLogging(unittest.TestCase):
    """Tests for setup_logging."""

    def setUp(self):
        """Create temporary output directory."""
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Drop handlers and clean up temporary directory."""
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        shutil.rmtree(self.temp_dir)

    def test_file_and_console_handlers(self):
        """Test a rotating file handler and a console handler are installed."""
        path = setup_logging(self.temp_dir, "WARNING", "book_test")

        handlers = logging.getLogger().handlers
        self.assertTrue(os.path.basename(path).startswith("book_test_"))
        self.assertTrue(os.path.exists(path))
        self.assertEqual(len(handlers), 2)
        file_handler = next(h for h in handlers if isinstance(h, RotatingFileHandler))
        console = next(h for h in handlers if not isinstance(h, RotatingFileHandler))
        self.assertEqual(file_handler.level, logging.DEBUG)
        self.assertEqual(console.level, logging.WARNING)

    def test_console_disabled(self):
        """Test only the file handler is installed without console output."""
        setup_logging(self.temp_dir, enable_console=False)

        handlers = logging.getLogger().handlers
        self.assertEqual(len(handlers), 1)
        self.assertIsInstance(handlers[0], RotatingFileHandler)

    def test_repeated_setup_replaces_handlers(self):
        """Test calling setup twice does not stack handlers."""
        setup_logging(self.temp_dir, enable_console=False)
        setup_logging(self.temp_dir, enable_console=False)

        self.assertEqual(len(logging.getLogger().handlers), 1)

    def test_debug_messages_reach_file(self):
        """Test debug output is written to the log file."""
        path = setup_logging(self.temp_dir, "ERROR", enable_console=False)

        get_logger("word_search_generator").debug("placed CAT")
        for handler in logging.getLogger().handlers:
            handler.flush()

        with open(path, encoding='utf-8') as f:
            self.assertIn("placed CAT", f.read())

    def test_worker_records_queued(self):
        """Test a worker process sends its records to the queue only."""
        setup_logging(self.temp_dir, enable_console=False)
        log_queue = queue.Queue()

        init_worker_logging(log_queue)
        get_logger("word_search_generator").debug("Dropped 'HIPPO'")

        handlers = logging.getLogger().handlers
        self.assertEqual(len(handlers), 1)
        self.assertIsInstance(handlers[0], QueueHandler)
        self.assertEqual(log_queue.get_nowait().getMessage(), "Dropped 'HIPPO'")

    def test_listener_writes_worker_records(self):
        """Test records from the worker queue reach the parent's log file."""
        path = setup_logging(self.temp_dir, enable_console=False)

        with worker_log_listener() as log_queue:
            log_queue.put(logging.makeLogRecord({
                'name': 'word_search_generator',
                'levelno': logging.DEBUG,
                'levelname': 'DEBUG',
                'msg': "Synthesized 10x10 grid in worker",
            }))

        for handler in logging.getLogger().handlers:
            handler.flush()
        with open(path, encoding='utf-8') as f:
            self.assertIn("Synthesized 10x10 grid in worker", f.read())

    def test_get_logger(self):
        """Test get_logger returns the named logger."""
        self.assertIs(get_logger("book_compositor"),
                      logging.getLogger("book_compositor"))


if __name__ == '__main__':
    unittest.main()
