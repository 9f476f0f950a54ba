"""
Tests for simple_nn.config and simple_nn.log.
"""

import logging
import os
import unittest
from unittest import mock

from simple_nn import config
from simple_nn.log import get_logger, reset_logger


class TestConfig(unittest.TestCase):

    def setUp(self):
        config.reload()
        self.addCleanup(config.reload)

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config.reload()
            self.assertEqual(config.debug_level(), 0)
            self.assertEqual(config.log_level(), "WARNING")

    def test_env_overrides(self):
        with mock.patch.dict(os.environ, {"SIMPLE_NN_DEBUG": "2", "SIMPLE_NN_LOG_LEVEL": "info"}):
            config.reload()
            self.assertEqual(config.debug_level(), 2)
            self.assertEqual(config.log_level(), "INFO")

    def test_getenv_coerces_to_default_type(self):
        with mock.patch.dict(os.environ, {"SIMPLE_NN_TEST_VALUE": "7"}):
            self.assertEqual(config.getenv("SIMPLE_NN_TEST_VALUE", 0), 7)
            self.assertEqual(config.getenv("SIMPLE_NN_TEST_MISSING", "x"), "x")

    def test_invalid_debug_falls_back(self):
        with mock.patch.dict(os.environ, {"SIMPLE_NN_DEBUG": "yes"}):
            config.reload()
            with self.assertWarns(RuntimeWarning):
                self.assertEqual(config.debug_level(), 0)

    def test_invalid_log_level_falls_back(self):
        with mock.patch.dict(os.environ, {"SIMPLE_NN_LOG_LEVEL": "verbose"}):
            config.reload()
            with self.assertWarns(RuntimeWarning):
                self.assertEqual(config.log_level(), "WARNING")


class TestLogger(unittest.TestCase):

    def setUp(self):
        config.reload()
        self.addCleanup(config.reload)
        self.addCleanup(reset_logger, "simple_nn.test")

    def test_configured_once(self):
        logger = get_logger("simple_nn.test", level=logging.INFO)
        again = get_logger("simple_nn.test", level=logging.DEBUG)
        self.assertIs(logger, again)
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.level, logging.INFO)
        self.assertFalse(logger.propagate)

    def test_level_from_env(self):
        with mock.patch.dict(os.environ, {"SIMPLE_NN_LOG_LEVEL": "ERROR", "SIMPLE_NN_DEBUG": "0"}):
            config.reload()
            logger = get_logger("simple_nn.test")
        self.assertEqual(logger.level, logging.ERROR)

    def test_debug_env_forces_debug_level(self):
        with mock.patch.dict(os.environ, {"SIMPLE_NN_LOG_LEVEL": "ERROR", "SIMPLE_NN_DEBUG": "1"}):
            config.reload()
            logger = get_logger("simple_nn.test")
        self.assertEqual(logger.level, logging.DEBUG)

    def test_invalid_env_still_builds_logger(self):
        with mock.patch.dict(os.environ, {"SIMPLE_NN_LOG_LEVEL": "verbose", "SIMPLE_NN_DEBUG": "yes"}):
            config.reload()
            with self.assertWarns(RuntimeWarning):
                logger = get_logger("simple_nn.test")
        self.assertEqual(logger.level, logging.WARNING)

    def test_reset(self):
        logger = get_logger("simple_nn.test")
        reset_logger("simple_nn.test")
        self.assertEqual(logger.handlers, [])
        get_logger("simple_nn.test")
        self.assertEqual(len(logger.handlers), 1)


if __name__ == '__main__':
    unittest.main()
