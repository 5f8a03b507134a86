import logging
import unittest

from enrollcal.logging_config import LOG_FORMAT, setup_logging


class TestSetupLogging(unittest.TestCase):
    def setUp(self) -> None:
        self.root = logging.getLogger()
        self.saved_level = self.root.level
        self.saved_handlers = list(self.root.handlers)
        self.root.handlers = []

    def tearDown(self) -> None:
        self.root.handlers = self.saved_handlers
        self.root.setLevel(self.saved_level)

    def test_verbose_shows_debug(self) -> None:
        setup_logging(verbose=True)
        self.assertEqual(self.root.level, logging.DEBUG)

    def test_default_shows_warnings_only(self) -> None:
        setup_logging()
        self.assertEqual(self.root.level, logging.WARNING)
        self.assertEqual(len(self.root.handlers), 1)
        handler = self.root.handlers[0]
        self.assertIsInstance(handler, logging.StreamHandler)
        self.assertEqual(handler.formatter._fmt, LOG_FORMAT)

    def test_existing_handlers_are_kept(self) -> None:
        existing = logging.NullHandler()
        self.root.addHandler(existing)
        setup_logging(verbose=True)
        self.assertEqual(self.root.handlers, [existing])
        self.assertEqual(self.root.level, logging.DEBUG)


if __name__ == "__main__":
    unittest.main()
