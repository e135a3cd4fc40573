import logging
import unittest

from connect4net.debug import DebugLevel, DebugManager, LEVEL_MAP


class TestDebugManager(unittest.TestCase):
    def setUp(self):
        self.manager = DebugManager(name="connect4net.tests")

    def test_level_filters_messages(self):
        self.manager.configure(level=DebugLevel.INFO)
        with self.assertLogs(self.manager.logger, level=logging.DEBUG) as logs:
            self.manager.info("shown", "net")
            self.manager.debug("hidden", "net")
        self.assertEqual(len(logs.records), 1)
        self.assertEqual(logs.records[0].getMessage(), "[net] shown")

    def test_component_filter(self):
        self.manager.configure(level=DebugLevel.DEBUG, components=["session"])
        with self.assertLogs(self.manager.logger, level=logging.DEBUG) as logs:
            self.manager.debug("kept", "session")
            self.manager.debug("dropped", "board")
            self.manager.warning("no component is always kept")
        messages = [r.getMessage() for r in logs.records]
        self.assertEqual(messages, ["[session] kept", "no component is always kept"])

    def test_trace_sits_below_debug(self):
        self.manager.configure(level=DebugLevel.TRACE)
        with self.assertLogs(self.manager.logger, level=LEVEL_MAP[DebugLevel.TRACE]) as logs:
            self.manager.trace("byte 3", "net")
        self.assertEqual(logs.records[0].getMessage(), "TRACE: [net] byte 3")
        self.assertLess(logs.records[0].levelno, logging.DEBUG)

    def test_disabled(self):
        self.manager.configure(level=DebugLevel.INFO, enabled=False)
        with self.assertLogs(self.manager.logger, level=logging.DEBUG) as logs:
            self.manager.error("dropped")
            self.manager.configure(enabled=True)
            self.manager.error("kept")
        self.assertEqual([r.getMessage() for r in logs.records], ["kept"])

    def test_set_from_string(self):
        self.manager.set_from_string("debug")
        self.assertEqual(self.manager.level, DebugLevel.DEBUG)
        self.manager.configure(level=DebugLevel.NONE)
        self.manager.set_from_string("loud")
        self.assertEqual(self.manager.level, DebugLevel.NONE)

    def test_timers(self):
        self.manager.start_timer("epoch")
        self.assertGreaterEqual(self.manager.end_timer("epoch"), 0.0)
        self.assertIsNone(self.manager.end_timer("epoch"))


if __name__ == '__main__':
    unittest.main()
