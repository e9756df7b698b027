import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "engine"))

from picoraster_engine.compiler import compile_source
from picoraster_engine.scheduler import SteppedTask
from picoraster_engine.session import DEFAULT_SKETCH, RunSession
from picoraster_engine.surface import ImageSurface


class SessionTests(unittest.TestCase):
    def setUp(self):
        self.tasks = []
        self.running_events = []
        self.error_events = []
        self.surface = ImageSurface()
        self.session = RunSession(self.surface, self._factory)
        self.session.on_running_changed(self.running_events.append)
        self.session.on_error_changed(self.error_events.append)

    def _factory(self):
        task = SteppedTask()
        self.tasks.append(task)
        return task

    def test_default_sketch(self):
        self.assertEqual(self.session.text, DEFAULT_SKETCH)
        _source, ns = compile_source(DEFAULT_SKETCH).value
        self.assertEqual((ns.width, ns.height, ns.loop), (800, 800, True))
        self.assertEqual(list(ns.color(400, 200)), [127.5, 63.75, 255])

    def test_start_stop(self):
        self.session.set_text("width = 2\nheight = 2\ndef color(x, y):\n    return [0, 0, 0]\n")
        self.session.start()
        self.assertTrue(self.session.running)
        self.assertEqual(len(self.session.handles), 1)
        self.tasks[0].run(2)
        self.assertEqual(self.surface.paint_count, 2)

        self.session.stop()
        self.assertFalse(self.session.running)
        self.assertEqual(self.session.handles, [])
        self.assertFalse(self.tasks[0].active)
        self.assertEqual(self.running_events, [True, False])

        self.session.stop()
        self.assertEqual(self.running_events, [True, False])

    def test_restart_cancels_previous_schedule(self):
        self.session.set_text("width = 1\nheight = 1\ndef color(x, y):\n    return [0, 0, 0]\n")
        self.session.start()
        self.session.set_running(True)
        self.assertEqual(len(self.tasks), 2)
        self.assertFalse(self.tasks[0].active)
        self.assertTrue(self.tasks[1].active)
        self.assertEqual(len(self.session.handles), 1)
        self.assertEqual(self.running_events, [True])

    def test_error_then_fixed_run_clears_message(self):
        self.session.set_text("def color(x, y)\n")
        with self.assertLogs("picoraster.engine.session", level="WARNING"):
            self.session.start()
        self.assertFalse(self.session.running)
        self.assertTrue(self.session.error)
        self.assertEqual(self.running_events, [True, False])

        self.session.set_text("width = 1\nheight = 1\nloop = False\ndef color(x, y):\n    return [0, 0, 0]\n")
        self.session.start()
        self.assertEqual(self.session.error, "")
        self.assertEqual(self.error_events[-1], "")
        self.assertFalse(self.session.running)
        self.assertEqual(self.surface.paint_count, 1)


if __name__ == "__main__":
    unittest.main()
