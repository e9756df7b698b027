import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "engine"))

from picoraster_engine.input_state import InputState
from picoraster_engine.runner import describe_error, run
from picoraster_engine.scheduler import NO_SCHEDULE, SteppedTask
from picoraster_engine.surface import ImageSurface

FAIL_AT_5_5 = (
    "width = 10\nheight = 10\n{loop}"
    "def color(x, y):\n"
    "    if x == 5 and y == 5:\n"
    "        raise ValueError('pixel 5,5 exploded')\n"
    "    return [0, 0, 0]\n"
)


class RunHarness:
    def __init__(self, surface=None):
        self.running = []
        self.errors = []
        self.handles = []
        self.tasks = []
        self.surface = surface or ImageSurface()
        self.input_state = InputState()

    def factory(self):
        task = SteppedTask()
        self.tasks.append(task)
        return task

    def run(self, text):
        run(
            text,
            self.running.append,
            self.errors.append,
            self.handles.append,
            surface=self.surface,
            input_state=self.input_state,
            task_factory=self.factory,
        )


class RunnerTests(unittest.TestCase):
    def test_still_sketch(self):
        h = RunHarness()
        h.run("width = 3\nheight = 2\nloop = False\ndef color(x, y):\n    return [9, 9, 9]\n")
        self.assertEqual(h.running, [False])
        self.assertEqual(h.errors, [])
        self.assertEqual(h.handles, [NO_SCHEDULE])
        self.assertEqual(h.tasks, [])
        self.assertEqual(h.surface.paint_count, 1)
        self.assertEqual((h.surface.width, h.surface.height), (3, 2))

    def test_looping_sketch_registers_live_handle(self):
        h = RunHarness()
        h.run("width = 2\nheight = 2\ndef color(x, y, f):\n    return [f, 0, 0]\n")
        self.assertEqual(h.running, [])
        self.assertEqual(len(h.handles), 1)
        self.assertTrue(h.handles[0].active)
        h.tasks[0].run(4)
        self.assertEqual(h.surface.paint_count, 4)
        self.assertEqual(h.surface.image.getpixel((0, 0))[0], 3)

        h.handles[0].cancel()
        self.assertFalse(h.tasks[0].active)

    def test_compile_error(self):
        h = RunHarness()
        h.run("def color(x, y):\n    return [0, 0, 0]\nraise KeyError('nope')\n")
        self.assertEqual(h.running, [False])
        self.assertEqual(h.errors, ["KeyError: 'nope'"])
        self.assertEqual(h.handles, [NO_SCHEDULE])
        self.assertEqual(h.surface.paint_count, 0)
        self.assertIsNone(h.surface.image)

    def test_frame_error_in_loop(self):
        h = RunHarness()
        h.run(FAIL_AT_5_5.format(loop=""))
        h.tasks[0].run(3)
        self.assertEqual(h.errors, ["pixel 5,5 exploded"])
        self.assertEqual(h.running, [False])
        self.assertEqual(h.surface.paint_count, 0)
        self.assertFalse(h.handles[0].active)
        self.assertEqual(h.tasks[0].ticks, 1)

    def test_frame_error_in_still_sketch(self):
        h = RunHarness()
        h.run(FAIL_AT_5_5.format(loop="loop = False\n"))
        self.assertEqual(h.errors, ["pixel 5,5 exploded"])
        self.assertEqual(h.running, [False])
        self.assertEqual(h.handles, [NO_SCHEDULE])
        self.assertEqual(h.surface.paint_count, 0)

    def test_host_failure_still_registers_handle(self):
        class NoResize(ImageSurface):
            def resize(self, width, height):
                raise RuntimeError("canvas missing")

        h = RunHarness(surface=NoResize())
        with self.assertLogs("picoraster.engine.runner", level="ERROR"):
            h.run("def color(x, y):\n    return [0, 0, 0]\n")
        self.assertEqual(h.errors, ["canvas missing"])
        self.assertEqual(h.running, [False])
        self.assertEqual(h.handles, [NO_SCHEDULE])

    def test_describe_error(self):
        self.assertEqual(describe_error(ValueError("x")), "x")
        self.assertEqual(describe_error(ValueError()), "ValueError")
        self.assertEqual(describe_error(42), "42")


if __name__ == "__main__":
    unittest.main()
