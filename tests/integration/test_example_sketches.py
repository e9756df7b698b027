import sys
import unittest
from dataclasses import replace
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "engine"))

from picoraster_engine import FrameContext, InputSnapshot, Ok, compile_source, rasterize

EXAMPLES = ROOT / "examples"


class ExampleSketchTests(unittest.TestCase):
    def test_mandelbrot_is_a_still_sketch(self):
        result = compile_source((EXAMPLES / "mandelbrot.py").read_text(encoding="utf-8"))
        self.assertIsInstance(result, Ok)
        _source, ns = result.value
        self.assertEqual((ns.width, ns.height, ns.loop), (800, 800, False))
        self.assertEqual(len(ns.color(10, 10)), 3)

    def test_metaballs_follow_the_mouse(self):
        result = compile_source((EXAMPLES / "metaballs.py").read_text(encoding="utf-8"))
        source, ns = result.value
        self.assertTrue(ns.loop)

        # Render a small crop around the pointer to keep the test quick.
        crop = replace(ns, width=8, height=8)
        frame = rasterize(source, crop, FrameContext(frame_number=0, input=InputSnapshot(mouse_x=4, mouse_y=4)))
        self.assertIsInstance(frame, Ok)
        data = frame.value.bytes
        center = (4 * 8 + 4) * 4
        self.assertEqual(tuple(data[center : center + 4]), (255, 255, 255, 255))

        far = rasterize(source, crop, FrameContext(frame_number=1, input=InputSnapshot(mouse_x=300, mouse_y=300)))
        self.assertEqual(set(far.value.bytes[0::4]), {0})


if __name__ == "__main__":
    unittest.main()
