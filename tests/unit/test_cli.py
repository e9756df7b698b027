import io
import json
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "apps" / "desktop"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "engine"))

from picoraster_app.cli import build_parser, installed_version


def _invoke(argv):
    args = build_parser().parse_args(argv)
    out = io.StringIO()
    with redirect_stdout(out):
        rc = args.func(args)
    return rc, json.loads(out.getvalue())


class CliParserTests(unittest.TestCase):
    def test_run_command(self):
        args = build_parser().parse_args(["run", "--sketch", "s.py"])
        self.assertEqual(args.command, "run")
        self.assertEqual(args.sketch, "s.py")

    def test_render_command(self):
        args = build_parser().parse_args(
            ["render", "s.py", "--out", "o.png", "--frames", "4", "--mouse", "10", "20", "--mouse-down"]
        )
        self.assertEqual(args.command, "render")
        self.assertEqual(args.frames, 4)
        self.assertEqual(args.mouse, [10, 20])
        self.assertTrue(args.mouse_down)


class CliCommandTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _sketch(self, text):
        path = self.tmp / "sketch.py"
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_check_ok(self):
        rc, payload = _invoke(["check", self._sketch("width = 64\nloop = False\ndef color(x, y):\n    return [0, 0, 0]\n")])
        self.assertEqual(rc, 0)
        self.assertEqual(payload, {"ok": True, "width": 64, "height": 800, "loop": False})

    def test_check_error(self):
        rc, payload = _invoke(["check", self._sketch("width = 64\n")])
        self.assertEqual(rc, 1)
        self.assertFalse(payload["ok"])
        self.assertEqual(payload["error"], "color is not defined")

    def test_render_looping_sketch_with_mouse(self):
        sketch = self._sketch(
            "width = 4\nheight = 4\n"
            "def color(x, y, frame, mx, my, down):\n"
            "    return [frame * 10, mx, 255 if down else 0]\n"
        )
        out = self.tmp / "frame.png"
        rc, payload = _invoke(["render", sketch, "--out", str(out), "--frames", "3", "--mouse", "7", "9", "--mouse-down", "--scale", "2"])
        self.assertEqual(rc, 0)
        self.assertTrue(payload["success"])
        self.assertEqual(payload["frames"], 3)
        self.assertEqual(payload["size"], [8, 8])
        with Image.open(out) as img:
            self.assertEqual(img.convert("RGBA").getpixel((0, 0)), (20, 7, 255, 255))

    def test_render_failure(self):
        sketch = self._sketch("width = 2\nheight = 2\nloop = False\ndef color(x, y):\n    return [1 / 0, 0, 0]\n")
        out = self.tmp / "frame.png"
        rc, payload = _invoke(["render", sketch, "--out", str(out)])
        self.assertEqual(rc, 1)
        self.assertEqual(payload["error"], "division by zero")
        self.assertFalse(out.exists())


class CliSettingsTests(unittest.TestCase):
    def test_settings_reports_version_and_sections(self):
        rc, payload = _invoke(["settings"])
        self.assertEqual(rc, 0)
        self.assertEqual(payload["version"], installed_version())
        self.assertIn("render", payload["settings"])
        self.assertTrue(payload["path"].endswith("config.json"))


if __name__ == "__main__":
    unittest.main()
