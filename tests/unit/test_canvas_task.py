import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "apps" / "desktop"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "engine"))

try:
    from PySide6.QtCore import QCoreApplication, QEvent, QObject, QTimer

    from picoraster_app.canvas import QtPeriodicTask
except ImportError as exc:  # pragma: no cover - depends on the Qt runtime libraries
    QtPeriodicTask = None
    _IMPORT_ERROR = str(exc)
else:
    _IMPORT_ERROR = ""


@unittest.skipIf(QtPeriodicTask is None, f"Qt unavailable: {_IMPORT_ERROR}")
class QtPeriodicTaskTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QCoreApplication.instance() or QCoreApplication([])

    def _flush_deletes(self):
        QCoreApplication.sendPostedEvents(None, QEvent.Type.DeferredDelete)

    def test_start_then_cancel(self):
        parent = QObject()
        task = QtPeriodicTask(parent)
        task.start(1000, lambda: None)
        self.assertTrue(task.active)
        task.cancel()
        self.assertFalse(task.active)

    def test_cancelled_timers_do_not_pile_up_under_the_parent(self):
        parent = QObject()
        for _ in range(5):
            task = QtPeriodicTask(parent)
            task.start(1000, lambda: None)
            task.cancel()
        self._flush_deletes()
        self.assertEqual(parent.findChildren(QTimer), [])

    def test_cancel_twice_is_harmless(self):
        task = QtPeriodicTask(QObject())
        task.start(1000, lambda: None)
        task.cancel()
        task.cancel()
        self.assertFalse(task.active)

    def test_cancel_without_start(self):
        parent = QObject()
        task = QtPeriodicTask(parent)
        task.cancel()
        self._flush_deletes()
        self.assertEqual(parent.findChildren(QTimer), [])


if __name__ == "__main__":
    unittest.main()
