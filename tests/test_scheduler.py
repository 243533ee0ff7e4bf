import sys
import threading
import unittest
from pathlib import Path
from unittest import mock

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from archiver.config import Config  # noqa: E402
from archiver.scheduler import ArchiveScheduler  # noqa: E402
from archiver.traversal import SweepResult  # noqa: E402


def make_config(days: int = 7) -> Config:
    return Config(
        root_path=Path("/srv/share"),
        temp_path=Path("/srv/archive"),
        frequency_days=days,
        folder_names=("Scans",),
    )


class ArchiveSchedulerTests(unittest.TestCase):
    def test_interval_is_frequency_in_seconds(self):
        scheduler = ArchiveScheduler(make_config(days=3))
        self.assertEqual(3 * 86400, scheduler.interval_seconds)

    def test_run_once_passes_config_and_stop_event(self):
        config = make_config()
        stop = threading.Event()
        sweep_fn = mock.Mock(return_value=SweepResult(archived=2))
        scheduler = ArchiveScheduler(config, stop_event=stop, sweep_fn=sweep_fn)

        result = scheduler.run_once()

        self.assertEqual(2, result.archived)
        sweep_fn.assert_called_once_with(config, stop)

    def test_failed_sweep_is_logged_and_not_raised(self):
        sweep_fn = mock.Mock(side_effect=PermissionError("denied"))
        scheduler = ArchiveScheduler(make_config(), sweep_fn=sweep_fn)

        with self.assertLogs("archiver.scheduler", level="ERROR") as logs:
            result = scheduler.run_once()

        self.assertIsNone(result)
        self.assertIn("Error during archive sweep", "\n".join(logs.output))

    def test_run_forever_sweeps_then_waits_until_stopped(self):
        stop = mock.Mock(spec=threading.Event)
        stop.is_set.return_value = False
        stop.wait.side_effect = [False, False, True]
        sweep_fn = mock.Mock(side_effect=[OSError("listing failed"), SweepResult(), SweepResult()])
        scheduler = ArchiveScheduler(make_config(days=2), stop_event=stop, sweep_fn=sweep_fn)

        with self.assertLogs("archiver.scheduler", level="INFO"):
            sweeps = scheduler.run_forever()

        self.assertEqual(3, sweeps)
        self.assertEqual(3, sweep_fn.call_count)
        stop.wait.assert_called_with(2 * 86400)

    def test_stop_before_start_runs_no_sweep(self):
        sweep_fn = mock.Mock()
        scheduler = ArchiveScheduler(make_config(), sweep_fn=sweep_fn)
        scheduler.stop()

        self.assertEqual(0, scheduler.run_forever())
        sweep_fn.assert_not_called()

    def test_stop_interrupts_the_wait_between_sweeps(self):
        sweep_fn = mock.Mock(return_value=SweepResult())
        scheduler = ArchiveScheduler(make_config(days=365), sweep_fn=sweep_fn)
        worker = threading.Thread(target=scheduler.run_forever)
        worker.start()

        scheduler.stop()
        worker.join(timeout=5)

        self.assertFalse(worker.is_alive())
        self.assertLessEqual(sweep_fn.call_count, 1)


if __name__ == "__main__":
    unittest.main()
