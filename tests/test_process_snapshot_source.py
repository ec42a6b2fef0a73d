import os
import unittest
from unittest.mock import patch

import psutil

from topmem.ProcessSnapshotSource import ProcessSnapshotSource
from topmem.models import ProcessSample
from topmem.utils.errors import SourceUnavailable
from helpers import FakeProc, proc


class TestProcessSnapshotSource(unittest.TestCase):
    def setUp(self):
        self.source = ProcessSnapshotSource()

    def test_capture_converts_to_kilobytes(self):
        procs = [proc(1, 12, vms_kb=160, data_kb=8, cmdline=["/sbin/init", "splash"], name="systemd")]
        with patch("topmem.ProcessSnapshotSource.psutil.process_iter", return_value=iter(procs)):
            snapshot = self.source.capture()
        self.assertEqual(snapshot, [ProcessSample(pid=1, resident_kb=12, nominal_size_kb=8,
                                                  virtual_kb=160, command="/sbin/init splash")])

    def test_capture_keeps_source_order(self):
        procs = [proc(5, 10), proc(2, 30), proc(9, 20)]
        with patch("topmem.ProcessSnapshotSource.psutil.process_iter", return_value=iter(procs)):
            snapshot = self.source.capture()
        self.assertEqual([s.pid for s in snapshot], [5, 2, 9])

    def test_command_with_spaces_is_verbatim(self):
        procs = [proc(3, 1, cmdline=["python3", "my script.py", "--name", "a  b"])]
        with patch("topmem.ProcessSnapshotSource.psutil.process_iter", return_value=iter(procs)):
            snapshot = self.source.capture()
        self.assertEqual(snapshot[0].command, "python3 my script.py --name a  b")

    def test_newline_in_argument_does_not_split_record(self):
        procs = [proc(3, 1, cmdline=["sh", "-c", "echo a\necho b"])]
        with patch("topmem.ProcessSnapshotSource.psutil.process_iter", return_value=iter(procs)):
            snapshot = self.source.capture()
        self.assertNotIn("\n", snapshot[0].command)

    def test_kernel_thread_shown_in_brackets(self):
        procs = [proc(2, 0, cmdline=[], name="kthreadd")]
        with patch("topmem.ProcessSnapshotSource.psutil.process_iter", return_value=iter(procs)):
            snapshot = self.source.capture()
        self.assertEqual(snapshot[0].command, "[kthreadd]")

    def test_access_denied_fields_default_to_zero(self):
        procs = [FakeProc({"pid": 77, "name": "secret", "cmdline": None, "memory_info": None})]
        with patch("topmem.ProcessSnapshotSource.psutil.process_iter", return_value=iter(procs)):
            snapshot = self.source.capture()
        self.assertEqual(snapshot, [ProcessSample(77, 0, 0, 0, "[secret]")])

    def test_enumeration_failure_raises_source_unavailable(self):
        with patch("topmem.ProcessSnapshotSource.psutil.process_iter", side_effect=OSError("no /proc")):
            with self.assertRaises(SourceUnavailable):
                self.source.capture()
        with patch("topmem.ProcessSnapshotSource.psutil.process_iter", side_effect=psutil.Error("boom")):
            with self.assertRaises(SourceUnavailable):
                self.source.capture()

    def test_live_capture_includes_current_process(self):
        snapshot = self.source.capture()
        pids = {s.pid for s in snapshot}
        self.assertIn(os.getpid(), pids)
        me = next(s for s in snapshot if s.pid == os.getpid())
        self.assertGreater(me.resident_kb, 0)


if __name__ == '__main__':
    unittest.main()
