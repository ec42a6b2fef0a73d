import unittest
from topmem.RecordFormatter import RecordFormatter
from topmem.models import LogRecord
from helpers import sample


class TestRecordFormatter(unittest.TestCase):
    def setUp(self):
        self.formatter = RecordFormatter()

    def test_field_order(self):
        line = self.formatter.format(1700000000, sample(42, 1000, "python3 -m http.server 8000"))
        self.assertEqual(line, "1700000000 1000 500 4000 42 python3 -m http.server 8000")

    def test_single_line_no_trailing_newline(self):
        line = self.formatter.format(1, sample(1, 10))
        self.assertNotIn("\n", line)
        self.assertFalse(line.endswith(" "))

    def test_command_recovered_after_fifth_space(self):
        command = "bash -c  'echo  a   b'  "
        s = sample(7, 123, command)
        line = self.formatter.format(1700000001, s)
        fields = line.split(" ", 5)
        self.assertEqual(len(fields), 6)
        self.assertTrue(all(f.isdigit() for f in fields[:5]))
        self.assertEqual(fields[5], command)

    def test_parse_is_inverse_of_format(self):
        s = sample(99, 2048, "/usr/lib/firefox/firefox -contentproc -childID 3")
        record = self.formatter.parse(self.formatter.format(1700000002, s))
        self.assertEqual(record, LogRecord(epoch=1700000002, sample=s))

    def test_parse_rejects_malformed(self):
        for line in ("", "1 2 3 4 5", "1 2 x 4 5 cmd", "a b c d e f"):
            with self.assertRaises(ValueError):
                self.formatter.parse(line)


if __name__ == '__main__':
    unittest.main()
