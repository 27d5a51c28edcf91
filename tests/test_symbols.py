import io
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from chartoword.intern import LabelSequenceInterner
from chartoword.symbols import build_symbol_table, write_symbol_table, read_symbol_table, sequence_name
from chartoword._private.exceptions import SymbolTableError


class TestSymbolTable(unittest.TestCase):
    """Naming interned sequences"""

    def setUp(self):
        self.interner = LabelSequenceInterner()
        for seq in ([1, 2], [3], [12, 7, 100]):
            self.interner.intern(seq)

    def test_build(self):
        self.assertEqual(build_symbol_table(self.interner),
                         [(0, "0"), (1, "1_2"), (2, "3"), (3, "12_7_100")])

    def test_separator(self):
        self.assertEqual(build_symbol_table(self.interner, separator="-")[1], (1, "1-2"))
        self.assertEqual(sequence_name((), separator="-"), "0")

    def test_build_from_mapping(self):
        table = {(): 0, (9, 9): 2, (4,): 1}
        self.assertEqual(build_symbol_table(table), [(0, "0"), (1, "4"), (2, "9_9")])

    def test_duplicate_id(self):
        with self.assertRaises(SymbolTableError):
            build_symbol_table({(): 0, (1,): 1, (2,): 1})

    def test_missing_id(self):
        with self.assertRaises(SymbolTableError):
            build_symbol_table({(): 0, (1,): 2})
        with self.assertRaises(SymbolTableError):
            build_symbol_table({(1,): 1})

    def test_write_and_read(self):
        entries = build_symbol_table(self.interner)
        out = io.StringIO()
        write_symbol_table(entries, out)
        self.assertEqual(out.getvalue(), "0\t0\n1_2\t1\n3\t2\n12_7_100\t3\n")
        self.assertEqual(read_symbol_table(io.StringIO(out.getvalue())), entries)
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "words.txt"
            write_symbol_table(entries, path)
            self.assertEqual(path.read_text(encoding="utf-8"), out.getvalue())
            self.assertEqual(read_symbol_table(path), entries)

    def test_write_failure(self):
        with TemporaryDirectory() as tmpdir:
            with self.assertRaises(OSError):
                write_symbol_table([(0, "0")], Path(tmpdir) / "missing" / "words.txt")

    def test_read_errors(self):
        with self.assertRaises(SymbolTableError):
            read_symbol_table(io.StringIO("0\t0\nfoo\n"))
        with self.assertRaises(SymbolTableError):
            read_symbol_table(io.StringIO("0\tzero\n"))


if __name__ == "__main__":
    unittest.main()
