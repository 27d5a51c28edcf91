import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from chartoword.atomic import Arc, MutableAutomaton
from chartoword.fst import FST
from chartoword.semiring import LatticeSemiring, TropicalSemiring
from chartoword._private import util
from chartoword._private.exceptions import LatticeFormatError


class TestFST(unittest.TestCase):
    """Test the weighted automaton container"""

    def test_states(self):
        fst = FST()
        self.assertIsInstance(fst, MutableAutomaton)
        self.assertIsNone(fst.start)
        self.assertEqual([fst.add_state() for _ in range(3)], [0, 1, 2])
        fst.set_start(0)
        self.assertEqual(fst.start, 0)
        self.assertEqual(list(fst.states()), [0, 1, 2])
        with self.assertRaises(KeyError):
            fst.set_start(7)

    def test_arcs(self):
        fst = FST()
        s, t = fst.add_state(), fst.add_state()
        fst.add_arc(s, Arc(t, 1, 2, 0.5))
        fst.add_arc(s, Arc(s, 0, 0, 1.0))
        self.assertEqual(fst.arcs(s), [Arc(t, 1, 2, 0.5), Arc(s, 0, 0, 1.0)])
        self.assertEqual(fst.num_arcs(s), 2)
        self.assertEqual(fst.num_arcs(), 2)
        with self.assertRaises(KeyError):
            fst.add_arc(s, Arc(5, 1, 1, 0.0))

    def test_final_weights(self):
        fst = FST()
        s = fst.add_state()
        self.assertEqual(fst.final(s), float("inf"))
        fst.set_final(s)
        self.assertEqual(fst.final(s), 0.0)
        fst.set_final(s, 2.5)
        self.assertEqual(fst.finalstates, {s})
        fst.set_final(s, fst.semiring.zero())
        self.assertEqual(fst.finalstates, set())
        with self.assertRaises(KeyError):
            fst.final(3)

    def test_from_arcs(self):
        fst = FST.from_arcs([(0, 2, 1, 1, 0.5), (2, 4, 2, 3)], finals={4: 1.0})
        self.assertEqual(list(fst.states()), [0, 1, 2, 3, 4])
        self.assertEqual(fst.arcs(2), [Arc(4, 2, 3, 0.0)])
        self.assertEqual(fst.final(4), 1.0)
        self.assertEqual(fst.start, 0)

    def test_delete_states(self):
        fst = FST.from_arcs([(0, 1, 1, 1), (1, 2, 2, 2), (0, 2, 3, 3)], finals=[2])
        fst.delete_states([1])
        self.assertEqual(list(fst.states()), [0, 2])
        self.assertEqual(fst.arcs(0), [Arc(2, 3, 3, 0.0)])
        self.assertEqual(fst.add_state(), 3)  # ids are not reused
        fst.delete_states([0])
        self.assertIsNone(fst.start)
        fst.delete_states()
        self.assertEqual(len(fst), 0)
        self.assertEqual(fst.add_state(), 0)

    def test_copy(self):
        fst = FST.from_arcs([(0, 1, 1, 1, 0.5)], finals=[1])
        other = fst.copy()
        other.arcs(0)[0].weight = 3.0
        other.set_final(0)
        self.assertEqual(fst.arcs(0)[0].weight, 0.5)
        self.assertEqual(fst.finalstates, {1})
        self.assertEqual(other.add_state(), 2)

    def test_paths(self):
        fst = FST.from_arcs([(0, 1, 1, 0, 1.0), (1, 2, 2, 5, 2.0), (0, 2, 3, 3, 0.5)], finals={2: 0.25})
        self.assertEqual(sorted(fst.paths()), [((1, 2), (5,), 3.25), ((3,), (3,), 0.75)])
        self.assertEqual(list(FST().paths()), [])

    def test_is_acyclic(self):
        self.assertTrue(FST.from_arcs([(0, 1, 1, 1), (0, 2, 1, 1), (1, 2, 1, 1)], finals=[2]).is_acyclic())
        self.assertFalse(FST.from_arcs([(0, 1, 1, 1), (1, 0, 1, 1)], finals=[1]).is_acyclic())
        self.assertTrue(FST().is_acyclic())


class TestATT(unittest.TestCase):
    """AT&T text form"""

    def test_round_trip(self):
        text = "0\t1\t5\t5\t1.5,2.0\n1\t2\t3\t0\n2\n1\t0.5,0.0\n"
        fst = FST.from_attstring(text, LatticeSemiring())
        self.assertEqual(fst.start, 0)
        self.assertEqual(fst.arcs(0), [Arc(1, 5, 5, (1.5, 2.0))])
        self.assertEqual(fst.arcs(1), [Arc(2, 3, 0, (0.0, 0.0))])
        self.assertEqual(fst.finalweights, {1: (0.5, 0.0), 2: (0.0, 0.0)})
        self.assertEqual(fst.to_attstring(), "0\t1\t5\t5\t1.5,2.0\n1\t2\t3\t0\n1\t0.5,0.0\n2\n")
        self.assertEqual(str(FST.from_attstring(fst.to_attstring(), LatticeSemiring())), str(fst))

    def test_start_state_written_first(self):
        fst = FST.from_arcs([(0, 1, 1, 1), (1, 2, 2, 2)], finals=[0], start=1)
        self.assertEqual(fst.to_attstring(), "1\t2\t2\t2\n0\t1\t1\t1\n0\n")
        self.assertEqual(FST.from_attstring(fst.to_attstring()).start, 1)

    def test_symbol_names(self):
        fst = FST.from_arcs([(0, 1, 2, 1, 0.5)], finals=[1])
        fst.isymbols = fst.osymbols = [(0, "0"), (1, "3"), (2, "1_2")]
        self.assertEqual(fst.to_attstring(), "0\t1\t1_2\t3\t0.5\n1\n")

    def test_errors(self):
        for text, lineno in [("0 1 2\n", 1), ("0 1 1 1\n\n0 x 1 1\n", 3),
                             ("0 1 -1 1\n", 1), ("0 1 1 1 a\n", 1), ("0 1 1 1\n1 nope\n", 2)]:
            with self.assertRaises(LatticeFormatError) as cm:
                FST.from_attstring(text)
            self.assertEqual(cm.exception.line_number, lineno)
        with self.assertRaises(LatticeFormatError) as cm:
            FST.from_attstring("0 1 1 1 1.0\n", LatticeSemiring(), first_line=10)
        self.assertEqual(cm.exception.line_number, 10)

    def test_empty(self):
        fst = FST.from_attstring("")
        self.assertEqual(len(fst), 0)
        self.assertEqual(fst.to_attstring(), "")

    def test_save_and_load(self):
        fst = FST.from_arcs([(0, 1, 1, 1, 0.5)], finals={1: 2.0})
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "test.fst"
            fst.save_att(path)
            self.assertEqual(FST.load_att(path, TropicalSemiring()).to_attstring(), fst.to_attstring())


class TestRendering(unittest.TestCase):

    @unittest.skipUnless(util.check_graphviz_installed(), "graphviz executable not installed")
    def test_view(self):
        fst = FST.from_arcs([(0, 1, 1, 2, 0.5), (1, 2, 0, 0)], finals=[2])
        fst.isymbols = fst.osymbols = [(0, "0"), (1, "a"), (2, "b")]
        source = fst.view().source
        self.assertIn("a:b/0.5", source)
        self.assertIn("doublecircle", source)


if __name__ == "__main__":
    unittest.main()
