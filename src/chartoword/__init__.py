from chartoword.fst import FST
from chartoword.atomic import Arc, Automaton, MutableAutomaton, EPSILON
from chartoword.semiring import Semiring, TropicalSemiring, LatticeSemiring, get_semiring
from chartoword.intern import LabelSequenceInterner
from chartoword.symbols import build_symbol_table, write_symbol_table, read_symbol_table
from chartoword.expand import expand, MatchSide
from chartoword.algorithms import connect, prune
from chartoword.driver import ConversionOptions, SymbolScope, convert_lattices, parse_delimiters
from chartoword._private.exceptions import ChartowordError, ConfigurationError, SymbolTableError, LatticeFormatError

__author__     = "The chartoword developers"
__copyright__  = "Copyright 2026"
__license__    = "Apache"
__version__    = "1.0"
__status__     = "Prototype"
