"""The conversion loop: prune, expand and label a stream of lattices."""

import enum
import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, Optional, Tuple

from chartoword.algorithms import prune
from chartoword.expand import MatchSide, expand
from chartoword.fst import FST
from chartoword.intern import LabelSequenceInterner
from chartoword.semiring import Semiring
from chartoword.symbols import build_symbol_table
from chartoword._private.exceptions import ConfigurationError

logger = logging.getLogger(__file__)


class SymbolScope(enum.Enum):
    """How long one interner lives.

       SHARED: one interner for all lattices, never reset, giving a single
       symbol table for the whole run (written out by the caller at the end).
       PER_LATTICE: the interner is reset before each lattice and the
       resulting table is attached to that lattice."""
    SHARED = 'shared'
    PER_LATTICE = 'per-lattice'


def parse_delimiters(text: str) -> FrozenSet[int]:
    """Parse whitespace-separated delimiter labels, e.g. "3 4"."""
    delimiters = set()
    for token in text.split():
        try:
            label = int(token)
        except ValueError:
            raise ConfigurationError(f"Delimiter symbols must be integers, found {token!r}") from None
        if label == 0:
            raise ConfigurationError("Epsilon (0) cannot be a delimiter symbol!")
        if label < 0:
            raise ConfigurationError(f"Delimiter symbols must be positive, found {label}")
        delimiters.add(label)
    return frozenset(delimiters)


@dataclass
class ConversionOptions:
    delimiters: FrozenSet[int] = field(default_factory=frozenset)
    max_length: Optional[int] = None
    match_side: MatchSide = MatchSide.OUTPUT
    acoustic_scale: float = 1.0
    graph_scale: float = 1.0
    beam: float = float("inf")
    scope: SymbolScope = SymbolScope.PER_LATTICE

    def validate(self, semiring: Optional[Semiring] = None) -> 'ConversionOptions':
        """Raise ConfigurationError unless the options make sense. Returns self.

           With a semiring, also check that its weights can be scaled for pruning."""
        if 0 in self.delimiters:
            raise ConfigurationError("Epsilon (0) cannot be a delimiter symbol!")
        if self.graph_scale <= 0.0 or self.acoustic_scale <= 0.0:
            raise ConfigurationError("--acoustic-scale and --graph-scale must be strictly greater than 0.0!")
        if self.max_length is not None and self.max_length < 0:
            raise ConfigurationError(f"--max-length must be non-negative, got {self.max_length}")
        if self.beam < 0.0:
            raise ConfigurationError(f"--beam must be non-negative, got {self.beam}")
        if semiring is not None and self.beam != float("inf"):
            try:
                semiring.cost(semiring.one(), self.graph_scale, self.acoustic_scale)
            except ValueError as e:
                raise ConfigurationError(str(e)) from None
        return self


def convert_lattices(lattices: Iterable[Tuple[str, FST]], options: ConversionOptions,
                     interner: Optional[LabelSequenceInterner] = None) -> Iterator[Tuple[str, FST]]:
    """Expand each (key, lattice) into a word lattice, yielding (key, word lattice).

    :param lattices: character lattices; they are pruned in place
    :param options: validated before the first lattice is read
    :param interner: the symbol space; with SymbolScope.SHARED pass your own and
                     read it after the loop to get the global symbol table

    Input and output labels share the interner."""
    options.validate()
    if interner is None:
        interner = LabelSequenceInterner()
    for key, lat in lattices:
        states, arcs = lat.num_states(), lat.num_arcs()
        if options.beam != float("inf"):
            options.validate(lat.semiring)
            prune(lat, options.beam, graph_scale=options.graph_scale, acoustic_scale=options.acoustic_scale)
        if options.scope == SymbolScope.PER_LATTICE:
            interner.reset()
        olat = expand(lat, options.delimiters, max_length=options.max_length,
                      match_side=options.match_side,
                      ilabel_interner=interner, olabel_interner=interner)
        if options.scope == SymbolScope.PER_LATTICE:
            olat.isymbols = olat.osymbols = build_symbol_table(interner)
        if olat.num_states() == 0:
            logger.warning(f"Lattice {key} is empty after expansion")
        logger.info(f"Lattice {key}: {states} states, {arcs} arcs -> "
                    f"{olat.num_states()} states, {olat.num_arcs()} arcs")
        yield key, olat
