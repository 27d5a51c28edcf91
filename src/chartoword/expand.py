#!/usr/bin/env python

"""Collapse runs of fine-grained labels into single arcs.

Turns a character-level lattice into a word-level one: every sub-path lying
between two delimiter arcs (or between a delimiter arc and a final state)
becomes one arc whose labels are the interned label sequences of the
sub-path and whose weight is the product of the sub-path's weights.

Keep in mind that this expansion has an exponential cost. With no
delimiters at all, every complete path of the source becomes one arc of the
result. Delimiters keep the growth in check in practice; for a hard bound,
limit the word length with `max_length` and/or beam-prune the source first
(see `chartoword.algorithms.prune`). Sub-paths are not shared between
different word-start states, and cycles are not detected: a cycle without
delimiters and an unbounded `max_length` makes the expansion run forever.
"""

import enum
import logging
from typing import Callable, Collection, List, Optional, Tuple

from chartoword.algorithms import connect
from chartoword.atomic import Arc, Automaton, MutableAutomaton, EPSILON
from chartoword.fst import FST
from chartoword.intern import LabelSequenceInterner

logger = logging.getLogger(__file__)


class MatchSide(enum.Enum):
    """Which tape of an arc is tested against the delimiters, and whose length
       counts towards max_length."""
    INPUT = 'input'
    OUTPUT = 'output'


def expand(source: Automaton,
           delimiters: Collection[int],
           max_length: Optional[int] = None,
           match_side: MatchSide = MatchSide.OUTPUT,
           ilabel_interner: Optional[LabelSequenceInterner] = None,
           olabel_interner: Optional[LabelSequenceInterner] = None,
           dest: Optional[MutableAutomaton] = None,
           trim: Callable[[MutableAutomaton], object] = connect) -> MutableAutomaton:
    """Expand source into an automaton over label sequences.

    :param source: the automaton to expand, left untouched
    :param delimiters: labels that separate words; must not contain epsilon (0)
    :param max_length: the most non-epsilon labels (on match_side) in a word;
                       longer runs are dropped, not truncated. None for no limit.
    :param match_side: the tape tested against delimiters, output by default
    :param ilabel_interner: gives ids to input label sequences; a fresh one if None
    :param olabel_interner: gives ids to output label sequences; defaults to
                            ilabel_interner, so both tapes share one symbol space
    :param dest: the automaton to write into (emptied first); a new FST over
                 source's semiring if None
    :param trim: called on the result to drop states not on a start-to-final path
    :return: dest

    Arcs whose match_side label is a delimiter are kept as they are, relabeled
    with one-label sequences, and their target states start new words, as does
    the start state. From every word-start state all delimiter-free paths are
    followed; whenever one arrives at a state that is final or has a delimiter
    arc leaving it, an arc for the whole run is added. States keep their
    relative order, and the result never has more states than source.
    """
    assert source is not None, "source automaton is None"
    if ilabel_interner is None:
        ilabel_interner = LabelSequenceInterner()
    if olabel_interner is None:
        olabel_interner = ilabel_interner
    if dest is None:
        dest = FST(source.semiring)
    else:
        dest.delete_states()
    semiring = source.semiring
    match_input = match_side == MatchSide.INPUT
    limit = float("inf") if max_length is None else max_length

    # The output has, at most, as many states as the input.
    statemap = {}
    for s in source.states():
        statemap[s] = dest.add_state()
    if source.start is None:
        trim(dest)
        return dest
    dest.set_start(statemap[source.start])

    # Words may begin at the start state and after every delimiter.
    # Delimiter arcs are copied over as one-label words.
    wordstarts = {source.start: None}
    for s in source.states():
        dest.set_final(statemap[s], source.final(s))
        for arc in source.arcs(s):
            match_label = arc.ilabel if match_input else arc.olabel
            if match_label in delimiters:
                ilabel = ilabel_interner.intern((arc.ilabel,) if arc.ilabel != EPSILON else ())
                olabel = olabel_interner.intern((arc.olabel,) if arc.olabel != EPSILON else ())
                dest.add_arc(statemap[s], Arc(statemap[arc.nextstate], ilabel, olabel, arc.weight))
                wordstarts.setdefault(arc.nextstate, None)

    # (word start, current state, weight so far, input labels, output labels)
    stack: List[Tuple[int, int, object, Tuple[int, ...], Tuple[int, ...]]] = \
        [(q, q, semiring.one(), (), ()) for q in wordstarts]
    logger.debug(f"Expanding from {len(stack)} word-start states")
    zero = semiring.zero()
    emitted = pruned = 0
    while stack:
        q0, q1, w, ilabels, olabels = stack.pop()
        has_delimiter_arc = False
        for arc in source.arcs(q1):
            match_label = arc.ilabel if match_input else arc.olabel
            if match_label in delimiters:
                has_delimiter_arc = True
                continue
            length = len(ilabels) if match_input else len(olabels)
            if match_label != EPSILON:
                length += 1
            if length > limit:
                pruned += 1
                continue
            stack.append((q0, arc.nextstate, semiring.combine(w, arc.weight),
                          (ilabels + (arc.ilabel,)) if arc.ilabel != EPSILON else ilabels,
                          (olabels + (arc.olabel,)) if arc.olabel != EPSILON else olabels))

        # The run ends here if q1 is final or a delimiter leaves it.
        if q0 != q1 and (has_delimiter_arc or source.final(q1) != zero):
            dest.add_arc(statemap[q0], Arc(statemap[q1],
                                           ilabel_interner.intern(ilabels),
                                           olabel_interner.intern(olabels), w))
            emitted += 1

    logger.debug(f"Added {emitted} word arcs, dropped {pruned} extensions longer than {max_length}")
    trim(dest)
    return dest
