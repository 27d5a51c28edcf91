from collections import deque, defaultdict
from typing import Dict, Any, List, Iterable, Iterator, Optional, Sequence, Tuple, cast
from os import PathLike

from chartoword.atomic import Arc, EPSILON, all_arcs
from chartoword.semiring import Semiring, TropicalSemiring
from chartoword._private import util
from chartoword._private.exceptions import LatticeFormatError


class FST:
    # ==================
    # Initializers
    # ==================

    def __init__(self, semiring: Optional[Semiring] = None):
        """Creates an empty weighted FST: no states and no start state.

        :param semiring: the weight algebra of arcs and final weights, tropical by default

        States are integers handed out by `add_state` in increasing order.
        Ids of deleted states are not reused (until all states are deleted),
        so states surviving a `connect` keep the ids they had. Arcs leaving
        a state are kept in the order they were added.
        """
        self.semiring = semiring if semiring is not None else TropicalSemiring()
        """The Semiring of all weights in the FST"""
        self.initialstate: Optional[int] = None
        """The initial (start) state of the FST, None if unset"""
        self.transitions: Dict[int, List[Arc]] = {}
        """Outgoing arcs of each state, keyed by state id"""
        self.finalweights: Dict[int, Any] = {}
        """Final weights of the final states only"""
        self.isymbols: Optional[List[Tuple[int, str]]] = None
        self.osymbols: Optional[List[Tuple[int, str]]] = None
        self._nextstate = 0

    @classmethod
    def from_arcs(cls, arcs: Iterable[Sequence], finals=(), start: Optional[int] = 0,
                  semiring: Optional[Semiring] = None) -> 'FST':
        """Build an FST from arc tuples (src, dst, ilabel, olabel[, weight]).

           Keyword arguments:
           finals -- a dict {state: weight}, or an iterable of states (final with weight one)
           start -- the start state, 0 by default
           States 0..max(mentioned state) are all created, so ids match the arguments.
        """
        fst = cls(semiring)
        one = fst.semiring.one()
        for arc in arcs:
            src, dst, ilabel, olabel = arc[:4]
            weight = arc[4] if len(arc) > 4 else one
            fst._add_up_to(max(src, dst))
            fst.add_arc(src, Arc(dst, ilabel, olabel, weight))
        if not isinstance(finals, dict):
            finals = {s: one for s in finals}
        for state, weight in finals.items():
            fst._add_up_to(state)
            fst.set_final(state, weight)
        if start is not None:
            fst._add_up_to(start)
            fst.set_start(start)
        return fst

    @classmethod
    def from_attstring(cls, attstr: str, semiring: Optional[Semiring] = None, first_line: int = 1) -> 'FST':
        """Read the AT&T text form of an FST.

        Each line is either an arc or a final state:

          src dst ilabel olabel [weight]
          state [weight]

        A missing weight means the semiring's one. The source state of the first
        line is the start state. Labels must be integers (0 is epsilon).
        `first_line` is the line number of the first line of `attstr`, used in
        error messages when the string is part of a larger file."""
        fst = cls(semiring)
        one = fst.semiring.one()
        for lineno, line in enumerate(attstr.split("\n"), start=first_line):
            fields = line.split()
            if not fields:
                continue
            try:
                if len(fields) in (4, 5):
                    src, dst, ilabel, olabel = (int(f) for f in fields[:4])
                    weight = fst.semiring.parse(fields[4]) if len(fields) == 5 else one
                    if min(src, dst, ilabel, olabel) < 0:
                        raise ValueError("states and labels must be non-negative")
                    fst._add_up_to(max(src, dst))
                    fst.add_arc(src, Arc(dst, ilabel, olabel, weight))
                elif len(fields) in (1, 2):
                    src = int(fields[0])
                    weight = fst.semiring.parse(fields[1]) if len(fields) == 2 else one
                    if src < 0:
                        raise ValueError("states must be non-negative")
                    fst._add_up_to(src)
                    fst.set_final(src, weight)
                else:
                    raise ValueError(f"expected 1, 2, 4 or 5 fields, found {len(fields)}")
            except ValueError as e:
                raise LatticeFormatError(str(e), lineno) from e
            if fst.initialstate is None:
                fst.set_start(src)
        return fst

    def to_attstring(self) -> str:
        """Generate the AT&T text form of the FST, start state first.

        If symbol tables are attached (isymbols/osymbols) the labels are
        written as symbol names instead of numbers. Weights equal to one are
        omitted."""
        isyms = dict(self.isymbols) if self.isymbols is not None else {}
        osyms = dict(self.osymbols) if self.osymbols is not None else {}
        one = self.semiring.one()
        lines = []
        for s in self._ordered_states():
            for arc in self.transitions[s]:
                fields = [str(s), str(arc.nextstate),
                          isyms.get(arc.ilabel, str(arc.ilabel)),
                          osyms.get(arc.olabel, str(arc.olabel))]
                if arc.weight != one:
                    fields.append(self.semiring.format(arc.weight))
                lines.append("\t".join(fields))
        for s in self._ordered_states():
            if s in self.finalweights:
                w = self.finalweights[s]
                lines.append(str(s) if w == one else f"{s}\t{self.semiring.format(w)}")
        return "".join(line + "\n" for line in lines)

    # ==================
    # Saving and Loading
    # ==================

    def save_att(self, path: PathLike):
        """Save to an AT&T format text file."""
        with open(path, "wt", encoding="utf-8") as outfh:
            outfh.write(self.to_attstring())

    @classmethod
    def load_att(cls, path: PathLike, semiring: Optional[Semiring] = None) -> 'FST':
        """Load an FST from an AT&T format text file with integer labels."""
        with open(path, "rt", encoding="utf-8") as infh:
            return cls.from_attstring(infh.read(), semiring)

    # ==================
    # States and arcs
    # ==================

    @property
    def start(self) -> Optional[int]:
        return self.initialstate

    @property
    def finalstates(self) -> set:
        """The set of states with a final weight other than zero."""
        return set(self.finalweights)

    def set_start(self, state: Optional[int]):
        if state is not None and state not in self.transitions:
            raise KeyError(f"No such state: {state}")
        self.initialstate = state

    def add_state(self) -> int:
        """Add a new non-final state and return its id."""
        state = self._nextstate
        self._nextstate += 1
        self.transitions[state] = []
        return state

    def _add_up_to(self, state: int):
        while self._nextstate <= state:
            self.add_state()

    def states(self) -> Iterator[int]:
        """All state ids, in increasing order."""
        return iter(list(self.transitions))

    def arcs(self, state: int) -> List[Arc]:
        """The arcs leaving state, in insertion order."""
        return self.transitions[state]

    def add_arc(self, state: int, arc: Arc) -> Arc:
        if state not in self.transitions or arc.nextstate not in self.transitions:
            raise KeyError(f"Arc {state} -> {arc.nextstate} has an endpoint that is not a state")
        self.transitions[state].append(arc)
        return arc

    def final(self, state: int):
        """The final weight of state; the semiring's zero if it is not final."""
        if state not in self.transitions:
            raise KeyError(f"No such state: {state}")
        return self.finalweights.get(state, self.semiring.zero())

    def set_final(self, state: int, weight=None):
        """Make state final with weight (one by default). A zero weight makes it non-final."""
        if state not in self.transitions:
            raise KeyError(f"No such state: {state}")
        if weight is None:
            weight = self.semiring.one()
        if self.semiring.is_zero(weight):
            self.finalweights.pop(state, None)
        else:
            self.finalweights[state] = weight

    def delete_states(self, states: Optional[Iterable[int]] = None):
        """Delete the given states and every arc into them.
           With no argument, delete all states and start numbering from 0 again."""
        if states is None:
            self.transitions, self.finalweights = {}, {}
            self.initialstate = None
            self._nextstate = 0
            return
        doomed = set(states)
        for s in doomed:
            self.transitions.pop(s, None)
            self.finalweights.pop(s, None)
        for s in self.transitions:
            self.delete_arcs_to(s, doomed)
        if self.initialstate in doomed:
            self.initialstate = None

    def delete_arcs_to(self, state: int, targets):
        """Remove all arcs from state to any state in the set targets."""
        self.transitions[state] = [a for a in self.transitions[state] if a.nextstate not in targets]

    def num_states(self) -> int:
        return len(self.transitions)

    def num_arcs(self, state: Optional[int] = None) -> int:
        """Arcs leaving state, or all arcs in the FST if state is None."""
        if state is not None:
            return len(self.transitions[state])
        return sum(len(arcs) for arcs in self.transitions.values())

    def _ordered_states(self) -> List[int]:
        if self.initialstate is None:
            return list(self.transitions)
        return [self.initialstate] + [s for s in self.transitions if s != self.initialstate]

    # ==================
    # Paths
    # ==================

    def paths(self) -> Iterator[Tuple[Tuple[int, ...], Tuple[int, ...], Any]]:
        """A generator to yield all start-to-final paths as (ilabels, olabels, weight),
           with epsilons left out and the final weight included. Breadth-first,
           so it only terminates on acyclic FSTs."""
        if self.initialstate is None:
            return
        combine = self.semiring.combine
        Q = deque([(self.initialstate, self.semiring.one(), (), ())])
        while Q:
            s, w, ilabels, olabels = Q.popleft()
            if s in self.finalweights:
                yield ilabels, olabels, combine(w, self.finalweights[s])
            for arc in self.transitions[s]:
                Q.append((arc.nextstate, combine(w, arc.weight),
                          ilabels + ((arc.ilabel,) if arc.ilabel != EPSILON else ()),
                          olabels + ((arc.olabel,) if arc.olabel != EPSILON else ())))

    # ==================
    # Rendering
    # ==================

    def view(self, show_weights=False) -> 'graphviz.Digraph':
        """Creates a 'graphviz.Digraph' object to view the FST. Will automatically display the FST in Jupyter.

            :param show_weights: force display of weights even if they are all one
            :return: A Digraph object which will automatically display in Jupyter.

           Labels are shown as symbol names when symbol tables are attached.
           If you would like to display the FST from a non-Jupyter environment, please use :code:`FST.render`
        """
        import graphviz
        if not util.check_graphviz_installed():
            raise EnvironmentError("Graphviz executable not found. Please install [Graphviz](https://www.graphviz.org/download/). On macOS, use `brew install graphviz`.")

        one = self.semiring.one()
        isyms = dict(self.isymbols) if self.isymbols is not None else {}
        osyms = dict(self.osymbols) if self.osymbols is not None else {}
        if show_weights == False:
            show_weights = any(arc.weight != one for _, arc in all_arcs(self)) or \
                any(w != one for w in self.finalweights.values())

        def _weight_format(w):
            return "/" + self.semiring.format(w) if show_weights else ""

        def _sym_fmt(label, syms):  # Use greek lunate epsilon symbol U+03F5
            return '&#x03f5;' if label == EPSILON else syms.get(label, str(label))

        def _node(s):
            return str(s) + (_weight_format(self.finalweights[s]) if s in self.finalweights else "")

        g = graphviz.Digraph('FST', graph_attr={"rankdir": "LR"})
        g.attr(rankdir='LR', size='8,5')
        for s in self.transitions:
            shape = 'doublecircle' if s in self.finalweights else 'circle'
            style = 'filled, bold' if s == self.initialstate else 'filled'
            g.node(_node(s), shape=shape, style=style)
        for s in self.transitions:
            grouped = defaultdict(list)
            for arc in self.transitions[s]:
                ilabel, olabel = _sym_fmt(arc.ilabel, isyms), _sym_fmt(arc.olabel, osyms)
                label = ilabel if ilabel == olabel else f"{ilabel}:{olabel}"
                grouped[arc.nextstate].append(label + _weight_format(arc.weight))
            for target, labels in grouped.items():
                g.edge(_node(s), _node(target), label=graphviz.nohtml(', '.join(sorted(labels))))
        return g

    def render(self, view=True, filename: str='FST', format='pdf', tight=True):
        """
        Renders the FST to a file and optionally opens the file.
        :param view: If True, the rendered file will be opened.
        :param format: The file format for the Digraph. Typically 'pdf', 'png', or 'svg'. View all formats: https://graphviz.org/docs/outputs/
        :param tight: If False, the rendered file will have whitespace margins around the graph.
        """
        import graphviz
        digraph = cast(graphviz.Digraph, self.view())
        digraph.format = format
        if tight:
            digraph.graph_attr['margin'] = '0' # Remove padding
        digraph.render(view=view, filename=filename, cleanup=True)

    # ==================
    # Magic Methods
    # ==================

    def __copy__(self):
        return self.copy()

    def __len__(self):
        """Return the number of states."""
        return len(self.transitions)

    def __str__(self):
        """Generate an AT&T string representing the FST."""
        return self.to_attstring()

    def __repr__(self):
        return f'{self.__class__.__name__}({len(self)} states, {self.num_arcs()} arcs, {self.semiring.name})'

    # ==================
    # Utilities
    # ==================

    def copy(self) -> 'FST':
        """Copy the FST, keeping state ids."""
        newfst = self.__class__(self.semiring)
        newfst.initialstate = self.initialstate
        newfst.transitions = {s: [Arc(a.nextstate, a.ilabel, a.olabel, a.weight) for a in arcs]
                              for s, arcs in self.transitions.items()}
        newfst.finalweights = dict(self.finalweights)
        newfst.isymbols, newfst.osymbols = self.isymbols, self.osymbols
        newfst._nextstate = self._nextstate
        return newfst

    def is_acyclic(self) -> bool:
        """True if no cycle is reachable from the start state."""
        WHITE, GRAY, BLACK = 0, 1, 2
        if self.initialstate is None:
            return True
        color = {self.initialstate: GRAY}
        stack = [(self.initialstate, iter(self.transitions[self.initialstate]))]
        while stack:
            u, it = stack[-1]
            arc = next(it, None)
            if arc is None:
                stack.pop()
                color[u] = BLACK
                continue
            c = color.get(arc.nextstate, WHITE)
            if c == WHITE:
                color[arc.nextstate] = GRAY
                stack.append((arc.nextstate, iter(self.transitions[arc.nextstate])))
            elif c == GRAY:
                return False
        return True
