from typing import Any, Iterable, Iterator, Optional

from typing_extensions import Protocol, runtime_checkable

from chartoword.semiring import Semiring

EPSILON = 0


class Arc:
    """A weighted arc. The source state is implicit: arcs are stored per state."""
    __slots__ = ['nextstate', 'ilabel', 'olabel', 'weight']

    def __init__(self, nextstate: int, ilabel: int, olabel: int, weight):
        self.nextstate = nextstate
        self.ilabel = ilabel
        self.olabel = olabel
        self.weight = weight

    def __eq__(self, other):
        if not isinstance(other, Arc):
            return NotImplemented
        return (self.nextstate, self.ilabel, self.olabel, self.weight) == \
               (other.nextstate, other.ilabel, other.olabel, other.weight)

    def __hash__(self):
        return hash((self.nextstate, self.ilabel, self.olabel, self.weight))

    def __repr__(self):
        return f'Arc({self.nextstate}, {self.ilabel}, {self.olabel}, {self.weight!r})'


@runtime_checkable
class Automaton(Protocol):
    """What the expansion reads from a weighted automaton.

       Any container with these members will do; `chartoword.fst.FST`
       is the one shipped with the package."""

    semiring: Semiring

    @property
    def start(self) -> Optional[int]: ...

    def states(self) -> Iterable[int]: ...

    def arcs(self, state: int) -> Iterable[Arc]: ...

    def final(self, state: int) -> Any: ...


@runtime_checkable
class MutableAutomaton(Automaton, Protocol):
    """An automaton that the expansion can also write into."""

    def add_state(self) -> int: ...

    def add_arc(self, state: int, arc: Arc) -> Arc: ...

    def set_start(self, state: Optional[int]) -> None: ...

    def set_final(self, state: int, weight=None) -> None: ...

    def delete_states(self, states: Optional[Iterable[int]] = None) -> None: ...


def all_arcs(fst: Automaton) -> Iterator:
    """Enumerate all arcs (state, Arc) of an automaton."""
    for state in fst.states():
        for arc in fst.arcs(state):
            yield state, arc
