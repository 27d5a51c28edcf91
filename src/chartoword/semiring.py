#!/usr/bin/env python

"""Semiring weights for lattices.

A semiring is consumed by the expansion only through `one`, `zero`,
`combine` and `is_zero`. Weights themselves are plain immutable values
(floats or tuples of floats), so the semiring objects are stateless and
can be shared freely."""

import math
from typing import Tuple

INF = float("inf")


class Semiring:
    """Base class for the weight algebras an FST may carry."""

    name = 'abstract'

    def one(self):
        """Identity for combine (the weight of an empty path)."""
        raise NotImplementedError('one')

    def zero(self):
        """The 'no path' weight. A state whose final weight is zero is not final."""
        raise NotImplementedError('zero')

    def combine(self, a, b):
        """Extend a path of weight a with an arc of weight b. Must be associative."""
        raise NotImplementedError('combine')

    def is_zero(self, w) -> bool:
        return w == self.zero()

    def cost(self, w, graph_scale=1.0, acoustic_scale=1.0) -> float:
        """A single float cost for w, lower is better. Used by beam pruning."""
        raise NotImplementedError('cost')

    def parse(self, token: str):
        """Read a weight from its text form."""
        raise NotImplementedError('parse')

    def format(self, w) -> str:
        """Text form of a weight, the inverse of parse."""
        raise NotImplementedError('format')

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        return f'{self.__class__.__name__}()'


def _float_format(num: float) -> str:
    if num == INF:
        return 'inf'
    if num == -INF:
        return '-inf'
    return repr(float(num))


def _float_parse(token: str) -> float:
    value = float(token)
    if math.isnan(value):
        raise ValueError(f"weight is not a number: {token!r}")
    return value


class TropicalSemiring(Semiring):
    """Weights are costs (negative log probabilities); a path costs the sum of its arcs."""

    name = 'tropical'

    def one(self) -> float:
        return 0.0

    def zero(self) -> float:
        return INF

    def combine(self, a: float, b: float) -> float:
        return a + b

    def cost(self, w: float, graph_scale=1.0, acoustic_scale=1.0) -> float:
        if graph_scale != acoustic_scale:
            raise ValueError("A tropical weight has a single cost and cannot be scaled "
                             "with different graph and acoustic scales")
        return w * graph_scale

    def parse(self, token: str) -> float:
        return _float_parse(token)

    def format(self, w: float) -> str:
        return _float_format(w)


class LatticeSemiring(Semiring):
    """Pairs (graph_cost, acoustic_cost), the two-cost weight of speech
       recognition lattices. Combination adds each component separately;
       the components only meet again when a scalar cost is needed."""

    name = 'lattice'

    def one(self) -> Tuple[float, float]:
        return (0.0, 0.0)

    def zero(self) -> Tuple[float, float]:
        return (INF, INF)

    def combine(self, a: Tuple[float, float], b: Tuple[float, float]) -> Tuple[float, float]:
        return (a[0] + b[0], a[1] + b[1])

    def cost(self, w: Tuple[float, float], graph_scale=1.0, acoustic_scale=1.0) -> float:
        return graph_scale * w[0] + acoustic_scale * w[1]

    def parse(self, token: str) -> Tuple[float, float]:
        fields = token.split(',')
        if len(fields) != 2:
            raise ValueError(f"lattice weight must look like 'graph,acoustic': {token!r}")
        return (_float_parse(fields[0]), _float_parse(fields[1]))

    def format(self, w: Tuple[float, float]) -> str:
        return f"{_float_format(w[0])},{_float_format(w[1])}"


SEMIRINGS = {s.name: s for s in (TropicalSemiring(), LatticeSemiring())}


def get_semiring(name: str) -> Semiring:
    """Look up a semiring by name ('tropical' or 'lattice')."""
    try:
        return SEMIRINGS[name]
    except KeyError:
        raise ValueError(f"Unknown semiring {name!r}; choose from {sorted(SEMIRINGS)}") from None
