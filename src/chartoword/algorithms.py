#!/usr/bin/env python

"""Defines common algorithms over FSTs: trimming and beam pruning."""
import logging
from collections import deque, defaultdict
from typing import TYPE_CHECKING, Callable, Dict, Set

from chartoword.atomic import MutableAutomaton, all_arcs

if TYPE_CHECKING:
    from .fst import FST

logger = logging.getLogger(__file__)

INF = float("inf")
DELTA = 1.0 / 1024  # slack for float rounding when comparing path costs


def accessible_states(fst: MutableAutomaton) -> Set[int]:
    """States that are on a path from the initial state."""
    if fst.start is None:
        return set()
    explored = {fst.start}
    stack = deque([fst.start])
    while stack:
        source = stack.pop()
        for arc in fst.arcs(source):
            if arc.nextstate not in explored:
                explored.add(arc.nextstate)
                stack.append(arc.nextstate)
    return explored


def coaccessible_states(fst: MutableAutomaton) -> Set[int]:
    """States that have a path to a final state."""
    inverse = defaultdict(set)  # store all preceding states here
    for source, arc in all_arcs(fst):
        inverse[arc.nextstate].add(source)
    zero = fst.semiring.zero()
    coaccessible = {s for s in fst.states() if fst.final(s) != zero}
    stack = deque(coaccessible)
    while stack:
        target = stack.pop()
        for previous in inverse[target]:
            if previous not in coaccessible:
                coaccessible.add(previous)
                stack.append(previous)
    return coaccessible


def connect(fst: MutableAutomaton) -> MutableAutomaton:
    """Remove, in place, states that aren't both accessible and coaccessible,
       and every arc into them. If the initial state goes, the FST ends up
       with no states at all."""
    keep = accessible_states(fst) & coaccessible_states(fst)
    if not keep:
        fst.delete_states()
        return fst
    doomed = [s for s in fst.states() if s not in keep]
    if doomed:
        fst.delete_states(doomed)
    return fst


def shortest_distance(fst: 'FST', cost: Callable[[object], float], reverse: bool = False) -> Dict[int, float]:
    """Scalar shortest distance from the initial state to every state, or with
       reverse = True from every state to a final exit (final weight included).

       `cost` maps a weight to a float. Relaxation is done with a FIFO queue,
       so negative costs are fine as long as there is no negative cycle.
       Unreachable states are absent from the result."""
    if reverse:
        inverse = defaultdict(list)
        for source, arc in all_arcs(fst):
            inverse[arc.nextstate].append((source, arc))
        dist = {s: cost(w) for s, w in fst.finalweights.items()}
        Q = deque(dist)

        def _relax(s):
            for source, arc in inverse[s]:
                yield source, cost(arc.weight)
    else:
        if fst.start is None:
            return {}
        dist = {fst.start: 0.0}
        Q = deque([fst.start])

        def _relax(s):
            for arc in fst.arcs(s):
                yield arc.nextstate, cost(arc.weight)

    queued = set(Q)
    while Q:
        s = Q.popleft()
        queued.discard(s)
        for other, c in _relax(s):
            d = dist[s] + c
            if d < dist.get(other, INF):
                dist[other] = d
                if other not in queued:
                    queued.add(other)
                    Q.append(other)
    return dist


def prune(fst: 'FST', beam: float, graph_scale: float = 1.0, acoustic_scale: float = 1.0) -> 'FST':
    """Beam pruning, in place. Remove every arc and final weight that lies only on
       paths costing more than `beam` above the best path, then connect.

       Costs are computed with the scales applied; the stored weights are
       left untouched."""
    if beam < 0:
        raise ValueError("The pruning beam must be non-negative")
    if beam == INF or fst.start is None:
        return fst

    def cost(w):
        return fst.semiring.cost(w, graph_scale=graph_scale, acoustic_scale=acoustic_scale)

    alpha = shortest_distance(fst, cost)
    beta = shortest_distance(fst, cost, reverse=True)
    best = beta.get(fst.start, INF)
    if best == INF:
        logger.warning("No path to a final state; pruning removes everything")
        return connect(fst)
    cutoff = best + beam + DELTA

    arcs_before = fst.num_arcs()
    for s in list(fst.states()):
        if s not in alpha:
            continue
        fst.transitions[s] = [arc for arc in fst.arcs(s)
                              if alpha[s] + cost(arc.weight) + beta.get(arc.nextstate, INF) <= cutoff]
        if s in fst.finalweights and alpha[s] + cost(fst.finalweights[s]) > cutoff:
            del fst.finalweights[s]
    connect(fst)
    logger.debug(f"Pruned {arcs_before - fst.num_arcs()} of {arcs_before} arcs with beam {beam}")
    return fst
