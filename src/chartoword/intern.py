from typing import Dict, Iterable, Iterator, Tuple

LabelSequence = Tuple[int, ...]


class LabelSequenceInterner:
    """Gives every distinct sequence of labels a stable integer id.

       Ids are handed out in first-seen order. The empty sequence is always
       id 0, the epsilon label, so an arc whose run collapsed to nothing stays
       an epsilon arc. Sequences are compared by value and order, so [1, 2]
       and [2, 1] get different ids.

       The interner is not thread-safe. Several automata may share one
       interner (one symbol space for all of them); callers running
       expansions in parallel must then serialize the calls to `intern`."""

    def __init__(self):
        self._ids: Dict[LabelSequence, int] = {(): 0}
        self._sequences = [()]

    def intern(self, seq: Iterable[int]) -> int:
        """Return the id of seq, assigning the next unused id if it is new."""
        key = tuple(seq)
        label = self._ids.get(key)
        if label is None:
            label = len(self._sequences)
            self._ids[key] = label
            self._sequences.append(key)
        return label

    def lookup(self, label: int) -> LabelSequence:
        """The sequence that was given id label."""
        if not 0 <= label < len(self._sequences):
            raise KeyError(f"No sequence has id {label}")
        return self._sequences[label]

    def reset(self):
        """Forget everything but the empty sequence."""
        self._ids = {(): 0}
        self._sequences = [()]

    def items(self) -> Iterator[Tuple[LabelSequence, int]]:
        """(sequence, id) pairs in id order."""
        return ((seq, label) for label, seq in enumerate(self._sequences))

    def __len__(self):
        return len(self._sequences)

    def __contains__(self, seq):
        return tuple(seq) in self._ids

    def __iter__(self):
        return iter(list(self._sequences))

    def __repr__(self):
        return f'{self.__class__.__name__}({len(self)} sequences)'
