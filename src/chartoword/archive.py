"""Text archives of lattices.

An archive holds any number of keyed lattices. Each entry is a key on a line
of its own, the AT&T text form of the lattice (see `FST.from_attstring`),
and an empty line:

    utt1
    0	1	5	5	1.5,2.0
    1	2	3	3
    2

    utt2
    ...
"""

from typing import Iterator, Optional, TextIO, Tuple

from chartoword.fst import FST
from chartoword.semiring import Semiring, LatticeSemiring
from chartoword._private.exceptions import LatticeFormatError


def read_archive(fh: TextIO, semiring: Optional[Semiring] = None) -> Iterator[Tuple[str, FST]]:
    """Yield (key, FST) for each entry of a text archive. Weights are read
       with semiring (two-cost lattice weights by default)."""
    if semiring is None:
        semiring = LatticeSemiring()
    key, body, bodystart = None, [], 0
    for lineno, line in enumerate(fh, start=1):
        line = line.rstrip("\n")
        if key is None:
            if line.strip() == "":
                continue
            fields = line.split()
            if len(fields) != 1:
                raise LatticeFormatError(f"expected a lattice key, found {line!r}", lineno)
            key, body, bodystart = fields[0], [], lineno + 1
        elif line.strip() == "":
            yield key, FST.from_attstring("\n".join(body), semiring, first_line=bodystart)
            key = None
        else:
            body.append(line)
    if key is not None:
        yield key, FST.from_attstring("\n".join(body), semiring, first_line=bodystart)


def write_archive(fh: TextIO, key: str, fst: FST):
    """Append one keyed lattice to a text archive."""
    if not key or len(key.split()) != 1:
        raise ValueError(f"Lattice keys must be non-empty and contain no whitespace: {key!r}")
    fh.write(key + "\n")
    fh.write(fst.to_attstring())
    fh.write("\n")
