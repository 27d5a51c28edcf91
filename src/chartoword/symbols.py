"""Symbol tables for interned label sequences.

A sequence is named by its labels in decimal, joined with '_', so the
sequence [12, 7] is called "12_7". The empty sequence (epsilon) is "0".
Tables are written in the OpenFst text layout, one `name<TAB>id` per line."""

from os import PathLike
from typing import List, Mapping, TextIO, Tuple, Union

from chartoword.intern import LabelSequenceInterner
from chartoword._private.exceptions import SymbolTableError

SymbolTable = List[Tuple[int, str]]

EPSILON_NAME = "0"


def sequence_name(seq, separator: str = "_") -> str:
    """The printable name of a label sequence."""
    if len(seq) == 0:
        return EPSILON_NAME
    return separator.join(str(label) for label in seq)


def build_symbol_table(table: Union[LabelSequenceInterner, Mapping], separator: str = "_") -> SymbolTable:
    """Turn interned sequences into a list of (id, name) sorted by id.

       :param table: a LabelSequenceInterner, or any mapping from sequence to id
       :param separator: placed between the labels of a name

       Raises SymbolTableError if two sequences share an id, or if the ids are
       not exactly 0..n-1. Neither can happen with a LabelSequenceInterner."""
    items = table.items()
    byid = {}
    for seq, label in items:
        name = sequence_name(seq, separator)
        if label in byid:
            raise SymbolTableError(f"Sequences {byid[label]!r} and {name!r} were both given id {label}")
        byid[label] = name
    for label in range(len(byid)):
        if label not in byid:
            raise SymbolTableError(f"No sequence has id {label} although {len(byid)} ids were assigned")
    return sorted(byid.items())


def write_symbol_table(entries: SymbolTable, dest: Union[str, PathLike, TextIO]):
    """Write (id, name) entries as text, one `name<TAB>id` line each.
       dest is a path or an open text file. I/O errors propagate as OSError."""
    if hasattr(dest, 'write'):
        for label, name in entries:
            print(f"{name}\t{label}", file=dest)
        return
    with open(dest, "wt", encoding="utf-8") as outfh:
        write_symbol_table(entries, outfh)


def read_symbol_table(src: Union[str, PathLike, TextIO]) -> SymbolTable:
    """Read a text symbol table back into a list of (id, name) sorted by id."""
    if not hasattr(src, 'read'):
        with open(src, "rt", encoding="utf-8") as infh:
            return read_symbol_table(infh)
    entries = []
    for lineno, line in enumerate(src, start=1):
        fields = line.split()
        if not fields:
            continue
        if len(fields) != 2:
            raise SymbolTableError(f"line {lineno}: expected 'name id', found {line.rstrip()!r}")
        name, label = fields
        try:
            entries.append((int(label), name))
        except ValueError:
            raise SymbolTableError(f"line {lineno}: id is not an integer: {label!r}") from None
    return sorted(entries)
