#!/usr/bin/env python3

"""lattice-char-to-word: convert character lattices into word lattices."""

import argparse
import logging
import sys

from chartoword.archive import read_archive, write_archive
from chartoword.driver import ConversionOptions, SymbolScope, convert_lattices, parse_delimiters
from chartoword.intern import LabelSequenceInterner
from chartoword.semiring import get_semiring, SEMIRINGS
from chartoword.symbols import build_symbol_table, write_symbol_table
from chartoword._private.exceptions import ChartowordError, ConfigurationError
from chartoword._private.util import open_specifier

logger = logging.getLogger(__file__)

DESCRIPTION = """\
Convert character-level lattices into word-level lattices by expanding the
subpaths in between any of two separator symbols.

Keep in mind that this lattice expansion has an exponential cost. For
instance, if the set of separator symbols was empty, all paths from the input
lattice would be expanded, so that each arc in the output lattice would be a
full path from the input lattice.

However, the exponential growth is constrained by the use of separator
symbols, and make the tool practical in real scenarios.

In addition, there are two pruning mechanisms to prevent the output lattices
from exploding:

1. You can prune the character lattices before expanding with the --beam
   option.
2. You can set a maximum length for the output words with the --max-length
   option. Any path with a word longer than this number of characters will be
   removed from the output path.
"""

EPILOG = 'e.g.: lattice-char-to-word "3 4" ark:1.lat ark:1-words.lat'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='lattice-char-to-word', description=DESCRIPTION, epilog=EPILOG,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument('separator_symbols', help='whitespace-separated separator labels, e.g. "3 4"')
    parser.add_argument('lat_rspecifier', help="input lattice archive ('-' for stdin)")
    parser.add_argument('lat_wspecifier', help="output lattice archive ('-' for stdout)")
    parser.add_argument('--acoustic-scale', type=float, default=1.0,
                        help='Scaling factor for acoustic likelihoods in the lattices.')
    parser.add_argument('--graph-scale', type=float, default=1.0,
                        help='Scaling factor for graph probabilities in the lattices.')
    parser.add_argument('--beam', type=float, default=float('inf'),
                        help='Pruning beam (applied after acoustic scaling and adding the insertion penalty).')
    parser.add_argument('--save-symbols', default='',
                        help='If given, all lattices will use the same symbol table which will be written '
                             'to this destination file. If not provided, each lattice contains its own symbol table.')
    parser.add_argument('--max-length', type=int, default=None,
                        help='Max. length (in characters) for a word.')
    parser.add_argument('--semiring', choices=sorted(SEMIRINGS), default='lattice',
                        help='Weight type of the lattices: graph,acoustic cost pairs or single costs.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debugging information.')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s (%(name)s) %(message)s')
    semiring = get_semiring(args.semiring)
    try:
        options = ConversionOptions(
            delimiters=parse_delimiters(args.separator_symbols),
            max_length=args.max_length,
            acoustic_scale=args.acoustic_scale,
            graph_scale=args.graph_scale,
            beam=args.beam,
            scope=SymbolScope.SHARED if args.save_symbols else SymbolScope.PER_LATTICE,
        ).validate(semiring)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    interner = LabelSequenceInterner()
    count = 0
    try:
        with open_specifier(args.lat_rspecifier, 'rt') as infh, \
                open_specifier(args.lat_wspecifier, 'wt') as outfh:
            for key, olat in convert_lattices(read_archive(infh, semiring), options, interner):
                write_archive(outfh, key, olat)
                count += 1
    except (ChartowordError, OSError) as e:
        logger.error(str(e))
        return 1
    logger.info(f"Converted {count} lattices")

    if options.scope == SymbolScope.SHARED:
        try:
            write_symbol_table(build_symbol_table(interner), args.save_symbols)
        except OSError as e:
            logger.error(f"Could not write symbol table to {args.save_symbols}: {e}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
