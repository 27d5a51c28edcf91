import contextlib
import subprocess
import sys

_SPECIFIER_PREFIXES = ("ark,t:", "ark:")


def check_graphviz_installed():
    """True if the graphviz `dot` executable can be run."""
    try:
        subprocess.run(["dot", "-V"], check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        return True
    except (subprocess.CalledProcessError, FileNotFoundError):
        return False


def strip_specifier(spec: str) -> str:
    """Drop a Kaldi-style `ark:` / `ark,t:` prefix from a read/write specifier."""
    for prefix in _SPECIFIER_PREFIXES:
        if spec.startswith(prefix):
            return spec[len(prefix):]
    return spec


@contextlib.contextmanager
def open_specifier(spec: str, mode: str = 'rt'):
    """Open a path for text I/O, where '-' means stdin or stdout.
       The standard streams are never closed."""
    path = strip_specifier(spec)
    if path == '-':
        yield sys.stdout if 'w' in mode else sys.stdin
    else:
        with open(path, mode, encoding='utf-8') as fh:
            yield fh
