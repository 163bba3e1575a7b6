"""
Raw flag collection: turn a flat token list into {flag: [values...]}.

Grammar
- "--name v1 v2"  → {"name": ["v1", "v2"]}
- "--name"        → {"name": []}
- "-x v1 v2"      → {"x": ["v1", "v2"]}
- "-xyz"          → {"x": [], "y": []}   (bundled switches, last character dropped)

Values are munched greedily until the next token that starts with "--". Tokens that
start with a single "-" are munched as plain values, so "--offset -1" keeps its
negative number. Bare tokens that do not follow a flag are ignored.

No type knowledge is applied here; see argstruct.kinds for coercion.
"""
from collections.abc import Iterable

LONG = "--"
SHORT = "-"


def _munch(tokens, index, /):
    """
    return the index of the first token at or after `index` that opens a long flag.
    """
    while index < len(tokens) and not tokens[index].startswith(LONG):
        index += 1
    return index


def collect(tokens: Iterable[str], /) -> dict[str, list[str]]:
    """
    Collect flags and their raw values, preserving first-seen key order.

    Repeated flags accumulate: ["--tag", "a", "--tag", "b"] → {"tag": ["a", "b"]}.
    A bundled cluster registers every character but the last as a presence-only
    key and never consumes the tokens after it; keys that already hold values
    keep them.

    >>> collect(["-ab", "--foo", "asdf", "asdf"])
    {'a': [], 'foo': ['asdf', 'asdf']}
    """
    tokens = list(tokens)
    result = {}
    index = 0

    while index < len(tokens):
        token = tokens[index]
        index += 1

        if token.startswith(LONG):
            key = token[len(LONG):]
        elif token.startswith(SHORT) and len(token) > len(SHORT) + 1:
            # Bunch of switches stuck together
            for key in token[len(SHORT):-1]:
                result.setdefault(key, [])
            continue
        elif token.startswith(SHORT):
            key = token[len(SHORT):]
        else:
            # Stray positional outside any flag
            continue

        end = _munch(tokens, index)
        result.setdefault(key, []).extend(tokens[index:end])
        index = end

    return result


__all__ = (
    "collect",
)
