"""
cmdparse tokenizer: lexical classification of raw argument strings.

Every raw token is classified by syntax alone (leading '-'/'--', presence of '='),
without consulting any registry:

- "--"                 → Terminator (end of options; every later token is positional)
- "--name[=value]"     → LongOption(name, inline)
- "-chars[=value]"     → ShortCluster(chars, inline)
- "-" / anything else  → Positional(text)

Inline values are split on the first '=' only; everything after it is kept
verbatim ("--define=a=b" → name "define", inline "a=b"). An '=' with nothing
after it yields an empty inline value (""), while no '=' yields None.

ValueCandidate is never produced here: it is the form a raw token takes once the
matcher decides to consume it as the value of the preceding option.
"""
from typing import NamedTuple


class LongOption(NamedTuple):
    """'--name' or '--name=value'."""
    name: str
    inline: str | None = None
    index: int = 0


class ShortCluster(NamedTuple):
    """'-x', '-xyz' or '-xyz=value' (one or more grouped short names)."""
    chars: str
    inline: str | None = None
    index: int = 0


class Positional(NamedTuple):
    text: str
    index: int = 0


class ValueCandidate(NamedTuple):
    """a raw token consumed as an option value."""
    text: str
    index: int = 0


class Terminator(NamedTuple):
    """the '--' end-of-options marker."""
    index: int = 0


def classify(token, /, index=0):
    """
    classify one raw token.

    parameters
    - token: str
      the raw argument string.
    - index: int
      the 1-based position of the token in the argument vector (0 when unknown);
      carried along so faults can name the position.

    returns
    - LongOption | ShortCluster | Positional | Terminator
    """
    if not isinstance(token, str):
        raise TypeError("classify() argument must be a string")

    if token == "--":
        return Terminator(index)

    if token.startswith("--"):
        name, sep, inline = token[2:].partition("=")
        return LongOption(name, inline if sep else None, index)

    if token.startswith("-") and len(token) > 1:
        chars, sep, inline = token[1:].partition("=")
        return ShortCluster(chars, inline if sep else None, index)

    return Positional(token, index)


def looks_like_option(token, /):
    """
    whether a raw token would classify as an option (or the '--' marker).

    used by the value lookahead: an option-looking token is never swallowed as the
    value of the option before it.
    """
    return isinstance(token, str) and token.startswith("-") and token != "-"


def tokenize(args, /, start=1):
    """
    lazily classify a sequence of raw tokens.

    - after a Terminator, every remaining token is yielded as Positional, whatever
      it looks like.
    - the generator holds no state outside itself: calling tokenize() again on the
      same sequence restarts the classification from the beginning.
    """
    ended = False
    for index, token in enumerate(args, start):
        if ended:
            yield Positional(token, index)
            continue
        unit = classify(token, index)
        ended = isinstance(unit, Terminator)
        yield unit


__all__ = (
    "LongOption",
    "ShortCluster",
    "Positional",
    "ValueCandidate",
    "Terminator",
    "classify",
    "looks_like_option",
    "tokenize",
)
