"""
cmdparse faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  (errors and warnings). Codes are grouped by domain to keep logs/searches predictable.
- ParseError / ParseWarning: base types that carry a message, a few structured
  tags (the offending token, option, cluster...) and rendering options; they know
  how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: every parse-time message names the ordinal position of
  the raw token (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.

Integration
- The matcher builds a fault and hands it to Registry.trigger(fault, **context).
- In non-shell mode, errors are raised and warnings go through warnings.warn;
  in shell mode, both are rendered with rich on stderr and errors exit with status 1.
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, rename

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - registry build (101xx)
      • DUPLICATE_NAME
    - option matching (111xx)
      • UNKNOWN_OPTION, MISSING_VALUE, UNEXPECTED_VALUE, AMBIGUOUS_GROUPING,
        DUPLICATE_OPTION, UNCASTABLE_VALUE
    - warnings (121xx)
      • EMPTY_INLINE_VALUE, DEPRECATED_OPTION

    codes are discoverable (searchable in logs and docs) and normalized to a string
    via normalize() so hosts can remap them if desired.
    """
    # --- registry errors (10xxx) ---
    DUPLICATE_NAME              = 10101

    # --- matching errors (11xxx) ---
    UNKNOWN_OPTION              = 11111
    MISSING_VALUE               = 11112
    UNEXPECTED_VALUE            = 11113
    AMBIGUOUS_GROUPING          = 11114
    DUPLICATE_OPTION            = 11115
    UNCASTABLE_VALUE            = 11116

    # --- warnings (12xxx) ---
    EMPTY_INLINE_VALUE          = 12111
    DEPRECATED_OPTION           = 12112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _tag(name, /):
    """
    internal: read-only accessor for a structured tag stored in the fault options.
    """
    @rename(name)
    def getter(self):
        return self.options.get(name)

    return property(getter)


def _render(fault, palette, *, kind):
    """
    internal: build the rich renderable shared by errors and warnings.

    palette keys
    - prog-name, code, <kind>-title, <kind>-message, hint-arrow, hint

    customization
    - a mapping named __styles__ in __main__ overrides any palette entry.
    - a string named __prog__ in __main__ overrides the program name.
    """
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)
    fancy = fault.options.get("fancy", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", fault.options.get("prog") or "cmdparse"), styler("prog-name"))

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(fault.code.normalize() if isinstance(fault.code, FaultCode) else "-", styler("code")),
        " | ",
        text(fault.title.title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(fault.options.get("hint"), styler("hint")))

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left", width=fault.options.get("width"))

    return Group(header, message, hint)


class ParseError(Exception):
    """
    base type of every error raised by the library.

    construction
    - ParseError(message, **options): the message is the one-sentence body; options
      carry the structured tags (token, option, cluster, position, index...) and the
      rendering context (code, title, hint, prog, shell, fancy, colorful).

    tags
    - each subclass declares its identifying tags in __tags__; two faults are equal
      when they have the same type and the same tag values.
    """
    __code__ = Unset
    __title__ = "parse error"
    __tags__ = ()

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    index = _tag("index")

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(self.options.get(tag) == other.options.get(tag) for tag in type(self).__tags__)

    def __hash__(self):
        return hash((type(self), *(self.options.get(tag) for tag in type(self).__tags__)))

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, kind="error")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicateNameError(ParseError):
    """a spec reuses a short/long name (or a command name) already present in a registry."""
    __code__ = FaultCode.DUPLICATE_NAME
    __title__ = "duplicate name"
    __tags__ = ("name",)
    name = _tag("name")


class UnknownOptionError(ParseError):
    """a short or long name that the registry does not know."""
    __code__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"
    __tags__ = ("token",)
    token = _tag("token")
    suggestions = _tag("suggestions")


class MissingValueError(ParseError):
    """a value-taking option reached the end of input or an option-looking token."""
    __code__ = FaultCode.MISSING_VALUE
    __title__ = "missing value"
    __tags__ = ("option",)
    option = _tag("option")


class UnexpectedValueError(ParseError):
    """an inline value ('=...') supplied to a valueless option."""
    __code__ = FaultCode.UNEXPECTED_VALUE
    __title__ = "option cannot take a value"
    __tags__ = ("option",)
    option = _tag("option")


class AmbiguousGroupingError(ParseError):
    """a value-taking short option found at a non-terminal position of a cluster."""
    __code__ = FaultCode.AMBIGUOUS_GROUPING
    __title__ = "ambiguous grouping"
    __tags__ = ("cluster", "position")
    cluster = _tag("cluster")
    position = _tag("position")


class DuplicateOptionError(ParseError):
    """a non-repeatable option given more than once under the 'error' policy."""
    __code__ = FaultCode.DUPLICATE_OPTION
    __title__ = "duplicated option"
    __tags__ = ("option",)
    option = _tag("option")


class UncastableValueError(ParseError):
    """a typed accessor could not convert the raw value."""
    __code__ = FaultCode.UNCASTABLE_VALUE
    __title__ = "invalid value"
    __tags__ = ("option", "value")
    option = _tag("option")
    value = _tag("value")


class ParseWarning(Warning):
    """
    base type of every warning emitted by the library.

    same construction and tagging conventions as ParseError; triggering a warning
    never interrupts parsing.
    """
    __code__ = Unset
    __title__ = "parse warning"
    __tags__ = ()

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    index = _tag("index")
    code = ParseError.code
    title = ParseError.title
    hint = ParseError.hint

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, kind="warning")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyInlineValueWarning(ParseWarning):
    """an option was given '=' with nothing after it; the empty string is used."""
    __code__ = FaultCode.EMPTY_INLINE_VALUE
    __title__ = "empty inline value"
    __tags__ = ("option",)
    option = _tag("option")


class DeprecatedOptionWarning(ParseWarning):
    """a deprecated option appeared in the input."""
    __code__ = FaultCode.DEPRECATED_OPTION
    __title__ = "deprecated option"
    __tags__ = ("option",)
    option = _tag("option")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise errors are raised
      and warnings are emitted through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParseError",
    "DuplicateNameError",
    "UnknownOptionError",
    "MissingValueError",
    "UnexpectedValueError",
    "AmbiguousGroupingError",
    "DuplicateOptionError",
    "UncastableValueError",
    "ParseWarning",
    "EmptyInlineValueWarning",
    "DeprecatedOptionWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
