"""
cmdparse results: occurrences, the assembler and the final ParseResult.

Flow
- the matcher resolves each option occurrence to (spec, value) and hands it to an
  Assembler, together with every positional argument, in encounter order.
- the Assembler enforces the duplicate policy and accumulates repeatable values.
- Assembler.build() freezes everything into a ParseResult, created once per parse
  call and immutable afterwards.

Duplicate policy
- DuplicatePolicy.LAST  ("last"):  a non-repeatable option given twice keeps the last value.
- DuplicatePolicy.ERROR ("error"): a non-repeatable option given twice is a DuplicateOptionError.
- OptionSpec.unique overrides the registry-wide policy per spec (True → error, False → last).

Value shapes (see Occurrence.value)
- valueless spec                 → None
- value-taking, non-repeatable   → str (None when an optional value was omitted)
- value-taking, repeatable       → tuple[str, ...] in encounter order
"""
from collections.abc import Mapping
from enum import StrEnum
from typing import NamedTuple

from .faults import DuplicateOptionError, UncastableValueError, FaultCode, getdoc, trigger
from .utils import *


class DuplicatePolicy(StrEnum):
    """what happens when a non-repeatable option appears more than once."""
    LAST = "last"
    ERROR = "error"


class Occurrence(NamedTuple):
    """
    resolved match of one option across the whole input.

    - spec: the OptionSpec that matched.
    - value: None | str | tuple[str, ...] (shape follows the spec arity).
    - count: how many times the option appeared.
    """
    spec: object
    value: str | tuple[str, ...] | None = None
    count: int = 1


class ParseResult(Mapping):
    """
    Final, read-only outcome of one parse call.

    Mapping protocol
    - keys are the OptionSpec objects that appeared (first-appearance order),
      values are their Occurrence.
    - lookups also accept names: "v", "-v", "verbose" and "--verbose" resolve
      through the registry; a name the registry does not know raises KeyError.

    Accessors
    - value_of(name), values_of(name), is_present(name), count(name),
      value_or(name, default, type=str), values_or(name, default, type=str),
      occurrence(name)
    - positionals: tuple of the positional arguments, in original relative order.
    - command / subresult: the matched command name and its own ParseResult.
    """

    def __init__(self, registry, occurrences, positionals, /, command=None, subresult=None):
        self._registry = registry
        self._occurrences = dict(occurrences)
        self._positionals = tuple(positionals)
        self._command = command
        self._subresult = subresult

    positionals = mirror("positionals")

    @property
    def command(self):
        """name of the matched command, or None."""
        return self._command

    @property
    def subresult(self):
        """ParseResult of the matched command's own options, or None."""
        return self._subresult

    def _resolve(self, key):
        if isinstance(key, str):
            return self._registry.lookup(key)
        return key

    def __getitem__(self, key):
        return self._occurrences[self._resolve(key)]

    def __iter__(self):
        return iter(self._occurrences)

    def __len__(self):
        return len(self._occurrences)

    def __eq__(self, other):
        if not isinstance(other, ParseResult):
            return NotImplemented
        return (
            self._occurrences == other._occurrences and
            self._positionals == other._positionals and
            self._command == other._command and
            self._subresult == other._subresult
        )

    __hash__ = None

    def occurrence(self, name, /):
        """the Occurrence of an option, or None when it did not appear."""
        return self._occurrences.get(self._resolve(name))

    def is_present(self, name, /):
        return self.occurrence(name) is not None

    def count(self, name, /):
        """how many times an option appeared (0 when absent), e.g. 3 for '-vvv'."""
        occurrence = self.occurrence(name)
        return occurrence.count if occurrence is not None else 0

    def value_of(self, name, /):
        """
        single value of an option.

        returns None when the option is absent, valueless, or its optional value was
        omitted. for repeatable options, the last accumulated value is returned.
        """
        occurrence = self.occurrence(name)
        if occurrence is None:
            return None
        if isinstance(occurrence.value, tuple):
            return occurrence.value[-1] if occurrence.value else None
        return occurrence.value

    def values_of(self, name, /):
        """
        every value of an option, in encounter order (empty tuple when absent).
        """
        occurrence = self.occurrence(name)
        if occurrence is None or occurrence.value is None:
            return ()
        if isinstance(occurrence.value, tuple):
            return occurrence.value
        return (occurrence.value,)

    def value_or(self, name, default=None, /, type=str):
        """
        typed value of an option, or a default.

        - the raw value is converted with 'type' (any callable taking a str).
        - the default is returned untouched (not converted) when there is no value.
        - a conversion failure (ValueError/TypeError) is reported as an
          UncastableValueError through the registry fault settings.
        """
        spec = self._resolve(name)
        if (value := self.value_of(spec)) is None:
            return default
        return self._convert(spec, value, type, default)

    def values_or(self, name, default=(), /, type=str):
        """
        typed values of an option, in encounter order, or a default.

        - every raw value is converted with 'type'; the result is a tuple.
        - the default is returned untouched when the option has no value.
        - the first conversion failure is reported as an UncastableValueError
          (through the registry fault settings) and the default is returned.
        """
        spec = self._resolve(name)
        if not (values := self.values_of(spec)):
            return default
        converted = []
        for value in values:
            try:
                converted.append(type(value))
            except (ValueError, TypeError):
                return self._uncastable(spec, value, type, default)
        return tuple(converted)

    def _convert(self, spec, value, type, default):
        try:
            return type(value)
        except (ValueError, TypeError):
            return self._uncastable(spec, value, type, default)

    def _uncastable(self, spec, value, type, default):
        self._registry.trigger(UncastableValueError(
            "invalid value %r for option %r" % (value, spec.display),
            code=FaultCode.UNCASTABLE_VALUE,
            title="invalid value",
            option=spec,
            value=value,
            hint="pass a value that %s accepts" % getattr(type, "__name__", repr(type)),
            docs=getdoc(FaultCode.UNCASTABLE_VALUE),
        ))
        return default

    def to_dict(self):
        """plain {key: value} snapshot (keys are the bare names, long first)."""
        return {spec.key: occurrence.value for spec, occurrence in self._occurrences.items()}

    def __repr__(self):
        return "parse-result(%s)" % ", ".join("%s=%r" % item for item in self.__rich_repr__())

    def __rich_repr__(self):
        yield "options", self.to_dict()
        yield "positionals", self._positionals
        if self._command is not None:
            yield "command", self._command
            yield "subresult", self._subresult


class Assembler:
    """
    Folds matched occurrences and positionals into a ParseResult.

    - policy: DuplicatePolicy (or its string value) applied to non-repeatable specs
      whose 'unique' is Unset.
    - trigger: fault sink, defaults to faults.trigger (raise in non-shell mode).
    """

    def __init__(self, policy=DuplicatePolicy.LAST, /, trigger=trigger):
        self._policy = DuplicatePolicy(policy)
        self._trigger = trigger
        self._occurrences = {}
        self._positionals = []

    def _unique(self, spec):
        return coalesce(spec.unique, self._policy is DuplicatePolicy.ERROR)

    def add(self, spec, value=None, /, *, index=0, input=Unset):
        """
        record one occurrence of 'spec' with its value (None when absent).

        raises (through trigger) DuplicateOptionError when the spec is not repeatable,
        was already seen, and the effective policy is 'error'.
        """
        try:
            previous = self._occurrences[spec]
        except KeyError:
            if spec.repeatable and spec.takes_value:
                value = () if value is None else (value,)
            self._occurrences[spec] = Occurrence(spec, value, 1)
            return

        if spec.repeatable:
            if spec.takes_value and value is not None:
                value = previous.value + (value,)
            else:
                value = previous.value
        elif self._unique(spec):
            input = coalesce(input, spec.display)
            return self._trigger(DuplicateOptionError(
                "option %r at %s position was already provided" % (input, ordinal(index)),
                code=FaultCode.DUPLICATE_OPTION,
                title="duplicated option",
                option=spec,
                input=input,
                index=index,
                hint="keep a single %s; it can be specified only once" % spec.display,
                docs=getdoc(FaultCode.DUPLICATE_OPTION),
            ))
        self._occurrences[spec] = Occurrence(spec, value, previous.count + 1)

    def positional(self, text, /):
        self._positionals.append(text)

    @property
    def positionals(self):
        return tuple(self._positionals)

    def build(self, registry, /, command=None, subresult=None):
        return ParseResult(registry, self._occurrences, self._positionals, command=command, subresult=subresult)


__all__ = (
    "DuplicatePolicy",
    "Occurrence",
    "ParseResult",
    "Assembler",
)
