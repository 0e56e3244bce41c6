"""
cmdparse matcher: resolve classified tokens against a registry.

The matcher owns a cursor (a deque) over the *raw* remaining tokens. It pulls one
raw token at a time, classifies it with the tokenizer, and resolves the unit:

- LongOption   → one occurrence; the value comes from the inline part or, when
                 missing, from the next raw token (AwaitingValue).
- ShortCluster → one occurrence per character, left to right; a value-taking
                 character ends the cluster (see _match_cluster for the grouping rules).
- Positional   → appended to the positional sequence (or routes to a command).
- Terminator   → every later raw token is positional.

State machine
    Start → Scanning → (Scanning | AwaitingValue) → Done | Error

AwaitingValue is entered only when a value-taking option must take its value from
the next raw token; it consumes exactly one token or fails with MissingValueError.
An option-looking next token ("-x", "--name", "--") is never swallowed as a value.
Errors are terminal: the first fault abandons the parse, later tokens are never read.
"""
import difflib
from collections import deque

from .faults import *
from .results import Assembler
from .tokenizer import *
from .utils import ordinal


class Matcher:
    """
    single-use parsing state for one parse call.

    parameters
    - registry: Registry
      read-only source of option specs, duplicate policy and fault settings.
    - args: Iterable[str] | deque[str]
      raw tokens; a deque is shared as-is (commands keep consuming the parent cursor).
    - start: int
      1-based position of the first token, used in position-first messages.
    """

    def __init__(self, registry, args, /, *, start=1):
        self._registry = registry
        self._tokens = args if isinstance(args, deque) else deque(args)
        self._index = start - 1
        self._ended = False
        self._assembler = Assembler(registry.duplicates, trigger=registry.trigger)
        self._command = None
        self._subresult = None

    def run(self):
        """
        consume every raw token and return the assembled ParseResult.
        """
        while self._tokens:
            match self._pull():
                case Terminator():
                    self._ended = True
                case LongOption() as unit:
                    self._match_long(unit)
                case ShortCluster() as unit:
                    self._match_cluster(unit)
                case Positional(text, index):
                    self._match_positional(text, index)

        return self._assembler.build(self._registry, command=self._command, subresult=self._subresult)

    def _pull(self):
        token = self._tokens.popleft()
        self._index += 1
        if self._ended:
            return Positional(token, self._index)
        return classify(token, self._index)

    def _route(self):
        return self._registry.route

    def _lookup(self, name, prefix, unit):
        """
        resolve a bare name to its spec, or trigger UnknownOptionError with suggestions.
        """
        table = self._registry.longs if prefix == "--" else self._registry.shorts
        try:
            return table[name]
        except KeyError:
            pass

        input = prefix + name
        suggestions = difflib.get_close_matches(input, self._registry.spellings(), 5)
        try:
            hint = "did you mean %r? you can also run '%s --help' to see all options" % (suggestions[0], self._route())
        except IndexError:
            hint = "run '%s --help' to see all available options" % self._route()

        if isinstance(unit, ShortCluster) and len(unit.chars) > 1:
            message = "unknown option %r in group '-%s' at %s position" % (input, unit.chars, ordinal(unit.index))
        else:
            message = "unknown option %r at %s position" % (input, ordinal(unit.index))

        return self._registry.trigger(UnknownOptionError(
            message,
            code=FaultCode.UNKNOWN_OPTION,
            title="unknown option",
            token=name,
            input=input,
            index=unit.index,
            suggestions=tuple(suggestions),
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_OPTION),
        ))

    def _take_value(self, spec, input, index):
        """
        AwaitingValue: consume the next raw token as the value of 'spec'.

        returns a ValueCandidate, or None for an optional value that is not there.
        """
        if self._tokens and not looks_like_option(self._tokens[0]):
            self._index += 1
            return ValueCandidate(self._tokens.popleft(), self._index)

        if spec.optional:
            return None

        if self._tokens:
            message = "option %r at %s position expects a value, but %r looks like an option" % (input, ordinal(index), self._tokens[0])
        else:
            message = "option %r at %s position expects a value, but the input ended" % (input, ordinal(index))

        return self._registry.trigger(MissingValueError(
            message,
            code=FaultCode.MISSING_VALUE,
            title="missing value",
            option=spec,
            input=input,
            index=index,
            hint="pass a value right after it (for example: %s <value> or %s=<value>)" % (input, input),
            docs=getdoc(FaultCode.MISSING_VALUE),
        ))

    def _inline_value(self, spec, input, inline, index):
        """
        accept an inline value; an empty one is kept but warned about.
        """
        if not inline:
            self._registry.trigger(EmptyInlineValueWarning(
                "empty inline value for option %r at %s position" % (input, ordinal(index)),
                code=FaultCode.EMPTY_INLINE_VALUE,
                title="empty inline value",
                option=spec,
                input=input,
                index=index,
                hint="add a value after '=' (for example: %s=<value>)" % input,
                docs=getdoc(FaultCode.EMPTY_INLINE_VALUE),
            ))
        return inline

    def _unexpected_value(self, spec, input, index):
        return self._registry.trigger(UnexpectedValueError(
            "option %r at %s position cannot have an inline value" % (input, ordinal(index)),
            code=FaultCode.UNEXPECTED_VALUE,
            title="option cannot take a value",
            option=spec,
            input=input,
            index=index,
            hint="remove everything from '=' (for example: %s)" % input,
            docs=getdoc(FaultCode.UNEXPECTED_VALUE),
        ))

    def _emit(self, spec, value, input, index):
        if spec.deprecated:
            self._registry.trigger(DeprecatedOptionWarning(
                "option %r at %s position is deprecated" % (input, ordinal(index)),
                code=FaultCode.DEPRECATED_OPTION,
                title="deprecated option",
                option=spec,
                input=input,
                index=index,
                hint="run '%s --help' to see current usage and alternatives" % self._route(),
                docs=getdoc(FaultCode.DEPRECATED_OPTION),
            ))
        match value:
            case ValueCandidate(text):
                value = text
        self._assembler.add(spec, value, index=index, input=input)

    def _match_long(self, unit):
        name, inline, index = unit
        input = "--" + name
        spec = self._lookup(name, "--", unit)

        if not spec.takes_value:
            if inline is not None:
                return self._unexpected_value(spec, input, index)
            return self._emit(spec, None, input, index)

        if inline is not None:
            value = self._inline_value(spec, input, inline, index)
        else:
            value = self._take_value(spec, input, index)
        self._emit(spec, value, input, index)

    def _match_cluster(self, unit):
        """
        resolve a group of short options, left to right.

        rules for a value-taking character c at 'position' with remainder 'rest':
        - rest is empty: the value is the inline part, else the next raw token.
        - every character of rest is itself a registered short option: the cluster
          reads both as "-c rest" and as "-c -r -e -s -t"; it is rejected with
          AmbiguousGroupingError (an optional c takes no value and the cluster goes on).
        - otherwise rest is the attached value ("-ovalue"), with "=inline" kept
          verbatim when present ("-ox=y" → "x=y").
        """
        chars, inline, index = unit
        if not chars:
            return self._lookup("", "-", unit)

        shorts = self._registry.shorts
        for position, char in enumerate(chars):
            input = "-" + char
            spec = self._lookup(char, "-", unit)
            rest = chars[position + 1:]

            if not spec.takes_value:
                if not rest and inline is not None:
                    return self._unexpected_value(spec, input, index)
                self._emit(spec, None, input, index)
                continue

            if rest:
                if all(other in shorts for other in rest):
                    if spec.optional:
                        self._emit(spec, None, input, index)
                        continue
                    return self._registry.trigger(AmbiguousGroupingError(
                        "option %r needs a value but is not last in group '-%s' at %s position" % (input, chars, ordinal(index)),
                        code=FaultCode.AMBIGUOUS_GROUPING,
                        title="ambiguous grouping",
                        cluster=chars,
                        position=position,
                        option=spec,
                        input=input,
                        index=index,
                        hint="move %s to the end of the group or pass it separately (for example: %s <value>)" % (input, input),
                        docs=getdoc(FaultCode.AMBIGUOUS_GROUPING),
                    ))
                value = rest if inline is None else rest + "=" + inline
            elif inline is not None:
                value = self._inline_value(spec, input, inline, index)
            else:
                value = self._take_value(spec, input, index)
            return self._emit(spec, value, input, index)

    def _match_positional(self, text, index):
        commands = self._registry.commands
        if not self._ended and text in commands and not self._assembler.positionals and self._command is None:
            self._command = text
            self._subresult = Matcher(commands[text], self._tokens, start=index + 1).run()
            return
        self._assembler.positional(text)


__all__ = (
    "Matcher",
)
