"""
cmdparse registry: the caller-owned collection of recognized options.

What this module provides
- Registry: ordered collection of OptionSpec objects with unique short and long
  names, built once before parsing and only read while parsing. It also carries
  the parse configuration:
  • duplicates: DuplicatePolicy for non-repeatable options seen twice
    ("last" → last value wins, the default; "error" → DuplicateOptionError).
  • shell/fancy/colorful: how faults reach the user (raise vs. render-and-exit).
  • commands: named child registries, each with its own options.

Quick start
    from cmdparse import Registry

    registry = Registry("tool [options] FILE...", prog="tool")
    verbose = registry.flag("-v", "--verbose", repeatable=True)
    output = registry.option("-o", "--output", metavar="FILE")

    result = registry.parse(["-vv", "-o", "out.txt", "a.txt"])
    result.count("v")          # 2
    result.value_of(output)    # "out.txt"
    result.positionals         # ("a.txt",)

Concurrency
- parse() never mutates the registry; one registry can serve many parse calls,
  from many threads. Registering options while a parse is running is the caller's
  responsibility to avoid.
"""
import os.path
import re
import shlex
import sys
from collections.abc import Iterable

from .faults import *
from .faults import trigger as _trigger
from .matcher import Matcher
from .results import DuplicatePolicy
from .specs import OptionSpec
from .utils import *


class Registry:
    """
    Ordered, name-unique collection of OptionSpec objects plus parse configuration.

    Parameters
    - summary: Unset | str
      one-line description or usage example shown in help.
    - prog: Unset | str
      program name used in help and fault headers (defaults to basename(argv[0])).
    - duplicates: DuplicatePolicy | "last" | "error"
      policy for non-repeatable options given more than once.
    - shell: bool
      when True, faults are rendered on stderr (with the usage) and errors exit
      with status 1; when False, errors are raised and warnings are emitted.
    - fancy: bool
      render faults and help inside rich panels.
    - colorful: bool
      enable styling in rendered output.
    """

    def __init__(
            self,
            summary=Unset,
            /,
            *,
            prog=Unset,
            duplicates=DuplicatePolicy.LAST,
            shell=False,
            fancy=False,
            colorful=True,
    ):
        if not isinstance(summary, str | Unset):
            raise TypeError("registry 'summary' must be a string")
        elif isinstance(summary, str) and not (summary := summary.strip()):
            raise ValueError("registry 'summary' cannot be empty")

        if not isinstance(prog, str | Unset):
            raise TypeError("registry 'prog' must be a string")
        elif isinstance(prog, str) and not (prog := prog.strip()):
            raise ValueError("registry 'prog' cannot be empty")

        try:
            duplicates = DuplicatePolicy(duplicates)
        except ValueError:
            raise ValueError("registry 'duplicates' must be one of %s" % ", ".join(map(repr, map(str, DuplicatePolicy)))) from None

        self._summary = coalesce(summary)
        self._prog = coalesce(prog, os.path.basename(sys.argv[0]) or "cmdparse")
        self._duplicates = duplicates
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._parent = None
        self._specs = []
        self._longs = {}
        self._shorts = {}
        self._commands = {}

    summary = mirror("summary")
    prog = mirror("prog")
    duplicates = mirror("duplicates")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    parent = mirror("parent")
    longs = mirror("longs")
    shorts = mirror("shorts")
    commands = mirror("commands")

    @property
    def route(self):
        """program name followed by the command path ("git remote add")."""
        if self._parent is None:
            return self._prog
        return self._parent.route + " " + self._prog

    def register(self, spec, /):
        """
        add an OptionSpec; returns it for convenient assignment.

        raises DuplicateNameError when its long or short name is already registered.
        """
        if not isinstance(spec, OptionSpec):
            raise TypeError("register() argument must be an option-spec")

        for table, name, prefix in ((self._longs, spec.long, "--"), (self._shorts, spec.short, "-")):
            if name is not None and name in table:
                raise DuplicateNameError(
                    "option name %r is already registered" % (prefix + name),
                    code=FaultCode.DUPLICATE_NAME,
                    title="duplicate name",
                    name=prefix + name,
                    hint="pick another spelling for one of the two options",
                    docs=getdoc(FaultCode.DUPLICATE_NAME),
                    prog=self._prog,
                )

        self._specs.append(spec)
        if spec.long is not None:
            self._longs[spec.long] = spec
        if spec.short is not None:
            self._shorts[spec.short] = spec
        return spec

    def option(self, *names, **metadata):
        """build and register a value-taking OptionSpec."""
        return self.register(OptionSpec(*names, takes_value=True, **metadata))

    def flag(self, *names, **metadata):
        """build and register a valueless OptionSpec."""
        if metadata.get("takes_value") or metadata.get("optional"):
            raise TypeError("flag() cannot take a value")
        return self.register(OptionSpec(*names, **metadata))

    def command(self, name, summary=Unset, /):
        """
        create and return a child registry for the command 'name'.

        the child inherits the duplicate policy and the fault settings. during a parse,
        the first positional argument that names a command (when no positional was
        collected before it) hands every remaining token to that command.
        """
        if not isinstance(name, str):
            raise TypeError("command() name must be a string")
        elif not re.fullmatch(r"[^\W\d_][\w.-]*", name := name.strip()):
            raise ValueError("command() name must be a word (letters, digits, '-', '_', '.')")
        if name in self._commands:
            raise DuplicateNameError(
                "command name %r is already registered" % name,
                code=FaultCode.DUPLICATE_NAME,
                title="duplicate name",
                name=name,
                hint="pick another name for one of the two commands",
                docs=getdoc(FaultCode.DUPLICATE_NAME),
                prog=self._prog,
            )

        child = Registry(
            summary,
            prog=name,
            duplicates=self._duplicates,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
        )
        child._parent = self
        self._commands[name] = child
        return child

    def lookup(self, name, /):
        """
        find a registered spec by "--long", "-s", "long" or "s".

        raises KeyError when nothing matches, or when a bare name is both the long
        name of one spec and the short name of another ("--x" and "-x").
        """
        if isinstance(name, OptionSpec):
            if name in self._specs:
                return name
            raise KeyError("option %r is not registered" % name.display)
        if not isinstance(name, str):
            raise TypeError("lookup() argument must be a string or an option-spec")

        if name.startswith("--"):
            spec = self._longs.get(name[2:])
        elif name.startswith("-") and len(name) == 2:
            spec = self._shorts.get(name[1:])
        else:
            long, short = self._longs.get(name), self._shorts.get(name)
            if long is not None and short is not None and long is not short:
                raise KeyError("option name %r is ambiguous; use '--%s' or '-%s'" % (name, name, name))
            spec = long if long is not None else short
        if spec is None:
            raise KeyError("no option named %r" % name)
        return spec

    def spellings(self):
        """every dashed name, in registration order."""
        return [name for spec in self._specs for name in spec.names]

    def trigger(self, fault, /, **options):
        """
        deliver a fault with this registry's settings.

        in shell mode, errors are preceded by the usage (on stderr) before being
        rendered; the program then exits with status 1.
        """
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        if self._shell and isinstance(fault, ParseError):
            from .usage import print_usage
            print_usage(self, stderr=True)
        _trigger(fault, **options, prog=self.route, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def parse(self, args=Unset, /):
        """
        parse raw tokens against this registry.

        Parameters
        - args:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; split with shlex.split.
          • Iterable[str]: pre-tokenized sequence, used verbatim.

        Returns
        - ParseResult (faults are raised or rendered according to 'shell').
        """
        if args is Unset:
            tokens = sys.argv[1:]
        elif isinstance(args, str):
            tokens = shlex.split(args)
        elif isinstance(args, Iterable):
            tokens = list(args)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return Matcher(self, tokens).run()

    def __iter__(self):
        return iter(tuple(self._specs))

    def __len__(self):
        return len(self._specs)

    def __contains__(self, object):
        try:
            self.lookup(object)
        except (KeyError, TypeError):
            return False
        return True

    def __rich__(self):
        from .usage import render
        return render(self)

    def __repr__(self):
        return "registry(%s)" % ", ".join("%s=%r" % item for item in self.__rich_repr__())

    def __rich_repr__(self):
        yield "prog", self._prog
        yield "options", tuple(spec.display for spec in self._specs)
        yield "commands", tuple(self._commands)
        yield "duplicates", str(self._duplicates)


def parse(registry, args, /):
    """
    parse(registry, args) -> ParseResult

    functional spelling of Registry.parse for callers that keep the registry
    separate from the parse call.
    """
    if not isinstance(registry, Registry):
        raise TypeError("parse() first argument must be a registry")
    return registry.parse(args)


__all__ = (
    "Registry",
    "parse",
)
