r"""
cmdparse option specifications.

Overview
- OptionSpec: one recognized option, identified by a long name ("--verbose"),
  a short single-character name ("-v"), or both. It declares:
  • arity: takes_value (zero or one value per occurrence), optional (the value
    may be omitted; implies takes_value),
  • accumulation: repeatable (values accumulate in encounter order) and
    unique (per-spec duplicate policy override),
  • help/UX metadata: metavar, descr, hidden, deprecated.

- Introspection & representation
  • SpecType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ as read-only properties.
  • Backing storage is write-once (see utils.StorageGuard): once built, a spec
    cannot be mutated, so a registry can share it across parse calls and threads.

Metadata (sanitized on construction)
- names: one short ("-x") and/or one long ("--name") spelling. Long names match
  r"--[^\W\d_](-?[^\W_]+)*"; short names are a dash plus any single character
  except '-', '=' and whitespace.
- unique: Unset (defer to the registry), True (duplicates are an error) or
  False (last value wins). Cannot be True for repeatable specs.
- metavar/descr: non-empty strings after trimming when provided.

Quick example:
    >>> from cmdparse.specs import OptionSpec
    >>> output = OptionSpec("-o", "--output", takes_value=True, metavar="FILE")
    >>> verbose = OptionSpec("-v", repeatable=True)
    >>> output.names
    ('-o', '--output')
"""
import functools
import operator
import re

from rich.text import Text

from .utils import *


class SpecType(type):
    """
    Metaclass that turns spec classes into introspectable, immutable records.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property backed
      by the guarded '-{name}' storage (see utils.view).
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and help output.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: view(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option-spec(names=('-v', '--verbose'), takes_value=False, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, metadata, /):
    r"""
    Internal: validate and split the given spellings into 'long' and 'short'.

    Rules
    - at least one name is required, at most one long and one short.
    - long: "--name", r"--[^\W\d_](-?[^\W_]+)*" (unicode letters allowed, no underscores).
    - short: "-x", any single character except '-', '=' and whitespace.
    - the stored values are the bare names ("name", "x"); missing ones are None.

    Raises
    - TypeError: when no name is given or a name is not a string.
    - ValueError: when a name is malformed or a kind is given twice.
    """
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    long = short = None
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif name.startswith("--"):
            if not re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name):
                raise ValueError(f"{cls.__typename__} long names must be valid shell-style option names (unicodes are allowed)")
            if long is not None:
                raise ValueError(f"{cls.__typename__} cannot have more than one long name")
            long = name[2:]
        elif re.fullmatch(r"-[^\s=-]", name):
            if short is not None:
                raise ValueError(f"{cls.__typename__} cannot have more than one short name")
            short = name[1:]
        else:
            raise ValueError(f"{cls.__typename__} names must look like '-x' or '--name'")

    del metadata["names"]
    metadata["long"] = long
    metadata["short"] = short


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize arity, accumulation and help metadata.

    Wiring
    - takes_value := takes_value or optional
    - unique is rejected when combined with repeatable (the two contradict).
    - metavar is only meaningful for value-taking specs.
    - metavar/descr are trimmed; empty strings are rejected; Unset becomes None.
    """
    metadata["takes_value"] |= metadata["optional"]

    if not isinstance(unique := metadata["unique"], bool | Unset):
        raise TypeError(f"{cls.__typename__} 'unique' must be a boolean")
    if unique is True and metadata["repeatable"]:
        raise TypeError(f"repeatable {cls.__typename__} cannot be unique")

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    elif isinstance(metavar, str) and not metadata["takes_value"]:
        raise TypeError(f"valueless {cls.__typename__} cannot specify a 'metavar'")
    metadata["metavar"] = coalesce(metavar)

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class OptionSpec(StorageGuard, metaclass=SpecType):
    """
    Immutable definition of one recognized option.

    Identity
    - a spec is identified by its own object identity; registries guarantee that no
      two registered specs share a long or a short name.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    - names/display/key are derived spellings used by the engine and help output.
    """

    __introspectable__ = (
        "long",
        "short",
        "takes_value",
        "optional",
        "repeatable",
        "unique",
        "metavar",
        "descr",
        "hidden",
        "deprecated",
    )
    __displayable__ = (
        "names",
        "takes_value",
        "optional",
        "repeatable",
        "unique",
    )

    def __new__(
            cls,
            *names,
            takes_value=False,
            optional=False,
            repeatable=False,
            unique=Unset,
            metavar=Unset,
            descr=Unset,
            hidden=False,
            deprecated=False
    ):
        """
        Construct an OptionSpec.

        Parameters
        - names: one or two str
          "-x" and/or "--name" spellings.
        - takes_value: bool
          The option consumes one value per occurrence.
        - optional: bool
          The value may be omitted (implies takes_value).
        - repeatable: bool
          The option may appear many times; values accumulate in encounter order.
        - unique: Unset | bool
          Per-spec duplicate policy: True raises on a second occurrence, False lets
          the last value win, Unset defers to the registry policy.
        - metavar: Unset | str
          Value label in help (value-taking specs only).
        - descr: Unset | str
          Short description for help.
        - hidden: bool
          Suppress from help output.
        - deprecated: bool
          Mark as deprecated in help and warn when specified.
        """
        metadata = {
            "names": names,
            "takes_value": bool(takes_value),
            "optional": bool(optional),
            "repeatable": bool(repeatable),
            "unique": unique,
            "metavar": metavar,
            "descr": descr,
            "hidden": bool(hidden),
            "deprecated": bool(deprecated),
        }
        _sanitize_names(cls, metadata)
        _sanitize_metadata(cls, metadata)

        with super().__new__(cls) as self:
            for name, object in metadata.items():
                setattr(self, "-" + name, object)
        return self

    @property
    def names(self):
        """dashed spellings, short first: ('-v', '--verbose')."""
        return tuple(
            prefix + name
            for prefix, name in (("-", self.short), ("--", self.long))
            if name is not None
        )

    @property
    def display(self):
        """preferred spelling for messages (long first)."""
        return "--" + self.long if self.long is not None else "-" + self.short

    @property
    def key(self):
        """bare identity name (long first), used as the result key in plain mappings."""
        return self.long if self.long is not None else self.short


def flag(*names, **metadata):
    """
    Shorthand for a valueless OptionSpec.

        >>> verbose = flag("-v", "--verbose", repeatable=True)
    """
    if metadata.get("takes_value") or metadata.get("optional"):
        raise TypeError("flag() cannot take a value")
    return OptionSpec(*names, **metadata)


def option(*names, **metadata):
    """
    Shorthand for a value-taking OptionSpec.

        >>> output = option("-o", "--output", metavar="FILE")
    """
    return OptionSpec(*names, takes_value=True, **metadata)


__all__ = (
    # Classes (specifications)
    "OptionSpec",

    # Factories
    "flag",
    "option",
)

# the metaclass is an implementation detail of this module.
del SpecType
