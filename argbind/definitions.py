r"""
argbind definitions: normalization, order extraction and default resolution.

Overview
- Definition: one declared expected argument (name, type spec, allowed
  positions, optional default). Built once, read-only afterwards; derived
  copies are produced with copy.replace().
- Signature: the ordered tuple of definitions plus the arity threshold used by
  the default resolver.
- normalize(types): accept the two spec shapes and produce a Signature.
    • named mapping:      {"height": "number", "color": ["red"]}
    • ordered singletons: [{"height": "number"}, {"color": ["red"]}]
- extract_order(arguments, definitions): turn raw arguments into a value list;
  the index-keyed form {0: (value, positions), ...} also yields per-definition
  position constraints.
- resolve_defaults(values, signature): drop Unset entries, then append declared
  defaults while fewer values than the arity threshold were supplied.

Spec values
- a string: the type spec ("number", "string|function", "*").
- a list/tuple: a default declaration.
    • [default]          → type spec inferred from classify(default)
    • [default, "spec"]  → explicit type spec
- a wildcard entry {"*": "prefix:spec"} captures any number of values as
  prefix0, prefix1, ... (suffix = position of the value).

Misuse of the call shape (non-string names, non-string specs, empty default
declarations, duplicated names, non-iterable position sets) raises TypeError
or ValueError. Everything else fails by omission during binding.
"""
import copy
import functools
import operator
import re
from collections import namedtuple
from collections.abc import Iterable, Mapping, Sequence

from .tags import TypeTag, classify, split
from .utils import *

WILDCARD = "*"


class DefinitionType(type):
    """
    Metaclass giving definitions stable, introspectable representations.

    - Fields listed in __introspectable__ become read-only properties backed by
      "_{name}" (see mirror()), unless the class defines the property itself.
    - __typename__ is derived from the class name and used in messages.
    - __repr__/__rich_repr__ list the __introspectable__ fields in order.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            } | namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_definition(cls, metadata, /):
    """
    Internal: validate and normalize a definition's metadata in place.

    - name: non-empty string; "*" marks a wildcard.
    - spec: type spec string. For wildcards it is "prefix:spec"; the prefix is
      split off into metadata["prefix"] (empty when no ':' is present).
    - order: iterable of integer positions, normalized to a tuple.

    Raises
    - TypeError: wrongly-typed name/spec/order.
    - ValueError: empty name or negative positions.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not name.strip():
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

    if not isinstance(spec := metadata["spec"], str):
        raise TypeError(f"{cls.__typename__} {name!r} type spec must be a string")

    metadata["prefix"] = Unset
    if name == WILDCARD:
        prefix, colon, rest = spec.partition(":")
        metadata["prefix"], spec = (prefix.strip(), rest) if colon else ("", spec)
    metadata["spec"] = spec.strip()

    if not isinstance(order := metadata["order"], Iterable) or isinstance(order, str | Mapping):
        raise TypeError(f"{cls.__typename__} {name!r} positions must be an iterable of integers")
    positions = []
    for position in order:
        if not isinstance(position, int) or isinstance(position, bool):
            raise TypeError(f"{cls.__typename__} {name!r} positions must be integers")
        elif position < 0:
            raise ValueError(f"{cls.__typename__} {name!r} positions must be zero-based")
        positions.append(position)
    metadata["order"] = tuple(positions)


class Definition(metaclass=DefinitionType):
    """
    One declared expected argument.

    Properties
    - name: identifier, or "*" for a wildcard.
    - spec: pipe-delimited type spec (prefix already removed for wildcards).
    - prefix: wildcard name prefix; Unset for named definitions.
    - order: allowed zero-based positions; empty means unconstrained.
    - default: default value; Unset when none was declared.
    """

    __introspectable__ = (
        "name",
        "spec",
        "prefix",
        "order",
        "default",
    )

    def __init__(self, name, spec, /, order=(), default=Unset):
        metadata = {
            "name": name,
            "spec": spec,
            "order": order,
            "default": default,
        }
        _sanitize_definition(type(self), metadata)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._alternatives = split(self._spec)

    @property
    def default(self):
        # Defaults are handed out unchanged; they become argument values.
        return self._default

    @property
    def wildcard(self):
        return self._name == WILDCARD

    @property
    def alternatives(self):
        """
        The type spec alternatives, in listed order.
        """
        return self._alternatives

    def __replace__(self, /, **changes):
        metadata = {
            "spec": self._spec if self._prefix is Unset else f"{self._prefix}:{self._spec}",
            "order": self._order,
            "default": self._default,
        } | changes
        return type(self)(self._name, metadata.pop("spec"), **metadata)


Signature = namedtuple("Signature", ("definitions", "arity"))
Signature.__doc__ = """
Normalized type spec.

- definitions: tuple of Definition, in declared order.
- arity: threshold below which defaults are appended (number of entries for a
  named mapping, number of groups for ordered singletons).
"""


def _declare(name, value, /):
    """
    Internal: build a Definition from one spec entry.
    """
    if classify(value) is not TypeTag.ARRAY:
        return Definition(name, value)
    match len(value):
        case 0:
            raise ValueError(f"default declaration for {name!r} cannot be empty")
        case 1:
            default, = value
            return Definition(name, classify(default).value, default=default)
        case 2:
            default, spec = value
            return Definition(name, spec, default=default)
        case _:
            raise ValueError(f"default declaration for {name!r} takes a value and an optional type spec")


def normalize(types, /):
    """
    Convert a type spec (named mapping or ordered singletons) into a Signature.

    The input shape is not carried past this point: later stages only see
    the ordered definitions and the arity threshold.

    Raises
    - TypeError: when `types` is neither a mapping nor a sequence of mappings.
    - ValueError: when the ordered form declares the same name twice.
    """
    if isinstance(types, Mapping):
        return Signature(tuple(_declare(name, value) for name, value in types.items()), len(types))

    if not isinstance(types, Sequence) or isinstance(types, str | bytes | bytearray):
        raise TypeError("types must be a mapping or a sequence of mappings")

    definitions = []
    names = set()
    for group in types:
        if not isinstance(group, Mapping):
            raise TypeError("types must be a mapping or a sequence of mappings")
        for name, value in group.items():
            definition = _declare(name, value)
            if not definition.wildcard:
                if definition.name in names:
                    raise ValueError(f"types cannot declare {definition.name!r} more than once")
                names.add(definition.name)
            definitions.append(definition)
    return Signature(tuple(definitions), len(types))


def _index(key, /):
    """
    Internal: read an index key of the ordered arguments form (int or digits).
    """
    if isinstance(key, int) and not isinstance(key, bool) and key >= 0:
        return key
    if isinstance(key, str) and key.isdecimal():
        return int(key)
    raise ValueError(f"ordered arguments must be keyed by zero-based indices, not {key!r}")


def extract_order(arguments, definitions, /):
    """
    Produce the value list and, for the ordered form, constrained definitions.

    Forms
    - list: copied as is.
    - any other iterable (tuple, generator, a function's *args, ...): listed.
    - mapping {index: (value, positions)}: visited in ascending index order;
      the value is appended and the i-th definition receives `positions`.
      An index with no matching definition yields no constraint.

    Returns
    - (values, definitions) where `definitions` is a tuple; the input
      definitions are never modified.

    Raises
    - TypeError: when `arguments` is a string, bytes, or not iterable, or an
      ordered entry is not a (value, positions) pair.
    - ValueError: when an ordered key is not a zero-based index.
    """
    definitions = tuple(definitions)

    if isinstance(arguments, Mapping):
        values = []
        constrained = list(definitions)
        for index, entry in sorted(((_index(key), entry) for key, entry in arguments.items()), key=operator.itemgetter(0)):
            if isinstance(entry, str | bytes) or not isinstance(entry, Sequence) or len(entry) != 2:
                raise TypeError(f"ordered argument {index} must be a (value, positions) pair")
            value, positions = entry
            values.append(value)
            if index < len(constrained):
                constrained[index] = copy.replace(constrained[index], order=positions)
        return values, tuple(constrained)

    if isinstance(arguments, str | bytes | bytearray) or not isinstance(arguments, Iterable):
        raise TypeError("arguments must be an iterable of values or a mapping of ordered entries")
    return list(arguments), definitions


def resolve_defaults(values, signature, /):
    """
    Drop Unset entries, then append defaults while values are still missing.

    Defaults are appended in definition order, each only while the (growing)
    value list is shorter than `signature.arity`. Defaults therefore fill from
    the end of the positional sequence: they never replace a supplied value,
    and an earlier compatible value always wins during binding.
    """
    values = [value for value in values if value is not Unset]
    for definition in signature.definitions:
        if definition.default is not Unset and len(values) < signature.arity:
            values.append(definition.default)
    return values


__all__ = (
    "Definition",
    "Signature",
    "normalize",
    "extract_order",
    "resolve_defaults",
)

# Internal metaclass, not part of the public API.
del DefinitionType
