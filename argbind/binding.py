"""
argbind binding engine, output formatting and the public entry point.

Pipeline (one pass per call, nothing shared between calls)
    normalize(types)                → Signature
    extract_order(arguments, ...)   → values, constrained definitions
    resolve_defaults(values, ...)   → values with trailing defaults
    bind(values, definitions)       → Bindings
    format(bindings, rules, ...)    → Bindings with `length`, or a plain list

Matching is first-fit: each value, scanned in ascending position, goes to the
first definition (in declared order) that accepts it. A later, more specific
definition is never considered once an earlier one matched. Values nobody
accepts are dropped; definitions nobody fills are absent from the result.

Quick example:
    >>> from argbind import bind_arguments
    >>> def paint(*params):
    ...     return bind_arguments(params, {"height": "number", "color": ["red"], "coords": "array"})
    >>> paint([3, 5, 3], 22)
    bindings(coords=[3, 5, 3], height=22, color='red', length=3)
"""
from collections import namedtuple
from collections.abc import Mapping

from .definitions import normalize, extract_order, resolve_defaults
from .faults import UnboundArgumentWarning, MissingArgumentWarning, trigger
from .tags import classify, accepts
from .utils import *


class Bindings(Mapping):
    """
    Read-only mapping of definition names to bound values.

    The bound-name count is kept in the `length` attribute, outside the keys,
    so iterating the mapping never yields it. When the `length` rule is False
    the attribute is not set at all (hasattr(bindings, "length") is False).
    The resolved values the names were bound from are kept for the `array`
    reshape.
    """
    __slots__ = ("_bindings", "_values", "length")

    def __init__(self, bindings=(), /, values=()):
        self._bindings = dict(bindings)
        self._values = tuple(values)

    def __getitem__(self, name, /):
        return self._bindings[name]

    def __iter__(self):
        return iter(self._bindings)

    def __len__(self):
        return len(self._bindings)

    def __repr__(self):
        return f"bindings({", ".join(f"{name}={object!r}" for name, object in self.__rich_repr__())})"

    def __rich_repr__(self):
        yield from self._bindings.items()
        if hasattr(self, "length"):
            yield "length", self.length


Rules = namedtuple("Rules", ("length", "array", "warn", "shell"), defaults=(True, False, False, False))
Rules.__doc__ = """
Sanitized per-call configuration.

- length: attach the bound-name count as `length` (default True).
- array: return the resolved values as a plain list (default False).
- warn: surface unbound values and missing definitions as warnings (default False).
- shell: print those warnings to the stderr console instead of warnings.warn (default False).
"""


def _sanitize_rules(rules, /):
    """
    Internal: validate the optional rules mapping and build Rules.

    Unknown keys are ignored. Unset or None means "all defaults".

    Raises
    - TypeError: when rules is not a mapping, or a known rule is not a bool.
    """
    if rules is Unset or rules is None:
        return Rules()
    if not isinstance(rules, Mapping):
        raise TypeError("rules must be a mapping")

    sanitized = {}
    for name in Rules._fields:
        if name not in rules:
            continue
        if not isinstance(value := rules[name], bool):
            raise TypeError(f"rule {name!r} must be a boolean")
        sanitized[name] = value
    return Rules(**sanitized)


def _bind(values, definitions, /):
    """
    Internal: run the matching algorithm.

    Returns
    - (bindings, taken): a name → value dict in binding order, and the set of
      positions that were bound.
    """
    bindings = {}
    taken = set()

    for position, value in enumerate(values):
        tag = classify(value)

        for definition in definitions:
            if definition.wildcard:
                # Wildcards bind once per value, under prefix + position; an
                # existing binding under that name is never overwritten.
                if (name := definition.prefix + str(position)) in bindings:
                    continue
                if any(accepts(alternative, tag) for alternative in definition.alternatives):
                    bindings[name] = value
                    taken.add(position)
                    break
                continue

            if definition.name in bindings or position in taken:
                continue
            if definition.order and position not in definition.order:
                continue
            if any(accepts(alternative, tag) for alternative in definition.alternatives):
                bindings[definition.name] = value
                taken.add(position)
                break

    return bindings, taken


def bind(values, definitions, /):
    """
    Bind resolved values to definitions (first-fit) and return Bindings.

    The returned Bindings has no `length` yet; see format().
    """
    bindings, _ = _bind(values, definitions)
    return Bindings(bindings, values=values)


def format(bindings, rules=Unset, /):
    """
    Shape the binding result according to rules.

    - the bound-name count is attached as `length`; with rules.length False it
      is removed entirely, even from an already formatted result.
    - with rules.array, the resolved values the result was bound from are
      returned as a plain list, in supplied order, and all names are discarded.

    Not star-exported, so `from argbind import *` leaves the builtin alone.
    """
    rules = coalesce(rules, Rules())
    if rules.array:
        return list(bindings._values)
    if rules.length:
        bindings.length = len(bindings)
    elif hasattr(bindings, "length"):
        del bindings.length
    return bindings


def _diagnose(values, definitions, bindings, taken, rules, /):
    """
    Internal: surface dropped values and unfilled definitions as warnings.
    """
    # warnings.warn frames: __trigger__, trigger, _diagnose, bind_arguments, caller.
    options = {"shell": rules.shell, "stacklevel": 5}
    for position, value in enumerate(values):
        if position not in taken:
            trigger(UnboundArgumentWarning(position=position, tag=classify(value)), **options)
    for definition in definitions:
        if not definition.wildcard and definition.name not in bindings:
            trigger(MissingArgumentWarning(name=definition.name, spec=definition.spec), **options)


def bind_arguments(arguments, types, rules=Unset, /):
    """
    Bind positional call arguments to declared names, types and defaults.

    Parameters
    - arguments: the supplied values. Either
      • a list, tuple, or any iterable (a function's *args works directly), or
      • an index-keyed mapping {0: (value, positions), 1: ...} whose position
        sets constrain where the i-th definition's value may appear.
      Entries equal to Unset are ignored.
    - types: the declared arguments. Either
      • a mapping {"name": spec, ...}, or
      • a sequence of single-entry mappings [{"name": spec}, ...] to fix the
        declaration order explicitly.
      A spec is a pipe-delimited type string ("number|bool", "*" for any), a
      default declaration [default] / [default, "spec"], or for the "*" name a
      wildcard "prefix:spec".
    - rules: optional mapping with `length`, `array`, `warn` and `shell`
      booleans (see Rules); unknown keys are ignored.

    Returns
    - Bindings (name → value, with `length` unless suppressed), or a plain
      list of the resolved values when rules["array"] is True.

    Raises
    - TypeError / ValueError only for a malformed call shape (see
      argbind.definitions). Unmatched values never raise.
    """
    rules = _sanitize_rules(rules)
    signature = normalize(types)
    values, definitions = extract_order(arguments, signature.definitions)
    values = resolve_defaults(values, signature._replace(definitions=definitions))
    bindings, taken = _bind(values, definitions)
    if rules.warn:
        _diagnose(values, definitions, bindings, taken, rules)
    return format(Bindings(bindings, values=values), rules)


args = bind_arguments


__all__ = (
    "Bindings",
    "Rules",
    "bind",
    "bind_arguments",
    "args",
)
