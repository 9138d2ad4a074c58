"""
argbind type tags and the value classifier.

Overview
- TypeTag: closed enumeration of the labels a runtime value can carry.
- classify(value): map any Python object to exactly one TypeTag.
- matches(value, spec): test a value against a pipe-delimited type spec.
- split(spec): split a pipe-delimited type spec into its alternatives.

Precedence
Several predicates overlap (a datetime is also an ordinary object, a bool is
also an int, a dict is also callable-free structured data), so classify()
checks them top-to-bottom and the first hit wins:

    date → regexp → element → object → array → string → bool → null →
    number → function → defaultobject → undefined → notype

Type spec strings
- A single tag name ("number") or several separated by pipes ("number|bool").
- "*" (or "any") accepts every tag.
- Unknown names are kept as-is and simply never match.

Raw binary scalars (bytes, bytearray, memoryview) carry no tag of their own
and classify as 'notype'; only "*" accepts them.
"""
import datetime
import numbers
import re
from enum import StrEnum
from xml.etree.ElementTree import Element

from .utils import Unset


class TypeTag(StrEnum):
    """
    Discrete classification labels.

    'object' is an exact dict (a plain data literal); 'defaultobject' is any
    other structured value such as a class instance. 'any' is only meaningful
    on the spec side, where it is spelled "*".
    """
    DATE          = "date"
    REGEXP        = "regexp"
    ELEMENT       = "element"
    OBJECT        = "object"
    ARRAY         = "array"
    STRING        = "string"
    BOOL          = "bool"
    NULL          = "null"
    NUMBER        = "number"
    FUNCTION      = "function"
    DEFAULTOBJECT = "defaultobject"
    UNDEFINED     = "undefined"
    ANY           = "*"
    NOTYPE        = "notype"


def _is_element(value):
    # ElementTree nodes, or DOM nodes of ELEMENT_NODE kind (xml.dom.minidom and friends).
    if isinstance(value, Element):
        return True
    return getattr(value, "nodeType", None) == 1 and isinstance(getattr(value, "nodeName", None), str)


def classify(value, /):
    """
    Return the TypeTag of `value`.

    Deterministic and side-effect free; the checks run in the documented
    precedence order and must not be reordered.
    """
    if isinstance(value, (datetime.date, datetime.time)):
        return TypeTag.DATE
    if isinstance(value, re.Pattern):
        return TypeTag.REGEXP
    if _is_element(value):
        return TypeTag.ELEMENT
    if type(value) is dict:
        return TypeTag.OBJECT
    if isinstance(value, (list, tuple)):
        return TypeTag.ARRAY
    if isinstance(value, str):
        return TypeTag.STRING
    if isinstance(value, bool):
        return TypeTag.BOOL
    if value is None:
        return TypeTag.NULL
    if isinstance(value, numbers.Number):
        return TypeTag.NUMBER
    if callable(value):
        return TypeTag.FUNCTION
    if value is not Unset and not isinstance(value, (bytes, bytearray, memoryview)):
        return TypeTag.DEFAULTOBJECT
    if value is Unset:
        return TypeTag.UNDEFINED
    return TypeTag.NOTYPE


def split(spec, /):
    """
    Split a type spec into its alternatives, in listed order.

    Surrounding whitespace of each alternative is ignored and "any" is read
    as "*". Alternatives that name no known tag are preserved verbatim.
    """
    if not isinstance(spec, str):
        raise TypeError(f"type spec must be a string, not {type(spec).__name__!r}")
    alternatives = []
    for alternative in spec.split("|"):
        alternative = alternative.strip()
        if alternative == "any":
            alternative = TypeTag.ANY
        alternatives.append(alternative)
    return tuple(alternatives)


def accepts(alternative, tag, /):
    """
    True when a single spec alternative accepts a classified tag.
    """
    return alternative == TypeTag.ANY or alternative == tag


def matches(value, spec, /):
    """
    Return the first alternative of `spec` that accepts `value`, or None.

    The alternatives are tried in listed order; the first listed one has no
    priority beyond being tried first.
    """
    tag = classify(value)
    for alternative in split(spec):
        if accepts(alternative, tag):
            return alternative
    return None


__all__ = (
    "TypeTag",
    "classify",
    "split",
    "accepts",
    "matches",
)
