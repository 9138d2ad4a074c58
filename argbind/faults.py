"""
argbind diagnostics (warnings) and rendering.

Binding never fails: a value that matches no definition is dropped, and a
definition that receives nothing is absent from the result. When a caller
opts in with the `warn` rule, those omissions are surfaced as warnings instead
of staying silent.

Scope
- BindingWarning: base type carrying message + options; renders itself with rich.
- UnboundArgumentWarning: a supplied value matched no definition.
- MissingArgumentWarning: a definition received neither a value nor a default.
- trigger(): central entry point to surface a warning (warnings.warn, or the
  stderr console when the `shell` option is set).

Host customization
- __styles__ in __main__ overrides palette entries.
- __prog__ in __main__ replaces the "argbind" label in headers.
"""
import copy
import warnings
from abc import ABC
from collections import defaultdict
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class BindingWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "warning-title": "bold #FFC2E0",  # soft pinky title

            # body
            "warning-message": "#D6D6DE",  # light gray body
            "hint-arrow": "#B8EFAF dim",  # soft green arrow
            "hint": "italic #B8EFAF",  # soft green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", "argbind"), "prog-name"),
            " | ",
            text(self.options.get("title", "").title(), "warning-title"),
            " ]"
        )
        message = text(self.message, "warning-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.options.get("hint", ""), "hint"))
        return Group(header, message, hint)

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnboundArgumentWarning(BindingWarning):
    """
    A supplied value matched no definition and was dropped.

    options: position, tag.
    """

    def __init__(self, message=Unset, /, **options):
        if message is Unset:
            message = f"value of type {str(options['tag'])!r} at position {options['position']} was not bound"
        super().__init__(message, **{
            "title": "unbound argument",
            "hint": "check its type and position against the declared types",
        } | options)


class MissingArgumentWarning(BindingWarning):
    """
    A definition received neither a value nor a default.

    options: name, spec.
    """

    def __init__(self, message=Unset, /, **options):
        if message is Unset:
            message = f"no value of type {options['spec']!r} was bound to {options['name']!r}"
        super().__init__(message, **{
            "title": "missing argument",
            "hint": "pass a matching value or declare a default",
        } | options)


def trigger(fault, /, **options):
    """
    Surface a warning with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see BindingWarning).
    - options are merged into the fault via __replace__(**options) before triggering.

    typical options
    - shell: print to the stderr console instead of emitting through warnings.
    - colorful: style console output (default True).
    - stacklevel: forwarded to warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "BindingWarning",
    "UnboundArgumentWarning",
    "MissingArgumentWarning",
    "trigger",
)
