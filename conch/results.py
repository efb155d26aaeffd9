"""
Conch result protocol: success/failure values instead of raised errors.

Scope
- Success[_T]: wraps the value an operation produced.
- Failure: carries an ErrorKind, a lowercased message and structured options
  (title, hint, input, suggestions, exception, ...), and knows how to render
  itself through rich in a friendly, actionable way.
- Result: the union of both, used by path resolution, parsing, completion
  and execution alike.

Conventions
- Success is truthy and Failure is falsy, so callers can short-circuit with
  `if not result: return result`.
- Both support structural pattern matching:
      match parse(line, working):
          case Success((command, arguments)): ...
          case Failure(ErrorKind.NOT_A_COMMAND, message): ...
- Failures are immutable; copy.replace(failure, **options) merges options
  into a fresh copy (used to attach rendering flags at the shell boundary).
"""
from collections import defaultdict
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .faults import ErrorKind


class Success[_T]:
    """
    Successful outcome holding the produced value.
    """
    __slots__ = ("_value",)
    __match_args__ = ("value",)

    def __init__(self, value=None, /):
        self._value = value

    @property
    def value(self):
        return self._value

    def __bool__(self):
        return True

    def __eq__(self, other):
        if not isinstance(other, Success):
            return NotImplemented
        return self._value == other._value

    __hash__ = None

    def __repr__(self):
        return f"Success({self._value!r})"


class Failure:
    """
    Failed outcome: an ErrorKind, a message and structured context.

    Options commonly present
    - title: short heading (defaults to the kind's title).
    - hint: one actionable sentence.
    - input: the offending token, path component or parameter name.
    - suggestions: close matches offered as “did you mean”.
    - exception: the original exception for EXECUTION_ERROR.
    - fancy / colorful: rendering flags attached by the shell.
    """
    __slots__ = ("_kind", "_message", "_options")
    __match_args__ = ("kind", "message")

    def __init__(self, kind, message, /, **options):
        if not isinstance(kind, ErrorKind):
            raise TypeError("Failure() first argument must be an error-kind")
        if not isinstance(message, str):
            raise TypeError("Failure() second argument must be a string")
        self._kind = kind
        self._message = message
        self._options = MappingProxyType(options)

    @property
    def kind(self):
        return self._kind

    @property
    def message(self):
        return self._message

    @property
    def options(self):
        return self._options

    @property
    def input(self):
        """
        The offending token/component/parameter name, or None.
        """
        return self._options.get("input")

    def __bool__(self):
        return False

    def __eq__(self, other):
        if not isinstance(other, Failure):
            return NotImplemented
        return (self._kind, self._message) == (other._kind, other._message)

    __hash__ = None

    def __repr__(self):
        return f"Failure({self._kind.name}, {self._message!r})"

    def __str__(self):
        return self._message

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self._kind, self._message, **{**self._options, **overrides})

    def __rich__(self):
        main = __import__("__main__")
        colorful = self._options.get("colorful", False)
        fancy = self._options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self._options.get("prog", "conch")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self._kind.normalize(), styler("code")),
            " | ",
            text(str(self._options.get("title", self._kind.title)).title(), styler("error-title")),
            " ]"
        )
        message = text(self._message, styler("error-message"))
        renderables = [message]
        if hint := self._options.get("hint"):
            renderables.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*renderables), title=header, title_align="left")

        return Group(header, *renderables)


type Result[_T] = Success[_T] | Failure


__all__ = (
    "Success",
    "Failure",
    "Result",
)
