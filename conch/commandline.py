"""
Conch command-line parsing: from a raw line to (command, arguments).

Pipeline
1) tokenize(): split the line on whitespace with shell-like quoting. Quoted
   text keeps its whitespace and the quotes are dropped; an open quote at the
   end of the line fails with UNTERMINATED_QUOTE.
2) locate(): resolve the first token as a path; it must name a Command
   (NOT_A_COMMAND for a directory, including the empty line).
3) Binding: match the remaining tokens to the command's parameters.
   • Named pass: "--name value", "--name=value", "-n value" and "-name value"
     bind by name. A Boolean marker followed by something that is not a
     boolean literal counts as present, and the token is kept for the
     positional pass.
   • Positional pass: leftover tokens fill the still unbound parameters in
     declaration order.
   • Remaining parameters are required (MISSING_REQUIRED_PARAM) or receive
     their default, computed now.

Tokens starting with "-" followed by a digit or a dot ("-5", "-.5") and the
bare "-" / "--" are values, never markers.

Quick example
    >>> match parse("echo hello --times 2", root):
    ...     case Success((command, arguments)):
    ...         command.execute(arguments, output)
"""
import logging
import re
import shlex

from .arguments import ArgumentBundle
from .entries import SEPARATOR, Directory
from .faults import ErrorKind
from .parameters import ParseContext
from .paths import resolve
from .results import Success, Failure
from .utils import *

logger = logging.getLogger(__name__)

QUOTES = "\"'"

_MARKER = re.compile(r"(?P<marker>--?[^\W\d_][\w-]*)(=(?P<value>.*))?", re.DOTALL)


def tokenize(line, /, quotes=QUOTES):
    """
    split 'line' into tokens, honoring 'quotes' as quote characters.

    examples
    - 'echo "hello world"' -> ["echo", "hello world"]
    - "say ''"             -> ["say", ""]
    - 'echo "oops'         -> Failure(UNTERMINATED_QUOTE)
    """
    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    lexer.escape = ""
    lexer.quotes = quotes
    try:
        return Success(list(lexer))
    except ValueError:
        return Failure(
            ErrorKind.UNTERMINATED_QUOTE,
            "unterminated quote in %r" % line,
            title="unterminated quote",
            input=line,
            hint="close the quoted text, or quote it with the other quote character",
        )


class CommandLine:
    """
    A tokenized line split into its path element and argument elements.

    for_execute() keeps the tokens as typed; for_assist() appends an empty
    token when the line is empty or ends in whitespace, so the element being
    completed is always the last one.
    """
    __slots__ = ("_elements",)

    def __init__(self, elements, /):
        self._elements = tuple(elements)

    @classmethod
    def for_execute(cls, line, /, quotes=QUOTES):
        result = tokenize(line, quotes)
        return Success(cls(result.value)) if result else result

    @classmethod
    def for_assist(cls, line, /, quotes=QUOTES):
        result = tokenize(line, quotes)
        if not result:
            return result
        elements = result.value
        if not line or line[-1].isspace():
            elements.append("")
        return Success(cls(elements))

    @property
    def elements(self):
        return self._elements

    @property
    def path(self):
        return self._elements[0] if self._elements else ""

    @property
    def arguments(self):
        return self._elements[1:]

    def __len__(self):
        return len(self._elements)

    def __repr__(self):
        return f"CommandLine({list(self._elements)!r})"


def locate(path, working, /, system=Unset, separator=SEPARATOR):
    """
    resolve the command a line starts with.

    a first token without a separator is looked up in 'system' (the shell's
    built-in commands) before the namespace.
    """
    if system and separator not in path and (command := system.get(path)) is not None:
        return Success(command)
    if not path:
        return Failure(
            ErrorKind.NOT_A_COMMAND,
            "no command given",
            title="not a command",
            input=path,
            hint="type a command name, or 'ls' to see what is available",
        )
    result = resolve(path, working, separator)
    if result and isinstance(result.value, Directory):
        return Failure(
            ErrorKind.NOT_A_COMMAND,
            "%r is a directory, not a command" % result.value.name,
            title="not a command",
            input=path,
            hint="run 'cd %s' to enter it or 'ls %s' to list it" % (path, path),
        )
    return result


def _is_marker(token):
    return _MARKER.fullmatch(token)


class Binding:
    """
    Assignment of a command's tokens to its parameters.

    Shared by parse() and autocompletion: both feed the complete tokens, then
    parsing settles everything while completion looks at what is still open.

    State
    - values: parameter -> parsed value (insertion order = binding order).
    - positionals: (position, token) pairs left for positional assignment.
    - pending: named parameter whose marker was seen but whose value was not.
    """

    def __init__(self, command, context, /):
        self.command = command
        self.context = context
        self.values = {}
        self.positionals = []
        self.pending = None

    @property
    def unbound(self):
        return [parameter for parameter in self.command.parameters if parameter not in self.values]

    def feed(self, tokens, /):
        """
        named pass over 'tokens'; values for named parameters are parsed here.
        """
        for position, token in enumerate(tokens, start=1):
            if (match := _is_marker(token)) is None:
                if self.pending is not None:
                    parameter, self.pending = self.pending, None
                    result = parameter.parse(token, self.context)
                    if not result:
                        # a Boolean flag followed by a non-boolean token
                        if not (fallback := parameter.novalue(self.context)):
                            return result
                        self.values[parameter] = fallback.value
                        self.positionals.append((position, token))
                        continue
                    self.values[parameter] = result.value
                    continue
                self.positionals.append((position, token))
                continue

            if not (result := self.release()):
                return result

            marker, value = match["marker"], match["value"]
            if (parameter := self.command.lookup(marker)) is None:
                return self._unexpected(token, position, "unknown parameter %r" % marker, suggest(
                    marker, ["--" + parameter.name for parameter in self.unbound]
                ))
            if parameter in self.values:
                return self._unexpected(token, position, "parameter %r is already bound" % parameter.name, [])

            if value is None:
                self.pending = parameter
                continue

            if not (result := parameter.parse(value, self.context)):
                return result
            self.values[parameter] = result.value

        return Success()

    def release(self):
        """
        close a pending named parameter that received no value.
        """
        if self.pending is None:
            return Success()
        parameter, self.pending = self.pending, None
        if not (result := parameter.novalue(self.context)):
            return result
        self.values[parameter] = result.value
        return Success()

    def assign(self):
        """
        positional pass: fill unbound parameters in order with leftover tokens.
        """
        unbound = self.unbound
        positionals, self.positionals = self.positionals, []
        for index, (position, token) in enumerate(positionals):
            if index >= len(unbound):
                return self._unexpected(token, position, "command %r takes no more arguments" % self.command.name, [])
            parameter = unbound[index]
            if not (result := parameter.parse(token, self.context)):
                return result
            self.values[parameter] = result.value
        return Success()

    def conclude(self):
        """
        give every remaining parameter its default and build the bundle.
        """
        for parameter in self.unbound:
            if not (result := parameter.unbound(self.context)):
                return result
            self.values[parameter] = result.value
        return Success(ArgumentBundle(
            (parameter.name, self.values[parameter]) for parameter in self.command.parameters
        ))

    def _unexpected(self, token, position, reason, suggestions, /):
        return Failure(
            ErrorKind.UNEXPECTED_ARGUMENT,
            "unexpected argument %r at %s position: %s" % (token, ordinal(position), reason),
            title="unexpected argument",
            input=token,
            suggestions=suggestions,
            hint=("did you mean %r? " % suggestions[0] if suggestions else "") + "usage: %s" % self.command.usage,
        )


def parse(line, working, /, *, system=Unset, separator=SEPARATOR, quotes=QUOTES):
    """
    parse a full command line against the 'working' directory.

    returns
    - Success((command, arguments)) with an ArgumentBundle holding a value for
      every parameter of the command.
    - Failure of the first problem found, in line order.
    """
    result = CommandLine.for_execute(line, quotes)
    if not result:
        return result
    commandline = result.value

    result = locate(commandline.path, working, system, separator)
    if not result:
        return result
    command = result.value

    binding = Binding(command, ParseContext(working, working.root, separator))
    for step in (lambda: binding.feed(commandline.arguments), binding.release, binding.assign, binding.conclude):
        if not (result := step()):
            logger.debug("cannot parse %r: %s", line, result.message)
            return result

    return Success((command, result.value))


__all__ = (
    "QUOTES",
    "tokenize",
    "CommandLine",
    "locate",
    "Binding",
    "parse",
)
