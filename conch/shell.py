"""
Conch shell: the stateful front end over parsing, completion and execution.

What this module provides
- Shell: holds the namespace root, the working directory and a bounded
  history; executes lines, offers completions and reports failures.
- CommandLineHistory: bounded, navigable record of executed lines.
- ConsoleOutput / BufferOutput: text sinks for executor output and failure
  reports (a rich console, or an in-memory list of lines).

Built-in commands
Unless created with system=False, a shell answers to these names before
looking into the namespace (only for a first token without a separator):
- cd {directory}           change the working directory
- ls [directory] [--recursive]
                           list a directory as a tree
- man {command}            describe a command and its parameters
- pwd                      print the working directory

Rendering
- Failures render through rich (see Failure.__rich__) into plain text, or
  ANSI-styled text when the shell is colorful, and go to the error sink.
- Multi-candidate suggestions render as columns into the output sink.

Host customization (read from __main__)
- __prog__: program name in failure headers.
- __styles__: style overrides for failure rendering.
- __codes__: labels replacing numeric failure codes.
"""
import copy
import io
import logging
from collections import deque

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from .commandline import QUOTES, parse
from .completion import autocomplete
from .entries import SEPARATOR, Directory, execute
from .faults import ErrorKind
from .parameters import Boolean, DirectoryRef, CommandRef
from .results import Success
from .utils import *

logger = logging.getLogger(__name__)


class ConsoleOutput:
    """
    Sink writing each text to a rich console, one line per write.

    ANSI sequences in the text (from a colorful shell) are preserved.
    """

    def __init__(self, console=Unset, /, *, stderr=False):
        self._console = coalesce(console, Console(stderr=stderr, highlight=False))

    @property
    def console(self):
        return self._console

    def write(self, text, /):
        self._console.print(Text.from_ansi(str(text)), highlight=False)


class BufferOutput:
    """
    Sink collecting written texts in memory.
    """
    lines = mirror("lines")

    def __init__(self):
        self._lines = []

    def write(self, text, /):
        self._lines.append(str(text))

    def getvalue(self):
        return "\n".join(self._lines)

    def clear(self):
        self._lines.clear()


class CommandLineHistory:
    """
    Bounded record of executed lines with a navigation cursor.

    previous() walks towards older lines and stops at the oldest; next()
    walks back towards newer ones and returns None once past the newest.
    Pushing a line resets the cursor past the newest line.
    """

    def __init__(self, capacity=30, /):
        if not isinstance(capacity, int) or isinstance(capacity, bool):
            raise TypeError("CommandLineHistory() argument must be an integer")
        if capacity < 1:
            raise ValueError("CommandLineHistory() argument must be positive")
        self._lines = deque(maxlen=capacity)
        self._cursor = 0

    @property
    def capacity(self):
        return self._lines.maxlen

    @property
    def lines(self):
        return tuple(self._lines)

    def __len__(self):
        return len(self._lines)

    def push(self, line, /):
        self._lines.append(line)
        self._cursor = len(self._lines)

    def previous(self):
        if not self._lines:
            return None
        self._cursor = max(self._cursor - 1, 0)
        return self._lines[self._cursor]

    def next(self):
        if self._cursor >= len(self._lines) - 1:
            self._cursor = len(self._lines)
            return None
        self._cursor += 1
        return self._lines[self._cursor]


class Shell:
    """
    Interactive session over a namespace.

    Parameters
    - root: the namespace root; also the initial working directory.
    - output: sink for executor output and suggestion lists (default: console).
    - errors: sink for failure reports (default: stderr console).
    - fancy: render failures inside a panel.
    - colorful: render failures with styles (ANSI escape sequences).
    - history: capacity of the command-line history.
    - system: answer to the built-in commands cd, ls, man and pwd.
    - welcome: text written to the output when the shell starts.
    - separator / quotes: path separator and quote characters.

    Every operation returns its Result; failures are also reported to the
    error sink, so a host can ignore the return value.
    """

    def __init__(self, root, /, output=Unset, errors=Unset, *, fancy=False, colorful=False, history=30,
                 system=True, welcome=Unset, separator=SEPARATOR, quotes=QUOTES):
        if not isinstance(root, Directory):
            raise TypeError("Shell() first argument must be a directory")
        if root.parent is not None:
            raise ValueError("Shell() first argument must be a root directory")
        self._root = self._working = root
        self._output = output if output is not Unset else ConsoleOutput()
        self._errors = errors if errors is not Unset else ConsoleOutput(stderr=True)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._history = CommandLineHistory(history)
        self._separator = separator
        self._quotes = quotes
        self._system = self._builtins() if system else Unset
        if welcome:
            self._output.write(welcome)

    @property
    def root(self):
        return self._root

    @property
    def working(self):
        return self._working

    @working.setter
    def working(self, directory):
        if not isinstance(directory, Directory):
            raise TypeError("working directory must be a directory")
        if directory.root is not self._root:
            raise ValueError("working directory must belong to the shell's namespace")
        logger.debug("working directory is now %r", directory.pathname(self._separator))
        self._working = directory

    @property
    def history(self):
        return self._history

    @property
    def system(self):
        return coalesce(self._system)

    def execute(self, line, /):
        """
        Parse and run one line.

        A blank line does nothing. Any other line is recorded in the history
        before it is parsed; parse and execution failures are reported to the
        error sink and returned.
        """
        if not line.strip():
            return Success()
        self._history.push(line)

        result = parse(line, self._working, system=self._system, separator=self._separator, quotes=self._quotes)
        if result:
            command, arguments = result.value
            logger.debug("executing %r with %r", command.name, arguments)
            result = execute(command, arguments, self._output)
        if not result:
            self._report(result)
        return result

    def assist(self, line, /):
        """
        Complete the last token of 'line', listing candidates when several fit.
        """
        result = autocomplete(line, self._working, system=self._system, separator=self._separator, quotes=self._quotes)
        if not result:
            if result.kind is not ErrorKind.NO_MATCH:
                self._report(result)
            return result
        if len(result.value) > 1:
            self._output.write(self.render(result.value))
        return result

    def complete(self, line, /):
        """
        Return 'line' extended with the text every candidate agrees on.
        """
        result = self.assist(line)
        return line + result.value.suffix(self._separator) if result else line

    def render(self, renderable, /):
        """
        Render any rich renderable to text, honoring the colorful flag.
        """
        buffer = io.StringIO()
        console = Console(
            file=buffer,
            width=100,
            force_terminal=self._colorful,
            color_system="truecolor" if self._colorful else None,
            highlight=False,
        )
        console.print(renderable)
        return buffer.getvalue().rstrip("\n")

    def _report(self, failure):
        self._errors.write(self.render(copy.replace(failure, fancy=self._fancy, colorful=self._colorful)))

    def _tree(self, directory, recursive):
        def populate(branch, directory):
            for entry in directory:
                if isinstance(entry, Directory):
                    child = branch.add(Text(entry.name + self._separator, style="bold blue"))
                    if recursive:
                        populate(child, entry)
                else:
                    branch.add(Text(entry.name))

        populate(tree := Tree(Text(directory.pathname(self._separator), style="bold")), directory)
        return tree

    def _manual(self, command):
        table = Table.grid(padding=(0, 2))
        for parameter in command.parameters:
            table.add_row(
                Text("--%s" % parameter.name + (", -%s" % parameter.short if parameter.short else "")),
                Text(type(parameter).__valuetype__, style="cyan"),
                Text("required" if parameter.required else "optional"),
                Text(parameter.descr or ""),
            )
        renderables = [Text("usage: %s" % command.usage, style="bold")]
        if command.descr:
            renderables.append(Text(command.descr))
        if command.parameters:
            renderables.append(table)
        return Group(*renderables)

    def _builtins(self):
        system = Directory("system", "built-in shell commands")

        @system.command(DirectoryRef("directory", descr="directory to enter"))
        def cd(arguments, output):
            """change the working directory"""
            self.working = arguments.directory("directory")

        @system.command(
            DirectoryRef("directory", descr="directory to list", supplier=lambda: self._working),
            Boolean("recursive", descr="list nested directories too", short="r", default=False),
        )
        def ls(arguments, output):
            """list the entries of a directory"""
            output.write(self.render(self._tree(arguments.directory("directory"), arguments.boolean("recursive"))))

        @system.command(CommandRef("command", descr="command to describe"))
        def man(arguments, output):
            """describe a command and its parameters"""
            output.write(self.render(self._manual(arguments.command("command"))))

        @system.command
        def pwd(arguments, output):
            """print the working directory"""
            output.write(self._working.pathname(self._separator))

        return system


__all__ = (
    "ConsoleOutput",
    "BufferOutput",
    "CommandLineHistory",
    "Shell",
)
