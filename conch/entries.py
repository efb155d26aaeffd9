"""
Conch entry layer: the directory/command namespace and command execution.

What this module provides
- Directory: a named container of child entries (directories and commands)
  with a non-owning back-reference to its parent.
- Command: a named leaf holding an ordered parameter list and an executor.
- Assembly helpers:
  • Directory.directory(name): create (or reopen) a child directory.
  • Directory.command(...) / command(...): wrap a callable into a Command,
    directly or as a decorator.
  • Directory.toggle(...): a command flipping a boolean piece of host state.
- execute(command, arguments, output): run an executor and capture any raised
  exception as an EXECUTION_ERROR Failure.

Core ideas
- Assembly happens once; afterwards the tree is only read. Assembly mistakes
  (duplicate names, bad names, non-callable executors) raise immediately.
- Parents are held through weak references so the tree has a single owner
  chain (root → children) and no reference cycles.
- Directory and Command are the only entry kinds; both are sealed.

Quick start
    from conch import Directory, String

    root = Directory("root")

    @root.command(String("text", descr="text to print"))
    def echo(arguments, output):
        \"""print the given text\"""
        output.write(arguments.string("text"))

See also
- conch.parameters for the parameter kinds a command may declare.
- conch.paths for how entries are addressed.
"""
import inspect
import logging
import weakref

from .faults import ErrorKind
from .results import Success, Failure
from .utils import *

logger = logging.getLogger(__name__)

SEPARATOR = "/"
THIS = "."
PARENT = ".."


def _sanitize_identity(cls, metadata, /):
    """
    Validate the name/description shared by every entry.

    Rules
    - name: non-empty str without the path separator and not "." or "..".
    - descr: Unset or a non-empty str (surrounding whitespace trimmed).
    """
    name = metadata["name"]
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    if not name or name.isspace():
        raise ValueError(f"{cls.__typename__} 'name' must be a non-empty string")
    if SEPARATOR in name:
        raise ValueError(f"{cls.__typename__} 'name' cannot contain {SEPARATOR!r}")
    if name in (THIS, PARENT):
        raise ValueError(f"{cls.__typename__} 'name' cannot be {name!r}")

    descr = metadata["descr"]
    if descr is Unset:
        return
    if not isinstance(descr, str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    if not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' must be a non-empty string")
    metadata["descr"] = descr


def _attach_to_parent(self, parent):
    """
    Register an entry under its parent, enforcing unique sibling names.
    """
    if not isinstance(parent, Directory):
        raise TypeError(f"{type(self).__typename__} 'parent' must be a directory")
    if self._parent is not None:
        raise ValueError(f"{type(self).__typename__} {self.name!r} is already attached")
    if parent._children.setdefault(self.name, self) is not self:
        raise ValueError(f"{type(self).__typename__} name {self.name!r} is already in use in {parent.name!r}")
    self._parent = weakref.ref(parent)


class Entry(metaclass=IntrospectableType):
    """
    Common base for every node of the namespace.

    An entry has a name unique among its siblings, an optional description
    and (once attached) a parent directory. Entries are only created through
    the sealed Directory and Command kinds.
    """
    __introspectable__ = ("name", "descr")

    def __init__(self, name, /, descr=Unset, *, parent=Unset):
        if type(self) is Entry:
            raise TypeError("entry cannot be instantiated directly")
        metadata = {"name": name, "descr": descr}
        _sanitize_identity(type(self), metadata)
        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))
        self._parent = None
        if parent is not Unset:
            _attach_to_parent(self, parent)

    @property
    def parent(self):
        """
        The directory holding this entry, or None for a detached entry or the root.
        """
        return self._parent() if self._parent is not None else None

    @property
    def root(self):
        """
        Return the topmost directory of this entry's hierarchy.
        """
        child, parent = self, self.parent
        while parent is not None:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Return the full ancestry from root to this entry as a tuple.
        """
        path = [entry := self]
        while entry.parent is not None:
            path.append(entry := entry.parent)
        return tuple(reversed(path))

    def pathname(self, separator=SEPARATOR, /):
        """
        Absolute path of this entry ("/" for the root, "/lib/build" otherwise).
        """
        return separator + separator.join(step.name for step in self.path[1:])


class Directory(Entry, sealed=True):
    """
    Named container of child directories and commands.

    Children keep insertion order and share one name space: a directory and a
    command cannot have the same name under the same parent.
    """
    __introspectable__ = ("name", "descr", "children")

    def __init__(self, name, /, descr=Unset, *, parent=Unset):
        self._children = {}
        super().__init__(name, descr, parent=parent)

    @property
    def directories(self):
        return tuple(child for child in self._children.values() if isinstance(child, Directory))

    @property
    def commands(self):
        return tuple(child for child in self._children.values() if isinstance(child, Command))

    def get(self, name, default=None, /):
        """
        Return the child named 'name', or default.
        """
        return self._children.get(name, default)

    def __contains__(self, name):
        return name in self._children

    def __iter__(self):
        return iter(tuple(self._children.values()))

    def add(self, entry, /):
        """
        Attach an already built, detached entry under this directory.

        Returns the entry, enabling chained assembly.
        """
        if not isinstance(entry, Entry):
            raise TypeError(f"{type(self).__typename__} add() argument must be an entry")
        _attach_to_parent(entry, self)
        return entry

    def directory(self, name, /, descr=Unset):
        """
        Create a child directory, or reopen an existing one with that name.

        Reopening lets several assembly sites contribute to the same
        directory; a command already holding the name is an error.
        """
        match self._children.get(name):
            case Directory() as directory:
                return directory
            case None:
                return Directory(name, descr, parent=self)
            case _:
                raise ValueError(f"{type(self).__typename__} name {name!r} is already in use by a command")

    def command(self, source=Unset, /, *parameters, name=Unset, descr=Unset):
        """
        Create a command under this directory.

        Thin wrapper around the module-level command(...) factory that
        injects parent=self. Supports the same modes:
        - direct:     directory.command(callback, *parameters, name=..., descr=...)
        - decorator:  @directory.command(*parameters, name=..., descr=...)
        - bare:       @directory.command
        """
        return command(source, *parameters, name=name, descr=descr, parent=self)

    def toggle(self, name, accessor, mutator, /, descr=Unset, *, parameter="value"):
        """
        Create a command that switches a boolean piece of host state.

        The command takes one optional Boolean parameter whose default is the
        negation of accessor(), read each time a line is parsed, so a bare
        'name' flips the state. Executing it calls mutator(value) and writes
        the new state to the output.

        Parameters
        - accessor: zero-argument callable returning the current state.
        - mutator: one-argument callable applying the new state.
        - parameter: name of the boolean parameter (default "value").
        """
        from .parameters import Boolean

        if not callable(accessor) or not callable(mutator):
            raise TypeError(f"{type(self).__typename__} toggle() accessor and mutator must be callable")

        def executor(arguments, output):
            mutator(value := arguments.boolean(parameter))
            output.write("%s: %s" % (name, "on" if value else "off"))

        return command(
            executor,
            Boolean(parameter, descr="state to switch %s to" % name, supplier=lambda: not accessor()),
            name=name,
            descr=coalesce(descr, "toggle %s" % name),
            parent=self,
        )


class Command(Entry, sealed=True):
    """
    Named leaf entry with an ordered parameter list and an executor.

    The executor is a callable receiving (arguments, output): the parsed
    ArgumentBundle and a sink with a write(text) method. Parameter order
    defines positional matching; names (and short aliases) are unique.
    """
    __introspectable__ = ("name", "descr", "parameters", "executor")
    __displayable__ = ("name", "descr", "parameters")

    def __init__(self, name, executor, /, parameters=(), descr=Unset, *, parent=Unset):
        if not callable(executor):
            raise TypeError(f"{type(self).__typename__} 'executor' must be callable")
        self._executor = executor
        self._parameters = tuple(_resolve_parameters(type(self), parameters))
        self._names = {}
        for parameter in self._parameters:
            for key in filter(None, ("--" + parameter.name, parameter.short and "-" + parameter.short)):
                if self._names.setdefault(key, parameter) is not parameter:
                    raise ValueError(f"{type(self).__typename__} parameter name {key!r} is already in use")
        super().__init__(name, descr, parent=parent)

    def lookup(self, marker, /):
        """
        Return the parameter a named-call marker refers to, or None.

        Accepted markers: "--name", "-n" (short alias) and "-name".
        """
        if (parameter := self._names.get(marker)) is not None:
            return parameter
        if marker.startswith("-") and not marker.startswith("--"):
            return self._names.get("-" + marker)
        return None

    @property
    def usage(self):
        """
        One-line usage in external form: "name {a: string} [b: integer]".
        """
        return " ".join([self.name, *map(str, self._parameters)])

    def execute(self, arguments, output, /):
        return execute(self, arguments, output)


def _resolve_parameters(cls, parameters):
    """
    Yield concrete parameters from objects implementing __parameter__().
    """
    for parameter in parameters:
        if not hasattr(parameter, "__parameter__") or not callable(parameter.__parameter__):
            raise TypeError(f"{cls.__typename__} 'parameters' must be parameter-resoluble")
        yield parameter.__parameter__()


def command(source=Unset, /, *parameters, name=Unset, descr=Unset, parent=Unset):
    """
    Create a Command or return a decorator building it later.

    Invocation modes
    - Direct:     command(callback, String("x"), name="x")
    - Decorator:  @command(String("x"))  /  @command

    The name defaults to the callback's __name__ and the description to its
    docstring, so a plain function reads naturally as a command definition.
    """
    if source is not Unset and hasattr(source, "__parameter__"):
        # first positional is a parameter: decorator mode with parameters
        parameters = (source, *parameters)
        source = Unset

    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Command(
            coalesce(name, getattr(source, "__name__", Unset)),
            source,
            parameters,
            coalesce(descr, inspect.getdoc(source) or Unset),
            parent=parent,
        )

    return wrapper(source) if source is not Unset else wrapper


def execute(command, arguments, output, /):
    """
    Invoke a command's executor and capture its outcome.

    Contract
    - The executor may write any text to 'output' before returning.
    - Any Exception raised by the executor is caught here and returned as
      Failure(EXECUTION_ERROR) carrying the exception; it never propagates.
    - Returns Success(None) when the executor completes.
    """
    try:
        command.executor(arguments, output)
    except Exception as exception:
        logger.debug("command %r raised", command.name, exc_info=True)
        return Failure(
            ErrorKind.EXECUTION_ERROR,
            "command %r failed: %s" % (command.name, str(exception) or type(exception).__name__),
            title="execution error",
            input=command.name,
            exception=exception,
            hint="check additional logs for more details",
        )
    return Success()


__all__ = (
    "SEPARATOR",
    "THIS",
    "PARENT",
    "Entry",
    "Directory",
    "Command",
    "command",
    "execute",
)
