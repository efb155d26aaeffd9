"""
Conch path resolution: walk the namespace tree from a working directory.

Grammar
- Components are separated by SEPARATOR ("/" unless overridden).
- A single leading separator anchors resolution at the root.
- Empty components (from doubled separators) are ignored.
- "." stays in place; ".." moves to the parent (staying put at the root).
- Matching is case-sensitive against the current directory's children.

Outcomes
- resolve() returns Success(entry) where entry is a Directory or a Command.
- EntryNotFound when a component names no child (with close-match hints).
- NotADirectory when a Command appears where more components follow.
- resolve_directory()/resolve_command() narrow the kind and fail with
  WrongEntryKind otherwise.
"""
from .entries import SEPARATOR, THIS, PARENT, Command, Directory
from .faults import ErrorKind
from .results import Success, Failure
from .suggestions import CandidateKind, narrow
from .utils import suggest


def split(path, /, separator=SEPARATOR):
    """
    split a raw path into (absolute, components).

    examples
    - "lib/build"   -> (False, ("lib", "build"))
    - "/lib//build" -> (True, ("lib", "build"))
    - ""            -> (False, ())
    """
    return path.startswith(separator), tuple(filter(None, path.split(separator)))


def resolve(path, working, /, separator=SEPARATOR):
    """
    resolve 'path' relative to the 'working' directory.

    parameters
    - path: str
      raw path; empty means the working directory itself.
    - working: Directory
      directory relative paths start from; its root anchors absolute paths.

    returns
    - Success(Directory | Command) or Failure(ENTRY_NOT_FOUND | NOT_A_DIRECTORY).
    """
    absolute, components = split(path, separator)
    current = working.root if absolute else working

    for index, component in enumerate(components, start=1):
        # a command can only ever be the last component
        if isinstance(current, Command):
            return Failure(
                ErrorKind.NOT_A_DIRECTORY,
                "%r is a command, not a directory, in path %r" % (current.name, path),
                title="not a directory",
                input=current.name,
                hint="commands take no path components after them; remove %r" % separator.join(components[index - 1:]),
            )

        if component == THIS:
            continue

        if component == PARENT:
            current = current.parent if current.parent is not None else current
            continue

        try:
            current = current.children[component]
        except KeyError:
            suggestions = suggest(component, current.children.keys())
            try:
                hint = "did you mean %r? run 'ls %s' to see its entries" % (suggestions[0], current.pathname(separator))
            except IndexError:
                hint = "run 'ls %s' to see its entries" % current.pathname(separator)
            return Failure(
                ErrorKind.ENTRY_NOT_FOUND,
                "directory %r has no entry %r" % (current.name, component),
                title="entry not found",
                input=component,
                suggestions=suggestions,
                hint=hint,
            )

    return Success(current)


def resolve_directory(path, working, /, separator=SEPARATOR):
    """
    resolve 'path' and require a Directory (WRONG_ENTRY_KIND otherwise).
    """
    result = resolve(path, working, separator)
    if result and not isinstance(result.value, Directory):
        return Failure(
            ErrorKind.WRONG_ENTRY_KIND,
            "%r is a command, expected a directory" % result.value.name,
            title="wrong entry kind",
            input=path,
            expected="directory",
            hint="point the path at a directory",
        )
    return result


def resolve_command(path, working, /, separator=SEPARATOR):
    """
    resolve 'path' and require a Command (WRONG_ENTRY_KIND otherwise).
    """
    result = resolve(path, working, separator)
    if result and not isinstance(result.value, Command):
        return Failure(
            ErrorKind.WRONG_ENTRY_KIND,
            "%r is a directory, expected a command" % result.value.name,
            title="wrong entry kind",
            input=path,
            expected="command",
            hint="run 'ls %s' to see the commands it holds" % (path or THIS),
        )
    return result


def complete(partial, working, /, separator=SEPARATOR, kinds=(Directory, Command)):
    """
    complete the last component of a partial path.

    the text up to the last separator must resolve to a directory; its
    children of the accepted 'kinds' whose names start with the remainder
    become the candidates ("li" -> lib, "lib/b" -> build, "/" -> root's
    children).

    returns
    - Success(Suggestions) or Failure(NO_MATCH | ENTRY_NOT_FOUND | NOT_A_DIRECTORY).
    """
    head, anchor, prefix = partial.rpartition(separator)
    base = working
    if anchor:
        result = resolve(head or separator, working, separator)
        if not result:
            return result
        if not isinstance(base := result.value, Directory):
            return Failure(
                ErrorKind.NOT_A_DIRECTORY,
                "%r is a command, not a directory, in path %r" % (base.name, partial),
                title="not a directory",
                input=base.name,
            )

    return narrow(prefix, {
        name: CandidateKind.DIRECTORY if isinstance(child, Directory) else CandidateKind.COMMAND
        for name, child in base.children.items()
        if isinstance(child, kinds)
    }, "entry of %r" % base.pathname(separator))


__all__ = (
    "SEPARATOR",
    "THIS",
    "PARENT",
    "split",
    "resolve",
    "resolve_directory",
    "resolve_command",
    "complete",
)
