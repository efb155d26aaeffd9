"""
Conch argument bundles: the parsed name -> value mapping an executor receives.

ArgumentBundle is an immutable Mapping keyed by parameter name with typed
accessors. Accessors raise instead of returning a Result because they run
inside executors, where a raised exception is turned into an
EXECUTION_ERROR failure by conch.entries.execute().

    def greet(arguments, output):
        output.write("hello %s" % arguments.string("name"))
"""
from collections.abc import Mapping
from types import MappingProxyType

from .entries import Directory, Command


class ArgumentLookupError(LookupError):
    """
    Raised when a bundle holds no argument with the requested name.
    """


class ArgumentTypeError(TypeError):
    """
    Raised when an argument's value is not of the requested kind.
    """


class ArgumentBundle(Mapping):
    """
    Immutable mapping of parameter names to parsed values.

    Every parameter of the parsed command has an entry: values given on the
    line, or defaults computed while parsing.
    """
    __slots__ = ("_values",)

    def __init__(self, values=(), /):
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, name):
        try:
            return self._values[name]
        except KeyError:
            raise ArgumentLookupError("no argument named %r" % name) from None

    def __contains__(self, name):
        return name in self._values

    def get(self, name, default=None, /):
        return self._values.get(name, default)

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return f"ArgumentBundle({dict(self._values)!r})"

    def _typed(self, name, kinds, label, /):
        # None comes from nullable parameters and None defaults
        if (value := self[name]) is None:
            return None
        # bool is an int subclass; never hand it out as an integer or double
        if not isinstance(value, kinds) or (isinstance(value, bool) and bool not in kinds):
            raise ArgumentTypeError("argument %r is not a %s (got %s)" % (name, label, type(value).__name__))
        return value

    def string(self, name, /):
        return self._typed(name, (str,), "string")

    def integer(self, name, /):
        return self._typed(name, (int,), "integer")

    def double(self, name, /):
        return self._typed(name, (float,), "double")

    def boolean(self, name, /):
        return self._typed(name, (bool,), "boolean")

    def directory(self, name, /):
        return self._typed(name, (Directory,), "directory")

    def command(self, name, /):
        return self._typed(name, (Command,), "command")


__all__ = (
    "ArgumentLookupError",
    "ArgumentTypeError",
    "ArgumentBundle",
)
