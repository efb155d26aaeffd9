"""
Conch utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the namespace, parameter and shell layers.
- Public-but-internal leaning: stable enough for hosts, designed primarily to
  support the higher-level modules.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserving None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables.

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr) with
    copies of containers, so public views cannot mutate assembled state.

- ordinal(number)
  • Human-friendly ordinal labels ("first", "second", "11th") for messages.

- suggest(word, possibilities)
  • Close-match lookup used for “did you mean” hints.

- IntrospectableType
  • Metaclass shared by entries and parameters: __typename__, read-only
    mirrored properties, repr from __displayable__, sealed=True.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> ordinal(3)
    'third'
    >>> suggest("lsit", ["list", "lib"])
    ['list']
"""
import builtins
import difflib
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used wherever None is a legitimate value (a parameter default may well be
    None) but the API still has to tell “not provided” apart. A single
    instance, Unset, is exposed.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values such as None, 0, "" or [] are preserved as-is.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator

    Raises
    - TypeError on wrong arity, a non-string name, or a callable whose
      attributes cannot be updated (most built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values.

    Behavior
    - Sequence (non-string, non-tuple): a new list with each element processed.
    - Tuple: a new tuple (tuples are already immutable, but nested lists are not).
    - Mapping: a new dict, keys preserved, values processed.
    - Set: a new set with each element processed.
    - Anything else (entries, parameters, callables): returned as-is.
    """
    if isinstance(object, tuple):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return type(object)(map(_immortalize, object)) if isinstance(object, frozenset) else set(map(_immortalize, object))
    else:
        return coalesce(object)


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The property reads "_{name}" from the instance and returns copies of
    container values, so callers cannot mutate the namespace through a view.

    Example
    - Given self._children, declare children = mirror("children").
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def suggest(word, possibilities, /, limit=3):
    """
    Return up to 'limit' close matches for word among possibilities.

    Thin wrapper over difflib.get_close_matches, kept here so every layer
    phrases “did you mean” hints from the same cutoff.
    """
    return difflib.get_close_matches(word, list(possibilities), limit)


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you
still need to distinguish “no input” from “explicitly passed None”.
"""


class IntrospectableType(type):
    """
    Metaclass giving entries and parameters stable, introspectable shapes.

    Responsibilities
    - Derive __typename__ from the class name for messages ("directory-ref").
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_name" field.
    - Provide __repr__/__rich_repr__ built from __displayable__ (or
      __introspectable__ when unset).
    - Seal classes created with sealed=True against further subclassing.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
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
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "suggest",

    # Types
    "UnsetType",
    "IntrospectableType",

    # Constants
    "Unset",
)
