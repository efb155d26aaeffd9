"""
Conch parameter kinds: how raw tokens become typed argument values.

Overview
- Parameter: shared behavior (name, description, optional short alias,
  required/optional status, lazy default supplier, nullability, external
  form).
- Kinds (a closed family, each sealed):
  • String: any token, optionally restricted to a set of choices.
  • Integer: decimal integers with an optional sign, within 32 bits.
  • Double: decimal floating point numbers (finite only).
  • Boolean: "true"/"false" (case-insensitive), or presence as a flag.
  • DirectoryRef: a path resolved to a Directory.
  • CommandRef: a path resolved to a Command.
- ParseContext: the working directory (plus root and separator) a token is
  interpreted against.

Contract (every kind)
- parse(token, context) -> Result[value]
- autocomplete(prefix, context) -> Result[Suggestions]
- unbound(context) -> Result[value]: the value when no token was given
  (MISSING_REQUIRED_PARAM for a required parameter; otherwise the default
  supplier is called right then, never at assembly time).
- novalue(context) -> Result[value]: the value for a named marker given
  without a value ("--verbose"); only Boolean accepts that.

Kinds implement convert(token, context); parse() handles the "null" literal
of nullable parameters before delegating to it.

External form
- "{name: type}" for a required parameter, "[name: type]" for an optional one.

Quick example
    >>> from conch.parameters import Integer
    >>> count = Integer("count", descr="how many times", default=1)
    >>> str(count)
    '[count: integer]'
"""
import logging
import math
import re
from collections import namedtuple
from collections.abc import Iterable

from .entries import SEPARATOR, Directory, Command
from .faults import ErrorKind
from .paths import resolve_directory, resolve_command, complete
from .results import Success, Failure
from .suggestions import CandidateKind, narrow
from .utils import *

logger = logging.getLogger(__name__)

NULL = "null"

ParseContext = namedtuple("ParseContext", ("working", "root", "separator"), defaults=(SEPARATOR,))
ParseContext.__doc__ = """
Where a token is interpreted: the working directory, its root and the path separator.
"""


def _sanitize_name(cls, metadata, /):
    name = metadata["name"]
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    if not re.fullmatch(r"[^\W\d_][\w-]*", name):
        raise ValueError(f"{cls.__typename__} 'name' must start with a letter and hold only letters, digits, '_' or '-'")


def _sanitize_short(cls, metadata, /):
    short = metadata["short"]
    if short is Unset:
        return
    if not isinstance(short, str):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    if not re.fullmatch(r"[^\W\d_]", short):
        raise ValueError(f"{cls.__typename__} 'short' must be a single letter")


def _sanitize_descr(cls, metadata, /):
    descr = metadata["descr"]
    if descr is Unset:
        return
    if not isinstance(descr, str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    if not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' must be a non-empty string")
    metadata["descr"] = descr


def _sanitize_supplier(cls, metadata, /):
    """
    Fold 'default' into 'supplier' so optional parameters share one path.

    - default and supplier are mutually exclusive.
    - a static default becomes a supplier returning it.
    """
    default, supplier = metadata.pop("default"), metadata["supplier"]
    if default is not Unset and supplier is not Unset:
        raise TypeError(f"{cls.__typename__} cannot define both 'default' and 'supplier'")
    if supplier is not Unset and not callable(supplier):
        raise TypeError(f"{cls.__typename__} 'supplier' must be callable")
    if default is not Unset:
        metadata["supplier"] = _constant(default)


def _sanitize_nullable(cls, metadata, /):
    if not isinstance(metadata["nullable"], bool):
        raise TypeError(f"{cls.__typename__} 'nullable' must be a boolean")


def _constant(value, /):
    @rename("default")
    def supplier():
        return value
    return supplier


class Parameter(metaclass=IntrospectableType):
    """
    Base of every parameter kind; not instantiable by itself.

    Parameters
    - name: identifier used for named calls ("--name") and in the bundle.
    - descr: optional one-line description.
    - short: optional one-letter alias ("-n").
    - default: static value making the parameter optional.
    - supplier: zero-argument callable making the parameter optional; called
      each time a line leaves the parameter unbound.
    - nullable: accept the literal "null" as the value None.
    """
    __introspectable__ = ("name", "descr", "short", "supplier", "nullable")
    __displayable__ = ("name", "descr", "short", "required", "nullable")
    __valuetype__ = "value"

    def __init__(self, name, /, descr=Unset, *, short=Unset, default=Unset, supplier=Unset, nullable=False):
        if type(self) is Parameter:
            raise TypeError("parameter cannot be instantiated directly")
        metadata = {
            "name": name,
            "descr": descr,
            "short": short,
            "default": default,
            "supplier": supplier,
            "nullable": nullable,
        }
        for sanitizer in (_sanitize_name, _sanitize_short, _sanitize_descr, _sanitize_supplier, _sanitize_nullable):
            sanitizer(type(self), metadata)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __parameter__(self):
        return self

    @property
    def required(self):
        return self._supplier is Unset

    def __str__(self):
        return ("{%s: %s}" if self.required else "[%s: %s]") % (self._name, type(self).__valuetype__)

    def parse(self, token, context, /):
        if self._nullable and token == NULL:
            return Success(None)
        return self.convert(token, context)

    def convert(self, token, context, /):
        raise NotImplementedError

    def autocomplete(self, prefix, context, /):
        return Failure(
            ErrorKind.NO_MATCH,
            "parameter %r has no suggested values" % self._name,
            title="no match",
            input=prefix,
        )

    def unbound(self, context, /):
        if self.required:
            return Failure(
                ErrorKind.MISSING_REQUIRED_PARAM,
                "missing required parameter %r" % self._name,
                title="missing required parameter",
                input=self._name,
                hint="pass it positionally or as '--%s <%s>'" % (self._name, type(self).__valuetype__),
            )
        try:
            return Success(self._supplier())
        except Exception as exception:
            logger.debug("default supplier of %r raised", self._name, exc_info=True)
            return Failure(
                ErrorKind.INVALID_PARAM_VALUE,
                "default value of parameter %r could not be computed: %s" % (self._name, str(exception) or type(exception).__name__),
                input=self._name,
                exception=exception,
            )

    def novalue(self, context, /):
        return Failure(
            ErrorKind.INVALID_PARAM_VALUE,
            "parameter %r expects a value" % self._name,
            input=self._name,
            hint="pass it as '--%s <%s>'" % (self._name, type(self).__valuetype__),
        )

    def _invalid(self, token, reason, /, **options):
        # options left Unset are omitted from the failure
        return Failure(
            ErrorKind.INVALID_PARAM_VALUE,
            "invalid value %r for parameter %r: %s" % (token, self._name, reason),
            input=token,
            parameter=self._name,
            **{key: value for key, value in options.items() if value is not Unset},
        )


class String(Parameter, sealed=True):
    """
    Free text, optionally restricted to 'choices'.

    'choices' is either an iterable of strings or a zero-argument callable
    returning one; a callable is read each time a value is parsed or
    completed, so the set can follow host state.
    """
    __introspectable__ = ("name", "descr", "short", "supplier", "nullable", "choices")
    __valuetype__ = "string"

    def __init__(self, name, /, descr=Unset, *, choices=Unset, short=Unset, default=Unset, supplier=Unset,
                 nullable=False):
        super().__init__(name, descr, short=short, default=default, supplier=supplier, nullable=nullable)
        if choices is Unset or callable(choices):
            self._choices = choices
            return
        if not isinstance(choices, Iterable) or isinstance(choices, str):
            raise TypeError(f"{type(self).__typename__} 'choices' must be an iterable of strings or a callable")
        choices = tuple(choices)
        if not all(isinstance(choice, str) for choice in choices):
            raise TypeError(f"{type(self).__typename__} 'choices' must hold strings only")
        self._choices = choices

    def _collect(self):
        if callable(self._choices):
            return tuple(self._choices())
        return self._choices

    def convert(self, token, context, /):
        if self._choices is Unset:
            return Success(token)
        try:
            choices = self._collect()
        except Exception as exception:
            logger.debug("choices supplier of %r raised", self._name, exc_info=True)
            return self._invalid(token, "choices could not be computed", exception=exception)
        if token in choices:
            return Success(token)
        suggestions = suggest(token, choices)
        return self._invalid(
            token,
            "expected one of %s" % ", ".join(map(repr, choices)),
            suggestions=suggestions,
            hint="did you mean %r?" % suggestions[0] if suggestions else Unset,
        )

    def autocomplete(self, prefix, context, /):
        if self._choices is Unset:
            return super().autocomplete(prefix, context)
        try:
            choices = self._collect()
        except Exception as exception:
            logger.debug("choices supplier of %r raised", self._name, exc_info=True)
            return self._invalid(prefix, "choices could not be computed", exception=exception)
        return narrow(prefix, dict.fromkeys(choices, CandidateKind.PARAMETER_VALUE), "value of %r" % self._name)


class Integer(Parameter, sealed=True):
    """
    Signed decimal integer ("42", "-7", "+3") within the 32-bit signed range.
    """
    __valuetype__ = "integer"
    __range__ = (-2 ** 31, 2 ** 31 - 1)

    def convert(self, token, context, /):
        if not re.fullmatch(r"[+-]?[0-9]+", token):
            return self._invalid(token, "not an integer")
        # bounds the digit count before int() does any conversion work
        if len(token.lstrip("+-").lstrip("0")) > len(str(type(self).__range__[1])):
            return self._invalid(token, "out of range")
        lower, upper = type(self).__range__
        if not lower <= (value := int(token)) <= upper:
            return self._invalid(token, "out of range")
        return Success(value)


class Double(Parameter, sealed=True):
    """
    Decimal floating point number ("3.5", "-.5", "1e3"); infinities are rejected.
    """
    __valuetype__ = "double"

    def convert(self, token, context, /):
        if not re.fullmatch(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?", token):
            return self._invalid(token, "not a number")
        if math.isinf(value := float(token)):
            return self._invalid(token, "out of range")
        return Success(value)


class Boolean(Parameter, sealed=True):
    """
    "true" or "false" in any letter case ("null" too when nullable).

    Given as a named marker with no value ("--verbose"), an optional Boolean
    evaluates to the negation of its default and a required one to True.
    """
    __valuetype__ = "boolean"
    __vocabulary__ = {"true": True, "false": False}

    def parse(self, token, context, /):
        if self._nullable and token.lower() == NULL:
            return Success(None)
        return self.convert(token, context)

    def convert(self, token, context, /):
        try:
            return Success(type(self).__vocabulary__[token.lower()])
        except KeyError:
            return self._invalid(token, "expected 'true' or 'false'" + (" or 'null'" if self._nullable else ""))

    def novalue(self, context, /):
        if self.required:
            return Success(True)
        result = self.unbound(context)
        return Success(not result.value) if result else result

    def autocomplete(self, prefix, context, /):
        vocabulary = [*type(self).__vocabulary__, *([NULL] if self._nullable else [])]
        return narrow(
            prefix.lower(),
            dict.fromkeys(vocabulary, CandidateKind.PARAMETER_VALUE),
            "value of %r" % self._name,
        )


class DirectoryRef(Parameter, sealed=True):
    """
    Path to a directory, resolved against the working directory.
    """
    __valuetype__ = "directory"

    def convert(self, token, context, /):
        result = resolve_directory(token, context.working, context.separator)
        if not result:
            return self._invalid(token, result.message, cause=result, hint=result.options.get("hint", Unset))
        return result

    def autocomplete(self, prefix, context, /):
        return complete(prefix, context.working, context.separator, (Directory,))


class CommandRef(Parameter, sealed=True):
    """
    Path to a command, resolved against the working directory.

    Completion offers directories too, since they lead to commands.
    """
    __valuetype__ = "command"

    def convert(self, token, context, /):
        result = resolve_command(token, context.working, context.separator)
        if not result:
            return self._invalid(token, result.message, cause=result, hint=result.options.get("hint", Unset))
        return result

    def autocomplete(self, prefix, context, /):
        return complete(prefix, context.working, context.separator, (Directory, Command))


__all__ = (
    "NULL",
    "ParseContext",
    "Parameter",
    "String",
    "Integer",
    "Double",
    "Boolean",
    "DirectoryRef",
    "CommandRef",
)
