"""
Conch autocompletion: candidates for the last, partial token of a line.

Rules
- Only the last token is completed; the ones before it are taken as typed.
- A line holding a single token completes a path: children of the directory
  the text before the last separator resolves to (plus the shell's built-in
  commands for a bare name).
- Once the first token names a command, the partial token is handed to the
  parameter that would receive it:
  • the parameter of a preceding "--name" marker still waiting for a value;
  • parameter names when the token starts with a marker dash, spelled the
    way it is typed ("--name", "-name" or the short "-n");
  • otherwise the next parameter a positional token would fill.
- Suggestions carry the candidates and the text the shell may append.
"""
import logging
import re

from .commandline import QUOTES, CommandLine, Binding, locate
from .entries import SEPARATOR
from .faults import ErrorKind
from .parameters import ParseContext
from .paths import complete
from .results import Success, Failure
from .suggestions import CandidateKind, Suggestions, narrow
from .utils import *

logger = logging.getLogger(__name__)


def _complete_first(partial, working, system, separator):
    result = complete(partial, working, separator)
    if not system or separator in partial:
        return result
    builtins = narrow(partial, dict.fromkeys(system.children, CandidateKind.COMMAND), "command")
    match result, builtins:
        case Success(found), Success(extra):
            # built-ins shadow namespace entries of the same name, as in locate()
            return Success(Suggestions(partial, {**found.kinds, **extra.kinds}))
        case Failure(), Success():
            return builtins
        case _:
            return result


def _markers(partial, parameters):
    """
    marker spellings of 'parameters' in the dash form 'partial' is typed in.

    - "--ti" is offered "--times".
    - "-ti" is offered "-times", and "-n" the short alias "-n".
    - a lone "-" is offered "--times" and "-n".
    """
    long = partial == "-" or partial.startswith("--")
    markers = {}
    for parameter in parameters:
        markers[("--" if long else "-") + parameter.name] = CandidateKind.PARAMETER_NAME
        if parameter.short and not partial.startswith("--"):
            markers["-" + parameter.short] = CandidateKind.PARAMETER_NAME
    return markers


def autocomplete(line, working, /, *, system=Unset, separator=SEPARATOR, quotes=QUOTES):
    """
    complete the last token of 'line' relative to the 'working' directory.

    returns
    - Success(Suggestions) with at least one candidate.
    - Failure(NO_MATCH) when nothing fits, or the failure the preceding
      tokens produce (unknown command, bad value, unterminated quote, ...).
    """
    result = CommandLine.for_assist(line, quotes)
    if not result:
        return result
    commandline = result.value

    if len(commandline) == 1:
        return _complete_first(commandline.path, working, system, separator)

    result = locate(commandline.path, working, system, separator)
    if not result:
        return result
    command = result.value

    context = ParseContext(working, working.root, separator)
    binding = Binding(command, context)
    *complete_tokens, partial = commandline.arguments
    if not (result := binding.feed(complete_tokens)):
        return result

    if binding.pending is not None:
        return binding.pending.autocomplete(partial, context)

    if not (result := binding.assign()):
        return result

    if partial.startswith("-") and not re.match(r"-[\d.]", partial):
        return narrow(partial, _markers(partial, binding.unbound), "unbound parameter of %r" % command.name)

    if not (unbound := binding.unbound):
        logger.debug("%r takes no more arguments", command.name)
        return Failure(
            ErrorKind.NO_MATCH,
            "command %r takes no more arguments" % command.name,
            title="no match",
            input=partial,
            hint="usage: %s" % command.usage,
        )

    return unbound[0].autocomplete(partial, context)


__all__ = (
    "autocomplete",
)
