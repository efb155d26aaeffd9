"""
Conch suggestions: candidate sets produced by autocompletion.

Scope
- CandidateKind: what a candidate stands for (directory, command, parameter
  name or parameter value). The kind decides what follows a unique match.
- Suggestions: an immutable set of candidates sharing a typed prefix, with
  the common extension the shell can insert right away.
- narrow(): filter possibilities by prefix into Success(Suggestions) or a
  NO_MATCH Failure.

Conventions
- Candidate matching is case-sensitive and prefix-based.
- Suggestions render through rich as columns, so the shell can print a
  multi-candidate list the same way it prints everything else.
"""
import os
from enum import Enum
from types import MappingProxyType

from rich.columns import Columns
from rich.text import Text

from .faults import ErrorKind
from .results import Success, Failure


class CandidateKind(Enum):
    DIRECTORY = "directory"
    COMMAND = "command"
    PARAMETER_NAME = "parameter-name"
    PARAMETER_VALUE = "parameter-value"


class Suggestions:
    """
    Candidates offered for a partial token.

    Attributes
    - prefix: the partial token the candidates extend (the part after the
      last separator for paths).
    - candidates: frozenset of candidate strings, each starting with prefix.
    - kinds: read-only mapping candidate -> CandidateKind.
    """
    __slots__ = ("_prefix", "_kinds")

    def __init__(self, prefix, kinds, /):
        if not isinstance(prefix, str):
            raise TypeError("Suggestions() first argument must be a string")
        if not all(candidate.startswith(prefix) for candidate in kinds):
            raise ValueError("Suggestions() candidates must start with the prefix")
        self._prefix = prefix
        self._kinds = MappingProxyType(dict(kinds))

    @property
    def prefix(self):
        return self._prefix

    @property
    def kinds(self):
        return self._kinds

    @property
    def candidates(self):
        return frozenset(self._kinds)

    @property
    def common_prefix(self):
        """
        Longest string every candidate starts with (at least the prefix).
        """
        return os.path.commonprefix(sorted(self._kinds)) if self._kinds else self._prefix

    def suffix(self, separator="/", /):
        """
        Text to append to the partial token.

        The common-prefix extension, followed by the separator when the only
        candidate is a directory, or a space when it is anything else.
        """
        extension = self.common_prefix[len(self._prefix):]
        if len(self._kinds) != 1:
            return extension
        kind, = self._kinds.values()
        return extension + (separator if kind is CandidateKind.DIRECTORY else " ")

    def __len__(self):
        return len(self._kinds)

    def __iter__(self):
        return iter(sorted(self._kinds))

    def __contains__(self, candidate):
        return candidate in self._kinds

    def __eq__(self, other):
        if not isinstance(other, Suggestions):
            return NotImplemented
        return (self._prefix, dict(self._kinds)) == (other._prefix, dict(other._kinds))

    __hash__ = None

    def __repr__(self):
        return f"Suggestions({self._prefix!r}, {sorted(self._kinds)!r})"

    def __rich__(self):
        return Columns(
            [Text(candidate + ("/" if kind is CandidateKind.DIRECTORY else "")) for candidate, kind in sorted(self._kinds.items())],
            padding=(0, 2),
        )


def narrow(prefix, possibilities, /, subject="entry"):
    """
    Keep the possibilities starting with 'prefix'.

    parameters
    - possibilities: mapping candidate -> CandidateKind.
    - subject: what the candidates are, for the NO_MATCH message.
    """
    kinds = {candidate: kind for candidate, kind in possibilities.items() if candidate.startswith(prefix)}
    if not kinds:
        return Failure(
            ErrorKind.NO_MATCH,
            "no %s starts with %r" % (subject, prefix) if prefix else "no %s to offer" % subject,
            title="no match",
            input=prefix,
        )
    return Success(Suggestions(prefix, kinds))


__all__ = (
    "CandidateKind",
    "Suggestions",
    "narrow",
)
