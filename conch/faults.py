"""
Conch fault kinds.

Scope
- ErrorKind: canonical, stable numeric identifiers for every failure the core
  can report. Codes are grouped by domain so logs and searches stay
  predictable, and hosts can remap them to friendlier labels.
- getdoc(): optional description lookup for a kind from the host application.

Integration
- Every public operation returns a Result (see conch.results); a Failure
  always carries one of these kinds plus a lowercased, position-first message.
- Nothing in the core raises for a parse, completion or execution problem.
"""
from enum import IntEnum


class ErrorKind(IntEnum):
    """
    canonical failure kinds used across the shell (stable identifiers).

    grouping (by high-level domain)
    - paths (1110x)
      • ENTRY_NOT_FOUND, NOT_A_DIRECTORY, NOT_A_COMMAND, WRONG_ENTRY_KIND
    - tokens (1111x)
      • UNTERMINATED_QUOTE
    - parameters (1112x)
      • INVALID_PARAM_VALUE, MISSING_REQUIRED_PARAM, UNEXPECTED_ARGUMENT
    - assistance (1113x)
      • NO_MATCH
    - execution (1114x)
      • EXECUTION_ERROR

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- path resolution (1110x) ---
    ENTRY_NOT_FOUND         = 11101
    NOT_A_DIRECTORY         = 11102
    NOT_A_COMMAND           = 11103
    WRONG_ENTRY_KIND        = 11104

    # --- tokenizer (1111x) ---
    UNTERMINATED_QUOTE      = 11111

    # --- parameter binding (1112x) ---
    INVALID_PARAM_VALUE     = 11121
    MISSING_REQUIRED_PARAM  = 11122
    UNEXPECTED_ARGUMENT     = 11123

    # --- assistance (1113x) ---
    NO_MATCH                = 11131

    # --- execution (1114x) ---
    EXECUTION_ERROR         = 11141

    @property
    def title(self):
        """
        default human title for the kind ("entry not found").
        """
        return self.name.lower().replace("_", " ").replace("param", "parameter")

    def normalize(self):
        """
        return a host-normalized string for this kind.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def getdoc(kind, /):
    """
    optional documentation fetch for a failure kind.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are ErrorKind members and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(kind, ErrorKind):
        raise TypeError("getdoc() argument must be an error-kind")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[kind]
    except KeyError:
        return None


__all__ = (
    "ErrorKind",
    "getdoc",
)
