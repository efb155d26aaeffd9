__title__ = 'conch'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.1.0"

from .arguments import *
from .commandline import *
from .completion import *
from .entries import *
from .faults import *
from .parameters import *
from .paths import *
from .results import *
from .shell import *
from .suggestions import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the command line parser
__all__ += commandline.__all__  # type: ignore[attr-defined]
# Load the exposed API of the completion engine
__all__ += completion.__all__  # type: ignore[attr-defined]
# Load the exposed API of the entries
__all__ += entries.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parameters
__all__ += parameters.__all__  # type: ignore[attr-defined]
# Load the exposed API of the path resolver
__all__ += tuple(name for name in paths.__all__ if name not in entries.__all__)  # type: ignore[attr-defined]
# Load the exposed API of the results
__all__ += results.__all__  # type: ignore[attr-defined]
# Load the exposed API of the shell
__all__ += shell.__all__  # type: ignore[attr-defined]
# Load the exposed API of the suggestions
__all__ += suggestions.__all__  # type: ignore[attr-defined]
