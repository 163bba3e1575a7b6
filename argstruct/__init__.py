__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argstruct'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .destinations import *
from .faults import *
from .kinds import *
from .tags import *
from .tokens import *
from .renderers import *
from .utils import Present, PresentType

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info",
    "Present",
    "PresentType",
)

# Load the exposed API of the destinations
__all__ += destinations.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the kinds
__all__ += kinds.__all__  # type: ignore[attr-defined]
# Load the exposed API of the tags
__all__ += tags.__all__  # type: ignore[attr-defined]
# Load the exposed API of the tokenizer
__all__ += tokens.__all__  # type: ignore[attr-defined]
# Load the exposed API of the usage renderers
__all__ += renderers.__all__  # type: ignore[attr-defined]
