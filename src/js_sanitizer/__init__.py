"""Package initialization for js-sanitizer."""

import contextlib
from importlib.metadata import PackageNotFoundError, version

__version__ = "0.0.0"
with contextlib.suppress(PackageNotFoundError):
    __version__ = version("js-sanitizer")

__all__ = ["__version__"]
