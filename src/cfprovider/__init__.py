from __future__ import annotations

import logging

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cfprovider")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

# Keep library modules quiet unless the app configures logging:
logging.getLogger(__name__).addHandler(logging.NullHandler())
