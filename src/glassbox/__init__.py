"""
GlassBox package initializer.

Exposes the pure entry point ``assess`` and the async ``check_token``
for external usage.  The API and CLI should be imported explicitly from
their respective modules.
"""

__version__ = "2.0.0"

from .assessment import assess  # noqa: E402,F401
from .check_service import check_token  # noqa: E402,F401

__all__ = ["assess", "check_token", "__version__"]
