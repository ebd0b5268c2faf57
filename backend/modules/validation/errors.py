"""
modules/validation/errors.py
----------------------------
Exception raised for malformed engine input.

Soft outcomes (feasibility issues, diff violations, evaluation issues) are
returned as data and never raised.
"""

from __future__ import annotations

from typing import Iterable, Union


class ItineraryValidationError(ValueError):
    """
    Input rejected before any work was done.

    ``errors`` holds every reason found, so callers can report all of them at
    once; ``str(exc)`` joins them with "; ".
    """

    def __init__(self, errors: Union[str, Iterable[str]]) -> None:
        self.errors: list[str] = [errors] if isinstance(errors, str) else list(errors)
        super().__init__("; ".join(self.errors) or "invalid input")
