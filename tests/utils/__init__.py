# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Helpers shared by the tests."""

from ._catalog import make_catalog
from ._time import START, FakeMonotonic, at

__all__ = ["FakeMonotonic", "START", "at", "make_catalog"]
