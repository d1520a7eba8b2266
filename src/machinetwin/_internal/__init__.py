# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Utility types and functions for internal use."""
