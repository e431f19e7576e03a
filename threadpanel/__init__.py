# SPDX-License-Identifier: MIT
"""Thread history panel: browse, select, and delete conversation threads."""

from threadpanel._version import __version__

__all__ = ["__version__"]
