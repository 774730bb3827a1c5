"""Family intelligence analysis over a weight-ordered AVL tree.

The heavy lifting lives in :mod:`intel_tree.core`; the root level
``family_intel`` script wires it to files and the command line.
"""

from __future__ import annotations

__version__ = "1.0.0"

__all__ = ["__version__"]
