"""parinstall: Resolve a cpanfile against MetaCPAN and install it in parallel."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Embedded in the registry User-Agent and in written lockfiles.
_PRODUCT_ID = "parinstall"
