"""
==============================================================================
Utilities Package
==============================================================================

Utility classes for the application.

Modules:
--------
- validators: Product field validation
- formatting: Product listing and catalog summary text

==============================================================================
"""

from .validators import ProductNameValidator, QuantityValidator, UPCValidator
from .formatting import ProductFormatter

__all__ = [
    "ProductNameValidator",
    "QuantityValidator",
    "UPCValidator",
    "ProductFormatter",
]
