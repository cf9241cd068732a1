"""
==============================================================================
Inventory Command Server
==============================================================================

Product catalog driven by named text commands, executed in-process or
over UDP.

==============================================================================
"""

__version__ = "1.0.0"
