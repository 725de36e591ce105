"""
Operator bundle validator — structural checks for packaged operator manifests.
"""

__version__ = "0.1.0"
