"""Inventory UI framework and component-library adoption across an org's repos."""

__version__ = "0.1.0"
