"""Fowl registry: ownership transfer verification, pedigree and breeding services."""

__version__ = "0.1.0"
