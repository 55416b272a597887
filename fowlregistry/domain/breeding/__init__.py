"""
Breeding bounded context: domain layer.

This module contains all domain logic for breeding records:
- Family tree reconstruction and radial layout
- Breeding analytics derivation
- Vaccination schedule lifecycle
"""
