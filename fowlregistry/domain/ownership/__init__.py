"""
Ownership bounded context: domain layer.

This module contains all domain logic for fowl ownership:
- Transfer lifecycle (PENDING → VERIFIED | REJECTED)
- Proof hashing and canonical signing strings
- Atomic ownership hand-over
- Transfer update notifications
"""
