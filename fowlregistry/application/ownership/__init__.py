"""
Application layer for the ownership bounded context.

Use cases coordinate domain entities and ports to fulfill
ownership operations. No framework or infrastructure imports allowed.
"""
