"""
Application layer for the breeding bounded context.

Family tree, vaccination schedule and breeding analytics use cases.
"""
