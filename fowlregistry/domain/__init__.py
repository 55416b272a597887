"""
Domain layer package.

Contains pure business logic: entities, value objects, domain services,
and port interfaces. No framework imports in entities, errors or ports.
Side-effecting collaborators are only reached through ports.
"""
