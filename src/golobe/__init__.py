"""
Core business logic package for Golobe.

Document schemas, validation, DynamoDB persistence and the signup workflow
live here. Lambda handlers in src/handlers/ are thin wrappers that call into
golobe/.
"""

__all__: list[str] = []
