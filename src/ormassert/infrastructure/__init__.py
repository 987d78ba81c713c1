"""Infrastructure layer — engines, entity managers, repositories.

This layer talks to SQLAlchemy. It must never import from helpers,
commands, or output.
"""
