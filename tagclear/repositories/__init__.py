"""
Persistence adapters.

Services depend on the repository and the plain records it returns, never on
SQLAlchemy sessions directly.
"""
