"""Authentication module exports"""

from . import router, schemas, services, dependencies

__all__ = ["router", "schemas", "services", "dependencies"]
