"""FastAPI application assembly: factory and lifespan."""

from .factory import create_app
from .lifespan import lifespan

__all__ = ["create_app", "lifespan"]
