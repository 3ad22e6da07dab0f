"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from hacapi.api import app

    uvicorn hacapi.api:app --reload
"""

from hacapi.api.app import app

__all__ = ["app"]
