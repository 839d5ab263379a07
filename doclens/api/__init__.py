"""FastAPI HTTP layer package.

Serve with::

    uvicorn --factory doclens.api:create_app
"""

from doclens.api.app import create_app

__all__ = ["create_app"]
