"""
ASCII Animation Server - API Layer

HTTP interface over the animation cache-and-stream services.

Structure:
- routes/     : Endpoint handlers
- schemas/    : Pydantic response schemas
- middleware/ : Method guard, error handling
"""

from api.main import create_app

__all__ = ["create_app"]
