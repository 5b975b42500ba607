"""
System schemas - Pydantic models for service status responses
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness and basic runtime counters"""
    status: str = Field(description="Always 'healthy' when the API answers")
    service: str = Field(description="Service identifier")
    version: str = Field(description="Application version")
    active_streams: int = Field(description="Streaming sessions currently playing")
    cached_animations: int = Field(description="Animations parsed so far (including failures)")

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "healthy",
                "service": "ascii-animation-server",
                "version": "1.0.0",
                "active_streams": 2,
                "cached_animations": 5
            }
        }
    }
