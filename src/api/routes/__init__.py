"""
API Routes - HTTP endpoint handlers

Routes receive HTTP requests, call services, and return HTTP responses.
Each area (system, animations) gets its own router, all included in the
main FastAPI app.
"""
