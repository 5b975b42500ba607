"""
API Middleware - Request/response processing

Middleware runs before and after each request. Exception handlers turn
domain errors raised in routes into plain-text responses.
"""
