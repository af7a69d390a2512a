"""
Core utilities package for Plant Care Application.
Provides exceptions, validation helpers, the authenticated principal,
rate limiting, partial-update types and periodic background tasks.
"""
