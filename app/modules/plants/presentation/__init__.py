"""Presentation layer: FastAPI dependencies and routers."""
