"""
Infrastructure layer package for Plant Care Application.
Provides database sessions, column types and object storage.
"""
