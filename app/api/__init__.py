# 📄 File: app/api/__init__.py
# 🧭 Purpose (Layman Explanation):
# This file marks the api folder as a Python package so other parts of the app can import and use
# the API functionality, like a table of contents for all our API features.
# 🧪 Purpose (Technical Summary):
# Package initialization for the API layer: versioned routers and HTTP middleware.
# 🔗 Dependencies:
# None (package initialization)
# 🔄 Connected Modules / Calls From:
# app.main.py

"""
Plant Care Application API Package

Structure:
    api/
    ├── __init__.py          # This file
    ├── middleware/          # Request context and rate limiting
    └── v1/                  # API version 1
        ├── router.py        # Main v1 router
        └── health.py        # Health check endpoints
"""

API_PREFIX = "/api"
CURRENT_VERSION = "v1"
