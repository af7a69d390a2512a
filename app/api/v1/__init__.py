# 📄 File: app/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation):
# This file organizes version 1 of our API so we can add new versions later without breaking
# existing apps.
# 🧪 Purpose (Technical Summary):
# Package initialization for API version 1 (router aggregation and health endpoints).
# 🔗 Dependencies:
# None
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, app.main.py

__api_version__ = "v1"
