# 📄 File: app/shared/utils/__init__.py

# 🧭 Purpose (Layman Explanation):
# This file sets up a collection of helpful tools that other parts of the app can use,
# currently the logging setup.

# 🧪 Purpose (Technical Summary):
# Initializes the utilities package (structured logging with request/user context).

# 🔗 Dependencies:
# - logging: Structured logging utilities

# 🔄 Connected Modules / Calls From:
# Used by: app.main, middleware, periodic tasks
