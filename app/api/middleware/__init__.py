# 📄 File: app/api/middleware/__init__.py
# 🧭 Purpose (Layman Explanation):
# Groups the checkpoints every request passes through: request tracking and the limit on how
# often a user can call the API.
# 🧪 Purpose (Technical Summary):
# Request context middleware (request id, access log) and the rate limit dependency.
# 🔗 Dependencies:
# Starlette, app.shared.core.rate_limiter, app.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# app.main, app.api.v1.router
