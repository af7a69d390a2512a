# 📄 File: app/modules/stats/__init__.py
# 🧭 Purpose (Layman Explanation):
# Public numbers for the landing page, kept in memory for a few minutes.
# 🧪 Purpose (Technical Summary):
# StatsCache (TTL, injectable clock) and the public /stats router.
# 🔗 Dependencies:
# app.modules.plants (counts), app.shared.infrastructure.database.session
# 🔄 Connected Modules / Calls From:
# app.api.v1.router
