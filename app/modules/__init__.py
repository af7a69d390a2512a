# 📄 File: app/modules/__init__.py
# 🧭 Purpose (Layman Explanation):
# Holds the separate feature areas of the plant care app: plants, photo uploads, reminder
# settings and public stats.
# 🧪 Purpose (Technical Summary):
# Bounded-context packages of the modular monolith. Each module has domain, infrastructure
# and presentation layers and only talks to another module through its repository interface.
# 🔗 Dependencies:
# app.shared
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, app.main
