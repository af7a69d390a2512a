# 📄 File: app/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Toolbox shared by the plants, uploads, reminders and stats features: configuration,
# error types, the database and photo storage connections, and logging.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel. Subpackages: config (settings, engine, identity client), core
# (exceptions, validation, patch semantics, rate limiting, periodic tasks),
# infrastructure (sessions, column types, object store) and utils (logging).
#
# 🔗 Dependencies:
# - None at package level
#
# 🔄 Connected Modules / Calls From:
# - app.modules.*, app.api, app.main
