# 📄 File: app/modules/notifications/__init__.py
# 🧭 Purpose (Layman Explanation):
# A user's reminder preferences: when reminders arrive, quiet hours and muted plants.
# 🧪 Purpose (Technical Summary):
# NotificationConfig module: one config per user, lazy defaults, validated upsert.
# 🔗 Dependencies:
# app.shared, app.modules.plants (muted plant ownership)
# 🔄 Connected Modules / Calls From:
# app.api.v1.router
