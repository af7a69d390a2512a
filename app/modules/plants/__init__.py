# 📄 File: app/modules/plants/__init__.py
# 🧭 Purpose (Layman Explanation):
# Everything about a user's plants: adding them, editing their care schedule, watering them
# and finding out which ones need attention.
# 🧪 Purpose (Technical Summary):
# Plant aggregate module: care-config value types, validation, slug generation, the plant
# repository with due-care queries, PlantService and the /plants router.
# 🔗 Dependencies:
# app.shared (core, database, object store)
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, app.modules.uploads (photo references), app.modules.notifications
# (muted plant ownership), app.modules.stats (counts)
