# 📄 File: app/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Top folder of the plant care backend: a personal plant journal that remembers each
# plant, when it was last watered or fed, its photos and how its owner wants reminders.
#
# 🧪 Purpose (Technical Summary):
# Root package of the FastAPI service; exposes the release version reported by the
# API root endpoint and the packaging metadata.
#
# 🔗 Dependencies:
# - None
#
# 🔄 Connected Modules / Calls From:
# - app.main
# - pyproject.toml (project version)

"""Plant Care backend: plants, care schedules, photo uploads and reminder settings."""

__version__ = "1.0.0"
