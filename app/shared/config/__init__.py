# 📄 File: app/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Where the app learns how it is deployed: environment variables, database address
# and the identity service used to check who is signed in.
#
# 🧪 Purpose (Technical Summary):
# Re-exports the settings model and its cached accessor; database.py and supabase.py
# are imported directly by their callers.
#
# 🔗 Dependencies:
# - settings.py
#
# 🔄 Connected Modules / Calls From:
# - app.main, app.shared.infrastructure, feature services

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
