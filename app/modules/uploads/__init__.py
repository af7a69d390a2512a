# 📄 File: app/modules/uploads/__init__.py
# 🧭 Purpose (Layman Explanation):
# Plant photos: lets the app upload pictures straight to storage, checks them afterwards and
# clears away pictures nobody uses any more.
# 🧪 Purpose (Technical Summary):
# Upload lifecycle module: presigned PUTs, server-side registration with size/type recheck,
# per-user quota, delete and the orphan sweep.
# 🔗 Dependencies:
# app.shared.infrastructure.storage.object_store, app.modules.plants (photo references)
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, app.main (orphan sweep task)
