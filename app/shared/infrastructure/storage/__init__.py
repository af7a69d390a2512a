# 📄 File: app/shared/infrastructure/storage/__init__.py
# 🧭 Purpose (Layman Explanation):
# Where plant photos live: an S3-compatible bucket the app uploads to directly.
# 🧪 Purpose (Technical Summary):
# Object store abstraction (presign, head, delete, list) and its boto3 implementation.
# 🔗 Dependencies:
# boto3
# 🔄 Connected Modules / Calls From:
# app.modules.uploads, app.modules.plants (photo URLs), app.scripts.setup_storage
