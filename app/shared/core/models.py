# 📄 File: app/shared/core/models.py
# 🧭 Purpose (Layman Explanation):
# The common starting point for our data shapes, so the app speaks camelCase JSON to the
# web/mobile clients while the Python code keeps normal snake_case names.
# 🧪 Purpose (Technical Summary):
# Pydantic base model with a camelCase alias generator and by-name population.
# 🔗 Dependencies:
# pydantic
# 🔄 Connected Modules / Calls From:
# Domain models and API schemas of the plants, uploads, notifications and stats modules

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> Dict[str, Any]:
        """JSON-safe dict with wire (camelCase) keys, as stored in JSON columns."""
        return self.model_dump(mode="json", by_alias=True)


class SuccessResponse(CamelModel):
    """Body of endpoints that only confirm an action."""

    success: bool = True
