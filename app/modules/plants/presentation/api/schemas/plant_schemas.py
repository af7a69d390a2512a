# 📄 File: app/modules/plants/presentation/api/schemas/plant_schemas.py
# 🧭 Purpose (Layman Explanation):
# Describes the small request and response shapes of the plant endpoints that are not plants
# themselves, like "water these plants" and "done".
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas (camelCase on the wire) for the plants API.
# 🔗 Dependencies:
# pydantic, app.shared.core.models (CamelModel)
# 🔄 Connected Modules / Calls From:
# app.modules.plants.presentation.api.v1.plants

from typing import List

from pydantic import Field

from app.shared.core.models import CamelModel


class WaterPlantsRequest(CamelModel):
    """Plants to mark as watered now."""
    plant_ids: List[str] = Field(default_factory=list, description="Ids of the plants that were watered")


class WaterPlantsResponse(CamelModel):
    success: bool = True
    modified: int = Field(..., description="Number of plants actually updated")
