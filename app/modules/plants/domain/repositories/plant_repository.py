# 📄 File: app/modules/plants/domain/repositories/plant_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for how to save, find, edit, water and delete a user's plants,
# and how to find plants that need watering, feeding, misting or repotting.
# 🧪 Purpose (Technical Summary):
# Repository interface for the Plant aggregate: owner-scoped CRUD, PATCH-with-clear,
# bulk watering, the four due-for-care queries and aggregate counts.
# 🔗 Dependencies:
# Domain models (Plant, PlantPatch), typing, abc
# 🔄 Connected Modules / Calls From:
# Plant service, notification service (muted plant check), upload service (orphan sweep),
# stats module, infrastructure implementation

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Collection, List, Optional, Set

from ..models.plant import Plant, PlantPatch


class PlantRepository(ABC):
    """
    Repository interface for Plant aggregate data access operations.

    Implementation Notes:
    - Every per-plant operation is scoped by owner; a plant belonging to another
      user is reported exactly like a plant that does not exist
    - Methods return domain entities (Plant), not database models
    - Store failures surface as StoreUnavailableError
    """

    @abstractmethod
    async def create(self, plant: Plant) -> Plant:
        """
        Insert a new plant.

        Args:
            plant: Plant entity without id

        Returns:
            Plant entity with generated id

        Raises:
            ConflictError: If the slug is already used by the same owner
            StoreUnavailableError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def get_all(self, user_id: str) -> List[Plant]:
        """Every plant owned by ``user_id``."""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str, plant_id: str) -> Optional[Plant]:
        """
        Get plant by id for its owner.

        Returns:
            Plant if found and owned by ``user_id``, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_slug(self, user_id: str, slug: str) -> Optional[Plant]:
        """Get plant by slug for its owner, None otherwise."""
        pass

    @abstractmethod
    async def update(self, plant_id: str, user_id: str, patch: PlantPatch) -> Optional[Plant]:
        """
        Apply a partial update.

        Unset fields are left untouched, cleared fields are removed, set fields
        replace the stored value wholesale. ``updated_at`` is always bumped.

        Args:
            plant_id: Plant id
            user_id: Owner id
            patch: Partial update

        Returns:
            Updated Plant, or None when no plant matches (plant_id, user_id)
        """
        pass

    @abstractmethod
    async def delete(self, plant_id: str, user_id: str) -> bool:
        """True when a plant was removed, False when nothing matched."""
        pass

    @abstractmethod
    async def water_many(self, user_id: str, plant_ids: Collection[str]) -> int:
        """
        Mark plants as watered now.

        Invalid ids and ids owned by someone else are skipped silently.

        Returns:
            Number of plants actually modified
        """
        pass

    # -------------------------------------------------------------------------
    # Due-for-care derivations
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_plants_needing_watering(self, limit: int, now: Optional[datetime] = None) -> List[Plant]:
        """
        Plants whose watering is due at ``now``.

        A plant is due when watering is configured with a positive interval and it
        was either never watered or ``last_watered + interval_days <= now``.
        Order is unspecified.
        """
        pass

    @abstractmethod
    async def get_plants_needing_fertilizing(self, limit: int, now: Optional[datetime] = None) -> List[Plant]:
        pass

    @abstractmethod
    async def get_plants_needing_misting(self, limit: int, now: Optional[datetime] = None) -> List[Plant]:
        """Same rule as watering, restricted to plants that require misting."""
        pass

    @abstractmethod
    async def get_plants_needing_repotting(self, limit: int, now: Optional[datetime] = None) -> List[Plant]:
        """Same rule as watering with the repotting cycle counted in months."""
        pass

    # -------------------------------------------------------------------------
    # Counts and lookups
    # -------------------------------------------------------------------------

    @abstractmethod
    async def count_active_users(self) -> int:
        """Number of distinct owners with at least one plant."""
        pass

    @abstractmethod
    async def count_plants(self) -> int:
        """Total number of plants; may be a fast estimate."""
        pass

    @abstractmethod
    async def count_for_user(self, user_id: str) -> int:
        pass

    @abstractmethod
    async def slugs_for_user(self, user_id: str) -> Set[str]:
        pass

    @abstractmethod
    async def find_owned_ids(self, user_id: str, plant_ids: Collection[str]) -> Set[str]:
        """Subset of ``plant_ids`` that exist and belong to ``user_id``."""
        pass

    @abstractmethod
    async def photo_ids_for_user(self, user_id: str) -> Set[str]:
        """Every photo id referenced by the owner's plants, in photoIds or a growth log entry."""
        pass
