"""Domain wrappers over the generic cache.

Each entity kind (dentist profile, patient profile, appointments, clinic)
gets a fixed key prefix, a TTL matched to how volatile the data is, and a
tier selection. This layer, not the CacheManager, knows which keys belong to
an owner, so it also owns owner-wide invalidation.

Usage:
    profiles = ProfileCache(cache_manager)
    profile = profiles.cached_fetch(EntityKind.DENTIST_PROFILE, dentist_id,
                                    lambda: api.get_dentist(dentist_id))
"""

import enum
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

from cliniccache.domain.interfaces.cache import CacheService
from cliniccache.domain.models.common import MINUTE_MS, SECOND_MS, OwnerId, StorageTier

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityKind(str, enum.Enum):
    """Kinds of cached clinic data."""

    DENTIST_PROFILE = "dentist_profile"
    PATIENT_PROFILE = "patient_profile"
    APPOINTMENTS = "appointments"
    CLINIC = "clinic"


@dataclass(frozen=True)
class CachePolicy:
    """Namespace prefix, TTL (ms) and tier for one entity kind."""
    prefix: str
    ttl: int
    tier: StorageTier

    def key_for(self, owner_id: str) -> str:
        return f"{self.prefix}_{owner_id}"


DEFAULT_POLICIES: Dict[EntityKind, CachePolicy] = {
    EntityKind.DENTIST_PROFILE: CachePolicy("dentist_profile", 10 * MINUTE_MS, StorageTier.BOTH),
    EntityKind.PATIENT_PROFILE: CachePolicy("patient_profile", 10 * MINUTE_MS, StorageTier.BOTH),
    # Frequently changing, kept out of durable storage
    EntityKind.APPOINTMENTS: CachePolicy("appointments", 2 * MINUTE_MS, StorageTier.MEMORY),
    EntityKind.CLINIC: CachePolicy("clinic", 30 * MINUTE_MS, StorageTier.BOTH),
}

# Kinds keyed by a user id; clinic data is keyed by clinic id
OWNER_SCOPED_KINDS = (EntityKind.DENTIST_PROFILE, EntityKind.PATIENT_PROFILE, EntityKind.APPOINTMENTS)


def build_policies(
    overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
    base: Mapping[EntityKind, CachePolicy] = DEFAULT_POLICIES,
) -> Dict[EntityKind, CachePolicy]:
    """Applies per-deployment TTL/tier overrides to a policy table.

    Args:
        overrides: Mapping of kind name (e.g. 'clinic') to a dict with optional
            'ttl_seconds' and 'tier' entries.
        base: The table to start from.

    Returns:
        A new policy table.

    Raises:
        ValueError: If an override carries a non-positive TTL or an unknown tier.
    """
    policies = dict(base)
    for kind_name, override in (overrides or {}).items():
        try:
            kind = EntityKind(kind_name)
        except ValueError:
            logger.warning(f"Ignoring cache policy override for unknown entity kind '{kind_name}'")
            continue
        policy = policies[kind]
        if override.get("ttl_seconds") is not None:
            ttl = int(float(override["ttl_seconds"]) * SECOND_MS)
            if ttl <= 0:
                raise ValueError(f"Cache policy TTL for '{kind_name}' must be positive")
            policy = replace(policy, ttl=ttl)
        if override.get("tier") is not None:
            policy = replace(policy, tier=StorageTier.parse(override["tier"]))
        policies[kind] = policy
        logger.debug(f"Cache policy for {kind.value}: ttl={policy.ttl}ms tier={policy.tier.value}")
    return policies


class ProfileCache:
    """Policy-bound getters/setters for clinic entities."""

    def __init__(self, cache: CacheService, policies: Optional[Mapping[EntityKind, CachePolicy]] = None):
        self.cache = cache
        self.policies: Dict[EntityKind, CachePolicy] = dict(policies or DEFAULT_POLICIES)

    def key_for(self, kind: EntityKind, owner_id: str) -> str:
        return self.policies[kind].key_for(owner_id)

    def set(self, kind: EntityKind, owner_id: str, data: Any) -> None:
        policy = self.policies[kind]
        self.cache.set(policy.key_for(owner_id), data, ttl=policy.ttl, tier=policy.tier)

    def get(self, kind: EntityKind, owner_id: str) -> Optional[Any]:
        """Returns cached data, or None when never cached or expired."""
        policy = self.policies[kind]
        return self.cache.get(policy.key_for(owner_id), tier=policy.tier)

    # --- Named accessors ---

    def set_dentist_profile(self, dentist_id: OwnerId, data: Any) -> None:
        self.set(EntityKind.DENTIST_PROFILE, dentist_id, data)

    def get_dentist_profile(self, dentist_id: OwnerId) -> Optional[Any]:
        return self.get(EntityKind.DENTIST_PROFILE, dentist_id)

    def set_patient_profile(self, patient_id: OwnerId, data: Any) -> None:
        self.set(EntityKind.PATIENT_PROFILE, patient_id, data)

    def get_patient_profile(self, patient_id: OwnerId) -> Optional[Any]:
        return self.get(EntityKind.PATIENT_PROFILE, patient_id)

    def set_appointments(self, user_id: OwnerId, data: Any) -> None:
        self.set(EntityKind.APPOINTMENTS, user_id, data)

    def get_appointments(self, user_id: OwnerId) -> Optional[Any]:
        return self.get(EntityKind.APPOINTMENTS, user_id)

    def set_clinic(self, clinic_id: str, data: Any) -> None:
        self.set(EntityKind.CLINIC, clinic_id, data)

    def get_clinic(self, clinic_id: str) -> Optional[Any]:
        return self.get(EntityKind.CLINIC, clinic_id)

    # --- Invalidation ---

    def invalidate_owner_caches(self, owner_id: OwnerId) -> None:
        """Removes every owner-scoped entry (profiles, appointments) for one owner.

        Call after any write that mutates the owner's records.
        """
        for kind in OWNER_SCOPED_KINDS:
            self.cache.remove(self.key_for(kind, owner_id))
        logger.info(f"Invalidated cached profile data for owner {owner_id}")

    def clear_all(self) -> None:
        self.cache.clear()

    # --- Fetch-through ---

    def cached_fetch(
        self,
        kind: EntityKind,
        owner_id: str,
        fetch: Callable[[], T],
        use_cache: bool = True,
    ) -> T:
        """Returns cached data on a hit, otherwise fetches, caches and returns it.

        Exceptions raised by `fetch` propagate and nothing is cached. A None
        result is returned but not cached.
        """
        if not use_cache:
            return fetch()

        cached = self.get(kind, owner_id)
        if cached is not None:
            logger.debug(f"{kind.value} for {owner_id} loaded from cache")
            return cached

        result = fetch()
        if result is not None:
            self.set(kind, owner_id, result)
            logger.debug(f"{kind.value} for {owner_id} cached")
        return result
