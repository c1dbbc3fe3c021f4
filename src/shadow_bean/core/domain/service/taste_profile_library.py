from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence
from uuid import uuid4

from returns.result import Failure, Result, Success

from shadow_bean.core.domain.model.errors import CommerceError, ValidationError
from shadow_bean.core.domain.model.clock import epoch_millis
from shadow_bean.core.domain.model.taste_profile import (
    SENSORY_DEFAULT,
    SENSORY_FIELDS,
    GrindType,
    RoastLevel,
    TasteProfile,
)
from shadow_bean.utils.logging import get_logger

logger = get_logger(__name__)

MAX_SAVED_PROFILES = 20

_CUSTOMIZABLE = frozenset(SENSORY_FIELDS + ("roast_level", "grind_type"))


@dataclass(frozen=True)
class TasteProfileLibraryDeps:
    max_profiles: int = MAX_SAVED_PROFILES
    new_profile_id: Callable[[], str] = field(default=lambda: str(uuid4()))
    clock: Callable[[], int] = epoch_millis


class TasteProfileLibrary:
    """Saved blends for one user, newest first, plus the configurator's draft."""

    def __init__(self, deps: TasteProfileLibraryDeps | None = None) -> None:
        self.deps = deps or TasteProfileLibraryDeps()
        self._lock = threading.RLock()
        self._profiles: tuple[TasteProfile, ...] = ()
        self._draft: dict[str, Any] = {}

    @property
    def profiles(self) -> Sequence[TasteProfile]:
        return self._profiles

    @property
    def current_customization(self) -> dict[str, Any]:
        return dict(self._draft)

    def set_customization(self, **fields: Any) -> dict[str, Any]:
        unknown = set(fields) - _CUSTOMIZABLE
        if unknown:
            raise ValueError(f"unknown customization fields: {sorted(unknown)}")
        with self._lock:
            self._draft = {**self._draft, **fields}
            return dict(self._draft)

    def save_customization(self) -> Result[TasteProfile | None, CommerceError]:
        """Store the draft as a named profile.

        Returns ``Success(None)`` when roast/grind are still unset or an
        equivalent blend is already saved.
        """
        with self._lock:
            draft = self._draft
            if draft.get("roast_level") is None or draft.get("grind_type") is None:
                return Success(None)

            try:
                profile = TasteProfile(
                    id=self.deps.new_profile_id(),
                    name=f"Blend #{str(self.deps.clock())[-4:]}",
                    bitterness=draft.get("bitterness", SENSORY_DEFAULT),
                    acidity=draft.get("acidity", SENSORY_DEFAULT),
                    body=draft.get("body", SENSORY_DEFAULT),
                    flavour=draft.get("flavour", SENSORY_DEFAULT),
                    roast_level=RoastLevel(draft["roast_level"]),
                    grind_type=GrindType(draft["grind_type"]),
                )
            except ValueError as e:
                return Failure(ValidationError(str(e)))

            if any(p.is_equivalent(profile) for p in self._profiles):
                return Success(None)

            kept = self._profiles
            if len(kept) >= self.deps.max_profiles:
                evicted = kept[self.deps.max_profiles - 1 :]
                kept = kept[: self.deps.max_profiles - 1]
                logger.info("taste_profiles_evicted", ids=[p.id for p in evicted])

            self._profiles = (profile,) + kept

        logger.info("taste_profile_saved", profile_id=profile.id, name=profile.name)
        return Success(profile)

    def delete_profile(self, profile_id: str) -> None:
        with self._lock:
            self._profiles = tuple(p for p in self._profiles if p.id != profile_id)
