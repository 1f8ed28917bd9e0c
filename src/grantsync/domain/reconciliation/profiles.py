"""Deployment variants: identity domain plus merge comparator.

Institutions differ only in these values; the reconciliation algorithm is
shared and never subclassed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from grantsync.config.errors import ConfigurationError

from .merge import FieldMergePolicy

if TYPE_CHECKING:
    from .merge import MergePolicy


@dataclass(frozen=True, slots=True)
class DeploymentProfile:
    name: str
    domain: str
    merge_policy: MergePolicy = field(default_factory=FieldMergePolicy)


DEFAULT_PROFILE: Final = DeploymentProfile(name="default", domain="default.domain")
HARVARD_PILOT_PROFILE: Final = DeploymentProfile(name="harvard-pilot", domain="harvard.edu")

PROFILES: Final[dict[str, DeploymentProfile]] = {
    profile.name: profile for profile in (DEFAULT_PROFILE, HARVARD_PILOT_PROFILE)
}


def get_profile(name: str) -> DeploymentProfile:
    try:
        return PROFILES[name]
    except KeyError as exc:
        known = ", ".join(sorted(PROFILES))
        raise ConfigurationError(f"Unknown deployment {name!r} (known: {known})") from exc


__all__ = [
    "DEFAULT_PROFILE",
    "HARVARD_PILOT_PROFILE",
    "PROFILES",
    "DeploymentProfile",
    "get_profile",
]
