# sitehost/domain/access.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from sitehost.domain.invariants.exceptions import AuthorizationError


class Capability(str, Enum):
    SITE_HISTORY = "site_history"
    SITE_HISTORY_PREVIEW = "site_history_preview"


@dataclass(frozen=True)
class CapabilitySet:
    """
    Capability flags evaluated once per request.

    Use cases receive this instead of looking flags up themselves.
    """
    flags: Mapping[Capability, bool] = field(default_factory=dict)

    def __post_init__(self):
        normalized = {cap: bool(self.flags.get(cap, False)) for cap in Capability}
        object.__setattr__(self, "flags", MappingProxyType(normalized))

    def enabled(self, capability: Capability) -> bool:
        return self.flags[capability]

    @classmethod
    def of(cls, *capabilities: Capability) -> "CapabilitySet":
        return cls({cap: True for cap in capabilities})

    @classmethod
    def for_user(cls, tenant, user=None) -> "CapabilitySet":
        """
        Resolve flags for a user within a tenant.
        A value in the user's feature overrides wins over the tenant's.
        """
        user_overrides = (getattr(user, "features", None) or {}) if user else {}
        flags = {}
        for cap in Capability:
            if user_overrides.get(cap.value) is not None:
                flags[cap] = bool(user_overrides[cap.value])
            else:
                flags[cap] = tenant.has_feature(cap.value)
        return cls(flags)


@dataclass(frozen=True)
class SiteContext:
    """
    Who is calling, for which site, with which capabilities.

    Built once per request and passed into every site use case.
    """
    tenant_id: str
    site_id: str
    capabilities: CapabilitySet = field(default_factory=CapabilitySet)
    actor_id: Optional[str] = None
    is_admin: bool = False


def can_see_history(caps: CapabilitySet) -> bool:
    return caps.enabled(Capability.SITE_HISTORY) or caps.enabled(Capability.SITE_HISTORY_PREVIEW)


def can_use_history(caps: CapabilitySet) -> bool:
    return caps.enabled(Capability.SITE_HISTORY)


def require_history_visible(caps: CapabilitySet) -> None:
    if not can_see_history(caps):
        raise AuthorizationError("Site history is not enabled")


def require_full_history(caps: CapabilitySet) -> None:
    """View, download, restore and discard need the full capability."""
    if not can_use_history(caps):
        raise AuthorizationError("Full site history is not enabled")
