# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Verified Claims — Output of the (external) authentication layer.

Only an authentication layer should construct an authenticated instance;
the tenant resolution step accepts nothing else, so it cannot run before
identity verification.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional


@dataclass(frozen=True)
class VerifiedClaims:
    """Immutable claim set of the current caller."""

    values: Mapping[str, Any] = field(default_factory=dict)
    authenticated: bool = False

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @classmethod
    def anonymous(cls) -> "VerifiedClaims":
        return cls(values={}, authenticated=False)

    def first(self, names: Iterable[str]) -> Optional[Any]:
        """Value of the first present, non-empty claim among names."""
        for name in names:
            val = self.values.get(name)
            if val not in (None, ""):
                return val
        return None

    def __repr__(self) -> str:
        return f"VerifiedClaims(authenticated={self.authenticated}, claims={sorted(self.values)!r})"
