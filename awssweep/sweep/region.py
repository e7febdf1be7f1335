"""Region eligibility for resource kinds.

Some resource kinds only exist in one region, others are missing from
GovCloud. A policy is checked before any listing call is made.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

US_WEST_2_REGION_ID = "us-west-2"
US_GOV_EAST_1_REGION_ID = "us-gov-east-1"
US_GOV_WEST_1_REGION_ID = "us-gov-west-1"


@dataclass(frozen=True)
class RegionPolicy:
    """Eligibility rule for one resource kind.

    Attributes:
        description: Human-readable rule summary
        predicate: Callable deciding eligibility for a region
    """

    description: str
    predicate: Callable[[str], bool] = field(compare=False, repr=False)

    def is_eligible(self, kind: str, region: str) -> bool:
        """Check whether a kind can be discovered in a region.

        Args:
            kind: Resource kind name
            region: AWS region name

        Returns:
            True if the kind should be listed in this region
        """
        return self.predicate(region)


def always_eligible() -> RegionPolicy:
    """Policy for kinds available everywhere."""
    return RegionPolicy("all regions", lambda region: True)


def only_regions(*regions: str) -> RegionPolicy:
    """Policy for kinds that must only be swept from the given regions."""
    allowed = frozenset(regions)
    return RegionPolicy(f"only {', '.join(sorted(allowed))}", lambda region: region in allowed)


def excluded_regions(*regions: str) -> RegionPolicy:
    """Policy for kinds unavailable in the given regions."""
    excluded = frozenset(regions)
    return RegionPolicy(f"not in {', '.join(sorted(excluded))}", lambda region: region not in excluded)
