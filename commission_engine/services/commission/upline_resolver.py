"""
Upline resolver.

Walks a source partner's referral edges upward, breadth-first, and
returns the ancestors eligible to earn from the sale.
"""

import uuid
from collections import deque

from loguru import logger

from commission_engine.services.commission.partner_directory import PartnerDirectory
from commission_engine.services.commission.schemas import (
    PartnerSnapshot,
    UplineAncestor,
)
from commission_engine.utils.exceptions import UpstreamDataError
from commission_engine.validators.transaction import validate_rate_within_bounds


class UplineResolver:
    """
    Resolves the ordered list of paid ancestors for a source partner.

    Rules:
    - hop count is physical: a skipped partner still uses up a level
    - an ancestor at hop k is paid only if k <= its own tier's max depth
    - non-active partners are walked through but not paid
    - the walk never exceeds max_global_depth hops
    - each partner is visited once, so cycles terminate
    """

    def __init__(self, directory: PartnerDirectory) -> None:
        """
        Initialize upline resolver.

        Args:
            directory: Partner directory reader
        """
        self.directory = directory

    async def resolve(
        self,
        tenant_id: uuid.UUID,
        source_partner_id: uuid.UUID,
        max_global_depth: int,
    ) -> list[UplineAncestor]:
        """
        Resolve eligible ancestors.

        Args:
            tenant_id: Tenant ID
            source_partner_id: Partner credited with the sale (level 0)
            max_global_depth: Platform ceiling on hops walked

        Returns:
            Ancestors ordered by levels_from_source (empty if none qualify)

        Raises:
            UpstreamDataError: Dangling edge, missing tier or bad rate override
        """
        source = await self.directory.get_partner(tenant_id, source_partner_id)
        if source is None:
            raise UpstreamDataError(f"Source partner {source_partner_id} not found")

        ancestors: list[UplineAncestor] = []
        visited: set[uuid.UUID] = {source.partner_id}
        queue: deque[tuple[PartnerSnapshot, int]] = deque([(source, 0)])

        while queue:
            partner, level = queue.popleft()
            if level >= max_global_depth:
                continue

            parent_ids = await self.directory.get_upline_parent_ids(tenant_id, partner)
            hop = level + 1

            for parent_id in parent_ids:
                if parent_id in visited:
                    logger.warning(
                        "Upline edge revisits a partner, skipping branch",
                        extra={
                            "tenant_id": str(tenant_id),
                            "source_partner_id": str(source_partner_id),
                            "from_partner": partner.code,
                            "parent_id": str(parent_id),
                            "hop": hop,
                        },
                    )
                    continue
                visited.add(parent_id)

                parent = await self.directory.get_partner(tenant_id, parent_id)
                if parent is None:
                    raise UpstreamDataError(
                        f"Partner {partner.code} references missing upline "
                        f"partner {parent_id} at level {hop}"
                    )

                if self._is_eligible(parent, hop):
                    ancestors.append(self._to_ancestor(parent, hop))

                queue.append((parent, hop))

        logger.debug(
            "Upline resolved",
            extra={
                "tenant_id": str(tenant_id),
                "source_partner": source.code,
                "ancestors": len(ancestors),
                "visited": len(visited) - 1,
            },
        )
        return ancestors

    def _is_eligible(self, partner: PartnerSnapshot, hop: int) -> bool:
        if not partner.is_active:
            return False
        if hop > partner.tier_max_depth:
            return False
        if partner.has_rate_override:
            is_valid, error = validate_rate_within_bounds(
                partner.rate, partner.tier_min_rate, partner.tier_max_rate
            )
            if not is_valid:
                raise UpstreamDataError(f"Partner {partner.code}: {error}")
        return True

    @staticmethod
    def _to_ancestor(partner: PartnerSnapshot, hop: int) -> UplineAncestor:
        return UplineAncestor(
            partner_id=partner.partner_id,
            code=partner.code,
            tier_id=partner.tier_id,
            tier_name=partner.tier_name,
            rate=partner.rate,
            tier_rate=partner.tier_rate,
            tier_max_depth=partner.tier_max_depth,
            levels_from_source=hop,
        )
