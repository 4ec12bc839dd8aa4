"""
PartnerTier repository.

Data access layer for PartnerTier model. Tiers are read by the engine
through the partner join; this repository is used to create them.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.partner_tier import PartnerTier
from commission_engine.repositories.base import BaseRepository


class PartnerTierRepository(BaseRepository[PartnerTier]):
    """PartnerTier repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize partner tier repository."""
        super().__init__(PartnerTier, session)
