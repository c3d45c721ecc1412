"""Campaign management utilities."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from tavern.core.exceptions import CampaignNotFoundError, ValidationError
from tavern.models.campaign import CampaignModel
from tavern.models.party_member import PartyMemberModel
from tavern.schemas.user import User
from tavern.utils.ownership import ensure_owner, owned_by

logger = logging.getLogger(__name__)


class CampaignManager:
    """Manages campaigns and read access to their party rosters."""

    def __init__(self, db: Session):
        self.db = db

    def create_campaign(
        self,
        owner: User,
        name: str,
        description: Optional[str] = None,
        gm_name: Optional[str] = None,
    ) -> CampaignModel:
        name = name.strip()
        if not name:
            raise ValidationError("Campaign name is required.")
        campaign = CampaignModel(
            name=name,
            description=description,
            gm_name=(gm_name or "").strip() or None,
            owner_email=owner.email,
            created_by_id=owner.user_id,
        )
        self.db.add(campaign)
        self.db.commit()
        self.db.refresh(campaign)
        logger.info("Created campaign %s for user %s", campaign.id, owner.user_id)
        return campaign

    def get_campaign(self, campaign_id: str) -> CampaignModel:
        model = (
            self.db.query(CampaignModel)
            .filter(CampaignModel.id == campaign_id)
            .first()
        )
        if not model:
            raise CampaignNotFoundError(campaign_id)
        return model

    def get_owned_campaign(self, campaign_id: str, user: User) -> CampaignModel:
        """Fetch a campaign the user may mutate.

        Raises:
            CampaignNotFoundError: If absent or owned by someone else.
        """
        model = (
            self.db.query(CampaignModel)
            .filter(CampaignModel.id == campaign_id)
            .first()
        )
        return ensure_owner(model, user, CampaignNotFoundError, campaign_id)

    def list_campaigns_for_user(self, user: User) -> List[CampaignModel]:
        return (
            self.db.query(CampaignModel)
            .filter(owned_by(CampaignModel, user))
            .order_by(CampaignModel.created_at.desc())
            .all()
        )

    def update_campaign(
        self,
        campaign_id: str,
        user: User,
        name: Optional[str] = None,
        description: Optional[str] = None,
        gm_name: Optional[str] = None,
    ) -> CampaignModel:
        campaign = self.get_owned_campaign(campaign_id, user)
        if name is not None:
            if not name.strip():
                raise ValidationError("Campaign name cannot be empty.")
            campaign.name = name.strip()
        if description is not None:
            campaign.description = description
        if gm_name is not None:
            campaign.gm_name = gm_name.strip() or None
        self.db.commit()
        self.db.refresh(campaign)
        return campaign

    def delete_campaign(self, campaign_id: str, user: User) -> None:
        """Delete a campaign with everything recorded under it."""
        campaign = self.get_owned_campaign(campaign_id, user)
        self.db.delete(campaign)
        self.db.commit()
        logger.info("Deleted campaign: %s", campaign_id)

    def list_party(self, campaign_id: str) -> List[PartyMemberModel]:
        return (
            self.db.query(PartyMemberModel)
            .options(joinedload(PartyMemberModel.character))
            .filter(PartyMemberModel.campaign_id == campaign_id)
            .order_by(PartyMemberModel.created_at.asc())
            .all()
        )
