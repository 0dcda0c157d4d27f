"""Campaign-panel admin domain: panels, panel users, credentials, reports."""

from src.campaign.store import CampaignStore

__all__ = ["CampaignStore"]
