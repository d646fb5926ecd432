"""Target audience sizing for notifications."""

import logging
import random
from typing import Optional

from ..config import CatalogConfig, catalog_config
from ..database import CatalogStore
from ..errors import ValidationError
from ..models import NotificationTarget, NotificationTargetType

logger = logging.getLogger(__name__)


class TargetAudienceResolver:
    """Compute how many users a notification target reaches."""

    def __init__(
        self,
        store: CatalogStore,
        config: CatalogConfig = catalog_config,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.config = config
        self.rng = rng or random.Random()

    def resolve(self, target: NotificationTarget) -> int:
        if target.type == NotificationTargetType.ALL_USERS:
            return len(self.store.users)
        if target.type == NotificationTargetType.CUSTOM_USERS:
            # Ids are counted as given; they are not checked against the user table
            return len(target.user_ids)
        if target.type == NotificationTargetType.STORE_FOLLOWERS:
            return self.estimate_store_followers(target.store_id)
        raise ValidationError(f"Unsupported notification target: {target.type}")

    def estimate_store_followers(self, store_id: Optional[str]) -> int:
        """Placeholder follower count for a store.

        The catalog has no follow relationship, so this is a random draw
        within the configured bounds. It only feeds simulated delivery
        figures and must not be read as real audience data.
        """
        low = self.config.follower_estimate_min
        high = max(low, self.config.follower_estimate_max)
        estimate = self.rng.randint(low, high)
        logger.debug("Estimated %d follower(s) for store %s (placeholder)", estimate, store_id)
        return estimate
