"""App user service."""

import logging
from datetime import timedelta
from typing import Optional

from ..database import CatalogStore
from ..errors import ConflictError, NotFoundError, not_found
from ..models import (
    AppUser,
    AppUserCreate,
    AppUserUpdate,
    AppUserView,
    Page,
    PageParams,
    UserFilters,
    UserStats,
    UserStatus,
)
from .enrichment import ReadEnricher
from .query_engine import QueryEngine

logger = logging.getLogger(__name__)

NEW_USER_WINDOW = timedelta(days=30)


class AppUserService:
    """Service for app user administration."""

    def __init__(self, store: CatalogStore, query: QueryEngine, enricher: ReadEnricher):
        self.store = store
        self.query = query
        self.enricher = enricher

    def get_by_id(self, user_id: str) -> AppUserView:
        """Get user by ID."""
        return self.enricher.user_view(self._require(user_id))

    def list(self, filters: UserFilters, params: PageParams) -> Page:
        """List users. Search covers name and email; city matches as a substring."""
        predicates = []
        if filters.status is not None:
            predicates.append(lambda u: u.status == filters.status)
        if filters.language:
            predicates.append(lambda u: u.language == filters.language)
        if filters.city:
            city = filters.city.lower()
            predicates.append(lambda u: city in u.location.city.lower())

        page = self.query.run(
            self.store.users.values(),
            params,
            predicates=predicates,
            search=filters.search,
            search_fields=(
                lambda u: u.first_name,
                lambda u: u.last_name,
                lambda u: u.display_name,
                lambda u: u.email,
            ),
        )
        return page.map(self.enricher.user_view)

    def find_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[AppUser]:
        wanted = email.strip().lower()
        for user in self.store.users.values():
            if user.id != exclude_id and user.email.lower() == wanted:
                return user
        return None

    def create(self, payload: AppUserCreate) -> AppUserView:
        if self.find_by_email(payload.email) is not None:
            raise ConflictError("Email already registered")

        now = self.store.now()
        user = AppUser(
            id=self.store.new_id('users'),
            created_at=now,
            updated_at=now,
            **dict(payload),
        )
        self.store.users[user.id] = user
        logger.info("Created user %s", user.id)
        return self.enricher.user_view(user)

    def update(self, user_id: str, payload: AppUserUpdate) -> AppUserView:
        user = self._require(user_id)
        changes = payload.changes()
        changes['updated_at'] = self.store.now()
        updated = user.model_copy(update=changes)
        self.store.users[user_id] = updated
        return self.enricher.user_view(updated)

    def delete(self, user_id: str) -> None:
        self._require(user_id)
        del self.store.users[user_id]
        logger.info("Deleted user %s", user_id)

    def suspend(self, user_id: str) -> AppUserView:
        user = self._require(user_id)
        if user.status == UserStatus.SUSPENDED:
            raise ConflictError("User is already suspended")
        return self._set_status(user, UserStatus.SUSPENDED)

    def activate(self, user_id: str) -> AppUserView:
        user = self._require(user_id)
        if user.status == UserStatus.ACTIVE:
            raise ConflictError("User is already active")
        return self._set_status(user, UserStatus.ACTIVE)

    def stats(self) -> UserStats:
        """Get user statistics for the dashboard."""
        users = list(self.store.users.values())
        since = self.store.now() - NEW_USER_WINDOW

        def count(status: UserStatus) -> int:
            return sum(1 for u in users if u.status == status)

        return UserStats(
            total_users=len(users),
            active_users=count(UserStatus.ACTIVE),
            suspended_users=count(UserStatus.SUSPENDED),
            pending_users=count(UserStatus.PENDING_VERIFICATION),
            new_users_this_month=sum(1 for u in users if u.created_at >= since),
        )

    def _set_status(self, user: AppUser, status: UserStatus) -> AppUserView:
        updated = user.model_copy(update={'status': status, 'updated_at': self.store.now()})
        self.store.users[user.id] = updated
        logger.info("User %s is now %s", user.id, status.name.lower())
        return self.enricher.user_view(updated)

    def _require(self, user_id: str) -> AppUser:
        user = self.store.users.get(user_id)
        if user is None:
            raise NotFoundError(not_found("User"))
        return user
