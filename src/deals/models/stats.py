"""Aggregate read models for the dashboard."""

from .base import CatalogModel


class UserStats(CatalogModel):
    total_users: int = 0
    active_users: int = 0
    suspended_users: int = 0
    pending_users: int = 0
    new_users_this_month: int = 0


class CatalogOverview(CatalogModel):
    categories: int = 0
    stores: int = 0
    collections: int = 0
    flyers: int = 0
    active_flyers: int = 0
    users: int = 0
    notifications: int = 0
