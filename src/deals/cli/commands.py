"""Command-line interface commands."""

import json
from typing import Any, Dict, Optional, Tuple

import click

from ..api import ApiResult, CatalogApi
from ..config import catalog_config, setup_logging
from ..errors import ValidationError
from ..services import Catalog
from ..utils.json_processor import JSONProcessor


class CliState:
    """Catalog loaded for one CLI invocation, plus where to save it."""

    def __init__(self, data_path: Optional[str], save: bool):
        self.data_path = data_path
        self.save = save
        self.processor = JSONProcessor()
        self.catalog = Catalog(self.processor.load_store(data_path))
        self.api = CatalogApi(self.catalog)


def _parse_body(body: str) -> Dict[str, Any]:
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON: {e}", param_hint='BODY')
    if not isinstance(data, dict):
        raise click.BadParameter("Expected a JSON object", param_hint='BODY')
    return data


def _query(page: Optional[int], limit: Optional[int], filters: Tuple[str, ...], **named: Any) -> Dict[str, Any]:
    """Assemble query parameters from ``--page``/``--limit``, named options and ``-f key=value`` pairs."""
    query: Dict[str, Any] = {'page': page, 'limit': limit}
    query.update({key: value for key, value in named.items() if value is not None})
    for item in filters:
        key, sep, value = item.partition('=')
        if not sep:
            raise click.BadParameter(f"Expected key=value, got '{item}'", param_hint='--filter')
        query[key.strip()] = value.strip()
    return query


def _emit(result: ApiResult, mutating: bool = False) -> None:
    """Print the envelope, set the exit code, and save successful mutations when asked."""
    ctx = click.get_current_context()
    state: CliState = ctx.obj
    click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    if not result.ok:
        ctx.exit(1)
    if mutating and state.save:
        state.processor.save_store(state.catalog.store, state.data_path)


def list_options(func):
    """Shared pagination and free-form filter options for list commands."""
    func = click.option('--filter', '-f', 'filters', multiple=True, help='Extra filter as key=value')(func)
    func = click.option('--limit', type=int, help='Page size')(func)
    func = click.option('--page', type=int, help='Page number')(func)
    return func


@click.group()
@click.option('--data', 'data_path', type=click.Path(dir_okay=False),
              help='Snapshot JSON to load (defaults to the bundled seed)')
@click.option('--save', is_flag=True, help='Write changes back to --data')
@click.option('--log-level', type=str, help='Override LOG_LEVEL')
@click.pass_context
def main(ctx: click.Context, data_path: Optional[str], save: bool, log_level: Optional[str]):
    """Deals admin CLI - catalog, users and notifications."""
    setup_logging(log_level)
    data_path = data_path or catalog_config.seed_file
    if save and not data_path:
        raise click.UsageError("--save requires --data")
    try:
        ctx.obj = CliState(data_path, save)
    except (FileNotFoundError, ValidationError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Cannot load snapshot: {e}")


# Categories


@main.group()
def categories():
    """Manage categories."""


@categories.command('list')
@click.option('--search', type=str, help='Name contains')
@click.option('--status', type=int, help='0 disabled, 1 enabled')
@list_options
@click.pass_obj
def list_categories(state: CliState, search, status, page, limit, filters):
    _emit(state.api.list_categories(_query(page, limit, filters, search=search, status=status)))


@categories.command('get')
@click.argument('category_id')
@click.pass_obj
def get_category(state: CliState, category_id: str):
    _emit(state.api.get_category(category_id))


@categories.command('create')
@click.argument('body')
@click.pass_obj
def create_category(state: CliState, body: str):
    """Create a category from a JSON BODY."""
    _emit(state.api.create_category(_parse_body(body)), mutating=True)


@categories.command('update')
@click.argument('category_id')
@click.argument('body')
@click.pass_obj
def update_category(state: CliState, category_id: str, body: str):
    _emit(state.api.update_category(category_id, _parse_body(body)), mutating=True)


@categories.command('delete')
@click.argument('category_id')
@click.pass_obj
def delete_category(state: CliState, category_id: str):
    _emit(state.api.delete_category(category_id), mutating=True)


# Stores


@main.group()
def stores():
    """Manage stores."""


@stores.command('list')
@click.option('--search', type=str, help='Name contains')
@click.option('--category', type=str, help='Category ID')
@click.option('--status', type=int, help='0 disabled, 1 enabled')
@click.option('--city', type=str, help='Exact city')
@list_options
@click.pass_obj
def list_stores(state: CliState, search, category, status, city, page, limit, filters):
    _emit(state.api.list_stores(
        _query(page, limit, filters, search=search, categoryId=category, status=status, city=city)
    ))


@stores.command('get')
@click.argument('store_id')
@click.pass_obj
def get_store(state: CliState, store_id: str):
    _emit(state.api.get_store(store_id))


@stores.command('create')
@click.argument('body')
@click.pass_obj
def create_store(state: CliState, body: str):
    """Create a store from a JSON BODY; announces it to all users."""
    _emit(state.api.create_store(_parse_body(body)), mutating=True)


@stores.command('update')
@click.argument('store_id')
@click.argument('body')
@click.pass_obj
def update_store(state: CliState, store_id: str, body: str):
    _emit(state.api.update_store(store_id, _parse_body(body)), mutating=True)


@stores.command('delete')
@click.argument('store_id')
@click.pass_obj
def delete_store(state: CliState, store_id: str):
    """Delete a store with its collections and flyers."""
    _emit(state.api.delete_store(store_id), mutating=True)


# Collections


@main.group()
def collections():
    """Manage collections."""


@collections.command('list')
@click.option('--search', type=str, help='Name contains')
@click.option('--store', type=str, help='Store ID')
@click.option('--status', type=int, help='0 disabled, 1 enabled')
@click.option('--active-only', is_flag=True, help='Only collections with a live flyer')
@list_options
@click.pass_obj
def list_collections(state: CliState, search, store, status, active_only, page, limit, filters):
    _emit(state.api.list_collections(_query(
        page, limit, filters, search=search, storeId=store, status=status, activeOnly=active_only,
    )))


@collections.command('get')
@click.argument('collection_id')
@click.pass_obj
def get_collection(state: CliState, collection_id: str):
    _emit(state.api.get_collection(collection_id))


@collections.command('create')
@click.argument('body')
@click.pass_obj
def create_collection(state: CliState, body: str):
    _emit(state.api.create_collection(_parse_body(body)), mutating=True)


@collections.command('update')
@click.argument('collection_id')
@click.argument('body')
@click.pass_obj
def update_collection(state: CliState, collection_id: str, body: str):
    _emit(state.api.update_collection(collection_id, _parse_body(body)), mutating=True)


@collections.command('delete')
@click.argument('collection_id')
@click.pass_obj
def delete_collection(state: CliState, collection_id: str):
    """Delete a collection and its flyers."""
    _emit(state.api.delete_collection(collection_id), mutating=True)


@collections.command('flyers')
@click.argument('collection_id')
@click.option('--active-only', is_flag=True, help='Only flyers live right now')
@list_options
@click.pass_obj
def collection_flyers(state: CliState, collection_id: str, active_only, page, limit, filters):
    _emit(state.api.list_collection_flyers(
        collection_id, _query(page, limit, filters, activeOnly=active_only)
    ))


@collections.command('thumbnail')
@click.argument('collection_id')
@click.argument('flyer_id')
@click.pass_obj
def collection_thumbnail(state: CliState, collection_id: str, flyer_id: str):
    """Use FLYER_ID as the collection thumbnail."""
    _emit(state.api.set_collection_thumbnail(collection_id, {'flyerId': flyer_id}), mutating=True)


# Flyers


@main.group()
def flyers():
    """Manage flyers."""


@flyers.command('list')
@click.option('--search', type=str, help='Name contains')
@click.option('--store', type=str, help='Store ID')
@click.option('--collection', type=str, help='Collection ID')
@click.option('--status', type=int, help='0 disabled, 1 enabled')
@click.option('--active-only', is_flag=True, help='Only flyers live right now')
@list_options
@click.pass_obj
def list_flyers(state: CliState, search, store, collection, status, active_only, page, limit, filters):
    _emit(state.api.list_flyers(_query(
        page, limit, filters,
        search=search, storeId=store, collectionId=collection, status=status, activeOnly=active_only,
    )))


@flyers.command('get')
@click.argument('flyer_id')
@click.pass_obj
def get_flyer(state: CliState, flyer_id: str):
    _emit(state.api.get_flyer(flyer_id))


@flyers.command('create')
@click.argument('collection_id')
@click.argument('body')
@click.pass_obj
def create_flyer(state: CliState, collection_id: str, body: str):
    """Create a flyer in COLLECTION_ID from a JSON BODY."""
    _emit(state.api.create_flyer(collection_id, _parse_body(body)), mutating=True)


@flyers.command('update')
@click.argument('collection_id')
@click.argument('flyer_id')
@click.argument('body')
@click.pass_obj
def update_flyer(state: CliState, collection_id: str, flyer_id: str, body: str):
    _emit(state.api.update_flyer(collection_id, flyer_id, _parse_body(body)), mutating=True)


@flyers.command('delete')
@click.argument('collection_id')
@click.argument('flyer_id')
@click.pass_obj
def delete_flyer(state: CliState, collection_id: str, flyer_id: str):
    _emit(state.api.delete_flyer(collection_id, flyer_id), mutating=True)


# App users


@main.group()
def users():
    """Manage app users."""


@users.command('list')
@click.option('--search', type=str, help='Name or email contains')
@click.option('--status', type=int, help='0 suspended, 1 active, 2 pending verification')
@click.option('--language', type=str, help='Language code')
@click.option('--city', type=str, help='City contains')
@list_options
@click.pass_obj
def list_users(state: CliState, search, status, language, city, page, limit, filters):
    _emit(state.api.list_users(_query(
        page, limit, filters, search=search, status=status, language=language, city=city,
    )))


@users.command('get')
@click.argument('user_id')
@click.pass_obj
def get_user(state: CliState, user_id: str):
    _emit(state.api.get_user(user_id))


@users.command('suspend')
@click.argument('user_id')
@click.pass_obj
def suspend_user(state: CliState, user_id: str):
    _emit(state.api.suspend_user(user_id), mutating=True)


@users.command('activate')
@click.argument('user_id')
@click.pass_obj
def activate_user(state: CliState, user_id: str):
    _emit(state.api.activate_user(user_id), mutating=True)


@users.command('stats')
@click.pass_obj
def user_stats(state: CliState):
    _emit(state.api.user_stats())


# Notifications


@main.group()
def notifications():
    """Manage notifications."""


@notifications.command('list')
@click.option('--search', type=str, help='Title or message contains')
@click.option('--type', 'notification_type', type=str, help='Notification type')
@click.option('--status', type=str, help='draft, scheduled, sent or cancelled')
@click.option('--target-type', type=str, help='all_users, custom_users or store_followers')
@list_options
@click.pass_obj
def list_notifications(state: CliState, search, notification_type, status, target_type, page, limit, filters):
    _emit(state.api.list_notifications(_query(
        page, limit, filters,
        search=search, type=notification_type, status=status, targetType=target_type,
    )))


@notifications.command('get')
@click.argument('notification_id')
@click.pass_obj
def get_notification(state: CliState, notification_id: str):
    _emit(state.api.get_notification(notification_id))


@notifications.command('create')
@click.argument('body')
@click.option('--created-by', type=str, help='Admin ID recorded as author')
@click.pass_obj
def create_notification(state: CliState, body: str, created_by: Optional[str]):
    """Create a notification from a JSON BODY; sent now unless scheduled or sendNow is false."""
    _emit(state.api.create_notification(_parse_body(body), created_by), mutating=True)


@notifications.command('update')
@click.argument('notification_id')
@click.argument('body')
@click.pass_obj
def update_notification(state: CliState, notification_id: str, body: str):
    _emit(state.api.update_notification(notification_id, _parse_body(body)), mutating=True)


@notifications.command('delete')
@click.argument('notification_id')
@click.pass_obj
def delete_notification(state: CliState, notification_id: str):
    _emit(state.api.delete_notification(notification_id), mutating=True)


@notifications.command('cancel')
@click.argument('notification_id')
@click.pass_obj
def cancel_notification(state: CliState, notification_id: str):
    _emit(state.api.cancel_notification(notification_id), mutating=True)


@notifications.command('send')
@click.argument('notification_id')
@click.pass_obj
def send_notification(state: CliState, notification_id: str):
    """Send a scheduled notification now."""
    _emit(state.api.send_notification(notification_id), mutating=True)


@notifications.command('dispatch')
@click.pass_obj
def dispatch_notifications(state: CliState):
    """Send every scheduled notification that is due."""
    _emit(state.api.dispatch_due_notifications(), mutating=True)


@notifications.command('stats')
@click.pass_obj
def notification_stats(state: CliState):
    _emit(state.api.notification_stats())


# Dashboard


@main.command()
@click.pass_obj
def overview(state: CliState):
    """Show record counts for the dashboard."""
    _emit(state.api.overview())


@main.command('check-integrity')
@click.option('--repair', is_flag=True, help='Fix the reported issues')
@click.pass_obj
def check_integrity(state: CliState, repair: bool):
    """Compare collection counters and thumbnails against the live flyers."""
    _emit(state.api.check_integrity(repair), mutating=repair)
