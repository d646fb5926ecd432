"""Tests for the command-line interface."""

import json
import os

import pytest
from click.testing import CliRunner

from deals.cli.commands import main
from deals.config import app_config, catalog_config
from deals.utils.json_processor import JSONProcessor


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setattr(catalog_config, 'seed_file', None)
    # Keep log lines out of the JSON output
    monkeypatch.setattr(app_config, 'log_level', 'ERROR')
    monkeypatch.setattr(app_config, 'debug', False)
    return CliRunner()


@pytest.fixture
def snapshot_path(tmp_path):
    processor = JSONProcessor()
    path = tmp_path / "catalog.json"
    processor.save_store(processor.load_store(), str(path))
    return path


def _body(result):
    return json.loads(result.output)


def test_overview(runner):
    result = runner.invoke(main, ['overview'])

    assert result.exit_code == 0
    data = _body(result)['data']
    assert data['stores'] == 4
    assert data['categories'] == 6
    assert data['notifications'] == 3


def test_failure_exits_with_one(runner):
    result = runner.invoke(main, ['stores', 'get', 'missing'])

    assert result.exit_code == 1
    assert _body(result) == {'status': 1, 'message': "Store not found"}


def test_list_stores_by_category(runner):
    result = runner.invoke(main, ['stores', 'list', '--category', 'cat-1'])

    assert result.exit_code == 0
    stores = _body(result)['data']['list']
    assert [s['name'] for s in stores] == ['Albert Heijn']


def test_list_with_free_form_filter(runner):
    result = runner.invoke(main, ['users', 'list', '-f', 'city=amst', '--limit', '1'])

    assert result.exit_code == 0
    data = _body(result)['data']
    assert data['total'] == 2
    assert data['limit'] == 1
    assert data['totalPages'] == 2


def test_save_writes_changes_back(runner, snapshot_path):
    result = runner.invoke(main, [
        '--data', str(snapshot_path), '--save',
        'categories', 'create', json.dumps({'name': 'Books'}),
    ])

    assert result.exit_code == 0
    saved = json.loads(snapshot_path.read_text(encoding='utf-8'))
    assert 'Books' in [c['name'] for c in saved['categories']]


def test_failed_command_does_not_save(runner, snapshot_path):
    before = snapshot_path.read_text(encoding='utf-8')

    result = runner.invoke(main, ['--data', str(snapshot_path), '--save', 'categories', 'delete', 'cat-1'])

    assert result.exit_code == 1
    assert snapshot_path.read_text(encoding='utf-8') == before


def test_save_requires_data(runner):
    result = runner.invoke(main, ['--save', 'overview'])

    assert result.exit_code == 2


def test_invalid_json_body(runner):
    result = runner.invoke(main, ['categories', 'create', '{not json'])

    assert result.exit_code == 2
    assert "Invalid JSON" in result.output


def test_delete_store_cascades(runner):
    result = runner.invoke(main, ['stores', 'delete', 'store-2'])

    assert result.exit_code == 0
    assert _body(result)['data'] == {'removedCollections': 2}


def test_cancel_scheduled_notification(runner):
    result = runner.invoke(main, ['notifications', 'cancel', 'notif-2'])

    assert result.exit_code == 0
    assert _body(result)['data']['status'] == 'cancelled'


def test_check_integrity_on_seed(runner):
    result = runner.invoke(main, ['check-integrity'])

    assert result.exit_code == 0
    assert _body(result)['data'] == {'repaired': False, 'issues': []}


def test_read_only_command_does_not_rewrite_snapshot(runner, snapshot_path):
    os.utime(snapshot_path, (0, 0))

    for args in (['stores', 'list'], ['users', 'stats'], ['check-integrity']):
        result = runner.invoke(main, ['--data', str(snapshot_path), '--save', *args])
        assert result.exit_code == 0

    assert snapshot_path.stat().st_mtime == 0
