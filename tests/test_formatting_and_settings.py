import importlib
import importlib.util
from pathlib import Path

import pytest

from fintrack import config
from fintrack.formatting import currencies, format_currency, get_currency
from fintrack.settings import get_config_value, load_config

SCRIPT_PATH = Path(__file__).resolve().parents[1] / 'scripts' / 'validate_settings.py'


def _load_script():
    spec = importlib.util.spec_from_file_location('validate_settings_test', SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_format_currency_defaults_to_peso():
    assert format_currency(1234.5, currency='PHP') == '₱1,234.50'
    assert format_currency(-20, currency='usd') == '-$20.00'
    assert format_currency(1234.567, include_symbol=False) == '1,234.57'


def test_unknown_currency_is_rejected():
    with pytest.raises(ValueError):
        get_currency('XYZ')


def test_currency_table_lists_peso_first():
    table = currencies()
    assert table[0] == {'code': 'PHP', 'symbol': '₱', 'name': 'Philippine Peso'}
    assert {entry['code'] for entry in table} >= {'USD', 'EUR', 'JPY'}


def test_settings_lookup():
    assert get_config_value('recommendations', 'constants', 'essential_positions') == 3
    assert get_config_value('recommendations', 'constants', 'missing', default='x') == 'x'
    assert get_config_value('does_not_exist', 'anything') is None
    with pytest.raises(FileNotFoundError):
        load_config('does_not_exist')


def test_projection_env_overrides(monkeypatch):
    monkeypatch.setenv('FINTRACK_PROJECTION_DAYS', '30')
    monkeypatch.setenv('FINTRACK_PROJECTION_PERIOD', 'yearly')
    try:
        importlib.reload(config)
        assert config.get_projection_days() == 30
        assert config.get_projection_period() == 'monthly'
    finally:
        monkeypatch.delenv('FINTRACK_PROJECTION_DAYS')
        monkeypatch.delenv('FINTRACK_PROJECTION_PERIOD')
        importlib.reload(config)
    assert config.get_projection_days() == 90


def test_settings_validator_passes_on_shipped_files():
    module = _load_script()
    assert module.main() == 0


def test_settings_validator_reports_broken_template(tmp_path):
    module = _load_script()
    broken = tmp_path / 'recommendations.json'
    broken.write_text('{"constants": {}, "messages": {"underfunded_category": "oops"}}', encoding='utf-8')
    errors = module.validate_recommendations(broken)
    assert any('essential_positions' in message for message in errors)
    assert any('{name}' in message for message in errors)


def test_currency_default_comes_from_settings(monkeypatch):
    monkeypatch.delenv('FINTRACK_CURRENCY', raising=False)
    try:
        importlib.reload(config)
        assert config.get_currency_code() == get_config_value('currencies', 'default') == 'PHP'

        monkeypatch.setattr('fintrack.settings.load_config', lambda name: {'default': 'usd'})
        importlib.reload(config)
        assert config.get_currency_code() == 'USD'

        monkeypatch.setenv('FINTRACK_CURRENCY', 'eur')
        importlib.reload(config)
        assert config.get_currency_code() == 'EUR'
    finally:
        monkeypatch.undo()
        importlib.reload(config)
    assert config.get_currency_code() == 'PHP'
