import json

import pytest

from autofill.config import (
    DEFAULT_SETTINGS,
    ConfigError,
    SettingsBundle,
    export_bundle,
    load_bundle,
    parse_bundle,
)


def test_empty_document_yields_defaults():
    bundle = parse_bundle("{}")
    assert bundle.settings == DEFAULT_SETTINGS
    assert bundle.site_rules.mode == "neutral"
    assert set(bundle.profile.values()) == {""}
    assert bundle.debug is False


def test_partial_sections_merge_with_defaults():
    bundle = parse_bundle(
        json.dumps(
            {
                "profile": {"email": "ada@x.com", "unknown": "x", "phone": None},
                "settings": {"debug": True, "fillPolicy": {"dryRun": True}},
            }
        )
    )
    assert bundle.profile["email"] == "ada@x.com"
    assert bundle.profile["phone"] == ""
    assert "unknown" not in bundle.profile
    assert bundle.settings["fillPolicy"] == {"skipIfNotEmpty": True, "dryRun": True}
    assert bundle.settings["nameLock"] == {"enabled": True, "mode": "IF_EMPTY"}
    assert bundle.debug is True


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        "[]",
        '{"profile": "ada"}',
        '{"settings": {"nameLock": "on"}}',
        '{"settings": {"nameLock": {"mode": "ALWAYS"}}}',
        '{"siteRules": {"mode": "strict"}}',
        '{"siteRules": {"domains": []}}',
        '{"siteRules": {"domains": {"example.com": "blacklist"}}}',
        '{"siteRules": {"domains": {"example.com": {"enabledTypes": "email"}}}}',
        '{"siteRules": {"domains": {"example.com": {"disabledTypes": [1, 2]}}}}',
        '{"siteRules": {"domains": {"example.com": {"customMap": ["#mail"]}}}}',
        '{"siteRules": {"domains": {"example.com": {"customMap": {"email": 3}}}}}',
        '{"siteRules": {"domains": {"example.com": {"rule": "allow"}}}}',
        '{"settings": {"fillPolicy": {"dryRun": "false"}}}',
        '{"settings": {"fillPolicy": {"skipIfNotEmpty": 0}}}',
        '{"settings": {"nameLock": {"enabled": "yes"}}}',
        '{"settings": {"debug": "true"}}',
    ],
)
def test_invalid_documents_raise_config_error(text):
    with pytest.raises(ConfigError):
        parse_bundle(text)


def test_export_then_parse_keeps_the_bundle():
    bundle = parse_bundle(
        json.dumps(
            {
                "profile": {"fullName": "Ada Lovelace"},
                "siteRules": {"mode": "blacklist", "domains": {"spam.test": {"rule": "blacklist"}}},
            }
        )
    )
    assert parse_bundle(export_bundle(bundle)).to_dict() == bundle.to_dict()


def test_load_bundle_from_disk(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"profile": {"city": "London"}}), encoding="utf-8")
    assert load_bundle(path).profile["city"] == "London"
    with pytest.raises(ConfigError):
        load_bundle(tmp_path / "missing.json")


def test_default_bundles_do_not_share_state():
    first = SettingsBundle()
    first.settings["fillPolicy"]["dryRun"] = True
    assert SettingsBundle().settings["fillPolicy"]["dryRun"] is False
    assert DEFAULT_SETTINGS["fillPolicy"]["dryRun"] is False
