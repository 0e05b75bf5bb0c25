"""
Tests for client configuration resolution and loading.
"""

import json

import pytest

from cwc_client.client import Client
from cwc_client.config import (
    REQUIRED_KEYS,
    ClientOptions,
    DeliveryAgent,
    config_from_env,
    configure,
    default_client_configuration,
    load_client_config,
    resolve_options,
)
from cwc_client.errors import MissingConfiguration

from conftest import PRODUCTION_HOST, TEST_HOST, make_config


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

class TestResolveOptions:
    def test_builds_options(self):
        options = resolve_options({}, make_config())
        assert isinstance(options, ClientOptions)
        assert options.api_key == "test-api-key"
        assert options.host == TEST_HOST
        assert options.delivery_agent == DeliveryAgent(
            name="Example Advocacy Group",
            ack_email="ack@example.org",
            contact_name="Pat Organizer",
            contact_email="pat@example.org",
            contact_phone="202-555-0100",
        )

    def test_override_wins_and_defaults_fill_gaps(self):
        defaults = make_config(api_key="A", host="H")
        options = resolve_options(defaults, {"api_key": "B"})
        assert options.api_key == "B"
        assert options.host == "H"

    def test_merge_does_not_mutate_defaults(self):
        defaults = make_config(api_key="A")
        resolve_options(defaults, {"api_key": "B"})
        assert defaults["api_key"] == "A"

    @pytest.mark.parametrize("missing", REQUIRED_KEYS)
    def test_missing_key_raises(self, missing):
        config = make_config()
        del config[missing]
        with pytest.raises(MissingConfiguration) as exc_info:
            resolve_options({}, config)
        assert exc_info.value.key == missing
        assert missing in str(exc_info.value)

    def test_options_are_immutable(self):
        options = resolve_options({}, make_config())
        with pytest.raises(AttributeError):
            options.api_key = "other"

    def test_is_production(self):
        assert resolve_options({}, make_config(host=PRODUCTION_HOST)).is_production
        assert resolve_options({}, make_config(host=PRODUCTION_HOST + "/")).is_production
        assert not resolve_options({}, make_config()).is_production


# ---------------------------------------------------------------------------
# Process-wide defaults
# ---------------------------------------------------------------------------

class TestDefaultConfiguration:
    def test_client_reads_defaults(self):
        configure(make_config())
        client = Client()
        assert client.options.api_key == "test-api-key"
        client.close()

    def test_keyword_overrides(self):
        configure(make_config())
        client = Client(api_key="override")
        assert client.options.api_key == "override"
        assert client.options.host == TEST_HOST
        client.close()

    def test_last_write_wins(self):
        configure(make_config(api_key="first"))
        configure(make_config(api_key="second"))
        assert default_client_configuration()["api_key"] == "second"

    def test_returned_defaults_are_a_copy(self):
        configure(make_config())
        defaults = default_client_configuration()
        defaults["api_key"] = "tampered"
        del defaults["host"]
        assert default_client_configuration()["api_key"] == "test-api-key"
        assert Client().options.host == TEST_HOST

    def test_construction_fails_eagerly(self):
        config = make_config()
        del config["delivery_agent_contact_phone"]
        configure(config)
        with pytest.raises(MissingConfiguration, match="delivery_agent_contact_phone"):
            Client()

    def test_client_does_not_mutate_defaults(self):
        configure(make_config())
        Client(api_key="override").close()
        assert default_client_configuration()["api_key"] == "test-api-key"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

class TestLoadClientConfig:
    def test_loads_json_with_api_key_from_env(self, tmp_path, monkeypatch):
        config = make_config()
        del config["api_key"]
        config["api_key_env"] = "MY_CWC_KEY"
        path = tmp_path / "cwc.json"
        path.write_text(json.dumps(config), encoding="utf-8")
        monkeypatch.setenv("MY_CWC_KEY", "secret")

        loaded = load_client_config(path)
        assert loaded["api_key"] == "secret"
        assert "api_key_env" not in loaded
        assert resolve_options({}, loaded).host == TEST_HOST

    def test_unset_env_leaves_api_key_missing(self, tmp_path, monkeypatch):
        config = make_config()
        del config["api_key"]
        config["api_key_env"] = "MY_CWC_KEY"
        path = tmp_path / "cwc.json"
        path.write_text(json.dumps(config), encoding="utf-8")
        monkeypatch.delenv("MY_CWC_KEY", raising=False)

        loaded = load_client_config(path)
        with pytest.raises(MissingConfiguration, match="api_key"):
            resolve_options({}, loaded)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_client_config(tmp_path / "nope.json")

    def test_unknown_keys_dropped(self, tmp_path):
        path = tmp_path / "cwc.json"
        path.write_text(json.dumps(make_config(extra="x")), encoding="utf-8")
        assert "extra" not in load_client_config(path)


class TestConfigFromEnv:
    def test_reads_prefixed_variables(self):
        environ = {
            "CWC_API_KEY": "env-key",
            "CWC_HOST": TEST_HOST,
            "CWC_DELIVERY_AGENT_ACK_EMAIL": "ack@example.org",
            "UNRELATED": "ignored",
        }
        config = config_from_env(environ)
        assert config == {
            "api_key": "env-key",
            "host": TEST_HOST,
            "delivery_agent_ack_email": "ack@example.org",
        }

    def test_empty_values_skipped(self):
        assert config_from_env({"CWC_API_KEY": ""}) == {}
