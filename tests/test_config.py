import pytest
from pydantic import ValidationError

from mongodb_persistence.config import ConfigParams, Settings


def test_from_tuples_keeps_order():
    config = ConfigParams.from_tuples("b", 1, "a", 2, "c", None)
    assert list(config.keys()) == ["b", "a", "c"]
    assert config["c"] is None


def test_from_value_flattens_nested_mappings_and_lists():
    config = ConfigParams.from_value(
        {
            "connection": {"host": "localhost", "port": 27017},
            "connections": [{"host": "a"}, {"host": "b"}],
        }
    )

    assert config == {
        "connection.host": "localhost",
        "connection.port": 27017,
        "connections.0.host": "a",
        "connections.1.host": "b",
    }


def test_sections():
    config = ConfigParams.from_tuples(
        "connection.host", "localhost",
        "connection.port", 27017,
        "options.debug", True,
        "collection", "dummies",
    )

    assert config.get_section_names() == ["connection", "options", "collection"]
    assert config.get_section("connection") == {"host": "localhost", "port": 27017}
    assert config.get_section("missing") == {}

    config.add_section("credential", {"username": "user"})
    assert config["credential.username"] == "user"


def test_typed_getters():
    config = ConfigParams.from_tuples(
        "port", "27017",
        "timeout", 5.5,
        "flag", "yes",
        "off", "0",
        "junk", "abc",
        "enabled", True,
    )

    assert config.get_as_integer("port") == 27017
    assert config.get_as_integer("timeout") == 5
    assert config.get_as_nullable_integer("junk") is None
    assert config.get_as_integer_with_default("missing", 42) == 42
    assert config.get_as_boolean("flag") is True
    assert config.get_as_boolean("off") is False
    assert config.get_as_nullable_boolean("junk") is None
    assert config.get_as_boolean_with_default("missing", True) is True
    assert config.get_as_nullable_string("enabled") == "true"
    assert config.get_as_string("missing") == ""
    assert config.get_as_string_with_default("missing", "fallback") == "fallback"


def test_set_defaults_and_override():
    config = ConfigParams.from_tuples("a", 1, "b", 2)
    defaults = ConfigParams.from_tuples("b", 20, "c", 30)

    with_defaults = config.set_defaults(defaults)
    assert with_defaults == {"a": 1, "b": 2, "c": 30}

    overridden = config.override(defaults)
    assert overridden == {"a": 1, "b": 20, "c": 30}

    # Neither returns the original instance
    assert config == {"a": 1, "b": 2}


def test_merge_configs_later_wins():
    merged = ConfigParams.merge_configs({"a": 1}, None, {"a": 2, "b": 3})
    assert merged == {"a": 2, "b": 3}


def test_settings_to_config_params(monkeypatch):
    monkeypatch.delenv("MONGODB_URI", raising=False)
    settings = Settings(
        MONGODB_HOST="db1",
        MONGODB_PORT=27018,
        MONGODB_DATABASE="inventory",
        MONGODB_USERNAME="admin",
        MONGODB_PASSWORD="secret",
        MONGODB_COLLECTION="items",
        MONGODB_MAX_PAGE_SIZE=50,
    )

    config = settings.to_config_params()

    assert config["connection.host"] == "db1"
    assert config["connection.port"] == 27018
    assert config["connection.database"] == "inventory"
    assert config["credential.username"] == "admin"
    assert config["credential.password"] == "secret"
    assert config["collection"] == "items"
    assert config["options.max_page_size"] == 50


def test_settings_uri_replaces_host_and_port():
    settings = Settings(MONGODB_URI="mongodb://db1:27017/inventory", MONGODB_USERNAME=None)

    config = settings.to_config_params()

    assert config["connection.uri"] == "mongodb://db1:27017/inventory"
    assert "connection.host" not in config
    assert "credential.username" not in config


def test_settings_rejects_non_positive_port():
    with pytest.raises(ValidationError):
        Settings(MONGODB_PORT=0)


def test_booleans_are_not_integers():
    config = ConfigParams.from_tuples("port", True, "timeout", False)

    assert config.get_as_nullable_integer("port") is None
    assert config.get_as_integer_with_default("timeout", 5000) == 5000
