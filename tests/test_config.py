"""Tests for YAML configuration loading"""

import pytest

from acm_watch.common.config import (
    DEFAULT_GROUP,
    apply_env_overrides,
    load_watch_config,
    validate_config,
)
from acm_watch.common.exceptions import ConfigError

VALID_YAML = """
address_server: acm.aliyun.com:8080
group:
  access_key: yaml-ak
  secret_key: yaml-sk
  namespace: yaml-ns
data_ids:
  - com.example.app
  - com.example.feature-flags
settings:
  poll_timeout_s: 45
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(VALID_YAML, encoding="utf-8")
    return path


def test_load(config_file):
    config = load_watch_config(config_file, environ={})

    assert config.address_server == "acm.aliyun.com:8080"
    assert config.identity.access_key == "yaml-ak"
    assert config.identity.secret_key == "yaml-sk"
    assert config.identity.namespace == "yaml-ns"
    assert config.identity.group == DEFAULT_GROUP
    assert config.data_ids == ["com.example.app", "com.example.feature-flags"]
    assert config.settings.poll_timeout_s == 45
    assert config.settings.fetch_timeout_s == 5.0
    assert config.settings.server_port == 8080


def test_env_overrides(config_file):
    environ = {
        "NACOS_ACCESS_KEY": "env-ak",
        "NACOS_SECRET_KEY": "env-sk",
        "NACOS_NAMESPACE": "env-ns",
    }
    config = load_watch_config(config_file, environ=environ)

    assert config.identity.access_key == "env-ak"
    assert config.identity.secret_key == "env-sk"
    assert config.identity.namespace == "env-ns"


def test_credentials_only_from_env(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "address_server: acm.test\n"
        "group:\n"
        "  group: APP_GROUP\n"
        "data_ids: [a]\n",
        encoding="utf-8",
    )
    environ = {
        "NACOS_ACCESS_KEY": "ak",
        "NACOS_SECRET_KEY": "sk",
        "NACOS_NAMESPACE": "ns",
    }
    config = load_watch_config(path, environ=environ)
    assert config.identity.group == "APP_GROUP"
    assert config.identity.access_key == "ak"


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_watch_config(tmp_path / "nope.yaml", environ={})


def test_bad_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("address_server: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_watch_config(path, environ={})


def test_not_a_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_watch_config(path, environ={})


def test_validate_reports_every_problem():
    errors = validate_config({
        "group": {"access_key": "ak"},
        "data_ids": [],
        "settings": {"poll_timeout_s": -1},
    })
    assert "Missing required key: address_server" in errors
    assert "Missing group.secret_key" in errors
    assert "Missing group.namespace" in errors
    assert "data_ids must be a non-empty list" in errors
    assert "settings.poll_timeout_s must be a positive number" in errors


def test_validate_ok():
    data = {
        "address_server": "acm.test",
        "group": {"access_key": "ak", "secret_key": "sk", "namespace": "ns"},
        "data_ids": ["a"],
    }
    assert validate_config(data) == []


def test_apply_env_overrides_does_not_mutate():
    data = {"group": {"access_key": "ak"}}
    result = apply_env_overrides(data, {"NACOS_ACCESS_KEY": "env"})
    assert result["group"]["access_key"] == "env"
    assert data["group"]["access_key"] == "ak"


@pytest.mark.parametrize("port", ["80x", 0, 70000, True, 8080.5])
def test_validate_rejects_bad_server_port(port):
    data = {
        "address_server": "acm.test",
        "group": {"access_key": "ak", "secret_key": "sk", "namespace": "ns"},
        "data_ids": ["a"],
        "settings": {"server_port": port},
    }
    assert validate_config(data) == [
        "settings.server_port must be an integer between 1 and 65535"
    ]


def test_load_custom_server_port(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(VALID_YAML + "  server_port: 9090\n", encoding="utf-8")
    assert load_watch_config(path, environ={}).settings.server_port == 9090


def test_load_rejects_bad_server_port(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(VALID_YAML + "  server_port: 80x\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_watch_config(path, environ={})
