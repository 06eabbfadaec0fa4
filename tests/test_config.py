import json
from pathlib import Path

import pytest

from archgov.config import (
    DEFAULT_API_BASE,
    DEFAULT_PORT,
    Settings,
    get_policy,
    load_policy,
    load_settings,
)
from archgov.errors import PolicyConfigError
from archgov.layers import DEFAULT_POLICY, is_node_type_allowed_in_layer


def _policy_data():
    return DEFAULT_POLICY.model_dump(mode="json", by_alias=True)


def test_default_settings():
    settings = load_settings({})

    assert settings.policy_file is None
    assert settings.api_base == DEFAULT_API_BASE
    assert settings.port == DEFAULT_PORT
    assert settings.log_level == "INFO"


def test_settings_from_environment():
    settings = load_settings({
        "ARCHGOV_POLICY_FILE": "/etc/archgov/policy.json",
        "ARCHGOV_API_BASE": "http://governance:9000/api",
        "ARCHGOV_HOST": "0.0.0.0",
        "ARCHGOV_PORT": "9000",
        "ARCHGOV_LOG_LEVEL": "debug",
    })

    assert settings.policy_file == Path("/etc/archgov/policy.json")
    assert settings.api_base == "http://governance:9000/api"
    assert settings.host == "0.0.0.0"
    assert settings.port == 9000
    assert settings.log_level == "DEBUG"


def test_load_policy_round_trips_default(tmp_path):
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(_policy_data()), encoding="utf-8")

    assert load_policy(path).model_dump() == DEFAULT_POLICY.model_dump()


def test_load_policy_with_layers_only(tmp_path):
    data = {"layers": _policy_data()["layers"]}
    data["layers"][1]["allowedNodeTypes"].append("app")
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(data), encoding="utf-8")

    policy = load_policy(path)

    assert is_node_type_allowed_in_layer("app", 1, policy)
    assert policy.togaf_order == DEFAULT_POLICY.togaf_order


def test_load_policy_missing_file(tmp_path):
    with pytest.raises(PolicyConfigError, match="not found"):
        load_policy(tmp_path / "missing.json")


def test_load_policy_bad_json(tmp_path):
    path = tmp_path / "policy.json"
    path.write_text("{layers:", encoding="utf-8")

    with pytest.raises(PolicyConfigError, match="not valid JSON"):
        load_policy(path)


def test_load_policy_rejects_four_layers(tmp_path):
    path = tmp_path / "policy.json"
    path.write_text(json.dumps({"layers": _policy_data()["layers"][:4]}), encoding="utf-8")

    with pytest.raises(PolicyConfigError, match="invalid"):
        load_policy(path)


def test_get_policy_defaults_without_file():
    assert get_policy(Settings()) is DEFAULT_POLICY


def test_get_policy_reads_configured_file(tmp_path):
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(_policy_data()), encoding="utf-8")

    assert get_policy(Settings(policy_file=path)).model_dump() == DEFAULT_POLICY.model_dump()
