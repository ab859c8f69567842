# tests/conftest.py
#
# Shared fixtures. Every test gets its own config and error log under
# tmp_path, and no credentials leak in from the real environment.

import json
import os
import sys

import pytest

project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from configreader import ENV_OVERRIDES  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path, monkeypatch):
    config_path = tmp_path / ".t.env"
    error_path = tmp_path / ".t_error"
    monkeypatch.setenv("T_CONFIG", str(config_path))
    monkeypatch.setenv("T_ERROR_LOG", str(error_path))
    for env_key in ENV_OVERRIDES.values():
        monkeypatch.delenv(env_key, raising=False)
    return config_path, error_path


@pytest.fixture
def config_path(isolated_paths):
    return isolated_paths[0]


@pytest.fixture
def error_path(isolated_paths):
    return isolated_paths[1]


@pytest.fixture
def base_config():
    return {
        "gemini_apiKey": "gem-key",
        "azure_endpoint": "https://example.openai.azure.com/",
        "azure_apiKey": "az-key",
        "azure_deploymentName": "gpt-4o",
    }


@pytest.fixture
def write_config(config_path, base_config):
    def _write(cfg=None):
        config_path.write_text(json.dumps(base_config if cfg is None else cfg), encoding="utf-8")
        return config_path
    return _write


@pytest.fixture
def write_log(error_path):
    def _write(entries):
        text = entries if isinstance(entries, str) else json.dumps(entries)
        error_path.write_text(text, encoding="utf-8")
        return error_path
    return _write
