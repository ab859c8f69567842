import json
import logging
import os
import sys

logger = logging.getLogger(__name__)

# Environment variables that may supply credentials instead of the config file.
ENV_OVERRIDES = {
    "gemini_apiKey": "GEMINI_API_KEY",
    "azure_endpoint": "AZURE_OPENAI_ENDPOINT",
    "azure_apiKey": "AZURE_OPENAI_API_KEY",
    "azure_deploymentName": "AZURE_OPENAI_DEPLOYMENT",
}


# ----------------------------
# Config file helpers
# ----------------------------

def get_config_path():
    """
    Default: ~/.t.env
    You can override path via T_CONFIG env var.
    """
    override = os.environ.get("T_CONFIG")
    if override:
        return os.path.expanduser(override)

    return os.path.join(os.path.expanduser("~"), ".t.env")


def load_config(path: str | None = None) -> dict:
    """
    Read the config file. A missing or unreadable config is fatal: the
    process exits with status 1.
    """
    path = path or get_config_path()

    if not os.path.exists(path):
        logger.error("Configuration file not found: %s", path)
        print(f"Error reading configuration: file not found at {path}", file=sys.stderr)
        sys.exit(1)

    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Error reading configuration %s: %s", path, e)
        print(f"Error reading configuration: {e}", file=sys.stderr)
        sys.exit(1)

    if not isinstance(cfg, dict):
        logger.error("Configuration %s is not a JSON object", path)
        print("Error reading configuration: expected a JSON object.", file=sys.stderr)
        sys.exit(1)

    return cfg


def save_config(cfg: dict, path: str | None = None):
    path = path or get_config_path()
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    tmp_path = path + ".tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(cfg, f, indent=2)

    # Restrict permissions (best-effort; on Windows this may not behave the same)
    try:
        os.chmod(tmp_path, 0o600)
    except OSError as e:
        logger.warning("Could not restrict permissions on %s: %s", tmp_path, e)

    os.replace(tmp_path, path)


def apply_env_overrides(cfg: dict) -> bool:
    """
    Load credentials from environment into config if present.
    Returns True if config changed.
    """
    changed = False

    for cfg_key, env_key in ENV_OVERRIDES.items():
        value = os.environ.get(env_key, "").strip()
        if value and cfg.get(cfg_key) != value:
            cfg[cfg_key] = value
            changed = True

    return changed
