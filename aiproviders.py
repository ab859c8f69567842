import getpass
import logging

from configreader import save_config

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "gemini"

PROVIDERS = {
    "gemini": {
        "label": "Google Gemini",
        "cfg_keys": {
            "gemini_apiKey": "Gemini API Key",
        },
    },
    "azure": {
        "label": "Azure OpenAI",
        "cfg_keys": {
            "azure_endpoint": "Azure OpenAI endpoint (https://<resource>.openai.azure.com/)",
            "azure_apiKey": "Azure OpenAI API Key",
            "azure_deploymentName": "Azure OpenAI deployment name",
        },
    },
}

SECRET_KEYS = {"gemini_apiKey", "azure_apiKey"}


def config_value(cfg: dict, key: str) -> str:
    """Stripped string value of a config key; anything but a string counts as unset."""
    value = cfg.get(key)
    if not isinstance(value, str):
        return ""
    return value.strip()


# ----------------------------
# Provider state
# ----------------------------

def get_current_provider(cfg: dict) -> str:
    provider = config_value(cfg, "current_provider").lower()
    if provider in PROVIDERS:
        return provider
    return DEFAULT_PROVIDER


def set_provider(cfg: dict, provider: str, path: str | None = None) -> str:
    """
    Select the provider and write the whole config back to disk.
    Returns the provider that is active afterwards.
    """
    provider = provider.strip().lower() if isinstance(provider, str) else ""
    if provider not in PROVIDERS:
        logger.error("Unknown provider %r, keeping %s", provider, get_current_provider(cfg))
        return get_current_provider(cfg)

    cfg["current_provider"] = provider
    try:
        save_config(cfg, path)
    except OSError as e:
        logger.error("Could not save provider selection: %s", e)

    return provider


def missing_credentials(cfg: dict, provider: str) -> list[str]:
    """Return the config keys the provider needs that are empty."""
    meta = PROVIDERS[provider]
    return [k for k in meta["cfg_keys"] if not config_value(cfg, k)]


# ----------------------------
# Provider selection flows
# ----------------------------

def provider_selection_menu(title: str = "AI Provider") -> str | None:
    """
    Interactive selection. Returns provider key, or None on an invalid choice.
    """
    names = list(PROVIDERS)
    print(f"\n\033[1m{title}\033[0m")
    print("--------------------------------")
    for i, name in enumerate(names, start=1):
        print(f"{i}. {PROVIDERS[name]['label']}")
    print("--------------------------------")
    choice = input(f"Select Provider [1-{len(names)}]: ").strip()

    mapping = {str(i): name for i, name in enumerate(names, start=1)}
    provider = mapping.get(choice)
    if not provider:
        print("Invalid choice. Keeping current provider.")
    return provider


def ensure_provider_credentials(cfg: dict, provider: str, path: str | None = None) -> bool:
    """
    If the provider is missing credentials, prompt for them and save.
    Returns True when every required key is present afterwards.
    """
    missing = missing_credentials(cfg, provider)
    if not missing:
        return True

    labels = PROVIDERS[provider]["cfg_keys"]
    for key in missing:
        if key in SECRET_KEYS:
            value = getpass.getpass(f"Enter {labels[key]}: ").strip()
        else:
            value = input(f"Enter {labels[key]}: ").strip()
        if not value:
            print(f"No value entered for {labels[key]}.")
            return False
        cfg[key] = value

    save_config(cfg, path)
    return True
