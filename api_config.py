# api_config.py
"""
Provider configuration, read once from api-config.json.

Keys never live in code: they come from the JSON file, or from the usual
provider environment variables (a .env file is honoured). Anything missing
or broken falls back to the defaults below.
"""
import json
import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "api-config.json"

PROVIDER_NAMES = ("openai", "claude", "gemini")

# env var that fills an empty apiKey for each provider
KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
    "gemini": "GOOGLE_API_KEY",
}


PROVIDER_ALIASES = {
    "openai": "openai",
    "claude": "claude",
    "anthropic": "claude",
    "gemini": "gemini",
    "google": "gemini",
}


def normalize_provider(name: Optional[str]) -> str:
    """Map a provider name from config/env to openai, claude or gemini."""
    key = (name or "").strip().lower()
    if not key:
        return "openai"
    if key not in PROVIDER_ALIASES:
        logger.warning("Unknown provider %r, falling back to openai", name)
        return "openai"
    return PROVIDER_ALIASES[key]


@dataclass(frozen=True)
class GlobalSettings:
    max_tokens: int = 150
    temperature: float = 0.7
    timeout: float = 30


@dataclass(frozen=True)
class ProviderConfig:
    api_key: str = ""
    api_url: str = ""
    model: str = ""
    api_version: str = ""  # only Claude uses it


def _default_providers() -> Dict[str, ProviderConfig]:
    return {name: ProviderConfig() for name in PROVIDER_NAMES}


@dataclass(frozen=True)
class APIConfiguration:
    active_provider: str = "openai"
    global_settings: GlobalSettings = field(default_factory=GlobalSettings)
    providers: Mapping[str, ProviderConfig] = field(default_factory=_default_providers)

    def provider_config(self, name: str) -> ProviderConfig:
        return self.providers.get(name) or ProviderConfig()


def _str_field(section: Mapping[str, Any], key: str, default: str) -> str:
    value = section.get(key, default)
    if value is None:
        return default
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _num_field(section: Mapping[str, Any], key: str, default, kind):
    value = section.get(key, default)
    # bool is an int subclass; "maxTokens": true is still a mistake
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"'{key}' must be a number, got {type(value).__name__}")
    return kind(value)


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, Mapping):
        raise TypeError(f"'{key}' must be an object")
    return value


def config_from_dict(data: Mapping[str, Any]) -> APIConfiguration:
    """
    Build an APIConfiguration from the decoded api-config.json.
    Missing keys keep their defaults; unknown keys are ignored.
    Raises TypeError on a value of the wrong type.
    """
    if not isinstance(data, Mapping):
        raise TypeError("configuration root must be an object")

    defaults = APIConfiguration()
    g = _section(data, "globalSettings")
    settings = GlobalSettings(
        max_tokens=_num_field(g, "maxTokens", defaults.global_settings.max_tokens, int),
        temperature=_num_field(g, "temperature", defaults.global_settings.temperature, float),
        timeout=_num_field(g, "timeoutSeconds", defaults.global_settings.timeout, float),
    )

    raw_providers = _section(data, "providers")
    providers = _default_providers()
    for name in PROVIDER_NAMES:
        p = raw_providers.get(name)
        if p is None:
            continue
        if not isinstance(p, Mapping):
            raise TypeError(f"provider '{name}' must be an object")
        providers[name] = ProviderConfig(
            api_key=_str_field(p, "apiKey", ""),
            api_url=_str_field(p, "apiUrl", ""),
            model=_str_field(p, "model", ""),
            api_version=_str_field(p, "apiVersion", ""),
        )

    return APIConfiguration(
        active_provider=_str_field(data, "activeProvider", defaults.active_provider),
        global_settings=settings,
        providers=providers,
    )


def _env_number(var: str, kind, positive: bool = False):
    raw = os.getenv(var, "").strip()
    if not raw:
        return None
    try:
        value = kind(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a valid %s", var, raw, kind.__name__)
        return None
    if positive and value <= 0:
        logger.warning("Ignoring %s=%r: must be greater than zero", var, raw)
        return None
    return value


def apply_env_overrides(config: APIConfiguration) -> APIConfiguration:
    """
    MODEL_PROVIDER / MODEL / TEMP / MAX_TOKENS / LLM_TIMEOUT override the file.
    Provider key variables only fill keys the file left empty.
    """
    active = os.getenv("MODEL_PROVIDER", "").strip() or config.active_provider

    settings = config.global_settings
    temp = _env_number("TEMP", float)
    max_toks = _env_number("MAX_TOKENS", int, positive=True)
    timeout = _env_number("LLM_TIMEOUT", float, positive=True)
    if temp is not None:
        settings = replace(settings, temperature=temp)
    if max_toks is not None:
        settings = replace(settings, max_tokens=max_toks)
    if timeout is not None:
        settings = replace(settings, timeout=timeout)

    providers = dict(config.providers)
    for name, var in KEY_ENV_VARS.items():
        pcfg = providers.get(name) or ProviderConfig()
        env_key = os.getenv(var, "")
        if not pcfg.api_key and env_key:
            pcfg = replace(pcfg, api_key=env_key)
        providers[name] = pcfg

    model = os.getenv("MODEL", "").strip()
    if model:
        # MODEL applies to whichever provider ends up active
        target = normalize_provider(active)
        providers[target] = replace(providers.get(target) or ProviderConfig(), model=model)

    return APIConfiguration(active_provider=active, global_settings=settings, providers=providers)


def load_configuration(path: Optional[str] = None) -> APIConfiguration:
    """
    Read api-config.json (or `path`, or $LLM_CONFIG_PATH).
    Never raises: a missing or malformed file gives the defaults.
    """
    load_dotenv()
    path = path or os.getenv("LLM_CONFIG_PATH") or DEFAULT_CONFIG_FILE

    if not os.path.exists(path):
        logger.warning("No %s found. Using defaults and environment variables.", path)
        config = APIConfiguration()
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                config = config_from_dict(json.load(f))
            logger.info("Configuration loaded from %s", path)
        except (OSError, ValueError, TypeError) as e:
            logger.error("Error loading configuration from %s: %s", path, e)
            config = APIConfiguration()

    return apply_env_overrides(config)
