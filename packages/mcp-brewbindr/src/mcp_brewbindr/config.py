"""Configuration management for the brewbindr MCP server."""

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from brewbindr_core.exceptions import ConfigurationError
from brewbindr_core.models import ColorScale, UnitSystem


DEFAULT_DATA_PATH = Path.home() / ".brewbindr" / "workspace.json"
LANGUAGES = ("en", "nl")


@dataclass
class BrewbindrConfig:
    """Configuration for the brewbindr workspace and display preferences."""

    data_path: Path
    proxy_url: str | None = None
    language: str = "en"
    units: UnitSystem = UnitSystem.METRIC
    color_scale: ColorScale = ColorScale.SRM

    def __post_init__(self):
        # Expand user paths
        self.data_path = Path(self.data_path).expanduser()

    def fetch_url(self, url: str) -> str:
        """URL to request for ``url``, routed through the proxy when one is set."""
        if not self.proxy_url:
            return url
        return f"{self.proxy_url}{quote(url, safe='')}"


def _choice(name: str, raw: str, enum_class):
    try:
        return enum_class(raw.strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_class)
        raise ConfigurationError(f"{name}={raw!r} is not valid; expected one of: {allowed}") from None


def get_config() -> BrewbindrConfig:
    """
    Get brewbindr configuration from environment.

    Environment variables:
        BREWBINDR_DATA_PATH: Workspace JSON file (default ~/.brewbindr/workspace.json)
        BREWBINDR_PROXY_URL: Prefix for URL imports, e.g. https://corsproxy.io/?
        BREWBINDR_LANGUAGE: Display language, "en" or "nl"
        BREWBINDR_UNITS: "metric" or "imperial"
        BREWBINDR_COLOR_SCALE: "srm" or "ebc"

    Returns:
        BrewbindrConfig instance

    Raises:
        ConfigurationError: If a variable holds an unsupported value
    """
    data_path = os.environ.get("BREWBINDR_DATA_PATH") or DEFAULT_DATA_PATH

    language = os.environ.get("BREWBINDR_LANGUAGE", "en").strip().lower()
    if language not in LANGUAGES:
        raise ConfigurationError(
            f"BREWBINDR_LANGUAGE={language!r} is not valid; expected one of: {', '.join(LANGUAGES)}"
        )

    return BrewbindrConfig(
        data_path=Path(data_path),
        proxy_url=os.environ.get("BREWBINDR_PROXY_URL") or None,
        language=language,
        units=_choice("BREWBINDR_UNITS", os.environ.get("BREWBINDR_UNITS", "metric"), UnitSystem),
        color_scale=_choice("BREWBINDR_COLOR_SCALE", os.environ.get("BREWBINDR_COLOR_SCALE", "srm"), ColorScale),
    )
