"""Built-in defaults for the singleton site settings record."""

import copy
from typing import Any

DEFAULT_SITE_SETTINGS: dict[str, Any] = {
    "siteTitle": {
        "en": "SpaceTeam | Dev - Digital Space Explorers",
        "id": "SpaceTeam | Dev - Penjelajah Digital Antariksa",
    },
    "contactEmail": "mission@spaceteam.dev",
    "contactPhone": "+62 821-3830-5820",
    "runningText": {
        "en": (
            "🚀 SpaceTeam | Dev • 💻 Full-Stack Development • 🎨 UI/UX Design • "
            "📱 Mobile Applications • 🌌 Cutting-edge Technology • 🔧 Cloud Systems • "
            "🤖 AI Integration"
        ),
        "id": (
            "🚀 SpaceTeam | Dev • 💻 Pengembangan Full-Stack • 🎨 Desain UI/UX • "
            "📱 Aplikasi Mobile • 🌌 Teknologi Terkini • 🔧 Sistem Cloud • "
            "🤖 Integrasi AI"
        ),
    },
    "chatEnabled": True,
    "darkMode": True,
}


def default_site_settings() -> dict[str, Any]:
    """Return a fresh deep copy of the built-in settings."""
    return copy.deepcopy(DEFAULT_SITE_SETTINGS)


def resolve_site_settings(stored: dict[str, Any] | None) -> dict[str, Any]:
    """Overlay stored settings on the built-in defaults (shallow)."""
    resolved = default_site_settings()
    if stored:
        resolved.update(stored)
    return resolved
