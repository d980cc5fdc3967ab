"""Text shown in desktop notifications and URLs for standard emoji images."""

from __future__ import annotations

MAX_NOTIFICATION_CHARS = 100
TRUNCATED_CHARS = 97
ELLIPSIS = "..."
DM_LABEL = "DM"
UNKNOWN_CHANNEL = "unknown"
TWEMOJI_BASE_URL = "https://cdn.jsdelivr.net/gh/twitter/twemoji@latest/assets/72x72"
VARIATION_SELECTOR_16 = "\ufe0f"


def truncate_notification(text: str) -> str:
    """Shorten a notification body to at most 100 characters, ending in "..."."""
    if len(text) > MAX_NOTIFICATION_CHARS:
        return text[:TRUNCATED_CHARS] + ELLIPSIS
    return text


def notification_channel_label(name: str | None, is_im: bool) -> str:
    """"DM" for direct messages, otherwise "#name" ("#unknown" when unnamed)."""
    if is_im:
        return DM_LABEL
    return f"#{name if name is not None else UNKNOWN_CHANNEL}"


def notification_summary(sender: str, channel: str) -> str:
    """The notification title naming who wrote and where."""
    return f"{sender} in {channel}"


def twemoji_url(display: str) -> str:
    """The image URL of a standard emoji, keyed by its code points in hex."""
    unified = "-".join(f"{ord(ch):x}" for ch in display if ch != VARIATION_SELECTOR_16)
    return f"{TWEMOJI_BASE_URL}/{unified}.png"