"""Display timestamps for chat messages.

Timestamps are presentation metadata only: hour and minute in the session's
display locale. Ordering always comes from append order.
"""

from __future__ import annotations

from datetime import datetime

__all__ = ["DEFAULT_LOCALE", "format_timestamp"]

DEFAULT_LOCALE = "ar-SA"

_ARABIC_DIGITS = str.maketrans("0123456789", "٠١٢٣٤٥٦٧٨٩")


def format_timestamp(moment: datetime, locale: str = DEFAULT_LOCALE) -> str:
    """Format ``moment`` as a two-digit hour/minute string.

    ``ar`` locales use a 12-hour clock with ص/م markers and Arabic-Indic
    digits, ``en`` locales a 12-hour clock with AM/PM, and anything else a
    24-hour clock.
    """

    language = locale.replace("_", "-").split("-", 1)[0].lower()
    if language == "ar":
        marker = "ص" if moment.hour < 12 else "م"
        text = f"{_hour12(moment):02d}:{moment.minute:02d} {marker}"
        return text.translate(_ARABIC_DIGITS)
    if language == "en":
        marker = "AM" if moment.hour < 12 else "PM"
        return f"{_hour12(moment):02d}:{moment.minute:02d} {marker}"
    return f"{moment.hour:02d}:{moment.minute:02d}"


def _hour12(moment: datetime) -> int:
    return moment.hour % 12 or 12
