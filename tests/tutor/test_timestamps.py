from __future__ import annotations

from datetime import datetime

import pytest

from quiz_tutor.tutor.timestamps import format_timestamp


@pytest.mark.parametrize(
    ("moment", "locale", "expected"),
    [
        (datetime(2024, 1, 1, 14, 7), "ar-SA", "٠٢:٠٧ م"),
        (datetime(2024, 1, 1, 0, 30), "ar", "١٢:٣٠ ص"),
        (datetime(2024, 1, 1, 9, 5), "en-US", "09:05 AM"),
        (datetime(2024, 1, 1, 12, 0), "en_GB", "12:00 PM"),
        (datetime(2024, 1, 1, 21, 45), "fr-FR", "21:45"),
    ],
)
def test_format_timestamp(moment, locale, expected):
    assert format_timestamp(moment, locale) == expected


def test_default_locale_is_arabic():
    assert format_timestamp(datetime(2024, 1, 1, 8, 0)) == "٠٨:٠٠ ص"
