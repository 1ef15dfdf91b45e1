"""Locale-aware number and date formatting.

Calendar names, meridiems, number separators and text direction all come
from the translation catalog, so a loaded `<locale>.mo` overrides them.
Date masks use the PHP `date()` letters the admin templates were written
with; `format_date` walks the mask once, so an escaped letter (`\\D`) is
never mistaken for a token.
"""

from __future__ import annotations

import calendar
import re
import time as _time
from collections.abc import Callable
from datetime import UTC, datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .catalog import CatalogRegistry

ESCAPE_MARKER = "\\"

_INITIAL_SUFFIX_RE = re.compile(r"_.+_initial$")
_ABBREV_SUFFIX_RE = re.compile(r"_.+_abbreviation$")

_WEEKDAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
_WEEKDAY_ABBREVS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

LOCALE_TOKENS = frozenset("DlFMaA")
TIMEZONE_TOKENS = frozenset("eIOPTZ")


class LocaleFormats:
    """Calendar-name table for the registry's current catalog."""

    def __init__(self, registry: CatalogRegistry, text_direction: str | None = None):
        t = registry.translate

        self.weekday: dict[int, str] = {i: t(name) for i, name in enumerate(_WEEKDAYS)}

        # "S_Sunday_initial" keeps the msgids distinct; the suffix is dropped afterwards
        self.weekday_initial: dict[str, str] = {
            t(name): _INITIAL_SUFFIX_RE.sub("", t(f"{name[0]}_{name}_initial")) for name in _WEEKDAYS
        }
        self.weekday_abbrev: dict[str, str] = {t(name): t(abbr) for name, abbr in zip(_WEEKDAYS, _WEEKDAY_ABBREVS)}

        self.month: dict[str, str] = {f"{i:02d}": t(name) for i, name in enumerate(_MONTHS, start=1)}
        # same trick as the initials, "May" would otherwise collide
        self.month_abbrev: dict[str, str] = {
            t(name): _ABBREV_SUFFIX_RE.sub("", t(f"{name[:3]}_{name}_abbreviation")) for name in _MONTHS
        }

        self.meridiem: dict[str, str] = {m: t(m) for m in ("am", "pm", "AM", "PM")}

        sep = t("number_format_thousands_sep")
        point = t("number_format_decimal_point")
        self.number_format = {
            "thousands_sep": "," if sep == "number_format_thousands_sep" else sep,
            "decimal_point": "." if point == "number_format_decimal_point" else point,
        }

        if text_direction in ("ltr", "rtl"):
            self.text_direction = text_direction
        elif registry.translate_with_context("ltr", "text direction") == "rtl":
            self.text_direction = "rtl"
        else:
            self.text_direction = "ltr"

    def get_weekday(self, weekday_number: int) -> str:
        return self.weekday[int(weekday_number)]

    def get_weekday_initial(self, weekday_name: str) -> str:
        return self.weekday_initial[weekday_name]

    def get_weekday_abbrev(self, weekday_name: str) -> str:
        return self.weekday_abbrev[weekday_name]

    def get_month(self, month_number: int | str) -> str:
        return self.month[f"{int(month_number):02d}"]

    def get_month_abbrev(self, month_name: str) -> str:
        return self.month_abbrev[month_name]

    def get_meridiem(self, meridiem: str) -> str:
        return self.meridiem[meridiem]

    def is_rtl(self) -> bool:
        return self.text_direction == "rtl"


# ---------- numbers ----------


def format_number(value, decimals: int = 0, formats: LocaleFormats | None = None) -> str:
    """Group thousands and round half-up using the locale separators."""
    try:
        decimals = max(0, int(decimals))
    except (TypeError, ValueError):
        decimals = 0
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        number = Decimal(0)
    if not number.is_finite():
        number = Decimal(0)

    quantum = Decimal(1).scaleb(-decimals)
    with localcontext() as ctx:
        # integer digits + decimals, plus one for a carry out of rounding
        ctx.prec = max(number.adjusted() + 1, 1) + decimals + 1
        rounded = number.quantize(quantum, rounding=ROUND_HALF_UP)
    text = format(rounded, ",f")

    sep = formats.number_format["thousands_sep"] if formats else ","
    point = formats.number_format["decimal_point"] if formats else "."
    return text.translate(str.maketrans({",": sep, ".": point}))


# ---------- dates ----------


def _ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def _hour12(dt: datetime) -> int:
    return dt.hour % 12 or 12


def _swatch(dt: datetime) -> str:
    utc = dt.astimezone(UTC) if dt.tzinfo else dt
    beats = int(((utc.hour * 3600 + utc.minute * 60 + utc.second + 3600) % 86400) / 86.4)
    return f"{beats:03d}"


def _offset(dt: datetime, colon: bool) -> str:
    delta = dt.utcoffset()
    if delta is None:
        return "+00:00" if colon else "+0000"
    minutes = int(delta.total_seconds() // 60)
    sign = "-" if minutes < 0 else "+"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{mins:02d}" if colon else f"{sign}{hours:02d}{mins:02d}"


def _zone_name(dt: datetime) -> str:
    key = getattr(dt.tzinfo, "key", None)
    return key or dt.tzname() or "UTC"


# Non-locale calendar tokens
_CALENDAR_TOKENS: dict[str, Callable[[datetime], str]] = {
    "d": lambda dt: f"{dt.day:02d}",
    "j": lambda dt: str(dt.day),
    "N": lambda dt: str(dt.isoweekday()),
    "S": lambda dt: _ordinal_suffix(dt.day),
    "w": lambda dt: str(dt.isoweekday() % 7),
    "z": lambda dt: str(dt.timetuple().tm_yday - 1),
    "W": lambda dt: f"{dt.isocalendar()[1]:02d}",
    "m": lambda dt: f"{dt.month:02d}",
    "n": lambda dt: str(dt.month),
    "t": lambda dt: str(calendar.monthrange(dt.year, dt.month)[1]),
    "L": lambda dt: "1" if calendar.isleap(dt.year) else "0",
    "o": lambda dt: str(dt.isocalendar()[0]),
    "Y": lambda dt: str(dt.year),
    "y": lambda dt: f"{dt.year % 100:02d}",
    "B": _swatch,
    "g": lambda dt: str(_hour12(dt)),
    "G": lambda dt: str(dt.hour),
    "h": lambda dt: f"{_hour12(dt):02d}",
    "H": lambda dt: f"{dt.hour:02d}",
    "i": lambda dt: f"{dt.minute:02d}",
    "s": lambda dt: f"{dt.second:02d}",
    "u": lambda dt: f"{dt.microsecond:06d}",
    "v": lambda dt: f"{dt.microsecond // 1000:03d}",
    "U": lambda dt: str(int(dt.timestamp())),
    "c": lambda dt: dt.strftime("%Y-%m-%dT%H:%M:%S") + _offset(dt, True),
    "r": lambda dt: (
        f"{_WEEKDAY_ABBREVS[dt.isoweekday() % 7]}, {dt.day:02d} {_MONTHS[dt.month - 1][:3]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} {_offset(dt, False)}"
    ),
}

_TIMEZONE_TOKEN_FNS: dict[str, Callable[[datetime], str]] = {
    "e": _zone_name,
    "I": lambda dt: "1" if dt.dst() else "0",
    "O": lambda dt: _offset(dt, False),
    "P": lambda dt: _offset(dt, True),
    "T": lambda dt: dt.tzname() or "UTC",
    "Z": lambda dt: str(int(dt.utcoffset().total_seconds()) if dt.utcoffset() else 0),
}


def _locale_token(token: str, dt: datetime, formats: LocaleFormats) -> str:
    if token in "Dl":
        weekday = formats.get_weekday(dt.isoweekday() % 7)
        return weekday if token == "l" else formats.get_weekday_abbrev(weekday)
    if token in "FM":
        month = formats.get_month(dt.month)
        return month if token == "F" else formats.get_month_abbrev(month)
    meridiem = "am" if dt.hour < 12 else "pm"
    return formats.get_meridiem(meridiem if token == "a" else meridiem.upper())


def _english_token(token: str, dt: datetime) -> str:
    return {
        "D": _WEEKDAY_ABBREVS[dt.isoweekday() % 7],
        "l": _WEEKDAYS[dt.isoweekday() % 7],
        "F": _MONTHS[dt.month - 1],
        "M": _MONTHS[dt.month - 1][:3],
        "a": "am" if dt.hour < 12 else "pm",
        "A": "AM" if dt.hour < 12 else "PM",
    }[token]


def _resolve_timezone(name: str | None) -> tzinfo | None:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def _to_datetime(timestamp, use_utc: bool, tz: tzinfo | None) -> datetime:
    if timestamp is None:
        timestamp = _time.time()
    if isinstance(timestamp, datetime):
        dt = timestamp if timestamp.tzinfo else timestamp.replace(tzinfo=UTC)
    else:
        dt = datetime.fromtimestamp(float(timestamp), UTC)
    if use_utc:
        return dt.astimezone(UTC)
    return dt.astimezone(tz) if tz else dt.astimezone()


def format_date(
    mask: str,
    timestamp=None,
    use_utc: bool = False,
    *,
    formats: LocaleFormats | None = None,
    timezone: str | None = None,
) -> str:
    """
    Render `mask` (PHP date() letters) for `timestamp`.

    `timestamp` is a Unix epoch, a datetime (naive means UTC) or None for now.
    Local time uses `timezone` when it names a known zone, else the runtime zone;
    timezone tokens follow the same rule even when `use_utc` is set.
    A backslash emits the next character literally. Unknown letters pass through.
    """
    tz = _resolve_timezone(timezone)
    dt = _to_datetime(timestamp, use_utc, tz)
    tz_dt = dt.astimezone(tz) if tz else dt

    out: list[str] = []
    chars = iter(mask)
    for ch in chars:
        if ch == ESCAPE_MARKER:
            out.append(next(chars, ""))
        elif ch in LOCALE_TOKENS and formats is not None:
            out.append(_locale_token(ch, dt, formats))
        elif ch in LOCALE_TOKENS:
            out.append(_english_token(ch, dt))
        elif ch in TIMEZONE_TOKENS:
            out.append(_TIMEZONE_TOKEN_FNS[ch](tz_dt))
        elif ch in _CALENDAR_TOKENS:
            out.append(_CALENDAR_TOKENS[ch](dt))
        else:
            out.append(ch)
    return "".join(out)
