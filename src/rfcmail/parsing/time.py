"""Date and time grammar (RFC 5322 section 3.3) with the usual real-world leniencies."""
from __future__ import annotations

from types import MappingProxyType
from typing import Optional, Tuple

from rfcmail.errors import ExplicitError, UnknownError
from rfcmail.models.time import Date, DateTime, Day, Month, Time, TimeWithZone, Zone
from rfcmail.parsing.charsets import is_digit
from rfcmail.parsing.combinators import optional, pair, tag, take_while1
from rfcmail.parsing.whitespace import fws, skip_cfws
from rfcmail.text import View

_DAYS = MappingProxyType({
    b"mon": Day.MONDAY,
    b"tue": Day.TUESDAY,
    b"wed": Day.WEDNESDAY,
    b"thu": Day.THURSDAY,
    b"fri": Day.FRIDAY,
    b"sat": Day.SATURDAY,
    b"sun": Day.SUNDAY,
})

_MONTHS = MappingProxyType({
    b"jan": Month.JANUARY,
    b"feb": Month.FEBRUARY,
    b"mar": Month.MARCH,
    b"apr": Month.APRIL,
    b"may": Month.MAY,
    b"jun": Month.JUNE,
    b"jul": Month.JULY,
    b"aug": Month.AUGUST,
    b"sep": Month.SEPTEMBER,
    b"oct": Month.OCTOBER,
    b"nov": Month.NOVEMBER,
    b"dec": Month.DECEMBER,
})

# Legacy and common zone abbreviations. Ambiguous names keep their most
# widespread meaning (IST is India, CST is US Central).
ZONE_ABBREVIATIONS = MappingProxyType({
    "UT": Zone(True, 0, 0),
    "UTC": Zone(True, 0, 0),
    "GMT": Zone(True, 0, 0),
    "Z": Zone(True, 0, 0),
    "WET": Zone(True, 0, 0),
    "WEST": Zone(True, 1, 0),
    "BST": Zone(True, 1, 0),
    "IST": Zone(True, 5, 30),
    "CET": Zone(True, 1, 0),
    "CEST": Zone(True, 2, 0),
    "MET": Zone(True, 1, 0),
    "MEST": Zone(True, 2, 0),
    "EET": Zone(True, 2, 0),
    "EEST": Zone(True, 3, 0),
    "MSK": Zone(True, 3, 0),
    "PKT": Zone(True, 5, 0),
    "ICT": Zone(True, 7, 0),
    "WIB": Zone(True, 7, 0),
    "HKT": Zone(True, 8, 0),
    "SGT": Zone(True, 8, 0),
    "AWST": Zone(True, 8, 0),
    "JST": Zone(True, 9, 0),
    "KST": Zone(True, 9, 0),
    "ACST": Zone(True, 9, 30),
    "AEST": Zone(True, 10, 0),
    "AEDT": Zone(True, 11, 0),
    "NZST": Zone(True, 12, 0),
    "NZDT": Zone(True, 13, 0),
    "EST": Zone(False, 5, 0),
    "EDT": Zone(False, 4, 0),
    "CST": Zone(False, 6, 0),
    "CDT": Zone(False, 5, 0),
    "MST": Zone(False, 7, 0),
    "MDT": Zone(False, 6, 0),
    "PST": Zone(False, 8, 0),
    "PDT": Zone(False, 7, 0),
    "AKST": Zone(False, 9, 0),
    "AKDT": Zone(False, 8, 0),
    "HST": Zone(False, 10, 0),
    "AST": Zone(False, 4, 0),
    "ADT": Zone(False, 3, 0),
    "NST": Zone(False, 3, 30),
    "NDT": Zone(False, 2, 30),
    "BRT": Zone(False, 3, 0),
    "ART": Zone(False, 3, 0),
})

_MAX_ABBREVIATION = max(len(k) for k in ZONE_ABBREVIATIONS)


def _three_letters(input: View, table, what: str):
    if len(input) < 3:
        raise ExplicitError(f"Expected {what}, but characters are missing (at least 3).")
    key = input.take(3).tobytes().lower()
    value = table.get(key)
    if value is None:
        raise UnknownError(f"Not a valid {what}")
    return input.advance(3), value


def day_name(input: View) -> Tuple[View, Day]:
    return _three_letters(input, _DAYS, "day_name")


def month(input: View) -> Tuple[View, Month]:
    return _three_letters(input, _MONTHS, "month")


def day_of_week(input: View) -> Tuple[View, Day]:
    input, _ = optional(input, fws)
    input, day = day_name(input)
    input, _ = tag(input, b",", "A day of week must be followed by a `,`.")
    return input, day


def digit(input: View) -> Tuple[View, int]:
    c = input.get(0)
    if c is None or not is_digit(c):
        raise ExplicitError("Expected a digit")
    return input.advance(1), c - 48


def two_digits(input: View) -> Tuple[View, int]:
    input, tens = digit(input)
    input, units = digit(input)
    return input, tens * 10 + units


def day(input: View) -> Tuple[View, int]:
    input, _ = optional(input, fws)
    input, value = digit(input)
    try:
        input, units = digit(input)
    except ExplicitError:
        pass
    else:
        value = value * 10 + units
    if value > 31:
        raise UnknownError("day must be less than 31")
    input, _ = fws(input)
    return input, value


def year(input: View) -> Tuple[View, int]:
    input, _ = fws(input)
    input, digits = take_while1(input, is_digit, "no digit in year")
    value = int(digits.to_str())
    if len(digits) == 2:
        # two-digit years are read as 20xx
        value += 2000
    elif len(digits) < 4:
        raise UnknownError("year is expected to have 4 digits or more")
    elif value < 1990:
        raise UnknownError("year must be after 1990")
    input, _ = fws(input)
    return input, value


def time_of_day(input: View) -> Tuple[View, Time]:
    try:
        rest, hour = digit(input)
    except ExplicitError:
        rest = None
    if rest is None or not rest.startswith(b":"):
        rest, hour = two_digits(input)
    if hour > 23:
        raise UnknownError("There is only 24 hours in a day")
    input, _ = tag(rest, b":", "In a time_of_day, the hour must be followed by a colon.")

    input, minute = two_digits(input)
    if minute > 59:
        raise UnknownError("There is only 60 minutes per hour")

    if input.startswith(b":"):
        try:
            rest, second = two_digits(input.advance(1))
        except ExplicitError:
            pass
        else:
            # 60 allows for a leap second
            if second > 60:
                raise UnknownError("There is only 60 seconds in a minute")
            return rest, Time(hour, minute, second)

    return input, Time(hour, minute, 0)


def _zone_abbreviation(input: View) -> Optional[Tuple[View, Zone]]:
    cr = input.find(b"\r")
    lf = input.find(b"\n")
    ends = [p for p in (cr, lf) if p != -1]
    if not ends:
        return None
    end = min(ends)
    if end == 0 or end > _MAX_ABBREVIATION:
        return None
    name = input.take(end).tobytes().decode("ascii", errors="replace").upper()
    zone = ZONE_ABBREVIATIONS.get(name)
    if zone is None:
        return None
    return input.advance(end), zone


def zone(input: View) -> Tuple[View, Zone]:
    input, _ = fws(input)
    c = input.get(0)
    if c is None:
        raise UnknownError("Expected more characters in zone")
    if c not in (43, 45):  # '+' '-'
        found = _zone_abbreviation(input)
        if found is None:
            raise UnknownError("Invalid sign character in zone")
        return found
    sign = c == 43
    input, hour_offset = two_digits(input.advance(1))
    # some mails write the offset as "+00:00"
    if input.startswith(b":"):
        input = input.advance(1)
    input, minute_offset = two_digits(input)
    if minute_offset > 59:
        raise UnknownError("zone minute_offset out of range")
    return input, Zone(sign, hour_offset, minute_offset)


def time(input: View) -> Tuple[View, TimeWithZone]:
    input, (t, z) = pair(input, time_of_day, zone)
    return input, TimeWithZone(t, z)


def date(input: View) -> Tuple[View, Date]:
    input, d = day(input)
    input, m = month(input)
    input, y = year(input)
    return input, Date(d, m, y)


def date_time(input: View) -> Tuple[View, DateTime]:
    input, name = optional(input, day_of_week)
    input, d = date(input)
    input, t = time(input)
    return skip_cfws(input), DateTime(date=d, time=t, day_name=name)
