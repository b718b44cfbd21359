"""Default resource tables.

The tables have the same shape a host would get from deserialising its own
JSON/TOML resource file; ``config.build_config`` accepts any mapping of this
shape.
"""

from __future__ import annotations

from typing import Any

CURRENCIES: dict[str, dict[str, Any]] = {
    "usd": {"symbol": "$", "decimal_digits": 2, "symbol_on_left": True, "space_between_amount_and_symbol": False},
    "eur": {"symbol": "€", "decimal_digits": 2, "symbol_on_left": True, "space_between_amount_and_symbol": False},
    "gbp": {"symbol": "£", "decimal_digits": 2, "symbol_on_left": True, "space_between_amount_and_symbol": False},
    "try": {"symbol": "₺", "decimal_digits": 2, "symbol_on_left": True, "space_between_amount_and_symbol": False},
    "jpy": {"symbol": "¥", "decimal_digits": 0, "symbol_on_left": True, "space_between_amount_and_symbol": False},
    "chf": {"symbol": "CHF", "decimal_digits": 2, "symbol_on_left": False, "space_between_amount_and_symbol": True},
    "cad": {"symbol": "CA$", "decimal_digits": 2, "symbol_on_left": True, "space_between_amount_and_symbol": False},
    "aud": {"symbol": "A$", "decimal_digits": 2, "symbol_on_left": True, "space_between_amount_and_symbol": False},
    "cny": {"symbol": "CN¥", "decimal_digits": 2, "symbol_on_left": True, "space_between_amount_and_symbol": False},
    "inr": {"symbol": "₹", "decimal_digits": 2, "symbol_on_left": True, "space_between_amount_and_symbol": False},
    "rub": {"symbol": "₽", "decimal_digits": 2, "symbol_on_left": False, "space_between_amount_and_symbol": True},
    "uzs": {"symbol": "сўм", "decimal_digits": 2, "symbol_on_left": False, "space_between_amount_and_symbol": True},
    "uyu": {"symbol": "$U", "decimal_digits": 2, "symbol_on_left": True, "space_between_amount_and_symbol": True},
}

CURRENCY_ALIASES: dict[str, str] = {
    "$": "usd",
    "dollar": "usd",
    "dollars": "usd",
    "€": "eur",
    "euro": "eur",
    "euros": "eur",
    "£": "gbp",
    "pound": "gbp",
    "pounds": "gbp",
    "₺": "try",
    "tl": "try",
    "lira": "try",
    "¥": "jpy",
    "yen": "jpy",
    "franc": "chf",
    "francs": "chf",
    "₹": "inr",
    "rupee": "inr",
    "rupees": "inr",
    "₽": "rub",
    "ruble": "rub",
    "rubles": "rub",
    "сўм": "uzs",
    "$u": "uyu",
}

# Units of each currency per one US dollar.
CURRENCY_RATES: dict[str, float] = {
    "usd": 1.0,
    "eur": 0.92,
    "gbp": 0.79,
    "try": 32.5,
    "jpy": 151.0,
    "chf": 0.9,
    "cad": 1.36,
    "aud": 1.52,
    "cny": 7.23,
    "inr": 83.3,
    "rub": 92.0,
    "uzs": 12650.0,
    "uyu": 39.0,
}

# Offsets in minutes east of UTC.
TIMEZONES: dict[str, int] = {
    "UTC": 0,
    "GMT": 0,
    "WET": 0,
    "BST": 60,
    "CET": 60,
    "CEST": 120,
    "EET": 120,
    "EEST": 180,
    "MSK": 180,
    "TRT": 180,
    "IST": 330,
    "CST": -360,
    "CDT": -300,
    "EST": -300,
    "EDT": -240,
    "MST": -420,
    "MDT": -360,
    "PST": -480,
    "PDT": -420,
    "JST": 540,
    "AEST": 600,
}

DYNAMIC_TYPES: list[dict[str, Any]] = [
    {
        "name": "memory",
        "levels": [
            {"index": 0, "format": "{value} bit", "parse": ["bits?"], "names": ["bit", "bits"],
             "upgrade_code": "{value} / 4"},
            {"index": 1, "format": "{value} nibble", "parse": ["nibbles?"], "names": ["nibble", "nibbles"],
             "upgrade_code": "{value} / 2", "downgrade_code": "{value} * 4"},
            {"index": 2, "format": "{value} B", "parse": ["B", "bytes?"], "names": ["b", "byte", "bytes"],
             "upgrade_code": "{value} / 1024", "downgrade_code": "{value} * 2"},
            {"index": 3, "format": "{value} KB", "parse": ["KB", "kB", "Kb", "kb", "kilobytes?"],
             "names": ["kb", "kilobyte", "kilobytes"],
             "upgrade_code": "{value} / 1024", "downgrade_code": "{value} * 1024"},
            {"index": 4, "format": "{value} MB", "parse": ["MB", "Mb", "mb", "megabytes?"],
             "names": ["mb", "megabyte", "megabytes"],
             "upgrade_code": "{value} / 1024", "downgrade_code": "{value} * 1024"},
            {"index": 5, "format": "{value} GB", "parse": ["GB", "Gb", "gb", "gigabytes?"],
             "names": ["gb", "gigabyte", "gigabytes"],
             "upgrade_code": "{value} / 1024", "downgrade_code": "{value} * 1024"},
            {"index": 6, "format": "{value} TB", "parse": ["TB", "Tb", "tb", "terabytes?"],
             "names": ["tb", "terabyte", "terabytes"],
             "upgrade_code": "{value} / 1024", "downgrade_code": "{value} * 1024"},
            {"index": 7, "format": "{value} PB", "parse": ["PB", "Pb", "pb", "petabytes?"],
             "names": ["pb", "petabyte", "petabytes"],
             "downgrade_code": "{value} * 1024"},
        ],
    },
    {
        "name": "length",
        "levels": [
            {"index": 0, "format": "{value} mm", "parse": ["mm", "millimet(?:er|re)s?"],
             "names": ["mm", "millimeter", "millimeters", "millimetre", "millimetres"],
             "upgrade_code": "{value} / 10"},
            {"index": 1, "format": "{value} cm", "parse": ["cm", "centimet(?:er|re)s?"],
             "names": ["cm", "centimeter", "centimeters", "centimetre", "centimetres"],
             "upgrade_code": "{value} / 100", "downgrade_code": "{value} * 10"},
            {"index": 2, "format": "{value} m", "parse": ["m", "met(?:er|re)s?"],
             "names": ["m", "meter", "meters", "metre", "metres"],
             "upgrade_code": "{value} / 1000", "downgrade_code": "{value} * 100"},
            {"index": 3, "format": "{value} km", "parse": ["km", "kilomet(?:er|re)s?"],
             "names": ["km", "kilometer", "kilometers", "kilometre", "kilometres"],
             "downgrade_code": "{value} * 1000"},
        ],
    },
    {
        "name": "weight",
        "levels": [
            {"index": 0, "format": "{value} mg", "parse": ["mg", "milligrams?"],
             "names": ["mg", "milligram", "milligrams"], "upgrade_code": "{value} / 1000"},
            {"index": 1, "format": "{value} g", "parse": ["g", "grams?"],
             "names": ["g", "gram", "grams"],
             "upgrade_code": "{value} / 1000", "downgrade_code": "{value} * 1000"},
            {"index": 2, "format": "{value} kg", "parse": ["kg", "kilograms?"],
             "names": ["kg", "kilogram", "kilograms"],
             "upgrade_code": "{value} / 1000", "downgrade_code": "{value} * 1000"},
            {"index": 3, "format": "{value} ton", "parse": ["tons?", "tonnes?"],
             "names": ["ton", "tons", "tonne", "tonnes"],
             "downgrade_code": "{value} * 1000", "decimal_digits": 3},
        ],
    },
]

_EN_RULES: dict[str, list[str]] = {
    "duration_parse": ["{NUMBER:duration} {TEXT:unit}"],
    "combine_durations": ["{DURATION:first} {DURATION:second}"],
    "money_per_duration": [
        "{MONEY:price} / {TEXT:unit} * {DURATION:duration}",
        "{MONEY:price} {GROUP:per_group} {TEXT:unit} * {DURATION:duration}",
        "{DURATION:duration} * {MONEY:price} / {TEXT:unit}",
        "{DURATION:duration} {GROUP:at_group} {MONEY:price} / {TEXT:unit}",
        "{DURATION:duration} {GROUP:at_group} {MONEY:price} {GROUP:per_group} {TEXT:unit}",
    ],
    "date_parse": [
        "{MONTH:month} {NUMBER:day} , {NUMBER:year}",
        "{MONTH:month} {NUMBER:day} {NUMBER:year}",
        "{NUMBER:day} {MONTH:month} {NUMBER:year}",
        "{MONTH:month} {NUMBER:day}",
        "{NUMBER:day} {MONTH:month}",
    ],
    "date_range": ["{DATE:start} {GROUP:conversion_group} {DATE:end}"],
    "time_zone": [
        "{TIME:time} {TIMEZONE:timezone} + {NUMBER:plus_hours}",
        "{TIME:time} {TIMEZONE:timezone} - {NUMBER:minus_hours}",
        "{TIME:time} {TIMEZONE:timezone}",
    ],
    "time_convert": [
        "{TIME:time} {GROUP:conversion_group} {TIMEZONE:timezone} + {NUMBER:plus_hours}",
        "{TIME:time} {GROUP:conversion_group} {TIMEZONE:timezone} - {NUMBER:minus_hours}",
        "{TIME:time} {GROUP:conversion_group} {TIMEZONE:timezone}",
    ],
    "convert_money": ["{MONEY:money} {GROUP:conversion_group} {CURRENCY:currency}"],
    "dynamic_type_convert": ["{DYNAMIC_TYPE:source} {GROUP:conversion_group} {TEXT:unit}"],
    "percent_calculator": ["{PERCENT:p} {GROUP:of_group} {AMOUNT:number}"],
    "find_numbers_percent": ["{AMOUNT:part} is what % of {AMOUNT:total}"],
    "find_total_from_percent": ["{AMOUNT:number_part} is {PERCENT:percent_part} of what"],
}

_TR_RULES: dict[str, list[str]] = {
    "duration_parse": ["{NUMBER:duration} {TEXT:unit}"],
    "combine_durations": ["{DURATION:first} {DURATION:second}"],
    "money_per_duration": [
        "{MONEY:price} / {TEXT:unit} * {DURATION:duration}",
        "{DURATION:duration} * {MONEY:price} / {TEXT:unit}",
    ],
    "date_parse": [
        "{NUMBER:day} {MONTH:month} {NUMBER:year}",
        "{NUMBER:day} {MONTH:month}",
    ],
    "date_range": ["{DATE:start} {GROUP:range_group} {DATE:end}"],
    "time_zone": [
        "{TIME:time} {TIMEZONE:timezone} + {NUMBER:plus_hours}",
        "{TIME:time} {TIMEZONE:timezone} - {NUMBER:minus_hours}",
        "{TIME:time} {TIMEZONE:timezone}",
    ],
    "time_convert": ["{TIME:time} {TIMEZONE:timezone} {GROUP:conversion_group}"],
    "convert_money": ["{MONEY:money} {CURRENCY:currency} {GROUP:conversion_group}"],
    "dynamic_type_convert": ["{DYNAMIC_TYPE:source} {TEXT:unit} {GROUP:conversion_group}"],
    "percent_calculator": ["{AMOUNT:number} {GROUP:of_group} {PERCENT:p}"],
    "find_total_from_percent": ["{PERCENT:percent_part} {GROUP:equals_group} {AMOUNT:number_part}"],
}

LANGUAGES: dict[str, dict[str, Any]] = {
    "en": {
        "long_months": {
            "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
            "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
        },
        "short_months": {
            "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6, "jul": 7,
            "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
        },
        "word_groups": {
            "conversion_group": ["in", "to", "into", "as"],
            "of_group": ["of"],
            "per_group": ["per", "a", "an", "each"],
            "at_group": ["at"],
        },
        "aliases": {
            "add": "+", "plus": "+", "minus": "-", "subtract": "-",
            "times": "*", "multiply": "*", "divide": "/", "over": "/",
            "×": "*", "÷": "/", "−": "-",
        },
        "constants": {"today": "today", "tomorrow": "tomorrow", "yesterday": "yesterday", "now": "now"},
        "duration_units": {
            "second": "second", "seconds": "second", "sec": "second", "secs": "second", "s": "second",
            "minute": "minute", "minutes": "minute", "min": "minute", "mins": "minute",
            "hour": "hour", "hours": "hour", "h": "hour", "hr": "hour", "hrs": "hour",
            "day": "day", "days": "day",
            "week": "week", "weeks": "week",
            "month": "month", "months": "month",
            "year": "year", "years": "year",
        },
        "duration_names": {
            "year": ["year", "years"],
            "month": ["month", "months"],
            "day": ["day", "days"],
            "hour": ["hour", "hours"],
            "minute": ["minute", "minutes"],
            "second": ["second", "seconds"],
        },
        "date_format": "{day} {month} {year}",
        "rules": _EN_RULES,
    },
    "tr": {
        "long_months": {
            "ocak": 1, "şubat": 2, "mart": 3, "nisan": 4, "mayıs": 5, "haziran": 6,
            "temmuz": 7, "ağustos": 8, "eylül": 9, "ekim": 10, "kasım": 11, "aralık": 12,
        },
        "short_months": {
            "oca": 1, "şub": 2, "mar": 3, "nis": 4, "may": 5, "haz": 6,
            "tem": 7, "ağu": 8, "eyl": 9, "eki": 10, "kas": 11, "ara": 12,
        },
        "word_groups": {
            "conversion_group": ["olarak", "cinsinden"],
            "range_group": ["ile", "ve"],
            "of_group": ["sayısının", "nin", "nın", "nun", "nün"],
            "equals_group": ["eşittir", "ise"],
        },
        "aliases": {
            "artı": "+", "ekle": "+", "eksi": "-", "çıkar": "-",
            "çarpı": "*", "bölü": "/",
            "×": "*", "÷": "/", "−": "-",
        },
        "constants": {"bugün": "today", "yarın": "tomorrow", "dün": "yesterday", "şimdi": "now"},
        "duration_units": {
            "saniye": "second", "sn": "second",
            "dakika": "minute", "dk": "minute",
            "saat": "hour", "sa": "hour",
            "gün": "day",
            "hafta": "week",
            "ay": "month",
            "yıl": "year", "sene": "year",
        },
        "duration_names": {
            "year": ["yıl", "yıl"],
            "month": ["ay", "ay"],
            "day": ["gün", "gün"],
            "hour": ["saat", "saat"],
            "minute": ["dakika", "dakika"],
            "second": ["saniye", "saniye"],
        },
        "date_format": "{day} {month} {year}",
        "rules": _TR_RULES,
    },
}

DEFAULT_TABLES: dict[str, Any] = {
    "currencies": CURRENCIES,
    "currency_aliases": CURRENCY_ALIASES,
    "currency_rates": CURRENCY_RATES,
    "timezones": TIMEZONES,
    "dynamic_types": DYNAMIC_TYPES,
    "languages": LANGUAGES,
}
