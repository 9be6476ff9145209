import re

_NOISE = re.compile(r"[^\d+]")


def normalize_phone_number(raw: str, country_code: str = "84") -> str:
    """
    Convert user input into ``+<country><number>`` form.

    Malformed input is returned cleaned but otherwise untouched so that the
    validators can reject it.

    Examples:
        >>> normalize_phone_number("0972 009 161")
        '+84972009161'
        >>> normalize_phone_number("84972009161")
        '+84972009161'
        >>> normalize_phone_number("972009161")
        '+84972009161'
    """
    if not raw:
        return ""

    kept = _NOISE.sub("", raw)
    # only a leading plus survives
    cleaned = ("+" if kept.startswith("+") else "") + kept.replace("+", "")

    if cleaned.startswith("0") and len(cleaned) in (9, 10):
        return f"+{country_code}{cleaned[1:]}"
    if cleaned.startswith(country_code) and len(cleaned) >= 10:
        return f"+{cleaned}"
    if cleaned.startswith("+"):
        return cleaned
    if 9 <= len(cleaned) <= 10:
        return f"+{country_code}{cleaned}"
    return cleaned


def digits_only(raw: str | None) -> str:
    """Strip everything but digits."""
    return re.sub(r"\D", "", raw or "")


def lookup_keys(raw: str, canonical: str, country_code: str = "84") -> list[str]:
    """Spellings under which a number may have been stored, without duplicates."""
    keys = [raw, canonical, digits_only(raw), digits_only(canonical)]
    prefix = f"+{country_code}"
    if canonical.startswith(prefix):
        keys.append("0" + canonical[len(prefix):])
    return list(dict.fromkeys(k for k in keys if k))
