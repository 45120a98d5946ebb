import math
import re
import logging
from typing import Dict, List, Optional, Tuple

from .schemas_speccheck import Claim, ClaimValidation

logger = logging.getLogger(__name__)

# lowercase unit -> (canonical unit, claim category)
UNIT_MAPPINGS: Dict[str, Tuple[str, str]] = {
    # Luminous flux
    "lm": ("lm", "lumens"),
    "lumen": ("lm", "lumens"),
    "lumens": ("lm", "lumens"),
    # Capacity / energy
    "mah": ("mAh", "mah"),
    "ah": ("mAh", "mah"),
    "wh": ("Wh", "wh"),
    # Power
    "w": ("W", "watts"),
    "watt": ("W", "watts"),
    "watts": ("W", "watts"),
    # Current
    "a": ("A", "amps"),
    "amp": ("A", "amps"),
    "amps": ("A", "amps"),
    "ma": ("A", "amps"),
    # Voltage
    "v": ("V", "volts"),
    "volt": ("V", "volts"),
    "volts": ("V", "volts"),
}

# Scale applied after lookup so the value lands in the canonical unit
UNIT_CONVERSIONS: Dict[str, float] = {
    "ah": 1000.0,
    "ma": 0.001,
}

MULTIPLIERS: Dict[str, float] = {
    "k": 1_000.0,
    "m": 1_000_000.0,
}

# Tried in order; the first shape whose unit resolves wins
CLAIM_PATTERNS = [
    re.compile(r"^([\d.]+)\s*(k|m)?\s*([a-z]+)$"),  # "10k lumens", "10000lm"
    re.compile(r"^([\d.]+)\s+([a-z]+)$"),           # "10000 lumens"
    re.compile(r"^([\d.]+)([a-z]+)$"),              # "10000lm"
]

_SPLIT_RE = re.compile(r"[,;/]|\band\b", re.IGNORECASE)

# category -> (min, max, warning)
CLAIM_LIMITS: Dict[str, Tuple[float, float, str]] = {
    "lumens": (1, 100_000, "Lumen values above 100,000 are extremely rare"),
    "mah": (100, 100_000, "Capacity above 100,000mAh is unusual for portable devices"),
    "wh": (1, 1_000, "Energy above 1000Wh is unusual for portable devices"),
    "watts": (1, 10_000, "Power above 10kW is unusual"),
    "amps": (0.1, 1_000, "Current above 1000A is unusual"),
    "volts": (0.1, 1_000, "Voltage above 1000V is unusual for consumer devices"),
}


def _normalize(text: str) -> str:
    normalized = text.lower().replace(",", "")
    return re.sub(r"\s+", " ", normalized).strip()


def _split_match(match: re.Match) -> Tuple[str, Optional[str], str]:
    groups = match.groups()
    if len(groups) == 3:
        number, multiplier, unit = groups
        # "3000mah" is milliamp-hours, not mega-amp-hours
        if multiplier and (multiplier + unit) in UNIT_MAPPINGS:
            return number, None, multiplier + unit
        return number, multiplier, unit
    number, unit = groups
    return number, None, unit


def parse_claim(text: str, source: str = "user_input") -> Optional[Claim]:
    """Parse free text such as "10,000 lumens" or "10k lm" into a Claim.

    Returns None when nothing recognizable is found.
    """
    original_text = (text or "").strip()
    if not original_text:
        return None

    normalized = _normalize(original_text)

    for pattern in CLAIM_PATTERNS:
        match = pattern.match(normalized)
        if not match:
            continue

        number, multiplier, unit_str = _split_match(match)
        try:
            value = float(number)
        except ValueError:
            continue

        if multiplier:
            value *= MULTIPLIERS[multiplier]

        unit_info = UNIT_MAPPINGS.get(unit_str)
        if not unit_info:
            continue

        value *= UNIT_CONVERSIONS.get(unit_str, 1.0)
        if value <= 0 or not math.isfinite(value):
            logger.debug(f"Ignoring non-positive or overflowing claim value in {original_text!r}")
            return None

        unit, category = unit_info
        return Claim(
            category=category,
            value=value,
            unit=unit,
            source=source,
            original_text=original_text,
        )

    return None


def parse_multiple_claims(text: str, source: str = "user_input") -> List[Claim]:
    """Parse every claim in a list like "1000 lumens, 20wh and 5V"."""
    claims = []
    for part in _SPLIT_RE.split(text or ""):
        claim = parse_claim(part.strip(), source)
        if claim:
            claims.append(claim)
    return claims


def validate_claim(claim: Claim) -> ClaimValidation:
    """Flag values outside what consumer products plausibly advertise"""
    limit = CLAIM_LIMITS.get(claim.category)
    if not limit:
        return ClaimValidation(valid=True)

    low, high, warning = limit
    if claim.value < low or claim.value > high:
        return ClaimValidation(valid=False, warning=warning)
    return ClaimValidation(valid=True)


def format_claim_value(value: float, unit: str) -> str:
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M {unit}"
    if value >= 1_000:
        return f"{value / 1_000:.1f}k {unit}"
    if value < 1:
        return f"{value:.2f} {unit}"
    return f"{int(value + 0.5):,} {unit}"  # half up
