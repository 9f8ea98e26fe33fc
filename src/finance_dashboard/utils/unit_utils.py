"""Business unit label normalization."""

from finance_dashboard.models.unit import BusinessUnit

# Sheet labels (lowercased) to canonical units
UNIT_SYNONYMS: dict[str, BusinessUnit] = {
    "отель и бани": BusinessUnit.HOTEL,
    "отель": BusinessUnit.HOTEL,
    "бани": BusinessUnit.HOTEL,
    "hotel": BusinessUnit.HOTEL,
    "ресторан": BusinessUnit.RESTAURANT,
    "restaurant": BusinessUnit.RESTAURANT,
    "спа-центр": BusinessUnit.SPA,
    "спа": BusinessUnit.SPA,
    "spa": BusinessUnit.SPA,
    "бассейн": BusinessUnit.POOL,
    "pool": BusinessUnit.POOL,
    "бар": BusinessUnit.BAR,
    "bar": BusinessUnit.BAR,
}


class UnknownUnitError(ValueError):
    """Raised when a label matches no business unit."""

    pass


def normalize_unit(label: object) -> BusinessUnit:
    """Map a free-text unit label to a BusinessUnit.

    Matching is case-insensitive and ignores surrounding whitespace.

    Args:
        label: Raw label from the sheet, or a BusinessUnit.

    Returns:
        The canonical business unit.

    Raises:
        UnknownUnitError: If the label is not in the synonym table.
    """
    if isinstance(label, BusinessUnit):
        return label
    if not isinstance(label, str):
        raise UnknownUnitError(f"Unknown unit: {label!r}")

    unit = UNIT_SYNONYMS.get(label.strip().lower())
    if unit is None:
        raise UnknownUnitError(f"Unknown unit: {label!r}")
    return unit
