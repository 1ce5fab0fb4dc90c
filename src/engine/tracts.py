"""Display names for census tracts."""

# NYC county FIPS (characters 3-5 of the 11-digit GEOID) -> borough
BOROUGHS: dict[str, str] = {
    "061": "Manhattan",
    "005": "Bronx",
    "047": "Brooklyn",
    "081": "Queens",
    "085": "Staten Island",
}


def borough_name(geoid: str) -> str:
    if not geoid:
        return "Unknown"
    return BOROUGHS.get(geoid[2:5], "Unknown")


def tract_names(geoid: str, nta_label: str | None = None) -> tuple[str, str, str]:
    """Return (tract_name, display_name, nta_name) for a tract."""
    suffix = geoid[-3:]
    tract_name = f"{nta_label}-{suffix}" if nta_label else f"Tract {suffix}"
    display_name = f"{tract_name} ({borough_name(geoid)})"
    return tract_name, display_name, nta_label or "Unknown Area"
