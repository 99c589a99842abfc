"""DNS-01 record naming helpers."""


def node_name_for(fqdn: str, zone: str) -> str:
    """Compute the node name of a challenge record relative to its zone.

    Both arguments may carry a trailing dot, as challenge hosts usually
    send fully qualified names. The zone suffix is matched without regard
    to case; the node name keeps the case it had in the FQDN.

    Args:
        fqdn: Fully qualified record name (e.g. "_acme-challenge.example.com.").
        zone: Zone the record lives in (e.g. "example.com.").

    Returns:
        The node name (e.g. "_acme-challenge"), or "" for the zone apex.

    Raises:
        ValueError: If the FQDN is not inside the zone.
    """
    name = fqdn.rstrip(".")
    apex = zone.rstrip(".")

    if name.lower() == apex.lower():
        return ""
    suffix = f".{apex}"
    if not name.lower().endswith(suffix.lower()):
        raise ValueError(f"Record '{fqdn}' is not under zone '{zone}'")
    return name[: -len(suffix)]
