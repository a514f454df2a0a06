"""Name masking driven by per-result GDPR consent."""

from __future__ import annotations

from domain.common import PlayerIdentity

ANONYMOUS = "Anonymous"


def _clean(value: str | None) -> str:
    return (value or "").strip()


def initials(forename: str | None, surname: str | None) -> str:
    """Render ``"J. S."``; a missing half is left out and no names at all is Anonymous."""
    parts = [f"{name[0].upper()}." for name in (_clean(forename), _clean(surname)) if name]
    return " ".join(parts) or ANONYMOUS


def display_name(identity: PlayerIdentity | None, any_consent: bool) -> str:
    """Resolve the public name for a player.

    Consent is any-yes: one consenting result anywhere shows the full name in
    every leaderboard the player appears in.
    """
    if identity is None:
        return ANONYMOUS

    if not (any_consent or identity.has_consented):
        return initials(identity.forename, identity.surname)

    preferred = _clean(identity.display_name)
    if preferred:
        return preferred
    full_name = " ".join(
        name for name in (_clean(identity.forename), _clean(identity.surname)) if name
    )
    return full_name or ANONYMOUS


__all__ = ["ANONYMOUS", "display_name", "initials"]
