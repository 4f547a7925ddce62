"""Role-based authorization helpers."""

from __future__ import annotations

from survey_tracker.core.exceptions import AuthorizationError

_SHARED_SCOPES = {
    "surveys.read",
    "surveys.write",
    "clients.read",
    "clients.write",
    "statistics.read",
    "settings.read",
    "findings.read",
    "findings.write",
    "cve.read",
    "cve.write",
    "notes.own",
}

# Scope strings are kept explicit for endpoint-level declarations.
ROLE_SCOPES: dict[str, set[str]] = {
    "admin": {
        "*",
    },
    "manager": _SHARED_SCOPES | {
        "surveys.read_all",
        "audit.read",
        "users.read",
    },
    "surveyor": set(_SHARED_SCOPES),
}


def get_scopes_for_role(role: str) -> set[str]:
    """Return scopes granted to a role."""
    return ROLE_SCOPES.get(role.lower(), set())


def has_scopes(role: str, required_scopes: list[str] | set[str] | tuple[str, ...]) -> bool:
    """Check if role includes every required scope."""
    granted = get_scopes_for_role(role)
    if "*" in granted:
        return True
    return set(required_scopes).issubset(granted)


def require_scopes(role: str, required_scopes: list[str] | set[str] | tuple[str, ...]) -> None:
    """Raise when a role lacks required scopes."""
    if has_scopes(role=role, required_scopes=required_scopes):
        return
    missing = sorted(set(required_scopes) - get_scopes_for_role(role))
    raise AuthorizationError(f"Missing required scopes: {', '.join(missing)}")
