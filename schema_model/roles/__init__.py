"""
Model roles.

Roles are looked up by name from the ``roles`` setting and composed into
the model when it is constructed.
"""

from schema_model.core.exceptions import UnknownRoleError
from schema_model.roles.base import ModelRole
from schema_model.roles.replicated import ReplicationPolicy

ROLES: dict[str, type[ModelRole]] = {
    ReplicationPolicy.name: ReplicationPolicy,
}


def resolve_role(name: str) -> type[ModelRole]:
    """
    Look up a role class by name (case-insensitive).

    Raises:
        UnknownRoleError: If no role is registered under the name
    """
    try:
        return ROLES[name.lower()]
    except KeyError:
        raise UnknownRoleError(f"Unknown role '{name}'", details={"known": sorted(ROLES)}) from None


__all__ = ["ModelRole", "ROLES", "ReplicationPolicy", "resolve_role"]
