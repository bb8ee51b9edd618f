"""Caller identity as handed over by the upstream identity gateway.

Tokens are verified before requests reach this service; the gateway forwards
the subject and the realm roles as plain headers. Nothing here inspects or
validates a token.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from fastapi import Depends, Header, HTTPException, status

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"


@dataclass(frozen=True)
class Principal:
    user_id: str
    roles: FrozenSet[str] = field(default_factory=frozenset)

    def has_any_role(self, *roles: str) -> bool:
        return any(role in self.roles for role in roles)

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in self.roles


def parse_roles(raw: Optional[str]) -> FrozenSet[str]:
    """Split a comma separated role header, dropping a ``ROLE_`` prefix."""
    roles = set()
    for part in (raw or "").split(","):
        role = part.strip().upper()
        if role.startswith("ROLE_"):
            role = role[len("ROLE_"):]
        if role:
            roles.add(role)
    return frozenset(roles)


async def current_principal(
    x_user_id: Optional[str] = Header(None),
    x_user_roles: Optional[str] = Header(None),
) -> Principal:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Principal(user_id=user_id, roles=parse_roles(x_user_roles))


def require_role(*allowed_roles: str):
    """
    Dependency that only lets through principals holding one of the roles.
    Usage: Depends(require_role(ROLE_USER, ROLE_ADMIN))
    """
    async def role_checker(principal: Principal = Depends(current_principal)) -> Principal:
        if not principal.has_any_role(*allowed_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {', '.join(allowed_roles)}"
            )
        return principal
    return role_checker


current_user = require_role(ROLE_USER, ROLE_ADMIN)
current_admin = require_role(ROLE_ADMIN)
