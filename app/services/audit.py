"""Audit trail helpers"""

import secrets
import string
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditLog
from app.models.user import User

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(prefix: str, length: int = 7) -> str:
    """Human-readable reference such as RES-8K2PQ1Z"""
    return f"{prefix}-" + "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def record_audit(
    db: AsyncSession,
    actor: Optional[User],
    action: str,
    resource_type: str,
    resource_id: UUID,
    before: Any = None,
    after: Any = None,
) -> AuditLog:
    """Stage an audit entry in the caller's transaction"""
    entry = AuditLog(
        actor_id=actor.id if actor else None,
        actor_type="user" if actor else "system",
        actor_name=(actor.full_name or actor.email) if actor else None,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        data_json={"before": before, "after": after},
    )
    db.add(entry)
    return entry
