from typing import Optional, List
from sqlalchemy.orm import Session

from medledger.domain.identity.models import IdentityRole, Role


class IdentityRepository:
    """Repository for identity role data access operations"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, identity: str) -> Optional[IdentityRole]:
        """Get role row for an identity"""
        if identity is None:
            return None
        return self.db.get(IdentityRole, identity)

    def create(self, identity: str, role: Role, assigned_by: Optional[str] = None) -> IdentityRole:
        """Persist a role assignment"""
        row = IdentityRole(identity=identity, role=role, assigned_by=assigned_by)
        self.db.add(row)
        self.db.flush()
        return row

    def get_by_role(self, role: Role) -> List[IdentityRole]:
        """Get all identities holding a role"""
        return self.db.query(IdentityRole).filter(
            IdentityRole.role == role
        ).order_by(IdentityRole.assigned_at, IdentityRole.identity).all()

    def count_by_role(self, role: Role) -> int:
        return self.db.query(IdentityRole).filter(IdentityRole.role == role).count()
