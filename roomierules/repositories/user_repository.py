from sqlalchemy import String, cast, func, or_
from sqlalchemy.orm import Session
from roomierules.models.user import User


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        """Get user by internal ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive)"""
        return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def create(self, user: User) -> User:
        """Create new user"""
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user: User) -> User:
        """Persist changes made to a user"""
        self.db.commit()
        self.db.refresh(user)
        return user

    def get_house_members(self, house_id: int) -> list[User]:
        """Get all users whose house_id points at the house"""
        return (
            self.db.query(User)
            .filter(User.house_id == house_id)
            .order_by(User.id)
            .all()
        )

    def count_house_members(self, house_id: int) -> int:
        """Count members of a house"""
        return self.db.query(func.count(User.id)).filter(User.house_id == house_id).scalar() or 0

    def search_house_members(self, house_id: int, term: str, limit: int = 10) -> list[User]:
        """Case-insensitive substring search over member name, email and role"""
        pattern = f"%{term.lower()}%"
        return (
            self.db.query(User)
            .filter(
                User.house_id == house_id,
                or_(
                    func.lower(User.name).like(pattern),
                    func.lower(User.email).like(pattern),
                    func.lower(cast(User.role, String)).like(pattern),
                ),
            )
            .order_by(User.name.asc())
            .limit(limit)
            .all()
        )
