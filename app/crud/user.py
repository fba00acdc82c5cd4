from typing import Optional
from pydantic import BaseModel
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.user import User
from app.core.security import get_password_hash, verify_password


class UserCreate(BaseModel):
    user_name: str
    password: str


class CRUDUser(CRUDBase[User, UserCreate, UserCreate]):

    def get_by_user_name(self, db: Session, *, user_name: str) -> Optional[User]:
        return db.query(User).filter(User.user_name == user_name).first()

    def create(self, db: Session, *, obj_in: UserCreate) -> User:
        db_obj = User(
            user_name=obj_in.user_name,
            hashed_password=get_password_hash(obj_in.password),
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def authenticate(self, db: Session, *, user_name: str, password: str) -> Optional[User]:
        """Exact user-name lookup plus hash compare; None on any mismatch."""
        user = self.get_by_user_name(db, user_name=user_name)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user


user = CRUDUser(User)
