#!/usr/bin/env python3
"""
Create an organizer account.

Usage: python create_user.py <user_name> <password>
"""
import sys
sys.path.append('.')

from app import crud
from app.crud.user import UserCreate
from app.db.database import Base, SessionLocal, engine
from app import models  # noqa: F401


def create_user(user_name, password):
    db = SessionLocal()
    try:
        existing = crud.user.get_by_user_name(db, user_name=user_name)
        if existing:
            print(f"User '{user_name}' already exists (ID: {existing.id})")
            return False

        user = crud.user.create(db, obj_in=UserCreate(user_name=user_name, password=password))
        print("User created successfully!")
        print(f"ID: {user.id}")
        print(f"User name: {user.user_name}")
        return True
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python create_user.py <user_name> <password>")
        sys.exit(1)

    Base.metadata.create_all(bind=engine)
    if not create_user(sys.argv[1], sys.argv[2]):
        sys.exit(1)
