#!/usr/bin/env python3
"""
Create demo accounts and a short conversation between them.
Run once against a fresh database to have something to log into.
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from swiftlink.core.db import SessionLocal, create_all
from swiftlink.models.orm import User
from swiftlink.auth.security import hash_password
from swiftlink.services import chat_store

DEMO_ACCOUNTS = [
    ("agent@swiftlink.local", "Demo Agent", "agent", "agent123"),
    ("user@swiftlink.local", "Demo User", "user", "user123"),
]


def _ensure_user(db, email: str, full_name: str, role: str, password: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user:
        print(f"⚠️  {role} account already exists: {email}")
        return user
    user = User(
        email=email,
        full_name=full_name,
        hashed_password=hash_password(password),
        role=role,
        is_active=True,
    )
    db.add(user)
    db.flush()  # Get the ID
    print(f"✅ Created {role} account (email: {email}, password: {password})")
    return user


def create_demo_accounts():
    create_all()
    db = SessionLocal()

    try:
        agent, user = [_ensure_user(db, *acc) for acc in DEMO_ACCOUNTS]

        if not chat_store.list_messages(db, str(user.id), agent_id=str(agent.id)):
            chat_store.append_message(db, str(user.id), str(agent.id), "user", "Hi, my parcel is late.")
            chat_store.append_message(db, str(user.id), str(agent.id), "agent", "Sorry about that, checking now.")
            print("✅ Seeded a demo conversation")

        db.commit()

        print("\n" + "=" * 60)
        print(f"Agent id: {agent.id}   User id: {user.id}")
        print("⚠️  IMPORTANT: Change these passwords in production!")
        print()

    except Exception as e:
        print(f"\n❌ Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    create_demo_accounts()
