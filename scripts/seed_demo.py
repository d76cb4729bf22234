"""
Demo Seeder: create a few users and uploaded documents for local testing.

Writes into the database from DATABASE_URL (default: local SQLite file),
then prints a bearer token per user so the API can be exercised with curl.
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.config.settings import get_settings
from src.infrastructure.db.database import Database
from src.infrastructure.db.models import FileUploadRecord, UserRecord
from src.infrastructure.security.tokens import create_access_token

# ── Demo users: (id, email, type, role, first, last) ──
DEMO_USERS = [
    ("demo-provider", "provider@demo.local", "provider", "user", "Ana", "Lopez"),
    ("demo-seeker", "seeker@demo.local", "seeker", "user", "Luis", "Diaz"),
    ("demo-admin", "admin@demo.local", "seeker", "admin", "Marta", "Ruiz"),
]

# ── Demo uploads: (id, owner, original name) ──
DEMO_DOCUMENTS = [
    ("doc-provider-front", "demo-provider", "dni_front.jpg"),
    ("doc-provider-back", "demo-provider", "dni_back.jpg"),
    ("doc-seeker-front", "demo-seeker", "passport.jpg"),
]


def seed(database: Database) -> tuple[int, int]:
    users_added = docs_added = 0
    with database.session_scope() as session:
        for user_id, email, user_type, role, first, last in DEMO_USERS:
            if session.get(UserRecord, user_id):
                continue
            session.add(UserRecord(
                id=user_id, email=email, user_type=user_type, role=role,
                first_name=first, last_name=last,
            ))
            users_added += 1

        for doc_id, owner, name in DEMO_DOCUMENTS:
            if session.get(FileUploadRecord, doc_id):
                continue
            session.add(FileUploadRecord(
                id=doc_id, uploaded_by=owner, original_name=name,
                file_url=f"https://files.demo.local/{doc_id}/{name}", status="active",
            ))
            docs_added += 1
    return users_added, docs_added


def main():
    settings = get_settings()
    database = Database(settings.database_url)
    database.init_db()

    print(f"Database: {database.safe_url}")
    users_added, docs_added = seed(database)
    print(f"Seeded {users_added} users, {docs_added} documents\n")

    for user_id, email, user_type, role, _, _ in DEMO_USERS:
        token = create_access_token(
            user_id, settings.jwt_secret, settings.jwt_algorithm, audience=settings.jwt_audience
        )
        print(f"{user_id:15s} [{user_type}/{role}]")
        print(f"  Authorization: Bearer {token}\n")

    database.dispose()


if __name__ == "__main__":
    main()
