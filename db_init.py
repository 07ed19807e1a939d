# db_init.py
import os
from pathlib import Path

from werkzeug.security import generate_password_hash

from config import Config
from models import Base, User, make_engine, make_session_factory

def main():
    # Ensure instance/ exists for SQLite local dev
    if Config.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
        Path("instance").mkdir(parents=True, exist_ok=True)

    # Ensure exports/ exists for PDFs
    Path(Config.EXPORTS_DIR).mkdir(parents=True, exist_ok=True)

    engine = make_engine(Config.SQLALCHEMY_DATABASE_URI, echo=Config.SQLALCHEMY_ECHO)
    Base.metadata.create_all(engine)

    # First install: create an admin from env vars so the API is usable immediately
    SessionLocal = make_session_factory(engine)
    with SessionLocal() as s:
        if not s.query(User).first():
            username = os.getenv("INITIAL_ADMIN_USERNAME", "admin")
            password = os.getenv("INITIAL_ADMIN_PASSWORD", "changeme")
            s.add(User(username=username, password_hash=generate_password_hash(password)))
            s.commit()
            print(f"Created user: {username}")

    print("✅ Database initialized.")
    print(f"DB: {Config.SQLALCHEMY_DATABASE_URI}")
    print(f"Exports dir: {Config.EXPORTS_DIR}")

if __name__ == "__main__":
    main()
