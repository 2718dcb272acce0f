import argparse
import logging
import sys

from biolink.adapters.sqlite.migrator import SQLiteMigrator
from biolink.adapters.sqlite.repos import SQLiteLinkRepo, SQLiteProfileRepo, SQLiteUserRepo
from biolink.api.auth_utils import hash_password
from biolink.api.deps import Settings
from biolink.components.links import LinkService
from biolink.components.profiles import ProfileService
from biolink.domain.entities import User
from biolink.rules.loader import load_rules

logger = logging.getLogger("cli")

DEMO_EMAIL = "demo@example.com"
DEMO_USERNAME = "demo"
DEMO_LINKS = [
    ("My Portfolio", "https://replit.com", "Globe"),
    ("Twitter", "https://twitter.com", "Twitter"),
    ("Instagram", "https://instagram.com", "Instagram"),
]


def handle_migrate(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()
    print(f"Applied {len(applied)} migration(s) to {settings.db_path}")


def seed_demo(settings: Settings, password: str) -> bool:
    """Create the demo user, profile and links. Returns False if already present."""
    rules = load_rules(settings.rules_path)
    profiles = ProfileService(SQLiteProfileRepo(settings.db_path), rules.profiles)
    if profiles.get_by_username(DEMO_USERNAME):
        logger.info("Demo profile already exists")
        return False

    user_repo = SQLiteUserRepo(settings.db_path)
    user = user_repo.get_by_email(DEMO_EMAIL)
    if not user:
        user = user_repo.save(User(email=DEMO_EMAIL, password_hash=hash_password(password)))

    profile, errors = profiles.create(
        user.id,
        {
            "username": DEMO_USERNAME,
            "bio": "Welcome to Biolink! This is a demo profile.",
            "theme": "custom",
            "background_color": "linear-gradient(to right, #6366f1, #a855f7, #ec4899)",
            "text_color": "#ffffff",
            "button_color": "rgba(255, 255, 255, 0.2)",
            "button_text_color": "#ffffff",
            "font": "Inter",
        },
    )
    if profile is None or profile.id is None:
        raise RuntimeError(f"Could not create demo profile: {errors[0].message}")

    links = LinkService(SQLiteLinkRepo(settings.db_path), rules.links)
    for title, url, icon in DEMO_LINKS:
        links.create(profile.id, title=title, url=url, icon=icon)

    logger.info("Seeded demo profile: /%s", DEMO_USERNAME)
    return True


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Biolink CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply pending database migrations")

    seed_parser = subparsers.add_parser("seed-demo", help="Create the demo profile")
    seed_parser.add_argument("--password", default="demo-password", help="Demo user password")

    args = parser.parse_args(argv)
    settings = Settings()

    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)

    if args.command == "migrate":
        handle_migrate(settings)
    elif args.command == "seed-demo":
        handle_migrate(settings)
        created = seed_demo(settings, args.password)
        print("Demo profile created." if created else "Demo profile already present.")


if __name__ == "__main__":
    main()
