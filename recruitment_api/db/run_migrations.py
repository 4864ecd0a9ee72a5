"""
Programmatic Alembic migration runner.

No alembic.ini is needed: the script location is this package's migrations
directory and the URL comes from the database settings.

Usage examples:
    python -m recruitment_api.db.run_migrations migrate
    python -m recruitment_api.db.run_migrations migrate:make "add gym capacity"
    python -m recruitment_api.db.run_migrations migrate:rollback
    python -m recruitment_api.db.run_migrations migrate:status
    python -m recruitment_api.db.run_migrations upgrade head
    python -m recruitment_api.db.run_migrations downgrade -1
"""

import sys
from pathlib import Path
from typing import Callable, Dict, List

from alembic import command
from alembic.config import Config

from recruitment_api.db.config import get_settings

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


# PUBLIC_INTERFACE
def build_config() -> Config:
    """Alembic configuration pointing at the bundled migrations folder."""
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # Offline mode reads this URL; env.py builds its own async engine online.
    cfg.set_main_option("sqlalchemy.url", get_settings().sync_database_url)
    return cfg


def _make(cfg: Config, args: List[str]) -> None:
    if not args:
        print("Usage: migrate:make <message>")
        sys.exit(2)
    command.revision(cfg, message=" ".join(args), autogenerate=True)


def _show(cfg: Config, args: List[str]) -> None:
    if not args:
        print("Usage: show <revision>")
        sys.exit(2)
    command.show(cfg, args[0])


COMMANDS: Dict[str, Callable[[Config, List[str]], None]] = {
    "migrate": lambda cfg, args: command.upgrade(cfg, "head"),
    "migrate:make": _make,
    "migrate:rollback": lambda cfg, args: command.downgrade(cfg, "-1"),
    "migrate:status": lambda cfg, args: command.current(cfg, verbose=True),
    "upgrade": lambda cfg, args: command.upgrade(cfg, *(args or ["head"])),
    "downgrade": lambda cfg, args: command.downgrade(cfg, *(args or ["-1"])),
    "history": lambda cfg, args: command.history(cfg),
    "current": lambda cfg, args: command.current(cfg),
    "heads": lambda cfg, args: command.heads(cfg),
    "revision": lambda cfg, args: command.revision(cfg, message=" ".join(args) or None),
    "show": _show,
}


# PUBLIC_INTERFACE
def main(argv: List[str] | None = None) -> None:
    """
    Run one migration command.

    Exits with status 1 when no command is given and 2 for an unknown command
    or missing argument.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("No command provided. Available: " + ", ".join(COMMANDS))
        sys.exit(1)

    name, rest = args[0], args[1:]
    handler = COMMANDS.get(name)
    if handler is None:
        print(f"Unsupported command: {name}")
        sys.exit(2)
    handler(build_config(), rest)


if __name__ == "__main__":
    main()
