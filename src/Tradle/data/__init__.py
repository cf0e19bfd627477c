"""SQLite persistence: connection management, migrations, and the challenge store."""

from Tradle.data.database import Database
from Tradle.data.repository import ChallengeRepository

__all__ = ["ChallengeRepository", "Database"]
