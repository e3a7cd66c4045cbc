"""
Storage module - Database ownership, ORM models, and repository.
"""

from speakika.services.storage.database import Base, Database
from speakika.services.storage.models_db import Contribution, Transcript, Translation, User
from speakika.services.storage.repository import ContributionRepository

__all__ = [
    "Base",
    "Contribution",
    "ContributionRepository",
    "Database",
    "Transcript",
    "Translation",
    "User",
]
