"""
CRUD repository for the Speak Ika schema.

``ContributionRepository`` receives an ``AsyncSession`` and provides all
data-access methods.  It calls ``flush()`` rather than ``commit()`` so
that transaction boundaries are controlled by the caller (typically
:meth:`Database.session`).
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from speakika.core.exceptions import (
    ContributionNotFoundError,
    DuplicateTranscriptError,
    DuplicateTranslationError,
    InvalidStatusError,
    TranscriptNotFoundError,
    UserNotFoundError,
)
from speakika.core.models import ContributionStatus, EmotionLabel, SentimentLabel
from speakika.services.storage.models_db import Contribution, Transcript, Translation, User

logger = logging.getLogger(__name__)


class ContributionRepository:
    """Data-access layer for users, contributions, transcripts, and translations.

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def create_user(
        self,
        email: str | None = None,
        display_name: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        """Create and return a new user."""
        user = User(email=email, display_name=display_name, avatar_url=avatar_url)
        self._session.add(user)
        await self._session.flush()
        return user

    async def get_user(self, user_id: str) -> User:
        """Return a user by ID or raise :class:`UserNotFoundError`."""
        user = await self._session.get(User, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def delete_user(self, user_id: str) -> None:
        """Delete a user; contributions, transcripts and translations cascade."""
        user = await self.get_user(user_id)
        await self._session.delete(user)
        await self._session.flush()
        logger.info("Deleted user %s", user_id)

    # ------------------------------------------------------------------
    # Contributions
    # ------------------------------------------------------------------

    async def create_contribution(
        self,
        user_id: str,
        source_language_code: str,
        title: str | None = None,
        description: str | None = None,
        audio_url: str | None = None,
        metadata: str | None = None,
    ) -> Contribution:
        """Create a *pending* contribution owned by ``user_id``."""
        await self.get_user(user_id)
        contribution = Contribution(
            user_id=user_id,
            source_language_code=source_language_code,
            title=title,
            description=description,
            audio_url=audio_url,
            metadata_text=metadata,
        )
        self._session.add(contribution)
        await self._session.flush()
        return contribution

    async def get_contribution(self, contribution_id: str) -> Contribution:
        """Return a contribution by ID or raise :class:`ContributionNotFoundError`."""
        contribution = await self._session.get(Contribution, contribution_id)
        if contribution is None:
            raise ContributionNotFoundError(contribution_id)
        return contribution

    async def list_contributions(
        self,
        user_id: str | None = None,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Contribution]:
        """Return contributions newest first, optionally filtered."""
        stmt = (
            select(Contribution)
            .order_by(Contribution.created_at.desc(), Contribution.id)
            .limit(limit)
            .offset(offset)
        )
        if user_id is not None:
            stmt = stmt.where(Contribution.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Contribution.status == _parse_status(status))
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def update_contribution_status(self, contribution_id: str, status: str) -> Contribution:
        """Move a contribution to another processing state."""
        new_status = _parse_status(status)
        contribution = await self.get_contribution(contribution_id)
        contribution.status = new_status
        await self._session.flush()
        return contribution

    async def delete_contribution(self, contribution_id: str) -> None:
        """Delete a contribution; its transcripts and translations cascade."""
        contribution = await self.get_contribution(contribution_id)
        await self._session.delete(contribution)
        await self._session.flush()

    # ------------------------------------------------------------------
    # Transcripts
    # ------------------------------------------------------------------

    async def create_transcript(
        self,
        contribution_id: str,
        language_code: str,
        content: str,
        confidence: float | None = None,
        metadata: str | None = None,
    ) -> Transcript:
        """Store recognized text; one transcript per (contribution, language).

        Raises:
            ContributionNotFoundError: Unknown ``contribution_id``.
            DuplicateTranscriptError: The language is already transcribed.
        """
        await self.get_contribution(contribution_id)
        existing = await self._session.execute(
            select(Transcript.id).where(
                Transcript.contribution_id == contribution_id,
                Transcript.language_code == language_code,
            )
        )
        if existing.first() is not None:
            raise DuplicateTranscriptError(contribution_id, language_code)

        transcript = Transcript(
            contribution_id=contribution_id,
            language_code=language_code,
            content=content,
            confidence=confidence,
            metadata_text=metadata,
        )
        self._session.add(transcript)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise DuplicateTranscriptError(contribution_id, language_code) from exc
        return transcript

    async def get_transcript(self, transcript_id: str) -> Transcript:
        """Return a transcript by ID or raise :class:`TranscriptNotFoundError`."""
        transcript = await self._session.get(Transcript, transcript_id)
        if transcript is None:
            raise TranscriptNotFoundError(transcript_id)
        return transcript

    async def list_transcripts(self, contribution_id: str) -> list[Transcript]:
        """Return all transcripts of a contribution ordered by language."""
        stmt = (
            select(Transcript)
            .where(Transcript.contribution_id == contribution_id)
            .order_by(Transcript.language_code)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Translations
    # ------------------------------------------------------------------

    async def create_translation(
        self,
        transcript_id: str,
        target_language_code: str,
        content: str,
        sentiment: str | None = None,
        sentiment_score: float | None = None,
        emotion: str | None = None,
        emotion_score: float | None = None,
        notes: str | None = None,
    ) -> Translation:
        """Store a translation; one per (transcript, target language).

        Raises:
            TranscriptNotFoundError: Unknown ``transcript_id``.
            DuplicateTranslationError: The target language already exists.
            ValueError: ``sentiment`` or ``emotion`` is not a known label.
        """
        await self.get_transcript(transcript_id)
        existing = await self._session.execute(
            select(Translation.id).where(
                Translation.transcript_id == transcript_id,
                Translation.target_language_code == target_language_code,
            )
        )
        if existing.first() is not None:
            raise DuplicateTranslationError(transcript_id, target_language_code)

        translation = Translation(
            transcript_id=transcript_id,
            target_language_code=target_language_code,
            content=content,
            sentiment=SentimentLabel(sentiment) if sentiment is not None else None,
            sentiment_score=sentiment_score,
            emotion=EmotionLabel(emotion) if emotion is not None else None,
            emotion_score=emotion_score,
            notes=notes,
        )
        self._session.add(translation)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise DuplicateTranslationError(transcript_id, target_language_code) from exc
        return translation

    async def list_translations(self, transcript_id: str) -> list[Translation]:
        """Return all translations of a transcript ordered by target language."""
        stmt = (
            select(Translation)
            .where(Translation.transcript_id == transcript_id)
            .order_by(Translation.target_language_code)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())


def _parse_status(status: str) -> ContributionStatus:
    try:
        return ContributionStatus(status)
    except ValueError:
        raise InvalidStatusError(status) from None
