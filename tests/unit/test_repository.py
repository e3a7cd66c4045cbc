"""Tests for the ContributionRepository CRUD layer.

Exercises users, contributions, transcripts and translations: creation
defaults, lookups, filtering, status updates, per-language uniqueness
(through the repository and directly against the schema), closed label
sets, and ON DELETE CASCADE down the ownership chain. All tests use an
in-memory SQLite database provided by the ``repository`` fixture.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

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
from speakika.services.storage.repository import ContributionRepository

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _make_contribution(repo: ContributionRepository, user_id: str | None = None) -> Contribution:
    """Shortcut to create a contribution (and its owner when not given)."""
    if user_id is None:
        user_id = (await repo.create_user(email=None)).id
    return await repo.create_contribution(user_id, "ika", title="Greeting")


async def _count(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


# ===================================================================
# Users
# ===================================================================


class TestUsers:
    """Verify user creation and lookup."""

    async def test_create_defaults(self, repository: ContributionRepository) -> None:
        user = await repository.create_user()
        assert len(user.id) == 36
        assert user.email is None
        assert user.created_at is not None

    async def test_get_existing(self, repository: ContributionRepository) -> None:
        created = await repository.create_user(email="ada@example.com", display_name="Ada")
        fetched = await repository.get_user(created.id)
        assert fetched.display_name == "Ada"

    async def test_get_missing_raises(self, repository: ContributionRepository) -> None:
        with pytest.raises(UserNotFoundError):
            await repository.get_user("missing")

    async def test_email_is_unique(self, repository: ContributionRepository) -> None:
        await repository.create_user(email="dup@example.com")
        with pytest.raises(IntegrityError):
            await repository.create_user(email="dup@example.com")

    async def test_many_users_without_email(self, repository: ContributionRepository) -> None:
        await repository.create_user()
        await repository.create_user()


# ===================================================================
# Contributions
# ===================================================================


class TestContributions:
    """Verify contribution creation, listing, and status transitions."""

    async def test_create_is_pending(self, repository: ContributionRepository) -> None:
        contribution = await _make_contribution(repository)
        assert contribution.status == ContributionStatus.pending
        assert contribution.source_language_code == "ika"
        assert contribution.title == "Greeting"

    async def test_metadata_is_stored_verbatim(self, repository: ContributionRepository) -> None:
        user = await repository.create_user()
        contribution = await repository.create_contribution(
            user.id, "ika", metadata='{"device": "phone"}'
        )
        assert contribution.metadata_text == '{"device": "phone"}'

    async def test_unknown_owner_raises(self, repository: ContributionRepository) -> None:
        with pytest.raises(UserNotFoundError):
            await repository.create_contribution("ghost", "ika")

    async def test_get_missing_raises(self, repository: ContributionRepository) -> None:
        with pytest.raises(ContributionNotFoundError):
            await repository.get_contribution("missing")

    async def test_list_filters_by_user(self, repository: ContributionRepository) -> None:
        alice = await repository.create_user(email="alice@example.com")
        bob = await repository.create_user(email="bob@example.com")
        await _make_contribution(repository, alice.id)
        await _make_contribution(repository, alice.id)
        await _make_contribution(repository, bob.id)

        assert len(await repository.list_contributions()) == 3
        assert len(await repository.list_contributions(user_id=alice.id)) == 2

    async def test_list_filters_by_status(self, repository: ContributionRepository) -> None:
        first = await _make_contribution(repository)
        await _make_contribution(repository, first.user_id)
        await repository.update_contribution_status(first.id, "completed")

        completed = await repository.list_contributions(status="completed")
        assert [c.id for c in completed] == [first.id]

    async def test_list_limit_and_offset(self, repository: ContributionRepository) -> None:
        user = await repository.create_user()
        for _ in range(4):
            await _make_contribution(repository, user.id)
        assert len(await repository.list_contributions(limit=3)) == 3
        assert len(await repository.list_contributions(limit=3, offset=3)) == 1

    async def test_update_status(self, repository: ContributionRepository) -> None:
        contribution = await _make_contribution(repository)
        updated = await repository.update_contribution_status(contribution.id, "processing")
        assert updated.status == ContributionStatus.processing

    async def test_invalid_status_raises(self, repository: ContributionRepository) -> None:
        contribution = await _make_contribution(repository)
        with pytest.raises(InvalidStatusError):
            await repository.update_contribution_status(contribution.id, "archived")
        with pytest.raises(InvalidStatusError):
            await repository.list_contributions(status="archived")


# ===================================================================
# Transcripts
# ===================================================================


class TestTranscripts:
    """Verify one transcript per (contribution, language)."""

    async def test_create(self, repository: ContributionRepository) -> None:
        contribution = await _make_contribution(repository)
        transcript = await repository.create_transcript(
            contribution.id, "ika", "Ugbu a", confidence=0.8
        )
        assert transcript.content == "Ugbu a"
        assert transcript.confidence == 0.8
        assert (await repository.get_transcript(transcript.id)).id == transcript.id

    async def test_duplicate_language_raises(self, repository: ContributionRepository) -> None:
        contribution = await _make_contribution(repository)
        await repository.create_transcript(contribution.id, "ika", "first")
        with pytest.raises(DuplicateTranscriptError):
            await repository.create_transcript(contribution.id, "ika", "second")

    async def test_other_language_is_allowed(self, repository: ContributionRepository) -> None:
        contribution = await _make_contribution(repository)
        await repository.create_transcript(contribution.id, "ika", "Ugbu a")
        await repository.create_transcript(contribution.id, "en", "Right now")
        transcripts = await repository.list_transcripts(contribution.id)
        assert [t.language_code for t in transcripts] == ["en", "ika"]

    async def test_unknown_contribution_raises(self, repository: ContributionRepository) -> None:
        with pytest.raises(ContributionNotFoundError):
            await repository.create_transcript("missing", "ika", "text")

    async def test_get_missing_raises(self, repository: ContributionRepository) -> None:
        with pytest.raises(TranscriptNotFoundError):
            await repository.get_transcript("missing")

    async def test_schema_rejects_duplicates(self, repository, db_session) -> None:
        """The unique constraint holds even when the repository is bypassed."""
        contribution = await _make_contribution(repository)
        db_session.add(Transcript(contribution_id=contribution.id, language_code="ika", content="a"))
        db_session.add(Transcript(contribution_id=contribution.id, language_code="ika", content="b"))
        with pytest.raises(IntegrityError):
            await db_session.flush()


# ===================================================================
# Translations
# ===================================================================


class TestTranslations:
    """Verify one translation per (transcript, target language) and label sets."""

    async def _transcript(self, repo: ContributionRepository) -> Transcript:
        contribution = await _make_contribution(repo)
        return await repo.create_transcript(contribution.id, "ika", "Ugbu a")

    async def test_create_with_labels(self, repository: ContributionRepository) -> None:
        transcript = await self._transcript(repository)
        translation = await repository.create_translation(
            transcript.id,
            "en",
            "Right now",
            sentiment="positive",
            sentiment_score=0.7,
            emotion="anticipation",
            emotion_score=0.4,
            notes="reviewed",
        )
        assert translation.sentiment == SentimentLabel.positive
        assert translation.emotion == EmotionLabel.anticipation
        assert translation.notes == "reviewed"

    async def test_labels_are_optional(self, repository: ContributionRepository) -> None:
        transcript = await self._transcript(repository)
        translation = await repository.create_translation(transcript.id, "en", "Right now")
        assert translation.sentiment is None
        assert translation.emotion is None

    async def test_unknown_label_raises(self, repository: ContributionRepository) -> None:
        transcript = await self._transcript(repository)
        with pytest.raises(ValueError):
            await repository.create_translation(transcript.id, "en", "x", emotion="boredom")

    async def test_duplicate_target_raises(self, repository: ContributionRepository) -> None:
        transcript = await self._transcript(repository)
        await repository.create_translation(transcript.id, "en", "first")
        with pytest.raises(DuplicateTranslationError):
            await repository.create_translation(transcript.id, "en", "second")

    async def test_list_by_target_language(self, repository: ContributionRepository) -> None:
        transcript = await self._transcript(repository)
        await repository.create_translation(transcript.id, "fr", "Maintenant")
        await repository.create_translation(transcript.id, "en", "Right now")
        translations = await repository.list_translations(transcript.id)
        assert [t.target_language_code for t in translations] == ["en", "fr"]

    async def test_unknown_transcript_raises(self, repository: ContributionRepository) -> None:
        with pytest.raises(TranscriptNotFoundError):
            await repository.create_translation("missing", "en", "x")


# ===================================================================
# Cascades
# ===================================================================


class TestCascadeDeletes:
    """Deleting an owner removes everything beneath it."""

    async def _tree(self, repo: ContributionRepository) -> Contribution:
        contribution = await _make_contribution(repo)
        transcript = await repo.create_transcript(contribution.id, "ika", "Ugbu a")
        await repo.create_translation(transcript.id, "en", "Right now")
        return contribution

    async def test_delete_user(self, repository, db_session) -> None:
        contribution = await self._tree(repository)
        await repository.delete_user(contribution.user_id)

        assert await _count(db_session, User) == 0
        assert await _count(db_session, Contribution) == 0
        assert await _count(db_session, Transcript) == 0
        assert await _count(db_session, Translation) == 0

    async def test_delete_contribution(self, repository, db_session) -> None:
        contribution = await self._tree(repository)
        await repository.delete_contribution(contribution.id)

        assert await _count(db_session, User) == 1
        assert await _count(db_session, Contribution) == 0
        assert await _count(db_session, Transcript) == 0
        assert await _count(db_session, Translation) == 0

    async def test_delete_missing_user_raises(self, repository: ContributionRepository) -> None:
        with pytest.raises(UserNotFoundError):
            await repository.delete_user("missing")
