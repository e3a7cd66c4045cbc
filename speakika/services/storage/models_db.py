"""
SQLAlchemy ORM models for the Speak Ika schema.

Tables: ``user``, ``contribution``, ``transcript``, ``translation``, each
namespaced with ``speak-ika_`` so the app can share one database.
"""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from speakika.core.models import ContributionStatus, EmotionLabel, SentimentLabel
from speakika.services.storage.database import Base

TABLE_PREFIX = "speak-ika_"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return str(uuid4())


def _label_enum(enum_cls, name: str) -> SAEnum:
    """VARCHAR column plus CHECK constraint holding the enum's values."""
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=True,
        length=16,
        values_callable=lambda members: [m.value for m in members],
    )


class User(Base):
    """An identity that owns contributions."""

    __tablename__ = f"{TABLE_PREFIX}user"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str | None] = mapped_column(String(320), unique=True, nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    contributions: Mapped[list["Contribution"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"


class Contribution(Base):
    """A submitted audio item awaiting or having undergone transcription."""

    __tablename__ = f"{TABLE_PREFIX}contribution"
    __table_args__ = (
        Index("contribution_user_idx", "user_id"),
        Index("contribution_status_idx", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey(User.id, ondelete="CASCADE"))
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_language_code: Mapped[str] = mapped_column(String(8))
    audio_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ContributionStatus] = mapped_column(
        _label_enum(ContributionStatus, "contribution_status"),
        default=ContributionStatus.pending,
    )
    # "metadata" is reserved on declarative classes; the column keeps its name
    metadata_text: Mapped[str | None] = mapped_column("metadata", Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    user: Mapped["User"] = relationship(back_populates="contributions")
    transcripts: Mapped[list["Transcript"]] = relationship(
        back_populates="contribution",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Contribution id={self.id} status={self.status!r}>"


class Transcript(Base):
    """Text recognized from a contribution in one language."""

    __tablename__ = f"{TABLE_PREFIX}transcript"
    __table_args__ = (
        Index("transcript_contribution_idx", "contribution_id"),
        UniqueConstraint("contribution_id", "language_code", name="transcript_unique_language"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    contribution_id: Mapped[str] = mapped_column(
        ForeignKey(Contribution.id, ondelete="CASCADE")
    )
    language_code: Mapped[str] = mapped_column(String(8))
    content: Mapped[str] = mapped_column(Text)
    confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    metadata_text: Mapped[str | None] = mapped_column("metadata", Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    contribution: Mapped["Contribution"] = relationship(back_populates="transcripts")
    translations: Mapped[list["Translation"]] = relationship(
        back_populates="transcript",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Transcript id={self.id} contribution={self.contribution_id} lang={self.language_code}>"


class Translation(Base):
    """Transcript text rendered in a target language, optionally annotated."""

    __tablename__ = f"{TABLE_PREFIX}translation"
    __table_args__ = (
        Index("translation_transcript_idx", "transcript_id"),
        UniqueConstraint(
            "transcript_id", "target_language_code", name="translation_unique_language"
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    transcript_id: Mapped[str] = mapped_column(ForeignKey(Transcript.id, ondelete="CASCADE"))
    target_language_code: Mapped[str] = mapped_column(String(8))
    content: Mapped[str] = mapped_column(Text)
    sentiment: Mapped[SentimentLabel | None] = mapped_column(
        _label_enum(SentimentLabel, "sentiment_label"), nullable=True
    )
    sentiment_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    emotion: Mapped[EmotionLabel | None] = mapped_column(
        _label_enum(EmotionLabel, "emotion_label"), nullable=True
    )
    emotion_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    transcript: Mapped["Transcript"] = relationship(back_populates="translations")

    def __repr__(self) -> str:
        return f"<Translation id={self.id} transcript={self.transcript_id} lang={self.target_language_code}>"
