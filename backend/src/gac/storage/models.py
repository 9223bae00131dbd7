"""Database models for referrers, referrer types and the jobs that use them.

Column names follow the legacy GAC schema; attribute names are the ones the
Python code uses.
"""

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class ReferrerType(Base):
    """Category grouping referrers."""

    __tablename__ = "referrer_type"

    id: Mapped[int] = mapped_column(
        "idreferrer_type", Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column("referrer_type_name", String(100), nullable=False)
    description: Mapped[str] = mapped_column(
        "referrer_type_desc", Text, nullable=False, default=""
    )

    referrers: Mapped[list["Referrer"]] = relationship(
        "Referrer", back_populates="referrer_type", passive_deletes="all"
    )

    def __repr__(self) -> str:
        return f"<ReferrerType(id={self.id}, name='{self.name}')>"


class Referrer(Base):
    """Lead source linked to exactly one referrer type."""

    __tablename__ = "referrer"

    id: Mapped[int] = mapped_column("idreferrer", Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column("referrer_name", String(255), nullable=False, index=True)
    type_id: Mapped[int] = mapped_column(
        "referrer_type",
        Integer,
        ForeignKey("referrer_type.idreferrer_type"),
        nullable=False,
        index=True,
    )

    referrer_type: Mapped[ReferrerType] = relationship(
        "ReferrerType", back_populates="referrers"
    )
    # Never null out job_referrer on delete
    jobs: Mapped[list["Job"]] = relationship(
        "Job", back_populates="referrer", passive_deletes="all"
    )

    def __repr__(self) -> str:
        return f"<Referrer(id={self.id}, name='{self.name}', type_id={self.type_id})>"


class Job(Base):
    """Client job. Only the columns the referrer endpoints depend on."""

    __tablename__ = "job"

    id: Mapped[int] = mapped_column("idjob", Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column("job_title", String(255), nullable=False, default="")
    referrer_id: Mapped[int | None] = mapped_column(
        "job_referrer",
        Integer,
        ForeignKey("referrer.idreferrer"),
        nullable=True,
        index=True,
    )

    referrer: Mapped[Referrer | None] = relationship("Referrer", back_populates="jobs")

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, referrer_id={self.referrer_id})>"
