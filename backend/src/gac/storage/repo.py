"""Repository layer for data access."""

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from gac.errors import ConstraintViolationError
from gac.logging_config import get_logger
from gac.storage.models import Job, Referrer, ReferrerType

logger = get_logger(__name__)

DEFAULT_REFERRER_TYPES: list[tuple[str, str]] = [
    ("Client Referral", "Referred by an existing client"),
    ("Website", "Found us through the website"),
    ("Social Media", "Found us through social media"),
    ("Advertising", "Responded to an advertisement"),
    ("Word of Mouth", "Heard about us from someone else"),
    ("Other", "Any other lead source"),
]


class ReferrerStore:
    """Repository for Referrer entities."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, name: str, type_id: int) -> Referrer:
        """Create a referrer. The id is assigned by the database.

        Args:
            name: Referrer name
            type_id: Referrer type ID

        Returns:
            Created referrer
        """
        referrer = Referrer(name=name, type_id=type_id)
        self.session.add(referrer)
        self.session.flush()
        logger.info("referrer_created", referrer_id=referrer.id, name=name, type_id=type_id)
        return referrer

    def get_by_id(self, referrer_id: int) -> Referrer | None:
        """Get referrer by ID."""
        return self.session.get(Referrer, referrer_id)

    def list_all(self, type_id: int | None = None) -> list[Referrer]:
        """List referrers with their type loaded, optionally filtered by type.

        Args:
            type_id: Only return referrers of this type

        Returns:
            Referrers ordered by name
        """
        stmt = select(Referrer).options(joinedload(Referrer.referrer_type))
        if type_id is not None:
            stmt = stmt.where(Referrer.type_id == type_id)
        stmt = stmt.order_by(Referrer.name)
        return list(self.session.scalars(stmt))

    def search(self, keyword: str) -> list[Referrer]:
        """Find referrers whose name or type name contains the keyword.

        Matching is case-insensitive and partial.
        """
        pattern = f"%{keyword}%"
        stmt = (
            select(Referrer)
            .join(Referrer.referrer_type)
            .options(joinedload(Referrer.referrer_type))
            .where(
                or_(
                    Referrer.name.ilike(pattern),
                    ReferrerType.name.ilike(pattern),
                )
            )
            .order_by(Referrer.name)
        )
        return list(self.session.scalars(stmt))

    def update(self, referrer: Referrer, name: str, type_id: int) -> Referrer:
        """Update name and type of an existing referrer."""
        referrer.name = name
        referrer.type_id = type_id
        self.session.flush()
        logger.info("referrer_updated", referrer_id=referrer.id, name=name, type_id=type_id)
        return referrer

    def count_jobs(self, referrer_id: int) -> int:
        """Count jobs that reference this referrer."""
        return self.session.scalar(
            select(func.count(Job.id)).where(Job.referrer_id == referrer_id)
        ) or 0

    def delete(self, referrer: Referrer) -> None:
        """Delete a referrer that no job references.

        Raises:
            ConstraintViolationError: If a job still references the referrer
        """
        if self.count_jobs(referrer.id) > 0:
            logger.info("referrer_delete_blocked", referrer_id=referrer.id)
            raise ConstraintViolationError(
                "Cannot delete this referrer as it is used in one or more jobs"
            )

        try:
            self.session.delete(referrer)
            self.session.flush()
        except IntegrityError as e:
            # A job was attached between the count and the delete
            self.session.rollback()
            logger.warning("referrer_delete_integrity_error", referrer_id=referrer.id, error=str(e.orig))
            raise ConstraintViolationError(
                "Cannot delete this referrer as it is used in one or more jobs"
            ) from e

        logger.info("referrer_deleted", referrer_id=referrer.id)


class ReferrerTypeStore:
    """Repository for ReferrerType entities."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, name: str, description: str = "") -> ReferrerType:
        """Create a referrer type. The id is assigned by the database."""
        referrer_type = ReferrerType(name=name, description=description)
        self.session.add(referrer_type)
        self.session.flush()
        logger.info("referrer_type_created", referrer_type_id=referrer_type.id, name=name)
        return referrer_type

    def get_by_id(self, referrer_type_id: int) -> ReferrerType | None:
        """Get referrer type by ID."""
        return self.session.get(ReferrerType, referrer_type_id)

    def list_all(self) -> list[ReferrerType]:
        """List all referrer types ordered by name."""
        return list(self.session.scalars(select(ReferrerType).order_by(ReferrerType.name)))

    def update(self, referrer_type: ReferrerType, name: str, description: str = "") -> ReferrerType:
        """Update name and description of an existing referrer type."""
        referrer_type.name = name
        referrer_type.description = description
        self.session.flush()
        logger.info("referrer_type_updated", referrer_type_id=referrer_type.id, name=name)
        return referrer_type

    def count_referrers(self, referrer_type_id: int) -> int:
        """Count referrers that use this type."""
        return self.session.scalar(
            select(func.count(Referrer.id)).where(Referrer.type_id == referrer_type_id)
        ) or 0

    def delete(self, referrer_type: ReferrerType) -> None:
        """Delete a referrer type that no referrer uses.

        Raises:
            ConstraintViolationError: If a referrer still uses the type
        """
        if self.count_referrers(referrer_type.id) > 0:
            logger.info("referrer_type_delete_blocked", referrer_type_id=referrer_type.id)
            raise ConstraintViolationError(
                "Cannot delete this referrer type as it is used by one or more referrers"
            )

        try:
            self.session.delete(referrer_type)
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(
                "referrer_type_delete_integrity_error",
                referrer_type_id=referrer_type.id,
                error=str(e.orig),
            )
            raise ConstraintViolationError(
                "Cannot delete this referrer type as it is used by one or more referrers"
            ) from e

        logger.info("referrer_type_deleted", referrer_type_id=referrer_type.id)

    def ensure_defaults(self) -> int:
        """Seed the default referrer types if the table is empty.

        Safe to call on every start-up.

        Returns:
            Number of types created
        """
        existing = self.session.scalar(select(func.count(ReferrerType.id))) or 0
        if existing:
            return 0

        for name, description in DEFAULT_REFERRER_TYPES:
            self.session.add(ReferrerType(name=name, description=description))
        self.session.flush()

        logger.info("default_referrer_types_seeded", count=len(DEFAULT_REFERRER_TYPES))
        return len(DEFAULT_REFERRER_TYPES)
