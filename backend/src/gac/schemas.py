"""Request payloads and response records for the referrer endpoints.

Records map ORM rows to the wire format field by field; the field names are
the ones the GAC frontend already consumes.
"""

from pydantic import BaseModel, ConfigDict

from gac.storage.models import Referrer, ReferrerType


# ==================== REQUESTS ====================


class ReferrerPayload(BaseModel):
    """Create/update referrer body."""
    model_config = ConfigDict(extra="ignore")

    referrer_name: str | None = None
    referrer_type: int | None = None


class ReferrerTypePayload(BaseModel):
    """Create/update referrer type body."""
    model_config = ConfigDict(extra="ignore")

    referrer_type_name: str | None = None
    referrer_type_desc: str | None = None


# ==================== REFERRERS ====================


class ReferrerRecord(BaseModel):
    """Referrer as returned by create and update."""
    idreferrer: int
    referrer_name: str
    referrer_type: int

    @classmethod
    def from_model(cls, referrer: Referrer) -> "ReferrerRecord":
        return cls(
            idreferrer=referrer.id,
            referrer_name=referrer.name,
            referrer_type=referrer.type_id,
        )


class ReferrerListItem(ReferrerRecord):
    """Referrer joined with its type, as returned by list."""
    referrer_type_name: str | None = None
    referrer_type_desc: str | None = None

    @classmethod
    def from_model(cls, referrer: Referrer) -> "ReferrerListItem":
        referrer_type = referrer.referrer_type
        return cls(
            idreferrer=referrer.id,
            referrer_name=referrer.name,
            referrer_type=referrer.type_id,
            referrer_type_name=referrer_type.name if referrer_type else None,
            referrer_type_desc=referrer_type.description if referrer_type else None,
        )


class ReferrerSearchResult(ReferrerRecord):
    """Referrer with its type name, as returned by search."""
    referrer_type_name: str | None = None

    @classmethod
    def from_model(cls, referrer: Referrer) -> "ReferrerSearchResult":
        return cls(
            idreferrer=referrer.id,
            referrer_name=referrer.name,
            referrer_type=referrer.type_id,
            referrer_type_name=referrer.referrer_type.name if referrer.referrer_type else None,
        )


class ReferrerDetail(ReferrerRecord):
    """Single referrer with the number of jobs using it."""
    job_count: int

    @classmethod
    def from_model(cls, referrer: Referrer, job_count: int) -> "ReferrerDetail":
        return cls(
            idreferrer=referrer.id,
            referrer_name=referrer.name,
            referrer_type=referrer.type_id,
            job_count=job_count,
        )


# ==================== REFERRER TYPES ====================


class ReferrerTypeRecord(BaseModel):
    """Referrer type as returned by create, update and list."""
    idreferrer_type: int
    referrer_type_name: str
    referrer_type_desc: str

    @classmethod
    def from_model(cls, referrer_type: ReferrerType) -> "ReferrerTypeRecord":
        return cls(
            idreferrer_type=referrer_type.id,
            referrer_type_name=referrer_type.name,
            referrer_type_desc=referrer_type.description or "",
        )


class ReferrerTypeDetail(ReferrerTypeRecord):
    """Single referrer type with the number of referrers using it."""
    referrer_count: int

    @classmethod
    def from_model(cls, referrer_type: ReferrerType, referrer_count: int) -> "ReferrerTypeDetail":
        return cls(
            idreferrer_type=referrer_type.id,
            referrer_type_name=referrer_type.name,
            referrer_type_desc=referrer_type.description or "",
            referrer_count=referrer_count,
        )
