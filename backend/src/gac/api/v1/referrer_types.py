"""Referrer type API v1 endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from gac.api.responses import success
from gac.api.v1.common import RecordId, is_blank, parse_payload, read_json_body, store_errors
from gac.auth.gate import AccessGate, get_access_gate
from gac.errors import ClientInputError, NotFoundError
from gac.logging_config import get_logger
from gac.schemas import ReferrerTypeDetail, ReferrerTypePayload, ReferrerTypeRecord
from gac.storage.db import get_session
from gac.storage.repo import ReferrerTypeStore

logger = get_logger(__name__)

router = APIRouter(prefix="/referrer-types", tags=["referrer-types"])


def _description(payload: ReferrerTypePayload) -> str:
    return "" if is_blank(payload.referrer_type_desc) else payload.referrer_type_desc


@router.get("")
async def list_referrer_types(
    gate: AccessGate = Depends(get_access_gate),
    session: Session = Depends(get_session),
):
    """List all referrer types."""
    gate.require_authenticated()

    with store_errors("Failed to fetch referrer types"):
        referrer_types = ReferrerTypeStore(session).list_all()

    if not referrer_types:
        return success("No referrer types found", [])

    return success(
        "Referrer types retrieved successfully",
        [ReferrerTypeRecord.from_model(t) for t in referrer_types],
    )


@router.post("", status_code=201)
async def create_referrer_type(
    request: Request,
    gate: AccessGate = Depends(get_access_gate),
    session: Session = Depends(get_session),
):
    """Create a referrer type. Admin only."""
    principal = gate.require_admin("Only administrators can create referrer types")

    payload = parse_payload(ReferrerTypePayload, await read_json_body(request))
    if is_blank(payload.referrer_type_name):
        raise ClientInputError("Referrer type name is required")

    with store_errors("Unable to create referrer type"):
        referrer_type = ReferrerTypeStore(session).create(
            payload.referrer_type_name, _description(payload)
        )
        session.commit()

    logger.info("referrer_type_create_requested", referrer_type_id=referrer_type.id, by=principal.subject)
    return success(
        "Referrer type created successfully",
        ReferrerTypeRecord.from_model(referrer_type),
        status_code=201,
    )


@router.get("/{referrer_type_id}")
async def get_referrer_type(
    referrer_type_id: RecordId,
    gate: AccessGate = Depends(get_access_gate),
    session: Session = Depends(get_session),
):
    """Get a referrer type with the number of referrers using it."""
    gate.require_authenticated()

    store = ReferrerTypeStore(session)
    with store_errors("Error retrieving referrer type"):
        referrer_type = store.get_by_id(referrer_type_id)
        if not referrer_type:
            raise NotFoundError("Referrer type not found")
        referrer_count = store.count_referrers(referrer_type.id)

    return success(
        "Referrer type retrieved successfully",
        ReferrerTypeDetail.from_model(referrer_type, referrer_count),
    )


@router.put("/{referrer_type_id}")
async def update_referrer_type(
    referrer_type_id: RecordId,
    request: Request,
    gate: AccessGate = Depends(get_access_gate),
    session: Session = Depends(get_session),
):
    """Update a referrer type. Admin only."""
    gate.require_admin("Only administrators can update referrer types")

    store = ReferrerTypeStore(session)
    with store_errors("Unable to update referrer type"):
        referrer_type = store.get_by_id(referrer_type_id)
    if not referrer_type:
        raise NotFoundError("Referrer type not found")

    payload = parse_payload(ReferrerTypePayload, await read_json_body(request))
    if is_blank(payload.referrer_type_name):
        raise ClientInputError("Referrer type name is required")

    with store_errors("Unable to update referrer type"):
        referrer_type = store.update(
            referrer_type, payload.referrer_type_name, _description(payload)
        )
        session.commit()

    return success(
        "Referrer type updated successfully",
        ReferrerTypeRecord.from_model(referrer_type),
    )


@router.delete("/{referrer_type_id}")
async def delete_referrer_type(
    referrer_type_id: RecordId,
    gate: AccessGate = Depends(get_access_gate),
    session: Session = Depends(get_session),
):
    """Delete a referrer type no referrer uses. Admin only."""
    gate.require_admin("Only administrators can delete referrer types")

    store = ReferrerTypeStore(session)
    with store_errors("Unable to delete referrer type"):
        referrer_type = store.get_by_id(referrer_type_id)
        if not referrer_type:
            raise NotFoundError("Referrer type not found")
        store.delete(referrer_type)
        session.commit()

    return success("Referrer type deleted successfully")
