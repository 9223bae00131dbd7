"""Referrer API v1 endpoints."""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from gac.api.responses import success
from gac.api.v1.common import (
    MAX_ID,
    RecordId,
    is_blank,
    parse_payload,
    read_json_body,
    store_errors,
)
from gac.auth.gate import AccessGate, get_access_gate
from gac.errors import ClientInputError, MethodNotAllowedError, NotFoundError
from gac.logging_config import get_logger
from gac.schemas import (
    ReferrerDetail,
    ReferrerListItem,
    ReferrerPayload,
    ReferrerRecord,
    ReferrerSearchResult,
)
from gac.storage.db import get_session
from gac.storage.repo import ReferrerStore

logger = get_logger(__name__)

router = APIRouter(prefix="/referrers", tags=["referrers"])


@router.post("", status_code=201)
async def create_referrer(
    request: Request,
    gate: AccessGate = Depends(get_access_gate),
    session: Session = Depends(get_session),
):
    """Create a referrer. Staff or admin."""
    principal = gate.require_staff("Only staff members can create referrers")

    payload = parse_payload(ReferrerPayload, await read_json_body(request))
    if is_blank(payload.referrer_name) or is_blank(payload.referrer_type):
        raise ClientInputError("Referrer name and type are required")

    with store_errors("Unable to create referrer"):
        referrer = ReferrerStore(session).create(payload.referrer_name, payload.referrer_type)
        session.commit()

    logger.info("referrer_create_requested", referrer_id=referrer.id, by=principal.subject)
    return success(
        "Referrer created successfully",
        ReferrerRecord.from_model(referrer),
        status_code=201,
    )


@router.get("")
async def list_referrers(
    type_id: int | None = Query(default=None, alias="type", ge=1, le=MAX_ID),
    gate: AccessGate = Depends(get_access_gate),
    session: Session = Depends(get_session),
):
    """List referrers, optionally filtered by type."""
    gate.require_authenticated()

    with store_errors("Failed to fetch referrers"):
        referrers = ReferrerStore(session).list_all(type_id=type_id)

    if not referrers:
        return success("No referrers found", [])

    return success(
        "Referrers retrieved successfully",
        [ReferrerListItem.from_model(r) for r in referrers],
    )


@router.get("/search")
async def search_referrers(
    q: str = Query(default=""),
    gate: AccessGate = Depends(get_access_gate),
    session: Session = Depends(get_session),
):
    """Search referrers by name or type name."""
    # Keyword first: an empty search is a bad request for every caller
    if is_blank(q):
        raise ClientInputError("Search keyword is required")

    gate.require_authenticated()

    keyword = q.strip()
    with store_errors("Error searching referrers"):
        referrers = ReferrerStore(session).search(keyword)

    if not referrers:
        return success("No referrers found for the search criteria", [])

    return success(
        "Referrers found",
        [ReferrerSearchResult.from_model(r) for r in referrers],
    )


@router.api_route("/search", methods=["POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def search_method_not_allowed():
    """Keep writes to /search from being routed to /{referrer_id}."""
    raise MethodNotAllowedError("Method not allowed")


@router.get("/{referrer_id}")
async def get_referrer(
    referrer_id: RecordId,
    gate: AccessGate = Depends(get_access_gate),
    session: Session = Depends(get_session),
):
    """Get a referrer with the number of jobs using it."""
    gate.require_authenticated()

    store = ReferrerStore(session)
    with store_errors("Error retrieving referrer"):
        referrer = store.get_by_id(referrer_id)
        if not referrer:
            raise NotFoundError("Referrer not found")
        job_count = store.count_jobs(referrer.id)

    return success(
        "Referrer retrieved successfully",
        ReferrerDetail.from_model(referrer, job_count),
    )


@router.put("/{referrer_id}")
async def update_referrer(
    referrer_id: RecordId,
    request: Request,
    gate: AccessGate = Depends(get_access_gate),
    session: Session = Depends(get_session),
):
    """Update a referrer's name and type. Staff or admin."""
    gate.require_staff("Only staff members can update referrers")

    store = ReferrerStore(session)
    with store_errors("Unable to update referrer"):
        referrer = store.get_by_id(referrer_id)
    if not referrer:
        raise NotFoundError("Referrer not found")

    data = await read_json_body(request)
    logger.debug("referrer_update_body", referrer_id=referrer_id, fields=sorted(data))

    payload = parse_payload(ReferrerPayload, data)
    if is_blank(payload.referrer_name):
        raise ClientInputError("Referrer name is required")
    if is_blank(payload.referrer_type):
        raise ClientInputError("Referrer type is required")

    with store_errors("Unable to update referrer"):
        referrer = store.update(referrer, payload.referrer_name, payload.referrer_type)
        session.commit()

    return success("Referrer updated successfully", ReferrerRecord.from_model(referrer))


@router.delete("/{referrer_id}")
async def delete_referrer(
    referrer_id: RecordId,
    gate: AccessGate = Depends(get_access_gate),
    session: Session = Depends(get_session),
):
    """Delete a referrer no job uses. Admin only."""
    gate.require_admin("Only administrators can delete referrers")

    store = ReferrerStore(session)
    with store_errors("Unable to delete referrer"):
        referrer = store.get_by_id(referrer_id)
        if not referrer:
            raise NotFoundError("Referrer not found")
        store.delete(referrer)
        session.commit()

    return success("Referrer deleted successfully")
