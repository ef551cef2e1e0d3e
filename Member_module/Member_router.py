from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile
from typing import Any, Dict, List, Optional, Tuple
import json
import logging

from deps import get_db
from .Member_schema import MemberFilterOptions
from .Member_crud import (
    format_member_response, parse_member_create, parse_member_update,
    list_members, get_filter_options, get_member, create_member,
    update_member, delete_member
)
from .Member_upload_service import MemberImageStorageService, get_member_image_storage_service
from Login_module.Utils.auth_user import AdminIdentity, get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/members", tags=["Members"])

# Multipart part names of the two optional attachments
IMAGE_FIELD = "image"
PARTY_LOGO_FIELD = "partyLogo"

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _server_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Error while {action}: {e}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Server error"
    )


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Member not found"
    )


async def _read_member_payload(
    request: Request
) -> Tuple[Dict[str, Any], Optional[UploadFile], Optional[UploadFile]]:
    """
    Read member fields from a JSON or form body.
    Returns (fields, image upload, party logo upload).
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        fields: Dict[str, Any] = {}
        files: Dict[str, UploadFile] = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                files[key] = value
            else:
                fields[key] = value
        return fields, files.get(IMAGE_FIELD), files.get(PARTY_LOGO_FIELD)

    body = await request.body()
    if not body.strip():
        return {}, None, None
    try:
        payload = json.loads(body)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be valid JSON"
        )
    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be a JSON object"
        )
    return payload, None, None


async def _store_attachment(
    storage: MemberImageStorageService,
    upload: Optional[UploadFile],
    kind: str
) -> Optional[str]:
    """Store an optional upload; returns its URL or None when absent or skipped."""
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    return storage.save_image(upload.filename, content, kind=kind)


@router.get("")
def get_members_api(
    sessionName: Optional[str] = Query(None, description="Exact session name"),
    sessionDate: Optional[str] = Query(None, description="Session day (YYYY-MM-DD)"),
    db: Session = Depends(get_db)
) -> List[Dict[str, Any]]:
    """List members, newest first, optionally filtered by session name and day."""
    try:
        members = list_members(db, session_name=sessionName, session_date=sessionDate)
    except SQLAlchemyError as e:
        raise _server_error("listing members", e)
    return [format_member_response(m) for m in members]


@router.get("/filters", response_model=MemberFilterOptions)
def get_member_filters_api(db: Session = Depends(get_db)):
    """Distinct session names and session days used to populate filter dropdowns."""
    try:
        return get_filter_options(db)
    except SQLAlchemyError as e:
        raise _server_error("loading filter options", e)


@router.get("/{member_id}")
def get_member_api(member_id: int, db: Session = Depends(get_db)) -> Dict[str, Any]:
    try:
        member = get_member(db, member_id)
    except SQLAlchemyError as e:
        raise _server_error(f"loading member {member_id}", e)
    if not member:
        raise _not_found()
    return format_member_response(member)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_member_api(
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
    storage: MemberImageStorageService = Depends(get_member_image_storage_service)
) -> Dict[str, Any]:
    """
    Create a member (admin only).
    Accepts JSON, or multipart form data when a photo / party logo is attached.
    """
    fields, image, party_logo = await _read_member_payload(request)
    data = parse_member_create(fields)

    stored_urls = []
    image_url = await _store_attachment(storage, image, "image")
    if image_url:
        data.image_url = image_url
        stored_urls.append(image_url)
    party_logo_url = await _store_attachment(storage, party_logo, "party logo")
    if party_logo_url:
        data.party_logo_url = party_logo_url
        stored_urls.append(party_logo_url)

    try:
        member = create_member(db, data)
    except SQLAlchemyError as e:
        db.rollback()
        for url in stored_urls:
            storage.delete_image(url)
        raise _server_error("creating member", e)

    logger.info(f"Admin {admin.id} created member {member.id}")
    return format_member_response(member)


@router.put("/{member_id}")
async def update_member_api(
    member_id: int,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
    storage: MemberImageStorageService = Depends(get_member_image_storage_service)
) -> Dict[str, Any]:
    """
    Update a member (admin only).
    Only the supplied fields are replaced; every other field keeps its value.
    """
    try:
        member = get_member(db, member_id)
    except SQLAlchemyError as e:
        raise _server_error(f"loading member {member_id}", e)
    if not member:
        raise _not_found()

    fields, image, party_logo = await _read_member_payload(request)
    changes = parse_member_update(fields)

    stored_urls = []
    image_url = await _store_attachment(storage, image, "image")
    if image_url:
        changes["image_url"] = image_url
        stored_urls.append(image_url)
    party_logo_url = await _store_attachment(storage, party_logo, "party logo")
    if party_logo_url:
        changes["party_logo_url"] = party_logo_url
        stored_urls.append(party_logo_url)

    previous_urls = {
        "image_url": member.image_url,
        "party_logo_url": member.party_logo_url,
    }

    try:
        member = update_member(db, member, changes)
    except SQLAlchemyError as e:
        db.rollback()
        for url in stored_urls:
            storage.delete_image(url)
        raise _server_error(f"updating member {member_id}", e)

    # Remove files that are no longer referenced
    for field, old_url in previous_urls.items():
        if field in changes and changes[field] != old_url:
            storage.delete_image(old_url)

    logger.info(f"Admin {admin.id} updated member {member_id}")
    return format_member_response(member)


@router.delete("/{member_id}")
def delete_member_api(
    member_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
    storage: MemberImageStorageService = Depends(get_member_image_storage_service)
) -> Dict[str, str]:
    """Delete a member (admin only) together with its locally stored images."""
    try:
        member = get_member(db, member_id)
        if not member:
            raise _not_found()
        attachments = [member.image_url, member.party_logo_url]
        delete_member(db, member)
    except SQLAlchemyError as e:
        db.rollback()
        raise _server_error(f"deleting member {member_id}", e)

    for url in attachments:
        storage.delete_image(url)

    logger.info(f"Admin {admin.id} deleted member {member_id}")
    return {"message": "Member deleted successfully"}
