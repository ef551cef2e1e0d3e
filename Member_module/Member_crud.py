from .Member_model import Member
from .Member_schema import (
    MemberCreate, MemberUpdate, missing_required_fields, describe_validation_error
)
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from pydantic import ValidationError
from typing import Any, Dict, List, Optional
import logging

from Login_module.Utils.datetime_utils import day_bounds, to_iso_day, to_utc_isoformat

logger = logging.getLogger(__name__)


def format_member_response(member: Member) -> Dict[str, Any]:
    """Convert Member model to its camelCase wire representation"""
    return {
        "id": member.id,
        "name": member.name,
        "constituency": member.constituency,
        "sessionName": member.session_name,
        "sessionDate": to_utc_isoformat(member.session_date),
        "speechGiven": member.speech_given,
        "timeTaken": member.time_taken,
        "partyName": member.party_name or "",
        "imageUrl": member.image_url or "",
        "partyLogoUrl": member.party_logo_url or "",
        "createdAt": to_utc_isoformat(member.created_at),
        "updatedAt": to_utc_isoformat(member.updated_at),
    }


def parse_member_create(payload: Dict[str, Any]) -> MemberCreate:
    """
    Validate the fields of a new member.
    Raises 400 before anything is written when a required field is missing or invalid.
    """
    missing = missing_required_fields(payload)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Please provide all required fields: {', '.join(missing)}"
        )
    try:
        return MemberCreate.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=describe_validation_error(e)
        )


def parse_member_update(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a partial update.
    Returns column values for the supplied fields only.
    """
    try:
        return MemberUpdate.model_validate(payload).changes()
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=describe_validation_error(e)
        )


def list_members(
    db: Session,
    session_name: Optional[str] = None,
    session_date: Optional[str] = None
) -> List[Member]:
    """
    List members, newest first.
    session_name is an exact match; session_date matches the whole UTC calendar day.
    """
    query = db.query(Member)

    if session_name:
        query = query.filter(Member.session_name == session_name)

    if session_date:
        try:
            start, end = day_bounds(session_date)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="sessionDate filter must be a valid date (YYYY-MM-DD)"
            )
        query = query.filter(Member.session_date >= start)
        if end is not None:
            query = query.filter(Member.session_date < end)

    return query.order_by(Member.created_at.desc(), Member.id.desc()).all()


def get_filter_options(db: Session) -> Dict[str, List[str]]:
    """Distinct session names (ascending) and session days (descending)."""
    session_names = [row[0] for row in db.query(Member.session_name).distinct().all()]
    session_dates = {
        to_iso_day(row[0]) for row in db.query(Member.session_date).distinct().all()
        if row[0] is not None
    }
    return {
        "sessionNames": sorted(session_names),
        "sessionDates": sorted(session_dates, reverse=True),
    }


def get_member(db: Session, member_id: int) -> Optional[Member]:
    return db.query(Member).filter(Member.id == member_id).first()


def create_member(db: Session, data: MemberCreate) -> Member:
    member = Member(
        name=data.name,
        constituency=data.constituency,
        session_name=data.session_name,
        session_date=data.session_date,
        speech_given=data.speech_given,
        time_taken=data.time_taken,
        party_name=data.party_name,
        image_url=data.image_url,
        party_logo_url=data.party_logo_url,
    )
    db.add(member)
    db.commit()
    db.refresh(member)
    logger.info(f"Member {member.id} created")
    return member


def update_member(db: Session, member: Member, changes: Dict[str, Any]) -> Member:
    """Replace only the supplied columns, leaving every other field unchanged."""
    for field, value in changes.items():
        setattr(member, field, value)
    db.commit()
    db.refresh(member)
    logger.info(f"Member {member.id} updated: {', '.join(sorted(changes)) or 'no fields'}")
    return member


def delete_member(db: Session, member: Member) -> None:
    member_id = member.id
    db.delete(member)
    db.commit()
    logger.info(f"Member {member_id} deleted")
