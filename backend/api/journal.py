"""Journal API — CRUD, list selectors, tags, bulk delete and the calculator preview."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlmodel import Session, col, select

from backend.database import get_session
from backend.models.journal_entry import JournalEntry
from backend.models.user import User
from backend.schemas.journal import (
    BulkDeleteRequest,
    CalculateRequest,
    CalculateResponse,
    EntryCreate,
    EntryRead,
    EntryUpdate,
    TagRequest,
)
from backend.services import calculator
from backend.services.journal_filter import JournalQuery, select_entries
from backend.services.trade_stats import group_by_date
from backend.api.deps import get_current_user, get_owned_entry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/journal", tags=["journal"])

# Changing any of these re-derives pnl unless the update sets it
_TRADE_PRICE_FIELDS = ("entry_price", "exit_price", "quantity", "fees", "direction")


def _fill_pnl(payload: dict) -> dict:
    """Compute realized pnl from prices when the trade has none."""
    if payload.get("type", "trade") != "trade" or payload.get("pnl") is not None:
        return payload
    pnl = calculator.compute_realized_pnl(
        payload.get("entry_price"),
        payload.get("exit_price"),
        payload.get("quantity"),
        payload.get("fees"),
        payload.get("direction") or "long",
    )
    if pnl is not None:
        payload["pnl"] = pnl
    return payload


def _to_read(entry: JournalEntry) -> EntryRead:
    read = EntryRead.model_validate(entry)
    read.risk_reward_ratio = calculator.compute_risk_reward(
        entry.entry_price, entry.stop_loss, entry.take_profit
    )
    return read


def _user_entries(session: Session, user: User, entry_type: str | None = None) -> list[JournalEntry]:
    stmt = select(JournalEntry).where(JournalEntry.user_id == user.id)
    if entry_type is not None:
        stmt = stmt.where(JournalEntry.type == entry_type)
    return list(session.exec(stmt).all())


@router.get("", response_model=list[EntryRead])
def list_entries(
    search: str = "",
    filter_mode: str = "all",
    sort_mode: str = "newest",
    type: str | None = None,
    limit: int = Query(default=500, ge=1, le=5000),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    try:
        query = JournalQuery(search=search, filter_mode=filter_mode, sort_mode=sort_mode)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    entries = select_entries(_user_entries(session, user, type), query)
    return [_to_read(e) for e in entries[offset:offset + limit]]


@router.get("/groups")
def list_date_groups(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Trades grouped into TODAY / YESTERDAY / THIS_WEEK / OLDER, newest first."""
    entries = select_entries(_user_entries(session, user, "trade"), JournalQuery())
    today = datetime.now(timezone.utc).date()
    return [
        {
            "label": g.label,
            "total_pnl": round(g.total_pnl, 2),
            "wins": g.wins,
            "losses": g.losses,
            "entries": [_to_read(e) for e in g.entries],
        }
        for g in group_by_date(entries, today)
    ]


@router.post("/calculate", response_model=CalculateResponse)
def calculate(data: CalculateRequest, user: User = Depends(get_current_user)):
    """Risk:reward and realized pnl for an in-progress trade form."""
    metrics = calculator.derive_metrics(**data.model_dump())
    return CalculateResponse(
        risk_reward_ratio=metrics.risk_reward_ratio,
        realized_pnl=metrics.realized_pnl,
    )


@router.post("", response_model=EntryRead, status_code=201)
def create_entry(
    data: EntryCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    payload = _fill_pnl(data.model_dump(exclude_none=True))
    entry = JournalEntry(**payload, user_id=user.id)
    session.add(entry)
    session.commit()
    session.refresh(entry)
    logger.info(f"Created {entry.type} entry {entry.id} for '{user.username}'")
    return _to_read(entry)


@router.post("/bulk-delete")
def bulk_delete(
    body: BulkDeleteRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    entries = session.exec(
        select(JournalEntry)
        .where(JournalEntry.user_id == user.id)
        .where(col(JournalEntry.id).in_(body.ids))
    ).all()
    for entry in entries:
        session.delete(entry)
    session.commit()
    logger.info(f"Bulk deleted {len(entries)} entries for '{user.username}'")
    return {"deleted": len(entries)}


@router.get("/{entry_id}", response_model=EntryRead)
def get_entry(
    entry_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return _to_read(get_owned_entry(session, entry_id, user))


@router.put("/{entry_id}", response_model=EntryRead)
def update_entry(
    entry_id: int,
    data: EntryUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    entry = get_owned_entry(session, entry_id, user)
    update_data = data.model_dump(exclude_unset=True)

    # Validate full merged entry so partial updates cannot bypass cross-field rules.
    merged = {**entry.model_dump(exclude={"id", "user_id", "updated_at"}), **update_data}
    try:
        validated = EntryCreate.model_validate(merged)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        raise HTTPException(status_code=422, detail=errors)

    clean = validated.model_dump()
    # Re-derive pnl when prices changed and the caller did not set it explicitly.
    # Without a computable value (no exit yet) the stored pnl stays.
    if "pnl" not in update_data and any(k in update_data for k in _TRADE_PRICE_FIELDS):
        pnl = _fill_pnl({**clean, "pnl": None}).get("pnl")
        if pnl is not None:
            clean["pnl"] = pnl
            update_data["pnl"] = pnl

    for key in update_data:
        setattr(entry, key, clean[key])
    entry.updated_at = datetime.now(timezone.utc)

    session.add(entry)
    session.commit()
    session.refresh(entry)
    logger.info(f"Updated entry {entry.id} for '{user.username}'")
    return _to_read(entry)


@router.delete("/{entry_id}", status_code=204)
def delete_entry(
    entry_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    entry = get_owned_entry(session, entry_id, user)
    session.delete(entry)
    session.commit()
    logger.info(f"Deleted entry {entry_id} for '{user.username}'")


@router.post("/{entry_id}/favorite", response_model=EntryRead)
def toggle_favorite(
    entry_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    entry = get_owned_entry(session, entry_id, user)
    entry.favorite = not entry.favorite
    entry.updated_at = datetime.now(timezone.utc)
    session.add(entry)
    session.commit()
    session.refresh(entry)
    return _to_read(entry)


@router.post("/{entry_id}/tags", response_model=EntryRead)
def add_tag(
    entry_id: int,
    body: TagRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    entry = get_owned_entry(session, entry_id, user)
    tag = body.tag.strip().lstrip("#")
    if tag and tag not in entry.tags:
        # Reassign so the JSON column is flagged dirty
        entry.tags = [*entry.tags, tag]
        entry.updated_at = datetime.now(timezone.utc)
        session.add(entry)
        session.commit()
        session.refresh(entry)
    return _to_read(entry)


@router.delete("/{entry_id}/tags/{tag}", response_model=EntryRead)
def remove_tag(
    entry_id: int,
    tag: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    entry = get_owned_entry(session, entry_id, user)
    if tag in entry.tags:
        entry.tags = [t for t in entry.tags if t != tag]
        entry.updated_at = datetime.now(timezone.utc)
        session.add(entry)
        session.commit()
        session.refresh(entry)
    return _to_read(entry)
