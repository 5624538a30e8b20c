"""Owner-scoped client lookups and mutations."""

from __future__ import annotations

from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.client import Client


def _require_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail="Client name is required")
    return cleaned


async def get_owned_client(db: AsyncSession, *, instructor_id: str, client_id: str) -> Client:
    """Fetch a client only if it belongs to the instructor; 404 otherwise."""
    result = await db.execute(
        select(Client).where(
            Client.id == client_id,
            Client.instructor_id == instructor_id,
        )
    )
    client = result.scalar_one_or_none()
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


async def list_clients(db: AsyncSession, *, instructor_id: str) -> List[Client]:
    result = await db.execute(
        select(Client)
        .where(Client.instructor_id == instructor_id)
        .order_by(Client.created_at.desc())
    )
    return list(result.scalars().all())


async def create_client(
    db: AsyncSession,
    *,
    instructor_id: str,
    name: str,
    phone: Optional[str] = None,
    flags_note: Optional[str] = None,
    note: Optional[str] = None,
) -> Client:
    client = Client(
        instructor_id=instructor_id,
        name=_require_name(name),
        phone=phone,
        flags_note=flags_note,
        note=note,
    )
    db.add(client)
    await db.commit()
    await db.refresh(client)
    return client


async def update_client(
    db: AsyncSession,
    *,
    instructor_id: str,
    client_id: str,
    changes: dict,
) -> Client:
    """Apply non-null field changes to an owned client."""
    client = await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)

    if changes.get("name") is not None:
        client.name = _require_name(changes["name"])
    for field in ("phone", "flags_note", "note"):
        if changes.get(field) is not None:
            setattr(client, field, changes[field])

    await db.commit()
    await db.refresh(client)
    return client
