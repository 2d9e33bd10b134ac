"""Vendor row operations (owner-scoped)."""

import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import Vendor


class VendorNotFoundError(LookupError):
    """Vendor does not exist or belongs to another user."""

    def __init__(self, vendor_id: uuid.UUID) -> None:
        super().__init__(f"Vendor {vendor_id} not found")
        self.vendor_id = vendor_id


async def add_vendor(
    session: AsyncSession,
    ctx: RequestContext,
    *,
    name: str,
    email: str | None = None,
    phone: str | None = None,
    address: str | None = None,
) -> Vendor:
    """Stage a new vendor and flush so its id is usable. Does not commit.

    No deduplication: an existing vendor with the same name is not reused.
    """
    vendor = Vendor(
        id=uuid.uuid4(),
        user_id=ctx.user_id,
        name=name,
        email=email,
        phone=phone,
        address=address,
    )
    session.add(vendor)
    await session.flush()
    return vendor


async def get_vendor(
    session: AsyncSession, vendor_id: uuid.UUID, ctx: RequestContext
) -> Vendor | None:
    """Fetch one vendor owned by the caller."""
    result = await session.execute(
        select(Vendor).where(Vendor.id == vendor_id, Vendor.user_id == ctx.user_id)
    )
    return result.scalar_one_or_none()


async def list_vendors(
    session: AsyncSession, ctx: RequestContext, search: str | None = None
) -> list[Vendor]:
    """Vendors ordered by name, optionally filtered by a case-insensitive substring."""
    query = select(Vendor).where(Vendor.user_id == ctx.user_id)
    if search:
        query = query.where(func.lower(Vendor.name).contains(search.lower()))
    query = query.order_by(Vendor.name)

    result = await session.execute(query)
    return list(result.scalars().all())


async def count_vendors(session: AsyncSession, ctx: RequestContext) -> int:
    """Number of vendors owned by the caller."""
    count = await session.scalar(
        select(func.count()).select_from(Vendor).where(Vendor.user_id == ctx.user_id)
    )
    return int(count or 0)


async def update_vendor(
    session: AsyncSession, vendor_id: uuid.UUID, ctx: RequestContext, changes: dict[str, Any]
) -> Vendor:
    """Apply ``changes`` to the caller's vendor and commit.

    Raises:
        VendorNotFoundError: If the vendor is missing or not the caller's.
    """
    vendor = await get_vendor(session, vendor_id, ctx)
    if vendor is None:
        raise VendorNotFoundError(vendor_id)

    for field_name, value in changes.items():
        setattr(vendor, field_name, value)
    await session.commit()
    return vendor
