"""Vendor endpoints - GET/POST /vendors, PATCH /vendors/{id}."""

import uuid
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from backend.app.api.deps import ContextDep, SessionDep
from backend.app.db.vendors import VendorNotFoundError, add_vendor, list_vendors, update_vendor
from backend.app.models.records import VendorCreate, VendorUpdate, VendorView

router = APIRouter(prefix="/vendors", tags=["vendors"])


@router.get("", response_model=list[VendorView])
async def get_vendors(
    ctx: ContextDep,
    session: SessionDep,
    search: Annotated[str | None, Query(max_length=200)] = None,
) -> list[VendorView]:
    """Caller's vendors ordered by name."""
    vendors = await list_vendors(session, ctx, search=search)
    return [VendorView.model_validate(v) for v in vendors]


@router.post("", response_model=VendorView, status_code=status.HTTP_201_CREATED)
async def create_vendor(
    request: VendorCreate,
    ctx: ContextDep,
    session: SessionDep,
) -> VendorView:
    """Add a vendor."""
    vendor = await add_vendor(
        session,
        ctx,
        name=request.name.strip(),
        email=request.email,
        phone=request.phone,
        address=request.address,
    )
    await session.commit()
    return VendorView.model_validate(vendor)


@router.patch("/{vendor_id}", response_model=VendorView)
async def patch_vendor(
    vendor_id: uuid.UUID,
    request: VendorUpdate,
    ctx: ContextDep,
    session: SessionDep,
) -> VendorView:
    """Update the supplied vendor fields.

    Raises:
        HTTPException: 404 if the vendor is missing or not the caller's
    """
    try:
        vendor = await update_vendor(session, vendor_id, ctx, request.model_dump(exclude_unset=True))
    except VendorNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return VendorView.model_validate(vendor)
