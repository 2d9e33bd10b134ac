"""Committed record endpoints - GET /invoices, GET /contracts."""

from typing import Annotated

from fastapi import APIRouter, Query

from backend.app.api.deps import ContextDep, SessionDep
from backend.app.db.records import list_contracts, list_invoices, to_contract_view, to_invoice_view
from backend.app.models.records import ContractView, InvoiceView

router = APIRouter(tags=["records"])


@router.get("/invoices", response_model=list[InvoiceView])
async def get_invoices(
    ctx: ContextDep,
    session: SessionDep,
    search: Annotated[str | None, Query(max_length=200)] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[InvoiceView]:
    """Invoices newest first, joined with vendor name and source file."""
    records = await list_invoices(session, ctx, search=search, limit=limit, offset=offset)
    return [to_invoice_view(r) for r in records]


@router.get("/contracts", response_model=list[ContractView])
async def get_contracts(
    ctx: ContextDep,
    session: SessionDep,
    search: Annotated[str | None, Query(max_length=200)] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[ContractView]:
    """Contracts newest first, joined with vendor name and source file."""
    records = await list_contracts(session, ctx, search=search, limit=limit, offset=offset)
    return [to_contract_view(r) for r in records]
