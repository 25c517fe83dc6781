from __future__ import annotations

from fastapi import APIRouter, Query

from pos_sync.api.deps import RuntimeDep, UoWDep
from pos_sync.api.v1.schemas.catalog import CustomerResponse, ProductResponse
from pos_sync.services import catalog_service

router = APIRouter(prefix="/api/v1/catalog", tags=["catalog"])


@router.get("/products", response_model=list[ProductResponse])
async def list_products(runtime: RuntimeDep, uow: UoWDep) -> list[ProductResponse]:
    products = await catalog_service.list_products(runtime.scope, uow)
    return [ProductResponse.model_validate(p, from_attributes=True) for p in products]


@router.get("/products/barcode/{barcode}", response_model=ProductResponse)
async def product_by_barcode(barcode: str, runtime: RuntimeDep, uow: UoWDep) -> ProductResponse:
    product = await catalog_service.find_product_by_barcode(runtime.scope, barcode, uow)
    return ProductResponse.model_validate(product, from_attributes=True)


@router.get("/categories", response_model=list[str])
async def list_categories(runtime: RuntimeDep, uow: UoWDep) -> list[str]:
    return await catalog_service.list_categories(runtime.scope, uow)


@router.get("/customers", response_model=list[CustomerResponse])
async def list_customers(
    runtime: RuntimeDep,
    uow: UoWDep,
    search: str | None = Query(None, max_length=100),
) -> list[CustomerResponse]:
    customers = await catalog_service.list_customers(runtime.scope, uow, search=search)
    return [CustomerResponse.model_validate(c, from_attributes=True) for c in customers]
