from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from clinic.application.add_product import AddProductHandler
from clinic.application.clock import Clock
from clinic.application.delete_product import DeleteProductHandler
from clinic.application.recommend_products import RecommendProductsHandler
from clinic.application.show_products import ListProductsHandler, ShowProductHandler
from clinic.application.stock_alerts import StockAlertsHandler
from clinic.application.update_product import UpdateProductHandler
from clinic.domain.model.product import EXPIRY_WARNING_DAYS
from clinic.infrastructure.api.dependencies import RowId, camelize, get_clock, get_uow
from clinic.infrastructure.api.schemas import ProductIn, ProductUpdateIn

router = APIRouter(prefix="/api/products", tags=["products"])

# Fixed paths are declared before /{product_id}.


@router.get("/alerts/low-stock")
def low_stock(uow=Depends(get_uow), clock: Clock = Depends(get_clock)):
    return camelize(StockAlertsHandler(uow, clock).handle().low_stock)


@router.get("/alerts/expiring")
def expiring(days: int = EXPIRY_WARNING_DAYS, uow=Depends(get_uow), clock: Clock = Depends(get_clock)):
    return camelize(StockAlertsHandler(uow, clock).handle(expiry_days=days).expiring)


@router.get("/recommendations")
def recommendations(
    od_sph: Optional[str] = Query(None, alias="odSph"),
    os_sph: Optional[str] = Query(None, alias="osSph"),
    od_cyl: Optional[str] = Query(None, alias="odCyl"),
    os_cyl: Optional[str] = Query(None, alias="osCyl"),
    category: Optional[str] = None,
    uow=Depends(get_uow),
):
    products = RecommendProductsHandler(uow).handle(
        od_sph, os_sph, od_cyl, os_cyl, category=category
    )
    return camelize(products)


@router.get("")
def list_products(category: Optional[str] = None, q: Optional[str] = None, uow=Depends(get_uow)):
    return camelize(ListProductsHandler(uow).handle(category=category, search=q))


@router.get("/{product_id}")
def get_product(product_id: RowId, uow=Depends(get_uow)):
    return camelize(ShowProductHandler(uow).handle(product_id))


@router.post("", status_code=201)
def create_product(payload: ProductIn, uow=Depends(get_uow), clock: Clock = Depends(get_clock)):
    dto = AddProductHandler(uow, clock).handle(**payload.model_dump())
    return camelize(dto)


@router.put("/{product_id}")
def update_product(product_id: RowId, payload: ProductUpdateIn, uow=Depends(get_uow)):
    changes = payload.model_dump(exclude_unset=True)
    return camelize(UpdateProductHandler(uow).handle(product_id, changes))


@router.delete("/{product_id}")
def delete_product(product_id: RowId, uow=Depends(get_uow)):
    DeleteProductHandler(uow).handle(product_id)
    return {"success": True}
