"""Shop routes module."""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from api.database import APIDatabaseService
from api.dependencies import find_shop, get_db_service
from api.models import ShopPayload
from catalog.models import Shop

router = APIRouter(prefix="/shops", tags=["Shops"])


@router.post("")
async def create_shop(
    payload: ShopPayload,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    shop = await db_service.create_shop(payload)
    return JSONResponse(content=shop.to_json())


@router.get("")
async def list_shops(
    latitude: Optional[str] = None,
    longitude: Optional[str] = None,
    distance: Optional[str] = None,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """
    List shops.

    - **latitude**, **longitude**: Search origin
    - **distance**: Search radius in meters

    The geospatial filter applies only when all three are given; results
    are then ordered nearest first.
    """
    shops = await db_service.list_shops(latitude, longitude, distance)
    return JSONResponse(content=[shop.to_json() for shop in shops])


@router.get("/{shop_id}")
async def get_shop(shop: Shop = Depends(find_shop)):
    return JSONResponse(content=shop.to_json())


@router.put("/{shop_id}")
async def update_shop(
    payload: ShopPayload,
    shop: Shop = Depends(find_shop),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    updated = await db_service.update_shop(shop, payload)
    return JSONResponse(content=updated.to_json())


@router.delete("/{shop_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shop(
    shop: Shop = Depends(find_shop),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    await db_service.delete_shop(shop)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
