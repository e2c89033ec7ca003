"""Publisher and publisher address routes module."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from api.database import APIDatabaseService
from api.dependencies import find_address, find_publisher, get_db_service, get_multi_value
from api.models import AddressPayload, PublisherPayload, PublisherUpdatePayload
from catalog.models import Address, Publisher

router = APIRouter(prefix="/publishers", tags=["Publishers"])


@router.post("")
async def create_publisher(
    payload: PublisherPayload,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    publisher = await db_service.create_publisher(payload)
    return JSONResponse(content=publisher.to_json())


@router.get("")
async def list_publishers(
    request: Request,
    offset: Optional[str] = None,
    limit: Optional[str] = None,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """
    List publishers that have books, most books first.

    - **bookFormat**: Only count books of this format, repeat for several formats
    - **offset**: Number of publishers to skip (default 0)
    - **limit**: Maximum number of publishers (default 30)

    Each publisher carries a `numberOfBooks` field.
    """
    publishers = await db_service.list_publishers(
        book_formats=get_multi_value(request, "bookFormat"),
        offset=offset,
        limit=limit
    )
    return JSONResponse(content=publishers)


@router.get("/{publisher_id}")
async def get_publisher(publisher: Publisher = Depends(find_publisher)):
    return JSONResponse(content=publisher.to_json())


@router.put("/{publisher_id}")
async def update_publisher(
    payload: PublisherUpdatePayload,
    publisher: Publisher = Depends(find_publisher),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Rename a publisher. Addresses are managed through their own routes."""
    updated = await db_service.update_publisher(publisher, payload)
    return JSONResponse(content=updated.to_json())


@router.delete("/{publisher_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_publisher(
    publisher: Publisher = Depends(find_publisher),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Delete a publisher and all of its books."""
    await db_service.delete_publisher(publisher)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{publisher_id}/addresses")
async def create_address(
    payload: AddressPayload,
    publisher: Publisher = Depends(find_publisher),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    address = await db_service.add_address(publisher, payload)
    return JSONResponse(content=address.to_json())


@router.get("/{publisher_id}/addresses")
async def list_addresses(
    publisher: Publisher = Depends(find_publisher),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    addresses = db_service.list_addresses(publisher)
    return JSONResponse(content=[address.to_json() for address in addresses])


@router.get("/{publisher_id}/addresses/{address_id}")
async def get_address(address: Address = Depends(find_address)):
    return JSONResponse(content=address.to_json())


@router.put("/{publisher_id}/addresses/{address_id}")
async def update_address(
    address_id: str,
    payload: AddressPayload,
    publisher: Publisher = Depends(find_publisher),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Replace city and street of an address."""
    address = await db_service.update_address(publisher, address_id, payload)
    return JSONResponse(content=address.to_json())


@router.delete("/{publisher_id}/addresses/{address_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_address(
    address_id: str,
    publisher: Publisher = Depends(find_publisher),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    await db_service.delete_address(publisher, address_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
