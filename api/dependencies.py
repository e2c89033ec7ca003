"""
Request dependencies.

Lookups run in the order a route declares them; each either resolves the
resource or raises NotFoundError before the handler body runs.
"""

from typing import List, Union

from fastapi import Depends, Request

from api.database import APIDatabaseService
from catalog.models import Address, Book, Publisher, Shop


def get_db_service(request: Request) -> APIDatabaseService:
    """Database service created in the application lifespan."""
    return request.app.state.db_service


def get_multi_value(request: Request, name: str) -> Union[str, List[str], None]:
    """
    Read a query parameter that may repeat, as ``name=a&name=b`` or
    ``name[]=a&name[]=b``.

    Returns:
        None when absent, the string when given once, a list otherwise
    """
    values = request.query_params.getlist(name) + request.query_params.getlist(f"{name}[]")
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values


async def find_book(
    book_id: str,
    db_service: APIDatabaseService = Depends(get_db_service)
) -> Book:
    return await db_service.get_book(book_id)


async def find_publisher(
    publisher_id: str,
    db_service: APIDatabaseService = Depends(get_db_service)
) -> Publisher:
    return await db_service.get_publisher(publisher_id)


def find_address(
    address_id: str,
    publisher: Publisher = Depends(find_publisher),
    db_service: APIDatabaseService = Depends(get_db_service)
) -> Address:
    return db_service.get_address(publisher, address_id)


async def find_shop(
    shop_id: str,
    db_service: APIDatabaseService = Depends(get_db_service)
) -> Shop:
    return await db_service.get_shop(shop_id)
