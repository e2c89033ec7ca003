"""Book routes module."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from api.database import APIDatabaseService
from api.dependencies import find_book, get_db_service, get_multi_value
from api.models import BookPayload
from catalog.models import Book

router = APIRouter(prefix="/books", tags=["Books"])


@router.post("")
async def create_book(
    payload: BookPayload,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """
    Create a book.

    - **publisherId** (or **publisher**): must reference an existing publisher
    """
    book = await db_service.create_book(payload)
    return JSONResponse(content=book.to_json())


@router.get("")
async def list_books(
    request: Request,
    publisher: Optional[str] = None,
    publisherId: Optional[str] = None,
    page: Optional[str] = None,
    pageSize: Optional[str] = None,
    embed: Optional[str] = None,
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """
    Get books with filtering and pagination, sorted by title.

    - **publisher**: Only books from this publisher
    - **format**: Book format, repeat the parameter to match any of several formats
    - **page**: Page number (starts from 1, default 1)
    - **pageSize**: Items per page (default 30)
    - **embed**: `publisher` to embed each book's publisher

    Pagination data is returned in the X-Pagination-* headers.
    """
    result = await db_service.list_books(
        publisher_id=publisher or publisherId,
        formats=get_multi_value(request, "format"),
        page=page,
        page_size=pageSize,
        embed_publisher=embed == "publisher"
    )
    return JSONResponse(content=result.to_json(), headers=result.headers())


@router.get("/{book_id}")
async def get_book(
    embed: Optional[str] = None,
    book: Book = Depends(find_book),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Get a single book, optionally with its publisher embedded."""
    publisher = None
    if embed == "publisher":
        publisher = await db_service.get_book_publisher(book)
    return JSONResponse(content=book.to_json(publisher))


@router.put("/{book_id}")
async def update_book(
    payload: BookPayload,
    book: Book = Depends(find_book),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    """Replace title, format and publisher of a book."""
    updated = await db_service.update_book(book, payload)
    return JSONResponse(content=updated.to_json())


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book: Book = Depends(find_book),
    db_service: APIDatabaseService = Depends(get_db_service)
):
    await db_service.delete_book(book)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
