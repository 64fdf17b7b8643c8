from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from booktracker.database import get_session
from booktracker.schemas.book import BookCreate, BookResponse, BookUpdate, DeleteResponse
from booktracker.services import books as book_service

router = APIRouter(prefix="/api/books", tags=["books"])


@router.get("", response_model=list[BookResponse])
async def list_books(session: AsyncSession = Depends(get_session)):
    return await book_service.list_books(session)


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(book_id: str, session: AsyncSession = Depends(get_session)):
    return await book_service.get_book(session, book_id)


@router.post("", response_model=BookResponse, status_code=201)
async def create_book(data: BookCreate, session: AsyncSession = Depends(get_session)):
    return await book_service.create_book(session, data.title, data.author)


@router.put("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: str, data: BookUpdate, session: AsyncSession = Depends(get_session)
):
    return await book_service.update_book(session, book_id, data.model_dump(exclude_unset=True))


@router.delete("/{book_id}", response_model=DeleteResponse)
async def delete_book(book_id: str, session: AsyncSession = Depends(get_session)):
    await book_service.delete_book(session, book_id)
    return DeleteResponse(message="Book deleted")
