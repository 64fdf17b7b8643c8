from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from booktracker.database import get_session

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
async def health(session: AsyncSession = Depends(get_session)):
    """Report whether the store answers a trivial query."""
    try:
        await session.execute(text("SELECT 1"))
    except DBAPIError:
        return JSONResponse(status_code=503, content={"status": "unhealthy", "store": "unreachable"})
    return {"status": "healthy", "store": "ok"}
