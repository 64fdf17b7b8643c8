import httpx
from httpx import AsyncClient, Response


class ApiError(Exception):
    """The API answered with an error status."""

    def __init__(self, status: int, detail) -> None:
        super().__init__(f"{status}: {detail}")
        self.status = status
        self.detail = detail


class ApiUnavailable(ApiError):
    """The API could not be reached or failed on its side."""


class BookTrackerClient:
    """Thin wrapper around httpx.AsyncClient for the /api/books endpoints."""

    def __init__(self, http: AsyncClient) -> None:
        self.http = http

    async def list_books(self) -> list[dict]:
        return await self._request("GET", "/api/books")

    async def get_book(self, book_id: str) -> dict:
        return await self._request("GET", f"/api/books/{book_id}")

    async def create_book(self, title: str, author: str) -> dict:
        return await self._request("POST", "/api/books", json={"title": title, "author": author})

    async def update_book(self, book_id: str, **fields: str) -> dict:
        return await self._request("PUT", f"/api/books/{book_id}", json=fields)

    async def delete_book(self, book_id: str) -> dict:
        return await self._request("DELETE", f"/api/books/{book_id}")

    async def _request(self, method: str, path: str, **kwargs) -> dict | list:
        try:
            resp = await self.http.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise ApiUnavailable(0, str(e)) from e
        return self._handle(resp)

    def _handle(self, resp: Response) -> dict | list:
        if resp.status_code >= 500:
            raise ApiUnavailable(resp.status_code, resp.text)
        if not resp.is_success:
            try:
                detail = resp.json().get("detail", resp.text)
            except (ValueError, AttributeError):
                detail = resp.text
            raise ApiError(resp.status_code, detail)
        try:
            return resp.json()
        except ValueError as e:
            raise ApiUnavailable(resp.status_code, resp.text) from e
