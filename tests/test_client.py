import httpx
import pytest

from booktracker.client.api import ApiError, ApiUnavailable, BookTrackerClient


@pytest.fixture
def bt(client):
    return BookTrackerClient(client)


@pytest.mark.asyncio
async def test_client_list_and_create(bt):
    created = await bt.create_book("Dune", "Herbert")
    assert created["title"] == "Dune"

    books = await bt.list_books()
    assert books == [created]


@pytest.mark.asyncio
async def test_client_update(bt):
    created = await bt.create_book("Duen", "Herbert")
    updated = await bt.update_book(created["id"], title="Dune")
    assert updated == {"id": created["id"], "title": "Dune", "author": "Herbert"}
    assert await bt.get_book(created["id"]) == updated


@pytest.mark.asyncio
async def test_client_delete(bt):
    created = await bt.create_book("Dune", "Herbert")
    result = await bt.delete_book(created["id"])
    assert result == {"message": "Book deleted"}
    assert await bt.list_books() == []


@pytest.mark.asyncio
async def test_client_404_raises(bt):
    with pytest.raises(ApiError) as exc_info:
        await bt.delete_book("missing")
    assert exc_info.value.status == 404
    assert exc_info.value.detail == "Book not found"
    assert not isinstance(exc_info.value, ApiUnavailable)


@pytest.mark.asyncio
async def test_client_422_raises(bt):
    with pytest.raises(ApiError) as exc_info:
        await bt.create_book("", "Herbert")
    assert exc_info.value.status == 422


@pytest.mark.asyncio
async def test_client_server_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(503, json={"detail": "Store unavailable"}))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        with pytest.raises(ApiUnavailable) as exc_info:
            await BookTrackerClient(http).list_books()
    assert exc_info.value.status == 503


@pytest.mark.asyncio
async def test_client_connection_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://test") as http:
        with pytest.raises(ApiUnavailable):
            await BookTrackerClient(http).list_books()


@pytest.mark.asyncio
async def test_client_non_json_success_body():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, text="<html>proxy page</html>", headers={"content-type": "text/html"})
    )
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        with pytest.raises(ApiUnavailable) as exc_info:
            await BookTrackerClient(http).list_books()
    assert exc_info.value.status == 200
    assert "proxy page" in exc_info.value.detail


@pytest.mark.asyncio
async def test_client_redirect_is_an_error():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(307, headers={"location": "http://test/api/books"})
    )
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        with pytest.raises(ApiError) as exc_info:
            await BookTrackerClient(http).delete_book("")
    assert exc_info.value.status == 307
