"""Unit tests for the dashboard client: api_fetch, action toasts and refresh."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from dashboard_client import actions
from dashboard_client.api import APIError, SessionExpiredError, api_fetch
from dashboard_client.refresh import refresh_periodically

MOCK_TOKEN = "test-token"


def _response(status_code=200, payload=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason_phrase = reason
    response.json.return_value = payload if payload is not None else {}
    return response


# ---------------------------------------------------------------------------
# api_fetch
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_api_fetch_attaches_bearer_token():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response(payload={"success": True, "data": []})

        result = await api_fetch(
            "GET", "/admin/users", MOCK_TOKEN, params={"role": "admin"}
        )

        assert result["success"] is True
        args, kwargs = mock_request.call_args
        assert args[0] == "GET"
        assert args[1].endswith("/api/v1/admin/users")
        assert kwargs["headers"]["Authorization"] == f"Bearer {MOCK_TOKEN}"
        assert kwargs["params"] == {"role": "admin"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_api_fetch_without_token_sends_no_authorization():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response(payload={"success": True, "data": []})

        await api_fetch("GET", "/products")

        _, kwargs = mock_request.call_args
        assert "Authorization" not in kwargs["headers"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_api_fetch_401_is_session_expired():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response(401, {"success": False}, "Unauthorized")

        with pytest.raises(SessionExpiredError) as exc_info:
            await api_fetch("GET", "/admin/products", MOCK_TOKEN)

        assert str(exc_info.value) == "Session expired. Please login again."


@pytest.mark.asyncio
@pytest.mark.unit
async def test_api_fetch_uses_envelope_message():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response(
            409,
            {"success": False, "message": "Cannot approve product in status APPROVED"},
            "Conflict",
        )

        with pytest.raises(APIError) as exc_info:
            await api_fetch("POST", "/admin/products/1/approve", MOCK_TOKEN)

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "Cannot approve product in status APPROVED"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_api_fetch_falls_back_to_status_line():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        response = _response(502, reason="Bad Gateway")
        response.json.side_effect = ValueError("not json")
        mock_request.return_value = response

        with pytest.raises(APIError) as exc_info:
            await api_fetch("GET", "/orders", MOCK_TOKEN)

        assert exc_info.value.message == "API request failed: 502 Bad Gateway"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_api_fetch_non_json_success_body():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        response = _response(200)
        response.json.side_effect = ValueError("<html>maintenance</html>")
        mock_request.return_value = response

        with pytest.raises(APIError) as exc_info:
            await api_fetch("GET", "/orders", MOCK_TOKEN)

        assert exc_info.value.message == "API request failed: 200 OK"
        assert exc_info.value.status_code == 200


@pytest.mark.asyncio
@pytest.mark.unit
async def test_api_fetch_no_content_is_empty():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        response = _response(204, reason="No Content")
        response.json.side_effect = ValueError("empty body")
        mock_request.return_value = response

        assert await api_fetch("DELETE", "/admin/categories/c-1", MOCK_TOKEN) == {}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_api_fetch_network_failure():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(APIError) as exc_info:
            await api_fetch("GET", "/orders", MOCK_TOKEN)

        assert exc_info.value.message == "Network error. Please check your connection."
        assert exc_info.value.status_code is None


# ---------------------------------------------------------------------------
# Action handlers
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_reject_product_sends_reason():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response(payload={"success": True, "data": {}})

        toast = await actions.reject_product(
            MOCK_TOKEN, "prod-1", "  Missing certification  "
        )

        assert not toast.is_error
        assert toast.title == "Product Rejected"
        assert toast.description == "Product prod-1 has been rejected: Missing certification"
        args, kwargs = mock_request.call_args
        assert args[0] == "PUT"
        assert "/admin/products/prod-1/status" in args[1]
        assert kwargs["json"] == {"status": "REJECTED", "reason": "Missing certification"}


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize("reason", ["", "   ", None])
async def test_blank_rejection_reason_sends_nothing(reason):
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        toast = await actions.reject_product(MOCK_TOKEN, "prod-1", reason)

        assert toast.is_error
        mock_request.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_blank_change_request_sends_nothing():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        toast = await actions.request_changes(MOCK_TOKEN, "prod-1", "  ")

        assert toast.is_error
        mock_request.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_failed_action_becomes_destructive_toast():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response(
            409, {"success": False, "message": "Cannot move order"}, "Conflict"
        )

        toast = await actions.process_refund(MOCK_TOKEN, "order-1")

        assert toast.variant == "destructive"
        assert toast.title == "Refund Failed"
        assert toast.description == "Failed to process refund. Please try again."


@pytest.mark.asyncio
@pytest.mark.unit
async def test_network_failure_becomes_destructive_toast():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.side_effect = httpx.ConnectTimeout("timed out")

        toast = await actions.approve_product(MOCK_TOKEN, "prod-1")

        assert toast.is_error
        assert toast.title == "Approval Failed"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_html_success_page_becomes_destructive_toast():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        response = _response(200)
        response.json.side_effect = ValueError("not json")
        mock_request.return_value = response

        toast = await actions.mark_delivered(MOCK_TOKEN, "order-1")

        assert toast.is_error
        assert toast.title == "Update Failed"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_no_content_action_succeeds():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        response = _response(204, reason="No Content")
        response.json.side_effect = ValueError("empty body")
        mock_request.return_value = response

        toast = await actions.mark_delivered(MOCK_TOKEN, "order-1")

        assert not toast.is_error
        assert toast.title == "Order Delivered"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_set_vendor_verified_sends_reason():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response(payload={"success": True, "data": {}})

        toast = await actions.set_vendor_verified(
            MOCK_TOKEN, "vendor-1", True, "  Documents checked "
        )

        assert toast.description == "Vendor vendor-1 has been verified"
        args, kwargs = mock_request.call_args
        assert args[0] == "PATCH"
        assert "/vendors/vendor-1/verify" in args[1]
        assert kwargs["json"] == {"is_verified": True, "reason": "Documents checked"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_order_status_toast_label():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response(payload={"success": True, "data": {}})

        toast = await actions.update_order_status(MOCK_TOKEN, "order-1", "processing")

        assert toast.description == "Order order-1 status updated to Processing"
        args, kwargs = mock_request.call_args
        assert args[0] == "PATCH"
        assert kwargs["json"] == {"status": "processing"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_mark_shipped_sends_tracking_number():
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response(payload={"success": True, "data": {}})

        toast = await actions.mark_shipped(MOCK_TOKEN, "order-1", "RM1")

        assert toast.title == "Order Shipped"
        args, kwargs = mock_request.call_args
        assert "/orders/order-1/ship" in args[1]
        assert kwargs["json"] == {"tracking_number": "RM1"}


# ---------------------------------------------------------------------------
# refresh_periodically
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_refresh_continues_after_failed_fetch():
    stop = asyncio.Event()
    results = []
    calls = {"count": 0}

    async def fetch():
        calls["count"] += 1
        if calls["count"] == 1:
            raise APIError("Network error. Please check your connection.")
        if calls["count"] == 3:
            stop.set()
        return {"total_revenue": calls["count"]}

    refreshed = await refresh_periodically(fetch, 0.01, results.append, stop)

    assert refreshed == 2
    assert results == [{"total_revenue": 2}, {"total_revenue": 3}]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_refresh_stops_on_expired_session():
    stop = asyncio.Event()

    async def fetch():
        raise SessionExpiredError()

    with pytest.raises(SessionExpiredError):
        await refresh_periodically(fetch, 0.01, lambda result: None, stop)
