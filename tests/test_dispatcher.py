"""Tests for tool-call dispatch against a mocked Carity API."""
from __future__ import annotations

import asyncio
import json

import httpx
import pytest
from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND

from carity_mcp.errors import InvalidParamsError, UnknownToolError



def call(dispatcher, name, arguments):
    return asyncio.run(dispatcher.call_tool(name, arguments))


def test_unknown_tool_raises_without_http(dispatcher, upstream):
    with pytest.raises(UnknownToolError) as excinfo:
        call(dispatcher, "nonexistent_tool", {})

    assert excinfo.value.error.code == METHOD_NOT_FOUND
    assert excinfo.value.error.message == "Unknown tool: nonexistent_tool"
    assert upstream.requests == []


@pytest.mark.parametrize(
    "name, arguments",
    [
        ("retrieve_chunks", {"query": "", "id": 5}),
        ("retrieve_chunks", {"query": "x", "id": 0}),
        ("get_single_order_details", {"order_number": "  "}),
        ("get_single_product_inventory_details", {"sku_id": 1.5}),
        ("ymmt_cjson", {"year": 2024, "make": "VW"}),
    ],
)
def test_invalid_arguments_raise_without_http(dispatcher, upstream, name, arguments):
    with pytest.raises(InvalidParamsError) as excinfo:
        call(dispatcher, name, arguments)

    assert excinfo.value.error.code == INVALID_PARAMS
    assert excinfo.value.message.startswith("Invalid arguments:")
    assert upstream.requests == []


def test_missing_arguments_are_invalid(dispatcher, upstream):
    with pytest.raises(InvalidParamsError):
        call(dispatcher, "get_single_order_details", None)
    assert upstream.requests == []


def test_successful_call_returns_pretty_printed_json(dispatcher, upstream):
    upstream.reply(200, json={"answer": "ok"})

    result = call(dispatcher, "retrieve_chunks", {"query": "x", "id": 3})

    assert result.isError is False
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    assert result.content[0].text == json.dumps({"answer": "ok"}, indent=2)


def test_success_text_keeps_non_ascii_characters(dispatcher, upstream):
    upstream.reply(200, json={"make": "Citroën", "model": "Škoda Octavia"})

    result = call(dispatcher, "ymmt_cjson", {"year": 2021, "make": "Citroën", "model": "C4"})

    assert result.isError is False
    assert result.content[0].text == '{\n  "make": "Citroën",\n  "model": "Škoda Octavia"\n}'
    assert upstream.last_json()["make"] == "Citroën"


def test_redirects_are_followed(dispatcher, upstream):
    def responder(request):
        if request.url.path.endswith("/retrieve_chunks"):
            return httpx.Response(307, headers={"Location": "/mcp/v2/knowledge_models/retrieve_chunks_moved"})
        return httpx.Response(200, json={"answer": "moved"})

    upstream.responder = responder

    result = call(dispatcher, "retrieve_chunks", {"query": "x", "id": 3})

    assert result.isError is False
    assert json.loads(result.content[0].text) == {"answer": "moved"}
    assert [r.method for r in upstream.requests] == ["POST", "POST"]
    assert upstream.last_json() == {"id": 3, "query": "x"}


def test_retrieve_chunks_request_shape(dispatcher, upstream, settings):
    call(dispatcher, "retrieve_chunks", {"query": "brake pads", "id": 3, "extra": "dropped"})

    request = upstream.requests[0]
    assert request.method == "POST"
    assert str(request.url) == f"{settings.base_url}/mcp/v1/knowledge_models/retrieve_chunks"
    assert request.headers["X-API-KEY"] == "upstream-secret"
    assert request.headers["Content-Type"] == "application/json"
    assert upstream.last_json() == {"id": 3, "query": "brake pads"}


def test_order_details_are_wrapped_in_params(dispatcher, upstream):
    call(dispatcher, "get_single_order_details", {"order_number": "A-100#7"})

    assert upstream.requests[0].url.path == "/mcp/v1/open_ai_tools/single_order_details"
    assert upstream.last_json() == {"params": {"order_number": "A-100#7"}}


def test_inventory_details_send_integral_sku(dispatcher, upstream):
    call(dispatcher, "get_single_product_inventory_details", {"sku_id": 991.0})

    assert upstream.requests[0].url.path == "/mcp/v1/open_ai_tools/single_product_inventory_details"
    assert upstream.last_json() == {"params": {"sku_id": 991}}


def test_ymmt_cjson_sends_fields_at_top_level(dispatcher, upstream):
    result = call(dispatcher, "ymmt_cjson", {"year": 2024, "make": "VW", "model": "ID.4", "trim_variant": None})

    assert result.isError is False
    assert upstream.requests[0].url.path == "/mcp/v1/ymmt_cjsons/ymmt_cjson"
    assert upstream.last_json() == {"year": 2024, "make": "VW", "model": "ID.4", "trim_variant": None}


def test_ymmt_cjson_omits_absent_trim_variant(dispatcher, upstream):
    call(dispatcher, "ymmt_cjson", {"year": 2019, "make": "Ford", "model": "F-150"})

    assert upstream.last_json() == {"year": 2019, "make": "Ford", "model": "F-150"}


def test_http_error_uses_error_field_and_status(dispatcher, upstream):
    upstream.reply(404, json={"error": "not found"})

    result = call(dispatcher, "get_single_order_details", {"order_number": "A-1"})

    assert result.isError is True
    text = result.content[0].text
    assert text == "Error retrieving order details from Carity API: not found (Status: 404)"


def test_http_error_prefers_message_field(dispatcher, upstream):
    upstream.reply(422, json={"message": "bad sku", "error": "unprocessable"})

    result = call(dispatcher, "get_single_product_inventory_details", {"sku_id": 7})

    assert result.isError is True
    assert "bad sku" in result.content[0].text
    assert "unprocessable" not in result.content[0].text
    assert "(Status: 422)" in result.content[0].text


def test_http_error_without_json_body_uses_generic_message(dispatcher, upstream):
    upstream.reply(502, text="<html>Bad Gateway</html>")

    result = call(dispatcher, "retrieve_chunks", {"query": "x", "id": 1})

    assert result.isError is True
    assert result.content[0].text == (
        "Error retrieving chunks from Carity API: Request failed with status code 502 (Status: 502)"
    )


def test_timeout_is_reported_as_error_result(dispatcher, upstream):
    upstream.fail(lambda request: httpx.ReadTimeout("timed out", request=request))

    result = call(dispatcher, "ymmt_cjson", {"year": 2024, "make": "VW", "model": "ID.4", "trim_variant": None})

    assert result.isError is True
    assert result.content[0].text == (
        "Error retrieving vehicle information from Carity API: "
        "Request timed out after 5 seconds (Status: N/A)"
    )


def test_connection_failure_is_reported_as_error_result(dispatcher, upstream):
    upstream.fail(lambda request: httpx.ConnectError("Connection refused", request=request))

    result = call(dispatcher, "retrieve_chunks", {"query": "x", "id": 1})

    assert result.isError is True
    assert "Connection refused" in result.content[0].text
    assert "(Status: N/A)" in result.content[0].text


def test_connection_failure_without_description_uses_fallback_message(dispatcher, upstream):
    upstream.fail(lambda request: httpx.ConnectError("", request=request))

    result = call(dispatcher, "retrieve_chunks", {"query": "x", "id": 1})

    assert result.isError is True
    assert result.content[0].text == (
        "Error retrieving chunks from Carity API: Unknown API error occurred (Status: N/A)"
    )

def test_undecodable_success_body_is_unexpected_error(dispatcher, upstream):
    upstream.reply(200, text="not json")

    result = call(dispatcher, "retrieve_chunks", {"query": "x", "id": 1})

    assert result.isError is True
    assert result.content[0].text.startswith("Unexpected error: ")


def test_concurrent_calls_are_independent(dispatcher, upstream):
    upstream.responder = lambda request: httpx.Response(200, json=json.loads(request.content))

    async def run_both():
        return await asyncio.gather(
            dispatcher.call_tool("retrieve_chunks", {"query": "a", "id": 1}),
            dispatcher.call_tool("retrieve_chunks", {"query": "b", "id": 2}),
        )

    first, second = asyncio.run(run_both())

    assert json.loads(first.content[0].text) == {"id": 1, "query": "a"}
    assert json.loads(second.content[0].text) == {"id": 2, "query": "b"}
