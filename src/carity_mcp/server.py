#!/usr/bin/env python3
"""
MCP Server for the Carity API
Exposes Carity API endpoints as MCP tools for LLM integration

Supports both stdio (default) and HTTP modes
"""

import argparse
import asyncio
import logging
import secrets
import sys
import uuid
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import APIKeyHeader
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest

from .config import CarityApiClient, Settings, configure_logging, load_environment
from .dispatcher import ToolDispatcher
from .errors import ConfigurationError, ToolCallFault, UnknownToolError
from .models import FaultDetail, ToolCallRequest, ToolCallResponse, ToolListResponse
from .registry import ToolRegistry

logger = logging.getLogger(__name__)


def create_dispatcher(settings: Settings, client: Optional[CarityApiClient] = None) -> ToolDispatcher:
    """Build the registry and API client described by ``settings``"""
    registry = ToolRegistry.build(settings.enabled_tools, settings.retrieve_chunks_variant)
    return ToolDispatcher(registry, client or CarityApiClient.from_settings(settings))


def create_mcp_server(settings: Settings, dispatcher: ToolDispatcher) -> Server:
    """Create the MCP server used in stdio mode"""
    server = Server(settings.server_name, version=settings.server_version)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        """List all available MCP tools"""
        return dispatcher.list_tools()

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        """Handle tool execution; ToolCallFault propagates as a JSON-RPC error"""
        result = await dispatcher.call_tool(request.params.name, request.params.arguments)
        return types.ServerResult(result)

    # Registered directly rather than through @server.call_tool(), which turns
    # every exception into an isError result and would hide protocol faults
    server.request_handlers[types.CallToolRequest] = call_tool
    return server


class DistributedTracingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: StarletteRequest, call_next):
        # Extract trace ID from incoming request or generate new one
        trace_id = request.headers.get("X-Trace-ID") or str(uuid.uuid4())
        request.state.trace_id = trace_id

        logger.info(f"[TRACE:{trace_id}] MCP Server request: {request.method} {request.url.path}")
        response = await call_next(request)
        response.headers["X-Trace-ID"] = trace_id
        logger.info(f"[TRACE:{trace_id}] MCP Server response: {response.status_code}")

        return response


api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def create_http_app(settings: Settings, dispatcher: ToolDispatcher) -> FastAPI:
    """Create the FastAPI app used in HTTP mode"""
    http_app = FastAPI(
        title="Carity MCP Server HTTP API",
        description="HTTP API for the Carity MCP tools",
        version=settings.server_version,
    )

    if settings.cors_origins:
        http_app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-API-Key", "X-Trace-ID"],
        )
    http_app.add_middleware(DistributedTracingMiddleware)

    async def require_api_key(api_key: Optional[str] = Security(api_key_header)) -> None:
        if not secrets.compare_digest(api_key or "", settings.server_api_key):
            raise HTTPException(status_code=401, detail="Invalid or missing API key")

    @http_app.get("/health")
    async def http_health_check():
        """Health check for HTTP mode"""
        return {"status": "healthy", "service": settings.server_name, "version": settings.server_version}

    @http_app.get("/tools", response_model=ToolListResponse, dependencies=[Depends(require_api_key)])
    async def http_list_tools():
        """HTTP endpoint to list available tools"""
        return ToolListResponse(tools=dispatcher.list_tools())

    @http_app.post("/tools/call", response_model=ToolCallResponse, dependencies=[Depends(require_api_key)])
    async def http_call_tool(request: ToolCallRequest, http_request: Request):
        """HTTP endpoint to call a tool"""
        trace_id = getattr(http_request.state, "trace_id", None)

        try:
            result = await dispatcher.call_tool(request.name, request.arguments, trace_id=trace_id)
        except ToolCallFault as e:
            status_code = 404 if isinstance(e, UnknownToolError) else 400
            raise HTTPException(
                status_code=status_code,
                detail=FaultDetail(code=e.error.code, message=e.message).model_dump(),
            )

        error = result.content[0].text if result.isError else None
        return ToolCallResponse(result=result.content, success=not result.isError, error=error)

    return http_app


async def serve(settings: Settings, dispatcher: ToolDispatcher) -> None:
    """Run the server in the configured mode until the transport closes"""
    logger.info(f"Starting MCP Server: {settings.server_name} v{settings.server_version}")
    logger.info(f"Mode: {settings.server_mode}")
    logger.info(f"Forwarding tool calls to Carity API at: {settings.base_url}")

    try:
        if settings.server_mode == "http":
            import uvicorn

            logger.info(f"Starting MCP Server in HTTP mode on port {settings.server_port}")
            config = uvicorn.Config(
                create_http_app(settings, dispatcher), host="0.0.0.0", port=settings.server_port, log_level="info"
            )
            await uvicorn.Server(config).serve()
        else:
            logger.info("Starting MCP Server in stdio mode")
            server = create_mcp_server(settings, dispatcher)
            async with stdio_server() as (read_stream, write_stream):
                await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await dispatcher.client.aclose()
        logger.info("Closed Carity API client")


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point"""
    parser = argparse.ArgumentParser(prog="carity-mcp", description="Carity MCP server")
    parser.add_argument("--http", action="store_true", help="serve over HTTP instead of stdio")
    args = parser.parse_args(argv)

    configure_logging()
    load_environment()
    # LOG_LEVEL may only be known once the .env files are loaded
    configure_logging()

    try:
        settings = Settings.from_env()
        if args.http:
            settings = settings.model_copy(update={"server_mode": "http"})
        dispatcher = create_dispatcher(settings)
    except ConfigurationError as e:
        logger.error(f"Error: {e}")
        return 1

    try:
        asyncio.run(serve(settings, dispatcher))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 0
    except Exception:
        logger.exception("Server error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
