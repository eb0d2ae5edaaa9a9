"""
FastAPI server bridging Twilio phone calls to the OpenAI Realtime API.

This module initializes and configures the FastAPI application that Twilio talks to:
the inbound-call webhook answers with TwiML pointing the call audio at the
/media-stream WebSocket, where each call gets its own BridgeSession.
"""

from fastapi import FastAPI, Request, Response, WebSocket
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.config.logging_config import configure_logging
from app.config.settings import load_env_file
from app.handlers.call_handlers import build_incoming_call_twiml, resolve_stream_url
from app.websocket_manager import WebSocketManager

# Load environment variables from .env file if it exists
load_env_file()

# Configure logging
logger = configure_logging()

# Create FastAPI application
app = FastAPI(
    title="Twilio Realtime Bridge",
    description="Bridge between Twilio Media Streams and the OpenAI Realtime API",
    version="1.0.0",
)

# Create WebSocket manager
websocket_manager = WebSocketManager()


@app.get("/")
async def root():
    """Root endpoint to display basic information about the API.

    Returns:
        dict: Basic information about the API and its purpose.
    """
    return {
        "message": "Twilio Media Stream Server is running!",
        "name": "Twilio Realtime Bridge",
        "version": "1.0.0",
        "endpoints": {
            "/incoming-call": "TwiML webhook for inbound calls",
            "/media-stream": "WebSocket endpoint for Twilio Media Streams",
            "/health": "Health check endpoint",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring system status.

    Returns:
        dict: Status information including the number of calls in progress.
    """
    try:
        settings = websocket_manager.settings
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "error": "invalid configuration"},
        )
    return {
        "status": "healthy",
        "openai_api_key_configured": bool(settings.openai_api_key),
        "variant": settings.variant,
        "active_sessions": len(websocket_manager.registry),
    }


@app.api_route("/incoming-call", methods=["GET", "POST"])
async def incoming_call(request: Request):
    """Answer an inbound call and connect its audio to the media stream endpoint."""
    stream_url = resolve_stream_url(
        request.headers.get("host"), websocket_manager.settings.public_stream_url
    )
    twiml = build_incoming_call_twiml(stream_url)
    return Response(content=twiml, media_type="text/xml")


@app.websocket("/media-stream")
async def media_stream(websocket: WebSocket):
    """WebSocket endpoint for Twilio Media Streams.

    Twilio opens this connection after the inbound-call TwiML; it carries the
    call's start, media and stop events for the lifetime of the call.
    """
    await websocket_manager.handle_websocket(websocket)
