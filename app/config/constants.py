"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the application,
providing a centralized location for protocol names and default settings so the
Twilio and OpenAI sides of the bridge stay consistent.
"""

# Logger name used throughout the application
LOGGER_NAME = "twilio_bridge"

# Default OpenAI model and endpoint for the Realtime API
DEFAULT_REALTIME_MODEL = "gpt-4o-realtime-preview-2024-10-01"
DEFAULT_REALTIME_URL = "wss://api.openai.com/v1/realtime"
REALTIME_BETA_HEADER = "realtime=v1"

# Audio format constants (Twilio Media Streams carry 8kHz g711 ulaw)
AUDIO_FORMAT_G711_ULAW = "g711_ulaw"
TURN_DETECTION_SERVER_VAD = "server_vad"

# Session timing (seconds)
SESSION_STABILIZATION_DELAY = 0.25
SESSION_ACTIVATION_TIMEOUT = 1.0

# Bridge variants
VARIANT_MINIMAL = "minimal"
VARIANT_CALL_SCREENING = "call_screening"

# Tool names
TOOL_SEARCH = "search"
TOOL_TRANSFER_CALL = "transfer_call"

# Twilio Media Streams event names
TWILIO_EVENT_START = "start"
TWILIO_EVENT_MEDIA = "media"
TWILIO_EVENT_STOP = "stop"
TWILIO_EVENT_CLEAR = "clear"

# OpenAI Realtime event types (client -> server)
EVENT_SESSION_UPDATE = "session.update"
EVENT_INPUT_AUDIO_APPEND = "input_audio_buffer.append"
EVENT_CONVERSATION_ITEM_CREATE = "conversation.item.create"
EVENT_RESPONSE_CREATE = "response.create"
EVENT_RESPONSE_CANCEL = "response.cancel"

# OpenAI Realtime event types (server -> client)
EVENT_SESSION_UPDATED = "session.updated"
EVENT_RESPONSE_AUDIO_DELTA = "response.audio.delta"
EVENT_SPEECH_STARTED = "input_audio_buffer.speech_started"
EVENT_SPEECH_STOPPED = "input_audio_buffer.speech_stopped"
EVENT_OUTPUT_ITEM_DONE = "response.output_item.done"
EVENT_ERROR = "error"

# Realtime event types logged for diagnostics (session.updated is logged separately)
LOG_EVENT_TYPES = (
    "response.content.done",
    "rate_limits.updated",
    "response.done",
    "input_audio_buffer.committed",
    "input_audio_buffer.speech_stopped",
    "input_audio_buffer.speech_started",
    "session.created",
    "function_call",
    "response.output_item.done",
)

# Persona prompts for each bridge variant
MINIMAL_SYSTEM_MESSAGE = (
    "You have the personality of Marvin the paranoid robot from Hitchhikers Guide "
    "to the Galaxy. If you are asked to do simple tasks you complain about how far "
    "beneath your enormous intellect they are, but you do them anyway. Use the "
    "search tool whenever you need current information."
)
CALL_SCREENING_SYSTEM_MESSAGE = (
    "You are a polite receptionist screening phone calls. Ask the caller for their "
    "name and the reason for their call. Use the search tool to look up anything "
    "the caller mentions that you do not know. If the call is important and the "
    "caller asks to be put through, use the transfer_call tool."
)
DEFAULT_VOICE = "shimmer"
DEFAULT_TEMPERATURE = 0.8

# Web search provider
DEFAULT_BING_SEARCH_URL = "https://api.bing.microsoft.com/v7.0/search"
SEARCH_TIMEOUT = 10  # seconds
