"""
Session configuration for the OpenAI Realtime API.

The builder turns deployment settings plus what is known about a call into the
SessionConfig sent once per session. Each bridge variant fixes which tools it
declares and whether instructions are enriched with the caller's number.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from app.config.constants import (
    AUDIO_FORMAT_G711_ULAW,
    DEFAULT_TEMPERATURE,
    DEFAULT_VOICE,
    LOGGER_NAME,
    MINIMAL_SYSTEM_MESSAGE,
    TOOL_SEARCH,
    TOOL_TRANSFER_CALL,
    TURN_DETECTION_SERVER_VAD,
    VARIANT_CALL_SCREENING,
    VARIANT_MINIMAL,
)
from app.errors import ConfigEnrichmentFailure
from app.models.call import CallIdentity
from app.models.openai_schemas import SessionConfig
from app.tools.schemas import TOOL_SCHEMAS

logger = logging.getLogger(LOGGER_NAME)

# Tools each variant declares, in declaration order, and whether it looks up the caller
VARIANT_TOOLS: Dict[str, Tuple[str, ...]] = {
    VARIANT_MINIMAL: (TOOL_SEARCH,),
    VARIANT_CALL_SCREENING: (TOOL_SEARCH, TOOL_TRANSFER_CALL),
}
VARIANT_ENRICHES_CALLER = {VARIANT_MINIMAL: False, VARIANT_CALL_SCREENING: True}


class SessionConfigBuilder:
    """Builds the SessionConfig for each call."""

    def __init__(
        self,
        variant: str = VARIANT_MINIMAL,
        supported_tools: Iterable[str] = (),
        instructions: str = MINIMAL_SYSTEM_MESSAGE,
        voice: str = DEFAULT_VOICE,
        temperature: float = DEFAULT_TEMPERATURE,
        caller_lookup=None,
    ):
        """
        Args:
            variant: Bridge variant name
            supported_tools: Tool names the ToolInvoker can run
            instructions: System prompt for the model
            voice: Output voice
            temperature: Sampling temperature
            caller_lookup: Object with an async ``lookup_caller_number(call_sid)`` method
        """
        if variant not in VARIANT_TOOLS:
            raise ValueError(f"Unknown bridge variant: {variant}")
        self.variant = variant
        self.instructions = instructions
        self.voice = voice
        self.temperature = temperature
        self.caller_lookup = caller_lookup

        supported = set(supported_tools)
        self.tool_schemas = tuple(
            TOOL_SCHEMAS[name] for name in VARIANT_TOOLS[variant] if name in supported
        )

    @property
    def enriches_caller(self) -> bool:
        return VARIANT_ENRICHES_CALLER[self.variant] and self.caller_lookup is not None

    async def resolve_caller_number(self, identity: CallIdentity) -> Optional[str]:
        """
        Look up the caller's number for enrichment.

        Failures are logged and yield None; the session is configured without the number.
        """
        if not self.enriches_caller or identity.caller_number:
            return identity.caller_number
        try:
            if not identity.call_sid:
                raise ConfigEnrichmentFailure("call sid is not known")
            try:
                return await self.caller_lookup.lookup_caller_number(identity.call_sid)
            except Exception as e:
                raise ConfigEnrichmentFailure(str(e)) from e
        except ConfigEnrichmentFailure as e:
            logger.warning(f"Could not resolve caller number for stream {identity.stream_sid}: {e}")
            return None

    def build(self, identity: Optional[CallIdentity] = None) -> SessionConfig:
        """Build the session configuration for a call."""
        instructions = self.instructions
        if identity is not None and identity.caller_number and self.enriches_caller:
            instructions = f"{instructions}\nThe caller's phone number is {identity.caller_number}."

        return SessionConfig(
            voice=self.voice,
            instructions=instructions,
            input_audio_format=AUDIO_FORMAT_G711_ULAW,
            output_audio_format=AUDIO_FORMAT_G711_ULAW,
            turn_detection_mode=TURN_DETECTION_SERVER_VAD,
            temperature=self.temperature,
            tool_schemas=self.tool_schemas,
        )
