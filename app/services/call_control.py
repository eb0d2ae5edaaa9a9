"""
Twilio call-control client.

Wraps the Twilio REST client for the two operations the bridge needs on a live
call: redirecting it to another number and looking up who is calling. The REST
client is synchronous, so calls run in a worker thread.
"""

import asyncio
import logging
from typing import Optional

from twilio.rest import Client
from twilio.twiml.voice_response import VoiceResponse

from app.config.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class TwilioCallControl:
    """Call-control operations against the Twilio REST API."""

    def __init__(self, account_sid: str, auth_token: str, client: Optional[Client] = None):
        self.client = client or Client(account_sid, auth_token)

    @staticmethod
    def transfer_twiml(destination: str) -> str:
        response = VoiceResponse()
        response.dial(destination)
        return str(response)

    async def transfer(self, call_sid: str, destination: str) -> bool:
        """
        Redirect a live call to a destination number.

        Args:
            call_sid: Twilio call identifier
            destination: Number to dial

        Returns:
            True once Twilio accepted the update

        Raises:
            twilio.base.exceptions.TwilioRestException: if Twilio rejects the update
        """
        twiml = self.transfer_twiml(destination)
        logger.info(f"Transferring call {call_sid} to {destination}")
        await asyncio.to_thread(lambda: self.client.calls(call_sid).update(twiml=twiml))
        return True

    async def lookup_caller_number(self, call_sid: str) -> Optional[str]:
        """
        Fetch the calling number for a live call.

        Returns:
            The caller's number, or None if Twilio did not report one
        """
        call = await asyncio.to_thread(lambda: self.client.calls(call_sid).fetch())
        return getattr(call, "from_", None)
