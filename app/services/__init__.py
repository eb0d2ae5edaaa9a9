"""
Services module for external API integrations used by the bridge.

This module provides client implementations for the collaborators tools and session
configuration depend on. Both wrap blocking SDKs and run them in worker threads so
the per-call event loop keeps relaying audio while they work.

Key components:
- web_search: BingSearchClient, a thin client for the Bing Web Search API that maps
  results to name, url, date and snippet.
- call_control: TwilioCallControl, which transfers live calls and looks up the
  caller's number through the Twilio REST API.

Usage examples:
```python
from app.services.web_search import BingSearchClient
from app.services.call_control import TwilioCallControl

search = BingSearchClient(api_key)
results = await search.search("sam pullara")

call_control = TwilioCallControl(account_sid, auth_token)
caller = await call_control.lookup_caller_number(call_sid)
await call_control.transfer(call_sid, "+15555550100")
```
"""

from app.services.call_control import TwilioCallControl
from app.services.web_search import BingSearchClient

__all__ = ["BingSearchClient", "TwilioCallControl"]
