"""
Twilio Realtime Bridge - Twilio Media Streams to OpenAI Realtime API

This application lets a phone caller talk to a voice agent built on OpenAI's
Realtime API. Twilio streams the call's ulaw audio over a WebSocket; the bridge
relays it to the Realtime API and streams the model's audio back, handling caller
interruptions and the model's tool calls (web search, call transfer) mid-call.

Architecture Overview:
- FastAPI server exposing the inbound-call webhook and the media stream WebSocket
- One BridgeSession per call, owning both WebSocket connections
- Tool invocation against Bing Web Search and the Twilio REST API

Key Components:
- bot: Channels for both protocols, session configuration, and the BridgeSession
- config: Constants, logging setup, and environment-driven settings
- handlers: The inbound-call TwiML webhook
- models: Wire schemas, typed events, call state, and the session registry
- services: Clients for Bing Web Search and Twilio call control
- tools: Tool schemas and the ToolInvoker
- websocket_manager: Accepts media stream connections and builds sessions

Getting Started:
1. Set up environment variables:
   - OPENAI_API_KEY: Your OpenAI API key (required)
   - BRIDGE_VARIANT: minimal (default) or call_screening
   - BING_API_KEY: Enables the search tool
   - TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN / TRANSFER_NUMBER: Enable call transfer
   - PORT: Port to run the server on (default 5050)

2. Start the server:
   ```bash
   python run.py
   ```

3. Point your Twilio number's voice webhook at https://your-server/incoming-call
"""
