"""
Tools the realtime model can call during a conversation.

Key components:
- schemas: The static function schemas declared in the session configuration.
- invoker: ToolInvoker, which runs a named tool with the model's JSON arguments and
  turns every failure into a ToolError the session reports back to the model.
"""

from app.tools.invoker import ToolInvoker
from app.tools.schemas import TOOL_SCHEMAS

__all__ = ["ToolInvoker", "TOOL_SCHEMAS"]
