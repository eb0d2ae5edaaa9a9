"""
Function tool schemas declared to the realtime model.
"""

from typing import Dict

from app.config.constants import TOOL_SEARCH, TOOL_TRANSFER_CALL
from app.models.openai_schemas import ToolSchema

SEARCH_SCHEMA = ToolSchema(
    name=TOOL_SEARCH,
    description="Searches the web and returns the results",
    parameters={
        "type": "object",
        "properties": {
            "query": {
                "description": "The query to search for",
                "type": "string",
            }
        },
        "required": ["query"],
    },
)

TRANSFER_CALL_SCHEMA = ToolSchema(
    name=TOOL_TRANSFER_CALL,
    description="Transfers the current call to the person the caller is trying to reach",
    parameters={"type": "object", "properties": {}},
)

TOOL_SCHEMAS: Dict[str, ToolSchema] = {
    SEARCH_SCHEMA.name: SEARCH_SCHEMA,
    TRANSFER_CALL_SCHEMA.name: TRANSFER_CALL_SCHEMA,
}
