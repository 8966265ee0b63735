"""
strapi-delete: delete one entry by documentId
"""

import structlog
from pydantic import BaseModel, Field

from strapi_tools.strapi.client import StrapiClient, StrapiError
from strapi_tools.tools.base import BaseTool, ToolResult
from strapi_tools.tools.builtin_tools._shared import CONTENT_TYPE_DESCRIPTION, pretty

log = structlog.get_logger()


class DeleteParams(BaseModel):
    content_type: str = Field(description=CONTENT_TYPE_DESCRIPTION)
    document_id: str = Field(
        description=(
            "REQUIRED: documentId of the entry to DELETE. BEFORE using this tool, ALWAYS ask "
            "the user to confirm the documentId. Example: 'abc123xyz'"
        ),
    )


class StrapiDeleteTool(BaseTool):
    """Delete an entry by documentId"""

    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-delete"

    @property
    def description(self) -> str:
        return "Delete a Strapi entry by documentId. Irreversible: confirm the id with the user first."

    @property
    def params_model(self) -> type[BaseModel]:
        return DeleteParams

    @property
    def risk_level(self) -> str:
        return "critical"

    async def execute(self, args: dict) -> ToolResult:
        params: DeleteParams = self.parse(args)
        log.info("delete entry", content_type=params.content_type, document_id=params.document_id)

        try:
            response = await self._client.delete(params.content_type, params.document_id)
        except StrapiError as e:
            return ToolResult.fail(
                f"Error deleting entry {params.document_id} from {params.content_type}: {e.message}"
            )

        output = {
            "deleted_document_id": params.document_id,
            "deleted_data": response.get("data") if isinstance(response, dict) else None,
        }
        return ToolResult.success(
            summary=(
                f"Successfully deleted entry {params.document_id} from {params.content_type}"
                f"\n\n{pretty(output)}"
            ),
            **output,
        )
