from .http_client import FreshdeskHttpClient


class AttachmentsClient:
    def __init__(self, http: FreshdeskHttpClient):
        self._http = http

    async def delete(self, attachment_id: int) -> None:
        """Permanently delete an attachment from a ticket, conversation or article."""
        await self._http.api_operation("DELETE", f"/api/v2/attachments/{attachment_id}")
