from typing import Any, Mapping, Optional

from .agents import AgentsClient, MeClient
from .attachments import AttachmentsClient
from .canned_responses import CannedResponsesClient
from .channel import ChannelApiClient
from .companies import CompaniesClient
from .config import FreshdeskConfiguration
from .contacts import ContactsClient
from .conversations import ConversationsClient
from .custom_objects import CustomObjectsClient
from .groups import GroupsClient
from .http_client import FreshdeskHttpClient
from .products import ProductsClient
from .roles import RolesClient
from .solutions import SolutionsClient
from .ticket_fields import TicketFieldsClient
from .tickets import TicketsClient


class FreshdeskClient:
    """Entry point bundling one client per Freshdesk API area.

    Usage::

        async with FreshdeskClient.create("acme.freshdesk.com", api_key) as freshdesk:
            async for contact in freshdesk.contacts.list_all():
                print(contact.name)
    """

    def __init__(self, http_client: FreshdeskHttpClient):
        self.http_client = http_client
        self.tickets = TicketsClient(http_client)
        self.conversations = ConversationsClient(http_client)
        self.contacts = ContactsClient(http_client)
        self.agents = AgentsClient(http_client)
        self.me = MeClient(http_client)
        self.companies = CompaniesClient(http_client)
        self.groups = GroupsClient(http_client)
        self.roles = RolesClient(http_client)
        self.products = ProductsClient(http_client)
        self.canned_responses = CannedResponsesClient(http_client)
        self.attachments = AttachmentsClient(http_client)
        self.ticket_fields = TicketFieldsClient(http_client)
        self.solutions = SolutionsClient(http_client)
        self.custom_objects = CustomObjectsClient(http_client)
        self.channel = ChannelApiClient(http_client)

    @classmethod
    def create(cls, freshdesk_domain: str, api_key: str, **kwargs: Any) -> "FreshdeskClient":
        return cls(FreshdeskHttpClient.create(freshdesk_domain, api_key, **kwargs))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **kwargs: Any) -> "FreshdeskClient":
        return cls(FreshdeskHttpClient(FreshdeskConfiguration.from_env(environ), **kwargs))

    @property
    def rate_limit_total(self) -> int:
        return self.http_client.rate_limit_total

    @property
    def rate_limit_remaining(self) -> int:
        return self.http_client.rate_limit_remaining

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def __aenter__(self) -> "FreshdeskClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
