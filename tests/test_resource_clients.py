import asyncio
import json

import httpx
import pytest

from freshdesk_api.agents import CreateAgentRequest, UpdateAgentRequest
from freshdesk_api.canned_responses import CannedResponseCreate, CannedResponseFolderCreate, CannedResponseUpdate
from freshdesk_api.channel import ChannelCreateNoteRequest, ChannelCreateReplyRequest, ChannelCreateTicketRequest
from freshdesk_api.common import ExportFields
from freshdesk_api.companies import CreateCompanyRequest, UpdateCompanyRequest
from freshdesk_api.contacts import ContactCreateRequest, ContactFieldCreate, MergeContactsRequest, UpdateContactRequest
from freshdesk_api.conversations import CreateNoteRequest, CreateReplyRequest, UpdateNoteRequest
from freshdesk_api.custom_objects import CreateRecordRequest, ListAllRecordsRequest, RecordSort, UpdateRecordRequest
from freshdesk_api.exceptions import ResourceNotFoundError
from freshdesk_api.groups import GroupCreate, GroupUpdate, UnassignedForOptions
from freshdesk_api.solutions import (
    CreateArticleRequest,
    CreateCategoryRequest,
    CreateFolderRequest,
    UpdateArticleRequest,
    UpdateCategoryRequest,
    UpdateFolderRequest,
)
from freshdesk_api.ticket_fields import (
    CreateSectionRequest,
    CreateTicketFieldRequest,
    UpdateSectionRequest,
    UpdateTicketFieldRequest,
)
from freshdesk_api.tickets import (
    CreateOutboundEmailRequest,
    TicketIncludes,
    TicketPriority,
    TicketSource,
    TicketStatus,
    UpdateTicketRequest,
)


class Recorder:
    """Answers every request with ``payload`` and remembers what was sent."""

    def __init__(self, payload=None, status=200):
        self.payload = payload if payload is not None else {}
        self.status = status
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if self.status == 204:
            return httpx.Response(204)
        return httpx.Response(self.status, json=self.payload)

    @property
    def last(self):
        return self.requests[-1]

    @property
    def target(self):
        url = self.last.url
        query = url.query.decode()
        return self.last.method, url.path + (f"?{query}" if query else "")


def _run(coro):
    return asyncio.run(coro)


def test_ticket_view_with_includes(make_client):
    recorder = Recorder({"id": 5, "subject": "Hi", "status": 2, "requester": {"id": 9, "name": "Jo"}})
    ticket = _run(make_client(recorder).tickets.view(5, [TicketIncludes.REQUESTER, TicketIncludes.STATS]))
    assert recorder.target == ("GET", "/api/v2/tickets/5?include=requester%2Cstats")
    assert ticket.requester.name == "Jo"


@pytest.mark.parametrize("call, expected", [
    (lambda fd: fd.tickets.delete(3), ("DELETE", "/api/v2/tickets/3")),
    (lambda fd: fd.tickets.restore(3), ("PUT", "/api/v2/tickets/3/restore")),
    (lambda fd: fd.tickets.delete_summary(3), ("DELETE", "/api/v2/tickets/3/summary")),
    (lambda fd: fd.conversations.delete(8), ("DELETE", "/api/v2/conversations/8")),
    (lambda fd: fd.contacts.delete(4), ("DELETE", "/api/v2/contacts/4")),
    (lambda fd: fd.contacts.delete(4, hard_delete=True), ("DELETE", "/api/v2/contacts/4/hard_delete?force=true")),
    (lambda fd: fd.contacts.restore(4), ("PUT", "/api/v2/contacts/4/restore")),
    (lambda fd: fd.agents.delete(6), ("DELETE", "/api/v2/agents/6")),
    (lambda fd: fd.companies.delete(2), ("DELETE", "/api/v2/companies/2")),
    (lambda fd: fd.groups.delete(2), ("DELETE", "/api/v2/groups/2")),
    (lambda fd: fd.attachments.delete(11), ("DELETE", "/api/v2/attachments/11")),
    (lambda fd: fd.solutions.delete_article(12), ("DELETE", "/api/v2/solutions/articles/12")),
    (lambda fd: fd.custom_objects.delete_record(7, "BK-1"), ("DELETE", "/api/v2/custom_objects/schemas/7/records/BK-1")),
    (lambda fd: fd.ticket_fields.delete(9), ("DELETE", "/api/v2/admin/ticket_fields/9")),
    (lambda fd: fd.ticket_fields.delete_section(9, 1), ("DELETE", "/api/v2/admin/ticket_fields/9/sections/1")),
    (lambda fd: fd.solutions.delete_category(1), ("DELETE", "/api/v2/solutions/categories/1")),
    (lambda fd: fd.solutions.delete_folder(2), ("DELETE", "/api/v2/solutions/folders/2")),
])
def test_no_content_operations(make_client, call, expected):
    recorder = Recorder(status=204)
    assert _run(call(make_client(recorder))) is None
    assert recorder.target == expected


def test_create_reply_posts_to_ticket(make_client):
    recorder = Recorder({"id": 100, "body": "<p>Thanks</p>", "ticket_id": 5})
    reply = _run(make_client(recorder).conversations.create_reply(5, CreateReplyRequest(body="<p>Thanks</p>")))
    assert recorder.target == ("POST", "/api/v2/tickets/5/reply")
    assert json.loads(recorder.last.content) == {"body": "<p>Thanks</p>"}
    assert reply.ticket_id == 5


def test_contact_merge_and_export(make_client):
    recorder = Recorder({"id": "exp-1", "status": "in_progress"})
    freshdesk = make_client(recorder)

    _run(freshdesk.contacts.merge(MergeContactsRequest(primary_contact_id=1, secondary_contact_ids=[2, 3])))
    assert recorder.target == ("POST", "/api/v2/contacts/merge")
    assert json.loads(recorder.last.content) == {"primary_contact_id": 1, "secondary_contact_ids": [2, 3]}

    job = _run(freshdesk.contacts.export(ExportFields(default_fields=["name", "email"])))
    assert recorder.target == ("POST", "/api/v2/contacts/export")
    assert json.loads(recorder.last.content) == {"fields": {"default_fields": ["name", "email"], "custom_fields": []}}
    assert job.status == "in_progress"


def test_group_update_sends_only_set_fields(make_client):
    recorder = Recorder({"id": 2, "name": "Tier 3", "auto_ticket_assign": 1, "unassigned_for": "1h"})
    freshdesk = make_client(recorder)

    group = _run(freshdesk.groups.update(2, GroupUpdate(name="Tier 3")))
    assert recorder.target == ("PUT", "/api/v2/groups/2")
    assert json.loads(recorder.last.content) == {"name": "Tier 3"}
    assert group.unassigned_for == "1h"

    _run(freshdesk.groups.update(2, GroupUpdate(unassigned_for=UnassignedForOptions.TWO_HOURS)))
    assert json.loads(recorder.last.content) == {"unassigned_for": "2h"}


def test_group_create_keeps_assignment_defaults(make_client):
    recorder = Recorder({"id": 3, "name": "Tier 2"})
    _run(make_client(recorder).groups.create(GroupCreate(name="Tier 2")))
    assert json.loads(recorder.last.content) == {"name": "Tier 2", "auto_ticket_assign": 0, "unassigned_for": "30m"}


def test_contact_make_agent_returns_agent(make_client):
    recorder = Recorder({"id": 3, "occasional": False, "contact": {"name": "Jo", "email": "jo@x.com"}})
    agent = _run(make_client(recorder).contacts.make_agent(3))
    assert recorder.target == ("PUT", "/api/v2/contacts/3/make_agent")
    assert agent.contact.email == "jo@x.com"


def test_autocomplete_endpoints(make_client):
    recorder = Recorder([{"id": 1, "name": "Jo"}])
    freshdesk = make_client(recorder)
    agents = _run(freshdesk.agents.autocomplete("jo"))
    assert recorder.target == ("GET", "/api/v2/agents/autocomplete?term=jo")
    assert agents[0].name == "Jo"

    recorder.payload = {"companies": [{"id": 4, "name": "Acme"}]}
    companies = _run(freshdesk.companies.autocomplete("Ac"))
    assert recorder.target == ("GET", "/api/v2/companies/autocomplete?name=Ac")
    assert [c.name for c in companies] == ["Acme"]


def test_current_agent(make_client):
    recorder = Recorder({"id": 1, "ticket_scope": 1, "contact": {"name": "Me"}})
    agent = _run(make_client(recorder).me.view())
    assert recorder.target == ("GET", "/api/v2/agents/me")
    assert agent.contact.name == "Me"


def test_create_agent(make_client):
    recorder = Recorder({"id": 2})
    _run(make_client(recorder).agents.create(CreateAgentRequest(email="new@x.com", ticket_scope=1)))
    assert recorder.target == ("POST", "/api/v2/agents")
    assert json.loads(recorder.last.content)["email"] == "new@x.com"


def test_ticket_field_admin_paths(make_client):
    recorder = Recorder({"id": 9, "label": "Status"})
    freshdesk = make_client(recorder)
    _run(freshdesk.ticket_fields.view(9, include_sections=True))
    assert recorder.target == ("GET", "/api/v2/admin/ticket_fields/9?include=section")

    recorder.payload = [{"id": 9}]
    _run(freshdesk.ticket_fields.list_all(type="default_status"))
    assert recorder.target == ("GET", "/api/v2/ticket_fields?type=default_status")


def test_solutions_language_variants(make_client):
    recorder = Recorder({"id": 1, "name": "FAQ"})
    freshdesk = make_client(recorder)
    _run(freshdesk.solutions.view_category(1, language="fr"))
    assert recorder.target == ("GET", "/api/v2/solutions/categories/1/fr")

    recorder.payload = []
    _run(freshdesk.solutions.search("reset password"))
    assert recorder.target == ("GET", "/api/v2/search/solutions?term=reset%20password")


def test_canned_response_folder_create(make_client):
    recorder = Recorder({"id": 3, "name": "Billing"})
    folder = _run(make_client(recorder).canned_responses.create_folder(CannedResponseFolderCreate(name="Billing")))
    assert recorder.target == ("POST", "/api/v2/canned_response_folders")
    assert folder.name == "Billing"


def test_custom_object_records(make_client):
    recorder = Recorder({"display_id": "BK-1", "version": 2, "data": {"name": "x"}})
    freshdesk = make_client(recorder)

    record = _run(freshdesk.custom_objects.create_record(7, CreateRecordRequest(data={"name": "x"})))
    assert recorder.target == ("POST", "/api/v2/custom_objects/schemas/7/records")
    assert record.version == 2

    _run(freshdesk.custom_objects.update_record(7, "BK-1", UpdateRecordRequest(data={"name": "y"}, version=2)))
    assert recorder.target == ("PUT", "/api/v2/custom_objects/schemas/7/records/BK-1")
    assert json.loads(recorder.last.content) == {"data": {"name": "y"}, "version": 2}

    recorder.payload = {"count": 12}
    count = _run(freshdesk.custom_objects.count_records(7, ListAllRecordsRequest(sort=RecordSort("created_time"))))
    assert recorder.target == ("GET", "/api/v2/custom_objects/schemas/7/records/count?sort_by=created_time%3BASC")
    assert count == 12


def test_schema_list_is_unwrapped(make_client):
    recorder = Recorder({"schemas": [{"id": 1, "name": "Bookings"}, {"id": "2", "name": "Orders"}]})
    schemas = _run(make_client(recorder).custom_objects.list_schemas())
    assert recorder.target == ("GET", "/api/v2/custom_objects/schemas")
    assert [s.name for s in schemas] == ["Bookings", "Orders"]


def test_channel_ticket_import_keeps_timestamps(make_client):
    recorder = Recorder({"id": 77})
    request = ChannelCreateTicketRequest(
        email="old@x.com",
        subject="Imported",
        description="from the old helpdesk",
        status=TicketStatus.CLOSED,
        priority=TicketPriority.LOW,
        source=TicketSource.EMAIL,
        import_id=500,
        created_at="2019-05-01T10:00:00Z",
    )
    ticket = _run(make_client(recorder).channel.create_ticket(request))
    body = json.loads(recorder.last.content)
    assert recorder.target == ("POST", "/api/channel/v2/tickets")
    assert body["import_id"] == 500
    assert body["created_at"] == "2019-05-01T10:00:00Z"
    assert ticket.id == 77


def test_missing_resource_raises(make_client):
    recorder = Recorder({"code": "not_found"}, status=404)
    with pytest.raises(ResourceNotFoundError):
        _run(make_client(recorder).companies.view(404))


def _endpoint_cases():
    article = CreateArticleRequest(title="Reset", description="<p>Steps</p>")
    return [
        # tickets
        (lambda fd: fd.tickets.update(3, UpdateTicketRequest(status=TicketStatus.PENDING)), {}, ("PUT", "/api/v2/tickets/3")),
        (lambda fd: fd.tickets.create_outbound_email(CreateOutboundEmailRequest(
            email="to@x.com", email_config_id=1, subject="Hi", description="x")), {}, ("POST", "/api/v2/tickets/outbound_email")),
        (lambda fd: fd.tickets.view_archived(3), {}, ("GET", "/api/v2/tickets/archived/3")),
        (lambda fd: fd.tickets.view_summary(3), {}, ("GET", "/api/v2/tickets/3/summary")),
        (lambda fd: fd.tickets.update_summary(3, "short"), {}, ("PUT", "/api/v2/tickets/3/summary")),
        # conversations
        (lambda fd: fd.conversations.create_note(5, CreateNoteRequest(body="x")), {}, ("POST", "/api/v2/tickets/5/notes")),
        (lambda fd: fd.conversations.update_note(8, UpdateNoteRequest(body="x")), {}, ("PUT", "/api/v2/conversations/8")),
        # contacts
        (lambda fd: fd.contacts.view(1), {}, ("GET", "/api/v2/contacts/1")),
        (lambda fd: fd.contacts.create(ContactCreateRequest(name="A", email="a@x.com")), {}, ("POST", "/api/v2/contacts")),
        (lambda fd: fd.contacts.update(1, UpdateContactRequest(job_title="CTO")), {}, ("PUT", "/api/v2/contacts/1")),
        (lambda fd: fd.contacts.autocomplete("an"), [], ("GET", "/api/v2/contacts/autocomplete?term=an")),
        (lambda fd: fd.contacts.view_export("e1"), {}, ("GET", "/api/v2/contacts/export/e1")),
        (lambda fd: fd.contacts.list_fields(), [], ("GET", "/api/v2/contact_fields")),
        (lambda fd: fd.contacts.view_field(2), {}, ("GET", "/api/v2/admin/contact_fields/2")),
        (lambda fd: fd.contacts.create_field(ContactFieldCreate(label="Tier", label_for_customers="Tier", type="custom_text")), {},
         ("POST", "/api/v2/admin/contact_fields")),
        (lambda fd: fd.contacts.update_field(2, {"label": "Tier"}), {}, ("PUT", "/api/v2/admin/contact_fields/2")),
        # agents
        (lambda fd: fd.agents.view(6), {}, ("GET", "/api/v2/agents/6")),
        (lambda fd: fd.agents.update(6, UpdateAgentRequest(occasional=True)), {}, ("PUT", "/api/v2/agents/6")),
        # companies
        (lambda fd: fd.companies.create(CreateCompanyRequest(name="Acme")), {}, ("POST", "/api/v2/companies")),
        (lambda fd: fd.companies.update(2, UpdateCompanyRequest(note="vip")), {}, ("PUT", "/api/v2/companies/2")),
        (lambda fd: fd.companies.export(ExportFields(default_fields=["name"])), {}, ("POST", "/api/v2/companies/export")),
        (lambda fd: fd.companies.view_export("e2"), {}, ("GET", "/api/v2/companies/export/e2")),
        (lambda fd: fd.companies.list_fields(), [], ("GET", "/api/v2/company_fields")),
        # groups, roles, products
        (lambda fd: fd.groups.view(2), {}, ("GET", "/api/v2/groups/2")),
        (lambda fd: fd.groups.create(GroupCreate(name="Tier 2")), {}, ("POST", "/api/v2/groups")),
        (lambda fd: fd.groups.update(2, GroupUpdate(name="Tier 3")), {}, ("PUT", "/api/v2/groups/2")),
        (lambda fd: fd.roles.view(4), {}, ("GET", "/api/v2/roles/4")),
        (lambda fd: fd.products.view(4), {}, ("GET", "/api/v2/products/4")),
        # canned responses
        (lambda fd: fd.canned_responses.view(1), {}, ("GET", "/api/v2/canned_responses/1")),
        (lambda fd: fd.canned_responses.create(CannedResponseCreate(
            title="Thanks", content_html="<p>Thanks</p>", folder_id=1, visibility=0)), {}, ("POST", "/api/v2/canned_responses")),
        (lambda fd: fd.canned_responses.update(1, CannedResponseUpdate(title="Ta")), {}, ("PUT", "/api/v2/canned_responses/1")),
        (lambda fd: fd.canned_responses.list_folders(), [], ("GET", "/api/v2/canned_response_folders")),
        (lambda fd: fd.canned_responses.view_folder(3), {}, ("GET", "/api/v2/canned_response_folders/3")),
        (lambda fd: fd.canned_responses.update_folder(3, CannedResponseFolderCreate(name="B")), {}, ("PUT", "/api/v2/canned_response_folders/3")),
        # ticket fields and sections
        (lambda fd: fd.ticket_fields.create(CreateTicketFieldRequest(
            label="Area", label_for_customers="Area", type="custom_text")), {}, ("POST", "/api/v2/admin/ticket_fields")),
        (lambda fd: fd.ticket_fields.update(9, UpdateTicketFieldRequest(position=2)), {}, ("PUT", "/api/v2/admin/ticket_fields/9")),
        (lambda fd: fd.ticket_fields.list_sections(9), [], ("GET", "/api/v2/admin/ticket_fields/9/sections")),
        (lambda fd: fd.ticket_fields.view_section(9, 1), {}, ("GET", "/api/v2/admin/ticket_fields/9/sections/1")),
        (lambda fd: fd.ticket_fields.create_section(9, CreateSectionRequest(label="S", choice_ids=[1])), {},
         ("POST", "/api/v2/admin/ticket_fields/9/sections")),
        (lambda fd: fd.ticket_fields.update_section(9, 1, UpdateSectionRequest(label="T")), {},
         ("PUT", "/api/v2/admin/ticket_fields/9/sections/1")),
        # solutions
        (lambda fd: fd.solutions.list_categories(), [], ("GET", "/api/v2/solutions/categories")),
        (lambda fd: fd.solutions.create_category(CreateCategoryRequest(name="FAQ")), {}, ("POST", "/api/v2/solutions/categories")),
        (lambda fd: fd.solutions.create_category_translation(1, "de", CreateCategoryRequest(name="FAQ")), {},
         ("POST", "/api/v2/solutions/categories/1/de")),
        (lambda fd: fd.solutions.update_category(1, UpdateCategoryRequest(name="Help"), language="fr"), {},
         ("PUT", "/api/v2/solutions/categories/1/fr")),
        (lambda fd: fd.solutions.list_folders(1), [], ("GET", "/api/v2/solutions/categories/1/folders")),
        (lambda fd: fd.solutions.view_folder(2), {}, ("GET", "/api/v2/solutions/folders/2")),
        (lambda fd: fd.solutions.create_folder(1, CreateFolderRequest(name="Billing")), {},
         ("POST", "/api/v2/solutions/categories/1/folders")),
        (lambda fd: fd.solutions.create_folder_translation(2, "de", CreateFolderRequest(name="Rechnung")), {},
         ("POST", "/api/v2/solutions/folders/2/de")),
        (lambda fd: fd.solutions.update_folder(2, UpdateFolderRequest(name="B")), {}, ("PUT", "/api/v2/solutions/folders/2")),
        (lambda fd: fd.solutions.view_article(3, language="fr"), {}, ("GET", "/api/v2/solutions/articles/3/fr")),
        (lambda fd: fd.solutions.create_article(2, article), {}, ("POST", "/api/v2/solutions/folders/2/articles")),
        (lambda fd: fd.solutions.create_article_translation(3, "de", article), {}, ("POST", "/api/v2/solutions/articles/3/de")),
        (lambda fd: fd.solutions.update_article(3, UpdateArticleRequest(title="New")), {}, ("PUT", "/api/v2/solutions/articles/3")),
        # custom objects and channel
        (lambda fd: fd.custom_objects.view_schema(7), {}, ("GET", "/api/v2/custom_objects/schemas/7")),
        (lambda fd: fd.custom_objects.view_record(7, "BK-1"), {}, ("GET", "/api/v2/custom_objects/schemas/7/records/BK-1")),
        (lambda fd: fd.channel.create_reply(5, ChannelCreateReplyRequest(body="x")), {}, ("POST", "/api/channel/v2/tickets/5/reply")),
        (lambda fd: fd.channel.create_note(5, ChannelCreateNoteRequest(body="x")), {}, ("POST", "/api/channel/v2/tickets/5/notes")),
    ]


@pytest.mark.parametrize("call, payload, expected", _endpoint_cases())
def test_endpoint_map(make_client, call, payload, expected):
    recorder = Recorder(payload)
    _run(call(make_client(recorder)))
    assert recorder.target == expected


@pytest.mark.parametrize("listing, path", [
    (lambda fd: fd.tickets.list_conversations(3), "/api/v2/tickets/3/conversations"),
    (lambda fd: fd.tickets.list_time_entries(3), "/api/v2/tickets/3/time_entries"),
    (lambda fd: fd.tickets.list_satisfaction_ratings(3), "/api/v2/tickets/3/satisfaction_ratings"),
    (lambda fd: fd.tickets.list_archived_conversations(3), "/api/v2/tickets/archived/3/conversations"),
    (lambda fd: fd.agents.list_all(), "/api/v2/agents"),
    (lambda fd: fd.groups.list_all(), "/api/v2/groups"),
    (lambda fd: fd.roles.list_all(), "/api/v2/roles"),
    (lambda fd: fd.products.list_all(), "/api/v2/products"),
    (lambda fd: fd.canned_responses.list_folder_responses(3), "/api/v2/canned_response_folders/3/responses"),
    (lambda fd: fd.solutions.list_articles(2), "/api/v2/solutions/folders/2/articles"),
])
def test_list_endpoints(make_client, listing, path):
    recorder = Recorder([{"id": 1}])

    async def collect():
        return [item async for item in listing(make_client(recorder))]

    items = _run(collect())
    assert [item.id for item in items] == [1]
    assert recorder.last.method == "GET"
    assert recorder.last.url.path == path
