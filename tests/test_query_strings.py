from datetime import datetime, timezone

from freshdesk_api.agents import AgentState, ListAllAgentsRequest
from freshdesk_api.common import SortOrder, build_url, encode_query
from freshdesk_api.contacts import ContactState, ListAllContactsRequest
from freshdesk_api.custom_objects import FilterOperator, ListAllRecordsRequest, RecordFilter, RecordSort
from freshdesk_api.tickets import (
    ListAllTicketsFilter,
    ListAllTicketsRequest,
    TicketIncludes,
    TicketOrderBy,
    search_query,
)


def test_blank_list_requests_have_bare_urls():
    assert ListAllTicketsRequest().url == "/api/v2/tickets"
    assert ListAllAgentsRequest().url == "/api/v2/agents"
    assert ListAllContactsRequest().url == "/api/v2/contacts"


def test_ticket_list_request_encodes_only_set_values():
    request = ListAllTicketsRequest(
        filter=ListAllTicketsFilter.WATCHING,
        updated_since=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        order_by=TicketOrderBy.UPDATED_AT,
        order_type=SortOrder.DESC,
        includes=[TicketIncludes.REQUESTER, TicketIncludes.STATS],
    )
    assert request.url == (
        "/api/v2/tickets?filter=watching"
        "&updated_since=2024-01-02T03%3A04%3A05Z"
        "&order_by=updated_at&order_type=desc"
        "&include=requester%2Cstats"
    )


def test_agent_and_contact_filters():
    assert ListAllAgentsRequest(email="a@b.com", state=AgentState.FULLTIME).url == (
        "/api/v2/agents?email=a%40b.com&state=fulltime"
    )
    assert ListAllContactsRequest(company_id=12, state=ContactState.VERIFIED).url == (
        "/api/v2/contacts?company_id=12&state=verified"
    )


def test_record_sort_query():
    request = ListAllRecordsRequest(sort=RecordSort("created_time", SortOrder.ASC))
    assert request.get_query() == "?sort_by=created_time%3BASC"


def test_record_filter_query():
    request = ListAllRecordsRequest(filters=[
        RecordFilter("created_time", FilterOperator.EQUALS, "2024-08-26T18:00:00.000Z"),
        RecordFilter("age", FilterOperator.GREATER_THAN, "35"),
        RecordFilter("updated_time", FilterOperator.GREATER_THAN, "2020-09-23T22:35:45.000Z"),
    ])
    assert request.get_query() == (
        "?created_time=2024-08-26T18%3A00%3A00.000Z"
        "&age%5Bgt%5D=35"
        "&updated_time%5Bgt%5D=2020-09-23T22%3A35%3A45.000Z"
    )


def test_empty_record_request_has_no_query():
    assert ListAllRecordsRequest().get_query() == ""


def test_encode_query_drops_unset_values():
    assert encode_query({"a": None, "b": False, "c": 0}) == "b=false&c=0"
    assert build_url("/api/v2/tickets", {"page": None}) == "/api/v2/tickets"
    assert build_url("/api/v2/search/tickets?query=x", {"page": 2}) == "/api/v2/search/tickets?query=x&page=2"


def test_search_query_is_quoted_once():
    assert search_query("priority:3") == '"priority:3"'
    assert search_query('"priority:3"') == '"priority:3"'
