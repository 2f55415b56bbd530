from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from urllib.parse import parse_qs

import httpx
import pytest

from qeasy.adapters.qoo10 import Qoo10Client, Qoo10ExistenceProbe, SessionManager
from qeasy.domain.errors import AuthenticationFailedError

if TYPE_CHECKING:
    from collections.abc import Callable

    from qeasy.adapters.http_resilience import ClientFactory
    from qeasy.config.qoo10 import Qoo10Config

    MakeFactory = Callable[[Callable[[httpx.Request], httpx.Response]], ClientFactory]
    PageSource = Callable[[int], httpx.Response]


def _goods(*seller_codes: str | None) -> httpx.Response:
    items = [
        {"SellerCode": code, "ItemCode": str(1000 + index), "ItemTitle": "item"}
        for index, code in enumerate(seller_codes)
    ]
    return httpx.Response(
        200,
        json={"ResultCode": 0, "ResultMsg": "SUCCESS", "ResultObject": {"Items": items}},
    )


class FakeQoo10:
    def __init__(self, pages: PageSource) -> None:
        self.pages = pages
        self.page_requests: list[httpx.Request] = []
        self.auth_requests = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("CertificationAPI.CreateCertificationKey"):
            self.auth_requests += 1
            return httpx.Response(
                200,
                json={"ResultCode": 0, "ResultMsg": "SUCCESS", "ResultObject": "session-token"},
            )
        assert request.url.path.endswith("ItemsLookup.GetAllGoodsInfo")
        self.page_requests.append(request)
        form = parse_qs(request.content.decode(), keep_blank_values=True)
        return self.pages(int(form["Page"][0]))

    @property
    def pages_requested(self) -> list[int]:
        return [
            int(parse_qs(request.content.decode())["Page"][0]) for request in self.page_requests
        ]


def _probe(config: Qoo10Config, factory: ClientFactory) -> Qoo10ExistenceProbe:
    client = Qoo10Client(config=config, client_factory=factory)
    return Qoo10ExistenceProbe(
        client=client,
        sessions=SessionManager(client=client, config=config),
    )


def test_matches_seller_codes_and_ignores_foreign_ones(
    qoo10_config: Qoo10Config,
    make_client_factory: MakeFactory,
) -> None:
    fake = FakeQoo10(lambda page: _goods("AMZ-B000000001", "OTHER-X") if page == 1 else _goods())
    probe = _probe(qoo10_config, make_client_factory(fake))

    result = asyncio.run(probe.find_existing({"B000000001", "B000000002"}))

    assert result.existing == frozenset({"B000000001"})
    assert result.complete is True
    assert fake.pages_requested == [1, 2]


def test_legacy_bare_seller_codes_match(
    qoo10_config: Qoo10Config,
    make_client_factory: MakeFactory,
) -> None:
    fake = FakeQoo10(lambda page: _goods("b000000002", None, "") if page == 1 else _goods())
    probe = _probe(qoo10_config, make_client_factory(fake))

    result = asyncio.run(probe.find_existing({"B000000002"}))

    assert result.existing == frozenset({"B000000002"})


def test_oddly_typed_listing_does_not_hide_the_rest_of_the_page(
    qoo10_config: Qoo10Config,
    make_client_factory: MakeFactory,
) -> None:
    def pages(page: int) -> httpx.Response:
        if page > 1:
            return _goods()
        items: list[object] = [
            {"SellerCode": 12345, "ItemCode": 9001, "ItemTitle": 777},
            None,
            {"SellerCode": "AMZ-B000000001", "ItemTitle": ["not", "a", "title"]},
        ]
        return httpx.Response(
            200,
            json={"ResultCode": 0, "ResultMsg": "SUCCESS", "ResultObject": {"Items": items}},
        )

    fake = FakeQoo10(pages)
    probe = _probe(qoo10_config, make_client_factory(fake))

    result = asyncio.run(probe.find_existing({"B000000001"}))

    assert result.existing == frozenset({"B000000001"})
    assert result.complete is True
    assert fake.pages_requested == [1]


def test_stops_as_soon_as_every_target_is_found(
    qoo10_config: Qoo10Config,
    make_client_factory: MakeFactory,
) -> None:
    fake = FakeQoo10(lambda page: _goods(f"AMZ-B00000000{page}"))
    probe = _probe(qoo10_config, make_client_factory(fake))

    result = asyncio.run(probe.find_existing({"B000000001", "B000000002"}))

    assert result.existing == frozenset({"B000000001", "B000000002"})
    assert result.complete is True
    assert fake.pages_requested == [1, 2]


def test_page_cap_marks_result_incomplete(
    qoo10_config: Qoo10Config,
    make_client_factory: MakeFactory,
) -> None:
    fake = FakeQoo10(lambda page: _goods(f"AMZ-OTHER{page:05d}"))
    probe = _probe(qoo10_config, make_client_factory(fake))

    result = asyncio.run(probe.find_existing({"B000000001"}))

    assert fake.pages_requested == list(range(1, 11))
    assert result.existing == frozenset()
    assert result.complete is False


def test_failed_page_keeps_partial_result(
    qoo10_config: Qoo10Config,
    make_client_factory: MakeFactory,
) -> None:
    def pages(page: int) -> httpx.Response:
        if page == 1:
            return _goods("AMZ-B000000001")
        return httpx.Response(502, text="Bad Gateway")

    fake = FakeQoo10(pages)
    probe = _probe(qoo10_config, make_client_factory(fake))

    result = asyncio.run(probe.find_existing({"B000000001", "B000000002"}))

    assert result.existing == frozenset({"B000000001"})
    assert result.complete is False
    assert fake.pages_requested == [1, 2]


def test_lookup_uses_session_token(
    qoo10_config: Qoo10Config,
    make_client_factory: MakeFactory,
) -> None:
    fake = FakeQoo10(lambda page: _goods())
    probe = _probe(qoo10_config, make_client_factory(fake))

    asyncio.run(probe.find_existing({"B000000001"}))

    (request,) = fake.page_requests
    assert request.headers["GiosisCertificationKey"] == "session-token"
    assert request.headers["QAPIVersion"] == "1.0"
    form = parse_qs(request.content.decode(), keep_blank_values=True)
    assert form == {"returnType": ["application/json"], "Page": ["1"], "ItemStatus": [""]}
    assert fake.auth_requests == 1


def test_empty_targets_make_no_request(
    qoo10_config: Qoo10Config,
    make_client_factory: MakeFactory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("unexpected request")

    probe = _probe(qoo10_config, make_client_factory(handler))

    assert asyncio.run(probe.find_existing(set())).existing == frozenset()


def test_session_failure_propagates(
    qoo10_config: Qoo10Config,
    make_client_factory: MakeFactory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ResultCode": -1, "ResultMsg": "Denied"})

    probe = _probe(qoo10_config, make_client_factory(handler))

    with pytest.raises(AuthenticationFailedError):
        asyncio.run(probe.find_existing({"B000000001"}))
