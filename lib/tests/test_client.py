from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from pasty_client import (
    ApiError,
    DecodeError,
    Metadata,
    NetworkError,
    PfEncryption,
    RequestError,
    UnauthenticatedClient,
    UrlParseError,
    connect,
)
from pasty_client.config_types import ClientConfig
from pasty_client.transport import Transport

HOST = "https://pasty.example.test"


def _client(handler, host: str = HOST) -> tuple[UnauthenticatedClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
    return UnauthenticatedClient(host, transport=Transport(http_client=http_client)), seen


def _call(client, coro):
    async def _go():
        async with client:
            return await coro

    return asyncio.run(_go())


def _paste_json(**overrides) -> dict:
    data = {"id": "abc", "content": "hello", "created": 1000, "metadata": None}
    data.update(overrides)
    return data


@pytest.mark.parametrize("host", [
        "",
        "pasty.lus.pm",
        "ftp://pasty.lus.pm",
        "http://",
        "https://h.test:99999",
        "http://a b",
    ])
def test_invalid_host_raises_url_parse_error(host) -> None:
    with pytest.raises(UrlParseError) as exc:
        UnauthenticatedClient(host)
    assert str(exc.value).startswith("parsing url: ")


def test_valid_host_does_no_io() -> None:
    def _fail(_request):
        raise AssertionError("no request expected")

    client, seen = _client(_fail, host="http://127.0.0.1:8080")
    assert client.host.host == "127.0.0.1"
    assert seen == []
    asyncio.run(client.aclose())


def test_application_information() -> None:
    def _handler(request):
        return httpx.Response(
            200,
            json={"modificationTokens": True, "pasteLifetime": -1, "reports": False, "version": "v0.4.0"},
        )

    client, seen = _client(_handler)
    info = _call(client, client.application_information())

    assert str(seen[0].url) == f"{HOST}/api/v2/info"
    assert seen[0].method == "GET"
    assert info.modification_tokens is True
    assert info.paste_lifetime == -1
    assert info.reports is False
    assert info.version == "v0.4.0"


def test_paste_gets_exact_path_without_body_or_auth() -> None:
    client, seen = _client(lambda request: httpx.Response(200, json=_paste_json(id="xyz")))
    paste = _call(client, client.paste("xyz"))

    request = seen[0]
    assert request.method == "GET"
    assert str(request.url) == f"{HOST}/api/v2/pastes/xyz"
    assert request.content == b""
    assert "authorization" not in request.headers
    assert paste.id == "xyz"
    assert paste.metadata is None


def test_join_replaces_host_path_and_query() -> None:
    client, seen = _client(
        lambda request: httpx.Response(200, json=_paste_json()),
        host="https://pasty.example.test/some/base/?x=1",
    )
    _call(client, client.paste("abc"))
    assert str(seen[0].url) == f"{HOST}/api/v2/pastes/abc"


def test_create_paste_sends_null_metadata_and_decodes_flat_response() -> None:
    def _handler(request):
        return httpx.Response(200, json=_paste_json(modificationToken="tok"))

    client, seen = _client(_handler)
    created = _call(client, client.create_paste("hello", None))

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == f"{HOST}/api/v2/pastes"
    assert json.loads(request.content) == {"content": "hello", "metadata": None}
    assert created.paste.id == "abc"
    assert created.paste.content == "hello"
    assert created.paste.created == 1000
    assert created.modification_token == "tok"


def test_create_paste_sends_encryption_metadata() -> None:
    client, seen = _client(lambda request: httpx.Response(200, json=_paste_json(modificationToken="tok")))
    metadata = Metadata(pf_encryption=PfEncryption(alg="AES", iv="abc"))
    _call(client, client.create_paste("hello", metadata))

    assert json.loads(seen[0].content) == {
        "content": "hello",
        "metadata": {"pf_encryption": {"alg": "AES", "iv": "abc"}},
    }


def test_missing_paste_is_api_error() -> None:
    client, _ = _client(lambda request: httpx.Response(404, text="not found"))

    with pytest.raises(ApiError) as exc:
        _call(client, client.paste("missing"))

    assert exc.value.status_code == 404
    assert exc.value.details == "not found"
    assert isinstance(exc.value, RequestError)


def test_server_error_is_same_kind_as_client_error() -> None:
    client, _ = _client(lambda request: httpx.Response(503))

    with pytest.raises(RequestError) as exc:
        _call(client, client.application_information())

    assert isinstance(exc.value, ApiError)
    assert exc.value.status_code == 503


def test_schema_mismatch_is_decode_error() -> None:
    client, _ = _client(lambda request: httpx.Response(200, json={"id": 1}))

    with pytest.raises(DecodeError):
        _call(client, client.paste("abc"))


def test_bool_timestamp_is_decode_error() -> None:
    client, _ = _client(lambda request: httpx.Response(200, json=_paste_json(created=True)))

    with pytest.raises(DecodeError) as exc:
        _call(client, client.paste("abc"))

    assert "created" in str(exc.value)


def test_invalid_json_is_decode_error() -> None:
    client, _ = _client(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(DecodeError):
        _call(client, client.application_information())


def test_transport_failure_is_network_error() -> None:
    def _handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = _client(_handler)

    with pytest.raises(NetworkError) as exc:
        _call(client, client.paste("abc"))

    assert isinstance(exc.value, RequestError)
    assert isinstance(exc.value.__cause__, httpx.ConnectError)


def test_control_character_in_id_is_url_parse_error() -> None:
    client, seen = _client(lambda request: httpx.Response(200, json=_paste_json()))

    with pytest.raises(UrlParseError):
        _call(client, client.paste("bad\nid"))

    assert seen == []


def test_update_paste_adds_only_bearer_header() -> None:
    client, seen = _client(
        lambda request: httpx.Response(200, json=_paste_json(modificationToken="tok"))
        if request.method == "POST"
        else httpx.Response(200)
    )
    authed = client.authenticate("secret-token")

    async def _run():
        async with authed:
            await client.create_paste("hello")
            return await authed.update_paste("abc", "hello")

    assert asyncio.run(_run()) is None

    create_req, update_req = seen
    assert update_req.method == "PATCH"
    assert str(update_req.url) == f"{HOST}/api/v2/pastes/abc"
    assert update_req.headers["authorization"] == "Bearer secret-token"
    assert json.loads(update_req.content) == json.loads(create_req.content)
    assert set(update_req.headers.keys()) - {"authorization"} == set(create_req.headers.keys())


def test_delete_paste_success_returns_none() -> None:
    client, seen = _client(lambda request: httpx.Response(204))
    authed = client.authenticate("tok")

    assert _call(authed, authed.delete_paste("abc")) is None
    assert seen[0].method == "DELETE"
    assert str(seen[0].url) == f"{HOST}/api/v2/pastes/abc"
    assert seen[0].headers["authorization"] == "Bearer tok"
    assert seen[0].content == b""


def test_delete_paste_error_status_is_not_decoded() -> None:
    client, _ = _client(lambda request: httpx.Response(401, text="{not json"))
    authed = client.authenticate("expired")

    with pytest.raises(ApiError) as exc:
        _call(authed, authed.delete_paste("abc"))

    assert not isinstance(exc.value, DecodeError)
    assert exc.value.status_code == 401


def test_authenticated_client_shares_inner_client() -> None:
    client, seen = _client(lambda request: httpx.Response(200, json=_paste_json()))
    authed = client.authenticate("tok")

    assert authed.inner is client
    assert authed.token == "tok"
    _call(authed, authed.inner.paste("abc"))
    assert "authorization" not in seen[0].headers


def test_connect_returns_authenticated_client_when_token_set() -> None:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
    client = connect(ClientConfig(host=HOST, token="tok"), transport=Transport(http_client=http_client))

    assert client.token == "tok"
    assert client.inner.host.host == "pasty.example.test"
    asyncio.run(client.aclose())


def test_connect_without_token_is_unauthenticated() -> None:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
    client = connect(ClientConfig(host=HOST), transport=Transport(http_client=http_client))

    assert isinstance(client, UnauthenticatedClient)
    asyncio.run(client.aclose())


def test_default_transport_user_agent() -> None:
    transport = Transport(user_agent="pasty-client/9.9.9")
    request = transport.build_request("GET", httpx.URL(f"{HOST}/api/v2/info"))

    assert request.headers["user-agent"] == "pasty-client/9.9.9"
    asyncio.run(transport.aclose())
