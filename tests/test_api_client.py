"""
API client tests against a fake requests session
"""
import json

import pytest
import requests

from Client_module.api_client import (
    ApiError, AssemblyApiClient, GENERIC_ERROR_MESSAGE, NETWORK_ERROR_MESSAGE
)


class FakeResponse:
    def __init__(self, status_code=200, body=None, raw=None):
        self.status_code = status_code
        if raw is not None:
            self.content = raw
        else:
            self.content = b'' if body is None else json.dumps(body).encode()

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.content)


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(*responses, token=None):
    session = FakeSession(*responses)
    client = AssemblyApiClient('http://api.test/api/', token_provider=lambda: token, session=session)
    return client, session


def test_list_members_sends_filters():
    client, session = make_client(FakeResponse(body=[{'id': 1}]))

    assert client.list_members(session_name='Budget Session') == [{'id': 1}]

    method, url, kwargs = session.calls[0]
    assert (method, url) == ('GET', 'http://api.test/api/members')
    assert kwargs['params'] == {'sessionName': 'Budget Session'}
    assert 'Authorization' not in kwargs['headers']


def test_token_is_sent_as_bearer():
    client, session = make_client(FakeResponse(body={'message': 'Member deleted successfully'}), token='tok')

    client.delete_member(5)

    method, url, kwargs = session.calls[0]
    assert (method, url) == ('DELETE', 'http://api.test/api/members/5')
    assert kwargs['headers']['Authorization'] == 'Bearer tok'


def test_server_message_is_surfaced():
    client, _ = make_client(FakeResponse(401, {'status': 'error', 'message': 'Invalid credentials'}))

    with pytest.raises(ApiError) as exc_info:
        client.login('a@b.c', 'wrong')

    assert exc_info.value.message == 'Invalid credentials'
    assert exc_info.value.is_unauthorized


def test_fallback_message_when_body_has_none():
    client, _ = make_client(FakeResponse(500, raw=b'<html>oops</html>'))

    with pytest.raises(ApiError) as exc_info:
        client.get_member(1)

    assert exc_info.value.message == 'Failed to load member'
    assert exc_info.value.status_code == 500


def test_network_failure():
    client, _ = make_client(requests.ConnectionError('refused'))

    with pytest.raises(ApiError) as exc_info:
        client.get_filter_options()

    assert exc_info.value.message == NETWORK_ERROR_MESSAGE
    assert exc_info.value.status_code is None


def test_unparseable_success_body():
    client, _ = make_client(FakeResponse(200, raw=b'not json'))

    with pytest.raises(ApiError) as exc_info:
        client.list_members()

    assert exc_info.value.message == GENERIC_ERROR_MESSAGE


def test_login_returns_token():
    client, session = make_client(FakeResponse(body={'token': 'abc', 'expiresIn': 86400}))

    assert client.login('a@b.c', 'pw') == 'abc'
    assert session.calls[0][2]['json'] == {'email': 'a@b.c', 'password': 'pw'}


def test_create_without_attachments_sends_json():
    client, session = make_client(FakeResponse(201, {'id': 7}), token='tok')

    assert client.create_member({'name': 'Asha'}) == {'id': 7}

    _, _, kwargs = session.calls[0]
    assert kwargs['json'] == {'name': 'Asha'}
    assert 'files' not in kwargs


def test_update_with_attachment_sends_multipart(tmp_path):
    photo = tmp_path / 'photo.png'
    photo.write_bytes(b'png')
    client, session = make_client(FakeResponse(200, {'id': 7}), token='tok')

    client.update_member(7, {'timeTaken': 3.5, 'partyName': None}, image=photo)

    method, url, kwargs = session.calls[0]
    assert (method, url) == ('PUT', 'http://api.test/api/members/7')
    assert kwargs['data'] == {'timeTaken': '3.5', 'partyName': ''}
    assert list(kwargs['files']) == ['image']
    assert kwargs['files']['image'][0] == 'photo.png'


def test_missing_attachment_file(tmp_path):
    client, session = make_client(token='tok')

    with pytest.raises(ApiError):
        client.create_member({'name': 'Asha'}, party_logo=tmp_path / 'missing.png')

    assert session.calls == []


def test_resolve_media_url():
    client, _ = make_client()

    assert client.origin == 'http://api.test'
    assert client.resolve_media_url('/uploads/members/a.png') == 'http://api.test/uploads/members/a.png'
    assert client.resolve_media_url('https://cdn.test/a.png') == 'https://cdn.test/a.png'
    assert client.resolve_media_url('') is None
