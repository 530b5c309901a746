"""Tests for Bitbucket provider."""

import base64

import pytest
import requests
import responses
from responses import matchers

from bitbucket_backup.__util__ import AbortError, InvalidRecordError, UnknownTransportError
from bitbucket_backup.providers.bitbucket import BitbucketClient, BitbucketError
from bitbucket_backup.repository import ScmKind

FIRST_PAGE = "https://api.bitbucket.org/2.0/repositories/alice/"
SECOND_PAGE = "https://api.bitbucket.org/2.0/repositories/alice/?page=2"


def _repo(slug: str, updated_on: str, scm: str = "git", **extra) -> dict:
    data = {
        "slug": slug,
        "name": slug,
        "full_name": f"alice/{slug}",
        "scm": scm,
        "type": "repository",
        "is_private": True,
        "has_wiki": False,
        "updated_on": updated_on,
        "links": {
            "clone": [
                {"name": "https", "href": f"https://alice@bitbucket.org/alice/{slug}.git"},
                {"name": "ssh", "href": f"git@bitbucket.org:alice/{slug}.git"},
            ]
        },
    }
    data.update(extra)
    return data


class TestListRepositories:
    @responses.activate
    def test_follows_pagination(self):
        responses.add(
            responses.GET,
            FIRST_PAGE,
            match=[matchers.query_param_matcher({})],
            json={
                "pagelen": 1,
                "values": [_repo("old", "2018-01-01T00:00:00+00:00")],
                "next": SECOND_PAGE,
            },
            status=200,
        )
        responses.add(
            responses.GET,
            SECOND_PAGE,
            json={
                "pagelen": 1,
                "values": [_repo("new", "2020-01-01T00:00:00+00:00", scm="hg")],
            },
            status=200,
        )

        records = BitbucketClient("alice", "pw").list_repositories("alice")

        assert len(responses.calls) == 2
        # Most recently updated first
        assert [r.slug for r in records] == ["new", "old"]
        assert records[0].scm is ScmKind.MERCURIAL
        assert records[1].clone_endpoints["ssh"] == "git@bitbucket.org:alice/old.git"

    @responses.activate
    def test_sends_basic_auth(self):
        responses.add(responses.GET, FIRST_PAGE, json={"values": []}, status=200)

        BitbucketClient("alice", "pw").list_repositories("alice")

        expected = "Basic " + base64.b64encode(b"alice:pw").decode()
        assert responses.calls[0].request.headers["Authorization"] == expected

    @responses.activate
    def test_anonymous_without_password(self):
        responses.add(responses.GET, FIRST_PAGE, json={"values": []}, status=200)

        assert BitbucketClient("alice").list_repositories("alice") == []
        assert "Authorization" not in responses.calls[0].request.headers

    @pytest.mark.parametrize(
        "status,message",
        [
            (401, "Authentication failed"),
            (403, "Access denied"),
            (404, "not found"),
            (500, "Unexpected HTTP status code: 500"),
        ],
    )
    @responses.activate
    def test_http_errors(self, status, message):
        responses.add(responses.GET, FIRST_PAGE, json={}, status=status)

        with pytest.raises(BitbucketError, match=message) as excinfo:
            BitbucketClient("alice", "pw").list_repositories("alice")
        assert isinstance(excinfo.value, AbortError)

    @responses.activate
    def test_connection_error(self):
        responses.add(
            responses.GET, FIRST_PAGE, body=requests.ConnectionError("refused")
        )

        with pytest.raises(BitbucketError, match="refused"):
            BitbucketClient("alice", "pw").list_repositories("alice")

    @responses.activate
    def test_invalid_json(self):
        responses.add(responses.GET, FIRST_PAGE, body="<html>", status=200)

        with pytest.raises(BitbucketError, match="Invalid JSON"):
            BitbucketClient("alice", "pw").list_repositories("alice")

    @responses.activate
    def test_unknown_clone_link_is_an_error(self):
        bad = _repo("a", "2020-01-01T00:00:00+00:00")
        bad["links"]["clone"].append({"name": "svn", "href": "svn://x"})
        responses.add(responses.GET, FIRST_PAGE, json={"values": [bad]}, status=200)

        with pytest.raises(UnknownTransportError):
            BitbucketClient("alice", "pw").list_repositories("alice")

    @responses.activate
    def test_malformed_repository_is_an_abort(self):
        bad = _repo("a", "2020-01-01T00:00:00+00:00")
        del bad["slug"]
        responses.add(responses.GET, FIRST_PAGE, json={"values": [bad]}, status=200)

        with pytest.raises(InvalidRecordError) as excinfo:
            BitbucketClient("alice", "pw").list_repositories("alice")
        assert isinstance(excinfo.value, AbortError)

    def test_requires_workspace(self):
        with pytest.raises(BitbucketError, match="No account"):
            BitbucketClient().list_repositories("")
