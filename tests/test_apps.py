"""Tests for the app descriptor, scopes and the status payload."""

import pytest

from mastoclient.apps import OOB_REDIRECT, AppBuilder, Scope
from mastoclient.models import Visibility
from mastoclient.status_builder import StatusBuilder


class TestScope:
    @pytest.mark.parametrize(
        "scope,wire",
        [
            (Scope.READ, "read"),
            (Scope.WRITE, "write"),
            (Scope.FOLLOW, "follow"),
            (Scope.READ_WRITE, "read write"),
            (Scope.READ_FOLLOW, "read follow"),
            (Scope.WRITE_FOLLOW, "write follow"),
            (Scope.READ_WRITE_FOLLOW, "read write follow"),
        ],
    )
    def test_wire_values(self, scope, wire):
        assert scope.value == wire
        assert str(scope) == wire

    def test_parse_canonicalizes_order(self):
        assert Scope.parse("follow read") is Scope.READ_FOLLOW
        assert Scope.parse("follow,write,read") is Scope.READ_WRITE_FOLLOW

    @pytest.mark.parametrize("text", ["", "admin", "read push"])
    def test_parse_rejects_unknown(self, text):
        with pytest.raises(ValueError):
            Scope.parse(text)


class TestAppBuilder:
    def test_form_without_website(self):
        app = AppBuilder(client_name="t", redirect_uris=OOB_REDIRECT)
        assert app.to_form() == {
            "client_name": "t",
            "redirect_uris": OOB_REDIRECT,
            "scopes": "read",
        }

    def test_form_with_website(self):
        app = AppBuilder(
            client_name="t",
            redirect_uris="https://a.example/cb,https://b.example/cb",
            scopes=Scope.WRITE_FOLLOW,
            website="https://t.example",
        )
        form = app.to_form()
        assert form["scopes"] == "write follow"
        assert form["website"] == "https://t.example"
        assert form["redirect_uris"] == "https://a.example/cb,https://b.example/cb"


class TestStatusBuilder:
    def test_only_status(self):
        assert StatusBuilder("hello").to_json() == {"status": "hello"}

    def test_all_fields(self):
        builder = StatusBuilder(
            "hello",
            in_reply_to_id=1,
            media_ids=[2, "3"],
            sensitive=True,
            spoiler_text="cw",
            visibility=Visibility.DIRECT,
        )
        assert builder.to_json() == {
            "status": "hello",
            "in_reply_to_id": "1",
            "media_ids": ["2", "3"],
            "sensitive": True,
            "spoiler_text": "cw",
            "visibility": "direct",
        }

    def test_false_flag_is_kept(self):
        assert StatusBuilder("x", sensitive=False).to_json() == {
            "status": "x",
            "sensitive": False,
        }

    def test_visibility_accepts_wire_string(self):
        assert StatusBuilder("x", visibility="private").to_json()["visibility"] == (
            "private"
        )
