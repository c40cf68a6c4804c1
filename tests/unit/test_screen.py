"""Tests for screen loading and the mounted screen lifecycle."""

import json

import pytest
from returns.result import Failure

from screenkit import DocumentError, ScreenView, load_screen
from screenkit.actions import StepStatus
from screenkit.core import Settings
from screenkit.models import AuthError


@pytest.fixture
def screen(login_document, navigator, auth, network, settings):
    view = ScreenView(load_screen(login_document), navigator=navigator, auth=auth, network=network, settings=settings)
    yield view
    view.unmount()


# ============================================================================
# Loading
# ============================================================================

@pytest.mark.unit
class TestLoadScreen:

    def test_from_mapping(self, login_document):
        document = load_screen(login_document)

        assert document.id == "login"
        assert document.state == {"title": "Welcome"}
        assert document.root.type == "Column"

    def test_from_fenced_text(self):
        text = 'Here is the screen:\n```json\n{"id": "home", "rootWidget": {"type": "Text"}}\n```'
        assert load_screen(text).id == "home"

    def test_from_bytes_with_trailing_comma(self):
        document = load_screen(b'{"id": "s", "root": {"type": "Row", "children": [{"type": "Text"},]}}')
        assert [c.type for c in document.root.children] == ["Text"]

    def test_bare_widget_becomes_root(self):
        document = load_screen('{"type": "Column", "children": []}')

        assert document.root.type == "Column"
        assert document.id == "screen"

    @pytest.mark.parametrize("source", ["no json here", '{"id": "x", "state": {}}', b"\xff\xfe"])
    def test_invalid_documents(self, source):
        with pytest.raises(DocumentError):
            load_screen(source)

    def test_size_and_depth_limits(self):
        with pytest.raises(DocumentError):
            load_screen('{"type": "Text", "properties": {"text": "long"}}', Settings(_env_file=None, max_document_size=10))

        with pytest.raises(DocumentError):
            load_screen({"type": "Column", "children": [{"type": "Column", "children": []}]}, Settings(_env_file=None, max_json_depth=2))


# ============================================================================
# Lifecycle
# ============================================================================

@pytest.mark.unit
class TestScreenView:

    def test_mount_renders_initial_state(self, screen):
        tree = screen.mount()

        assert screen.mounted
        assert tree.find("title").props["text"] == "Welcome"
        assert screen.forms.fields("loginForm") == ["email", "password"]
        assert screen.mount() is tree

    def test_state_change_rerenders_affected_nodes(self, screen):
        screen.mount()
        password = screen.find("password")
        trees = []
        screen.on_update(trees.append)

        screen.store.set({"title": "Hello"})

        assert screen.find("title").props["text"] == "Hello"
        assert screen.find("password") is password
        assert trees == [screen.tree]

    def test_typed_value_survives_unrelated_state_change(self, screen):
        screen.mount()
        password = screen.find("password")
        screen.find("email").props["onChanged"]("ada@example.com")

        screen.store.set({"title": "Hello"})

        assert screen.find("email").props["value"] == "ada@example.com"
        assert screen.find("password") is password

    def test_full_refresh(self, screen):
        screen.mount()
        screen.store.set({"title": "Changed"})
        assert screen.refresh().find("title").props["text"] == "Changed"

    async def test_login_flow(self, screen, auth, navigator):
        screen.mount()
        screen.find("email").props["onChanged"]("ada@example.com")
        screen.find("password").props["onChanged"]("secret")

        outcome = await screen.fire("submit", "onPressed")

        auth.login.assert_awaited_once_with("ada@example.com", "secret")
        navigator.navigate.assert_called_once_with("/home", True, None)
        assert outcome.kinds == ["login", "navigate"]
        assert screen.find("email").props["value"] == "ada@example.com"

    async def test_login_failure_sets_error_state(self, screen, auth, navigator):
        auth.login.return_value = Failure(AuthError(message="bad credentials", code="401"))
        screen.mount()

        await screen.fire("submit", "pressed")

        navigator.navigate.assert_not_called()
        assert screen.store.get("error") == "Login failed"

    async def test_fire_unbound_event(self, screen):
        screen.mount()
        assert await screen.fire("title") is None
        assert await screen.fire("nope") is None

    async def test_validation_errors_reach_fields(self, navigator, network, settings):
        document = load_screen({
            "rootWidget": {
                "type": "Form",
                "id": "f",
                "children": [
                    {"type": "TextField", "id": "email", "properties": {"required": True}},
                    {
                        "type": "ElevatedButton",
                        "id": "send",
                        "events": {"onPressed": {"action": "submitForm", "formId": "f", "endpoint": "/send"}},
                    },
                ],
            },
        })

        with ScreenView(document, navigator=navigator, network=network, settings=settings) as screen:
            await screen.fire("send", "onPressed")

            network.request.assert_not_awaited()
            assert screen.find("email").props["errorText"] == "This field is required"
            assert screen.store.get("_result")["errors"] == {"email": "This field is required"}

    async def test_unmount_turns_chains_into_noops(self, screen, navigator):
        screen.mount()
        trigger = screen.find("submit").props["onPressed"]
        screen.unmount()

        outcome = await trigger.fire()

        assert not screen.mounted
        assert outcome.steps[0].status == StepStatus.SKIPPED
        navigator.navigate.assert_not_called()

    def test_unmount_is_idempotent_and_stops_updates(self, screen):
        screen.mount()
        trees = []
        screen.on_update(trees.append)
        store = screen.store

        screen.unmount()
        screen.unmount()
        store.set({"title": "late"})

        assert trees == []
        assert store.get("title") == "Welcome"

    def test_unmount_before_mount(self, login_document):
        ScreenView(load_screen(login_document)).unmount()

    def test_context_manager(self, login_document, settings):
        with ScreenView(load_screen(login_document), settings=settings) as screen:
            assert screen.mounted
        assert not screen.mounted

    def test_remount_starts_fresh(self, screen):
        screen.mount()
        screen.store.set({"title": "Changed"})
        screen.unmount()

        tree = screen.mount()

        assert tree.find("title").props["text"] == "Welcome"

    def test_listener_errors_are_isolated(self, screen):
        screen.mount()
        seen = []

        def broken(tree):
            raise RuntimeError("host bug")

        screen.on_update(broken)
        remove = screen.on_update(seen.append)
        screen.store.set({"title": "x"})
        remove()
        screen.store.set({"title": "y"})

        assert len(seen) == 1

    def test_dump(self, screen):
        assert json.loads(screen.dump()) is None
        screen.mount()

        dumped = json.loads(screen.dump())

        assert dumped["type"] == "Column"
        assert dumped["children"][0]["props"]["text"] == "Welcome"
