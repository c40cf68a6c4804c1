"""Action engine and handler tests."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from returns.result import Failure, Success

from screenkit.actions import ActionEngine, EventTrigger, StepResult, StepStatus
from screenkit.core import DiagnosticKind
from screenkit.models import AuthError, NetworkError, Response

LOGIN = {
    "action": "login",
    "emailField": "email",
    "passwordField": "password",
    "onSuccess": {"action": "navigate", "target": "/home", "replace": True},
    "onError": {"action": "setState", "updates": {"error": "Login failed"}},
}


@pytest.fixture
def statuses(engine):
    """Every (step_id, status) transition the engine reports."""
    seen = []
    engine.add_listener(lambda record: seen.append((record.step_id, record.status)))
    return seen


@pytest.fixture
def filled_login(ctx):
    ctx.forms.register_field("email", "login", initial="ada@example.com")
    ctx.forms.register_field("password", "login", initial="secret")
    return ctx


# ============================================================================
# Login
# ============================================================================

@pytest.mark.unit
class TestLogin:

    async def test_success_navigates_once(self, engine, filled_login, auth, navigator):
        outcome = await engine.execute(LOGIN, filled_login)

        auth.login.assert_awaited_once_with("ada@example.com", "secret")
        navigator.navigate.assert_called_once_with("/home", True, None)
        assert outcome.kinds == ["login", "navigate"]
        assert outcome.succeeded
        assert "error" not in filled_login.store

    async def test_success_writes_session(self, engine, filled_login):
        await engine.execute(LOGIN, filled_login)

        result = filled_login.store.get("_result")
        assert result["status"] == "success"
        assert result["action"] == "login"
        assert result["data"]["token"] == "tok"

    async def test_failure_runs_on_error_only(self, engine, filled_login, auth, navigator):
        auth.login.return_value = Failure(AuthError(message="bad credentials", code="401"))

        outcome = await engine.execute(LOGIN, filled_login)

        navigator.navigate.assert_not_called()
        assert outcome.kinds == ["login", "setState"]
        assert outcome.steps[0].status == StepStatus.FAILED
        assert outcome.steps[0].error == "bad credentials"
        assert filled_login.store.get("error") == "Login failed"
        assert filled_login.store.get("_result") == {
            "status": "error",
            "action": "login",
            "error": "bad credentials",
            "code": "401",
        }

    async def test_fields_outside_forms_read_from_state(self, engine, ctx, auth):
        ctx.store.set({"email": "x@y.z", "password": "pw"})
        await engine.execute(LOGIN, ctx)
        auth.login.assert_awaited_once_with("x@y.z", "pw")


# ============================================================================
# Forms
# ============================================================================

@pytest.mark.unit
class TestSubmitForm:

    DESCRIPTOR = {
        "action": "submitForm",
        "formId": "signup",
        "endpoint": "/signup",
        "onError": {"action": "setState", "updates": {"showErrors": True}},
    }

    async def test_invalid_form_never_hits_network(self, engine, ctx, network):
        ctx.forms.register_field("email", "signup", rules=[{"type": "required"}])
        ctx.forms.register_field("age", "signup", initial="12", rules=[{"type": "pattern", "value": r"\d+"}])

        outcome = await engine.execute(self.DESCRIPTOR, ctx)

        network.request.assert_not_awaited()
        assert outcome.kinds == ["submitForm", "setState"]
        assert ctx.store.get("showErrors") is True
        assert ctx.store.get("_result") == {
            "status": "error",
            "action": "submitForm",
            "error": "validation failed",
            "errors": {"email": "This field is required"},
        }
        assert ctx.forms.errors("signup") == {"email": "This field is required"}
        assert ctx.diagnostics.of_kind(DiagnosticKind.VALIDATION_FAILURE)

    async def test_valid_form_posts_values(self, engine, ctx, network):
        ctx.forms.register_field("email", "signup", initial="a@b.co", rules=[{"type": "email"}])
        ctx.forms.register_field("other", "elsewhere", initial="ignored")

        outcome = await engine.execute(self.DESCRIPTOR, ctx)

        network.request.assert_awaited_once_with("POST", "/signup", {"email": "a@b.co"})
        assert outcome.kinds == ["submitForm"]
        assert ctx.store.get("_result") == {
            "status": "success",
            "action": "submitForm",
            "data": {"ok": True},
            "status_code": 200,
        }

    async def test_custom_validator(self, engine, ctx, network):
        from screenkit.models import ValidationResult

        ctx.validator = type("Reject", (), {"validate": lambda self, field_id: ValidationResult.failed(field_id, "no")})()
        ctx.forms.register_field("email", "signup", initial="a@b.co")

        await engine.execute(self.DESCRIPTOR, ctx)

        network.request.assert_not_awaited()
        assert ctx.forms.errors() == {"email": "no"}


# ============================================================================
# State, network, logout, custom
# ============================================================================

@pytest.mark.unit
class TestOtherActions:

    async def test_set_state_resolves_expressions(self, engine, ctx):
        ctx.store.set({"name": "Ada"})
        await engine.execute({"action": "setState", "updates": {"greeting": "Hi ${name}", "copy": "${name}"}}, ctx)

        assert ctx.store.get("greeting") == "Hi Ada"
        assert ctx.store.get("copy") == "Ada"

    async def test_set_state_ignores_branches(self, engine, ctx, navigator):
        outcome = await engine.execute({
            "action": "setState",
            "updates": {"a": 1},
            "onSuccess": {"action": "navigate", "target": "/x"},
        }, ctx)

        assert outcome.kinds == ["setState"]
        navigator.navigate.assert_not_called()

    async def test_api_call_resolves_endpoint_and_body(self, engine, ctx, network):
        ctx.store.set({"id": 7, "q": "cats"})

        await engine.execute({
            "action": "apiCall",
            "endpoint": "/items/${id}",
            "body": {"q": "${q}"},
            "queryParams": {"page": "1"},
            "timeout": 3,
        }, ctx)

        network.request.assert_awaited_once_with("GET", "/items/7", {"q": "cats"}, query_params={"page": "1"}, timeout=3.0)

    async def test_api_call_failure_without_on_error_ends_quietly(self, engine, ctx, network):
        network.request.return_value = Failure(NetworkError(message="not found", status_code=404))

        outcome = await engine.execute({"action": "apiCall", "endpoint": "/missing"}, ctx)

        assert [s.status for s in outcome.steps] == [StepStatus.FAILED]
        assert ctx.store.get("_result")["status_code"] == 404
        assert len(ctx.diagnostics) == 0

    async def test_logout_clears_state_and_completes(self, engine, ctx, auth, navigator):
        ctx.store.set({"user": "ada", "cart": [1]})
        ctx.forms.register_field("email", initial="a@b.co")

        outcome = await engine.execute({"action": "logout", "onComplete": {"action": "navigate", "target": "/login"}}, ctx)

        auth.logout.assert_awaited_once()
        assert len(ctx.store) == 0
        assert ctx.forms.get_field_value("email") is None
        navigator.navigate.assert_called_once_with("/login", False, None)
        assert outcome.succeeded

    async def test_logout_failure_still_clears_and_completes(self, engine, ctx, auth, navigator):
        auth.logout.side_effect = RuntimeError("offline")
        ctx.store.set({"user": "ada"})

        outcome = await engine.execute({"action": "logout", "onComplete": {"action": "navigate", "target": "/login"}}, ctx)

        assert "user" not in ctx.store
        assert [s.status for s in outcome.steps] == [StepStatus.FAILED, StepStatus.SUCCEEDED]
        navigator.navigate.assert_called_once()
        assert ctx.diagnostics.of_kind(DiagnosticKind.EFFECT_FAILURE)[0].message == "offline"

    async def test_custom_callback_receives_parameters(self, engine, ctx, callbacks):
        received = {}

        @callbacks.callback("share")
        async def share(url, title="x"):
            received.update(url=url, title=title)
            return "shared"

        outcome = await engine.execute({"action": "custom", "handler": "share", "parameters": {"url": "https://a.b"}}, ctx)

        assert outcome.succeeded
        assert received == {"url": "https://a.b", "title": "x"}
        assert ctx.store.get("_result")["data"] == "shared"

    async def test_sync_custom_callback(self, engine, ctx, callbacks):
        callbacks.register("ping", lambda: "pong")
        await engine.execute({"action": "custom", "handler": "ping"}, ctx)
        assert ctx.store.get("_result")["data"] == "pong"

    async def test_missing_custom_callback(self, engine, ctx):
        outcome = await engine.execute({
            "action": "custom",
            "handler": "nope",
            "onError": {"action": "setState", "updates": {"failed": True}},
        }, ctx)

        assert outcome.kinds == ["custom", "setState"]
        assert ctx.store.get("failed") is True
        assert ctx.diagnostics.of_kind(DiagnosticKind.INVALID_ACTION)


# ============================================================================
# Engine behavior
# ============================================================================

@pytest.mark.unit
class TestEngine:

    async def test_each_step_reports_three_transitions(self, engine, filled_login, statuses):
        outcome = await engine.execute(LOGIN, filled_login)

        assert len(statuses) == 3 * len(outcome.steps)
        by_step = {}
        for step_id, status in statuses:
            by_step.setdefault(step_id, []).append(status)
        assert list(by_step.values()) == [
            [StepStatus.PENDING, StepStatus.EXECUTING, StepStatus.SUCCEEDED],
            [StepStatus.PENDING, StepStatus.EXECUTING, StepStatus.SUCCEEDED],
        ]

    async def test_steps_share_chain_id(self, engine, filled_login):
        outcome = await engine.execute(LOGIN, filled_login)

        assert {s.chain_id for s in outcome.steps} == {outcome.chain_id}
        assert [s.index for s in outcome.steps] == [0, 1]

    async def test_unknown_kind_reports_and_fails(self, engine, ctx):
        outcome = await engine.execute({"action": "teleport", "to": "mars"}, ctx)

        assert [s.status for s in outcome.steps] == [StepStatus.FAILED]
        diagnostic = ctx.diagnostics.of_kind(DiagnosticKind.UNKNOWN_ACTION_KIND)[0]
        assert diagnostic.source == "teleport"

    async def test_invalid_descriptor_reports(self, engine, ctx, navigator):
        outcome = await engine.execute({"action": "navigate"}, ctx)

        assert not outcome.succeeded
        assert ctx.diagnostics.of_kind(DiagnosticKind.INVALID_ACTION)
        navigator.navigate.assert_not_called()

    async def test_bad_branch_fails_at_its_own_step(self, engine, filled_login):
        outcome = await engine.execute({**LOGIN, "onSuccess": {"action": "warp"}}, filled_login)

        assert [s.status for s in outcome.steps] == [StepStatus.SUCCEEDED, StepStatus.FAILED]

    async def test_unmounted_screen_skips(self, engine, ctx, navigator, statuses):
        ctx.store.dispose()

        outcome = await engine.execute({"action": "navigate", "target": "/x"}, ctx)

        navigator.navigate.assert_not_called()
        assert [status for _, status in statuses] == [StepStatus.PENDING, StepStatus.SKIPPED]
        assert outcome.steps[0].status == StepStatus.SKIPPED

    async def test_handler_exception_is_effect_failure(self, engine, ctx, network):
        network.request.side_effect = RuntimeError("boom")

        outcome = await engine.execute({
            "action": "apiCall",
            "endpoint": "/x",
            "onError": {"action": "setState", "updates": {"failed": True}},
        }, ctx)

        assert [s.status for s in outcome.steps] == [StepStatus.FAILED, StepStatus.SUCCEEDED]
        assert ctx.store.get("failed") is True
        assert ctx.store.get("_result") == {"status": "error", "action": "apiCall", "error": "boom"}
        assert ctx.diagnostics.of_kind(DiagnosticKind.EFFECT_FAILURE)

    async def test_missing_collaborator(self, engine, ctx):
        ctx.navigator = None
        outcome = await engine.execute({"action": "navigate", "target": "/x"}, ctx)

        assert not outcome.succeeded
        assert "navigator" in ctx.diagnostics.of_kind(DiagnosticKind.EFFECT_FAILURE)[0].message

    async def test_register_handler_overrides(self, ctx):
        async def quiet_navigate(action, ctx):
            return StepResult.success(payload=action.target)

        engine = ActionEngine()
        engine.register_handler("navigate", quiet_navigate)
        outcome = await engine.execute({"action": "navigate", "target": "/x"}, ctx)

        assert outcome.succeeded
        ctx.navigator.navigate.assert_not_called()

    async def test_failing_listener_does_not_stop_chain(self, engine, ctx, navigator):
        def broken(record):
            raise ValueError("listener bug")

        engine.add_listener(broken)
        outcome = await engine.execute({"action": "navigate", "target": "/x"}, ctx)

        assert outcome.succeeded
        navigator.navigate.assert_called_once()

    async def test_remove_listener(self, engine, ctx):
        seen = []
        remove = engine.add_listener(seen.append)
        remove()

        await engine.execute({"action": "navigate", "target": "/x"}, ctx)
        assert seen == []

    async def test_chains_interleave(self, engine, ctx, network):
        gate = asyncio.Event()
        order = []

        async def slow_request(method, endpoint, body, **options):
            order.append(f"start {endpoint}")
            if endpoint == "/slow":
                await gate.wait()
            order.append(f"end {endpoint}")
            if endpoint == "/fast":
                gate.set()
            return Success(Response(data=endpoint))

        network.request = AsyncMock(side_effect=slow_request)

        slow, fast = await asyncio.gather(
            engine.execute({"action": "apiCall", "endpoint": "/slow"}, ctx),
            engine.execute({"action": "apiCall", "endpoint": "/fast"}, ctx),
        )

        assert slow.succeeded and fast.succeeded
        assert order == ["start /slow", "start /fast", "end /fast", "end /slow"]


# ============================================================================
# Triggers
# ============================================================================

@pytest.mark.unit
class TestEventTrigger:

    async def test_call_inside_loop_spawns_task(self, engine, ctx, navigator):
        trigger = EventTrigger(engine, {"action": "navigate", "target": "/a"}, ctx, "onTap", "btn")

        task = trigger()
        assert isinstance(task, asyncio.Task)
        await engine.drain()

        assert engine.pending == 0
        assert task.result().succeeded
        navigator.navigate.assert_called_once_with("/a", False, None)

    async def test_fire_returns_outcome(self, engine, ctx):
        trigger = EventTrigger(engine, {"action": "setState", "updates": {"n": 1}}, ctx, "onTap")
        outcome = await trigger.fire()

        assert outcome.kinds == ["setState"]
        assert ctx.store.get("n") == 1

    def test_call_without_loop_runs_to_completion(self, engine, ctx):
        trigger = EventTrigger(engine, {"action": "setState", "updates": {"n": 2}}, ctx, "onTap")
        outcome = trigger()

        assert outcome.succeeded
        assert ctx.store.get("n") == 2

    def test_equality(self, engine, ctx):
        descriptor = {"action": "logout"}
        assert EventTrigger(engine, descriptor, ctx, "onTap", "a") == EventTrigger(engine, dict(descriptor), ctx, "onTap", "a")
        assert EventTrigger(engine, descriptor, ctx, "onTap", "a") != EventTrigger(engine, descriptor, ctx, "onTap", "b")
