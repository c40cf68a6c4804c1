"""
Action Handlers
One coroutine per action kind. Each returns a StepResult naming the
follow-up descriptor; the engine does the sequencing.
"""

import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict

from returns.pipeline import is_successful
from returns.result import Result

from ..core import DiagnosticKind, get_logger
from ..models import (
    ActionKind,
    ApiCallAction,
    BaseAction,
    CustomAction,
    LoginAction,
    LogoutAction,
    NavigateAction,
    NetworkError,
    Response,
    SetStateAction,
    SubmitFormAction,
    ValidationResult,
)
from ..rendering.binding import StateReader, substitute
from .types import StepResult

if TYPE_CHECKING:
    from ..context import RenderContext

logger = get_logger(__name__)

Handler = Callable[[Any, "RenderContext"], Awaitable[StepResult]]


# ============================================================================
# Helpers
# ============================================================================

def write_result(ctx: "RenderContext", action: BaseAction, status: str, **fields: Any) -> None:
    """Store an effect payload under the scratch key."""
    payload = {"status": status, "action": action.kind.value}
    payload.update({k: v for k, v in fields.items() if v is not None})
    ctx.store.set({ctx.settings.result_key: payload})


def _missing_collaborator(ctx: "RenderContext", action: BaseAction, name: str) -> StepResult:
    message = f"no {name} configured"
    ctx.diagnostics.report(DiagnosticKind.EFFECT_FAILURE, message, source=action.kind.value)
    write_result(ctx, action, "error", error=message)
    return StepResult.failure(message, getattr(action, "on_error", None))


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _input_value(ctx: "RenderContext", field_id: str) -> Any:
    """Form input first; ViewState for fields bound outside any form."""
    if field_id in ctx.forms:
        return ctx.forms.get_field_value(field_id)
    return ctx.store.get(field_id)


def _resolve(ctx: "RenderContext", value: Any) -> Any:
    return substitute(value, StateReader(ctx.store.snapshot()))


def _network_outcome(
    ctx: "RenderContext",
    action: SubmitFormAction | ApiCallAction,
    result: Result[Response, NetworkError],
) -> StepResult:
    if is_successful(result):
        response = result.unwrap()
        write_result(ctx, action, "success", data=response.data, status_code=response.status_code)
        return StepResult.success(action.on_success, payload=response)

    error = result.failure()
    logger.info("request_failed", endpoint=action.endpoint, status_code=error.status_code, error=error.message)
    write_result(ctx, action, "error", error=error.message, status_code=error.status_code, data=error.data)
    return StepResult.failure(error.message, action.on_error, payload=error)


# ============================================================================
# Handlers
# ============================================================================

async def handle_navigate(action: NavigateAction, ctx: "RenderContext") -> StepResult:
    if ctx.navigator is None:
        return _missing_collaborator(ctx, action, "navigator")

    await _maybe_await(ctx.navigator.navigate(action.target, action.replace, action.arguments))
    return StepResult.success()


async def handle_login(action: LoginAction, ctx: "RenderContext") -> StepResult:
    if ctx.auth is None:
        return _missing_collaborator(ctx, action, "auth backend")

    email = _input_value(ctx, action.email_field)
    password = _input_value(ctx, action.password_field)
    result = await ctx.auth.login("" if email is None else str(email), "" if password is None else str(password))

    if is_successful(result):
        session = result.unwrap()
        write_result(ctx, action, "success", data=session.model_dump())
        return StepResult.success(action.on_success, payload=session)

    error = result.failure()
    logger.info("login_failed", error=error.message, code=error.code)
    write_result(ctx, action, "error", error=error.message, code=error.code)
    return StepResult.failure(error.message, action.on_error, payload=error)


async def handle_submit_form(action: SubmitFormAction, ctx: "RenderContext") -> StepResult:
    validation = ValidationResult.ok()
    for field_id in ctx.forms.fields(action.form_id):
        validation = validation.merge(ctx.validator.validate(field_id))

    if not validation.valid:
        ctx.forms.set_errors(validation.errors)
        ctx.diagnostics.report(
            DiagnosticKind.VALIDATION_FAILURE,
            f"form '{action.form_id}' has invalid fields",
            source=action.kind.value,
            errors=validation.errors,
        )
        write_result(ctx, action, "error", error="validation failed", errors=validation.errors)
        return StepResult.failure("validation failed", action.on_error, payload=validation)

    if ctx.network is None:
        return _missing_collaborator(ctx, action, "network backend")

    result = await ctx.network.request(action.method, action.endpoint, ctx.forms.values(action.form_id))
    return _network_outcome(ctx, action, result)


async def handle_set_state(action: SetStateAction, ctx: "RenderContext") -> StepResult:
    updates = _resolve(ctx, action.updates)
    ctx.store.set(updates)

    if action.on_success is not None or action.on_error is not None:
        logger.debug("set_state_branches_ignored")
    return StepResult.success()


async def handle_api_call(action: ApiCallAction, ctx: "RenderContext") -> StepResult:
    if ctx.network is None:
        return _missing_collaborator(ctx, action, "network backend")

    options: Dict[str, Any] = {}
    if action.query_params is not None:
        options["query_params"] = action.query_params
    if action.headers is not None:
        options["headers"] = action.headers
    if action.timeout is not None:
        options["timeout"] = action.timeout

    result = await ctx.network.request(
        action.method,
        _resolve(ctx, action.endpoint),
        _resolve(ctx, action.body),
        **options,
    )
    return _network_outcome(ctx, action, result)


async def handle_logout(action: LogoutAction, ctx: "RenderContext") -> StepResult:
    error = None
    if ctx.auth is not None:
        try:
            await _maybe_await(ctx.auth.logout())
        except Exception as e:
            # Local state is cleared regardless
            error = str(e) or type(e).__name__
            ctx.diagnostics.report(DiagnosticKind.EFFECT_FAILURE, error, source=action.kind.value)

    ctx.store.clear()
    ctx.forms.reset()

    if error is not None:
        return StepResult.failure(error, action.on_complete)
    return StepResult.success(action.on_complete)


async def handle_custom(action: CustomAction, ctx: "RenderContext") -> StepResult:
    callback = ctx.callbacks.get(action.handler)
    if callback is None:
        message = f"no callback registered for '{action.handler}'"
        ctx.diagnostics.report(DiagnosticKind.INVALID_ACTION, message, source=action.kind.value)
        write_result(ctx, action, "error", error=message)
        return StepResult.failure(message, action.on_error)

    value = await _maybe_await(callback(**(action.parameters or {})))
    write_result(ctx, action, "success", data=value)
    return StepResult.success(action.on_success, payload=value)


DEFAULT_HANDLERS: Dict[str, Handler] = {
    ActionKind.NAVIGATE.value: handle_navigate,
    ActionKind.LOGIN.value: handle_login,
    ActionKind.SUBMIT_FORM.value: handle_submit_form,
    ActionKind.SET_STATE.value: handle_set_state,
    ActionKind.API_CALL.value: handle_api_call,
    ActionKind.LOGOUT.value: handle_logout,
    ActionKind.CUSTOM.value: handle_custom,
}
