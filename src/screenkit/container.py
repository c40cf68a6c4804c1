"""Dependency Injection Container."""

from typing import Any, Mapping, Optional, Union

from injector import Injector, Module, provider, singleton

from .actions import ActionEngine, CallbackRegistry
from .clients import HttpAuthBackend, HttpNetworkBackend, NavigationStack
from .core import Settings, configure_logging, get_logger, get_settings
from .models import ScreenDocument
from .rendering import WidgetRegistry, create_default_registry
from .screen import ScreenView, load_screen

logger = get_logger(__name__)


class ScreenFactory:
    """Creates screens wired to the container's shared collaborators."""

    def __init__(
        self,
        registry: WidgetRegistry,
        engine: ActionEngine,
        navigator: NavigationStack,
        auth: HttpAuthBackend,
        network: HttpNetworkBackend,
        callbacks: CallbackRegistry,
        settings: Settings,
    ) -> None:
        self.registry = registry
        self.engine = engine
        self.navigator = navigator
        self.auth = auth
        self.network = network
        self.callbacks = callbacks
        self.settings = settings

    def create(self, document: ScreenDocument) -> ScreenView:
        return ScreenView(
            document,
            self.registry,
            self.engine,
            navigator=self.navigator,
            auth=self.auth,
            network=self.network,
            callbacks=self.callbacks,
            settings=self.settings,
        )

    def load(self, source: Union[str, bytes, Mapping[str, Any]]) -> ScreenView:
        """Decode a document and create its (unmounted) screen."""
        return self.create(load_screen(source, self.settings))


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings or get_settings()

    @singleton
    @provider
    def provide_widget_registry(self) -> WidgetRegistry:
        """Provide registry preloaded with built-in widgets."""
        return create_default_registry()

    @singleton
    @provider
    def provide_callback_registry(self) -> CallbackRegistry:
        return CallbackRegistry()

    @singleton
    @provider
    def provide_network(self, settings: Settings) -> HttpNetworkBackend:
        """Provide HTTP backend with circuit breaker."""
        return HttpNetworkBackend(
            settings.backend_url,
            timeout=settings.backend_timeout,
            fail_max=settings.breaker_fail_max,
            reset_timeout=settings.breaker_reset_timeout,
        )

    @singleton
    @provider
    def provide_auth(self, network: HttpNetworkBackend, settings: Settings) -> HttpAuthBackend:
        return HttpAuthBackend(network, settings.auth_login_path, settings.auth_logout_path)

    @singleton
    @provider
    def provide_navigator(self) -> NavigationStack:
        return NavigationStack()

    @singleton
    @provider
    def provide_engine(self) -> ActionEngine:
        return ActionEngine()

    @singleton
    @provider
    def provide_screen_factory(
        self,
        registry: WidgetRegistry,
        engine: ActionEngine,
        navigator: NavigationStack,
        auth: HttpAuthBackend,
        network: HttpNetworkBackend,
        callbacks: CallbackRegistry,
        settings: Settings,
    ) -> ScreenFactory:
        return ScreenFactory(registry, engine, navigator, auth, network, callbacks, settings)


def create_container(settings: Optional[Settings] = None, configure_logs: bool = False) -> Injector:
    """
    Create configured injector.

    Args:
        settings: Explicit settings (environment otherwise)
        configure_logs: Also configure structlog from the settings
    """
    container = Injector([CoreModule(settings)])
    if configure_logs:
        resolved = container.get(Settings)
        configure_logging(resolved.log_level, resolved.json_logs)
    logger.debug("container_created")
    return container
