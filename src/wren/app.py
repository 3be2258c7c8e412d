"""Wren application class.

Mutable during setup (route registration, stages, filters).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kida import Environment

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren._internal.types import ErrorStageFunc, Handler, StageFunc
from wren.config import AppConfig
from wren.errors import ConfigurationError
from wren.middleware.static import StaticFiles
from wren.pipeline.chain import Pipeline, StageEntry, error_filter, is_error_stage
from wren.routing.route import Route
from wren.routing.router import Router, parse_path
from wren.server.handler import default_not_found, handle_request
from wren.templating.integration import create_environment

logger = logging.getLogger("wren.app")


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    path: str
    handler: Handler
    methods: list[str] | None
    name: str | None
    stages: tuple[StageFunc, ...] = ()


class App:
    """The wren application.

    Mutable during setup (routes, stages, error-stages, filters).
    Frozen at runtime when ``app.run()`` or ``__call__()`` is first invoked.

    Usage::

        app = App()
        app.use(RequestLogger())
        app.use(JSONBody())

        @app.get("/users/:id")
        def user(id: int):
            return {"id": id}

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check to ensure exactly
        one thread compiles the app, even when several ASGI workers call
        ``__call__()`` concurrently on first request.
    """

    __slots__ = (
        "_error_stages",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_not_found",
        "_pending_routes",
        "_pipeline",
        # Compiled state (populated by _freeze)
        "_router",
        "_shutdown_hooks",
        "_stages",
        "_startup_hooks",
        "_template_filters",
        "_template_globals",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._pipeline: Pipeline = Pipeline()
        self._not_found: StageFunc = default_not_found
        self._template_filters: dict[str, Callable[..., Any]] = {}
        self._template_globals: dict[str, Any] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._stages: tuple[StageEntry, ...] = ()
        self._error_stages: tuple[StageEntry, ...] = ()
        self._kida_env: Environment | None = None

    # -- Route registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
        stages: Iterable[StageFunc] = (),
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL path pattern. Use ``:param`` or ``{param}`` for path
                parameters, ``{param:int}`` for typed ones and ``*rest``
                for a trailing catch-all.
            methods: HTTP methods. Defaults to ``["GET"]``.
            name: Optional route name.
            stages: Route-level stages, run after the global chain and
                before the handler (e.g. an upload stage).
        """
        # Validate the pattern now so mistakes point at the decorator
        parse_path(path)
        route_stages = tuple(stages)
        for stage in route_stages:
            if not callable(stage) or is_error_stage(stage):
                msg = f"Route stage for {path!r} must be a (request) callable, got {stage!r}"
                raise ConfigurationError(msg)

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self._pending_routes.append(_PendingRoute(path, func, methods, name, route_stages))
            return func

        return decorator

    def get(self, path: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        """``route(path, methods=["GET"])``; HEAD requests are answered too."""
        return self.route(path, methods=["GET"], **kwargs)

    def post(self, path: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["POST"], **kwargs)

    def put(self, path: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["PUT"], **kwargs)

    def patch(self, path: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["PATCH"], **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["DELETE"], **kwargs)

    # -- Stages --

    def use(self, stage: StageFunc, prefix: str | None = None) -> StageFunc:
        """Append a stage (or error-stage) to the chain.

        A callable taking ``(error, request)`` is registered as an
        error-stage; anything else runs for every request whose path
        is *prefix* or below it (every request when *prefix* is None).
        Returns *stage*, so ``use`` also works as a decorator.
        """
        self._check_not_frozen()
        self._pipeline.use(stage, prefix)
        return stage

    def error(
        self,
        code_or_exception: int | type[Exception] | None = None,
    ) -> Callable[[ErrorStageFunc], ErrorStageFunc]:
        """Register an error-stage via decorator.

        With a status code or exception type, the stage only sees
        matching errors; ``500`` also matches non-HTTP exceptions.
        """
        matches = error_filter(code_or_exception)

        def decorator(func: ErrorStageFunc) -> ErrorStageFunc:
            self._check_not_frozen()
            if not is_error_stage(func):
                msg = f"Error-stage {func!r} must take (error, request)"
                raise ConfigurationError(msg)
            self._pipeline.use(func, matches=matches)
            return func

        return decorator

    def not_found(self, func: StageFunc) -> StageFunc:
        """Replace the terminal not-found stage via decorator.

        Runs when no route matches the path. Its return value becomes
        the response (status 404 unless it sets one); returning ``None``
        falls back to the default 404.
        """
        self._check_not_frozen()
        self._not_found = func
        return func

    # -- Template integration --

    def template_filter(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a kida filter, under the function's name unless *name* is given."""
        return self._register_into(self._template_filters, name)

    def template_global(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a kida global, under the function's name unless *name* is given."""
        return self._register_into(self._template_globals, name)

    def _register_into(
        self,
        registry: dict[str, Any],
        name: str | None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            registry[name or func.__name__] = func
            return func

        return decorator

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* (sync or async) once before the first request."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* (sync or async) once after the last request."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    async def startup(self) -> None:
        """Freeze the app and run startup hooks in registration order."""
        self._ensure_frozen()
        for hook in self._startup_hooks:
            await invoke(hook)

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            await invoke(hook)

    # -- Introspection --

    @property
    def routes(self) -> list[Route]:
        """Compiled routes, in registration (and matching) order."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router.routes

    @property
    def stages(self) -> tuple[StageEntry, ...]:
        """Compiled normal stages, in registration order."""
        self._ensure_frozen()
        return self._stages

    # -- Running --

    def run(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        app_path: str | None = None,
    ) -> None:
        """Start the pounce development server.

        Compiles the app (freezing routes, stages, templates), configures
        ``wren.*`` logging at ``config.log_level`` and starts serving.
        """
        from wren.server.dev import configure_logging, run_dev_server

        self._ensure_frozen()
        configure_logging(self.config.log_level)
        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug and app_path is not None,
            app_path=app_path,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point: lifespan here, HTTP through the dispatcher."""
        if scope["type"] == "lifespan":
            await self._serve_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            stages=self._stages,
            error_stages=self._error_stages,
            not_found=self._not_found,
            kida_env=self._kida_env,
            debug=self.config.debug,
            max_body_size=self.config.max_content_length,
        )

    async def _serve_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            match message["type"]:
                case "lifespan.startup":
                    try:
                        await self.startup()
                    except Exception as exc:
                        logger.exception("Startup failed")
                        await send({"type": "lifespan.startup.failed", "message": str(exc)})
                        return
                    await send({"type": "lifespan.startup.complete"})
                case "lifespan.shutdown":
                    await self.shutdown()
                    await send({"type": "lifespan.shutdown.complete"})
                    return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Compile route table
        router = Router()
        for pending in self._pending_routes:
            methods = frozenset(m.upper() for m in (pending.methods or ["GET"]))
            router.add(
                Route(
                    path=pending.path,
                    handler=pending.handler,
                    methods=methods,
                    name=pending.name,
                    stages=pending.stages,
                )
            )
        router.compile()
        self._router = router

        # 2. Serve config.static_dir after the registered stages, then freeze
        if self.config.static_dir is not None:
            self._pipeline.use(StaticFiles(self.config.static_dir, self.config.static_url))
        self._pipeline.freeze()
        self._stages = self._pipeline.stages
        self._error_stages = self._pipeline.error_stages

        # 3. Initialize kida environment when there are templates to load
        if Path(self.config.template_dir).is_dir():
            self._kida_env = create_environment(
                self.config,
                self._template_filters,
                self._template_globals,
            )

        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, stages, and filters before calling app.run()."
            )
            raise RuntimeError(msg)
