"""Tests for wren.pipeline — outcomes, stage entries, chain execution, after-hooks."""

import pytest

from wren.errors import BadRequest, ConfigurationError, HTTPError
from wren.http.headers import Headers
from wren.http.query import QueryParams
from wren.http.request import Request
from wren.http.response import Response
from wren.pipeline import (
    Continue,
    Fail,
    Halt,
    Pipeline,
    StageEntry,
    apply_after_hooks,
    error_filter,
    is_error_stage,
    resolve,
    run_stages,
)


async def _no_body() -> dict:
    return {"type": "http.request", "body": b"", "more_body": False}


def _request(path: str = "/") -> Request:
    return Request(
        method="GET",
        path=path,
        headers=Headers(),
        query=QueryParams(),
        path_params={},
        http_version="1.1",
        server=None,
        client=None,
        _receive=_no_body,
    )


class TestResolve:
    def test_none_continues(self) -> None:
        assert resolve(None) == Continue()

    def test_outcomes_pass_through(self) -> None:
        error = ValueError("x")
        assert resolve(Continue()) == Continue()
        assert resolve(Halt("hi")) == Halt("hi")
        assert resolve(Fail(error)).error is error

    def test_other_values_halt(self) -> None:
        assert resolve({"a": 1}) == Halt({"a": 1})
        assert resolve("text") == Halt("text")


class TestErrorStageDetection:
    def test_two_params_is_error_stage(self) -> None:
        def on_error(error, request):
            return None

        assert is_error_stage(on_error)

    def test_one_param_is_normal(self) -> None:
        def stage(request):
            return None

        assert not is_error_stage(stage)

    def test_defaults_do_not_count(self) -> None:
        def stage(request, extra=None):
            return None

        assert not is_error_stage(stage)

    def test_callable_object(self) -> None:
        class OnError:
            def __call__(self, error, request):
                return None

        class Stage:
            def __call__(self, request):
                return None

        assert is_error_stage(OnError())
        assert not is_error_stage(Stage())


class TestStageEntry:
    def test_global_applies_everywhere(self) -> None:
        entry = StageEntry(stage=print)
        assert entry.applies_to("/")
        assert entry.applies_to("/anything/deep")

    def test_prefix_boundaries(self) -> None:
        entry = StageEntry(stage=print, prefix="/api")
        assert entry.applies_to("/api")
        assert entry.applies_to("/api/users")
        assert not entry.applies_to("/apix")
        assert not entry.applies_to("/")

    def test_error_filters(self) -> None:
        by_status = error_filter(404)
        by_type = error_filter(KeyError)
        server = error_filter(500)
        assert by_status is not None and by_type is not None and server is not None
        assert by_status(HTTPError(404))
        assert not by_status(HTTPError(400))
        assert by_type(KeyError("k"))
        assert not by_type(ValueError())
        assert server(RuntimeError())
        assert server(HTTPError(500))
        assert not server(BadRequest())
        assert error_filter(None) is None

    def test_bad_error_filter(self) -> None:
        with pytest.raises(ConfigurationError):
            error_filter("404")  # type: ignore[arg-type]


class TestPipeline:
    def test_splits_stages_and_error_stages(self) -> None:
        pipeline = Pipeline()

        def stage(request):
            return None

        def on_error(error, request):
            return None

        pipeline.use(stage)
        pipeline.use(on_error)
        assert [e.stage for e in pipeline.stages] == [stage]
        assert [e.stage for e in pipeline.error_stages] == [on_error]
        assert len(pipeline) == 2

    def test_prefix_normalized(self) -> None:
        pipeline = Pipeline()
        assert pipeline.use(print, "/api/").prefix == "/api"
        assert pipeline.use(print, "/").prefix is None

    def test_prefix_must_be_absolute(self) -> None:
        with pytest.raises(ConfigurationError):
            Pipeline().use(print, "api")

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(ConfigurationError):
            Pipeline().use("nope")  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        pipeline = Pipeline()
        pipeline.freeze()
        with pytest.raises(RuntimeError, match="frozen"):
            pipeline.use(print)


class TestRunStages:
    async def test_runs_in_order(self) -> None:
        calls: list[str] = []

        def first(request):
            calls.append("first")

        async def second(request):
            calls.append("second")

        pipeline = Pipeline()
        pipeline.use(first)
        pipeline.use(second)
        request, halt = await run_stages(pipeline.stages, _request(), [])
        assert calls == ["first", "second"]
        assert halt is None

    async def test_continue_replaces_request(self) -> None:
        def parse(request):
            return Continue(request.with_body({"parsed": True}))

        seen: list[object] = []

        def inspect_body(request):
            seen.append(request.body_data)

        request, _ = await run_stages((parse, inspect_body), _request(), [])
        assert seen == [{"parsed": True}]
        assert request.body_data == {"parsed": True}

    async def test_halt_stops_chain(self) -> None:
        calls: list[str] = []

        def gate(request):
            return "stop here"

        def never(request):
            calls.append("never")

        _, halt = await run_stages((gate, never), _request(), [])
        assert halt == Halt("stop here")
        assert calls == []

    async def test_fail_raises(self) -> None:
        def failing(request):
            return Fail(BadRequest("nope"))

        with pytest.raises(BadRequest):
            await run_stages((failing,), _request(), [])

    async def test_exception_propagates(self) -> None:
        def broken(request):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await run_stages((broken,), _request(), [])

    async def test_prefix_scoping(self) -> None:
        calls: list[str] = []

        def api_only(request):
            calls.append(request.path)

        pipeline = Pipeline()
        pipeline.use(api_only, "/api")
        await run_stages(pipeline.stages, _request("/api/users"), [])
        await run_stages(pipeline.stages, _request("/home"), [])
        assert calls == ["/api/users"]

    async def test_trail_records_completed_stages(self) -> None:
        def ok(request):
            return None

        def broken(request):
            raise RuntimeError

        trail: list[object] = []
        with pytest.raises(RuntimeError):
            await run_stages((ok, broken), _request(), trail)
        assert trail == [ok]


class TestAfterHooks:
    async def test_reverse_order(self) -> None:
        class Tag:
            def __init__(self, name: str) -> None:
                self.name = name

            def __call__(self, request):
                return None

            def after(self, request, response):
                return response.with_header("X-Order", self.name)

        trail = [Tag("outer"), Tag("inner")]
        response = await apply_after_hooks(trail, _request(), Response("ok"))
        assert [v for k, v in response.headers if k == "X-Order"] == ["inner", "outer"]

    async def test_stages_without_hooks_skipped(self) -> None:
        def plain(request):
            return None

        response = Response("ok")
        assert await apply_after_hooks([plain], _request(), response) is response

    async def test_async_hook(self) -> None:
        class Timing:
            def __call__(self, request):
                return None

            async def after(self, request, response):
                return response.with_status(202)

        response = await apply_after_hooks([Timing()], _request(), Response("ok"))
        assert response.status == 202


class TestPipelineRun:
    async def test_runs_normal_stages_only(self) -> None:
        calls: list[str] = []

        def stage(request):
            calls.append("stage")

        def on_error(error, request):
            calls.append("error")

        pipeline = Pipeline()
        pipeline.use(stage)
        pipeline.use(on_error)
        trail: list[object] = []
        request, halt = await pipeline.run(_request(), trail)
        assert calls == ["stage"]
        assert halt is None
        assert trail == [stage]
