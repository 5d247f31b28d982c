"""Integration tests running a StagedController inside a FastAPI app."""

import os
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from staged_controller import StagedController


@pytest.fixture(autouse=True)
def clean_env():
    env = {
        key: val
        for key, val in os.environ.items()
        if not key.startswith("STAGED_CONTROLLER_")
    }
    with patch.dict(os.environ, env, clear=True):
        yield


def recorder(calls, name):
    async def handler(request, call_next):
        calls.append(name)
        return await call_next(request)

    handler.__name__ = name
    return handler


async def send_documents(request, call_next):
    """Terminal sender: responds with whatever the documents stage produced."""
    return JSONResponse(
        {
            "documents": getattr(request.state, "documents", None),
            "path_params": dict(request.path_params),
        }
    )


def build_app(controller: StagedController, calls: list) -> FastAPI:
    app = FastAPI()

    @app.get("/vegetables")
    async def list_vegetables():
        calls.append("endpoint")
        return {"source": "endpoint"}

    @app.post("/vegetables")
    async def create_vegetable():
        calls.append("endpoint")
        return {"source": "endpoint"}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return controller.install(app)


class TestStagedControllerIntegration:
    """Run requests through the staged pipeline of a FastAPI app."""

    def setup_method(self):
        self.calls = []
        self.controller = StagedController(basePath="/vegetables")

    def test_stage_order_independent_of_registration_order(self):
        """Handlers run in stage order even when registered in reverse."""
        self.controller.documents(recorder(self.calls, "documents"))
        self.controller.query(recorder(self.calls, "query"))
        self.controller.request(recorder(self.calls, "request"))
        self.controller.use(recorder(self.calls, "use"))
        client = TestClient(build_app(self.controller, self.calls))

        response = client.get("/vegetables")

        assert response.status_code == 200
        assert response.json() == {"source": "endpoint"}
        assert self.calls == ["use", "request", "query", "documents", "endpoint"]

    def test_registration_order_within_stage(self):
        self.controller.request(recorder(self.calls, "first"))
        self.controller.request("get", recorder(self.calls, "second"))
        client = TestClient(build_app(self.controller, self.calls))

        client.get("/vegetables")

        assert self.calls == ["first", "second", "endpoint"]

    def test_finalize_sends_documents(self):
        async def load(request, call_next):
            request.state.documents = {"name": f"carrot-{request.path_params['id']}"}
            return await call_next(request)

        self.controller.documents("instance", "get", load)
        self.controller.finalize_with(send_documents)
        client = TestClient(build_app(self.controller, self.calls))

        response = client.get("/vegetables/7")

        assert response.status_code == 200
        assert response.json() == {
            "documents": {"name": "carrot-7"},
            "path_params": {"id": "7"},
        }

    def test_query_stage_skipped_for_post(self):
        self.controller.request(recorder(self.calls, "request"))
        self.controller.query(recorder(self.calls, "query"))
        self.controller.documents(recorder(self.calls, "documents"))
        client = TestClient(build_app(self.controller, self.calls))

        response = client.post("/vegetables")

        assert response.status_code == 200
        assert self.calls == ["request", "documents", "endpoint"]

    def test_disabled_verb_receives_no_activated_middleware(self):
        self.controller.set_option("post", False)
        self.controller.request(recorder(self.calls, "request"))
        self.controller.request(True, "collection", "post", recorder(self.calls, "forced"))
        client = TestClient(build_app(self.controller, self.calls))

        client.post("/vegetables")

        assert self.calls == ["forced", "endpoint"]

    def test_short_circuit_in_request_stage(self):
        async def reject(request, call_next):
            return JSONResponse({"detail": "nope"}, status_code=405)

        self.controller.request("collection", "get", reject)
        self.controller.documents(recorder(self.calls, "documents"))
        client = TestClient(build_app(self.controller, self.calls))

        response = client.get("/vegetables")

        assert response.status_code == 405
        assert self.calls == []

    def test_get_with_path_runs_before_stages(self):
        async def count(request, call_next):
            self.calls.append("count")
            return JSONResponse({"count": 3})

        self.controller.request(recorder(self.calls, "request"))
        self.controller.get("/vegetables/count", count)
        client = TestClient(build_app(self.controller, self.calls))

        response = client.get("/vegetables/count")

        assert response.json() == {"count": 3}
        assert self.calls == ["count"]

    def test_unrelated_paths_untouched(self):
        self.controller.request(recorder(self.calls, "request"))
        client = TestClient(build_app(self.controller, self.calls))

        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/missing").status_code == 404
        assert self.calls == []
