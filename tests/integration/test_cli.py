"""
Tests for the command-line client
"""

import json
import logging

import pytest
import httpx

from api.cli import (
    EXIT_BAD_PLAN,
    EXIT_FAILED,
    EXIT_OK,
    RunPlan,
    build_action,
    load_plan,
    main,
    run_plan,
    to_jsonable,
)
from shared.errors import ResponseError
from shared.schemas import Outcome
from shared.transport import HttpTransport
from request_orchestrator.markers import CALL_API, CHAIN_API, CONCURRENT_API


@pytest.fixture(autouse=True)
def restore_loggers():
    """Undo the handler setup main() performs"""
    names = ("cli", "request_orchestrator", "shared")
    saved = {
        name: (logging.getLogger(name).handlers[:], logging.getLogger(name).propagate, logging.getLogger(name).level)
        for name in names
    }
    yield
    for name, (handlers, propagate, level) in saved.items():
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            if handler not in handlers:
                handler.close()
        logger.handlers = handlers
        logger.propagate = propagate
        logger.setLevel(level)


@pytest.fixture
def write_plan(tmp_path):
    def factory(plan):
        path = tmp_path / "plan.json"
        path.write_text(json.dumps(plan))
        return str(path)
    return factory


@pytest.fixture
def mock_api(monkeypatch, fake_api):
    """Make main() build its transport on top of the fake API"""
    def from_settings(cls, settings, **kwargs):
        return cls(
            base_url="https://api.example.test",
            transport=httpx.MockTransport(fake_api.handler)
        )

    monkeypatch.setattr(HttpTransport, "from_settings", classmethod(from_settings))
    return fake_api


class TestLoadPlan:
    """Test plan file parsing"""

    def test_valid_plan(self, write_plan):
        path = write_plan({"mode": "chain", "calls": [{"method": "GET", "url": "/a"}]})

        plan = load_plan(path)

        assert plan.mode == "chain"
        assert plan.calls == [{"method": "GET", "url": "/a"}]
        assert plan.fields == {}

    def test_unknown_mode(self, write_plan):
        with pytest.raises(ValueError):
            load_plan(write_plan({"mode": "parallel", "calls": [{"method": "GET", "url": "/a"}]}))

    def test_no_calls(self, write_plan):
        with pytest.raises(ValueError):
            load_plan(write_plan({"mode": "call", "calls": []}))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_plan(str(path))


class TestBuildAction:
    """Test plan to action conversion"""

    def test_call_uses_first_call(self):
        plan = RunPlan(mode="call", calls=[{"method": "GET", "url": "/a"}, {"method": "GET", "url": "/b"}],
                       fields={"request_id": 1})

        action = build_action(plan)

        assert action == {CALL_API: {"method": "GET", "url": "/a"}, "request_id": 1}

    def test_chain_producers_ignore_previous(self):
        plan = RunPlan(mode="chain", calls=[{"method": "GET", "url": "/a"}, {"method": "GET", "url": "/b"}])

        action = build_action(plan)

        producers = action[CHAIN_API]
        assert producers[0](None) == {CALL_API: {"method": "GET", "url": "/a"}}
        assert producers[1](Outcome.success({})) == {CALL_API: {"method": "GET", "url": "/b"}}

    def test_concurrent(self):
        plan = RunPlan(mode="concurrent", calls=[{"method": "GET", "url": "/a"}])
        assert len(build_action(plan)[CONCURRENT_API]) == 1


@pytest.mark.asyncio
class TestRunPlan:
    """Test running plans against the fake API"""

    async def test_single_call_report(self, fake_api, transport):
        fake_api.add("GET", "/a", httpx.Response(200, json={"a": 1}))
        plan = RunPlan(mode="call", calls=[{"method": "GET", "url": "/a", "success_type": "A_OK"}])

        report = await run_plan(plan, transport)

        assert report["outcomes"] == [Outcome.success({"a": 1})]
        assert report["dispatched"] == [{"type": "A_OK", "res": {"a": 1}}]

    async def test_concurrent_report(self, fake_api, transport):
        fake_api.add("GET", "/a", httpx.Response(200, json="a"))
        plan = RunPlan(mode="concurrent", calls=[
            {"method": "GET", "url": "/a"},
            {"method": "GET", "url": "/missing"},
        ])

        report = await run_plan(plan, transport)

        assert report["outcomes"] == [Outcome.success("a"), Outcome.failure("not found")]


class TestToJsonable:
    """Test report serialization"""

    def test_outcomes_and_errors(self):
        value = {
            "outcomes": [Outcome.success({"a": 1}), Outcome.failure(ResponseError(500))],
        }

        assert to_jsonable(value) == {
            "outcomes": [
                {"result": {"a": 1}},
                {"error": "ResponseError: Request failed with status 500"},
            ]
        }


class TestMain:
    """Test the CLI entry point end to end"""

    def test_success_exit_code(self, mock_api, write_plan, capsys):
        mock_api.add("GET", "/a", httpx.Response(200, json={"a": 1}))
        path = write_plan({"mode": "chain", "calls": [
            {"method": "GET", "url": "/a", "success_type": "A_OK"},
        ]})

        code = main([path, "--no-log-file"])

        assert code == EXIT_OK
        out = capsys.readouterr().out
        assert "DISPATCHED ACTIONS" in out
        assert '"A_OK"' in out

    def test_failure_exit_code(self, mock_api, write_plan):
        path = write_plan({"mode": "call", "calls": [{"method": "GET", "url": "/missing"}]})

        assert main([path, "--no-log-file"]) == EXIT_FAILED

    def test_bad_plan_exit_code(self, write_plan):
        path = write_plan({"mode": "call", "calls": []})

        assert main([path, "--no-log-file"]) == EXIT_BAD_PLAN

    def test_call_without_url_exit_code(self, mock_api, write_plan):
        path = write_plan({"mode": "call", "calls": [{"method": "GET"}]})

        assert main([path, "--no-log-file"]) == EXIT_BAD_PLAN

    def test_log_file_written(self, mock_api, write_plan, tmp_path):
        mock_api.add("GET", "/a", httpx.Response(200, json={}))
        path = write_plan({"calls": [{"method": "GET", "url": "/a"}]})
        log_dir = tmp_path / "logs"

        main([path, "--log-dir", str(log_dir), "--log-level", "DEBUG"])

        log_files = list(log_dir.glob("cli_*.log"))
        assert len(log_files) == 1
