import json

import pytest

from cli_router import CLIRouter
from core.caching import ResponseCache
from core.container import get_container, reset_container
from core.exceptions import PlanningError
from core.ingestion import IngestReport
from core.models.chat import ChatRequest, ChatResponse, Source


class FakeChatService:
    def __init__(self, error=None):
        self.error = error
        self.asked = []

    def ask(self, query, use_cache=True):
        self.asked.append((query, use_cache))
        if self.error is not None:
            raise self.error
        return ChatResponse(
            answer="Solar capacity doubled.",
            task="summary",
            sources=[Source(id="1", url="https://news.example.com/a", title="Solar")],
        )


class FakeBatchIngestor:
    def __init__(self, report):
        self.report = report
        self.paths = []

    def ingest_file(self, path, force=False):
        self.paths.append((str(path), force))
        return self.report


@pytest.fixture
def container():
    reset_container()
    yield get_container()
    reset_container()


@pytest.fixture
def router():
    return CLIRouter()


def test_chat_ask_prints_answer_and_sources(container, router, capsys):
    service = FakeChatService()
    container.register_instance("chat_service", service)

    assert router.route_command(["chat", "ask", "Summarize https://news.example.com/a"]) == 0

    out = capsys.readouterr().out
    assert "Solar capacity doubled." in out
    assert "https://news.example.com/a - Solar" in out
    assert "[task: summary]" in out
    assert service.asked == [("Summarize https://news.example.com/a", True)]


def test_chat_ask_json_without_cache(container, router, capsys):
    service = FakeChatService()
    container.register_instance("chat_service", service)

    assert router.route_command(["chat", "ask", "q", "--json", "--no-cache"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["task"] == "summary"
    assert payload["response_type"] == "text"
    assert service.asked == [("q", False)]


def test_chat_ask_planning_error_exit_code(container, router):
    container.register_instance("chat_service", FakeChatService(PlanningError("bad plan")))
    assert router.route_command(["chat", "ask", "q"]) == 1


def test_chat_ask_blank_query_exit_code(container, router):
    container.register_instance("chat_service", FakeChatService(ValueError("Query must not be empty")))
    assert router.route_command(["chat", "ask", " "]) == 22


def test_ingest_file_reports_counts(container, router, tmp_path, capsys):
    url_file = tmp_path / "urls.txt"
    url_file.write_text("https://x.com/1\n", encoding="utf-8")
    ingestor = FakeBatchIngestor(IngestReport(total=3, succeeded=2, skipped=1))
    container.register_instance("batch_ingestor", ingestor)

    assert router.route_command(["ingest", "file", str(url_file), "--force"]) == 0

    out = capsys.readouterr().out
    assert "Ingested: 2" in out
    assert ingestor.paths == [(str(url_file), True)]


def test_ingest_file_with_failures_exit_code(container, router, tmp_path):
    url_file = tmp_path / "urls.txt"
    url_file.write_text("https://x.com/1\n", encoding="utf-8")
    report = IngestReport(total=1, failed=1, errors={"https://x.com/1": "fetch failed"})
    container.register_instance("batch_ingestor", FakeBatchIngestor(report))

    assert router.route_command(["ingest", "file", str(url_file)]) == 1


def test_ingest_missing_file_exit_code(container, router, tmp_path):
    container.register_instance("batch_ingestor", FakeBatchIngestor(IngestReport()))
    assert router.route_command(["ingest", "file", str(tmp_path / "missing.txt")]) == 2


def test_cache_sweep(container, router, cache_store, capsys):
    cache = ResponseCache(cache_store, ttl_seconds=10)
    cache.set(ChatRequest(query="q"), ChatResponse.text("summary", "a"))
    cache_store.advance(11)
    container.register_instance("response_cache", cache)

    assert router.route_command(["cache", "sweep"]) == 0
    assert "Removed 1 expired cache entries" in capsys.readouterr().out
    assert cache_store.rows == {}


def test_cache_clear_force(container, router, cache_store):
    cache = ResponseCache(cache_store)
    cache.set(ChatRequest(query="q"), ChatResponse.text("summary", "a"))
    container.register_instance("response_cache", cache)

    assert router.route_command(["cache", "clear", "--force"]) == 0
    assert cache_store.rows == {}


def test_unknown_subcommand_is_argparse_error(router):
    assert router.route_command(["cache", "explode"]) == 2


def test_no_command_prints_help(router, capsys):
    assert router.route_command([]) == 1
    assert "chat" in capsys.readouterr().out
