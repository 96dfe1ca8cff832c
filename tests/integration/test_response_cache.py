import threading

from core.caching import CacheSweeper, ResponseCache, canonical_json, request_hash
from core.models.chat import ChatRequest, ChatResponse, ResponseType, Source


def make_response(answer="cached answer"):
    return ChatResponse(
        answer=answer,
        task="summary",
        sources=[Source(id="1", url="https://x.com/1", title="One")],
        response_type=ResponseType.TEXT,
    )


def test_request_hash_ignores_field_order():
    first = {"query": "hello", "extra": 1}
    second = {"extra": 1, "query": "hello"}

    assert canonical_json(first) == canonical_json(second)
    assert request_hash(first) == request_hash(second)
    assert len(request_hash(first)) == 64


def test_request_hash_distinguishes_queries():
    assert request_hash({"query": "a"}) != request_hash({"query": "b"})


def test_canonical_json_is_compact_and_keeps_unicode():
    assert canonical_json({"query": "שלום"}) == '{"query":"שלום"}'


def test_set_then_get_returns_equal_response(cache_store):
    cache = ResponseCache(cache_store, ttl_seconds=60)
    request = ChatRequest(query="Summarize https://x.com/1")

    key = cache.set(request, make_response())
    cached = cache.get(ChatRequest(query="Summarize https://x.com/1"))

    assert key == request_hash({"query": "Summarize https://x.com/1"})
    assert cached == make_response()


def test_entry_expires_after_ttl(cache_store):
    cache = ResponseCache(cache_store, ttl_seconds=60)
    request = ChatRequest(query="q")
    cache.set(request, make_response())

    cache_store.advance(59)
    assert cache.get(request) is not None

    cache_store.advance(1)
    assert cache.get(request) is None


def test_set_overwrites_and_refreshes_expiry(cache_store):
    cache = ResponseCache(cache_store, ttl_seconds=60)
    request = ChatRequest(query="q")
    cache.set(request, make_response("old"))
    cache_store.advance(50)
    cache.set(request, make_response("new"))
    cache_store.advance(50)

    assert cache.get(request).answer == "new"
    assert len(cache_store.rows) == 1


def test_undecodable_row_is_a_miss(cache_store):
    cache = ResponseCache(cache_store, ttl_seconds=60)
    request = ChatRequest(query="q")
    cache.set(request, make_response())
    cache_store.rows[request_hash({"query": "q"})]["response_json"] = {"unexpected": True}

    assert cache.get(request) is None
    assert cache.get_stats()["decode_errors"] == 1


def test_sweep_removes_only_expired_rows(cache_store):
    short = ResponseCache(cache_store, ttl_seconds=10)
    long = ResponseCache(cache_store, ttl_seconds=1000)
    short.set(ChatRequest(query="short"), make_response())
    long.set(ChatRequest(query="long"), make_response())

    cache_store.advance(10)
    removed = short.sweep()

    assert removed == 1
    assert long.get(ChatRequest(query="long")) is not None
    assert len(cache_store.rows) == 1


def test_stats_count_hits_and_misses(cache_store):
    cache = ResponseCache(cache_store, ttl_seconds=60)
    request = ChatRequest(query="q")
    cache.get(request)
    cache.set(request, make_response())
    cache.get(request)

    stats = cache.get_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["sets"] == 1
    assert stats["hit_rate"] == 0.5
    assert stats["table"]["total_entries"] == 1


def test_sweeper_run_once_logs_store_failure(cache_store):
    cache_store.fail("delete_expired")
    sweeper = CacheSweeper(ResponseCache(cache_store), interval_seconds=60)

    assert sweeper.run_once() == 0
    assert sweeper.runs == 1


def test_sweeper_thread_sweeps_until_stopped(cache_store):
    swept = threading.Event()

    class RecordingCache:
        def sweep(self):
            swept.set()
            return 0

    sweeper = CacheSweeper(RecordingCache(), interval_seconds=0.01)
    with sweeper:
        assert sweeper.is_running()
        assert swept.wait(2.0)

    assert not sweeper.is_running()
