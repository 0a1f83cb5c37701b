import threading
import time

import pytest

from alliancelogos.services.batching import chunked, run_in_batches


def test_chunked():
    assert list(chunked([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]
    assert list(chunked([], 3)) == []


def test_chunked_rejects_zero_width():
    with pytest.raises(ValueError):
        list(chunked([1], 0))


def test_results_follow_item_order(sleeper):
    def worker(item):
        # later items finish first inside a batch
        time.sleep(0.01 * (5 - item % 5))
        return item * 10

    assert run_in_batches(list(range(12)), worker, 5, 0.2, sleep=sleeper) == [i * 10 for i in range(12)]


def test_pauses_only_between_batches(sleeper):
    run_in_batches(list(range(25)), lambda i: i, 10, 0.2, sleep=sleeper)
    assert sleeper.pauses == [0.2, 0.2]


def test_single_batch_never_pauses(sleeper):
    run_in_batches([1, 2, 3], lambda i: i, 10, 0.2, sleep=sleeper)
    assert sleeper.pauses == []


def test_empty_input(sleeper):
    assert run_in_batches([], lambda i: i, 10, 0.2, sleep=sleeper) == []


def test_batches_never_overlap():
    lock = threading.Lock()
    state = {"active": 0, "peak": 0, "finished": []}
    events = []

    def worker(item):
        with lock:
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
            events.append(("start", item))
        time.sleep(0.02)
        with lock:
            state["active"] -= 1
            events.append(("end", item))
        return item

    def pause(seconds):
        events.append(("pause", seconds))

    run_in_batches(list(range(9)), worker, 3, 0.05, sleep=pause)

    assert state["peak"] <= 3
    # every item of a batch has ended before the pause that precedes the next batch
    pauses = [i for i, event in enumerate(events) if event[0] == "pause"]
    assert len(pauses) == 2
    for index, batch in zip(pauses, ([0, 1, 2], [3, 4, 5])):
        ended = {item for kind, item in events[:index] if kind == "end"}
        assert set(batch) <= ended
        started_after = {item for kind, item in events[index:] if kind == "start"}
        assert started_after.isdisjoint(batch)


def test_worker_exception_propagates(sleeper):
    def worker(item):
        if item == 2:
            raise RuntimeError("bad item")
        return item

    with pytest.raises(RuntimeError):
        run_in_batches([1, 2, 3], worker, 2, 0, sleep=sleeper)
