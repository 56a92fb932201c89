from relayproxy.metrics import Metrics, ResourceId, TimeTags


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_reset_sets_every_tag_to_now():
    clock = FakeClock(500.7)
    tags = TimeTags(clock)
    assert all(tags.get(resource) == int(clock.now) for resource in ResourceId)


def test_update_changes_only_one_tag():
    clock = FakeClock(100)
    tags = TimeTags(clock)
    clock.now = 200
    returned = tags.update(ResourceId.MIME)
    assert returned == 200
    assert tags.get(ResourceId.MIME) == returned
    assert tags[ResourceId.COMMAND] == 100


def test_reset_after_update_aligns_tags():
    clock = FakeClock(100)
    tags = TimeTags(clock)
    clock.now = 300
    tags.update(ResourceId.TRANSFORMATION)
    clock.now = 400
    tags.reset()
    assert {tags.get(r) for r in ResourceId} == {400}


def test_concurrent_connections_up_and_down():
    clock = FakeClock(10)
    metrics = Metrics(time_tags=TimeTags(clock))
    clock.now = 20
    metrics.increase_concurrent_connections()
    metrics.increase_concurrent_connections()
    metrics.decrease_concurrent_connections()
    assert metrics.concurrent_connections == 1
    assert metrics.time_tags.get(ResourceId.CONCURRENT_CONNECTIONS) == 20
    assert metrics.time_tags.get(ResourceId.HISTORIC_ACCESS) == 10


def test_decrease_below_zero_wraps_like_uint64():
    metrics = Metrics(time_tags=TimeTags(FakeClock()))
    metrics.decrease_concurrent_connections()
    assert metrics.concurrent_connections == 2**64 - 1


def test_historic_access_counts_and_tags():
    clock = FakeClock(1)
    metrics = Metrics(time_tags=TimeTags(clock))
    before = metrics.historic_access
    clock.now = 2
    metrics.increase_historic_access()
    assert metrics.historic_access == before + 1
    assert metrics.time_tags.get(ResourceId.HISTORIC_ACCESS) == 2


def test_transfer_bytes_accumulate():
    clock = FakeClock(1)
    metrics = Metrics(time_tags=TimeTags(clock))
    clock.now = 5
    metrics.increase_transfer_bytes(10)
    metrics.increase_transfer_bytes(5)
    assert metrics.transfer_bytes == 15
    assert metrics.time_tags.get(ResourceId.TRANSFERRED_BYTES) == 5