from tagsim.sim.core.rng import DeterministicRng


def _draws(rng: DeterministicRng, count: int = 8) -> list[float]:
    return [rng.next_range(0.0, 1.0) for _ in range(count)]


def test_agent_streams_are_reproducible():
    assert _draws(DeterministicRng(100).spawn_agent_stream(3)) == _draws(DeterministicRng(100).spawn_agent_stream(3))


def test_agent_streams_differ_between_agents_of_one_world():
    rng = DeterministicRng(100)
    streams = [tuple(_draws(rng.spawn_agent_stream(index))) for index in range(16)]

    assert len(set(streams)) == len(streams)


def test_adjacent_seeds_do_not_share_shifted_agent_streams():
    for seed in (0, 1, 100, 2**32):
        for index in range(8):
            shifted = DeterministicRng(seed).spawn_agent_stream(index + 1)
            neighbour = DeterministicRng(seed + 1).spawn_agent_stream(index)
            assert _draws(shifted) != _draws(neighbour)


def test_spawning_a_stream_does_not_advance_the_parent():
    parent = DeterministicRng(7)
    parent.spawn_agent_stream(0)

    assert _draws(parent) == _draws(DeterministicRng(7))


def test_next_range_and_ints_stay_in_bounds():
    rng = DeterministicRng(5)
    for _ in range(200):
        assert 2.0 <= rng.next_range(2.0, 3.0) < 3.0
        assert 0 <= rng.next_int(4) < 4
        assert -1 <= rng.next_int_inclusive(-1, 2) <= 2
    assert rng.next_range(4.0, 4.0) == 4.0
