import pytest

from pirkit.time_profiler import ProType, TimeProfiler, TimeTrack, parse_profile


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_protype_names():
    assert str(ProType.NETWORK) == "NETWORK"
    assert str(ProType.LOAD_CSV) == "LOAD_CSV"
    assert ProType(2) is ProType.ALGO


def test_track_truncates_to_whole_milliseconds():
    track = TimeTrack(ProType.ALGO)
    track.count(2.9)
    assert track.sum() == 2


def test_track_statistics():
    track = TimeTrack(ProType.ALGO)
    durations = [10, 10, 10]
    for d in durations:
        track.count(d)
    assert track.num() == len(durations)
    assert track.avg() == durations[0]
    assert track.sum() == sum(durations)


def test_track_avg_empty_raises():
    with pytest.raises(ZeroDivisionError):
        TimeTrack().avg()


def test_track_str():
    track = TimeTrack(ProType.ALGO)
    diff = 7
    track.count(diff)
    assert str(track) == f"ProType: ALGO Num: 1 Avg: {diff} Sum: {diff}"


def test_profiler_records_consecutive_phases():
    clock = FakeClock()
    profiler = TimeProfiler(clock)
    send_ms, compute_ms = 40, 15
    profiler.count("send", ProType.NETWORK)
    clock.now += send_ms
    profiler.count("compute", ProType.ALGO)
    clock.now += compute_ms
    profiler.flush()
    assert sorted(profiler.tracks) == ["compute", "send"]
    assert profiler.tracks["send"].sum() == send_ms
    assert profiler.tracks["compute"].sum() == compute_ms
    assert profiler.tracks["send"].pro_type is ProType.NETWORK
    assert profiler.tracks["compute"].pro_type is ProType.ALGO


def test_profiler_repeated_rounds():
    clock = FakeClock()
    profiler = TimeProfiler(clock)
    rounds, step_ms = 4, 25
    for _ in range(rounds):
        profiler.count("query", ProType.NETWORK)
        clock.now += step_ms
        profiler.flush()
    track = profiler.tracks["query"]
    assert track.num() == rounds
    assert track.avg() == step_ms


def test_flush_without_open_phase_records_nothing():
    profiler = TimeProfiler(FakeClock())
    profiler.flush()
    assert profiler.tracks == {}


def test_disabled_profiler_records_nothing():
    clock = FakeClock()
    profiler = TimeProfiler(clock)
    profiler.disable()
    profiler.count("send", ProType.NETWORK)
    clock.now += 30
    profiler.count("other", ProType.ALGO)
    profiler.flush()
    assert profiler.tracks == {}


def test_first_type_of_phase_is_kept():
    clock = FakeClock()
    profiler = TimeProfiler(clock)
    profiler.count("phase", ProType.LOAD_DB)
    clock.now += 5
    profiler.count("phase", ProType.ALGO)
    clock.now += 5
    profiler.flush()
    assert profiler.tracks["phase"].pro_type is ProType.LOAD_DB


def test_proto_string_round_trip_groups_by_type():
    clock = FakeClock()
    profiler = TimeProfiler(clock)
    send_ms, compute_ms, save_ms = 12, 30, 8
    profiler.count("send", ProType.NETWORK)
    clock.now += send_ms
    profiler.count("compute", ProType.ALGO)
    clock.now += compute_ms
    profiler.count("extract", ProType.ALGO)
    clock.now += save_ms
    profiler.flush()
    assert parse_profile(profiler.proto_string()) == {
        "ALGO": compute_ms + save_ms,
        "NETWORK": send_ms,
    }


def test_proto_string_empty():
    assert parse_profile(TimeProfiler(FakeClock()).proto_string()) == {}


def test_report_lists_phases():
    clock = FakeClock()
    profiler = TimeProfiler(clock)
    profiler.count("send", ProType.NETWORK)
    clock.now += 3
    profiler.flush()
    assert profiler.report().startswith("send, ProType: NETWORK\n")


def test_parse_profile_rejects_garbage():
    with pytest.raises(ValueError):
        parse_profile(b"not json")


def test_parse_profile_rejects_non_integer_values():
    with pytest.raises(ValueError):
        parse_profile('{"ALGO": "x"}')