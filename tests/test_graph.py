import random

from pyautodj.catalog import Song, build_catalog
from pyautodj.graph import build_song_transitions, build_transitions
from pyautodj.segments import SongSegment

from tests.conftest import build_song, generate_song_paths


def transitions(song: Song) -> dict[str, set[str]]:
    return {
        segment_id: set(segment.allowed_transitions)
        for segment_id, segment in song.segments.items()
    }


def test_single_loop_with_ending(scenario_songs):
    assert transitions(scenario_songs["song_1"]) == {
        "start": {"loop"},
        "loop": {"end"},
        "end": set(),
    }


def test_multiple_loops_with_ending(scenario_songs):
    assert transitions(scenario_songs["song_2"]) == {
        "start": {"loop0"},
        "loop0": {"loop1", "end"},
        "loop1": {"loop0", "end"},
        "end": set(),
    }


def test_dedicated_transitions(scenario_songs):
    assert transitions(scenario_songs["y3"]) == {
        "start": {"loop0"},
        "loop0": {"loop0-to-1", "end"},
        "loop0-to-1": {"loop1"},
        "loop1": {"end"},
        "end": set(),
    }


def test_loop_specific_endings():
    song = build_song(["s/a_start.ogg", "s/a_loop0.ogg", "s/a_loop1.ogg", "s/a_loop2.ogg", "s/a_loop1-end.ogg"])
    assert transitions(song) == {
        "start": {"loop0"},
        "loop0": {"loop1", "loop2"},
        "loop1": {"loop0", "loop2", "loop1-end"},
        "loop2": {"loop0", "loop1"},
        "loop1-end": set(),
    }


def test_endless_single_loop():
    song = build_song(["s/a_start.ogg", "s/a_loop.ogg"])
    assert transitions(song) == {"start": {"loop"}, "loop": set()}


def test_transition_prefix_does_not_leak_between_loops():
    song = build_song(["s/a_start.ogg", "s/a_loop1.ogg", "s/a_loop10.ogg", "s/a_loop0.ogg", "s/a_loop10-to-1.ogg", "s/a_loop1-to-10.ogg"])
    assert song.segments["loop1"].allowed_transitions == {"loop1-to-10"}
    assert song.segments["loop10"].allowed_transitions == {"loop10-to-1"}
    assert song.segments["loop0"].allowed_transitions == frozenset()


def test_build_replaces_segments_instead_of_mutating():
    songs = build_catalog(["s/a_start.ogg", "s/a_loop.ogg", "s/a_end.ogg"])
    before = songs["a"].segments["start"]
    build_transitions(songs)
    after = songs["a"].segments["start"]
    assert before.allowed_transitions == frozenset()
    assert after.allowed_transitions == {"loop"}
    assert before is not after


def test_rebuild_is_idempotent(scenario_songs):
    before = transitions(scenario_songs["y3"])
    build_song_transitions(scenario_songs["y3"])
    assert transitions(scenario_songs["y3"]) == before


def test_multiloop_song_never_references_plain_loop():
    rng = random.Random(7)
    for _ in range(50):
        loop_count = rng.randint(2, 10)
        song_id = f"s{rng.randrange(1000)}"
        paths = [f"songs/{song_id}_start.ogg"]
        paths += [f"songs/{song_id}_loop{i}.ogg" for i in range(loop_count)]
        song = build_song(paths)
        for segment in song.segments.values():
            assert segment.id != "loop"
            assert "loop" not in segment.allowed_transitions


def test_generated_songs_have_usable_graphs():
    rng = random.Random(11)
    for _ in range(200):
        song = build_song(generate_song_paths(rng, 12, has_end=rng.random() < 0.5))
        assert song.segments["start"].allowed_transitions
        first_loop = "loop0" if song.has_multiple_loops else "loop"
        if song.has_end:
            assert song.segments[first_loop].allowed_transitions
        for segment in song.segments.values():
            assert "start" not in segment.allowed_transitions
            for target in segment.allowed_transitions:
                assert target in song.segments
                if target.endswith("end"):
                    assert song.segments[target].allowed_transitions == frozenset()


def test_unknown_segment_has_no_transitions():
    song = Song(id="odd", segments={"intro": SongSegment("intro", "ogg")})
    build_song_transitions(song)
    assert song.segments["intro"].allowed_transitions == frozenset()
