import time
import wave

import pytest

from prismengine import audio_manager as am
from prismengine.audio_backend import SimulatedAudioBackend
from prismengine.audio_manager import AudioManager
from prismengine.audio_types import AudioError, AudioEventType
from prismengine.sound import background_music, button_click, footstep


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_wav(path, seconds, rate=8000):
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(rate)
        wav.writeframes(b"\x00\x00" * int(rate * seconds))
    return str(path)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(clock):
    mgr = AudioManager(SimulatedAudioBackend(clock))
    mgr.initialize()
    events = []
    mgr.event_callback = events.append
    mgr.events = events
    yield mgr
    mgr.shutdown()


def wait_for_event(mgr, event_type, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        mgr.update()
        if any(e.type is event_type for e in mgr.events):
            return True
        time.sleep(0.01)
    return False


def test_load_play_pause_sound(manager, tmp_path):
    path = make_wav(tmp_path / "a.wav", 1.0)
    manager.load_sound("click", path)
    assert manager.wait_idle(2.0)
    assert manager.is_sound_loaded("click")
    assert manager.loaded_sound_count == 1
    assert manager.loaded_sound_names == ["click"]

    manager.play_audio("click")
    assert manager.wait_idle(2.0)
    assert manager.is_audio_playing("click")
    assert not manager.is_audio_paused("click")

    manager.pause_audio("click")
    assert manager.wait_idle(2.0)
    assert manager.is_audio_paused("click")

    manager.update()
    assert [e.type for e in manager.events] == [
        AudioEventType.SOUND_LOADED,
        AudioEventType.SOUND_PLAYED,
        AudioEventType.SOUND_PAUSED,
    ]
    assert manager.events[0].message == f"Sound loaded: {path}"


def test_load_before_initialize_raises(tmp_path):
    mgr = AudioManager(SimulatedAudioBackend(FakeClock()))
    with pytest.raises(AudioError):
        mgr.load_sound("x", make_wav(tmp_path / "x.wav", 1.0))
    with pytest.raises(AudioError):
        mgr.load_music("x", make_wav(tmp_path / "y.wav", 1.0))
    assert mgr.last_error == "AudioManager not initialized"


def test_play_before_initialize_is_ignored():
    mgr = AudioManager(SimulatedAudioBackend(FakeClock()))
    mgr.play_audio("nothing")
    assert mgr.is_audio_playing("nothing") is False
    assert mgr.is_initialized is False


def test_missing_file_reports_error(manager, tmp_path):
    path = str(tmp_path / "missing.wav")
    manager.load_sound("ghost", path)
    assert manager.wait_idle(2.0)
    manager.update()
    assert not manager.is_sound_loaded("ghost")
    assert manager.events[0].type is AudioEventType.AUDIO_ERROR
    assert manager.events[0].message == f"Failed to load sound: {path}"
    assert manager.last_error == f"Failed to load sound: {path}"


def test_duplicate_load_is_ignored(manager, tmp_path):
    path = make_wav(tmp_path / "a.wav", 1.0)
    manager.load_sound("s", path)
    manager.load_sound("s", path)
    assert manager.wait_idle(2.0)
    manager.update()
    assert manager.loaded_sound_count == 1
    loaded = [e for e in manager.events if e.type is AudioEventType.SOUND_LOADED]
    assert len(loaded) == 1


def test_unload_sound(manager, tmp_path):
    manager.load_sound("s", make_wav(tmp_path / "a.wav", 1.0))
    manager.unload_sound("s")
    assert manager.wait_idle(2.0)
    manager.update()
    assert not manager.is_sound_loaded("s")
    assert manager.events[-1].type is AudioEventType.SOUND_UNLOADED


def test_master_volume_is_clamped(manager, clock):
    manager.set_master_volume(2.0)
    assert manager.wait_idle(2.0)
    assert manager.master_volume == 1.0
    manager.set_master_volume(-1.0)
    assert manager.wait_idle(2.0)
    assert manager.master_volume == 0.0


def test_music_pitch_has_lower_bound(manager, clock, tmp_path):
    manager.load_music("song", make_wav(tmp_path / "m.wav", 4.0))
    manager.play_music("song", True)
    manager.set_music_pitch("song", 0.0)
    assert manager.wait_idle(2.0)
    clock.now += 10.0
    assert manager.get_music_time_played("song") == pytest.approx(1.0)


def test_music_length_and_seek(manager, tmp_path):
    manager.load_music("song", make_wav(tmp_path / "m.wav", 1.0))
    assert manager.wait_idle(2.0)
    assert manager.get_music_time_length("song") == pytest.approx(1.0)
    manager.seek_music("song", 0.5)
    assert manager.get_music_time_played("song") == pytest.approx(0.5)
    assert manager.get_music_time_length("unknown") == 0.0
    assert manager.get_music_time_played("unknown") == 0.0


def test_non_looping_music_finishes(manager, clock, tmp_path):
    manager.load_music("song", make_wav(tmp_path / "m.wav", 1.0))
    manager.play_music("song", False)
    assert manager.wait_idle(2.0)
    assert manager.is_music_playing("song")
    clock.now += 5.0
    assert wait_for_event(manager, AudioEventType.MUSIC_FINISHED)
    assert not manager.is_music_playing("song")


def test_pause_and_resume_all_music(manager, tmp_path):
    manager.load_music("a", make_wav(tmp_path / "a.wav", 2.0))
    manager.load_music("b", make_wav(tmp_path / "b.wav", 2.0))
    manager.play_music("a")
    manager.play_music("b")
    assert manager.wait_idle(2.0)
    manager.pause_all_music()
    assert manager.wait_idle(2.0)
    assert manager.is_music_paused("a") and manager.is_music_paused("b")
    manager.resume_all_music()
    assert manager.wait_idle(2.0)
    assert not manager.is_music_paused("a")
    assert not manager.is_music_paused("b")


def test_stop_all_music(manager, tmp_path):
    manager.load_music("a", make_wav(tmp_path / "a.wav", 2.0))
    manager.play_music("a")
    assert manager.wait_idle(2.0)
    manager.stop_all_music()
    assert manager.wait_idle(2.0)
    manager.update()
    assert not manager.is_music_playing("a")
    assert manager.events[-1].type is AudioEventType.MUSIC_STOPPED


def test_stop_all_sounds(manager, tmp_path):
    manager.load_sound("a", make_wav(tmp_path / "a.wav", 1.0))
    manager.load_sound("b", make_wav(tmp_path / "b.wav", 1.0))
    manager.play_audio("a")
    manager.play_audio("b")
    assert manager.wait_idle(2.0)
    manager.pause_all_sounds()
    assert manager.wait_idle(2.0)
    assert manager.is_audio_paused("a") and manager.is_audio_paused("b")
    manager.resume_all_sounds()
    assert manager.wait_idle(2.0)
    assert not manager.is_audio_paused("a")
    manager.stop_all_sounds()
    assert manager.wait_idle(2.0)
    assert not manager.is_audio_playing("a")
    assert not manager.is_audio_playing("b")


def test_batch_loading(manager, tmp_path):
    manager.load_sound_batch(
        [
            button_click("click", make_wav(tmp_path / "c.wav", 1.0)),
            footstep("step", make_wav(tmp_path / "s.wav", 1.0)),
        ]
    )
    manager.load_music_batch([background_music("theme", make_wav(tmp_path / "t.wav", 1.0))])
    assert manager.wait_idle(2.0)
    assert sorted(manager.loaded_sound_names) == ["click", "step"]
    assert manager.loaded_music_names == ["theme"]
    assert manager.loaded_music_count == 1


def test_callback_exception_does_not_stop_delivery(manager, tmp_path):
    seen = []

    def callback(event):
        seen.append(event.type)
        raise RuntimeError("boom")

    manager.event_callback = callback
    manager.load_sound("a", make_wav(tmp_path / "a.wav", 1.0))
    manager.play_audio("a")
    assert manager.wait_idle(2.0)
    manager.update()
    assert seen == [AudioEventType.SOUND_LOADED, AudioEventType.SOUND_PLAYED]


def test_shutdown_releases_everything(clock, tmp_path):
    mgr = AudioManager(SimulatedAudioBackend(clock))
    mgr.initialize()
    mgr.load_sound("a", make_wav(tmp_path / "a.wav", 1.0))
    mgr.load_music("m", make_wav(tmp_path / "m.wav", 1.0))
    assert mgr.wait_idle(2.0)
    mgr.shutdown()
    assert mgr.is_initialized is False
    assert mgr.loaded_sound_count == 0
    assert mgr.loaded_music_count == 0


def test_context_manager(clock, tmp_path):
    with AudioManager(SimulatedAudioBackend(clock)) as mgr:
        assert mgr.is_initialized
        mgr.load_sound("a", make_wav(tmp_path / "a.wav", 1.0))
        assert mgr.wait_idle(2.0)
        assert mgr.is_sound_loaded("a")
    assert mgr.is_initialized is False


def test_global_manager_lifecycle():
    first = am.get_manager()
    assert am.get_manager() is first
    am.initialize()
    assert first.is_initialized
    am.shutdown()
    assert first.is_initialized is False
    second = am.get_manager()
    assert second is not first
    am.shutdown()
    assert second.is_initialized is False