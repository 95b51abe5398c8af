import wave

import pytest

from prismengine.audio_backend import AudioBackend, SimulatedAudioBackend
from prismengine.audio_types import AudioError

RATE = 1000
FRAMES = 2000
LENGTH = FRAMES / RATE


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def wav_path(tmp_path):
    path = tmp_path / "clip.wav"
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(RATE)
        wav.writeframes(b"\x00\x00" * FRAMES)
    return str(path)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend(clock):
    device = SimulatedAudioBackend(clock)
    device.open_device()
    return device


def test_backend_interface_is_abstract():
    with pytest.raises(TypeError):
        AudioBackend()


def test_device_open_and_close(clock):
    device = SimulatedAudioBackend(clock)
    assert not device.is_device_ready()
    device.open_device()
    assert device.is_device_ready()
    device.close_device()
    assert not device.is_device_ready()


def test_load_requires_ready_device(clock, wav_path):
    device = SimulatedAudioBackend(clock)
    with pytest.raises(AudioError):
        device.load_sound(wav_path)


def test_missing_file_fails(backend, tmp_path):
    with pytest.raises(AudioError):
        backend.load_sound(str(tmp_path / "missing.wav"))


def test_invalid_file_fails(backend, tmp_path):
    bogus = tmp_path / "bogus.wav"
    bogus.write_bytes(b"not audio at all")
    with pytest.raises(AudioError):
        backend.load_music(str(bogus))


def test_handles_are_distinct(backend, wav_path):
    first = backend.load_sound(wav_path)
    second = backend.load_sound(wav_path)
    third = backend.load_music(wav_path)
    assert len({first, second, third}) == 3


def test_master_volume_is_stored(backend):
    backend.set_master_volume(0.25)
    assert backend.master_volume == 0.25


def test_sound_plays_until_its_length(backend, clock, wav_path):
    handle = backend.load_sound(wav_path)
    assert not backend.is_sound_playing(handle)
    backend.play_sound(handle)
    clock.now = LENGTH / 2
    assert backend.is_sound_playing(handle)
    clock.now = LENGTH + 0.5
    assert not backend.is_sound_playing(handle)


def test_pitch_speeds_up_playback(backend, clock, wav_path):
    handle = backend.load_sound(wav_path)
    backend.set_sound_pitch(handle, 2.0)
    backend.play_sound(handle)
    clock.now = LENGTH * 0.75
    assert not backend.is_sound_playing(handle)


def test_pause_freezes_position(backend, clock, wav_path):
    handle = backend.load_sound(wav_path)
    backend.play_sound(handle)
    clock.now = LENGTH / 2
    backend.pause_sound(handle)
    assert not backend.is_sound_playing(handle)
    clock.now = 100.0
    backend.resume_sound(handle)
    assert backend.is_sound_playing(handle)
    clock.now = 100.0 + LENGTH
    assert not backend.is_sound_playing(handle)


def test_stop_sound(backend, wav_path):
    handle = backend.load_sound(wav_path)
    backend.play_sound(handle)
    backend.stop_sound(handle)
    assert not backend.is_sound_playing(handle)


def test_unloaded_sound_is_unknown(backend, wav_path):
    handle = backend.load_sound(wav_path)
    backend.unload_sound(handle)
    with pytest.raises(AudioError):
        backend.play_sound(handle)
    with pytest.raises(AudioError):
        backend.set_sound_volume(handle, 0.5)


def test_unknown_music_handle(backend):
    with pytest.raises(AudioError):
        backend.music_length(999)


def test_music_length_and_time_played(backend, clock, wav_path):
    handle = backend.load_music(wav_path)
    assert backend.music_length(handle) == pytest.approx(LENGTH)
    backend.play_music(handle, False)
    clock.now = 0.5
    assert backend.music_time_played(handle) == pytest.approx(0.5)


def test_non_looping_music_stops_after_update(backend, clock, wav_path):
    handle = backend.load_music(wav_path)
    backend.play_music(handle, False)
    clock.now = LENGTH + 0.5
    assert backend.is_music_playing(handle)
    backend.update_music(handle)
    assert not backend.is_music_playing(handle)


def test_looping_music_wraps(backend, clock, wav_path):
    handle = backend.load_music(wav_path)
    backend.play_music(handle, True)
    clock.now = LENGTH + 0.5
    backend.update_music(handle)
    assert backend.is_music_playing(handle)
    assert backend.music_time_played(handle) == pytest.approx(0.5)


def test_music_pause_and_resume(backend, clock, wav_path):
    handle = backend.load_music(wav_path)
    backend.play_music(handle, False)
    clock.now = 0.5
    backend.pause_music(handle)
    assert not backend.is_music_playing(handle)
    clock.now = 10.0
    assert backend.music_time_played(handle) == pytest.approx(0.5)
    backend.resume_music(handle)
    assert backend.is_music_playing(handle)


def test_seek_is_clamped(backend, wav_path):
    handle = backend.load_music(wav_path)
    backend.seek_music(handle, 1.5)
    assert backend.music_time_played(handle) == pytest.approx(1.5)
    backend.seek_music(handle, LENGTH * 10)
    assert backend.music_time_played(handle) == pytest.approx(LENGTH)
    backend.seek_music(handle, -3.0)
    assert backend.music_time_played(handle) == pytest.approx(0.0)