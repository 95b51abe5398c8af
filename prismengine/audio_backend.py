"""Low-level audio device interface and a clock-driven simulated device."""

from __future__ import annotations

import itertools
import time
import wave
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, Optional

from prismengine.audio_types import AudioError


class AudioBackend(ABC):
    """Operations the audio system needs from an audio device."""

    @abstractmethod
    def open_device(self) -> None: ...

    @abstractmethod
    def close_device(self) -> None: ...

    @abstractmethod
    def is_device_ready(self) -> bool: ...

    @abstractmethod
    def set_master_volume(self, volume: float) -> None: ...

    @abstractmethod
    def load_sound(self, path: str) -> int: ...

    @abstractmethod
    def unload_sound(self, handle: int) -> None: ...

    @abstractmethod
    def play_sound(self, handle: int) -> None: ...

    @abstractmethod
    def stop_sound(self, handle: int) -> None: ...

    @abstractmethod
    def pause_sound(self, handle: int) -> None: ...

    @abstractmethod
    def resume_sound(self, handle: int) -> None: ...

    @abstractmethod
    def is_sound_playing(self, handle: int) -> bool: ...

    @abstractmethod
    def set_sound_volume(self, handle: int, volume: float) -> None: ...

    @abstractmethod
    def set_sound_pitch(self, handle: int, pitch: float) -> None: ...

    @abstractmethod
    def set_sound_pan(self, handle: int, pan: float) -> None: ...

    @abstractmethod
    def load_music(self, path: str) -> int: ...

    @abstractmethod
    def unload_music(self, handle: int) -> None: ...

    @abstractmethod
    def play_music(self, handle: int, loop: bool) -> None: ...

    @abstractmethod
    def stop_music(self, handle: int) -> None: ...

    @abstractmethod
    def pause_music(self, handle: int) -> None: ...

    @abstractmethod
    def resume_music(self, handle: int) -> None: ...

    @abstractmethod
    def is_music_playing(self, handle: int) -> bool: ...

    @abstractmethod
    def update_music(self, handle: int) -> None: ...

    @abstractmethod
    def set_music_volume(self, handle: int, volume: float) -> None: ...

    @abstractmethod
    def set_music_pitch(self, handle: int, pitch: float) -> None: ...

    @abstractmethod
    def set_music_pan(self, handle: int, pan: float) -> None: ...

    @abstractmethod
    def seek_music(self, handle: int, position: float) -> None: ...

    @abstractmethod
    def music_length(self, handle: int) -> float: ...

    @abstractmethod
    def music_time_played(self, handle: int) -> float: ...


class _State(Enum):
    STOPPED = auto()
    PLAYING = auto()
    PAUSED = auto()


@dataclass
class _Track:
    length: float
    volume: float = 1.0
    pitch: float = 1.0
    pan: float = 0.5
    state: _State = _State.STOPPED
    offset: float = 0.0
    anchor: float = 0.0
    looping: bool = False

    def position(self, now: float) -> float:
        if self.state is _State.PLAYING:
            return self.offset + (now - self.anchor) * self.pitch
        return self.offset

    def rebase(self, now: float) -> None:
        self.offset = self.position(now)
        self.anchor = now

    def start(self, now: float) -> None:
        self.state = _State.PLAYING
        self.offset = 0.0
        self.anchor = now

    def stop(self) -> None:
        self.state = _State.STOPPED
        self.offset = 0.0

    def pause(self, now: float) -> None:
        if self.state is _State.PLAYING:
            self.rebase(now)
            self.state = _State.PAUSED

    def resume(self, now: float) -> None:
        if self.state is _State.PAUSED:
            self.anchor = now
            self.state = _State.PLAYING

    def set_pitch(self, pitch: float, now: float) -> None:
        self.rebase(now)
        self.pitch = pitch


def _read_wav_length(path: str) -> float:
    try:
        with wave.open(str(path), "rb") as wav:
            frames = wav.getnframes()
            rate = wav.getframerate()
    except (OSError, wave.Error, EOFError) as exc:
        raise AudioError(f"Failed to load audio file: {path}") from exc
    if frames <= 0 or rate <= 0:
        raise AudioError(f"Audio file holds no samples: {path}")
    return frames / rate


class SimulatedAudioBackend(AudioBackend):
    """An audio device that plays nothing but keeps exact playback time.

    Sounds and music are read from WAV files for their length; playback
    position advances with the given clock (seconds) scaled by pitch.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock if clock is not None else time.monotonic
        self._ready = False
        self.master_volume = 1.0
        self._sounds: Dict[int, _Track] = {}
        self._music: Dict[int, _Track] = {}
        self._ids = itertools.count(1)

    def open_device(self) -> None:
        self._ready = True

    def close_device(self) -> None:
        self._ready = False

    def is_device_ready(self) -> bool:
        return self._ready

    def set_master_volume(self, volume: float) -> None:
        self.master_volume = volume

    def _load(self, path: str, table: Dict[int, _Track]) -> int:
        if not self._ready:
            raise AudioError("Audio device is not ready")
        track = _Track(length=_read_wav_length(path))
        handle = next(self._ids)
        table[handle] = track
        return handle

    def _sound(self, handle: int) -> _Track:
        try:
            return self._sounds[handle]
        except KeyError:
            raise AudioError(f"Unknown sound handle: {handle}") from None

    def _track(self, handle: int) -> _Track:
        try:
            return self._music[handle]
        except KeyError:
            raise AudioError(f"Unknown music handle: {handle}") from None

    def load_sound(self, path: str) -> int:
        return self._load(path, self._sounds)

    def unload_sound(self, handle: int) -> None:
        self._sound(handle)
        del self._sounds[handle]

    def play_sound(self, handle: int) -> None:
        self._sound(handle).start(self._clock())

    def stop_sound(self, handle: int) -> None:
        self._sound(handle).stop()

    def pause_sound(self, handle: int) -> None:
        self._sound(handle).pause(self._clock())

    def resume_sound(self, handle: int) -> None:
        self._sound(handle).resume(self._clock())

    def is_sound_playing(self, handle: int) -> bool:
        track = self._sound(handle)
        if track.state is _State.PLAYING and track.position(self._clock()) >= track.length:
            track.stop()
        return track.state is _State.PLAYING

    def set_sound_volume(self, handle: int, volume: float) -> None:
        self._sound(handle).volume = volume

    def set_sound_pitch(self, handle: int, pitch: float) -> None:
        self._sound(handle).set_pitch(pitch, self._clock())

    def set_sound_pan(self, handle: int, pan: float) -> None:
        self._sound(handle).pan = pan

    def load_music(self, path: str) -> int:
        return self._load(path, self._music)

    def unload_music(self, handle: int) -> None:
        self._track(handle)
        del self._music[handle]

    def play_music(self, handle: int, loop: bool) -> None:
        track = self._track(handle)
        track.looping = loop
        track.start(self._clock())

    def stop_music(self, handle: int) -> None:
        self._track(handle).stop()

    def pause_music(self, handle: int) -> None:
        self._track(handle).pause(self._clock())

    def resume_music(self, handle: int) -> None:
        self._track(handle).resume(self._clock())

    def is_music_playing(self, handle: int) -> bool:
        return self._track(handle).state is _State.PLAYING

    def update_music(self, handle: int) -> None:
        """Advance the stream: wrap a looping track, stop one that ended."""
        track = self._track(handle)
        if track.state is not _State.PLAYING:
            return
        now = self._clock()
        position = track.position(now)
        if position < track.length:
            return
        if track.looping:
            track.offset = position % track.length
            track.anchor = now
        else:
            track.stop()

    def set_music_volume(self, handle: int, volume: float) -> None:
        self._track(handle).volume = volume

    def set_music_pitch(self, handle: int, pitch: float) -> None:
        self._track(handle).set_pitch(pitch, self._clock())

    def set_music_pan(self, handle: int, pan: float) -> None:
        self._track(handle).pan = pan

    def seek_music(self, handle: int, position: float) -> None:
        track = self._track(handle)
        track.offset = min(max(position, 0.0), track.length)
        track.anchor = self._clock()

    def music_length(self, handle: int) -> float:
        return self._track(handle).length

    def music_time_played(self, handle: int) -> float:
        track = self._track(handle)
        position = track.position(self._clock())
        if track.looping:
            return position % track.length
        return min(position, track.length)