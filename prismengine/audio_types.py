"""Events, commands and loaded-resource records of the audio system."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class AudioEventType(Enum):
    SOUND_LOADED = auto()
    SOUND_UNLOADED = auto()
    SOUND_PLAYED = auto()
    SOUND_STOPPED = auto()
    SOUND_PAUSED = auto()
    SOUND_RESUMED = auto()
    MUSIC_LOADED = auto()
    MUSIC_UNLOADED = auto()
    MUSIC_STARTED = auto()
    MUSIC_STOPPED = auto()
    MUSIC_FINISHED = auto()
    AUDIO_ERROR = auto()


@dataclass(frozen=True)
class AudioEvent:
    """Something that happened to a sound or music track."""

    type: AudioEventType
    sound_name: str = ""
    message: str = ""


class AudioCommandType(Enum):
    LOAD_SOUND = auto()
    UNLOAD_SOUND = auto()
    PLAY_SOUND = auto()
    STOP_SOUND = auto()
    PAUSE_SOUND = auto()
    RESUME_SOUND = auto()
    SET_SOUND_VOLUME = auto()
    SET_SOUND_PITCH = auto()
    SET_SOUND_PAN = auto()
    LOAD_MUSIC = auto()
    UNLOAD_MUSIC = auto()
    PLAY_MUSIC = auto()
    STOP_MUSIC = auto()
    PAUSE_MUSIC = auto()
    RESUME_MUSIC = auto()
    SET_MUSIC_VOLUME = auto()
    SET_MUSIC_PITCH = auto()
    SET_MUSIC_PAN = auto()
    SET_MASTER_VOLUME = auto()
    STOP_ALL_SOUNDS = auto()
    PAUSE_ALL_SOUNDS = auto()
    RESUME_ALL_SOUNDS = auto()


@dataclass(frozen=True)
class AudioCommand:
    """A request handed to the audio thread.

    value1, value2 and value3 carry volume, pitch and pan; bool_value
    carries the looping flag.
    """

    type: AudioCommandType
    sound_name: str = ""
    file_path: str = ""
    value1: float = 1.0
    value2: float = 1.0
    value3: float = 0.5
    bool_value: bool = False


class AudioError(Exception):
    """Raised when the audio device or an audio resource fails."""


@dataclass
class LoadedSound:
    """A sound held by the audio system and its playback state."""

    handle: Any = None
    file_path: str = ""
    volume: float = 1.0
    pitch: float = 1.0
    pan: float = 0.5
    is_playing: bool = False
    is_paused: bool = False


@dataclass
class LoadedMusic:
    """A music stream held by the audio system and its playback state."""

    handle: Any = None
    file_path: str = ""
    volume: float = 1.0
    pitch: float = 1.0
    pan: float = 0.5
    is_playing: bool = False
    is_paused: bool = False
    is_looping: bool = False