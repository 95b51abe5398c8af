"""Sound and music descriptions, audio settings and asset presets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Tuple

Vec3 = Tuple[float, float, float]


@dataclass
class GameSound:
    """Configuration of a single sound."""

    name: str = ""
    path: str = ""
    loop: bool = False
    volume: float = 1.0
    pitch: float = 1.0
    pan: float = 0.5
    speed: float = 1.0
    pitch_variation: float = 0.0


@dataclass
class SoundAsset:
    """A sound effect to be loaded in a batch."""

    name: str = ""
    file_path: str = ""
    volume: float = 1.0
    pitch: float = 1.0
    pan: float = 0.5
    is_playing: bool = False


@dataclass
class MusicAsset:
    """A music track to be loaded in a batch."""

    name: str = ""
    file_path: str = ""
    loop: bool = True
    volume: float = 1.0
    pitch: float = 1.0
    pan: float = 0.5
    is_playing: bool = False


class AudioEffectType(Enum):
    NONE = auto()
    REVERB = auto()
    ECHO = auto()
    DISTORTION = auto()
    FILTER_LOW_PASS = auto()
    FILTER_HIGH_PASS = auto()
    FILTER_BAND_PASS = auto()


@dataclass
class AudioEffect:
    """Parameters of an audio effect."""

    type: AudioEffectType = AudioEffectType.NONE
    intensity: float = 0.0
    decay: float = 0.0
    feedback: float = 0.0
    cutoff_frequency: float = 1000.0
    resonance: float = 1.0


class AudioCategory(Enum):
    MASTER = auto()
    MUSIC = auto()
    SFX = auto()
    VOICE = auto()
    AMBIENT = auto()
    UI = auto()


@dataclass
class CategorySettings:
    """Volume and mute state of an audio category."""

    category: AudioCategory = AudioCategory.MASTER
    volume: float = 1.0
    muted: bool = False


@dataclass
class SpatialAudioProperties:
    """3D placement and attenuation of a sound source."""

    enabled: bool = False
    position: Vec3 = (0.0, 0.0, 0.0)
    direction: Vec3 = (0.0, 0.0, 1.0)
    min_distance: float = 1.0
    max_distance: float = 100.0
    rolloff_factor: float = 1.0
    doppler_factor: float = 1.0


@dataclass
class AudioListener:
    """Position and orientation of the listener for 3D audio."""

    position: Vec3 = (0.0, 0.0, 0.0)
    direction: Vec3 = (0.0, 0.0, -1.0)
    up: Vec3 = (0.0, 1.0, 0.0)
    velocity: Vec3 = (0.0, 0.0, 0.0)


def background_music(name: str, path: str) -> MusicAsset:
    return MusicAsset(name, path, True, 0.7, 1.0, 0.5)


def menu_music(name: str, path: str) -> MusicAsset:
    return MusicAsset(name, path, True, 0.5, 1.0, 0.5)


def combat_music(name: str, path: str) -> MusicAsset:
    return MusicAsset(name, path, True, 0.8, 1.0, 0.5)


def button_click(name: str, path: str) -> SoundAsset:
    return SoundAsset(name, path, 0.6, 1.0, 0.5)


def explosion(name: str, path: str) -> SoundAsset:
    return SoundAsset(name, path, 1.0, 1.0, 0.5)


def footstep(name: str, path: str) -> SoundAsset:
    return SoundAsset(name, path, 0.4, 1.0, 0.5)


def gunshot(name: str, path: str) -> SoundAsset:
    return SoundAsset(name, path, 0.8, 1.0, 0.5)


def pickup_item(name: str, path: str) -> SoundAsset:
    return SoundAsset(name, path, 0.5, 1.2, 0.5)