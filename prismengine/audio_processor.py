"""Executes audio commands against a backend and tracks loaded resources."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List

from prismengine.audio_backend import AudioBackend
from prismengine.audio_types import (
    AudioCommand,
    AudioCommandType,
    AudioError,
    AudioEvent,
    AudioEventType,
    LoadedMusic,
    LoadedSound,
)

log = logging.getLogger(__name__)

Events = List[AudioEvent]


class AudioProcessor:
    """Owns the loaded sounds and music and applies commands to them.

    Every operation returns the events it produced, in order. All state
    is guarded by ``lock``, which callers may hold to read ``sounds``
    and ``music`` consistently.
    """

    def __init__(self, backend: AudioBackend) -> None:
        self.backend = backend
        self.sounds: Dict[str, LoadedSound] = {}
        self.music: Dict[str, LoadedMusic] = {}
        self.master_volume = 1.0
        self.last_error = ""
        self.lock = threading.RLock()
        self._handlers: Dict[AudioCommandType, Callable[[AudioCommand], Events]] = {
            AudioCommandType.LOAD_SOUND: self._load_sound,
            AudioCommandType.UNLOAD_SOUND: self._unload_sound,
            AudioCommandType.PLAY_SOUND: self._play_sound,
            AudioCommandType.STOP_SOUND: self._stop_sound,
            AudioCommandType.PAUSE_SOUND: self._pause_sound,
            AudioCommandType.RESUME_SOUND: self._resume_sound,
            AudioCommandType.SET_SOUND_VOLUME: self._set_sound_volume,
            AudioCommandType.SET_SOUND_PITCH: self._set_sound_pitch,
            AudioCommandType.SET_SOUND_PAN: self._set_sound_pan,
            AudioCommandType.LOAD_MUSIC: self._load_music,
            AudioCommandType.UNLOAD_MUSIC: self._unload_music,
            AudioCommandType.PLAY_MUSIC: self._play_music,
            AudioCommandType.STOP_MUSIC: self._stop_music,
            AudioCommandType.PAUSE_MUSIC: self._pause_music,
            AudioCommandType.RESUME_MUSIC: self._resume_music,
            AudioCommandType.SET_MUSIC_VOLUME: self._set_music_volume,
            AudioCommandType.SET_MUSIC_PITCH: self._set_music_pitch,
            AudioCommandType.SET_MUSIC_PAN: self._set_music_pan,
            AudioCommandType.SET_MASTER_VOLUME: self._set_master_volume,
            AudioCommandType.STOP_ALL_SOUNDS: self._stop_all_sounds,
            AudioCommandType.PAUSE_ALL_SOUNDS: self._pause_all_sounds,
            AudioCommandType.RESUME_ALL_SOUNDS: self._resume_all_sounds,
        }

    def process(self, command: AudioCommand) -> Events:
        """Apply one command and return the events it produced."""
        with self.lock:
            return self._handlers[command.type](command)

    def _error(self, message: str) -> None:
        self.last_error = message
        log.error(message)

    # Sounds

    def _load_sound(self, cmd: AudioCommand) -> Events:
        if cmd.sound_name in self.sounds:
            log.warning("Sound '%s' already loaded", cmd.sound_name)
            return []
        try:
            handle = self.backend.load_sound(cmd.file_path)
        except AudioError:
            message = f"Failed to load sound: {cmd.file_path}"
            self._error(message)
            return [AudioEvent(AudioEventType.AUDIO_ERROR, cmd.sound_name, message)]
        sound = LoadedSound(
            handle=handle,
            file_path=cmd.file_path,
            volume=cmd.value1,
            pitch=cmd.value2,
            pan=cmd.value3,
        )
        self.backend.set_sound_volume(handle, sound.volume)
        self.backend.set_sound_pitch(handle, sound.pitch)
        self.backend.set_sound_pan(handle, sound.pan)
        self.sounds[cmd.sound_name] = sound
        log.info("Sound loaded: %s from %s", cmd.sound_name, cmd.file_path)
        return [
            AudioEvent(
                AudioEventType.SOUND_LOADED,
                cmd.sound_name,
                f"Sound loaded: {cmd.file_path}",
            )
        ]

    def _unload_sound(self, cmd: AudioCommand) -> Events:
        sound = self.sounds.pop(cmd.sound_name, None)
        if sound is None:
            log.warning("Sound '%s' not found for unloading", cmd.sound_name)
            return []
        if sound.handle is not None:
            self.backend.unload_sound(sound.handle)
        log.info("Sound unloaded: %s", cmd.sound_name)
        return [AudioEvent(AudioEventType.SOUND_UNLOADED, cmd.sound_name)]

    def _play_sound(self, cmd: AudioCommand) -> Events:
        sound = self.sounds.get(cmd.sound_name)
        if sound is None:
            log.warning("Sound '%s' not found for playing", cmd.sound_name)
            return []
        if sound.handle is None:
            return []
        self.backend.play_sound(sound.handle)
        sound.is_playing = True
        sound.is_paused = False
        return [AudioEvent(AudioEventType.SOUND_PLAYED, cmd.sound_name)]

    def _stop_sound(self, cmd: AudioCommand) -> Events:
        sound = self.sounds.get(cmd.sound_name)
        if sound is None or sound.handle is None:
            return []
        self.backend.stop_sound(sound.handle)
        sound.is_playing = False
        sound.is_paused = False
        return [AudioEvent(AudioEventType.SOUND_STOPPED, cmd.sound_name)]

    def _pause_sound(self, cmd: AudioCommand) -> Events:
        sound = self.sounds.get(cmd.sound_name)
        if sound is None or sound.handle is None:
            return []
        self.backend.pause_sound(sound.handle)
        sound.is_paused = True
        return [AudioEvent(AudioEventType.SOUND_PAUSED, cmd.sound_name)]

    def _resume_sound(self, cmd: AudioCommand) -> Events:
        sound = self.sounds.get(cmd.sound_name)
        if sound is None or sound.handle is None:
            return []
        self.backend.resume_sound(sound.handle)
        sound.is_paused = False
        return [AudioEvent(AudioEventType.SOUND_RESUMED, cmd.sound_name)]

    def _set_sound_volume(self, cmd: AudioCommand) -> Events:
        sound = self.sounds.get(cmd.sound_name)
        if sound is not None and sound.handle is not None:
            sound.volume = cmd.value1
            self.backend.set_sound_volume(sound.handle, cmd.value1)
        return []

    def _set_sound_pitch(self, cmd: AudioCommand) -> Events:
        sound = self.sounds.get(cmd.sound_name)
        if sound is not None and sound.handle is not None:
            sound.pitch = cmd.value1
            self.backend.set_sound_pitch(sound.handle, cmd.value1)
        return []

    def _set_sound_pan(self, cmd: AudioCommand) -> Events:
        sound = self.sounds.get(cmd.sound_name)
        if sound is not None and sound.handle is not None:
            sound.pan = cmd.value1
            self.backend.set_sound_pan(sound.handle, cmd.value1)
        return []

    # Music

    def _load_music(self, cmd: AudioCommand) -> Events:
        if cmd.sound_name in self.music:
            log.warning("Music '%s' already loaded", cmd.sound_name)
            return []
        try:
            handle = self.backend.load_music(cmd.file_path)
        except AudioError:
            message = f"Failed to load music: {cmd.file_path}"
            self._error(message)
            return [AudioEvent(AudioEventType.AUDIO_ERROR, cmd.sound_name, message)]
        track = LoadedMusic(
            handle=handle,
            file_path=cmd.file_path,
            volume=cmd.value1,
            pitch=cmd.value2,
            pan=cmd.value3,
            is_looping=cmd.bool_value,
        )
        self.backend.set_music_volume(handle, track.volume)
        self.backend.set_music_pitch(handle, track.pitch)
        self.backend.set_music_pan(handle, track.pan)
        self.music[cmd.sound_name] = track
        log.info("Music loaded: %s from %s", cmd.sound_name, cmd.file_path)
        return [
            AudioEvent(
                AudioEventType.MUSIC_LOADED,
                cmd.sound_name,
                f"Music loaded: {cmd.file_path}",
            )
        ]

    def _unload_music(self, cmd: AudioCommand) -> Events:
        track = self.music.pop(cmd.sound_name, None)
        if track is None:
            log.warning("Music '%s' not found for unloading", cmd.sound_name)
            return []
        if track.handle is not None:
            self.backend.unload_music(track.handle)
        log.info("Music unloaded: %s", cmd.sound_name)
        return [AudioEvent(AudioEventType.MUSIC_UNLOADED, cmd.sound_name)]

    def _play_music(self, cmd: AudioCommand) -> Events:
        track = self.music.get(cmd.sound_name)
        if track is None:
            log.warning("Music '%s' not found for playing", cmd.sound_name)
            return []
        if track.handle is None:
            return []
        self.backend.play_music(track.handle, cmd.bool_value)
        track.is_playing = True
        track.is_paused = False
        track.is_looping = cmd.bool_value
        return [AudioEvent(AudioEventType.MUSIC_STARTED, cmd.sound_name)]

    def _stop_music(self, cmd: AudioCommand) -> Events:
        track = self.music.get(cmd.sound_name)
        if track is None or track.handle is None:
            return []
        self.backend.stop_music(track.handle)
        track.is_playing = False
        track.is_paused = False
        return [AudioEvent(AudioEventType.MUSIC_STOPPED, cmd.sound_name)]

    def _pause_music(self, cmd: AudioCommand) -> Events:
        track = self.music.get(cmd.sound_name)
        if track is not None and track.handle is not None:
            self.backend.pause_music(track.handle)
            track.is_paused = True
        return []

    def _resume_music(self, cmd: AudioCommand) -> Events:
        track = self.music.get(cmd.sound_name)
        if track is not None and track.handle is not None:
            self.backend.resume_music(track.handle)
            track.is_paused = False
        return []

    def _set_music_volume(self, cmd: AudioCommand) -> Events:
        track = self.music.get(cmd.sound_name)
        if track is not None and track.handle is not None:
            track.volume = cmd.value1
            self.backend.set_music_volume(track.handle, cmd.value1)
        return []

    def _set_music_pitch(self, cmd: AudioCommand) -> Events:
        track = self.music.get(cmd.sound_name)
        if track is not None and track.handle is not None:
            track.pitch = cmd.value1
            self.backend.set_music_pitch(track.handle, cmd.value1)
        return []

    def _set_music_pan(self, cmd: AudioCommand) -> Events:
        track = self.music.get(cmd.sound_name)
        if track is not None and track.handle is not None:
            track.pan = cmd.value1
            self.backend.set_music_pan(track.handle, cmd.value1)
        return []

    # Global controls

    def _set_master_volume(self, cmd: AudioCommand) -> Events:
        self.master_volume = cmd.value1
        self.backend.set_master_volume(cmd.value1)
        return []

    def _stop_all_sounds(self, cmd: AudioCommand) -> Events:
        for sound in self.sounds.values():
            if sound.handle is not None:
                self.backend.stop_sound(sound.handle)
                sound.is_playing = False
                sound.is_paused = False
        return []

    def _pause_all_sounds(self, cmd: AudioCommand) -> Events:
        for sound in self.sounds.values():
            if sound.is_playing and not sound.is_paused and sound.handle is not None:
                self.backend.pause_sound(sound.handle)
                sound.is_paused = True
        return []

    def _resume_all_sounds(self, cmd: AudioCommand) -> Events:
        for sound in self.sounds.values():
            if sound.is_paused and sound.handle is not None:
                self.backend.resume_sound(sound.handle)
                sound.is_paused = False
        return []

    # Periodic work

    def update_music_streams(self) -> Events:
        """Feed playing streams; report non-looping tracks that have ended."""
        events: Events = []
        with self.lock:
            for name, track in self.music.items():
                if not track.is_playing or track.is_paused or track.handle is None:
                    continue
                self.backend.update_music(track.handle)
                if not self.backend.is_music_playing(track.handle) and not track.is_looping:
                    track.is_playing = False
                    events.append(AudioEvent(AudioEventType.MUSIC_FINISHED, name))
        return events

    def cleanup_finished_sounds(self) -> Events:
        """Mark sounds that finished on their own as stopped."""
        events: Events = []
        with self.lock:
            for name, sound in self.sounds.items():
                if not sound.is_playing or sound.is_paused or sound.handle is None:
                    continue
                if not self.backend.is_sound_playing(sound.handle):
                    sound.is_playing = False
                    sound.is_paused = False
                    events.append(AudioEvent(AudioEventType.SOUND_STOPPED, name))
                    log.debug("Sound finished playing: %s", name)
        return events

    def stop_all_playing(self) -> None:
        """Stop every active sound and music stream without emitting events."""
        with self.lock:
            for sound in self.sounds.values():
                if sound.handle is not None and sound.is_playing:
                    if self.backend.is_sound_playing(sound.handle):
                        self.backend.stop_sound(sound.handle)
                    sound.is_playing = False
                    sound.is_paused = False
            for track in self.music.values():
                if track.handle is not None and track.is_playing:
                    if self.backend.is_music_playing(track.handle):
                        self.backend.stop_music(track.handle)
                    track.is_playing = False
                    track.is_paused = False

    def release_all(self) -> None:
        """Unload every sound and music stream and forget them."""
        with self.lock:
            for name, sound in self.sounds.items():
                if sound.handle is None:
                    log.warning("Sound handle already released: %s", name)
                    continue
                try:
                    self.backend.unload_sound(sound.handle)
                except AudioError:
                    log.warning("Sound not ready: %s", name)
                sound.handle = None
            self.sounds.clear()
            for name, track in self.music.items():
                if track.handle is None:
                    log.warning("Music handle already released: %s", name)
                    continue
                try:
                    self.backend.unload_music(track.handle)
                except AudioError:
                    log.warning("Music not ready: %s", name)
                track.handle = None
            self.music.clear()