"""Thread-backed audio manager: commands run on a worker, events come back on update."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Iterable, List, Optional

from prismengine.audio_backend import AudioBackend, SimulatedAudioBackend
from prismengine.audio_processor import AudioProcessor
from prismengine.audio_types import (
    AudioCommand,
    AudioCommandType,
    AudioError,
    AudioEvent,
)
from prismengine.sound import MusicAsset, SoundAsset

log = logging.getLogger(__name__)

AudioEventCallback = Callable[[AudioEvent], None]

_FRAME_TIME = 0.016
_CLEANUP_INTERVAL = 1.0
_MIN_PITCH = 0.1


def _clamp_unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class AudioManager:
    """Queues audio commands to a worker thread and delivers the resulting events.

    Commands issued before ``initialize`` are ignored, except loads, which
    raise ``AudioError``. Events are handed to ``event_callback`` from
    ``update``, on the caller's thread.
    """

    def __init__(self, backend: Optional[AudioBackend] = None) -> None:
        self._backend = backend if backend is not None else SimulatedAudioBackend()
        self._processor = AudioProcessor(self._backend)
        self.event_callback: Optional[AudioEventCallback] = None
        self._cond = threading.Condition()
        self._commands: List[AudioCommand] = []
        self._events: List[AudioEvent] = []
        self._queued = 0
        self._completed = 0
        self._running = False
        self._initialized = False
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> "AudioManager":
        self.initialize()
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()

    # Lifecycle

    def initialize(self) -> None:
        """Open the audio device and start the worker thread."""
        with self._cond:
            if self._initialized:
                return
        self._backend.open_device()
        if not self._backend.is_device_ready():
            self._error("Failed to initialize audio device")
            raise AudioError("Failed to initialize audio device")
        self._backend.set_master_volume(self._processor.master_volume)
        with self._cond:
            self._running = True
            self._initialized = True
        self._thread = threading.Thread(
            target=self._run, name="audio-worker", daemon=True
        )
        self._thread.start()
        log.info("AudioManager initialized successfully")

    def shutdown(self) -> None:
        """Stop playback, stop the worker, release every resource and close the device."""
        with self._cond:
            if not self._initialized:
                return
        self.event_callback = None
        self._processor.stop_all_playing()
        with self._cond:
            self._commands.clear()
            self._events.clear()
            self._running = False
            self._cond.notify_all()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        with self._cond:
            self._events.clear()
            self._queued = 0
            self._completed = 0
        self._processor.release_all()
        self._backend.close_device()
        with self._cond:
            self._initialized = False
        log.info("AudioManager shut down")

    @property
    def is_initialized(self) -> bool:
        with self._cond:
            return self._initialized

    @property
    def last_error(self) -> str:
        return self._processor.last_error

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every queued command has been processed.

        Returns False if commands are still pending when the timeout ends
        or the worker is not running.
        """
        with self._cond:
            self._cond.wait_for(
                lambda: self._completed >= self._queued or not self._running,
                timeout,
            )
            return self._completed >= self._queued

    # Worker

    def _run(self) -> None:
        log.info("Audio thread started")
        last_cleanup = time.monotonic()
        while True:
            with self._cond:
                if not self._running:
                    break
                commands, self._commands = self._commands, []
            events: List[AudioEvent] = []
            for command in commands:
                try:
                    events.extend(self._processor.process(command))
                except Exception:
                    log.exception("Exception processing audio command")
            try:
                events.extend(self._processor.update_music_streams())
            except Exception:
                log.exception("Exception updating music streams")
            now = time.monotonic()
            if now - last_cleanup >= _CLEANUP_INTERVAL:
                try:
                    events.extend(self._processor.cleanup_finished_sounds())
                except Exception:
                    log.exception("Exception cleaning up sounds")
                last_cleanup = now
            with self._cond:
                self._events.extend(events)
                self._completed += len(commands)
                self._cond.notify_all()
                if self._running and not self._commands:
                    self._cond.wait(_FRAME_TIME)
        log.info("Audio thread stopped")

    def _queue(self, command: AudioCommand) -> None:
        with self._cond:
            self._commands.append(command)
            self._queued += 1
            self._cond.notify_all()

    def _queue_if_running(self, command: AudioCommand) -> None:
        if self.is_initialized:
            self._queue(command)

    def _error(self, message: str) -> None:
        self._processor.last_error = message
        log.error(message)

    def _require_initialized(self) -> None:
        if not self.is_initialized:
            self._error("AudioManager not initialized")
            raise AudioError("AudioManager not initialized")

    # Sounds

    def load_sound(self, sound_name: str, file_path: str) -> None:
        self._require_initialized()
        self._queue(AudioCommand(AudioCommandType.LOAD_SOUND, sound_name, file_path))

    def unload_sound(self, sound_name: str) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.UNLOAD_SOUND, sound_name))

    def is_sound_loaded(self, sound_name: str) -> bool:
        with self._processor.lock:
            return sound_name in self._processor.sounds

    def play_audio(self, sound_name: str) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.PLAY_SOUND, sound_name))

    def stop_audio(self, sound_name: str) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.STOP_SOUND, sound_name))

    def pause_audio(self, sound_name: str) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.PAUSE_SOUND, sound_name))

    def resume_audio(self, sound_name: str) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.RESUME_SOUND, sound_name))

    def is_audio_playing(self, sound_name: str) -> bool:
        with self._processor.lock:
            sound = self._processor.sounds.get(sound_name)
            return sound.is_playing if sound is not None else False

    def is_audio_paused(self, sound_name: str) -> bool:
        with self._processor.lock:
            sound = self._processor.sounds.get(sound_name)
            return sound.is_paused if sound is not None else False

    def set_sound_volume(self, sound_name: str, volume: float) -> None:
        self._queue_if_running(
            AudioCommand(AudioCommandType.SET_SOUND_VOLUME, sound_name, value1=_clamp_unit(volume))
        )

    def set_sound_pitch(self, sound_name: str, pitch: float) -> None:
        self._queue_if_running(
            AudioCommand(AudioCommandType.SET_SOUND_PITCH, sound_name, value1=max(pitch, _MIN_PITCH))
        )

    def set_sound_pan(self, sound_name: str, pan: float) -> None:
        self._queue_if_running(
            AudioCommand(AudioCommandType.SET_SOUND_PAN, sound_name, value1=_clamp_unit(pan))
        )

    # Music

    def load_music(self, music_name: str, file_path: str) -> None:
        self._require_initialized()
        self._queue(AudioCommand(AudioCommandType.LOAD_MUSIC, music_name, file_path))

    def unload_music(self, music_name: str) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.UNLOAD_MUSIC, music_name))

    def is_music_loaded(self, music_name: str) -> bool:
        with self._processor.lock:
            return music_name in self._processor.music

    def play_music(self, music_name: str, loop: bool = True) -> None:
        self._queue_if_running(
            AudioCommand(AudioCommandType.PLAY_MUSIC, music_name, bool_value=loop)
        )

    def stop_music(self, music_name: str) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.STOP_MUSIC, music_name))

    def pause_music(self, music_name: str) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.PAUSE_MUSIC, music_name))

    def resume_music(self, music_name: str) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.RESUME_MUSIC, music_name))

    def is_music_playing(self, music_name: str) -> bool:
        with self._processor.lock:
            track = self._processor.music.get(music_name)
            return track.is_playing if track is not None else False

    def is_music_paused(self, music_name: str) -> bool:
        with self._processor.lock:
            track = self._processor.music.get(music_name)
            return track.is_paused if track is not None else False

    def set_music_volume(self, music_name: str, volume: float) -> None:
        self._queue_if_running(
            AudioCommand(AudioCommandType.SET_MUSIC_VOLUME, music_name, value1=_clamp_unit(volume))
        )

    def set_music_pitch(self, music_name: str, pitch: float) -> None:
        self._queue_if_running(
            AudioCommand(AudioCommandType.SET_MUSIC_PITCH, music_name, value1=max(pitch, _MIN_PITCH))
        )

    def set_music_pan(self, music_name: str, pan: float) -> None:
        self._queue_if_running(
            AudioCommand(AudioCommandType.SET_MUSIC_PAN, music_name, value1=_clamp_unit(pan))
        )

    def seek_music(self, music_name: str, position: float) -> None:
        with self._processor.lock:
            track = self._processor.music.get(music_name)
            if track is not None and track.handle is not None:
                self._backend.seek_music(track.handle, position)

    def get_music_time_length(self, music_name: str) -> float:
        with self._processor.lock:
            track = self._processor.music.get(music_name)
            if track is not None and track.handle is not None:
                return self._backend.music_length(track.handle)
        return 0.0

    def get_music_time_played(self, music_name: str) -> float:
        with self._processor.lock:
            track = self._processor.music.get(music_name)
            if track is not None and track.handle is not None:
                return self._backend.music_time_played(track.handle)
        return 0.0

    # Global controls

    def set_master_volume(self, volume: float) -> None:
        self._queue(
            AudioCommand(AudioCommandType.SET_MASTER_VOLUME, value1=_clamp_unit(volume))
        )

    @property
    def master_volume(self) -> float:
        with self._processor.lock:
            return self._processor.master_volume

    def stop_all_sounds(self) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.STOP_ALL_SOUNDS))

    def pause_all_sounds(self) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.PAUSE_ALL_SOUNDS))

    def resume_all_sounds(self) -> None:
        self._queue_if_running(AudioCommand(AudioCommandType.RESUME_ALL_SOUNDS))

    def stop_all_music(self) -> None:
        with self._processor.lock:
            names = list(self._processor.music)
        for name in names:
            self._queue(AudioCommand(AudioCommandType.STOP_MUSIC, name))

    def pause_all_music(self) -> None:
        with self._processor.lock:
            names = [
                name
                for name, track in self._processor.music.items()
                if track.is_playing and not track.is_paused
            ]
        for name in names:
            self._queue(AudioCommand(AudioCommandType.PAUSE_MUSIC, name))

    def resume_all_music(self) -> None:
        with self._processor.lock:
            names = [name for name, track in self._processor.music.items() if track.is_paused]
        for name in names:
            self._queue(AudioCommand(AudioCommandType.RESUME_MUSIC, name))

    # Batches

    def load_sound_batch(self, sounds: Iterable[SoundAsset]) -> None:
        for sound in sounds:
            self._queue(
                AudioCommand(
                    AudioCommandType.LOAD_SOUND,
                    sound.name,
                    sound.file_path,
                    value1=sound.volume,
                    value2=sound.pitch,
                    value3=sound.pan,
                )
            )

    def load_music_batch(self, music: Iterable[MusicAsset]) -> None:
        for track in music:
            self._queue(
                AudioCommand(
                    AudioCommandType.LOAD_MUSIC,
                    track.name,
                    track.file_path,
                    value1=track.volume,
                    value2=track.pitch,
                    value3=track.pan,
                    bool_value=track.loop,
                )
            )

    # Events

    def update(self) -> None:
        """Deliver every pending event to the callback; call once per frame."""
        if not self.is_initialized:
            return
        callback = self.event_callback
        with self._cond:
            events, self._events = self._events, []
        if callback is None:
            return
        for event in events:
            try:
                callback(event)
            except Exception:
                log.exception("Exception in audio callback")

    # Statistics

    @property
    def loaded_sound_count(self) -> int:
        with self._processor.lock:
            return len(self._processor.sounds)

    @property
    def loaded_music_count(self) -> int:
        with self._processor.lock:
            return len(self._processor.music)

    @property
    def loaded_sound_names(self) -> List[str]:
        with self._processor.lock:
            return list(self._processor.sounds)

    @property
    def loaded_music_names(self) -> List[str]:
        with self._processor.lock:
            return list(self._processor.music)


_manager: Optional[AudioManager] = None


def get_manager() -> AudioManager:
    """Return the shared audio manager, creating it on first use."""
    global _manager
    if _manager is None:
        _manager = AudioManager()
    return _manager


def initialize() -> None:
    get_manager().initialize()


def shutdown() -> None:
    """Shut down and discard the shared audio manager, if any."""
    global _manager
    if _manager is not None:
        _manager.shutdown()
        _manager = None