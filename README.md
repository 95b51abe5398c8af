# prismengine

Core building blocks for a small game engine. Pure Python, no third-party
dependencies.

- **`prismengine.packet`**: a little-endian binary packet format. Each packet
  has a `PacketHeader` (`PacketType`, millisecond timestamp, payload size)
  followed by a payload. The module has read and write helpers for unsigned
  8/16/32-bit integers, 32-bit floats, length-prefixed UTF-8 strings and 2D/3D
  vectors, plus game payloads (`PlayerMove`, `ChatMessage`, `EntityUpdate`,
  `PlayerJoin`, `PeerIdAssignment`) and `create_*_packet` factory functions.
- **`prismengine.input`**: `InputState`. It turns key, mouse-button and cursor
  callbacks into per-frame "pressed / held / released / up" queries.
- **`prismengine.sound`**: descriptions of sound and music assets
  (`SoundAsset`, `MusicAsset`, `GameSound`), effects, categories, spatial audio
  and listener settings. It also has asset presets such as `background_music`,
  `menu_music`, `button_click` and `gunshot`.
- **`prismengine.audio_types`**: the audio system's events (`AudioEvent`,
  `AudioEventType`), commands (`AudioCommand`, `AudioCommandType`), the
  `AudioError` exception and the `LoadedSound` / `LoadedMusic` records.
- **`prismengine.audio_backend`**: the abstract `AudioBackend` device interface
  and `SimulatedAudioBackend`.
- **`prismengine.audio_processor`**: `AudioProcessor`. It applies
  `AudioCommand`s to a backend and returns the events they produce.
- **`prismengine.audio_manager`**: `AudioManager`. It runs audio commands on a
  worker thread and hands the resulting events to a callback on `update()`.

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Packets

```python
from prismengine.packet import ChatMessage, Packet, create_chat_packet

packet = create_chat_packet(ChatMessage(player_id=1, player_name="Ada", message="hi"))
wire = packet.to_bytes()

received = Packet.from_bytes(wire)
chat = ChatMessage.read_from(received)
assert chat.message == "hi"
```

Each write checks its range, and writing a value that does not fit its field
raises `ValueError`. Strings are limited to 65535 encoded bytes. These cases
raise `PacketReadError`, a subclass of `ValueError`:

- reading past the end of the payload,
- decoding bytes that are too short for a header,
- decoding a header with an unknown packet type,
- reading a string that is not valid UTF-8.

## Input

```python
from prismengine.input import Action, InputState

state = InputState()
state.key_callback(32, Action.PRESS)
assert state.is_key_pressed(32)
state.update()          # call once per frame
assert state.is_key_held(32) and not state.is_key_pressed(32)
```

Callbacks for keys outside `0..349` or mouse buttons outside `0..7` are
ignored. Queries with such indices raise `IndexError`. The cursor position is
available as `state.mouse_x` and `state.mouse_y`.

## Audio

`SimulatedAudioBackend` needs no audio device. It opens WAV files only to read
their length. It then tracks the playback position against a clock, scaled by
pitch, and it handles looping, pausing and seeking.

```python
import wave

from prismengine.audio_backend import SimulatedAudioBackend
from prismengine.audio_manager import AudioManager

with wave.open("jump.wav", "wb") as wav:
    wav.setnchannels(1)
    wav.setsampwidth(2)
    wav.setframerate(8000)
    wav.writeframes(b"\x00\x00" * 8000)   # one second of silence

with AudioManager(SimulatedAudioBackend()) as audio:
    audio.event_callback = print
    audio.load_sound("jump", "jump.wav")
    audio.play_audio("jump")
    audio.wait_idle(1.0)
    assert audio.is_audio_playing("jump")
    audio.update()      # delivers SOUND_LOADED and SOUND_PLAYED events
```

How the manager behaves:

- Commands are queued and run in order on the worker thread.
- `wait_idle(timeout)` blocks until the queue has been processed.
- Queries such as `is_sound_loaded`, `is_music_playing`, `loaded_sound_names`
  and `get_music_time_played` read the current state directly.
- Volumes and pans are clamped to `0.0`–`1.0`, and pitch never drops below
  `0.1`.
- `load_sound` and `load_music` raise `AudioError` before `initialize()`. Other
  playback commands are silently ignored until then.
- A file that fails to load produces an `AUDIO_ERROR` event and sets
  `last_error`.
- The worker checks for finished sounds about once per second and reports them
  as `SOUND_STOPPED`.
- Non-looping music that ends is reported as `MUSIC_FINISHED`.

A process-wide manager is available through
`prismengine.audio_manager.get_manager()`, `initialize()` and `shutdown()`.

## What this package does not do

- **No sound output.** The only backend included is `SimulatedAudioBackend`,
  which keeps time but produces no audio. Real playback needs your own
  `AudioBackend` subclass.
- **No network transport.** `prismengine.packet` turns packets into bytes and
  back. It has no connections, peers, sending or receiving.
- **No window or event loop.** `InputState` does not read devices itself. Your
  windowing layer must call its callbacks and call `update()` once per frame.