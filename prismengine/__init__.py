"""Game engine core: binary packets, input state, sound descriptions and a threaded audio manager."""

__version__ = "0.1.0"