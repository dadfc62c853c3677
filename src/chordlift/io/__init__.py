"""I/O utilities for chordlift meshes."""

from .stl import write_stl

__all__ = ['write_stl']
