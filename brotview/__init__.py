"""
Mandelbrot Set Viewer Package

An interactive Mandelbrot set explorer: Numba JIT-compiled, row-parallel
rendering into a BGRA pixel buffer, with pan and zoom over the complex
plane. The pygame window is a thin layer on top of the engine.

Quick Start:
    from brotview import MandelbrotEngine
    engine = MandelbrotEngine()
    engine.on_display_size_changed(800, 600)
    frame = engine.get_rendered_buffer()

Or from command line:
    python -m brotview view

Package Structure:
    - compute.py: JIT-compiled escape-time iteration and render kernel
    - colormaps.py: BGRA layout and the red smooth gradient
    - viewport.py: Complex-plane window, stepping deltas, pan and zoom
    - buffer.py: Pixel buffer ownership and reallocation
    - renderer.py: Synchronous row-parallel render passes
    - engine.py: Display-facing operations (resize, pan, zoom, read back)
    - app.py: Pygame window and event loop
    - cli.py: Command line entry point

Controls:
    - Scroll: Zoom in/out at mouse position
    - Drag: Pan around
    - R: Reset to default view
    - +/-: Raise/lower the iteration cap
    - ESC: Quit
"""

from .buffer import BufferContractError, BufferManager, PixelBuffer
from .compute import (
    DEFAULT_MAX_ITERATIONS,
    INTERIOR_BLACK,
    INTERIOR_FULL,
    iterate,
    smooth_iterations,
)
from .config import ViewerSettings
from .engine import MandelbrotEngine, RenderedBuffer, RendererState
from .renderer import MandelbrotRenderer, render
from .viewport import Steps, Viewport, Window

__version__ = "1.0.0"
__all__ = [
    "BufferContractError",
    "BufferManager",
    "DEFAULT_MAX_ITERATIONS",
    "INTERIOR_BLACK",
    "INTERIOR_FULL",
    "MandelbrotEngine",
    "MandelbrotRenderer",
    "PixelBuffer",
    "RenderedBuffer",
    "RendererState",
    "Steps",
    "ViewerSettings",
    "Viewport",
    "Window",
    "iterate",
    "render",
    "smooth_iterations",
]
