"""
Boundary operations between the rendering core and the display layer.

The windowing layer forwards already-decoded input to a MandelbrotEngine:
display size changes, drag deltas in pixels and scroll steps at a
pointer position. Every operation that changes the view re-renders the
buffer synchronously before returning, so the display layer can upload
get_rendered_buffer() right away.

All mutable state lives in an explicit RendererState; there are no
module-level globals.
"""

from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from .buffer import BufferManager
from .renderer import MandelbrotRenderer
from .util.logging_setup import get_logger
from .viewport import Viewport

logger = get_logger(__name__)


class RenderedBuffer(NamedTuple):
    """Finished 32-bit BGRA frame, top row first."""
    data: memoryview
    width: int
    height: int
    stride: int


@dataclass
class RendererState:
    """Everything a viewer session mutates between render passes."""

    viewport: Viewport = field(default_factory=Viewport)
    buffers: BufferManager = field(default_factory=BufferManager)
    renderer: MandelbrotRenderer = field(default_factory=MandelbrotRenderer)
    width: int = 0
    height: int = 0

    @property
    def ready(self) -> bool:
        return self.buffers.buffer is not None


class MandelbrotEngine:
    """
    Drives viewport changes and render passes for a display.

    Usage:
        engine = MandelbrotEngine()
        engine.on_display_size_changed(800, 600)
        engine.on_zoom(400, 300, zoom_in=True)
        frame = engine.get_rendered_buffer()
    """

    ZOOM_MAGNIFICATION = 2.0

    def __init__(self, state: Optional[RendererState] = None,
                 zoom_magnification: float = ZOOM_MAGNIFICATION):
        self.state = state if state is not None else RendererState()
        self.zoom_magnification = zoom_magnification

    @classmethod
    def from_settings(cls, settings):
        renderer = MandelbrotRenderer(
            max_iterations=settings.max_iterations,
            threads=settings.threads,
            interior=settings.interior_policy,
        )
        return cls(RendererState(renderer=renderer),
                   zoom_magnification=settings.zoom_magnification)

    @property
    def ready(self):
        return self.state.ready

    def on_display_size_changed(self, width, height):
        """
        Reallocate the buffer for a new display size and render the default view.

        A display one pixel wide or tall has no stepping deltas along that
        axis, so it is treated as not ready like an empty one.

        Returns:
            False if the size is degenerate (the previous buffer and view,
            if any, are kept), True once the new buffer has been rendered
        """
        state = self.state
        if width <= 1 or height <= 1:
            logger.debug("Display %sx%s not ready, keeping previous buffer", width, height)
            return False

        state.buffers.invalidate()
        state.buffers.ensure_buffer(width, height)
        state.width, state.height = width, height
        state.viewport.reset()
        state.viewport.recompute_steps(width, height)
        logger.info("Display resized to %sx%s", width, height)
        self.render()
        return True

    def on_pan_delta(self, pixel_dx, pixel_dy):
        """Translate the view by a drag offset in pixels and re-render."""
        if not self.ready:
            return False
        if not self.state.viewport.pan(pixel_dx, pixel_dy):
            return False
        self.render()
        return True

    def on_zoom(self, focal_x, focal_y, zoom_in):
        """
        Zoom about a focal pixel by the fixed magnification and re-render.

        Zooming in magnifies by zoom_magnification, zooming out by its
        inverse; the window is scaled by one over the magnification.
        """
        if not self.ready:
            return False
        state = self.state
        magnification = self.zoom_magnification if zoom_in else 1.0 / self.zoom_magnification
        state.viewport.zoom((focal_x, focal_y), 1.0 / magnification, state.width, state.height)
        self.render()
        return True

    def reset_view(self):
        """Return to the default window without reallocating the buffer."""
        if not self.ready:
            return False
        state = self.state
        state.viewport.reset()
        state.viewport.recompute_steps(state.width, state.height)
        self.render()
        return True

    def set_max_iterations(self, max_iterations):
        """Change the iteration cap; re-renders if it changed."""
        changed = self.state.renderer.update_settings(max_iterations=max_iterations)
        if changed and self.ready:
            self.render()
        return changed

    def complex_at(self, x, y):
        """Complex value under pixel (x, y) of the current view."""
        return self.state.viewport.pixel_to_complex(x, y)

    def render(self):
        """Run one blocking render pass into the current buffer."""
        state = self.state
        pixels = state.buffers.ensure_buffer(state.width, state.height)
        if pixels is None:
            return False
        state.renderer.render(pixels, state.viewport)
        return True

    def get_rendered_buffer(self):
        """
        Return the finished frame for upload, or None if not ready.

        The bytes are a read-only view of the engine's buffer; they stay
        valid until the next resize.
        """
        pixels = self.state.buffers.buffer
        if pixels is None:
            return None
        return RenderedBuffer(pixels.readonly(), pixels.width, pixels.height, pixels.stride)
