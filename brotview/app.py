"""
Pygame front end for the Mandelbrot viewer.

Contains the MandelbrotApp class which handles:
- Window setup and main loop
- Decoding user input (zoom, pan, keyboard) into engine operations
- Uploading the engine's BGRA buffer to the screen

All fractal math lives in the engine; this module only forwards pointer
positions, drag deltas and wheel steps, and blits finished frames.
"""

import pygame

from .compute import warmup_jit
from .config import ViewerSettings
from .engine import MandelbrotEngine
from .util.logging_setup import get_logger

logger = get_logger(__name__)


class MandelbrotApp:
    """
    Main application class for the Mandelbrot viewer.

    Handles the pygame window and event loop and keeps the display in
    sync with the MandelbrotEngine.
    """

    CAPTION = "Mandelbrot Set - Scroll to zoom, drag to pan, R to reset"
    ITERATION_STEP = 50

    def __init__(self, settings=None):
        """
        Initialize the application.

        Args:
            settings: ViewerSettings (defaults if None)
        """
        self.settings = (settings or ViewerSettings()).validate()
        self.engine = MandelbrotEngine.from_settings(self.settings)

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None
        self.surface = None

        # Input state
        self.dragging = False

        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._warmup_and_initial_render()

        self.running = True
        while self.running:
            self._handle_events()
            self._draw()
            self.clock.tick(60)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create a resizable window."""
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.settings.width, self.settings.height),
            pygame.RESIZABLE
        )
        pygame.display.set_caption(self.CAPTION)
        self.clock = pygame.time.Clock()

    def _warmup_and_initial_render(self):
        """Warm up JIT and do the initial render."""
        pygame.display.set_caption("Compiling (first run only)...")
        warmup_jit()
        width, height = self.screen.get_size()
        self._resize(width, height)
        pygame.display.set_caption(self.CAPTION)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self._resize(event.w, event.h)
            elif event.type == pygame.MOUSEWHEEL:
                self._handle_zoom(event)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.dragging = True
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self.dragging = False
            elif event.type == pygame.MOUSEMOTION and self.dragging:
                self._handle_drag(event)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _resize(self, width, height):
        if self.engine.on_display_size_changed(width, height):
            self._upload()

    def _handle_zoom(self, event):
        """Handle mouse wheel zoom around the pointer."""
        if event.y == 0:
            return
        mx, my = pygame.mouse.get_pos()
        if self.engine.on_zoom(mx, my, zoom_in=event.y > 0):
            self._upload()

    def _handle_drag(self, event):
        """Move the view so the content follows the pointer."""
        dx, dy = event.rel
        if self.engine.on_pan_delta(-dx, -dy):
            self._upload()

    def _handle_key(self, event):
        """Handle keyboard input."""
        if event.key == pygame.K_r:
            if self.engine.reset_view():
                self._upload()
        elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self._change_iterations(self.ITERATION_STEP)
        elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self._change_iterations(-self.ITERATION_STEP)
        elif event.key == pygame.K_ESCAPE:
            self.running = False

    def _change_iterations(self, delta):
        renderer = self.engine.state.renderer
        new_max = max(1, renderer.max_iterations + delta)
        if self.engine.set_max_iterations(new_max):
            logger.info("max_iterations=%s", new_max)
            self._upload()

    def _upload(self):
        """Wrap the finished BGRA frame in a surface for blitting."""
        frame = self.engine.get_rendered_buffer()
        if frame is None:
            return
        self.surface = pygame.image.frombuffer(
            frame.data, (frame.width, frame.height), "BGRA"
        )
        renderer = self.engine.state.renderer
        mx, my = pygame.mouse.get_pos()
        c = self.engine.complex_at(mx, my)
        pygame.display.set_caption(
            f"{self.CAPTION} | {c.real:+.6g}{c.imag:+.6g}i | "
            f"iter={renderer.max_iterations} | {renderer.last_render_seconds * 1000:.0f} ms"
        )

    def _draw(self):
        """Draw the current frame."""
        self.screen.fill((0, 0, 0))
        if self.surface is not None:
            self.screen.blit(self.surface, (0, 0))
        pygame.display.flip()


def run(settings=None):
    """
    Run the Mandelbrot viewer.

    Args:
        settings: ViewerSettings (defaults if None)
    """
    app = MandelbrotApp(settings)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
