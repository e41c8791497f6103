"""
Render surface for game sessions.

RenderSurface wraps a pygame Surface sized to the logical resolution and
gives games a small canvas-like drawing API: filled and stroked shapes,
text, a global opacity, and a translation that can be saved and restored.

Global opacity and translation are drawing state, so changes to them are
scoped: ``saved()`` restores both on exit even if drawing raises.
"""

from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import pygame

from models import Color, ColorLike

Painter = Callable[[pygame.Surface, Tuple[int, int, int, int], int, int], None]


class RenderSurface:
    """Canvas-style drawing context over a pygame Surface.

    Coordinates are logical pixels. The current translation is added to
    every coordinate, and the global opacity multiplies every color's alpha.

    Attributes:
        width: Surface width in pixels
        height: Surface height in pixels

    Examples:
        >>> surface = RenderSurface(pygame.Surface((800, 600)))
        >>> with surface.saved():
        ...     surface.translate(3, -2)
        ...     surface.fill_rect(10, 10, 5, 5, '#0aff00')
        >>> surface.offset
        (0.0, 0.0)
    """

    def __init__(self, target: pygame.Surface, font_name: Optional[str] = None):
        self._target = target
        self.width, self.height = target.get_size()
        self._font_name = font_name
        self._fonts: Dict[int, pygame.font.Font] = {}
        self._offset: Tuple[float, float] = (0.0, 0.0)
        self._alpha = 1.0
        self._stack: List[Tuple[Tuple[float, float], float]] = []

    @property
    def target(self) -> pygame.Surface:
        """The underlying pygame Surface."""
        return self._target

    # =========================================================================
    # Drawing state
    # =========================================================================

    @property
    def global_alpha(self) -> float:
        """Opacity in [0, 1] applied to everything drawn."""
        return self._alpha

    @global_alpha.setter
    def global_alpha(self, value: float) -> None:
        self._alpha = max(0.0, min(1.0, float(value)))

    @property
    def offset(self) -> Tuple[float, float]:
        """Current translation applied to drawing coordinates."""
        return self._offset

    def translate(self, dx: float, dy: float) -> None:
        """Shift subsequent drawing by (dx, dy)."""
        self._offset = (self._offset[0] + dx, self._offset[1] + dy)

    def save(self) -> None:
        """Push the current translation and opacity."""
        self._stack.append((self._offset, self._alpha))

    def restore(self) -> None:
        """Pop the most recently saved translation and opacity.

        Restoring with nothing saved is a no-op.
        """
        if self._stack:
            self._offset, self._alpha = self._stack.pop()

    @contextmanager
    def saved(self) -> Iterator['RenderSurface']:
        """Save drawing state for the duration of a block."""
        self.save()
        try:
            yield self
        finally:
            self.restore()

    # =========================================================================
    # Primitives
    # =========================================================================

    def clear(self, color: ColorLike = '#000000') -> None:
        """Fill the whole surface, ignoring translation and opacity."""
        self._target.fill(Color.parse(color).as_tuple)

    def fill_rect(self, x: float, y: float, width: float, height: float,
                  color: ColorLike) -> None:
        """Draw a filled axis-aligned rectangle."""
        rect = self._rect(x, y, width, height)

        def paint(dest, rgba, ox, oy):
            dest.fill(rgba, rect.move(-ox, -oy))

        self._paint(rect, color, paint)

    def stroke_rect(self, x: float, y: float, width: float, height: float,
                    color: ColorLike, line_width: int = 1) -> None:
        """Draw a rectangle outline."""
        rect = self._rect(x, y, width, height)

        def paint(dest, rgba, ox, oy):
            pygame.draw.rect(dest, rgba, rect.move(-ox, -oy), line_width)

        self._paint(rect, color, paint)

    def line(self, x1: float, y1: float, x2: float, y2: float,
             color: ColorLike, line_width: int = 1) -> None:
        """Draw a straight line segment."""
        start = self._point(x1, y1)
        end = self._point(x2, y2)
        bounds = pygame.Rect(
            min(start[0], end[0]) - line_width,
            min(start[1], end[1]) - line_width,
            abs(end[0] - start[0]) + 2 * line_width + 1,
            abs(end[1] - start[1]) + 2 * line_width + 1,
        )

        def paint(dest, rgba, ox, oy):
            pygame.draw.line(dest, rgba, (start[0] - ox, start[1] - oy),
                             (end[0] - ox, end[1] - oy), line_width)

        self._paint(bounds, color, paint)

    def fill_circle(self, cx: float, cy: float, radius: float, color: ColorLike) -> None:
        """Draw a filled circle."""
        center = self._point(cx, cy)
        r = max(0, int(round(radius)))
        bounds = pygame.Rect(center[0] - r, center[1] - r, 2 * r + 1, 2 * r + 1)

        def paint(dest, rgba, ox, oy):
            pygame.draw.circle(dest, rgba, (center[0] - ox, center[1] - oy), r)

        self._paint(bounds, color, paint)

    def polygon(self, points: Sequence[Tuple[float, float]], color: ColorLike,
                line_width: int = 0) -> None:
        """Draw a polygon, filled when line_width is 0."""
        if len(points) < 3:
            return
        translated = [self._point(px, py) for px, py in points]
        xs = [p[0] for p in translated]
        ys = [p[1] for p in translated]
        pad = line_width + 1
        bounds = pygame.Rect(min(xs) - pad, min(ys) - pad,
                             max(xs) - min(xs) + 2 * pad, max(ys) - min(ys) + 2 * pad)

        def paint(dest, rgba, ox, oy):
            pygame.draw.polygon(dest, rgba, [(px - ox, py - oy) for px, py in translated],
                                line_width)

        self._paint(bounds, color, paint)

    def text(self, text: str, x: float, y: float, size: int = 20,
             color: ColorLike = 'white', align: str = 'left') -> None:
        """Draw a single line of text.

        ``y`` is the text baseline; ``align`` is 'left', 'center' or 'right'
        relative to ``x``.
        """
        rgba = Color.parse(color).with_alpha_scale(self._alpha)
        if rgba.a == 0:
            return
        font = self._font(size)
        rendered = font.render(str(text), True, rgba.as_rgb_tuple)
        if rgba.a < 255:
            rendered.set_alpha(rgba.a)

        px, py = self._point(x, y)
        if align == 'center':
            px -= rendered.get_width() // 2
        elif align == 'right':
            px -= rendered.get_width()
        self._target.blit(rendered, (px, py - font.get_ascent()))

    # =========================================================================
    # Internals
    # =========================================================================

    def _point(self, x: float, y: float) -> Tuple[int, int]:
        return (int(round(x + self._offset[0])), int(round(y + self._offset[1])))

    def _rect(self, x: float, y: float, width: float, height: float) -> pygame.Rect:
        left, top = self._point(x, y)
        return pygame.Rect(left, top, max(0, int(round(width))), max(0, int(round(height))))

    def _paint(self, bounds: pygame.Rect, color: ColorLike, painter: Painter) -> None:
        """Run a painter directly, or through a temporary layer when translucent."""
        rgba = Color.parse(color).with_alpha_scale(self._alpha)
        if rgba.a == 0 or bounds.width <= 0 or bounds.height <= 0:
            return
        if rgba.a == 255:
            painter(self._target, rgba.as_tuple, 0, 0)
            return
        layer = pygame.Surface(bounds.size, pygame.SRCALPHA)
        painter(layer, rgba.as_tuple, bounds.x, bounds.y)
        self._target.blit(layer, bounds.topleft)

    def _font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            if not pygame.font.get_init():
                pygame.font.init()
            if self._font_name:
                self._fonts[size] = pygame.font.SysFont(self._font_name, size)
            else:
                self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]
