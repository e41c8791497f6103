"""
Snake game mode.

Steer the snake with the arrow keys, eat food to grow, and avoid the walls
and your own tail. The snake speeds up as the score climbs.
"""

import math
import random
from typing import List, Optional, Tuple

from retro_arcade.engine.session import GameSession
from games.Snake.config import (
    GRID_SIZE,
    START_LENGTH,
    START_SPEED,
    MAX_SPEED,
    SPEEDUP_EVERY,
    FOOD_POINTS,
    HEAD_COLOR,
    BODY_COLOR,
    FOOD_COLOR,
    GRID_COLOR,
)

Cell = Tuple[int, int]

# Key code -> (dx, dy)
DIRECTIONS = {
    'ArrowUp': (0, -1),
    'ArrowDown': (0, 1),
    'ArrowLeft': (-1, 0),
    'ArrowRight': (1, 0),
}


class SnakeMode(GameSession):
    """
    Snake on a grid sized to the surface.

    The snake moves one cell every 1/speed seconds. A turn takes effect on
    the next move and can never reverse the snake onto itself.
    """

    # Game metadata
    GAME_ID = "snake"
    NAME = "Snake"
    DESCRIPTION = "Eat, grow, and don't bite your own tail."
    VERSION = "1.0.0"
    AUTHOR = "Retro Arcade"

    # CLI argument definitions
    ARGUMENTS = [
        {
            'name': '--speed',
            'type': float,
            'default': None,
            'help': f'Starting speed in cells per second (default: {START_SPEED:g})'
        },
        {
            'name': '--grid-size',
            'type': int,
            'default': None,
            'help': f'Cell size in pixels (default: {GRID_SIZE})'
        },
    ]

    def __init__(
        self,
        surface,
        speed: Optional[float] = None,
        grid_size: Optional[int] = None,
        rng: Optional[random.Random] = None,
        **kwargs,
    ):
        """
        Initialize game mode.

        Args:
            surface: Render surface
            speed: Starting speed in cells per second
            grid_size: Cell size in pixels
            rng: Random source for food placement
            **kwargs: GameSession arguments

        Raises:
            ValueError: If speed or grid_size is not positive
        """
        super().__init__(surface, **kwargs)
        self.start_speed = speed if speed is not None else START_SPEED
        self.grid_size = grid_size if grid_size is not None else GRID_SIZE
        if self.start_speed <= 0:
            raise ValueError(f"speed must be > 0, got {self.start_speed}")
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be > 0, got {self.grid_size}")
        self._rng = rng or random.Random()

        self.cols = 0
        self.rows = 0
        self.snake: List[Cell] = []
        self.direction: Cell = (1, 0)
        self.next_direction: Cell = (1, 0)
        self.food: Optional[Cell] = None
        self.speed = self.start_speed
        self.move_timer = 0.0
        self.food_pulse = 0.0

    def init(self) -> None:
        self.cols = self.width // self.grid_size
        self.rows = self.height // self.grid_size

        start_x = self.cols // 2
        start_y = self.rows // 2
        self.snake = [(start_x - i, start_y) for i in range(START_LENGTH)]

        self.direction = (1, 0)
        self.next_direction = (1, 0)
        self.score = 0
        self.speed = self.start_speed
        self.move_timer = 0.0
        self.food_pulse = 0.0
        self.food = None
        self.spawn_food()

    @property
    def head(self) -> Cell:
        return self.snake[0]

    def spawn_food(self) -> Optional[Cell]:
        """Place food on a random free cell. Returns None if the board is full."""
        occupied = set(self.snake)
        free = [(x, y) for x in range(self.cols) for y in range(self.rows)
                if (x, y) not in occupied]
        self.food = self._rng.choice(free) if free else None
        return self.food

    def update(self, dt: float) -> None:
        for code, (dx, dy) in DIRECTIONS.items():
            if not self.input.is_pressed(code):
                continue
            # No reversing into the neck
            if (dx != 0 and self.direction[0] == 0) or (dy != 0 and self.direction[1] == 0):
                self.next_direction = (dx, dy)
                break

        self.food_pulse += dt * 5
        self.move_timer += dt

        interval = 1 / self.speed
        if self.move_timer >= interval:
            self.move_timer -= interval
            self.step()

    def step(self) -> None:
        """Move the snake one cell."""
        self.direction = self.next_direction
        head_x, head_y = self.head
        new_head = (head_x + self.direction[0], head_y + self.direction[1])

        if not (0 <= new_head[0] < self.cols and 0 <= new_head[1] < self.rows):
            self.die()
            return

        # The tail moves out of the way unless the snake is about to grow
        grows = new_head == self.food
        body = self.snake if grows else self.snake[:-1]
        if new_head in body:
            self.die()
            return

        self.snake.insert(0, new_head)
        if grows:
            self.eat(new_head)
        else:
            self.snake.pop()

    def eat(self, cell: Cell) -> None:
        self.add_score(FOOD_POINTS)
        self.shake(5, 0.2)
        center_x = cell[0] * self.grid_size + self.grid_size / 2
        center_y = cell[1] * self.grid_size + self.grid_size / 2
        self.emit(center_x, center_y, FOOD_COLOR, 10)
        self.speed = min(MAX_SPEED, self.start_speed + self.score // SPEEDUP_EVERY)
        if self.spawn_food() is None:
            self.game_over()

    def die(self) -> None:
        self.shake(20, 0.5)
        self.game_over()

    def draw(self) -> None:
        surface = self.surface
        size = self.grid_size

        for x in range(0, self.width + 1, size):
            surface.line(x, 0, x, self.height, GRID_COLOR)
        for y in range(0, self.height + 1, size):
            surface.line(0, y, self.width, y, GRID_COLOR)

        self.draw_particles()

        if self.food is not None:
            pulse = abs(math.sin(self.food_pulse))
            food_size = size * (0.6 + pulse * 0.2)
            offset = (size - food_size) / 2
            surface.fill_rect(self.food[0] * size + offset, self.food[1] * size + offset,
                              food_size, food_size, FOOD_COLOR)

        inset = 2
        for index, (x, y) in enumerate(self.snake):
            color = HEAD_COLOR if index == 0 else BODY_COLOR
            surface.fill_rect(x * size + inset, y * size + inset,
                              size - inset * 2, size - inset * 2, color)
