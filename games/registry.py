"""
Game Registry - Auto-discovery and management of arcade games.

Games are automatically discovered by scanning the games/ directory for
subdirectories containing a game_mode.py with a GameSession subclass that
declares a GAME_ID.

Game metadata and CLI arguments are read from the game class itself
(GAME_ID, NAME, DESCRIPTION, VERSION, AUTHOR, ARGUMENTS).

Usage:
    from games.registry import get_registry

    registry = get_registry()
    available = registry.list_games()  # ['pong', 'snake']

    info = registry.get_game_info('snake')
    args = registry.get_game_arguments('snake')
    game_class = registry.get_class('snake')
"""

import importlib
import inspect
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from retro_arcade.engine.session import GameSession
from retro_arcade.errors import UnknownGameError
from retro_arcade.logging import get_logger

log = get_logger('registry')

GAMES_DIR = Path(__file__).parent


@dataclass
class GameInfo:
    """Information about a registered game."""
    game_id: str
    name: str
    description: str
    version: str
    author: str
    module_path: str  # e.g., 'games.Snake.game_mode'

    # CLI arguments declared by the game class
    arguments: List[Dict[str, Any]] = field(default_factory=list)


class GameRegistry:
    """
    Registry for discovering and creating arcade games.

    Discovery works by:
    1. Looking for game_mode.py in each game directory
    2. Importing it as games.<Dir>.game_mode
    3. Registering every GameSession subclass defined there with a GAME_ID

    Args:
        games_dir: Directory to scan (default: this package's directory)
        discover: Scan on construction (False gives an empty registry)
    """

    def __init__(self, games_dir: Optional[Path] = None, discover: bool = True):
        self._games_dir = Path(games_dir) if games_dir is not None else GAMES_DIR
        self._games: Dict[str, GameInfo] = {}
        self._game_classes: Dict[str, Type[GameSession]] = {}
        if discover:
            self._discover_games()

    def _discover_games(self) -> None:
        """Import every games/<Dir>/game_mode.py and register its games."""
        for game_dir in sorted(self._games_dir.iterdir()):
            if not game_dir.is_dir():
                continue
            if game_dir.name.startswith('_') or game_dir.name.startswith('.'):
                continue
            if not (game_dir / 'game_mode.py').exists():
                continue

            module_path = f"{__package__ or 'games'}.{game_dir.name}.game_mode"
            try:
                module = importlib.import_module(module_path)
            except ImportError as e:
                log.warning("Failed to load game from %s: %s", game_dir, e)
                continue

            for _, obj in inspect.getmembers(module, inspect.isclass):
                # Only classes defined in this module, not imported ones
                if obj.__module__ != module.__name__:
                    continue
                if issubclass(obj, GameSession) and obj is not GameSession and obj.GAME_ID:
                    self.register(obj)

    def register(self, game_class: Type[GameSession]) -> GameInfo:
        """
        Register a game class under its GAME_ID.

        Args:
            game_class: GameSession subclass with a non-empty GAME_ID

        Returns:
            The GameInfo recorded for the class

        Raises:
            ValueError: If the class has no GAME_ID
        """
        game_id = game_class.GAME_ID
        if not game_id:
            raise ValueError(f"{game_class.__name__} does not define GAME_ID")

        if hasattr(game_class, 'get_arguments'):
            arguments = game_class.get_arguments()
        else:
            arguments = list(getattr(game_class, 'ARGUMENTS', []))

        info = GameInfo(
            game_id=game_id,
            name=game_class.NAME,
            description=game_class.DESCRIPTION,
            version=game_class.VERSION,
            author=game_class.AUTHOR,
            module_path=game_class.__module__,
            arguments=arguments,
        )
        if game_id in self._games:
            log.warning("Game id %r re-registered by %s", game_id, game_class.__name__)
        self._games[game_id] = info
        self._game_classes[game_id] = game_class
        log.debug("Registered %s (%s)", game_id, game_class.__name__)
        return info

    def list_games(self) -> List[str]:
        """
        Get list of available game identifiers.

        Returns:
            Sorted list of game identifiers
        """
        return sorted(self._games.keys())

    def get_game_info(self, game_id: str) -> Optional[GameInfo]:
        """
        Get information about a specific game.

        Args:
            game_id: Game identifier

        Returns:
            GameInfo or None if not found
        """
        return self._games.get(game_id)

    def get_game_arguments(self, game_id: str) -> List[Dict[str, Any]]:
        """
        Get CLI arguments for a specific game.

        Args:
            game_id: Game identifier

        Returns:
            List of argument definitions for argparse
        """
        info = self._games.get(game_id)
        if info is None:
            return []
        return info.arguments

    def get_class(self, game_id: str) -> Type[GameSession]:
        """
        Get the game class for a specific game.

        Raises:
            UnknownGameError: If the game is not registered
        """
        game_class = self._game_classes.get(game_id)
        if game_class is None:
            raise UnknownGameError(game_id, self.list_games())
        return game_class

    def create(self, game_id: str, *args, **kwargs) -> GameSession:
        """
        Construct (but do not start) a game session.

        Args:
            game_id: Game identifier
            *args, **kwargs: Passed to the game class constructor

        Raises:
            UnknownGameError: If the game is not registered
        """
        return self.get_class(game_id)(*args, **kwargs)


# Singleton instance for convenience
_registry: Optional[GameRegistry] = None


def get_registry() -> GameRegistry:
    """Get the global game registry instance, discovering games on first use."""
    global _registry
    if _registry is None:
        _registry = GameRegistry()
    return _registry
