#!/usr/bin/env python3
"""
Retro Arcade Launcher

Plays one game from the registry in a pygame window. Game-specific
arguments are loaded from each game class's ARGUMENTS list.

Usage:
    # List available games
    python arcade_game.py --list

    # Play a game
    python arcade_game.py snake
    python arcade_game.py pong --target-score 5

    # See game-specific options
    python arcade_game.py snake --help

    # Larger window, decaying screen shake
    python arcade_game.py pong --scale 2 --shake-policy decay
"""

import argparse
import os
import sys

# Ensure project root is on path
_project_root = os.path.dirname(os.path.abspath(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from games.registry import get_registry
from retro_arcade.config import ShakePolicy, load_config
from retro_arcade.errors import ArcadeError
from retro_arcade import __version__
from retro_arcade.logging import configure_logging, get_logger, record_sinks

log = get_logger('launcher')


def _add_game_arguments(parser: argparse.ArgumentParser, arguments) -> None:
    """Add a game's ARGUMENTS definitions to the parser."""
    added = set()
    for arg_def in arguments:
        arg_name = arg_def['name']
        # Avoid duplicates
        if arg_name in added:
            continue
        added.add(arg_name)

        kwargs = {}
        if 'type' in arg_def:
            type_val = arg_def['type']
            # Handle type as string or actual type
            if isinstance(type_val, str):
                kwargs['type'] = {'str': str, 'int': int, 'float': float}.get(type_val, str)
            else:
                kwargs['type'] = type_val
        if 'default' in arg_def:
            kwargs['default'] = arg_def['default']
        if 'help' in arg_def:
            kwargs['help'] = arg_def['help']
        if 'action' in arg_def:
            kwargs['action'] = arg_def['action']
            kwargs.pop('type', None)  # action and type are mutually exclusive
        if 'choices' in arg_def:
            kwargs['choices'] = arg_def['choices']

        parser.add_argument(arg_name, **kwargs)


def main(argv=None) -> int:
    """Main entry point for the arcade launcher.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])
    """

    registry = get_registry()
    available_games = registry.list_games()

    # Phase 1: Parse just enough to identify the game
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument('game', nargs='?', choices=available_games)
    pre_args, _ = pre_parser.parse_known_args(argv)

    # Phase 2: Build full parser with game-specific arguments
    parser = argparse.ArgumentParser(
        description='Retro Arcade - fixed-timestep arcade games',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Available games: {', '.join(available_games)}

Examples:
  python arcade_game.py --list              # List available games
  python arcade_game.py snake               # Play Snake
  python arcade_game.py pong --target-score 5
  python arcade_game.py <game> --help       # See game-specific options
        """
    )
    parser.add_argument('game', nargs='?', choices=available_games, help='Game to play')
    parser.add_argument('--list', '-l', action='store_true',
                        help='List all available games and exit')
    parser.add_argument('--config', '-c', type=str, default=None,
                        help='YAML configuration file')
    parser.add_argument('--scale', type=int, default=None,
                        help='Window scale factor (default: 1)')
    parser.add_argument('--shake-policy', choices=[p.value for p in ShakePolicy], default=None,
                        help='Screen shake decay policy (default: duration)')
    parser.add_argument('--log-level', type=str, default=None,
                        help='Log level (TRACE, DEBUG, INFO, WARNING, ERROR, OFF)')

    if pre_args.game:
        _add_game_arguments(parser, registry.get_game_arguments(pre_args.game))

    args = parser.parse_args(argv)

    if args.log_level:
        configure_logging(level=args.log_level)

    # Handle --list
    if args.list:
        print("\nAvailable Games")
        print("=" * 50)
        for game_id in available_games:
            info = registry.get_game_info(game_id)
            print(f"\n  {game_id}")
            print(f"    Name: {info.name}")
            print(f"    Description: {info.description}")
            print(f"    Version: {info.version}")
            if info.arguments:
                print(f"    Options: {', '.join(a['name'] for a in info.arguments)}")
        print()
        return 0

    # Require a game
    if args.game is None:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config, overrides={
            'scale': args.scale,
            'shake_policy': args.shake_policy,
        })
    except ArcadeError as e:
        print(f"ERROR: {e}")
        return 1

    # Collect game kwargs from all parsed arguments, skipping launcher options
    skip_args = {'game', 'list', 'config', 'scale', 'shake_policy', 'log_level'}
    game_options = {
        k: v for k, v in vars(args).items()
        if k not in skip_args and v is not None
    }

    return run(args.game, config, game_options)


def run(game_id: str, config, game_options, registry=None, host=None, score_store=None) -> int:
    """Play ``game_id`` until the player quits.

    Any exception escaping the game is logged with its traceback and shown
    on the host's fault screen; the run then ends with status 1.

    Args:
        game_id: Registered game identifier
        config: ArcadeConfig for the run
        game_options: Game constructor options from the command line
        registry: Game registry (default: the shared registry)
        host: Window host (default: a new PygameHost)
        score_store: High score store (default: JsonScoreStore at config.score_file)

    Returns:
        Process exit status
    """
    # pygame-dependent imports stay here so --list and --help work headless
    from retro_arcade.engine.controller import SessionController
    from retro_arcade.scores import JsonScoreStore

    registry = registry or get_registry()
    info = registry.get_game_info(game_id)
    if host is None:
        from retro_arcade.engine.host import PygameHost
        host = PygameHost(config, caption=f"{info.name} - Retro Arcade")
    if score_store is None:
        score_store = JsonScoreStore(config.score_file)

    controller = SessionController(
        registry,
        host.surface,
        score_store,
        config=config,
        time_source=host.now,
    )

    print("=" * 60)
    print(f"Retro Arcade: {info.name}")
    print("=" * 60)
    print(f"Resolution: {config.width}x{config.height} x{config.scale}")
    print(f"Shake policy: {config.shake_policy.value}")
    print()
    print("Controls:")
    print("  - Arrow keys to play")
    print(f"  - {' or '.join(config.pause_keys)} to pause")
    print(f"  - {config.restart_key} to restart after game over")
    print(f"  - {config.quit_key} to quit after game over")
    print()

    with record_sinks('session', run_name=game_id, game_id=game_id, version=__version__):
        try:
            controller.switch_to(game_id, **game_options)
            controller.run(host)
        except Exception as e:
            log.exception("Fault in %s", game_id)
            host.show_fault(e)
            return 1
        finally:
            host.close()

    return 0


if __name__ == '__main__':
    sys.exit(main())
