"""
Retro Arcade

Fixed-timestep engine core shared by a set of small arcade games.
See retro_arcade.engine for the session lifecycle and run loop.
"""

__version__ = '1.0.0'

__all__ = ['__version__']
