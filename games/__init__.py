"""Arcade games. Each game lives in games/<Name>/game_mode.py."""
