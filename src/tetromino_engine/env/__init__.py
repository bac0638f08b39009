"""Gymnasium environments for the tetromino engine."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register the standard 10x20 field
register(
    id="Tetris-10x20-v0",
    entry_point="tetromino_engine.env.tetris_env:TetrisEnv",
)

__all__ = ["Tetris-10x20-v0"]
