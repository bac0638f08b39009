from __future__ import annotations

import argparse
import logging
from typing import Callable, Dict, Tuple

import pygame

from tetromino_engine.game import EngineListener, GameConfig, TetrisEngine
from .renderer import Renderer


logger = logging.getLogger(__name__)

FLASH_MS = 150


class PlayListener(EngineListener):
    """Collects what the screen needs to show after each engine command."""

    def __init__(self) -> None:
        self.flash_rows: Tuple[int, ...] = ()
        self.flash_until = 0

    def on_line_clear(self, count: int, rows: Tuple[int, ...]) -> None:
        logger.debug("Flashing %d cleared row(s): %s", count, list(rows))
        self.flash_rows = rows
        self.flash_until = pygame.time.get_ticks() + FLASH_MS

    def on_game_over(self) -> None:
        logger.debug("Game over screen shown")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play the falling-block engine with the keyboard")
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--gravity_ms", type=int, default=600, help="Milliseconds between gravity ticks")
    p.add_argument("--cell_size", type=int, default=28)
    p.add_argument("--log_level", type=str, default="INFO")
    return p


def run(width: int = 10, height: int = 20, seed: int | None = None, gravity_ms: int = 600, cell_size: int = 28) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        listener = PlayListener()
        game = TetrisEngine(GameConfig(width=width, height=height, random_seed=seed), listeners=[listener])
        renderer = Renderer(cell_size=cell_size)
        screen = pygame.display.set_mode(renderer.window_size(game.width, game.height))
        pygame.display.set_caption("Tetromino Engine - Human Play")
        font = pygame.font.SysFont(None, 32)

        key_to_command: Dict[int, Callable[[], object]] = {
            pygame.K_LEFT: game.move_left,
            pygame.K_RIGHT: game.move_right,
            pygame.K_DOWN: game.move_down,
            pygame.K_UP: game.rotate_right,
            pygame.K_x: game.rotate_right,
            pygame.K_z: game.rotate_left,
            pygame.K_SPACE: game.hard_drop,
            pygame.K_r: game.reset,
        }

        last_fall = pygame.time.get_ticks()

        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_p:
                        if game.paused:
                            game.resume()
                        else:
                            game.pause()
                    else:
                        command = key_to_command.get(event.key)
                        if command is not None:
                            command()

            # Gravity
            now = pygame.time.get_ticks()
            if now - last_fall >= gravity_ms:
                game.tick()
                last_fall = now

            flash = listener.flash_rows if now < listener.flash_until else ()
            renderer.draw(screen, game.get_state(), game.next_piece(), flash)

            status = None
            if game.is_game_over():
                status = "Game Over - R to restart, ESC to quit"
            elif game.paused:
                status = "Paused - P to resume"
            if status is not None:
                text = font.render(status, True, (255, 255, 255))
                rect = text.get_rect(center=(screen.get_width() // 2, 30))
                screen.blit(text, rect)

            lines = font.render(f"Lines: {game.cleared_line_count()}", True, (220, 220, 220))
            screen.blit(lines, (screen.get_width() - lines.get_width() - 20, screen.get_height() - 40))
            pygame.display.flip()

            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="[TETROMINO] %(asctime)s - %(levelname)s - %(message)s")
    run(args.width, args.height, args.seed, args.gravity_ms, args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
