from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional

import pygame

from falling_blocks.game import Action, FallingBlockGame, FixedStepClock, GameConfig
from .renderer import Renderer


logger = logging.getLogger(__name__)


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_a: Action.MOVE_LEFT,
    pygame.K_LEFT: Action.MOVE_LEFT,
    pygame.K_d: Action.MOVE_RIGHT,
    pygame.K_RIGHT: Action.MOVE_RIGHT,
    pygame.K_q: Action.ROTATE_LEFT,
    pygame.K_e: Action.ROTATE_RIGHT,
    pygame.K_s: Action.SOFT_DROP,
    pygame.K_DOWN: Action.SOFT_DROP,
}


def action_for_key(key: int, mods: int = 0) -> Optional[Action]:
    if key == pygame.K_ESCAPE and mods & pygame.KMOD_SHIFT:
        return Action.REQUEST_QUIT
    return KEY_TO_ACTION.get(key)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks")
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--tps", type=int, default=24, help="Logical ticks per second")
    p.add_argument("--frames-per-move", type=int, default=18,
                   help="Ticks between automatic one-row drops")
    p.add_argument("--cell-size", type=int, default=32)
    p.add_argument("--fps", type=int, default=60, help="Display frame cap")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def run(args: Optional[argparse.Namespace] = None) -> None:
    args = args or build_parser().parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config = GameConfig(
        width=args.width,
        height=args.height,
        frames_per_move=args.frames_per_move,
        ticks_per_second=args.tps,
        random_seed=args.seed,
    )
    game = FallingBlockGame(config)
    ticker = FixedStepClock(config.ticks_per_second, max_ticks_per_frame=config.ticks_per_second)
    renderer = Renderer(cell_size=args.cell_size)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size(config.width, config.height))
        clock = pygame.time.Clock()
        caption = ""

        running = True
        while running:
            elapsed_ms = clock.tick(args.fps)

            queued: List[Action] = []
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    action = action_for_key(event.key, event.mod)
                    if action == Action.REQUEST_QUIT:
                        running = False
                    elif action is not None:
                        queued.append(action)
            if not running:
                break

            game.step_frame(queued, ticker.advance(elapsed_ms / 1000.0))

            status = game.status_text()
            if status != caption:
                pygame.display.set_caption(status)
                caption = status
            renderer.draw(screen, game.snapshot())
    finally:
        pygame.quit()
    logger.info("final score %d, lines %d", game.score, game.lines_cleared_total)


def main() -> None:
    run()


if __name__ == "__main__":  # pragma: no cover
    main()
