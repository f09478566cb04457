"""Headless demo for the tilebrawl engine.

Runs one session with a random legal-move agent at a fixed tick rate until the
player falls or the time limit is reached, then logs a summary.
"""
import argparse
import logging
import random

from tilebrawl.components.game_state import ComboMode
from tilebrawl.config import SessionConfig
from tilebrawl.events.bus import (
    EVENT_BOARD_RESHUFFLED,
    EVENT_ENEMY_DEFEATED,
    EVENT_GAME_OVER,
    EVENT_PLAYER_LEVEL_UP,
    EVENT_SPECIAL_TILE_CREATED,
)
from tilebrawl.session import new_session
from tilebrawl.systems.random_agent_system import RandomAgentSystem

TICK_SECONDS = 1 / 30

logger = logging.getLogger("tilebrawl.demo")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Let a random agent play a tilebrawl session.")
    parser.add_argument("--mode", choices=[mode.value for mode in ComboMode], default=ComboMode.UNIFIED.value)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--seconds", type=float, default=120.0, help="simulated time limit")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    rng = random.Random(args.seed)
    session = new_session(SessionConfig(combo_mode=args.mode), rng=rng)
    agent = RandomAgentSystem(session.world, session.event_bus, rng=rng)

    session.subscribe(EVENT_ENEMY_DEFEATED, lambda sender, **kw: logger.info("enemy down, stage %s", kw.get("level")))
    session.subscribe(EVENT_PLAYER_LEVEL_UP, lambda sender, **kw: logger.info("player level %s", kw.get("player_level")))
    session.subscribe(EVENT_SPECIAL_TILE_CREATED, lambda sender, **kw: logger.debug("%s at %s", kw.get("kind"), kw.get("position")))
    session.subscribe(EVENT_BOARD_RESHUFFLED, lambda sender, **kw: logger.debug("board regenerated (%s)", kw.get("reason")))
    session.subscribe(EVENT_GAME_OVER, lambda sender, **kw: logger.info("game over, score %s", kw.get("score")))

    elapsed = 0.0
    state = session.state
    while elapsed < args.seconds and not state.is_game_over:
        state = session.tick(TICK_SECONDS)
        elapsed += TICK_SECONDS

    logger.info(
        "after %.1fs: %d moves, score %d (best %d), stage %d, player level %d, gold %d, highest combo %d",
        elapsed,
        agent.moves_made,
        state.score,
        state.best_score,
        state.level,
        state.player_level,
        state.gold,
        state.highest_combo,
    )


if __name__ == "__main__":
    main()
