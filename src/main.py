"""Entry point for the Futurosphere match-three engine.

Sets up the ECS world, event bus and session controller, then plays levels
headlessly by always taking the best hinted swap.
"""
import argparse
import logging
import random

from ecs.components.game_state import GameMode
from ecs.events.bus import EVENT_SESSION_ENDED, EVENT_TICK, EventBus
from ecs.systems.session import SessionController
from ecs.world import create_world

logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("futurosphere")


class AutoPlayer:
    """Drives a session from the outside, the way a UI host would."""

    def __init__(self, seed=None, level=1, seconds_per_move=1.0):
        self.event_bus = EventBus()
        self.world = create_world(rng=random.Random(seed), level=level)
        self.session = SessionController(self.world, self.event_bus)
        self.seconds_per_move = seconds_per_move
        self.results = []
        self.event_bus.subscribe(EVENT_SESSION_ENDED, self.on_session_ended)

    def on_session_ended(self, sender, **kwargs):
        self.results.append(kwargs)

    def play_level(self, level=None):
        self.session.new_game(level)
        while self.session.mode == GameMode.PLAYING:
            hint = self.session.hint()
            if hint.exhausted:
                log.info("board has no moves left; starting over")
                self.session.reset()
                break
            self.session.attempt_move(hint.move.source, hint.move.target)
            for kind in list(self.session.inventory.available):
                self.session.activate_power_up(kind, hint.move.target)
            self.event_bus.emit(EVENT_TICK, dt=self.seconds_per_move)
        return self.session.last_result


def main():
    parser = argparse.ArgumentParser(description="Futurosphere headless auto-play")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible boards")
    parser.add_argument("--level", type=int, default=1, help="Level to start from")
    parser.add_argument("--levels", type=int, default=3, help="How many levels to attempt")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug-level logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    player = AutoPlayer(seed=args.seed, level=args.level)
    for _ in range(args.levels):
        result = player.play_level()
        if result is None:
            continue
        print(
            f"level {result.level}: {'won' if result.won else 'lost'} "
            f"with {result.final_score} points in {result.elapsed_time:.0f}s"
        )
        if not result.won:
            break


if __name__ == "__main__":
    main()
