# blackjack/terminal/main.py
"""
Terminal blackjack.

Run:
    blackjack
    python -m blackjack.terminal.main

See blackjack/config.py for the environment variables it honours.
"""

from __future__ import annotations

import sys

from ..config import GameConfig
from ..engine.session import Session
from ..logging_utils import get_logger, setup_logging
from .display import Display
from .prompts import InputFn, confirm, read_bet_amount, terminal_player_strategy

log = get_logger("blackjack.terminal")


def run_session(session: Session, display: Display, input_fn: InputFn = input) -> None:
    """Play rounds until the player quits or the bankroll hits zero."""
    display.banner()
    display.bankroll(session.bankroll)

    strategy = terminal_player_strategy(input_fn)
    while True:
        bet = read_bet_amount(session.bankroll, display, input_fn)
        session.play_round(bet, strategy, observer=display.on_round_event)

        if session.is_broke:
            display.broke()
            return
        display.line()
        display.bankroll(session.bankroll)
        if not confirm("Do you want to continue?", input_fn):
            display.goodbye()
            return


def main(input_fn: InputFn = input) -> int:
    config = GameConfig.from_env()
    setup_logging(config.log_level)
    session = Session(config)
    display = Display(color=config.color)
    log.info("Session started: bankroll %d, seed %s", session.bankroll, config.seed)

    try:
        run_session(session, display, input_fn)
    except (EOFError, KeyboardInterrupt):
        display.line()
        log.error("Input closed after %d rounds; ending session", session.rounds_played)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
