"""
Tilebreak CLI - Command-line interface for the game.

Usage:
    tilebreak play [--width W] [--height H] [--seed S]   Play against the random opponent
    tilebreak demo [--seed S]                            Two in-process peers play each other
    tilebreak serve [--host H] [--port P]                Run the room API
"""

import argparse
import sys
import time

from .config import MatchConfig, configure_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tilebreak - move, then break a tile",
        prog="tilebreak",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from TILEBREAK_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    play_parser = subparsers.add_parser("play", help="Play against the random opponent")
    play_parser.add_argument("--width", type=int, default=None)
    play_parser.add_argument("--height", type=int, default=None)
    play_parser.add_argument("--seed", type=int, default=None, help="Opponent RNG seed")

    demo_parser = subparsers.add_parser("demo", help="Two networked peers play each other")
    demo_parser.add_argument("--width", type=int, default=None)
    demo_parser.add_argument("--height", type=int, default=None)
    demo_parser.add_argument("--seed", type=int, default=None)

    serve_parser = subparsers.add_parser("serve", help="Run the room API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "play":
        cmd_play(args)
    elif args.command == "demo":
        cmd_demo(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _config_from(args) -> MatchConfig:
    overrides = {}
    if args.width is not None:
        overrides["width"] = args.width
    if args.height is not None:
        overrides["height"] = args.height
    return MatchConfig(**overrides)


def _print_board(snapshot):
    print()
    print(snapshot.render())
    print()


def _read_cell(prompt: str, width: int):
    """Read 'x y' or a flat index. Returns None on 'q', or -1 on bad input."""
    text = input(prompt).strip().lower()
    if text in {"q", "quit", "exit"}:
        return None
    parts = text.replace(",", " ").split()
    try:
        if len(parts) == 2:
            x, y = int(parts[0]), int(parts[1])
            return y * width + x
        return int(parts[0])
    except (ValueError, IndexError):
        return -1


def cmd_play(args):
    """Text-mode match: you are BLUE (1), the opponent is RED (2)."""
    from .bots import RandomPolicy
    from .engine_core.state import Phase
    from .session import SinglePlayerGame

    game = SinglePlayerGame(config=_config_from(args), policy=RandomPolicy(seed=args.seed))
    width = game.match.board.width

    print("You are BLUE (1). Enter cells as 'x y'. Row 0 is at the top. 'q' quits.")
    while not game.match.is_over:
        _print_board(game.match.snapshot())
        step = "move" if game.match.phase == Phase.AWAITING_MOVE else "break"
        index = _read_cell(f"{step}> ", width)
        if index is None:
            return
        result = game.on_cell_clicked(index)
        if not result:
            print(f"  {result.error}")
            continue

        # Opponent pacing runs on this loop's clock
        while game.scheduler.pending:
            time.sleep(game.scheduler.next_delay() or 0)
            game.scheduler.advance(game.scheduler.next_delay() or 0)

    _print_board(game.match.snapshot())
    print(f"Winner: {game.match.winner.display_name} ({game.match.reason.value})")


def cmd_demo(args):
    """Two NetworkedGame peers on an InMemoryRoom, both driven by RandomPolicy."""
    from .bots import RandomPolicy
    from .engine_core.state import Phase
    from .session import InMemoryRoom, NetworkedGame

    config = _config_from(args)
    room = InMemoryRoom(room_id="demo")
    peers = [NetworkedGame(config), NetworkedGame(config)]
    for peer in peers:
        room.join(peer)

    policy = RandomPolicy(seed=args.seed)
    while not peers[0].match.is_over:
        peer = next((p for p in peers if p.is_my_turn), None)
        if peer is None:
            break
        board = peer.match.board
        if peer.match.phase == Phase.AWAITING_MOVE:
            decision = policy.select_move(board, peer.my_participant.is_p1)
        else:
            decision = policy.select_break(board)
        peer.on_cell_clicked(decision.index)

    _print_board(peers[0].match.snapshot())
    match = peers[0].match
    print(f"Winner: {match.winner.display_name} ({match.reason.value}) after turn {peers[0].current_turn}")
    print(f"Replicas identical: {peers[0].match.board == peers[1].match.board}")


def cmd_serve(args):
    """Run the room API with uvicorn."""
    import uvicorn

    uvicorn.run("tilebreak.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
