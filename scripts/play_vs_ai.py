#!/usr/bin/env python3
"""Play Tablut against the alpha-beta engine via the console, with optional logging & replay."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from tablut import AIPlayer, Board, Move, Piece, Player, SearchConfig
from tablut.core import MoveParseError, parse_move

logger = logging.getLogger("tablut.play")

SIDES = {"black": Piece.BLACK, "white": Piece.WHITE}


def load_yaml_config(path_str: Optional[str]) -> Dict:
    if not path_str:
        return {}
    path = Path(path_str)
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def build_search_config(args: argparse.Namespace, cfg: Dict) -> SearchConfig:
    search_cfg = dict(cfg.get("search") or {})
    if args.depth is not None:
        search_cfg["max_depth"] = args.depth
    return SearchConfig(**search_cfg)


def prompt_human_move(board: Board) -> str:
    while True:
        raw = input(f"{board.turn.name} move (e.g. d1d3, q to quit): ").strip()
        if raw.lower() in {"q", "quit", "exit"}:
            print("Quitting.")
            sys.exit(0)
        try:
            move = parse_move(raw)
        except MoveParseError as exc:
            print(exc)
            continue
        if board.is_legal(move):
            return str(move)
        print(f"Illegal move {move}.")


def save_log(log: Dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(log, ensure_ascii=False, indent=2))
    print(f"Saved game log to {path}.")


def replay_logged_game(log_path: Path, *, verbose: bool = True) -> Dict[str, object]:
    data = json.loads(log_path.read_text())
    moves = data.get("moves", [])
    board = Board()
    if verbose:
        print(board)
    for entry in moves:
        board.make_move(parse_move(entry["move"]))
        if verbose:
            print(f"{entry.get('actor', 'unknown')} ({entry.get('side', '?')}): {entry['move']}")
            print(board)
    winner = board.winner
    summary = {
        "winner": winner.name if winner is not None else None,
        "repeated": board.repeated_position(),
        "moves": len(moves),
        "position": board.encoded(),
    }
    if verbose:
        print(f"Result: {summary['winner'] or 'unfinished'}")
    return summary


def play_game(
    white: Player,
    black: Player,
    *,
    board: Optional[Board] = None,
    verbose: bool = True,
) -> Dict[str, object]:
    board = board or Board()
    players = {Piece.WHITE: white, Piece.BLACK: black}
    records: List[Dict] = []
    while board.winner is None:
        player = players[board.turn]
        if verbose:
            print()
            print(board)
        text = player.my_move(board)
        if text is None:
            break
        actor = "human" if player.is_manual else "ai"
        if verbose and not player.is_manual:
            print(f"AI ({board.turn.name}) plays {text}")
        records.append({"move_index": board.move_count, "actor": actor, "side": board.turn.name, "move": text})
        board.make_move(parse_move(text))
        logger.info("%s", records[-1])

    if verbose:
        print()
        print(board)
        if board.winner is not None:
            reason = " by repetition" if board.repeated_position() else ""
            print(f"{board.winner.name} wins{reason}.")
    return {
        "winner": board.winner.name if board.winner is not None else None,
        "repeated": board.repeated_position(),
        "moves": records,
    }


class ConsolePlayer(Player):
    @property
    def is_manual(self) -> bool:
        return True

    def choose(self, board: Board) -> Optional[Move]:
        return parse_move(prompt_human_move(board))


def main() -> None:
    parser = argparse.ArgumentParser(description="Play Tablut in the console against the engine.")
    parser.add_argument("--config", type=str, default="configs/default.yaml")
    parser.add_argument("--human-side", choices=["white", "black"], default=None)
    parser.add_argument("--depth", type=int, help="Fixed search depth (overrides the heuristic)")
    parser.add_argument("--move-limit", type=int)
    parser.add_argument("--log-file", type=str)
    parser.add_argument("--replay-log", type=str, help="Replay a logged game and exit")
    parser.add_argument("--replay-quiet", action="store_true")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.replay_log:
        replay_logged_game(Path(args.replay_log), verbose=not args.replay_quiet)
        return

    cfg = load_yaml_config(args.config)
    search_config = build_search_config(args, cfg)
    human_side = args.human_side or cfg.get("human_side")
    move_limit = args.move_limit if args.move_limit is not None else cfg.get("move_limit")

    board = Board()
    if move_limit:
        board.set_move_limit(move_limit)

    players: Dict[Piece, Player] = {}
    for name, side in SIDES.items():
        if human_side == name:
            players[side] = ConsolePlayer(side)
        else:
            players[side] = AIPlayer(side, search_config)

    result = play_game(players[Piece.WHITE], players[Piece.BLACK], board=board)

    if args.log_file:
        metadata = {
            "human_side": human_side,
            "move_limit": move_limit,
            "search": vars(search_config),
            "winner": result["winner"],
            "repeated": result["repeated"],
        }
        save_log({"metadata": metadata, "moves": result["moves"]}, Path(args.log_file))


if __name__ == "__main__":
    main()
