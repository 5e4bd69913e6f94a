"""
CLI entry point.

Commands:
  serve      - Start the FastAPI web server
  players    - List registered players (optionally for one club)
  transfers  - List completed transfers
  bids       - List transfer bids

Usage examples:
  python main.py serve
  python main.py serve --port 8080
  python main.py players --club "FC Barcelona"
  python main.py bids --player-id 3
"""

import argparse
import sys
from dotenv import load_dotenv

# Load .env file before any module reads TRANSFERS_* variables
load_dotenv()

# Force UTF-8 output on Windows to handle special characters in player names
if sys.stdout.encoding != "utf-8":
    sys.stdout.reconfigure(encoding="utf-8")

from transfers.config import load_settings
from transfers.errors import NotFound
from transfers.observability import setup_logging
from transfers.service import TransferService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Football Transfer Registry")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- serve command ---
    serve = subparsers.add_parser("serve", help="Start the FastAPI web server")
    serve.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    serve.add_argument("--port", default=8000, type=int, help="Port to listen on (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    # --- listing commands ---
    players = subparsers.add_parser("players", help="List registered players")
    players.add_argument("--club", help="Only players currently at this club")

    transfers = subparsers.add_parser("transfers", help="List completed transfers")
    transfers.add_argument("--player-id", type=int, help="Only transfers of this player")

    bids = subparsers.add_parser("bids", help="List transfer bids")
    bids.add_argument("--player-id", type=int, help="Only bids on this player")

    return parser


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn
    print(f"Starting server at http://{args.host}:{args.port}")
    uvicorn.run(
        "api.server:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


def cmd_players(service: TransferService, args: argparse.Namespace) -> None:
    players = service.get_players_by_club(args.club) if args.club else service.get_players()
    for p in players:
        print(
            f"  #{p.id:<5} {p.name} ({p.age}, {p.position}) - {p.current_club}"
            f" - {p.market_value:,} [{p.transfer_status.value}]"
        )


def cmd_transfers(service: TransferService, args: argparse.Namespace) -> None:
    transfers = (
        service.get_transfers_by_player(args.player_id)
        if args.player_id is not None
        else service.get_transfers()
    )
    for t in transfers:
        print(f"  #{t.id:<5} player {t.player_id}: {t.from_club} -> {t.to_club} for {t.transfer_fee:,}")


def cmd_bids(service: TransferService, args: argparse.Namespace) -> None:
    bids = (
        service.get_bids_by_player(args.player_id)
        if args.player_id is not None
        else service.get_transfer_bids()
    )
    for b in bids:
        print(
            f"  #{b.id:<5} player {b.player_id}: {b.to_club} offers {b.bid_amount:,}"
            f" to {b.from_club} [{b.bid_status.value}]"
        )


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "serve":
        cmd_serve(args)
        return

    settings = load_settings()
    setup_logging(settings.log_level)
    service = TransferService.from_settings(settings)

    commands = {
        "players": cmd_players,
        "transfers": cmd_transfers,
        "bids": cmd_bids,
    }
    try:
        commands[args.command](service, args)
    except NotFound as e:
        print(e.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
