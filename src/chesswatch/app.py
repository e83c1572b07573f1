"""Command-line front-end.

Works on saved page snapshots so the tracking pipeline can be exercised
without a browser::

    chesswatch resolve game.html --url https://www.chess.com/game/live/1
    chesswatch analyze game.html --url https://lichess.org/abcd --depth 18
    chesswatch health --server http://localhost:5000/analyze
"""

from __future__ import annotations

import argparse
import logging
import sys

from chesswatch.dispatch.models import DispatchOutcome, DispatchState
from chesswatch.page.markup import load_page
from chesswatch.page.sites import supported_domains
from chesswatch.session import MoveRenderer, TrackerSession
from chesswatch.settings import SideOverride, TrackerSettings, load_settings
from chesswatch.tracking.context import TrackerContext
from chesswatch.tracking.probe import PROBE_MESSAGE_KIND, ProbeIntake, ProbeMessage
from chesswatch.tracking.resolver import PositionResolver

_LOGGER = logging.getLogger(__name__)


class _PrintRenderer(MoveRenderer):
    """Writes the suggested move to stdout."""

    def show_move(self, origin: str, destination: str) -> None:
        print(f"best move: {origin}{destination}")

    def clear(self) -> None:
        pass


def _settings_from_args(args: argparse.Namespace) -> TrackerSettings:
    settings = load_settings(args.settings) if args.settings else TrackerSettings()
    changes: dict[str, object] = {}
    if args.server is not None:
        changes["server_url"] = args.server
    if getattr(args, "depth", None) is not None:
        changes["search_depth"] = args.depth
    if getattr(args, "orientation", None) is not None:
        changes["orientation"] = args.orientation
    if getattr(args, "player_color", None) is not None:
        changes["player_color"] = args.player_color
    return settings.updated(changes)


def cmd_resolve(args: argparse.Namespace) -> int:
    document = load_page(args.page, url=args.url)
    context = TrackerContext(settings=_settings_from_args(args))
    context.attach_document(document)
    if context.site is None:
        _LOGGER.warning(
            "%s is not a supported site (%s)", document.hostname, ", ".join(supported_domains())
        )

    if args.probe_fen:
        ProbeIntake().accept(
            context,
            ProbeMessage(
                origin=document.origin,
                kind=PROBE_MESSAGE_KIND,
                payload={"fen": args.probe_fen, "orientation": args.probe_orientation},
            ),
        )

    snapshot = PositionResolver().resolve(context)
    if snapshot is None:
        print("no position found", file=sys.stderr)
        return 1
    print(snapshot.encoded)
    _LOGGER.info("Resolved from %s signal", snapshot.source.name.lower())
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    from PyQt6.QtCore import QCoreApplication

    settings = _settings_from_args(args)
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    def _on_outcome(outcome: DispatchOutcome) -> None:
        _LOGGER.info("Request finished: %s", outcome)
        QCoreApplication.exit(0 if outcome is DispatchOutcome.FULFILLED else 1)

    session = TrackerSession(
        renderer=_PrintRenderer(),
        settings=settings,
        on_outcome=_on_outcome,
    )
    session.on_page_mutation(load_page(args.page, url=args.url))
    session.analyze_now()
    if session.dispatcher.state is DispatchState.IDLE:
        status = session.status()
        print(f"nothing to analyze (site={status.site}, fen={status.fen})", file=sys.stderr)
        return 1
    return app.exec()


def cmd_health(args: argparse.Namespace) -> int:
    from PyQt6.QtCore import QCoreApplication

    from chesswatch.dispatch.transport import BackendHealthProbe, QtAnalysisTransport

    settings = _settings_from_args(args)
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    probe = BackendHealthProbe(
        QtAnalysisTransport(app),
        health_url=settings.health_url,
        timeout_ms=settings.health_timeout_ms,
    )

    def _on_checked(online: bool) -> None:
        print(f"{settings.health_url}: {'online' if online else 'offline'}")
        QCoreApplication.exit(0 if online else 1)

    probe.health_checked.connect(_on_checked)
    probe.check()
    return app.exec()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chesswatch",
        description="Track a chess position on a saved page and query the analysis backend.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--settings", default=None, help="JSON settings file")
    parser.add_argument("--server", default=None, help="Analysis endpoint URL")
    sub = parser.add_subparsers(dest="command", help="Available commands")

    sides = [side.value for side in SideOverride]

    # ── resolve ──
    p_resolve = sub.add_parser("resolve", help="Print the exchange string of a saved page")
    p_resolve.add_argument("page", help="Path to the saved HTML page")
    p_resolve.add_argument("--url", required=True, help="URL the page was saved from")
    p_resolve.add_argument("--orientation", choices=sides, default=None)
    p_resolve.add_argument("--player-color", choices=sides, default=None)
    p_resolve.add_argument("--probe-fen", default=None,
                           help="Structured position to fuse in, as sent by the probe")
    p_resolve.add_argument("--probe-orientation", default="white")

    # ── analyze ──
    p_analyze = sub.add_parser("analyze", help="Resolve a saved page and ask the backend")
    p_analyze.add_argument("page", help="Path to the saved HTML page")
    p_analyze.add_argument("--url", required=True, help="URL the page was saved from")
    p_analyze.add_argument("--depth", type=int, default=None)
    p_analyze.add_argument("--orientation", choices=sides, default=None)
    p_analyze.add_argument("--player-color", choices=sides, default=None)

    # ── health ──
    sub.add_parser("health", help="Check whether the backend is reachable")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "resolve": cmd_resolve,
        "analyze": cmd_analyze,
        "health": cmd_health,
    }
    try:
        return commands[args.command](args)
    except (OSError, ValueError) as exc:
        print(f"chesswatch: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
