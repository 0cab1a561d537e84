"""kpwgen command-line interface.

Usage examples:
    kpwgen generate google github -a alice alice_gh
    kpwgen generate https://accounts.google.com --length 24 --strength --copy
    kpwgen generate google facebook x --export csv --out ~/exports
    kpwgen settings save --length 20 --prefix Ab1 --ttl 48h
    kpwgen settings show
"""

import argparse
import getpass
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from kpwgen import config
from kpwgen.clipboard import copy_text
from kpwgen.errors import KpwgenError
from kpwgen.export import FORMATS, render_export
from kpwgen.models import AdvancedParams
from kpwgen.orchestrator import GenerationOrchestrator
from kpwgen.settings_store import JsonFileStorage, PersistedSettingsStore
from kpwgen.strength import score_strength

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _password_length(value: str) -> int:
    number = _positive_int(value)
    if number > config.MAX_LENGTH:
        raise argparse.ArgumentTypeError(f"must be at most {config.MAX_LENGTH}")
    return number


def _add_advanced_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--version", dest="pw_version", type=_positive_int, help="Password version")
    p.add_argument(
        "--length", type=_password_length,
        help=f"Target password length (1-{config.MAX_LENGTH})",
    )
    p.add_argument("--prefix", help="Fixed prefix")
    p.add_argument("--suffix", help="Fixed suffix")
    p.add_argument(
        "--raw", action=argparse.BooleanOptionalAction, default=None,
        help="Use the trimmed platform text as-is (no normalization)",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="kpwgen",
        description="Generate reproducible passwords from a master key.",
    )
    parser.add_argument(
        "--store", type=Path, default=None,
        help="Settings file (default: $KPWGEN_HOME/storage.json)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    sub = parser.add_subparsers(dest="command")

    # ── generate ───────────────────────────────────────────────────────
    gen_p = sub.add_parser("generate", help="Generate passwords for one or more platforms")
    gen_p.add_argument("platforms", nargs="+", help="Platform names or URLs")
    gen_p.add_argument(
        "-a", "--account", nargs="+", default=[],
        help="Account names, one per platform",
    )
    _add_advanced_options(gen_p)
    gen_p.add_argument("-s", "--strength", action="store_true", help="Show advisory strength")
    gen_p.add_argument("-c", "--copy", action="store_true", help="Copy the password(s) to the clipboard")
    gen_p.add_argument("-e", "--export", choices=sorted(FORMATS), help="Write the results to a file")
    gen_p.add_argument("-o", "--out", type=Path, default=Path("."), help="Export directory")

    # ── settings ───────────────────────────────────────────────────────
    set_p = sub.add_parser("settings", help="Manage saved advanced parameters")
    set_sub = set_p.add_subparsers(dest="action")
    save_p = set_sub.add_parser("save", help="Save advanced parameters")
    _add_advanced_options(save_p)
    save_p.add_argument(
        "--ttl", choices=list(config.TTL_OPTIONS), default=config.DEFAULT_TTL,
        help=f"Expire after (default: {config.DEFAULT_TTL})",
    )
    set_sub.add_parser("show", help="Show saved advanced parameters")
    set_sub.add_parser("clear", help="Delete saved advanced parameters")

    args = parser.parse_args(argv)
    config.setup_logging("INFO" if args.verbose else None)
    store = PersistedSettingsStore(JsonFileStorage(args.store))

    try:
        if args.command == "generate":
            return _cmd_generate(args, store)
        if args.command == "settings":
            return _cmd_settings(args, store, set_p)
    except KpwgenError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


# ── helpers ────────────────────────────────────────────────────────────────


def _saved_params(store: PersistedSettingsStore, quiet: bool = False) -> AdvancedParams:
    """Saved parameters if present and fresh, otherwise the defaults."""
    result = store.read()
    if result.status == "ok":
        return result.params
    if not quiet:
        if result.status == "expired":
            expired = datetime.fromtimestamp(result.expired_at / 1000)
            print(f"  Note: saved settings expired at {expired:%Y-%m-%d %H:%M}", file=sys.stderr)
        elif result.status == "corrupt":
            print("  Note: saved settings were unreadable and have been removed", file=sys.stderr)
    return AdvancedParams()


def _merge_params(base: AdvancedParams, args: argparse.Namespace) -> AdvancedParams:
    overrides = {
        "version": args.pw_version,
        "length": args.length,
        "prefix": args.prefix,
        "suffix": args.suffix,
        "raw_mode": args.raw,
    }
    data = base.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return AdvancedParams(**data)


def _read_secret() -> str:
    secret = os.environ.get("KPWGEN_SECRET")
    if secret:
        return secret
    return getpass.getpass("Master key: ")


# ── commands ───────────────────────────────────────────────────────────────


def _cmd_generate(args: argparse.Namespace, store: PersistedSettingsStore) -> int:
    params = _merge_params(_saved_params(store), args)
    orchestrator = GenerationOrchestrator()

    results = orchestrator.submit(
        " ".join(args.platforms), " ".join(args.account), _read_secret(), params,
    )

    width = max(len(r.platform) for r in results)
    for r in results:
        account = f" ({r.account})" if r.account else ""
        print(f"  {r.platform:<{width}}{account}  {r.password}")
        if args.strength:
            report = score_strength(r.password)
            bar = "#" * report["score"] + "-" * (5 - report["score"])
            print(f"    Strength: [{bar}] {report['label']} ({report['entropy']} bits)")

    if args.copy:
        if copy_text("\n".join(r.password for r in results)):
            print("  Copied to clipboard")
        else:
            print("  Could not copy to clipboard", file=sys.stderr)

    if args.export:
        export = render_export(orchestrator.history.all(), args.export)
        args.out.mkdir(parents=True, exist_ok=True)
        path = args.out / export.filename
        path.write_text(export.content, encoding="utf-8")
        print(f"  Exported {len(results)} entr{'y' if len(results) == 1 else 'ies'} to {path}")

    return 0


def _cmd_settings(
    args: argparse.Namespace,
    store: PersistedSettingsStore,
    parser: argparse.ArgumentParser,
) -> int:
    if args.action == "save":
        try:
            params = _merge_params(_saved_params(store, quiet=True), args)
        except PydanticValidationError as exc:
            print(f"Error: invalid parameters ({exc.error_count()} problem(s))", file=sys.stderr)
            return 1
        record = store.save(params, config.ttl_for(args.ttl))
        print(f"  Saved ({config.TTL_LABELS[args.ttl]})")
        _print_params(record.data)
        return 0

    if args.action == "show":
        result = store.read()
        if result.status == "ok":
            record = result.record
            _print_params(record.data)
            saved = datetime.fromtimestamp(record.saved_at / 1000)
            print(f"  Saved      : {saved:%Y-%m-%d %H:%M}")
            if record.expires_at is None:
                print("  Expires    : never")
            else:
                expires = datetime.fromtimestamp(record.expires_at / 1000)
                print(f"  Expires    : {expires:%Y-%m-%d %H:%M}")
        elif result.status == "expired":
            expired = datetime.fromtimestamp(result.expired_at / 1000)
            print(f"  Saved settings expired at {expired:%Y-%m-%d %H:%M} and were removed")
        elif result.status == "corrupt":
            print("  Saved settings were unreadable and have been removed")
        else:
            print("  No saved settings")
        return 0

    if args.action == "clear":
        store.clear()
        print("  Saved settings cleared")
        return 0

    parser.print_help()
    return 0


def _print_params(params: AdvancedParams) -> None:
    print(f"  Version    : {params.version}")
    print(f"  Length     : {params.length}")
    print(f"  Prefix     : {params.prefix}")
    print(f"  Suffix     : {params.suffix}")
    print(f"  Raw mode   : {'on' if params.raw_mode else 'off'}")


if __name__ == "__main__":
    sys.exit(main())
