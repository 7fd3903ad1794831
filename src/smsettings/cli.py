from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .engine import SettingsEngine
from .keys import nest_form
from .nonce import SETTINGS_ACTION, NonceManager
from .paths import default_store_path, nonce_secret, user_config_dir, user_data_dir
from .render import Renderer
from .schema import load_schema
from .store import FileOptionStore


def _engine(args: argparse.Namespace) -> SettingsEngine:
    path = Path(args.store) if args.store else default_store_path()
    return SettingsEngine(FileOptionStore(path))


def _parse_pairs(pairs: list[str]) -> list[tuple[str, str]]:
    out: list[tuple[str, str]] = []
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"expected FIELD=VALUE, got {pair!r}")
        out.append((name, value))
    return out


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def show_paths(args: argparse.Namespace) -> int:
    data = {
        "user_config": user_config_dir(),
        "user_data": user_data_dir(),
        "store": default_store_path(),
    }
    if args.as_json:
        print(json.dumps({k: str(v) for k, v in data.items()}))
    else:
        for k, v in data.items():
            print(f"{k}: {v}")
    return 0


def get_cmd(args: argparse.Namespace) -> int:
    value = _engine(args).get_option(args.id, args.default)
    if value is None:
        return 1
    print(value if isinstance(value, str) else json.dumps(value))
    return 0


def save_cmd(args: argparse.Namespace) -> int:
    try:
        payload = nest_form(_parse_pairs(args.pairs))
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    status = _engine(args).save_fields(load_schema(args.schema), payload)
    print(status)
    return 0


def render_cmd(args: argparse.Namespace) -> int:
    print(Renderer(_engine(args)).output_fields(load_schema(args.schema)))
    return 0


def nonce_cmd(args: argparse.Namespace) -> int:
    secret = nonce_secret()
    if secret is None:
        print("SMSETTINGS_NONCE_SECRET is not set", file=sys.stderr)
        return 2
    print(NonceManager(secret).create(args.action))
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="smsettings", description="Sermon Manager settings store.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="cmd")

    p_paths = subparsers.add_parser("paths", help="Show resolved locations.")
    p_paths.add_argument("--json", dest="as_json", action="store_true")
    p_paths.set_defaults(func=show_paths)

    p_get = subparsers.add_parser("get", help="Print the stored value for ID.")
    p_get.add_argument("id")
    p_get.add_argument("--default")
    p_get.add_argument("--store", help="Option file (.json, .yaml)")
    p_get.set_defaults(func=get_cmd)

    p_save = subparsers.add_parser("save", help="Save FIELD=VALUE pairs using SCHEMA.")
    p_save.add_argument("schema", type=Path)
    p_save.add_argument("pairs", nargs="*", metavar="FIELD=VALUE")
    p_save.add_argument("--store", help="Option file (.json, .yaml)")
    p_save.set_defaults(func=save_cmd)

    p_render = subparsers.add_parser("render", help="Render the form rows of SCHEMA.")
    p_render.add_argument("schema", type=Path)
    p_render.add_argument("--store", help="Option file (.json, .yaml)")
    p_render.set_defaults(func=render_cmd)

    p_nonce = subparsers.add_parser("nonce", help="Print a nonce for ACTION.")
    p_nonce.add_argument("action", nargs="?", default=SETTINGS_ACTION)
    p_nonce.set_defaults(func=nonce_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 1
    try:
        return int(func(args))
    except SystemExit as exc:  # pragma: no cover - argparse may raise
        return int(exc.code)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
