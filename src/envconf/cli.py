"""Minimal ``envconf`` command line utility."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import TYPE_CHECKING

from envconf.duration import is_unlimited
from envconf.environment_conf import CONF_FILE_NAME, load_from, validate
from envconf.errors import EnvConfError
from envconf.settings import audit_lines, resolve_settings, summarize_origins

if TYPE_CHECKING:
    from collections.abc import Sequence

    from envconf.environment_conf import EnvironmentSettings


def _effective_values(conf: EnvironmentSettings) -> dict[str, object]:
    timeout = conf.environment_timeout()
    return {
        "manifest": conf.manifest(),
        "modulepath": conf.modulepath(),
        "config_version": conf.config_version(),
        "environment_timeout": "unlimited" if is_unlimited(timeout) else timeout,
        "environment_data_provider": conf.environment_data_provider(),
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("envconf")
    parser.add_argument(
        "--config-file",
        help="installation settings file (default: $ENVCONF_CONFIG_FILE)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="cmd", required=True)

    show = sub.add_parser("show", help="print the effective settings of an environment")
    show.add_argument("env_dir")
    show.add_argument("--json", action="store_true", dest="as_json")

    check = sub.add_parser("validate", help=f"check an environment's {CONF_FILE_NAME}")
    check.add_argument("env_dir")

    sub.add_parser("settings", help="print installation settings and their origins")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        registry, sources = resolve_settings(config_file=args.config_file, explain=True)

        if args.cmd == "show":
            conf = load_from(args.env_dir, registry.basemodulepath, registry)
            values = _effective_values(conf)
            if args.as_json:
                sys.stdout.write(json.dumps(values, indent=2) + "\n")
            else:
                for key, value in values.items():
                    sys.stdout.write(f"{key} = {'' if value is None else value}\n")
        elif args.cmd == "validate":
            conf_file = os.path.join(os.path.abspath(args.env_dir), CONF_FILE_NAME)
            try:
                document = registry.parse_file(conf_file)
            except FileNotFoundError:
                sys.stdout.write(f"{conf_file}: not present, defaults apply\n")
                return 0
            result = validate(conf_file, document)
            for message in result.warnings:
                sys.stdout.write(message + "\n")
            if not result.valid:
                return 1
            sys.stdout.write(f"{conf_file}: ok\n")
        elif args.cmd == "settings":
            for line in audit_lines(registry, sources):
                sys.stdout.write(line + "\n")
            counts = summarize_origins(sources)
            summary = ", ".join(f"{k}={v}" for k, v in sorted(counts.items()))
            sys.stdout.write(f"origins: {summary}\n")
    except EnvConfError as e:
        sys.stderr.write(f"error: {e}\n")
        if e.hint:
            sys.stderr.write(f"hint: {e.hint}\n")
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
