from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .config import CONFIG_FILE_NAME, load_config
from .engine import Engine
from .errors import MustacheError
from .version import tool_version

_yaml = YAML(typ="safe")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stache",
        description="Mustache template renderer",
        add_help=True,
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("template", help="path to the template file")
        sp.add_argument(
            "--config",
            metavar="FILE",
            help=f"engine config (YAML); defaults to ./{CONFIG_FILE_NAME} if present",
        )

    sp_render = sub.add_parser("render", help="render a template to stdout")
    add_common(sp_render)
    sp_render.add_argument(
        "--data",
        metavar="FILE|-",
        help="values as YAML or JSON, from a file or - for stdin",
    )

    sp_parse = sub.add_parser("parse", help="parse a template and print the reconstituted source")
    add_common(sp_parse)

    sp_pragmas = sub.add_parser("pragmas", help="list the template's pragmas (JSON)")
    add_common(sp_pragmas)

    return p


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )


def _config_path(ns: argparse.Namespace) -> Optional[Path]:
    if ns.config:
        return Path(ns.config)
    default = Path.cwd() / CONFIG_FILE_NAME
    return default if default.is_file() else None


def _load_data(data_arg: Optional[str]) -> Dict[str, Any]:
    """
    Loads render values for --data.

    Supports a file path or - for stdin; JSON is read as the YAML subset it is.
    """
    if not data_arg:
        return {}
    if data_arg == "-":
        text = sys.stdin.read()
    else:
        file_path = Path(data_arg)
        if not file_path.is_file():
            raise ValueError(f"Data file not found: {file_path}")
        text = file_path.read_text(encoding="utf-8")
    try:
        data = _yaml.load(text)
    except YAMLError as e:
        raise ValueError(f"Failed to parse data: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Data must be a mapping at the top level")
    return data


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        engine = Engine(load_config(_config_path(ns)))
        template_path = Path(ns.template).as_posix()

        if ns.cmd == "render":
            values = _load_data(ns.data)
            sys.stdout.write(engine.render_file(template_path, values))
            return 0

        if ns.cmd == "parse":
            sys.stdout.write(engine.load(template_path).reconstitute())
            return 0

        if ns.cmd == "pragmas":
            template = engine.load(template_path)
            sys.stdout.write(json.dumps({"pragmas": template.collected_pragmas()}, ensure_ascii=False, indent=2) + "\n")
            return 0

    except MustacheError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
