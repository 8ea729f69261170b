"""
Command-line access to Feast serving.

    feast-serving info
    feast-serving get -f driver:rating -f driver:name -e driver_id=1001 -e driver_id=1002

Connection settings come from FEAST_SERVING_* environment variables and can be
overridden with --host/--port/--project.
"""

import argparse
import json
import logging
import math
import sys
from typing import Any, Dict, List, Optional

from google.protobuf.json_format import MessageToDict

from feast_serving.client import FeastClient
from feast_serving.config import get_settings
from feast_serving.errors import FeastClientError
from feast_serving.features import Row

logger = logging.getLogger(__name__)


def _parse_scalar(text: str) -> Any:
    """Number only when it prints back as ``text``, so "007" or "nan" stay strings."""
    try:
        number = int(text)
        if str(number) == text:
            return number
    except ValueError:
        pass
    try:
        number = float(text)
        if math.isfinite(number) and repr(number) == text:
            return number
    except ValueError:
        pass
    return text


def parse_entity_rows(entities: List[str]) -> List[Row]:
    """
    Build one Row per ``-e`` argument.

    Each argument is ``key=value[,key=value...]``; values that read back
    unchanged as an int or float are sent as numbers, anything else
    (leading zeros, "nan", "1e3") as a string.
    """
    rows = []
    for entity in entities:
        row = Row.create()
        for pair in entity.split(","):
            key, sep, value = pair.partition("=")
            if not sep or not key:
                raise argparse.ArgumentTypeError(f"Entity must be key=value, got '{pair}'")
            row.set(key.strip(), _parse_scalar(value.strip()))
        rows.append(row)
    return rows


def _row_to_json(row: Row) -> Dict[str, Any]:
    return {
        "fields": row.to_dict(),
        "statuses": {name: status.name for name, status in row.get_statuses().items()},
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="feast-serving", description="Query a Feast serving endpoint")
    parser.add_argument("--host", help="Serving host (default: FEAST_SERVING_HOST)")
    parser.add_argument("--port", type=int, help="Serving port (default: FEAST_SERVING_PORT)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("info", help="Show serving version and type")

    get_parser = subparsers.add_parser("get", help="Get online features")
    get_parser.add_argument("--feature", "-f", action="append", required=True,
                            help="Feature reference, feature_table:feature (repeatable)")
    get_parser.add_argument("--entity", "-e", action="append", required=True,
                            help="Entity row as key=value[,key=value] (repeatable)")
    get_parser.add_argument("--project", "-p", help="Project override")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = get_settings()
    overrides = {k: v for k, v in (("host", args.host), ("port", args.port)) if v is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        with FeastClient.from_settings(settings) as client:
            if args.command == "info":
                info = client.get_feast_serving_info()
                print(json.dumps(MessageToDict(info, preserving_proto_field_name=True), indent=2))
            else:
                rows = client.get_online_features(
                    args.feature,
                    parse_entity_rows(args.entity),
                    project=args.project,
                )
                print(json.dumps([_row_to_json(row) for row in rows], indent=2, default=repr))
    except (FeastClientError, argparse.ArgumentTypeError) as e:
        logger.error(f"{e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
