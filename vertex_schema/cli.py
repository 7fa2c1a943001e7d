import argparse
import importlib
import json
import sys

import yaml

from .to_pydantic import vertex_schema_to_type_adapter
from .to_vertex import to_vertex_schema
from .utils import configure_logging, get_logger, load_document

logger = get_logger(__name__)


def _import_target(spec: str):
    module_name, sep, attr = spec.partition(":")
    if not sep or not attr:
        raise ValueError(f"Expected MODULE:ATTR, got {spec!r}")
    module = importlib.import_module(module_name)
    target = module
    for part in attr.split("."):
        target = getattr(target, part)
    return target


def cmd_export(args) -> int:
    schema = to_vertex_schema(_import_target(args.target))
    text = json.dumps(schema.to_dict(), ensure_ascii=False, indent=args.indent)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        logger.info("Wrote Vertex schema for %s to %s", args.target, args.output)
    else:
        print(text)
    return 0


def cmd_validate(args) -> int:
    adapter = vertex_schema_to_type_adapter(load_document(args.schema))
    if args.data is None:
        print("[OK] Schema valid:", args.schema)
        return 0
    adapter.validate_python(load_document(args.data))
    print("[OK] Data valid:", args.data)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vertex-schema", description="Convert between pydantic and Vertex AI schemas")
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Print the Vertex schema of a pydantic model or annotation")
    export.add_argument("target", help="Import path as MODULE:ATTR")
    export.add_argument("--indent", type=int, default=2, help="JSON indentation")
    export.add_argument("--output", help="Write to this file instead of stdout")
    export.set_defaults(func=cmd_export)

    validate = sub.add_parser("validate", help="Check a Vertex schema file and optionally validate data against it")
    validate.add_argument("schema", help="Path to a YAML or JSON Vertex schema")
    validate.add_argument("--data", help="Path to a YAML or JSON document to validate")
    validate.set_defaults(func=cmd_validate)
    return parser


def main(argv=None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (ValueError, yaml.YAMLError, ImportError, AttributeError, OSError) as e:
        print("[ERROR]", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
