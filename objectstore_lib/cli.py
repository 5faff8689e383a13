"""Command-line access to a JSON object store.

Usage: objectstore [--config FILE | --data-dir DIR [--tmp-dir DIR]] COMMAND ...

Commands operate on collections encoded with the plain JSON codec:

    ls COLLECTION [NS ...]          list object ids (or --namespaces)
    cat COLLECTION ID [NS ...]      print an object
    put COLLECTION ID [NS ...]      write an object read from stdin
    rm COLLECTION ID [NS ...]       delete an object
    gc [COLLECTION]                 remove stale staging files
"""
from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Iterable, Optional

from .codec import json_codec
from .collection import Collection
from .config import StoreConfig, load_config
from .engine import ObjectStore
from .errors import CorruptJson, InvalidKey, ObjectNotFound, StorageError
from .logging_config import configure_logging

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2
EXIT_CORRUPT = 3


def get_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="objectstore", description="Inspect and edit a JSON object store")
    p.add_argument("--config", type=Path, help="YAML config with data_directory/temporary_directory")
    p.add_argument("--data-dir", type=Path, help="Data directory (overrides --config)")
    p.add_argument("--tmp-dir", type=Path, help="Temporary directory (default: <data-dir>/.tmp)")
    p.add_argument("--log-level", help="Logging level, e.g. DEBUG")
    sub = p.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("ls", help="List object ids in a namespace")
    ls.add_argument("collection")
    ls.add_argument("namespace", nargs="*")
    ls.add_argument("--namespaces", action="store_true", help="List sub-namespaces instead of objects")

    for name, help_text in (("cat", "Print an object"), ("put", "Write an object from stdin"), ("rm", "Delete an object")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("collection")
        cmd.add_argument("id")
        cmd.add_argument("namespace", nargs="*")

    gc = sub.add_parser("gc", help="Remove staging files left by interrupted writes")
    gc.add_argument("collection", nargs="?")
    return p


def build_config(args: argparse.Namespace) -> StoreConfig:
    if args.data_dir is not None:
        mapping = {"data_directory": args.data_dir}
        if args.tmp_dir is not None:
            mapping["temporary_directory"] = args.tmp_dir
        return StoreConfig.from_mapping(mapping)
    if args.config is not None:
        return load_config(args.config)
    raise ValueError("either --config or --data-dir is required")


def run(args: argparse.Namespace, out=None, inp=None) -> int:
    out = out or sys.stdout
    inp = inp or sys.stdin
    config = build_config(args)
    store = ObjectStore()

    if args.command == "gc":
        coll = Collection(args.collection, json_codec(), config) if args.collection else None
        removed = store.clean_temp_files(config, coll)
        out.write(f"removed {removed}\n")
        return EXIT_OK

    collection = Collection(args.collection, json_codec(indent=2), config)
    if args.command == "ls":
        if args.namespaces:
            names = store.list_namespaces(collection, args.namespace)
        else:
            names = store.list_ids(collection, args.namespace)
        for name in sorted(names):
            out.write(name + "\n")
        return EXIT_OK

    key = collection.key(args.id, args.namespace)
    if args.command == "cat":
        value = store.read(key)
        out.write(json.dumps(value, indent=2) + "\n")
    elif args.command == "put":
        store.write(key, json.loads(inp.read()))
    elif args.command == "rm":
        store.delete(key)
    return EXIT_OK


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = get_parser().parse_args(list(argv) if argv is not None else None)
    configure_logging(args.config, args.log_level)
    try:
        return run(args)
    except ObjectNotFound as e:
        print(f"not found: {e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except CorruptJson as e:
        print(f"corrupt object: {e}", file=sys.stderr)
        return EXIT_CORRUPT
    except InvalidKey as e:
        print(f"invalid key: {e}", file=sys.stderr)
        return EXIT_ERROR
    except StorageError as e:
        print(f"storage error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except (ValueError, OSError) as e:
        # bad or missing config, or unparsable stdin document
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
