#!/usr/bin/env python3
import argparse
import json
import pathlib
import sys

from irs.knowledge import knowledge_base_to_dict, load_knowledge_base


def fail(msg: str) -> None:
    print(f"Error: {msg}", file=sys.stderr)
    raise SystemExit(2)


def write_json(out: pathlib.Path, doc: dict) -> None:
    tmp = out.with_name(f".{out.name}.tmp")
    try:
        tmp.write_text(json.dumps(doc, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        tmp.replace(out)
    except OSError as exc:
        fail(f"failed to write {out}: {exc}")


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="01_export_knowledge_base.py",
        description="Write the built-in knowledge base as JSON (loadable via IRS_KNOWLEDGE_BASE).",
    )
    parser.add_argument("out")
    args = parser.parse_args()

    out = pathlib.Path(args.out)
    if not out.parent.is_dir():
        fail(f"directory not found: {out.parent}")

    write_json(out, knowledge_base_to_dict(load_knowledge_base()))
    print(f"Wrote: {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
