# IRS (Inhalation Risk Signal) command line entry point
import argparse
import json
import sys

from jsonschema import ValidationError

from irs.config import Settings
from irs.knowledge import KnowledgeBase, load_knowledge_base
from irs.models import EvaluationResult, Modifiers
from irs.pipeline import evaluate, reset
from irs.render import render_json, render_text

PRODUCT_FORMS = ["spray", "liquid", "cream", "powder", "wipe"]
USE_SETTINGS = ["indoor", "outdoor"]
FREQUENCIES = ["daily", "weekly", "occasional"]
RESET_COMMAND = ":reset"


def fail(msg: str) -> None:
    print(f"Error: {msg}", file=sys.stderr)
    raise SystemExit(2)


def emit(result: EvaluationResult, kb: KnowledgeBase, as_json: bool) -> None:
    if as_json:
        print(json.dumps(render_json(result, kb), ensure_ascii=False))
    else:
        print(render_text(result, kb))


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="run_signal.py",
        description="Score the inhalation concern signal of a comma-separated ingredient list.",
    )
    ap.add_argument("--ingredients", default="", help="Comma-separated ingredient list")
    ap.add_argument("--form", choices=PRODUCT_FORMS, default="liquid", help="Product form")
    ap.add_argument("--setting", choices=USE_SETTINGS, default="outdoor", help="Use setting")
    ap.add_argument("--frequency", choices=FREQUENCIES, default="occasional", help="Use frequency")
    ap.add_argument("--ventilated", action="store_true", help="Area is ventilated during use")
    ap.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    ap.add_argument("--reset", action="store_true", help="Print the zero-input state and exit")
    ap.add_argument("--loop", action="store_true",
                    help=f"Evaluate one ingredient list per stdin line ('{RESET_COMMAND}' resets)")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        s = Settings.from_env()
        kb = load_knowledge_base(s.knowledge_base_path or None)
    except RuntimeError as exc:
        fail(str(exc))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        fail(f"failed to read knowledge base: {exc}")
    except ValidationError as exc:
        fail(f"knowledge base does not match schema: {exc.message}")
    except ValueError as exc:
        fail(str(exc))

    as_json = args.json or s.output_format == "json"
    modifiers = Modifiers.from_form(args.form, args.setting, args.frequency, args.ventilated)

    if args.reset:
        emit(reset(kb), kb, as_json)
        return 0

    if args.loop:
        for line in sys.stdin:
            line = line.strip()
            if line == RESET_COMMAND:
                emit(reset(kb), kb, as_json)
            else:
                emit(evaluate(line, modifiers, kb), kb, as_json)
        return 0

    emit(evaluate(args.ingredients, modifiers, kb), kb, as_json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
