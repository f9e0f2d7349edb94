from __future__ import annotations
import argparse, logging, random, sys
from typing import Any, Dict

from .catalogs import load_catalog, load_default_catalog
from .config import load_configs, env_overrides, apply_cli_overrides, EngineConfig
from .scoring import calculate_tribe_score
from .state.loaders import load_state, save_state
from .turn_processor import process_turn


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="python -m wasteland_engine.cli",
        description="Wasteland turn engine CLI"
    )
    sub = p.add_subparsers(dest="cmd")

    # run
    rn = sub.add_parser("run", help="Process one or more turns of a saved game state")
    rn.add_argument("state", type=str, help="Input GameState JSON")
    rn.add_argument("-o", "--out", type=str, default=None, help="Where to write the new state (default: stdout)")
    rn.add_argument("--turns", type=int, default=1, help="Number of turns to process")
    rn.add_argument("--seed", type=int, default=None, help="Seed the event RNG for a reproducible run")
    rn.add_argument("--catalog", type=str, default=None, help="Alternative technology/asset catalog YAML")
    rn.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    rn.add_argument("--env-prefix", type=str, default="WASTELAND__", help="Env prefix for overrides")
    rn.add_argument("--log-level", type=str, default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    rn.add_argument("--report", action="store_true", help="Print each tribe's turn report to stderr")

    # summary
    sm = sub.add_parser("summary", help="Print a score table for a saved game state")
    sm.add_argument("state", type=str, help="Input GameState JSON")

    args = p.parse_args(argv)
    if getattr(args, "cmd", None) is None:
        p.print_help()
        sys.exit(2)
    return args


def _engine_config(args: argparse.Namespace) -> EngineConfig:
    cfg: Dict[str, Any] = load_configs(getattr(args, "config", []))
    cfg = apply_cli_overrides(cfg, env_overrides(getattr(args, "env_prefix", "WASTELAND__")))
    return EngineConfig.from_mapping(cfg)


def _run(args: argparse.Namespace) -> int:
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = _engine_config(args)
    catalog = load_catalog(args.catalog) if args.catalog else load_default_catalog()
    rng = random.Random(args.seed)

    state = load_state(args.state)
    for _ in range(max(1, args.turns)):
        state = process_turn(state, catalog=catalog, config=config, rng=rng)
        if args.report:
            for tribe in state.tribes.values():
                print(f"== Turn {state.turn - 1} :: {tribe.display_name}", file=sys.stderr)
                for entry in tribe.last_turn_results:
                    print(f"  [{entry.type_label}] {entry.result}", file=sys.stderr)

    if args.out:
        save_state(state, args.out)
    else:
        print(state.to_json())
    return 0


def _summary(args: argparse.Namespace) -> int:
    state = load_state(args.state)
    print(f"Turn {state.turn}")
    rows = sorted(state.tribes.values(), key=calculate_tribe_score, reverse=True)
    for i, tribe in enumerate(rows, 1):
        print(
            f"{i}. {tribe.display_name:<24} score={calculate_tribe_score(tribe):>5}  "
            f"troops={tribe.total_troops():>4}  garrisons={len(tribe.garrisons):>2}  "
            f"techs={len(tribe.completed_techs):>2}"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.cmd == "run":
        return _run(args)
    if args.cmd == "summary":
        return _summary(args)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
