from __future__ import annotations
import argparse, json, sys

from . import Trainer, compile_units, to_hiragana
from . import config as CFG
from .loader import DIFFICULTIES
from .models import Status
from .progress import remaining_display


def _print_units(text: str, as_json: bool) -> None:
    units, display = compile_units(to_hiragana(text))
    if as_json:
        rows = [{"source": u.source, "candidates": list(u.candidates), "offset": u.display_offset}
                for u in units]
        print(json.dumps({"romaji": display, "units": rows}, ensure_ascii=False, indent=2))
        return
    print(f"romaji: {display}")
    print("#   Kana  Offset  Candidates")
    for i, u in enumerate(units, 1):
        print(f"{i:<3} {u.source:<4}  {u.display_offset:<6}  {' / '.join(u.candidates)}")


def _play(trainer: Trainer) -> None:
    print("Type the romaji for each phrase (empty line to stop).")
    session = trainer.next_phrase()
    while session is not None:
        print(f"\n{session.source_phrase.display_text}  ({session.normalized_phonetic})")
        while not session.completed:
            print(f"  > {remaining_display(session)}")
            try:
                line = input("> ")
            except (EOFError, KeyboardInterrupt):
                return
            if not line:
                return
            for r in trainer.type_text(line):
                if r.status is Status.NO_MATCH:
                    print("  miss")
        stats = trainer.current_stats()
        print(f"  done: keys={stats.correct_keys} misses={stats.miss_keys} "
              f"time={stats.elapsed_seconds:.1f}s")
        session = trainer.next_phrase()


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Kana typing engine CLI")
    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument("--compile", metavar="TEXT", help="Show the typing units of a kana reading")
    g.add_argument("--play", action="store_true", help="Practice phrases interactively")

    p.add_argument("--roots", nargs="+", default=[], help="Folders to scan for phrase .txt files")
    p.add_argument("--difficulty", choices=list(DIFFICULTIES) + ["all"], default=None)
    p.add_argument("--category", default=None, help="Only phrases of this category (file name for --roots)")
    p.add_argument("--count", type=int, default=None, help="Number of phrases to play")
    p.add_argument("--shuffle", action="store_true")
    p.add_argument("--policy", choices=["aggregate", "averaged"], default=CFG.THROUGHPUT_POLICY)
    p.add_argument("--json", action="store_true", help="Emit JSON")
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    if args.compile is not None:
        _print_units(args.compile, args.json)
        return 0

    trainer = Trainer(policy=args.policy)
    trainer.load(roots=args.roots or None, difficulty=args.difficulty, category=args.category, count=args.count,
                 shuffle=args.shuffle, verbose=args.verbose)
    try:
        _play(trainer)
    finally:
        summary = trainer.summary()
        if args.json:
            print(json.dumps(summary, ensure_ascii=False, indent=2))
        else:
            print(f"\nphrases={summary['phrases']} kpm={summary['kpm']} rank={summary['rank']} "
                  f"accuracy={summary['accuracy']}% score={summary['score']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
