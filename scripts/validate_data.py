"""Validate the packaged master data.

Checks:
  * every catalog loads (schema, ranges, duplicate ids)
  * every learnset entry points at a known move
  * every species can field at least one move at level 1

Exit code 0 on success, 1 if violations found.
"""
from __future__ import annotations
import sys
from pathlib import Path
from typing import List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ghostgame.core.errors import DataLoadError
from ghostgame.data import all_items, all_moves, all_species


def collect_violations() -> List[str]:
    violations: List[str] = []
    try:
        moves = all_moves()
        species = all_species()
        items = all_items()
    except DataLoadError as e:
        return [str(e)]
    for sp in species.values():
        for lm in sp.learnable_moves:
            if lm.move_id not in moves:
                violations.append(f"Species '{sp.id}' learns unknown move '{lm.move_id}' at Lv{lm.level}")
        if not any(lm.level <= 1 and lm.move_id in moves for lm in sp.learnable_moves):
            violations.append(f"Species '{sp.id}' has no move at Lv1")
    print(f"Scanned {len(moves)} moves, {len(species)} species, {len(items)} items.")
    return violations


def main() -> int:
    violations = collect_violations()
    if violations:
        print("Data validation FAILED:\n")
        for v in violations:
            print(" -", v)
        return 1
    print("Data validation passed.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
