from __future__ import annotations

"""Fail-fast grep to keep the statistics engine deterministic.

A score statistic must be a pure function of its replay, so the engine package
may not read the host clock or draw random numbers.

Run:
  python -m tools.check_no_os_time

Exit code:
  0 - clean
  1 - forbidden pattern found
"""

import os
import re
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple


FORBIDDEN_PATTERNS = [
    # datetime/date
    r"\bdate\.today\s*\(",
    r"\bdatetime\.now\s*\(",
    r"\bdatetime\.utcnow\s*\(",
    # time
    r"\btime\.time\s*\(",
    r"\btime\.monotonic\s*\(",
    r"\btime\.perf_counter\s*\(",
    # randomness
    r"^\s*import\s+random\b",
    r"^\s*from\s+random\s+import\b",
    r"\bnumpy\.random\b",
    r"\bnp\.random\b",
    r"\buuid\.uuid[14]\s*\(",
]

EXCLUDE_DIRS = {
    ".git",
    "__pycache__",
    ".venv",
    "venv",
    "dist",
    "build",
}

# Packages that must stay deterministic.
CHECKED_PACKAGES = ("replay_stats",)

Hit = Tuple[Path, int, str, str]


def iter_py_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dn = Path(dirpath)
        dirnames[:] = [d for d in dirnames if d not in EXCLUDE_DIRS]
        for fn in filenames:
            if not fn.endswith('.py'):
                continue
            yield dn / fn


def find_hits(root: Path, packages: Sequence[str] = CHECKED_PACKAGES) -> List[Hit]:
    compiled = [re.compile(p) for p in FORBIDDEN_PATTERNS]

    hits: List[Hit] = []
    for pkg in packages:
        for fp in iter_py_files(root / pkg):
            try:
                text = fp.read_text(encoding='utf-8')
            except (OSError, UnicodeDecodeError):
                continue
            for i, line in enumerate(text.splitlines(), start=1):
                for rx in compiled:
                    if rx.search(line):
                        hits.append((fp.relative_to(root), i, line.strip(), rx.pattern))
    return hits


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    root = Path(args[0]).resolve() if args else Path(__file__).resolve().parents[1]

    hits = find_hits(root)
    if not hits:
        print('[OK] No clock or randomness usage found.')
        return 0

    print('[FAIL] Clock or randomness usage found:\n')
    for rel, ln, line, pat in hits:
        print(f'- {rel}:{ln}: {line}')
        print(f'  matched: {pat}')
    print('\nFix: statistics must depend on replay data only.')
    return 1


if __name__ == '__main__':
    raise SystemExit(main())
