#!/usr/bin/env python3

import argparse
import os
import shutil
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent

# exported by rally-test simulate --output and validate --export
SESSION_EXPORT_GLOBS = ["rsg_*.json", "*_report.json", "*_report.txt"]
LOG_DIR_ENV = "RALLYPAIRING_LOG_DIR"


def ensure_safe_root(root: Path) -> None:
    """Refuse to run outside the Rally Pairing checkout."""
    package_dir = root / "src" / "rallypairing"
    if not (root / "pyproject.toml").exists() or not package_dir.is_dir():
        print("Error: clean.py must be run from the rallypairing project root.")
        sys.exit(1)


def remove_path(path: Path, dry_run: bool) -> None:
    if not path.exists():
        return
    if dry_run:
        print(f"Would remove: {path}")
        return
    try:
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()
        print(f"Removed: {path}")
    except OSError as e:
        print(f"Failed to remove {path}: {e}")


def collect_targets(root: Path, include_exports: bool, include_logs: bool):
    targets = [root / "build", root / "dist", root / ".pytest_cache"]
    targets.extend(root.glob("*.egg-info"))
    targets.extend((root / "src").glob("*.egg-info"))
    targets.extend(root.rglob("__pycache__"))
    if include_exports:
        for pattern in SESSION_EXPORT_GLOBS:
            targets.extend(root.glob(pattern))
    if include_logs:
        log_dir = os.environ.get(LOG_DIR_ENV)
        if log_dir:
            targets.extend(Path(log_dir).glob("rally-pairing.log*"))
    return targets


def main() -> None:
    parser = argparse.ArgumentParser(description="Remove build and test leftovers")
    parser.add_argument("--dry-run", action="store_true", help="Only list paths")
    parser.add_argument(
        "--exports", action="store_true", help="Also remove exported sessions"
    )
    parser.add_argument(
        "--logs", action="store_true", help=f"Also remove logs in ${LOG_DIR_ENV}"
    )
    args = parser.parse_args()

    ensure_safe_root(PROJECT_ROOT)
    print(f"Cleaning project at: {PROJECT_ROOT}")
    print("-" * 40)
    for path in collect_targets(PROJECT_ROOT, args.exports, args.logs):
        remove_path(path, args.dry_run)
    print("-" * 40)
    print("Clean complete.")


if __name__ == "__main__":
    main()
