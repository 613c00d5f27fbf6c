#!/usr/bin/env python3
"""Lightweight validator for the kernel's JSON settings files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

SETTINGS_DIR = Path(__file__).resolve().parents[1] / "fintrack" / "settings"

REQUIRED_MESSAGES = ("underfunded_general", "underfunded_category", "low_savings", "balanced")
REQUIRED_CONSTANTS = ("essential_positions", "savings_keyword", "savings_threshold_percent")


def validate_recommendations(path: Path) -> List[str]:
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    errors = []
    for key in REQUIRED_CONSTANTS:
        if key not in data.get("constants", {}):
            errors.append(f"constants.{key} missing")
    messages = data.get("messages", {})
    for key in REQUIRED_MESSAGES:
        if key not in messages:
            errors.append(f"messages.{key} missing")
    template = messages.get("underfunded_category", "")
    if "{name}" not in template or "{percent}" not in template:
        errors.append("messages.underfunded_category must use {name} and {percent}")
    return errors


def validate_currencies(path: Path) -> List[str]:
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    errors = []
    codes = set()
    for entry in data.get("currencies", []):
        missing = [key for key in ("code", "symbol", "name") if key not in entry]
        if missing:
            errors.append(f"currency entry {entry!r} missing {', '.join(missing)}")
            continue
        codes.add(entry["code"])
    if data.get("default") not in codes:
        errors.append(f"default currency {data.get('default')!r} not listed")
    return errors


VALIDATORS = {
    "recommendations.json": validate_recommendations,
    "currencies.json": validate_currencies,
}


def main() -> int:
    if not SETTINGS_DIR.exists():
        print(f"Settings directory not found: {SETTINGS_DIR}")
        return 1

    issues = []
    for filename, validator in VALIDATORS.items():
        path = SETTINGS_DIR / filename
        if not path.exists():
            issues.append((filename, "file missing"))
            continue
        for message in validator(path):
            issues.append((filename, message))

    if issues:
        print("Settings validation failed:")
        for filename, message in issues:
            print(f"  - {filename}: {message}")
        return 1

    print("All settings validated successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
