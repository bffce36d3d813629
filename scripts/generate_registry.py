#!/usr/bin/env python3
"""
Generate skills/registry.json from a skills directory.

The remote registry serves this file from
<base_url>/<owner>/<repo>/<ref>/skills/registry.json; run this script before
pushing changes to the skills/ tree of the registry repository.

Usage:
    python scripts/generate_registry.py --skills-dir skills --output skills/registry.json
    python scripts/generate_registry.py --skills-dir src/vibe_skills/builtin_skills --check
"""

import argparse
import json
import sys
from pathlib import Path

from vibe_skills.registry import EmbeddedRegistry


def main():
    parser = argparse.ArgumentParser(description="Generate registry.json for vibe-skills")
    parser.add_argument("--skills-dir", required=True, help="Directory laid out as <stack>/<name>/SKILL.md")
    parser.add_argument("--output", help="Output JSON file path (default: <skills-dir>/registry.json)")
    parser.add_argument("--version", default="1", help="Index version string")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if the output file is missing or out of date",
    )
    args = parser.parse_args()

    skills_dir = Path(args.skills_dir)
    if not skills_dir.is_dir():
        print(f"Skills directory not found: {skills_dir}", file=sys.stderr)
        sys.exit(1)

    output = Path(args.output) if args.output else skills_dir / "registry.json"
    index = EmbeddedRegistry(skills_dir).to_index(args.version)
    text = json.dumps(index.to_dict(), ensure_ascii=False, indent=2) + "\n"

    if args.check:
        current = output.read_text(encoding="utf-8") if output.exists() else ""
        if current != text:
            print(f"{output} is out of date", file=sys.stderr)
            sys.exit(1)
        print(f"{output} is up to date ({len(index.skills)} skills)")
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    print(f"Wrote {output} ({len(index.skills)} skills)")


if __name__ == "__main__":
    main()
