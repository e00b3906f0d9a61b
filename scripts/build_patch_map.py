"""Build the Ruby source patch map for a target and optionally apply it.

Prints the patch map report as JSON.  Exit code 2 for an invalid Ruby
version, 1 when patching the source tree failed.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from app.config import settings
from patch_map.core.errors import ConfigurationError, PatchApplyError
from patch_map.runner import run_patch_map


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Build (and optionally apply) the static-build patch map for a Ruby source tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show what would be patched for an Alpine target
  python scripts/build_patch_map.py --ostype x86_64-linux-musl --ruby-version 3.2.4

  # Patch an extracted source tree and keep the JSON outputs
  python scripts/build_patch_map.py --ostype msys --ruby-version 3.1.6 \\
      --source-root ruby-3.1.6 --output-dir out/
""",
    )
    parser.add_argument("--ostype", required=True, help="Target OS identifier (e.g. linux-gnu, linux-musl, msys)")
    parser.add_argument("--ruby-version", required=True, help="Ruby version being packaged (e.g. 3.2.4)")
    parser.add_argument(
        "--deps-lib-dir",
        default=settings.DEPS_LIB_DIR,
        help=f"Dependency library directory (default: {settings.DEPS_LIB_DIR})",
    )
    parser.add_argument("--source-root", type=Path, help="Ruby source tree to patch in place")
    parser.add_argument("--output-dir", type=Path, help="Write patch_map.json and patch_map_report.json here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    try:
        report, _ = run_patch_map(
            ostype=args.ostype,
            deps_lib_dir=args.deps_lib_dir,
            runtime_version=args.ruby_version,
            source_root=args.source_root,
            output_dir=args.output_dir,
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except PatchApplyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(report.model_dump(mode="json"), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
