#!/usr/bin/env python
"""
Build pipeline - loads the service catalog and runs the test suite.

Usage:
    python scripts/build_all.py
"""
import subprocess
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from tier_pricing.config.settings import get_settings
from tier_pricing.data.load_catalog import load_services, write_report


def main():
    print("=" * 60)
    print("TIER PRICING BUILD PIPELINE")
    print("=" * 60)
    print()

    settings = get_settings()

    print("[1/2] Loading service catalog...")
    services, report = load_services(settings, verbose=True)
    write_report(report, settings.load_report)

    if report["status"] != "success":
        print("\n❌ LOAD FAILED")
        for error in report["errors"]:
            print(f"  ERROR: {error}")
        sys.exit(1)

    print()
    print("[2/2] Running tests...")

    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests', '-v', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )

    if test_result.returncode != 0:
        print("\n❌ TESTS FAILED")
        sys.exit(1)

    print()
    print("=" * 60)
    print("✅ BUILD COMPLETE")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Profiles: {report['metrics']['profiles']}")
    print(f"  Services: {report['metrics']['services']}")
    print(f"  Tiers: {report['metrics']['tiers']}")
    print(f"  Services without tiers: {report['metrics']['services_without_tiers']}")
    print(f"  Warnings: {len(report['warnings'])}")


if __name__ == "__main__":
    main()
