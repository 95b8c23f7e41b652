# Copyright (c) 2026 Signer — MIT License

"""Audit how well the entropy seed construction spreads small input changes.

Usage: python tools/avalanche.py [trials]
"""
import os
import sys

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_DIR = os.path.dirname(SCRIPT_DIR)
sys.path.insert(0, PROJECT_DIR)

from iba.audit import verify_avalanche

trials = int(sys.argv[1]) if len(sys.argv) > 1 else 256

print("=" * 70)
print("ENTROPY SEED AVALANCHE AUDIT")
print("=" * 70)

result = verify_avalanche(trials=trials)
print(result["summary"])

sys.exit(0 if result["pass"] else 1)
