#!/usr/bin/env python3
"""Sample CSV generator for import testing.

Writes a parts or equipment CSV in the import column layout with synthetic,
reproducible rows. Parts files deliberately contain some duplicate part
numbers, category aliases and unknown values so a run exercises merging,
vocabulary fallback and warnings:

- Row 1: header row (same columns as the import template)
- Row 2+: data rows
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

from farmguard.csvio.schema import EQUIPMENT_HEADERS, PARTS_HEADERS

MACHINES = ["8R Tractor", "S780 Combine", "F-350 Truck", "R4045 Sprayer", "1775NT Planter", "Skid Steer"]
MACHINE_TYPES = ["tractor", "combine", "truck", "sprayer", "planter", "loader"]
CATEGORIES = ["filter", "Filters", "oil", "Lubricants", "fluid", "belts", "electrical", "hardware", "Widgets"]
SUPPLIERS = ["John Deere", "NAPA", "Case IH", ""]


def generate_parts(rows: int, duplicate_ratio: float = 0.1, seed: int = 42) -> pd.DataFrame:
    """Synthetic parts rows; roughly ``duplicate_ratio`` of rows reuse an earlier part number."""
    rng = np.random.default_rng(seed)
    unique = max(1, int(rows * (1 - duplicate_ratio)))
    numbers = [f"RE{100000 + i}" for i in range(unique)]
    picks = np.concatenate([np.arange(unique), rng.integers(0, unique, rows - unique)])[:rows]

    equipment = [
        ", ".join(rng.choice(MACHINES, size=int(rng.integers(0, 3)), replace=False).tolist())
        for _ in range(rows)
    ]
    return pd.DataFrame(
        {
            "Part Name": [f"Part {numbers[p]}" for p in picks],
            "Part Number": [numbers[p] for p in picks],
            "Category": rng.choice(CATEGORIES, rows),
            "Supplier": rng.choice(SUPPLIERS, rows),
            "Supplier Part Number": ["" for _ in range(rows)],
            "Quantity": rng.integers(0, 25, rows),
            "Low Stock Threshold": rng.integers(1, 5, rows),
            "Equipment": equipment,
            "Notes": ["" for _ in range(rows)],
        },
        columns=list(PARTS_HEADERS),
    )


def generate_equipment(rows: int, seed: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    types = rng.integers(0, len(MACHINE_TYPES), rows)
    purchase = pd.to_datetime("2015-01-01") + pd.to_timedelta(rng.integers(0, 3650, rows), unit="D")
    return pd.DataFrame(
        {
            "Name": [f"{MACHINES[t]} #{i + 1}" for i, t in enumerate(types)],
            "Type": [MACHINE_TYPES[t] for t in types],
            "Make": rng.choice(["John Deere", "Case IH", "Ford", "Kubota"], rows),
            "Model": [f"M{int(m)}" for m in rng.integers(100, 999, rows)],
            "Year": purchase.year,
            "Serial Number": [f"SN{int(s):08d}" for s in rng.integers(0, 10**8, rows)],
            "Purchase Date": purchase.strftime("%Y-%m-%d"),
            "Current Hours": np.round(rng.uniform(0, 6000, rows), 1),
            "Warranty Expiry": "",
            "Notes": "",
        },
        columns=list(EQUIPMENT_HEADERS),
    )


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate sample parts / equipment CSV files for import testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s parts imports/parts.csv --rows 5000
  %(prog)s equipment imports/equipment.csv --rows 50 --seed 7
        """,
    )
    parser.add_argument("kind", choices=("parts", "equipment"))
    parser.add_argument("output", type=Path, help="Output CSV file path")
    parser.add_argument("--rows", type=int, default=1_000, help="Number of data rows (default: 1,000)")
    parser.add_argument(
        "--duplicates", type=float, default=0.1, help="Share of duplicate part numbers (parts only)"
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.duplicates < 1:
        print("Error: --duplicates must be in [0, 1)", file=sys.stderr)
        return 1

    if args.kind == "parts":
        df = generate_parts(args.rows, args.duplicates, args.seed)
    else:
        df = generate_equipment(args.rows, args.seed)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.output, index=False)
    print(f"Created {args.kind} CSV: {args.output}")
    print(f"  Rows: {len(df):,} (+ 1 header row)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
