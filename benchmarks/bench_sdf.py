#!/usr/bin/env python3
"""
Benchmark script comparing SD file reading speed between RDKit and molfilepy.

Usage:
    python benchmarks/bench_sdf.py [--records N] [FILE]

Without FILE a synthetic SD file of N records (default 2000) is generated.
"""

import argparse
import os
import sys
import tempfile
import time
from dataclasses import dataclass
from typing import Optional

# Ensure local molfilepy is used (not installed version)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

DEFAULT_RECORDS = 2000

# Ibuprofen heavy atoms: (symbol, x, y)
TEMPLATE_ATOMS = [
    ("C", 0.0000, 0.0000), ("C", 1.2990, 0.7500), ("C", 2.5981, 0.0000),
    ("C", 3.8971, 0.7500), ("C", 5.1962, 0.0000), ("C", 5.1962, -1.5000),
    ("C", 6.4952, -2.2500), ("C", 7.7942, -1.5000), ("C", 7.7942, 0.0000),
    ("C", 6.4952, 0.7500), ("C", 9.0933, -2.2500), ("C", 9.0933, -3.7500),
    ("C", 10.3923, -1.5000), ("O", 10.3923, 0.0000), ("O", 11.6913, -2.2500),
]
TEMPLATE_BONDS = [
    (1, 2, 1), (2, 3, 1), (2, 4, 1), (4, 5, 1), (5, 6, 4), (6, 7, 4),
    (7, 8, 4), (8, 9, 4), (9, 10, 4), (10, 5, 4), (8, 11, 1), (11, 12, 1),
    (11, 13, 1), (13, 14, 2), (13, 15, 1),
]


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""
    time_seconds: float
    num_records: int
    num_atoms: int

    @property
    def records_per_second(self) -> float:
        return self.num_records / self.time_seconds

    @property
    def time_per_atom_us(self) -> float:
        """Microseconds per atom read."""
        return self.time_seconds / self.num_atoms * 1_000_000


def write_synthetic_sdf(path: str, records: int) -> None:
    """Write an SD file of repeated records with data fields."""
    lines = []
    for i in range(records):
        lines.append(f"record-{i}")
        lines.append("  bench_sdf")
        lines.append("")
        lines.append(f"{len(TEMPLATE_ATOMS):3d}{len(TEMPLATE_BONDS):3d}  0  0  0  0  0  0  0  0999 V2000")
        for symbol, x, y in TEMPLATE_ATOMS:
            lines.append(f"{x:10.4f}{y:10.4f}{0.0:10.4f} {symbol:<3} 0  0  0  0  0  0  0  0  0  0  0  0")
        for a1, a2, bond_type in TEMPLATE_BONDS:
            lines.append(f"{a1:3d}{a2:3d}{bond_type:3d}  0  0  0  0")
        lines.append("M  END")
        lines.append("> <ID>")
        lines.append(str(i))
        lines.append("")
        lines.append("$$$$")
    with open(path, "w") as f:
        f.write("\n".join(lines) + "\n")


def benchmark_rdkit(path: str) -> BenchmarkResult:
    """Benchmark RDKit SDMolSupplier."""
    from rdkit import Chem

    start = time.perf_counter()
    records = 0
    atoms = 0
    for mol in Chem.SDMolSupplier(path, sanitize=False):
        records += 1
        atoms += mol.GetNumAtoms()
    end = time.perf_counter()
    return BenchmarkResult(end - start, records, atoms)


def benchmark_molfilepy(path: str) -> BenchmarkResult:
    """Benchmark molfilepy read_sdf_file."""
    from molfilepy import read_sdf_file

    start = time.perf_counter()
    records = 0
    atoms = 0
    for mol in read_sdf_file(path):
        records += 1
        atoms += mol.num_atoms
    end = time.perf_counter()
    return BenchmarkResult(end - start, records, atoms)


def report(name: str, result: BenchmarkResult) -> None:
    print(f"  {name}: {result.time_seconds:.3f}s "
          f"({result.records_per_second:.0f} records/s, {result.time_per_atom_us:.2f}us per atom)")


def run_benchmark(path: str) -> None:
    print("=" * 70)
    print("SD File Reading Benchmark: RDKit vs molfilepy")
    print("=" * 70)
    print(f"\nFile: {path}")
    print("-" * 70)

    rdkit_result: Optional[BenchmarkResult] = None
    molfilepy_result: Optional[BenchmarkResult] = None

    print("\nRunning RDKit benchmark...", end=" ", flush=True)
    try:
        rdkit_result = benchmark_rdkit(path)
        print("done")
        report("RDKit", rdkit_result)
    except ImportError:
        print("SKIPPED (rdkit not installed)")

    print("\nRunning molfilepy benchmark...", end=" ", flush=True)
    molfilepy_result = benchmark_molfilepy(path)
    print("done")
    report("molfilepy", molfilepy_result)

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    if rdkit_result and molfilepy_result:
        ratio = molfilepy_result.time_seconds / rdkit_result.time_seconds
        if ratio < 1:
            print(f"molfilepy is {1/ratio:.2f}x FASTER than RDKit")
        else:
            print(f"molfilepy is {ratio:.2f}x SLOWER than RDKit")
    else:
        print("Could not compare (RDKit not available)")


def main():
    parser = argparse.ArgumentParser(description="SD file reading benchmark")
    parser.add_argument("file", nargs="?", help="SD file to read")
    parser.add_argument("--records", type=int, default=DEFAULT_RECORDS,
                        help="records in the synthetic file")
    args = parser.parse_args()

    if args.file:
        run_benchmark(args.file)
        return

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "synthetic.sdf")
        write_synthetic_sdf(path, args.records)
        run_benchmark(path)


if __name__ == "__main__":
    main()
