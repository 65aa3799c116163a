# fileops.py
# where inputs are found and where every result lands.
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from Bio import SeqIO

from .catalog import DetectionCategory
from .errors import InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".fasta"
RESULT_SUFFIX = ".tsv"
SUMMARY_SUFFIX = "_combined_summary.txt"
MANIFEST_NAME = "list.txt"
REPORT_NAME = "run_report.tsv"


@dataclass(frozen=True)
class Sample:
    """One input assembly, named after its file with the suffix stripped."""

    name: str
    path: Path

    def count_contigs(self) -> int | None:
        """number of FASTA records in the assembly, None if it can't be read"""
        try:
            with open(self.path) as handle:
                return sum(1 for _ in SeqIO.parse(handle, "fasta"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read contigs from %s: %s", self.path, e)
            return None


def validate_input_dir(input_root) -> Path:
    input_root = Path(input_root)
    if not input_root.is_dir():
        raise InvalidInputError(f"Error: Directory '{input_root}' does not exist")
    return input_root


def get_input_files(input_root, suffix=DEFAULT_SUFFIX):
    """every entry directly inside input_root whose name ends with suffix, sorted by name"""
    return sorted(
        (entry for entry in Path(input_root).iterdir() if entry.name.endswith(suffix)),
        key=lambda p: p.name,
    )


def discover(input_root, suffix=DEFAULT_SUFFIX, manifest=None) -> list[Sample]:
    """
    Find the samples to screen.

    Only regular files directly inside input_root whose names end with
    `suffix` become samples; anything else with that suffix is skipped with a
    warning. Each sample name is appended to `manifest` (if given) in
    discovery order.
    """
    input_root = validate_input_dir(input_root)
    samples = []
    for entry in get_input_files(input_root, suffix):
        if not entry.is_file():
            logger.warning("%s is not a %s file. Skipping...", entry, suffix.lstrip("."))
            continue
        name = entry.name[: -len(suffix)] if suffix else entry.name
        if not name:
            logger.warning("%s has no name besides its suffix. Skipping...", entry)
            continue
        sample = Sample(name=name, path=entry)
        if manifest is not None:
            with open(manifest, "a") as handle:
                handle.write(f"{sample.name}\n")
        samples.append(sample)
    logger.info("Discovered %d sample(s) in %s", len(samples), input_root)
    return samples


class OutputLayout:
    """
    Maps (category, database, sample) onto the output tree:

        {root}/{Category}/{database}/{sample}.tsv
        {root}/{Category}/{database}_combined_summary.txt

    Summaries live one level above the per-sample files, so they can never
    collide with a result.
    """

    def __init__(self, root=".") -> None:
        self.root = Path(root)

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_NAME

    @property
    def report_path(self) -> Path:
        return self.root / REPORT_NAME

    def category_dir(self, category: DetectionCategory) -> Path:
        return self.root / DetectionCategory(category).value

    def database_dir(self, category: DetectionCategory, database: str) -> Path:
        return self.category_dir(category) / database

    def path_for(self, category: DetectionCategory, database: str, sample) -> Path:
        name = sample.name if isinstance(sample, Sample) else str(sample)
        return self.database_dir(category, database) / f"{name}{RESULT_SUFFIX}"

    def summary_path_for(self, category: DetectionCategory, database: str) -> Path:
        return self.category_dir(category) / f"{database}{SUMMARY_SUFFIX}"

    def ensure_dir(self, category: DetectionCategory, database: str) -> Path:
        """create the (category, database) folder if absent; safe to call from many threads"""
        outdir = self.database_dir(category, database)
        outdir.mkdir(parents=True, exist_ok=True)
        return outdir

    def results_for(self, category: DetectionCategory, database: str) -> list[Path]:
        """result files already written for this pair, sorted by name"""
        outdir = self.database_dir(category, database)
        if not outdir.is_dir():
            return []
        return sorted(p for p in outdir.glob(f"*{RESULT_SUFFIX}") if p.is_file())
