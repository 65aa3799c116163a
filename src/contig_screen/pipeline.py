# pipeline.py
# readiness -> discovery -> scanning -> summaries, for a directory of assemblies.
from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import pandas

from .catalog import DEFAULT_CATALOG, Catalog, DetectionCategory, all_databases, catalog_pairs
from .errors import ScannerError
from .fileops import DEFAULT_SUFFIX, OutputLayout, Sample, discover, validate_input_dir

logger = logging.getLogger(__name__)

READY, SETUP, FAILED = "ready", "setup", "failed"
SUMMARIZED, NO_RESULTS = "summarized", "no_results"

REPORT_COLUMNS = ["category", "database", "results", "scan_failures", "status", "summary"]


@dataclass(frozen=True)
class ScanOutcome:
    category: DetectionCategory
    database: str
    sample: str
    path: Path
    ok: bool
    error: str | None = None


@dataclass(frozen=True)
class SummaryOutcome:
    category: DetectionCategory
    database: str
    results: int
    status: str
    path: Path | None = None
    error: str | None = None


@dataclass
class RunResult:
    samples: list[Sample] = field(default_factory=list)
    readiness: dict[str, str] = field(default_factory=dict)
    scans: list[ScanOutcome] = field(default_factory=list)
    summaries: list[SummaryOutcome] = field(default_factory=list)
    report_path: Path | None = None

    @property
    def failed_scans(self) -> list[ScanOutcome]:
        return [s for s in self.scans if not s.ok]


def ensure_ready(catalog: Catalog, scanner) -> dict[str, str]:
    """
    Make every database in the catalog usable, setting it up when the check fails.
    Each distinct name is visited once; a failure is logged and the rest still run.
    """
    logger.info("Checking/setting up databases...")
    readiness = {}
    for db in all_databases(catalog):
        logger.info("  Checking %s...", db)
        try:
            if scanner.check(db):
                logger.info("      %s is ready", db)
                readiness[db] = READY
                continue
            logger.info("      Setting up %s...", db)
            scanner.setup(db)
            readiness[db] = SETUP
        except ScannerError as e:
            logger.error("Database %s is not usable, scans against it will likely fail: %s", db, e)
            readiness[db] = FAILED
    return readiness


def _scan_one(sample: Sample, category: DetectionCategory, db: str, scanner, layout: OutputLayout) -> ScanOutcome:
    outfile = layout.path_for(category, db, sample)
    try:
        layout.ensure_dir(category, db)
        result = scanner.scan(db, sample.path)
        outfile.write_bytes(result)
    except (ScannerError, OSError) as e:
        logger.error("%s analysis with %s failed for %s: %s", category.value, db, sample.name, e)
        # a leftover from an earlier run would otherwise end up in the summary
        outfile.unlink(missing_ok=True)
        return ScanOutcome(category, db, sample.name, outfile, ok=False, error=str(e))
    logger.info("Processed %s analysis with %s for %s", category.value, db, sample.name)
    return ScanOutcome(category, db, sample.name, outfile, ok=True)


def dispatch(samples, catalog: Catalog, scanner, layout: OutputLayout, jobs: int = 1) -> list[ScanOutcome]:
    """
    Scan every sample against every database of every category.
    Outcomes come back in (sample, category, database) order whatever `jobs` is.
    """
    triples = [
        (sample, category, db)
        for sample in samples
        for category, db in catalog_pairs(catalog)
    ]
    if jobs <= 1:
        outcomes = []
        current = None
        for sample, category, db in triples:
            if sample is not current:
                current = sample
                contigs = sample.count_contigs()
                logger.info("Processing %s (%s contigs)", sample.name, "?" if contigs is None else contigs)
            outcomes.append(_scan_one(sample, category, db, scanner, layout))
        return outcomes

    logger.info("Scanning %d sample/database combination(s) with %d jobs", len(triples), jobs)
    with ThreadPoolExecutor(max_workers=jobs) as pool:
        futures = [pool.submit(_scan_one, s, c, db, scanner, layout) for s, c, db in triples]
        return [f.result() for f in futures]


def aggregate(catalog: Catalog, scanner, layout: OutputLayout) -> list[SummaryOutcome]:
    """
    One combined summary per (category, database) that has at least one result.
    Pairs without results produce no file, only a `no_results` outcome.
    """
    logger.info("Generating summaries...")
    outcomes = []
    for category, db in catalog_pairs(catalog):
        results = layout.results_for(category, db)
        outfile = layout.summary_path_for(category, db)
        if not results:
            logger.info("No results(tsv files) found for %s/%s", category.value, db)
            # an older summary would contradict this run's outcome
            outfile.unlink(missing_ok=True)
            outcomes.append(SummaryOutcome(category, db, 0, NO_RESULTS))
            continue
        try:
            outfile.write_bytes(scanner.summarize(results))
        except (ScannerError, OSError) as e:
            logger.error("Summary of %s/%s failed: %s", category.value, db, e)
            outfile.unlink(missing_ok=True)
            outcomes.append(SummaryOutcome(category, db, len(results), FAILED, error=str(e)))
            continue
        logger.info("Summarised %d result(s) of %s/%s -> %s", len(results), category.value, db, outfile)
        outcomes.append(SummaryOutcome(category, db, len(results), SUMMARIZED, path=outfile))
    return outcomes


def write_run_report(summaries, scans, layout: OutputLayout) -> Path:
    """one row per (category, database): how many results, how many failed scans, and what became of the summary"""
    failures = Counter((s.category, s.database) for s in scans if not s.ok)
    rows = [
        {
            "category": s.category.value,
            "database": s.database,
            "results": s.results,
            "scan_failures": failures[(s.category, s.database)],
            "status": s.status,
            "summary": str(s.path) if s.path else pandas.NA,
        }
        for s in summaries
    ]
    report = pandas.DataFrame(rows, columns=REPORT_COLUMNS)
    layout.root.mkdir(parents=True, exist_ok=True)
    report.to_csv(layout.report_path, sep="\t", index=False)
    return layout.report_path


def run_pipeline(
    input_root,
    layout: OutputLayout,
    scanner,
    catalog: Catalog = DEFAULT_CATALOG,
    suffix: str = DEFAULT_SUFFIX,
    jobs: int = 1,
) -> RunResult:
    """
    The whole batch. Only a missing input directory stops it (InvalidInputError,
    raised before anything is created or scanned); every other failure is
    contained to its own database, sample or summary.
    """
    logger.info("Validating input...")
    input_root = validate_input_dir(input_root)

    run = RunResult()
    run.readiness = ensure_ready(catalog, scanner)

    layout.root.mkdir(parents=True, exist_ok=True)
    # the manifest lists this run's samples only
    layout.manifest_path.write_text("")
    run.samples = discover(input_root, suffix=suffix, manifest=layout.manifest_path)
    run.scans = dispatch(run.samples, catalog, scanner, layout, jobs=jobs)
    run.summaries = aggregate(catalog, scanner, layout)
    run.report_path = write_run_report(run.summaries, run.scans, layout)

    logger.info(
        "Pipeline completed: %d sample(s), %d/%d scan(s) succeeded, %d summary file(s)",
        len(run.samples),
        len(run.scans) - len(run.failed_scans),
        len(run.scans),
        sum(1 for s in run.summaries if s.status == SUMMARIZED),
    )
    return run
