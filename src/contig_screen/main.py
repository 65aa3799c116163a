# main.py
# contig_screen: screen every assembly in a directory against the abricate
# AMR, virulence and plasmid databases, then summarise per database.

import argparse
import sys
from pathlib import Path

from . import __about__ as about
from .abricate_manager import AbricateManager
from .catalog import DEFAULT_CATALOG, parse_catalog_option
from .errors import InvalidInputError, ScannerError
from .fileops import DEFAULT_SUFFIX, OutputLayout
from .logs import log_to_files
from .pipeline import SUMMARIZED, run_pipeline

__version__ = about.__version__


class FullVersion(argparse.Action):
    def __call__(self, parser, namespace, values, option_string=None):
        print(f"{parser.prog} {__version__}")
        try:
            print(AbricateManager().version)
        except (ScannerError, FileNotFoundError) as e:
            print(f"abricate unavailable: {e}")
        parser.exit(0)


def _positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def build_parser():
    parser = argparse.ArgumentParser(
        prog="contig_screen",
        description=(
            "Screen a directory of assembled contigs with abricate against the "
            "AMR, virulence and plasmid databases and summarise the hits per database."
        ),
    )
    parser.add_argument(
        "-v",
        "--version",
        nargs=0,
        action=FullVersion,
        help="Show program and abricate versions, then exit.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Directory containing the FASTA assemblies (default: current directory)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("."),
        help="Directory that receives results, summaries and logs (default: current directory)",
    )
    parser.add_argument(
        "-s",
        "--suffix",
        default=DEFAULT_SUFFIX,
        help=f"File name suffix of the assemblies (default: {DEFAULT_SUFFIX})",
    )
    parser.add_argument(
        "--db",
        dest="catalog",
        action="append",
        metavar="CATEGORY=DB[,DB...]",
        help="Replace the database catalog, e.g. --db AMR=card,ncbi --db Plasmid=plasmidfinder",
    )
    parser.add_argument(
        "-t",
        "--threads",
        type=_positive_int,
        help="Threads handed to each abricate scan",
    )
    parser.add_argument("--minid", type=float, help="abricate minimum DNA %%identity")
    parser.add_argument("--mincov", type=float, help="abricate minimum DNA %%coverage")
    parser.add_argument(
        "-j",
        "--jobs",
        type=_positive_int,
        default=1,
        help="How many scans to run at once? (default: 1)",
    )
    parser.add_argument(
        "--abricate",
        default="abricate",
        help="abricate executable to use (default: abricate on PATH)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Run without terminal output for workflow integration",
        default=False,
    )
    return parser


## Define main function logic.
def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # checked before anything is written so a typo leaves no trace behind
    if not args.input.is_dir():
        print(f"Error: Directory '{args.input}' does not exist", file=sys.stderr)
        return 1

    try:
        catalog = parse_catalog_option(args.catalog) if args.catalog else DEFAULT_CATALOG
    except ValueError as e:
        parser.error(str(e))

    scanner = AbricateManager(
        executable=args.abricate,
        threads=args.threads,
        minid=args.minid,
        mincov=args.mincov,
    )
    layout = OutputLayout(args.output)
    args.output.mkdir(parents=True, exist_ok=True)

    with log_to_files(args.output) as logger:
        try:
            run = run_pipeline(
                args.input,
                layout,
                scanner,
                catalog=catalog,
                suffix=args.suffix,
                jobs=args.jobs,
            )
        except InvalidInputError as e:
            logger.error(str(e))
            print(str(e), file=sys.stderr)
            return 1

    if not args.quiet:
        print(f"Samples screened: {len(run.samples)}")
        print(f"Failed scans: {len(run.failed_scans)}")
        for outcome in run.summaries:
            if outcome.status == SUMMARIZED:
                print(f"Wrote combined summary -> {outcome.path}")
            else:
                print(f"{outcome.category.value}/{outcome.database}: {outcome.status.replace('_', ' ')}")
        print(f"Wrote run report -> {run.report_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
