from __future__ import annotations
import logging
import shutil
import subprocess
from pathlib import Path

from .errors import ScanFailure, ScannerError, SetupFailure, SummaryFailure

logger = logging.getLogger(__name__)


class AbricateManager:
    """Manages abricate executable access and execution"""

    def __init__(
        self,
        executable: str = "abricate",
        threads: int | None = None,
        minid: float | None = None,
        mincov: float | None = None,
    ) -> None:
        self.executable = executable
        self.threads = threads
        self.minid = minid
        self.mincov = mincov
        self._abricate_path: Path | None = None
        self._version: str | None = None

    @property
    def abricate_path(self) -> Path:
        """Path to the abricate executable, resolved on first use."""
        if self._abricate_path is None:
            found = shutil.which(self.executable)
            if found is None:
                raise FileNotFoundError(f"abricate executable not found: {self.executable}")
            self._abricate_path = Path(found)
        return self._abricate_path

    @property
    def version(self) -> str:
        """first line of `abricate --version`"""
        if self._version is None:
            proc = self.run_abricate_command(version=True)
            lines = proc.stdout.decode(errors="replace").splitlines()
            self._version = lines[0].strip() if lines else "unknown"
        return self._version

    def run_abricate_command(self, *args, _check: bool = True, **kwargs) -> subprocess.CompletedProcess:
        """
        run abricate with positional args appended after the options.
        kwargs become `--key value`, True becomes a bare `--key`, False/None are dropped.
        """
        cmd = [str(self.abricate_path)]
        for key, value in kwargs.items():
            if key.startswith("_") or value is None:
                continue
            flag = f"--{key}"
            if isinstance(value, bool):
                if value:
                    cmd.append(flag)
            else:
                cmd.extend([flag, str(value)])
        cmd.extend(map(str, args))

        logger.debug("Executing command: '%s'", " ".join(cmd))
        try:
            return subprocess.run(cmd, check=_check, capture_output=True)
        except subprocess.CalledProcessError as e:
            raise ScannerError(
                f"abricate exited with code {e.returncode}",
                cmd=cmd,
                stderr=_decode(e.stderr),
            ) from e
        except OSError as e:
            raise ScannerError(f"abricate could not be executed: {e}", cmd=cmd) from e

    def _scan_options(self) -> dict:
        return {"threads": self.threads, "minid": self.minid, "mincov": self.mincov}

    # the four capabilities the pipeline relies on.

    def check(self, database: str) -> bool:
        try:
            proc = self.run_abricate_command(check=True, db=database, _check=False)
        except (ScannerError, FileNotFoundError) as e:
            raise SetupFailure(f"Could not check database {database}: {e}") from e
        return proc.returncode == 0

    def setup(self, database: str) -> None:
        try:
            self.run_abricate_command(setupdb=True, db=database)
        except ScannerError as e:
            raise SetupFailure(f"Setup failed for {database}", cmd=e.cmd, stderr=e.stderr) from e
        except FileNotFoundError as e:
            raise SetupFailure(f"Setup failed for {database}: {e}") from e

    def scan(self, database: str, sample_path) -> bytes:
        try:
            proc = self.run_abricate_command(sample_path, db=database, **self._scan_options())
        except ScannerError as e:
            raise ScanFailure(f"Scan failed for {database} on {sample_path}", cmd=e.cmd, stderr=e.stderr) from e
        except FileNotFoundError as e:
            raise ScanFailure(f"Scan failed for {database} on {sample_path}: {e}") from e
        # abricate always prints a header, so nothing at all means it broke.
        if not proc.stdout:
            raise ScanFailure(
                f"Scan produced no output for {database} on {sample_path}",
                cmd=proc.args,
                stderr=_decode(proc.stderr),
            )
        return proc.stdout

    def summarize(self, result_paths) -> bytes:
        paths = [str(p) for p in result_paths]
        if not paths:
            raise SummaryFailure("Nothing to summarise")
        try:
            proc = self.run_abricate_command(*paths, summary=True)
        except ScannerError as e:
            raise SummaryFailure("Summary failed", cmd=e.cmd, stderr=e.stderr) from e
        except FileNotFoundError as e:
            raise SummaryFailure(f"Summary failed: {e}") from e
        if not proc.stdout:
            raise SummaryFailure("Summary produced no output", cmd=proc.args, stderr=_decode(proc.stderr))
        return proc.stdout


def _decode(raw) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, bytes):
        return raw.decode(errors="replace")
    return raw
