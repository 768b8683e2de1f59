"""Support software pipeline.

Steps:
1. Ask for the Mac model
2. Download and parse the software-update catalog
3. Filter support products compatible with the model
4. Choose one (latest, or by key when the user wants to pick)
5. Download its package into {cwd}/BC-{key}/
6. Extract the Windows support DMG (macOS only)

Usage:
    with SupportSoftwarePipeline(prompter=ConsolePrompter()) as pipeline:
        result = pipeline.run()
    raise SystemExit(result.exit_code)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..catalog.parser import fetch_catalog
from ..common.config import Settings, settings as default_settings
from ..common.http_client import HTTPClient
from ..downloader.downloader import DownloadResult, ProgressReporter, StagedDownloader
from ..extractor.pipeline import ExtractionPipeline, ExtractionResult
from ..extractor.runner import CommandRunner
from ..selector.candidate_selector import resolve_selection, select_candidates
from ..selector.matcher import ModelCompatibilityMatcher
from ..selector.models import Candidate
from .prompts import Prompter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_MODEL = 1
EXIT_NO_CANDIDATES = 1
EXIT_UNRESOLVED = 1
EXIT_FATAL = 2


@dataclass
class RunResult:
    """Outcome of one pipeline run."""

    exit_code: int
    message: str = ""
    model: str | None = None
    candidates: list[Candidate] = field(default_factory=list)
    chosen: Candidate | None = None
    package_path: Path | None = None
    download: DownloadResult | None = None
    extraction: ExtractionResult | None = None

    def to_dict(self) -> dict:
        return {
            "exit_code": self.exit_code,
            "message": self.message,
            "model": self.model,
            "candidates": [c.to_dict() for c in self.candidates],
            "chosen": self.chosen.key if self.chosen else None,
            "package_path": str(self.package_path) if self.package_path else None,
            "download": self.download.to_dict() if self.download else None,
            "extraction": self.extraction.to_dict() if self.extraction else None,
        }


class SupportSoftwarePipeline:
    """End-to-end catalog resolution, download and extraction.

    Collaborators are injectable so the pipeline runs without a network,
    a terminal or macOS tools.
    """

    def __init__(
        self,
        prompter: Prompter,
        settings: Settings | None = None,
        client: HTTPClient | None = None,
        runner: CommandRunner | None = None,
        platform: str | None = None,
        cwd: Path | None = None,
        progress: ProgressReporter | None = None,
    ) -> None:
        self.prompter = prompter
        self.settings = settings or default_settings
        # A client created here is owned, and closed, by the pipeline
        self._owns_client = client is None
        self.client = client or HTTPClient(self.settings)
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.matcher = ModelCompatibilityMatcher(
            self.client, locale=self.settings.match.distribution_locale
        )
        self.downloader = StagedDownloader(
            self.client, chunk_size=self.settings.network.chunk_size, progress=progress
        )
        self.extractor = ExtractionPipeline(self.settings.extract, runner=runner, platform=platform)

    def close(self) -> None:
        """Close the HTTP client if the pipeline created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> SupportSoftwarePipeline:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def work_dir_for(self, candidate: Candidate) -> Path:
        return self.cwd / f"{self.settings.extract.work_dir_prefix}{candidate.key}"

    @property
    def output_path(self) -> Path:
        return self.cwd / self.settings.extract.output_filename

    def run(self, list_only: bool = False) -> RunResult:
        """Execute the pipeline.

        Args:
            list_only: Stop after listing compatible candidates.

        Returns:
            RunResult carrying the process exit code.

        Raises:
            BootCampError: Catalog fetch/parse failure or a failed download.
        """
        model = self.prompter.ask_model(self.settings.default_model)
        if not model:
            logger.error("No Mac model provided.")
            return RunResult(EXIT_NO_MODEL, "No Mac model provided.")

        logger.info("=== Boot Camp support software for: %s ===", model)

        # Step 1: catalog
        logger.info("Step 1: Fetching software-update catalog...")
        catalog = fetch_catalog(self.client, self.settings.network.catalog_url)

        # Step 2: filter by marker and model
        logger.info("Step 2: Matching products against %s...", model)
        candidates = select_candidates(
            catalog,
            model,
            self.matcher,
            marker=self.settings.match.support_marker,
        )
        if not candidates:
            message = "No Boot Camp support software found for this Mac model."
            logger.error(message)
            return RunResult(EXIT_NO_CANDIDATES, message, model=model)

        for candidate in candidates:
            logger.info(
                "  [%s] %s",
                candidate.key,
                candidate.post_date.isoformat() if candidate.post_date else "unknown date",
            )

        if list_only:
            return RunResult(EXIT_OK, f"{len(candidates)} candidates", model=model, candidates=candidates)

        # Step 3: choose
        manual = self.prompter.confirm_manual_choice()
        key = self.prompter.ask_key() if manual else None
        chosen = resolve_selection(candidates, manual=manual, key=key)
        logger.info("Step 3: Chose Boot Camp support software: %s", chosen.key)

        result = RunResult(EXIT_OK, model=model, candidates=candidates, chosen=chosen)

        url = chosen.download_url
        if not url:
            result.exit_code = EXIT_UNRESOLVED
            result.message = f"Product {chosen.key} has no downloadable package."
            logger.error(result.message)
            return result

        # Step 4: download
        work_dir = self.work_dir_for(chosen)
        result.package_path = work_dir / self.settings.extract.package_filename
        logger.info("Step 4: Downloading from: %s", url)
        result.download = self.downloader.download(url, result.package_path)

        # Step 5: extract
        logger.info("Step 5: Extracting...")
        result.extraction = self.extractor.extract(
            result.package_path,
            work_dir,
            self.output_path,
            confirm_cleanup=self.prompter.confirm_cleanup,
        )
        if result.extraction.skipped_platform:
            result.message = "Extraction skipped on this platform; package left for manual extraction."
            logger.info(result.message)
        elif result.extraction.success:
            result.message = f"Support software ready at {self.output_path}"
            logger.info(result.message)
        else:
            result.message = "Extraction did not produce a disk image."
            logger.warning(result.message)
        return result
