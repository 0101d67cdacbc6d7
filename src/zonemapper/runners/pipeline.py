import os
import json
import time
import logging
import psutil
from tqdm import tqdm
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from zonemapper.config.resolvers import _resolve_cache_path
from zonemapper.config.settings import Settings
from zonemapper.directory.cache import DirectoryCache
from zonemapper.directory.master import MasterDirectory
from zonemapper.directory.sources import DirectorySourceLoader
from zonemapper.domain.models import EncodeResult, ServiceabilityClaim
from zonemapper.encoding.checksum import checksum
from zonemapper.encoding.encoder import UTSFEncoder
from zonemapper.processing.claims import ClaimParser, ClaimParseResult
from zonemapper.utils.timing import section_timer

from zonemapper.domain.exceptions import (
    ConfigurationError,
    DirectoryError,
    DuplicateClaimWarning,
    EncodingError,
    EncodingWarning,
    FileSystemError,
    InvalidFileFormatError,
)

logger = logging.getLogger(__name__)
summary_logger = logging.getLogger("zonemapper.summary")

OUTPUT_SUFFIX = ".utsf.json"
WARNINGS_SUFFIX = ".warnings.json"


@dataclass
class VendorRunResult:
    """Outcome of encoding one vendor file."""
    vendor_file: str
    output_path: Optional[str] = None
    checksum: Optional[str] = None
    n_claims: int = 0
    n_invalid_rows: int = 0
    n_duplicate_rows: int = 0
    duplicates: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PipelineResult:
    """Pipeline execution result."""
    n_inputs: int
    n_succeeded: int
    n_failed: int
    results: List[VendorRunResult] = field(default_factory=list)
    processing_time: float = 0.0
    peak_rss_mb: float = 0.0


class EncodePipeline:
    """
    Batch encoder for vendor JSON files.

    One master directory is loaded per run (snapshot first, then source)
    and shared by every vendor file. A vendor file is a JSON object with
    `meta`, `pricing`, `serviceability` (rows) and `selectedZones`.
    """

    def __init__(self, settings: Settings, cache: Optional[DirectoryCache] = None):
        self.settings = settings
        self._validate_config()

        self.process = psutil.Process(os.getpid())
        self.peak_rss_mb = 0.0
        self.encoder = UTSFEncoder.from_settings(settings.encoder)
        self.parser = ClaimParser(first_row=1)
        self.cache = cache if cache is not None else self._build_cache()

    def _validate_config(self) -> None:
        if not self.settings.directory.source:
            raise ConfigurationError(
                "A master directory source is required",
                config_field="directory.source"
            ).add_suggestion("Pass -d/--directory with a JSON file path or an http(s) URL")

    def _build_cache(self) -> DirectoryCache:
        d = self.settings.directory
        try:
            snapshot_path = _resolve_cache_path(
                use_cache=d.use_cache,
                fresh_cache=d.fresh_cache,
                cache_path=str(d.cache_path) if d.cache_path else None,
            )
        except ValueError as e:
            raise ConfigurationError(str(e), config_field="directory.fresh_cache") from e
        except OSError as e:
            raise FileSystemError(
                f"Cannot prepare directory snapshot: {e}",
                path=str(d.cache_path) if d.cache_path else None
            ) from e

        if snapshot_path:
            logger.info("[db-setup] Using directory snapshot at: %s", snapshot_path)
        return DirectoryCache(DirectorySourceLoader(snapshot_path=snapshot_path, timeout=d.timeout_seconds))

    @property
    def directory(self) -> MasterDirectory:
        return self.cache.get(self.settings.directory.source)

    # ------------------------------------------------------------------
    # single vendor
    # ------------------------------------------------------------------

    @staticmethod
    def load_vendor(path) -> Dict[str, Any]:
        """Read a vendor JSON file."""
        p = Path(path)
        try:
            with p.open("r", encoding="utf-8") as fh:
                payload = json.load(fh)
        except FileNotFoundError as e:
            raise FileSystemError(f"Vendor file not found: {p}", path=str(p)) from e
        except json.JSONDecodeError as e:
            raise InvalidFileFormatError(str(p), "a JSON object", reason=str(e)) from e

        if not isinstance(payload, dict):
            raise InvalidFileFormatError(
                str(p), "a JSON object", reason=f"top level is {type(payload).__name__}"
            )
        rows = payload.get("serviceability")
        if rows is not None and not isinstance(rows, list):
            raise InvalidFileFormatError(str(p), "a JSON object", reason="'serviceability' must be a list")
        return payload

    @staticmethod
    def checksum_entries(claims: Iterable[ServiceabilityClaim], directory: MasterDirectory) -> List[Dict[str, Any]]:
        """Claims as `{pincode, zone, isODA}` with the master zone filled in where the row had none."""
        return [
            {
                "pincode": c.pincode,
                "zone": c.claimed_zone or directory.zone_of(c.pincode) or "",
                "isODA": c.is_oda,
            }
            for c in claims
        ]

    def encode_payload(self, payload: Dict[str, Any]) -> Tuple[EncodeResult, str, ClaimParseResult]:
        """Encode one vendor payload; returns (result, checksum, parsed rows)."""
        directory = self.directory
        parsed = self.parser.parse(payload.get("serviceability") or [])
        for bad in parsed.invalid[:5]:
            logger.debug("Invalid row %s: %r (%s)", bad["row"], bad["pincode"], bad["reason"])

        result = self.encoder.encode(
            payload.get("meta") or {},
            payload.get("pricing") or {},
            parsed.claims,
            payload.get("selectedZones") or [],
            directory,
        )
        digest = checksum(self.checksum_entries(parsed.claims, directory))
        return result, digest, parsed

    @staticmethod
    def run_warnings(result: EncodeResult, parsed: ClaimParseResult) -> List[EncodingWarning]:
        """Encoder warnings followed by one entry per repeated pincode row."""
        repeats = [
            DuplicateClaimWarning(d["pincode"], row=d["row"], first_row=d["first_row"])
            for d in parsed.duplicates
        ]
        return list(result.warnings) + repeats

    def output_path_for(self, vendor_file) -> Path:
        p = Path(vendor_file)
        out_dir = self.settings.output.output_dir or p.parent
        return Path(out_dir) / f"{p.stem}{OUTPUT_SUFFIX}"

    def write_document(
        self, result: EncodeResult, digest: str, out_path: Path,
        warnings: Optional[List[EncodingWarning]] = None,
    ) -> Path:
        document = result.document.to_dict()
        document["serviceabilityChecksum"] = digest
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as fh:
            json.dump(document, fh, indent=self.settings.output.indent, ensure_ascii=False)

        warnings = result.warnings if warnings is None else warnings
        if self.settings.output.include_warnings and warnings:
            sidecar = out_path.with_name(out_path.name[: -len(OUTPUT_SUFFIX)] + WARNINGS_SUFFIX)
            with sidecar.open("w", encoding="utf-8") as fh:
                json.dump([w.to_dict() for w in warnings], fh, indent=2, default=str)
        return out_path

    def encode_file(self, vendor_file) -> VendorRunResult:
        """Encode and write one vendor file. Errors propagate."""
        run = VendorRunResult(vendor_file=str(vendor_file))
        with section_timer(f"encode {Path(vendor_file).name}", logger, logging.DEBUG) as watch:
            payload = self.load_vendor(vendor_file)
            result, digest, parsed = self.encode_payload(payload)
            warnings = self.run_warnings(result, parsed)
            run.checksum = digest
            run.n_claims = len(parsed.claims)
            run.n_invalid_rows = len(parsed.invalid)
            run.n_duplicate_rows = len(parsed.duplicates)
            run.duplicates = list(parsed.duplicates)
            run.warnings = [w.to_dict() for w in warnings]

            if self.settings.dry_run:
                logger.info("[dry-run] %s encoded, not written", vendor_file)
            else:
                out_path = self.output_path_for(vendor_file)
                run.output_path = str(self.write_document(result, digest, out_path, warnings))
        run.elapsed = watch.elapsed
        self._memory_report(f"after {Path(vendor_file).name}")
        return run

    # ------------------------------------------------------------------
    # batch
    # ------------------------------------------------------------------

    def encode_many(self, vendor_files: List[str]) -> PipelineResult:
        """
        Encode several vendor files against one directory.

        Directory failures abort the run. Any other failure is recorded on
        that file's VendorRunResult and the batch moves on.
        """
        start = time.time()
        summary_logger.info("[startup] Encoding %d vendor file(s)", len(vendor_files))

        try:
            directory = self.directory
        except DirectoryError:
            raise
        except Exception as e:
            raise EncodingError(
                f"Unexpected failure loading master directory: {e}",
                stage="directory_load"
            ).add_context('source', self.settings.directory.source) from e
        summary_logger.info(
            "[startup] Master directory: %d pincodes in %d zones", len(directory), len(directory.zones)
        )

        show_progress = os.getenv('NO_PROGRESS', '').lower() not in ['1', 'true', 'yes']
        results: List[VendorRunResult] = []

        for vendor_file in tqdm(
            vendor_files,
            desc="Encoding",
            unit="vendor",
            ncols=100,
            disable=not show_progress or len(vendor_files) < 2,
        ):
            try:
                results.append(self.encode_file(vendor_file))
            except DirectoryError:
                raise
            except Exception as e:
                logger.error("[encode] %s failed (%s): %s", vendor_file, type(e).__name__, e)
                logger.debug("Exception details", exc_info=True)
                results.append(VendorRunResult(vendor_file=str(vendor_file), error=str(e)))

        n_failed = sum(1 for r in results if not r.ok)
        pipeline_result = PipelineResult(
            n_inputs=len(vendor_files),
            n_succeeded=len(results) - n_failed,
            n_failed=n_failed,
            results=results,
            processing_time=time.time() - start,
            peak_rss_mb=self.peak_rss_mb,
        )
        self._log_final_metrics(pipeline_result)
        return pipeline_result

    def _memory_report(self, label: str) -> None:
        try:
            rss = self.process.memory_info().rss / 1e6  # MB
        except psutil.Error as e:
            logger.debug("[mem] Could not get memory info: %s", e)
            return
        self.peak_rss_mb = max(self.peak_rss_mb, rss)
        logger.debug("[mem] %s RSS=%.1fMB", label, rss)

    def _log_final_metrics(self, result: PipelineResult) -> None:
        summary_logger.info("=" * 60)
        summary_logger.info("ENCODE SUMMARY")
        summary_logger.info("=" * 60)
        summary_logger.info("Vendor files:        %d", result.n_inputs)
        summary_logger.info("Succeeded:           %d", result.n_succeeded)
        summary_logger.info("Failed:              %d", result.n_failed)
        summary_logger.info("Warnings:            %d", sum(len(r.warnings) for r in result.results))
        summary_logger.info("Duplicate rows:      %d", sum(r.n_duplicate_rows for r in result.results))
        summary_logger.info("Processing time:     %.2fs", result.processing_time)
        summary_logger.info("Peak RSS:            %.1fMB", result.peak_rss_mb)
        for r in result.results:
            if not r.ok:
                summary_logger.info("  FAILED %s: %s", r.vendor_file, r.error)
        summary_logger.info("=" * 60)
