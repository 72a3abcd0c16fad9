"""
Runner that streams generated readings into an output sink.

Supports cooperative cancellation from another thread or a signal handler.
"""

import logging
import sys
import threading
import time
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, TextIO

from interval_generator.config import GenerationConfiguration, OutputSettings
from interval_generator.encoders import get_writer
from interval_generator.errors import WriteResult
from interval_generator.models import Reading
from interval_generator.orchestrator import MultiMeterOrchestrator

logger = logging.getLogger(__name__)


class GenerationRunner:
    """
    Drives a streaming generation run into a file or text stream.

    Output that was already written is kept when a run is stopped.
    """

    def __init__(
        self,
        orchestrator: Optional[MultiMeterOrchestrator] = None,
        output_callback: Optional[Callable[[Reading], None]] = None,
        settings: Optional[OutputSettings] = None,
    ):
        """
        Initialize the runner.

        Args:
            orchestrator: Orchestrator used to generate readings
            output_callback: Optional callback invoked for each reading written
            settings: Output format, destination and site label
        """
        self.orchestrator = orchestrator or MultiMeterOrchestrator()
        self.output_callback = output_callback
        self.settings = settings or OutputSettings()
        self._cancel = threading.Event()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel.is_set()

    def stop(self) -> None:
        """Request cancellation of the current run."""
        self._cancel.set()

    def _observe(self, readings: Iterable[Reading]) -> Iterator[Reading]:
        for reading in readings:
            if self.output_callback:
                self.output_callback(reading)
            yield reading

    def _writer_options(self) -> dict:
        if self.settings.format.strip().lower() == "json":
            return {"indent": self.settings.indent}
        return {"include_header": self.settings.include_header}

    def run(self, configuration: GenerationConfiguration, stream: TextIO) -> WriteResult:
        """
        Generate readings for ``configuration`` and write them to ``stream``.

        A stop() issued before the run starts cancels it before the first
        reading; the request is cleared once the run returns.

        Raises:
            InvalidArgumentError: For an invalid configuration or format,
                before anything is written
        """
        writer = get_writer(self.settings.format)
        readings = self.orchestrator.generate_streaming(configuration)
        site = configuration.site_name or self.settings.site_name or None

        expected = self.orchestrator.calculate_expected_reading_count(configuration)
        logger.info(
            "Generating %d %s readings for %d meter(s) as %s",
            expected,
            configuration.profile_name,
            configuration.entity_count,
            self.settings.format,
        )

        start_time = time.time()
        try:
            result = writer(
                self._observe(readings),
                stream,
                site,
                cancel_event=self._cancel,
                **self._writer_options(),
            )
        finally:
            # A stop request applies to one run only
            self._cancel.clear()
        elapsed = time.time() - start_time

        if result.cancelled:
            logger.warning(
                "Generation cancelled after %d readings (%.2fs)",
                result.readings_written,
                elapsed,
            )
        else:
            logger.info("Wrote %d readings in %.2fs", result.readings_written, elapsed)
        return result

    def run_to_file(
        self, configuration: GenerationConfiguration, path: Optional[Path] = None
    ) -> WriteResult:
        """Run into ``path`` (or the configured output file, or stdout)."""
        target = path or (Path(self.settings.output_file) if self.settings.output_file else None)
        if target is None:
            return self.run(configuration, sys.stdout)

        # Fail before creating the file
        configuration.validate()
        self.orchestrator.registry.get_profile(configuration.profile_name)
        get_writer(self.settings.format)

        try:
            with open(target, "w", newline="") as f:
                result = self.run(configuration, f)
        except OSError as exc:
            raise RuntimeError(f"Failed to write output to {target}: {exc}") from exc
        logger.info("Data written to %s", target)
        return result
