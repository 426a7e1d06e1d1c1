"""
Pipeline-wide configuration and the diagnostics channel.

A single PipelineConfig is created by the entry point (CLI, web app, tests) and
threaded through the parsers. It replaces process-wide debug switches: tracing is
enabled per pipeline, and advisory events are forwarded to an injected callback.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

from src.bom_merge.types import Diagnostic, DiagnosticKind

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    DiagnosticKind.SOURCE_FAILURE: logging.ERROR,
    DiagnosticKind.CLASSIFICATION_MISS: logging.WARNING,
    DiagnosticKind.LOW_CONFIDENCE: logging.INFO,
}


@dataclass(frozen=True)
class PipelineConfig:
    """
    Options shared by every stage of one pipeline run.

    Attributes:
        debug: Emit per-row trace messages (noise skips, preserved rows).
        on_diagnostic: Optional sink for advisory events. Never alters output.
        source_name: Label of the document currently being processed.
    """

    debug: bool = False
    on_diagnostic: Callable[[Diagnostic], None] | None = None
    source_name: str = ""

    def for_source(self, source_name: str) -> "PipelineConfig":
        """Returns a copy of this config bound to a single document."""
        return replace(self, source_name=source_name)

    def report(
        self, kind: DiagnosticKind, reason: str, row: Sequence[str] = ()
    ) -> None:
        """
        Logs a diagnostic and forwards it to the registered sink.

        Args:
            kind: The diagnostic category.
            reason: Short explanation of what happened.
            row: The cells of the row involved, if any.
        """
        diagnostic: Diagnostic = {
            "kind": kind,
            "source": self.source_name,
            "row": tuple(row),
            "reason": reason,
        }
        logger.log(
            _LOG_LEVELS[kind],
            f"[{kind}] {self.source_name or '-'}: {reason} {list(row)}",
        )
        if self.on_diagnostic is not None:
            self.on_diagnostic(diagnostic)

    def trace(self, message: str, **context: object) -> None:
        """Debug-only logging; a no-op unless the config was built with debug=True."""
        if self.debug:
            logger.debug(f"{message} {context}" if context else message)


DEFAULT_CONFIG = PipelineConfig()
