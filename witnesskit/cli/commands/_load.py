# witnesskit/cli/commands/_load.py
"""Loading and generation shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from witnesskit.cli.ui import ui
from witnesskit.codegen.generator import GenerationReport, WitnessGenerator
from witnesskit.core.config import ConfigError, load_settings
from witnesskit.core.exceptions import WitnessError
from witnesskit.logging import tags
from witnesskit.logging.logger import get_logger
from witnesskit.schema.loader import load_document_file

logger = get_logger(__name__)


def generate_document(
    source: Path, settings: Optional[Path]
) -> Tuple[WitnessGenerator, GenerationReport]:
    """
    Load settings and the document, then generate every interface.

    Interfaces that failed to load are reported next to those that failed to
    generate. Exits with status 1 when the document as a whole is unusable.
    """
    try:
        generator = WitnessGenerator(load_settings(settings))
        loaded = load_document_file(source)
    except (ConfigError, WitnessError) as e:
        ui.fail(str(e))

    logger.debug(f"{tags.CLI} {len(loaded.schemas)} interface(s) built from {source}")

    report = generator.generate_all(loaded.schemas)
    for name, error in loaded.errors.items():
        report.record(error, name)
    return generator, report
