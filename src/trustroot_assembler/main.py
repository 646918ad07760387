"""
Application entry point — parses flags, wires adapters, runs the assembly.

Composition root: the only place where concrete adapters are instantiated.

Responsibilities:
  1. Parse command-line flags (argparse) into AssemblerSettings
  2. Configure structlog (and stdlib logging) to write to stderr
  3. Create the filesystem and PEM adapters
  4. Run the pipeline inside a LoggingExecutionContext
  5. Exit non-zero on a fatal failure
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import Any

import structlog
from pydantic import ValidationError
from railway import LoggingExecutionContext

from trustroot_assembler import __version__
from trustroot_assembler.adapters.filesystem import (
    FileTemplateMaterializer,
    JsonTrustedRootSource,
    YamlDescriptorStore,
)
from trustroot_assembler.adapters.pem_encoder import X509PemEncoder
from trustroot_assembler.config import AssemblerSettings
from trustroot_assembler.pipeline import run_assembly

# (flag, settings field)
_FLAGS = (
    ("--output-trustroot-filepath", "output_trustroot_filepath"),
    ("--template-filepath", "template_filepath"),
    ("--trusted-root-path", "trusted_root_path"),
    ("--organization", "organization"),
    ("--commonName", "common_name"),
    ("--uri", "uri"),
    ("--log-level", "log_level"),
)


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for human-readable console output on stderr.

    stderr keeps every diagnostic away from stdout. Stdlib logging (used by
    the railway execution context) is pointed at stderr at the same level.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(stream=sys.stderr, level=level, format="%(levelname)s %(name)s: %(message)s")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def build_argument_parser() -> argparse.ArgumentParser:
    """
    Flags mirror AssemblerSettings fields; unset flags fall through to env/defaults.

    Each flag is accepted with one or two leading dashes (`-uri` or `--uri`).
    """
    parser = argparse.ArgumentParser(
        prog="trustroot-assembler",
        description="Assemble a TrustRoot YAML descriptor from a Sigstore trusted_root.json.",
    )
    fields = AssemblerSettings.model_fields
    for flag, name in _FLAGS:
        info = fields[name]
        parser.add_argument(
            flag,
            flag[1:],
            dest=name,
            default=None,
            help=f"{info.description} (default: {info.default})",
        )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_settings(argv: Sequence[str] | None = None) -> AssemblerSettings:
    """Parse flags and build settings. Raises ValidationError on invalid input."""
    args = build_argument_parser().parse_args(argv)
    overrides: dict[str, Any] = {
        name: value for name, value in vars(args).items() if value is not None
    }
    return AssemblerSettings(**overrides)


def main(argv: Sequence[str] | None = None) -> None:
    """Run one assembly; exits 1 on configuration or fatal pipeline errors."""
    try:
        settings = load_settings(argv)
    except ValidationError as e:
        print(f"FATAL: Configuration error — {e}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    configure_structlog(settings.log_level)
    log = structlog.get_logger()

    log.info(
        "assembler.starting",
        version=__version__,
        template=str(settings.template_filepath),
        trusted_root=str(settings.trusted_root_path),
        output=str(settings.output_trustroot_filepath),
        organization=settings.organization,
        common_name=settings.common_name,
        uri=settings.uri,
    )

    result = LoggingExecutionContext(operation="TrustRootAssembly").execute(
        lambda: run_assembly(
            identity=settings.identity(),
            source=JsonTrustedRootSource(settings.trusted_root_path),
            materializer=FileTemplateMaterializer(
                settings.template_filepath, settings.output_trustroot_filepath
            ),
            store=YamlDescriptorStore(settings.output_trustroot_filepath),
            encoder=X509PemEncoder(),
        )
    )

    if result.is_failure():
        log.error("assembler.fatal_error", error=str(result.error()))
        sys.exit(1)

    report = result.value()
    log.info(
        "assembler.complete",
        output=str(settings.output_trustroot_filepath),
        output_written=report.output_written,
        entries_written=report.entries_written,
        entries_skipped=report.entries_skipped,
        entries_failed=report.entries_failed,
        certificates_encoded=report.certificates_encoded,
        certificates_skipped=report.certificates_skipped,
    )


if __name__ == "__main__":
    main()
