"""
Filesystem adapters — trusted-root input, template copy, descriptor I/O.

Adapter layer — implements three ports:
  - JsonTrustedRootSource  (TrustedRootSource):    json
  - FileTemplateMaterializer (TemplateMaterializer): shutil.copyfile
  - YamlDescriptorStore    (DescriptorStore):      PyYAML with DescriptorLoader / DescriptorDumper

OS errors are mapped to ErrorCodes with ResultFailures.from_exception();
syntax errors from json / yaml become PARSE_ERROR failures. Nothing raises
past this module.
"""

from __future__ import annotations

import json
import re
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import structlog
import yaml
from railway import ErrorCode, ResultFailures
from railway.result import Result

from trustroot_assembler.domain.nodes import require_node

log = structlog.get_logger()

T = TypeVar("T")

TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
BOOL_TAG = "tag:yaml.org,2002:bool"
_BOOL_PATTERN = re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$")


def _keep_scalars_verbatim(cls: type[yaml.resolver.BaseResolver]) -> type[yaml.resolver.BaseResolver]:
    """
    Narrow YAML 1.1 implicit typing on a loader or dumper class.

    Timestamp-like plain scalars stay strings, and only true/false are
    booleans (yes/no/on/off stay strings). A dumper narrowed the same way
    writes such strings back unquoted.
    """
    cls.yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag not in (TIMESTAMP_TAG, BOOL_TAG)]
        for first, resolvers in cls.yaml_implicit_resolvers.items()
    }
    cls.add_implicit_resolver(BOOL_TAG, _BOOL_PATTERN, list("tTfF"))
    return cls


@_keep_scalars_verbatim
class DescriptorLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps and yes/no/on/off scalars as strings."""


@_keep_scalars_verbatim
class DescriptorDumper(yaml.SafeDumper):
    """SafeDumper matching DescriptorLoader's scalar typing."""


def _attempt_io(operation: Callable[[], T], message: str) -> Result[T]:
    try:
        return Result.success(operation())
    except OSError as e:
        return ResultFailures.from_exception(message, e)


def _decode_first_value(raw: bytes) -> Any:
    """
    Decode the first JSON value in `raw`; trailing content is ignored.

    A top-level null reads as an empty object.
    """
    value, _ = json.JSONDecoder().raw_decode(raw.decode("utf-8").lstrip(" \t\r\n"))
    return {} if value is None else value


class JsonTrustedRootSource:
    """Load trusted_root.json into a generic tree."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> Result[dict[str, Any]]:
        return (
            _attempt_io(self._path.read_bytes, f"Error opening {self._path}")
            .flat_map(
                lambda raw: Result.from_computation(
                    lambda: _decode_first_value(raw),
                    ErrorCode.PARSE_ERROR,
                    f"Error decoding {self._path}",
                )
            )
            .flat_map(
                lambda document: require_node(
                    document, dict, f"Error decoding {self._path}: top-level value is not an object"
                )
            )
            .peek(lambda document: log.debug("source.loaded", path=str(self._path), keys=sorted(document)))
        )


class FileTemplateMaterializer:
    """
    Copy the template over the output path.

    The output file is created if absent and truncated if present; its
    parent directory must already exist.
    """

    def __init__(self, template_path: Path, output_path: Path) -> None:
        self._template_path = template_path
        self._output_path = output_path

    def materialize(self) -> Result[Path]:
        return _attempt_io(
            lambda: Path(shutil.copyfile(self._template_path, self._output_path)),
            f"Error copying template {self._template_path} to {self._output_path}",
        ).peek(lambda path: log.debug("materializer.copied", template=str(self._template_path), output=str(path)))


class YamlDescriptorStore:
    """
    Read and write the TrustRoot descriptor as YAML.

    Mapping key order from the template is kept on save (sort_keys=False).
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> Result[dict[str, Any]]:
        return (
            _attempt_io(self._path.read_bytes, f"failed to read YAML file {self._path}")
            .flat_map(
                lambda raw: Result.from_computation(
                    lambda: yaml.load(raw, Loader=DescriptorLoader) or {},
                    ErrorCode.PARSE_ERROR,
                    f"failed to parse YAML file {self._path}",
                )
            )
            .flat_map(lambda tree: require_node(tree, dict, f"YAML file {self._path} is not a mapping"))
        )

    def save(self, tree: dict[str, Any]) -> Result[Path]:
        return Result.from_computation(
            lambda: self.render(tree),
            ErrorCode.UNKNOWN_ERROR,
            "failed to marshal updated YAML",
        ).flat_map(
            lambda text: _attempt_io(
                lambda: self._write(text),
                f"failed to write updated YAML file {self._path}",
            )
        )

    @staticmethod
    def render(tree: dict[str, Any]) -> str:
        return yaml.dump(
            tree, Dumper=DescriptorDumper, default_flow_style=False, sort_keys=False, allow_unicode=True
        )

    def _write(self, text: str) -> Path:
        self._path.write_text(text, encoding="utf-8")
        return self._path
