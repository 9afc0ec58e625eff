"""Parser for the ``.sprout`` API description format."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

_TYPE_RE = re.compile(r"^type\s+(\w+)\s*\{", re.ASCII)
_SERVICE_RE = re.compile(r"^service\s+(\w+)\s*\{", re.ASCII)
_FIELD_RE = re.compile(r"^(\w+)\s+(\S+)(?:\s+`([^`]*)`)?$", re.ASCII)
_ENDPOINT_RE = re.compile(
    r'^(\w+)\s+"([^"]+)"\s+(\w+)(?:\((\w*)\))?\s*->\s*(\w+)$', re.ASCII
)


class SproutValidationError(ValueError):
    """Raised when a parsed ``.sprout`` file is incomplete."""


@dataclass
class Field:
    """A field inside a type definition."""

    name: str
    type: str
    tags: str = ""


@dataclass
class TypeDefinition:
    """A ``type X { ... }`` block."""

    name: str = ""
    fields: List[Field] = field(default_factory=list)


@dataclass
class ServerConfig:
    """The ``server { ... }`` block."""

    prefix: str = ""


@dataclass
class APIEndpoint:
    """One endpoint line such as ``GET "/ping" Ping -> PingResp``."""

    method: str
    path: str
    handler: str
    request: str = ""
    response: str = ""
    private: bool = False


@dataclass
class ServiceDefinition:
    """A ``service name { ... }`` block with its public and private endpoints."""

    name: str = ""
    public: List[APIEndpoint] = field(default_factory=list)
    private: List[APIEndpoint] = field(default_factory=list)


@dataclass
class SproutFile:
    """The parsed content of a ``.sprout`` file."""

    types: List[TypeDefinition] = field(default_factory=list)
    server: ServerConfig = field(default_factory=ServerConfig)
    services: List[ServiceDefinition] = field(default_factory=list)

    def validate(self) -> None:
        """Raise :class:`SproutValidationError` if no types or services are defined."""
        if not self.types:
            raise SproutValidationError("no types defined")
        if not self.services:
            raise SproutValidationError("no services defined")


def parse_file(path: Union[str, Path]) -> SproutFile:
    """Read and parse a ``.sprout`` file."""
    content = Path(path).read_text(encoding="utf-8")
    return parse_content(content)


def parse_content(content: str) -> SproutFile:
    """Parse the text of a ``.sprout`` file."""
    result = SproutFile()
    current_type: Optional[TypeDefinition] = None
    current_service: Optional[ServiceDefinition] = None
    section = ""

    for raw in content.split("\n"):
        line = raw.strip()
        if not line or line.startswith("//"):
            continue

        if line.startswith("type "):
            if current_type is not None:
                result.types.append(current_type)
            current_type = TypeDefinition()
            match = _TYPE_RE.match(line)
            if match:
                current_type.name = match.group(1)
            continue

        if current_type is not None:
            if "{" in line or "}" in line:
                if "}" in line:
                    result.types.append(current_type)
                    current_type = None
                continue
            parsed = parse_field(line)
            if parsed is not None:
                current_type.fields.append(parsed)

        if line.startswith("server {"):
            section = "server"
            continue

        if line.startswith("service "):
            if current_service is not None:
                result.services.append(current_service)
            current_service = ServiceDefinition()
            match = _SERVICE_RE.match(line)
            if match:
                current_service.name = match.group(1)
            section = "service"
            continue

        if line.startswith("public {"):
            section = "public"
            continue

        if line.startswith("private {"):
            section = "private"
            continue

        if "}" in line:
            if section == "service" and current_service is not None:
                result.services.append(current_service)
                current_service = None
            section = "service" if section in ("public", "private") else ""
            continue

        if section == "server" and line.startswith("prefix"):
            parts = line.split()
            if len(parts) >= 2:
                result.server.prefix = parts[1].strip('"')

        if section in ("public", "private") and current_service is not None:
            endpoint = parse_endpoint(line)
            if endpoint is not None:
                if section == "public":
                    current_service.public.append(endpoint)
                else:
                    current_service.private.append(endpoint)

    return result


def parse_field(line: str) -> Optional[Field]:
    """Parse a field line like ``Name string `json:"name"```; None if it is not one."""
    match = _FIELD_RE.match(line)
    if match is None:
        return None
    return Field(name=match.group(1), type=match.group(2), tags=match.group(3) or "")


def parse_endpoint(line: str) -> Optional[APIEndpoint]:
    """Parse an endpoint line; None if the line is not an endpoint."""
    match = _ENDPOINT_RE.match(line)
    if match is None:
        return None
    return APIEndpoint(
        method=match.group(1),
        path=match.group(2),
        handler=match.group(3),
        request=match.group(4) or "",
        response=match.group(5),
    )


def go_type(sprout_type: str) -> str:
    """Map a ``.sprout`` type to its Go type; slices are mapped element-wise."""
    if sprout_type.startswith("[]"):
        return "[]" + go_type(sprout_type[2:])
    return sprout_type