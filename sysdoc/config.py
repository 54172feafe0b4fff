from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .document import DEFAULT_HEADING_COLOR, DocumentMetadata, Person
from .errors import ConfigError

load_dotenv()

REQUIRED_KEYS = ("document_id", "title", "doc_type", "owner", "approver")


def _parse_int(value: str | None, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


@dataclass
class Settings:
    source_dir: str = "src"
    config_name: str = "sysdoc.yaml"
    parse_workers: int = 1


def load_settings() -> Settings:
    return Settings(
        source_dir=os.getenv("SYSDOC_SOURCE_DIR", "src"),
        config_name=os.getenv("SYSDOC_CONFIG_NAME", "sysdoc.yaml"),
        parse_workers=max(1, _parse_int(os.getenv("SYSDOC_PARSE_WORKERS"), 1)),
    )


def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None or value == "":
        return None
    return str(value)


def _person(data: Dict[str, Any], key: str, path: Path) -> Person:
    value = data.get(key)
    if isinstance(value, str):
        return Person(name=value)
    if not isinstance(value, dict) or not value.get("name"):
        raise ConfigError(f"'{key}' must be a name or a mapping with 'name' and 'email'", source=path)
    return Person(name=str(value["name"]), email=str(value.get("email") or ""))


def parse_document_config(data: Dict[str, Any], path: Path) -> DocumentMetadata:
    missing = [key for key in REQUIRED_KEYS if not data.get(key)]
    if missing:
        raise ConfigError(f"document config missing required keys {missing}", source=path)

    return DocumentMetadata(
        document_id=str(data["document_id"]),
        title=str(data["title"]),
        doc_type=str(data["doc_type"]),
        owner=_person(data, "owner", path),
        approver=_person(data, "approver", path),
        standard=str(data.get("standard") or ""),
        template=str(data.get("template") or ""),
        system_id=_optional_str(data, "system_id"),
        subtitle=_optional_str(data, "subtitle"),
        description=_optional_str(data, "description"),
        version=_optional_str(data, "version"),
        modified=_optional_str(data, "modified"),
        protection_mark=_optional_str(data, "protection_mark"),
        title_page_background=_optional_str(data, "title_page_background"),
        heading_color=str(data.get("heading_color") or DEFAULT_HEADING_COLOR),
    )


def load_document_config(config_path: Path) -> DocumentMetadata:
    """Load document metadata from a YAML (default) or TOML config file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    content = config_path.read_text(encoding="utf-8")
    if not content.strip():
        raise ConfigError("config file is empty", source=config_path)

    if config_path.suffix.lower() == ".toml":
        try:
            parsed = tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"failed to parse TOML config: {exc}", source=config_path) from exc
    else:
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ConfigError("failed to parse YAML config", source=config_path) from exc

    if not isinstance(parsed, dict):
        raise ConfigError("config root must be a mapping", source=config_path)

    # sysdoc.toml style configs nest the fields under [document]
    if isinstance(parsed.get("document"), dict):
        parsed = {**parsed, **parsed["document"]}
    return parse_document_config(parsed, config_path)
