"""Helpers to load newspaper schema templates and derive shapes from them."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

DEFAULT_SECTIONS: Dict[str, str] = {"overview": "overview", "magic": "magic_tip"}


def templates_dir() -> Path:
    """Directory holding the bundled template files."""
    return Path(__file__).resolve().parent / "templates"


@dataclass(frozen=True)
class SchemaTemplate:
    """One newspaper variant: its JSON schema plus prompt and routing hints."""

    name: str
    title: str
    language: str
    schema: Dict[str, Any]
    sections: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SECTIONS))
    list_field: str = "news"
    requirements: List[str] = field(default_factory=list)

    @property
    def properties(self) -> Dict[str, Any]:
        return self.schema.get("properties", {})

    def skeleton(self, date_key: str) -> Dict[str, Any]:
        """Example document for the prompt, with descriptions as placeholders."""
        return {
            name: _example_value(name, spec, date_key)
            for name, spec in self.properties.items()
        }

    def fallback_payload(self, date_key: str, raw_text: str) -> Dict[str, Any]:
        """Empty document that keeps the unparsed model output for diagnosis."""
        payload = {name: _empty_value(spec) for name, spec in self.properties.items()}
        if "date" in payload:
            payload["date"] = date_key
        payload["raw_text"] = raw_text
        return payload


def _example_value(name: str, spec: Dict[str, Any], date_key: str) -> Any:
    if name == "date":
        return date_key
    kind = spec.get("type")
    if kind == "array":
        item_spec = spec.get("items", {})
        items = []
        for idx in range(spec.get("minItems", 1)):
            item = _example_value("", item_spec, date_key)
            if isinstance(item, dict) and "id" in item:
                item["id"] = str(idx + 1)
            items.append(item)
        return items
    if kind == "object":
        return {
            key: _example_value(key, sub, date_key)
            for key, sub in spec.get("properties", {}).items()
        }
    return spec.get("description", "...")


def _empty_value(spec: Dict[str, Any]) -> Any:
    kind = spec.get("type")
    if kind == "string":
        return ""
    if kind == "array":
        return []
    if kind == "object":
        return {}
    return None


def _resolve_path(name_or_path: str | Path) -> Path:
    candidate = Path(name_or_path)
    if candidate.suffix == ".json":
        return candidate.expanduser()
    return templates_dir() / f"{name_or_path}.json"


@lru_cache(maxsize=8)
def load_template(name_or_path: str | Path = "plain") -> SchemaTemplate:
    """
    Load a bundled template by name or a template file by path.

    Raises ValueError when the file is missing or its schema is not a valid
    JSON Schema.
    """
    path = _resolve_path(name_or_path)
    if not path.exists():
        available = ", ".join(sorted(p.stem for p in templates_dir().glob("*.json")))
        raise ValueError(
            f"Unknown schema template {str(name_or_path)!r}; bundled templates: {available}."
        )
    data = json.loads(path.read_text(encoding="utf-8"))
    schema = data.get("schema")
    if not isinstance(schema, dict):
        raise ValueError(f"Template {path.name} has no 'schema' object.")
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as exc:
        raise ValueError(f"Template {path.name} has an invalid schema: {exc.message}") from exc

    return SchemaTemplate(
        name=data.get("name", path.stem),
        title=data.get("title", "Daily Prophet"),
        language=data.get("language", "Russian"),
        schema=schema,
        sections={k.lower(): v for k, v in data.get("sections", DEFAULT_SECTIONS).items()},
        list_field=data.get("list_field", "news"),
        requirements=list(data.get("requirements", [])),
    )
