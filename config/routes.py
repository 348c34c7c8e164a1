"""LLM routes and the operation-to-route registry read from ``app_config.json``."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, Mapping, Tuple, Type

from pydantic import BaseModel, Field, model_validator


class LlmRoute(BaseModel):
    """One chat-completions endpoint and how to call it."""

    name: str
    base_url: str
    endpoint: str
    model: str
    timeout_s: float = Field(ge=0.1)
    api_key_env: str | None = None
    response_format: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    enforce_json: bool = True


class AppConfig(BaseModel):
    """Named routes plus the route each AI operation uses."""

    llm_routes: Dict[str, LlmRoute]
    registry: Dict[str, str]

    @model_validator(mode="after")
    def _registry_targets_exist(self) -> "AppConfig":
        dangling = sorted(key for key, route_id in self.registry.items() if route_id not in self.llm_routes)
        if dangling:
            raise ValueError(f"Registry entries point at unknown routes: {', '.join(dangling)}")
        return self

    def route_for(self, key: str) -> LlmRoute:
        try:
            return self.llm_routes[self.registry[key]]
        except KeyError as exc:
            raise KeyError(f"Registry entry missing for '{key}'") from exc


def load_config(path: Path) -> AppConfig:
    return _load_cached(Path(path).resolve(), Path(path).stat().st_mtime_ns)


@lru_cache(maxsize=8)
def _load_cached(path: Path, mtime_ns: int) -> AppConfig:  # Keyed on mtime so edits are picked up
    return AppConfig.model_validate_json(path.read_text(encoding="utf-8"))


def resolve_registry(
    cfg: AppConfig, schemas: Mapping[str, Type[BaseModel]]
) -> Dict[str, Tuple[LlmRoute, Type[BaseModel]]]:
    """Pair each requested operation with its route and output schema."""

    resolved: Dict[str, Tuple[LlmRoute, Type[BaseModel]]] = {}
    for key, schema in schemas.items():
        if not (isinstance(schema, type) and issubclass(schema, BaseModel)):
            raise TypeError(f"Schema for '{key}' must be a pydantic model")
        resolved[key] = (cfg.route_for(key), schema)
    return resolved


def load_app_registry(
    path: Path, schemas: Mapping[str, Type[BaseModel]]
) -> Dict[str, Tuple[LlmRoute, Type[BaseModel]]]:
    return resolve_registry(load_config(path), schemas)


__all__ = ["AppConfig", "LlmRoute", "load_app_registry", "load_config", "resolve_registry"]
