"""FastMCP server exposing the note lookup."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar, cast

from dotenv import load_dotenv
from fastmcp import FastMCP
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from .lookup import highlight_span, resolve
from .models import SEPARATOR, CreatePlaceholder, Found, Suggestion
from .security import build_security_middleware
from .tree import ROOT_NAME, VaultNotes, generate_title, render_frontmatter, uses_titlecase
from .vaults import Vault, list_vault_names, note_file, parse_vault_paths, select_vault

TToolFunc = TypeVar("TToolFunc", bound=Callable[..., Any])

DEFAULT_MAX_RESULTS = 50

load_dotenv()

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Settings:
    vaults: Mapping[str, Vault]
    host: str
    port: int
    shared_secret: str | None
    log_level: str
    max_results: int = DEFAULT_MAX_RESULTS


@dataclass(slots=True)
class LookupService:
    """Lookup, open and create notes across the configured vaults."""

    vaults: Mapping[str, Vault]
    max_results: int = DEFAULT_MAX_RESULTS

    def list_available_vaults(self) -> dict[str, list[str]]:
        return {"vaults": list_vault_names(self.vaults.values())}

    def collections(self) -> list[VaultNotes]:
        return [VaultNotes.load(self.vaults[name]) for name in list_vault_names(self.vaults.values())]

    def _describe(self, suggestion: Suggestion, query: str) -> dict[str, Any]:
        if isinstance(suggestion, CreatePlaceholder):
            return {
                "kind": "create",
                "path": query.strip(),
                "title": "Create New",
                "exists": False,
            }
        entry = suggestion.entry
        span = highlight_span(entry.path, query)
        return {
            "kind": "note",
            "path": entry.path,
            "title": entry.title,
            "vault": entry.collection,
            "exists": entry.exists,
            "highlight": list(span) if span else None,
        }

    def lookup(self, query: str, max_results: int | None = None) -> dict[str, Any]:
        """Rank notes for *query*; a negative *max_results* returns every suggestion."""

        limit = self.max_results if max_results is None else max_results
        try:
            suggestions = resolve(query, self.collections())
        except Exception as exc:
            return {"ok": False, "error": str(exc)}

        if limit >= 0:
            suggestions = suggestions[:limit]
        return {"ok": True, "results": [self._describe(s, query) for s in suggestions]}

    def read_note(self, path: str, vault: str | None = None) -> dict[str, Any]:
        try:
            target_vault = select_vault(self.vaults, vault)
            target = note_file(target_vault, path)
        except Exception as exc:
            return {"ok": False, "error": str(exc), "path": path, "exists": False}

        if target.exists():
            return {
                "ok": True,
                "path": str(target),
                "vault": target_vault.name,
                "exists": True,
                "content": target.read_text(encoding="utf-8"),
            }
        return {
            "ok": True,
            "path": str(target),
            "vault": target_vault.name,
            "exists": False,
            "content": "",
        }

    def create_note(
        self, path: str, vault: str | None = None, omit_root: bool | None = None
    ) -> dict[str, Any]:
        note_path = path.strip()
        root_prefix = f"{ROOT_NAME}{SEPARATOR}"
        if note_path.lower().startswith(root_prefix):
            if omit_root is None:
                return {
                    "ok": False,
                    "error": f"Path starts with '{root_prefix}'; set omit_root to confirm",
                    "path": note_path,
                }
            if omit_root:
                note_path = note_path[len(root_prefix) :]

        try:
            target_vault = select_vault(self.vaults, vault)
            target = note_file(target_vault, note_path)
            if target.exists():
                return {"ok": False, "error": "File already exists", "path": str(target)}
            leaf = note_path.split(SEPARATOR)[-1]
            title = generate_title(leaf, uses_titlecase(note_path))
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(render_frontmatter({"title": title}), encoding="utf-8")
        except Exception as exc:
            return {"ok": False, "error": str(exc)}

        logger.info("Created note %s in vault %s", note_path, target_vault.name)
        return {"ok": True, "path": str(target), "vault": target_vault.name, "title": title}

    def choose(self, query: str, index: int = 0, vault: str | None = None) -> dict[str, Any]:
        """Act on the *index*-th suggestion for *query*: open it or create it."""

        if index < 0:
            return {"ok": False, "error": f"No suggestion at index {index}"}

        try:
            suggestions = resolve(query, self.collections())
            suggestion = suggestions[index]
        except IndexError:
            return {"ok": False, "error": f"No suggestion at index {index}"}
        except Exception as exc:
            return {"ok": False, "error": str(exc)}

        if isinstance(suggestion, Found):
            entry = suggestion.entry
            if entry.exists:
                return self.read_note(entry.path, entry.collection)
            return self.create_note(entry.path, vault or entry.collection)
        return self.create_note(query, vault)


def load_settings() -> Settings:
    """Load configuration from environment variables."""

    raw_vaults = os.environ.get("VAULT_PATHS", "")
    vaults = parse_vault_paths(raw_vaults)

    host = os.environ.get("HOST", "0.0.0.0")  # noqa: S104 (intentional bind)
    port = int(os.environ.get("PORT", "8000"))
    shared_secret = os.environ.get("MCP_SHARED_SECRET")
    max_results = int(os.environ.get("LOOKUP_MAX_RESULTS", str(DEFAULT_MAX_RESULTS)))

    log_level = os.environ.get("LOG_LEVEL", "info").upper()
    logging.basicConfig(level=getattr(logging, log_level, logging.INFO))

    return Settings(
        vaults=vaults,
        host=host,
        port=port,
        shared_secret=shared_secret,
        log_level=log_level,
        max_results=max_results,
    )


def create_server(settings: Settings | None = None) -> tuple[FastMCP, list[Middleware]]:
    """Create a configured :class:`FastMCP` instance and its security middleware."""

    settings = settings or load_settings()
    server = FastMCP(
        "Note Lookup",
        instructions=(
            "Jump to or create hierarchical notes. Prefix a query with '?' to search titles."
        ),
    )

    security_middleware = build_security_middleware(settings.shared_secret)

    service = LookupService(settings.vaults, settings.max_results)

    def tool(*args: Any, **kwargs: Any) -> Callable[[TToolFunc], TToolFunc]:
        decorator = server.tool(*args, **kwargs)
        return cast(Callable[[TToolFunc], TToolFunc], decorator)

    @tool()
    async def list_available_vaults() -> dict[str, list[str]]:
        return service.list_available_vaults()

    @tool()
    async def lookup(query: str, max_results: int | None = None) -> dict[str, Any]:
        """Suggest notes for *query*. A negative max_results returns every suggestion."""
        return service.lookup(query, max_results)

    @tool()
    async def read_note(path: str, vault: str | None = None) -> dict[str, Any]:
        return service.read_note(path, vault)

    @tool()
    async def create_note(
        path: str, vault: str | None = None, omit_root: bool | None = None
    ) -> dict[str, Any]:
        return service.create_note(path, vault, omit_root)

    @tool()
    async def choose(query: str, index: int = 0, vault: str | None = None) -> dict[str, Any]:
        return service.choose(query, index, vault)

    @server.custom_route("/mcp/health", methods=["GET"])
    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return cast(FastMCP, server), security_middleware


def main() -> None:
    """Run the FastMCP server."""

    settings = load_settings()
    server, security_middleware = create_server(settings)
    server.run(
        transport="http",
        host=settings.host,
        port=settings.port,
        middleware=security_middleware,
    )


if __name__ == "__main__":
    main()
