"""Configured vault roots and safe note file resolution."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

NOTE_SUFFIX = ".md"


@dataclass(frozen=True)
class Vault:
    """A directory of dot-named markdown notes."""

    name: str
    root: Path


class VaultConfigurationError(ValueError):
    """Raised when vault configuration is invalid."""


def parse_vault_paths(raw: str) -> dict[str, Vault]:
    """Parse a comma separated list of vault paths into :class:`Vault` objects."""

    if not raw:
        raise VaultConfigurationError("VAULT_PATHS must be provided")

    vaults: dict[str, Vault] = {}
    for chunk in raw.split(","):
        candidate = chunk.strip()
        if not candidate:
            continue
        path = Path(candidate).expanduser()
        if not path.is_absolute():
            raise VaultConfigurationError(f"Vault path must be absolute: {candidate!r}")
        root = path.resolve(strict=False)
        name = root.name or root.stem
        if name in vaults:
            raise VaultConfigurationError(f"Duplicate vault name detected: {name}")
        vaults[name] = Vault(name=name, root=root)

    if not vaults:
        raise VaultConfigurationError("No valid vault paths provided")

    return vaults


def ensure_in_vault(path: Path, vault: Vault) -> Path:
    """Return *path* resolved, refusing anything outside *vault*."""

    resolved = path.resolve(strict=False)
    try:
        resolved.relative_to(vault.root.resolve(strict=False))
    except ValueError:
        raise PermissionError(f"Path {resolved} is outside vault {vault.name!r}") from None
    return resolved


def note_file(vault: Vault, note_path: str) -> Path:
    """Return the markdown file backing the dot path *note_path* in *vault*."""

    if not note_path or "/" in note_path or "\\" in note_path:
        raise ValueError(f"Invalid note path: {note_path!r}")
    return ensure_in_vault(vault.root / f"{note_path}{NOTE_SUFFIX}", vault)


def select_vault(vaults: Mapping[str, Vault], name: str | None = None) -> Vault:
    """Pick the vault named *name*, or the only configured vault."""

    if name is not None:
        try:
            return vaults[name]
        except KeyError:
            raise ValueError(f"Unknown vault: {name!r}") from None

    if len(vaults) == 1:
        return next(iter(vaults.values()))

    raise ValueError("Multiple vaults configured; specify the 'vault' parameter")


def list_vault_names(vaults: Iterable[Vault]) -> list[str]:
    """Return vault names sorted alphabetically."""

    return sorted(v.name for v in vaults)
