"""Analysis provider loading — platform dispatch with a package fallback.

A provider is anything exposing ``analyze(source) -> AnalysisResult``. The
built-in pure-Python extractor is one; a compiled build for a specific
platform can be dropped into the providers directory:

    <providers_dir>/
        fast-linux/
            provider.yaml     — metadata (name, version, targets, module)
            __init__.py       — defines analyze(source)

    provider.yaml:
        name: fast-linux
        version: 1.0.0
        targets: [linux-x64-gnu, linux-arm64-gnu]
        module: __init__.py

Usage:
    loader = ProviderLoader()
    provider = loader.load()          # resolves once, at startup
    result = provider.analyze(source)

Selection order is fixed: the first discovered provider whose ``targets``
include the current target, then the ``fallback_provider`` module. When
neither loads, a single ProviderLoadError lists every attempt.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import logging
import platform
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml
from pydantic import ValidationError

from solidity_analyzer.core.config import get_settings
from solidity_analyzer.core.errors import ProviderLoadError, ProviderResultError
from solidity_analyzer.core.types import AnalysisResult

logger = logging.getLogger(__name__)

ANY_TARGET = "*"
MANIFEST_NAMES = ("provider.yaml", "provider.yml")

_PLATFORMS = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "win32",
    "freebsd": "freebsd",
    "android": "android",
}

_ARCHES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "arm": "arm",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
}


# ── Target detection ─────────────────────────────────────────────────────────


def detect_target(
    system: str | None = None,
    machine: str | None = None,
    libc: str | None = None,
) -> str:
    """Return the target identifier of the running (or given) platform.

    Examples: ``linux-x64-gnu``, ``linux-arm64-musl``, ``darwin-arm64``,
    ``win32-x64-msvc``.
    """
    system = (system if system is not None else platform.system()).lower()
    machine = (machine if machine is not None else platform.machine()).lower()
    plat = _PLATFORMS.get(system, system)
    arch = _ARCHES.get(machine, machine)

    if plat == "linux":
        if _is_musl(libc):
            abi = "musleabihf" if arch == "arm" else "musl"
        else:
            abi = "gnueabihf" if arch == "arm" else "gnu"
        return f"linux-{arch}-{abi}"
    if plat == "win32":
        return f"win32-{arch}-msvc"
    if plat == "android" and arch == "arm":
        return "android-arm-eabi"
    return f"{plat}-{arch}"


def _is_musl(libc: str | None = None) -> bool:
    name = libc if libc is not None else platform.libc_ver()[0]
    return name != "glibc"


# ── Provider metadata ────────────────────────────────────────────────────────


@dataclass
class ProviderManifest:
    """Parsed provider.yaml metadata."""
    name: str
    version: str
    description: str = ""
    targets: list[str] = field(default_factory=lambda: [ANY_TARGET])
    module: str = ""
    path: Path | None = None

    def supports(self, target: str) -> bool:
        return ANY_TARGET in self.targets or target in self.targets


@dataclass
class LoadedProvider:
    """A resolved provider, ready to analyze sources."""
    name: str
    origin: str  # "manifest" or "fallback"
    analyze_fn: Callable[[str], Any]
    manifest: ProviderManifest | None = None
    checksum: str = ""

    def analyze(self, source: str) -> AnalysisResult:
        """Run the provider, accepting either a result model or its dict shape.

        Raises:
            ProviderResultError: the provider returned anything else.
        """
        raw = self.analyze_fn(source)
        try:
            return AnalysisResult.model_validate(raw)
        except ValidationError as e:
            reason = "; ".join(err["msg"] for err in e.errors())
            raise ProviderResultError(self.name, reason) from e


# ── Loader ───────────────────────────────────────────────────────────────────


class ProviderLoader:
    """Discovers provider manifests and selects the provider for a target."""

    def __init__(
        self,
        providers_dir: str | Path | None = None,
        fallback_provider: str | None = None,
    ) -> None:
        if providers_dir is None or fallback_provider is None:
            settings = get_settings()
            if providers_dir is None:
                providers_dir = settings.providers_dir
            if fallback_provider is None:
                fallback_provider = settings.fallback_provider
        self._providers_dir = Path(providers_dir).expanduser()
        self._fallback = fallback_provider

    @property
    def providers_dir(self) -> Path:
        return self._providers_dir

    def discover(self) -> list[ProviderManifest]:
        """Scan the providers directory for provider.yaml files."""
        manifests: list[ProviderManifest] = []

        if not self._providers_dir.is_dir():
            logger.debug("Providers directory %s does not exist", self._providers_dir)
            return manifests

        for candidate in sorted(self._providers_dir.iterdir()):
            if not candidate.is_dir():
                continue
            manifest_path = next(
                (candidate / n for n in MANIFEST_NAMES if (candidate / n).exists()),
                None,
            )
            if manifest_path is None:
                continue

            try:
                manifest = _parse_manifest(manifest_path)
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.warning("Failed to parse manifest at %s: %s", manifest_path, e)
                continue
            manifests.append(manifest)
            logger.debug("Discovered provider: %s v%s", manifest.name, manifest.version)

        return manifests

    def load(self, target: str | None = None) -> LoadedProvider:
        """Select and load the provider for ``target`` (default: this platform)."""
        target = target or detect_target()
        attempts: list[tuple[str, str]] = []

        matching = [m for m in self.discover() if m.supports(target)]
        if not matching:
            attempts.append((str(self._providers_dir), f"no provider declared for {target}"))

        for manifest in matching:
            try:
                provider = self._load_manifest(manifest)
            except Exception as e:
                attempts.append((manifest.name, str(e)))
                logger.warning("Failed to load provider '%s': %s", manifest.name, e)
                continue
            logger.info(
                "Loaded provider '%s' v%s",
                manifest.name,
                manifest.version,
                extra={"provider": manifest.name, "target": target},
            )
            return provider

        if self._fallback:
            try:
                provider = self._load_module(self._fallback)
            except Exception as e:
                attempts.append((self._fallback, str(e)))
            else:
                logger.info(
                    "Using fallback provider '%s'",
                    self._fallback,
                    extra={"provider": self._fallback, "target": target},
                )
                return provider

        raise ProviderLoadError(f"No analysis provider could be loaded for target '{target}'", attempts)

    def _load_manifest(self, manifest: ProviderManifest) -> LoadedProvider:
        provider_dir = manifest.path
        if provider_dir is None:
            raise FileNotFoundError(f"Provider '{manifest.name}' has no directory")

        candidates = [manifest.module] if manifest.module else ["__init__.py", "main.py"]
        module_file = next(
            (provider_dir / c for c in candidates if (provider_dir / c).is_file()),
            None,
        )
        if module_file is None:
            raise FileNotFoundError(f"No provider module in {provider_dir} (looked for {', '.join(candidates)})")

        mod_name = f"solidity_analyzer_provider_{_slug(manifest.name)}"
        spec = importlib.util.spec_from_file_location(mod_name, module_file)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot import {module_file}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(spec.name, None)
            raise

        return LoadedProvider(
            name=manifest.name,
            origin="manifest",
            analyze_fn=_analyze_attr(module, manifest.name),
            manifest=manifest,
            checksum=_compute_checksum(provider_dir),
        )

    @staticmethod
    def _load_module(dotted: str) -> LoadedProvider:
        module = importlib.import_module(dotted)
        return LoadedProvider(name=dotted, origin="fallback", analyze_fn=_analyze_attr(module, dotted))


def load_provider(target: str | None = None) -> LoadedProvider:
    """Load the provider for ``target`` using the configured directories."""
    return ProviderLoader().load(target)


# ── Helpers ──────────────────────────────────────────────────────────────────


def _parse_manifest(path: Path) -> ProviderManifest:
    """Parse a provider.yaml file into a ProviderManifest."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Invalid provider manifest: expected mapping at {path}")

    targets = data.get("targets", [ANY_TARGET])
    if isinstance(targets, str):
        targets = [targets]
    if not isinstance(targets, list):
        raise ValueError(f"Invalid provider manifest: 'targets' must be a list at {path}")

    return ProviderManifest(
        name=str(data.get("name", path.parent.name)),
        version=str(data.get("version", "0.0.0")),
        description=data.get("description", ""),
        targets=[str(t) for t in targets],
        module=data.get("module", ""),
        path=path.parent,
    )


def _analyze_attr(module: Any, name: str) -> Callable[[str], Any]:
    fn = getattr(module, "analyze", None)
    if not callable(fn):
        raise AttributeError(f"Provider '{name}' does not define a callable 'analyze'")
    return fn


def _compute_checksum(provider_dir: Path) -> str:
    """SHA-256 over every Python file in a provider directory."""
    hasher = hashlib.sha256()
    for py_file in sorted(provider_dir.rglob("*.py")):
        hasher.update(py_file.read_bytes())
    return hasher.hexdigest()


def _slug(name: str) -> str:
    return "".join(c if c.isalnum() else "_" for c in name.lower())
