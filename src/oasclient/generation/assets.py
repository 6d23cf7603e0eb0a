from __future__ import annotations

from importlib import resources

from ..templates import ASSET_MODULES

TEMPLATES_PACKAGE = "oasclient.templates"


def load_assets() -> dict[str, str]:
    """Source of every runtime module shipped with a generated package, by file name."""
    root = resources.files(TEMPLATES_PACKAGE)
    return {
        f"{module}.py": root.joinpath(f"{module}.py").read_text(encoding="utf-8")
        for module in ASSET_MODULES
    }
