"""Project workspace: manifest, lifecycle settings, and downloaded assets."""

import json
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field

from .settings import LifecycleSettings


class AssetMetadata(BaseModel):
    """Metadata for a registered project asset."""
    asset_id: str
    filename: str
    type: str  # "qr"
    source: str = ""  # e.g. the link a QR code encodes
    dimensions: Optional[tuple[int, int]] = None


class Workspace(BaseModel):
    """Manages an announcements project directory and its manifest."""
    project_name: str
    root_path: Path
    settings: LifecycleSettings = Field(default_factory=LifecycleSettings)
    assets: dict[str, AssetMetadata] = Field(default_factory=dict)

    model_config = {"arbitrary_types_allowed": True}

    @property
    def assets_dir(self) -> Path:
        return self.root_path / "assets"

    @property
    def qr_dir(self) -> Path:
        return self.assets_dir / "qr"

    @property
    def manifest_path(self) -> Path:
        return self.root_path / "project.json"

    @property
    def deck_path(self) -> Path:
        return self.root_path / "deck.json"

    def initialize(self) -> "Workspace":
        """Create the project directory structure."""
        self.qr_dir.mkdir(parents=True, exist_ok=True)
        self.save_manifest()
        return self

    def save_manifest(self):
        """Save the project manifest to disk."""
        data = {
            "project_name": self.project_name,
            "settings": self.settings.model_dump(),
            "assets": {k: v.model_dump() for k, v in self.assets.items()},
        }
        self.manifest_path.write_text(json.dumps(data, indent=2, default=str))

    @classmethod
    def load(cls, project_path: Path) -> "Workspace":
        """Load a workspace from an existing project directory."""
        manifest_path = project_path / "project.json"
        if not manifest_path.exists():
            raise FileNotFoundError(f"No project.json found in {project_path}")

        data = json.loads(manifest_path.read_text())
        assets = {
            k: AssetMetadata(**v) for k, v in data.get("assets", {}).items()
        }
        return cls(
            project_name=data["project_name"],
            root_path=project_path,
            settings=LifecycleSettings(**data.get("settings", {})),
            assets=assets,
        )

    def register_asset(self, asset: AssetMetadata) -> AssetMetadata:
        """Register an asset in the workspace manifest."""
        self.assets[asset.asset_id] = asset
        self.save_manifest()
        return asset

    def get_asset_path(self, asset_id: str) -> Optional[Path]:
        """Get the full path to an asset file."""
        asset = self.assets.get(asset_id)
        if not asset:
            return None
        type_dirs = {
            "qr": self.qr_dir,
        }
        base_dir = type_dirs.get(asset.type, self.assets_dir)
        return base_dir / asset.filename
