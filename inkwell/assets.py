"""Static file passthrough for Inkwell.

Copies the stylesheet, the ``assets`` directory and the ``public``
directory into the output tree. Files are copied byte for byte; nothing is
minified or converted. A failed copy aborts the build.

Key class:
- AssetPipeline: Copies all passthrough files for one build.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from .config import SiteConfig
from .utils import copy_tree

STYLESHEET_OUTPUT = "styles.css"


class AssetPipeline:
    """Copies passthrough files into the output directory.

    Attributes:
        project_root: Root directory of the project.
        output_dir: Directory where files are written.
        stylesheet: Source stylesheet, copied to ``styles.css``.
        assets_dir: Directory copied to ``{output}/assets``.
        public_dir: Directory copied to the output root.
    """

    def __init__(self, project_root: Path, output_dir: Path, config: SiteConfig):
        """Initialize the asset pipeline.

        Args:
            project_root: Root directory of the project.
            output_dir: Directory where built files will be placed.
            config: Site configuration naming the source locations.
        """
        self.project_root = project_root
        self.output_dir = output_dir
        self.stylesheet = project_root / config.stylesheet
        self.assets_dir = project_root / config.assets_dir
        self.public_dir = project_root / config.public_dir

    def run(self) -> list[Path]:
        """Copy the stylesheet, assets and public files.

        Missing ``assets`` or ``public`` directories are treated as empty.

        Returns:
            Destination paths written.

        Raises:
            FileNotFoundError: If the stylesheet does not exist.
            OSError: If any copy fails.
        """
        written = [self._copy_stylesheet()]
        written.extend(copy_tree(self.assets_dir, self.output_dir / "assets"))
        written.extend(copy_tree(self.public_dir, self.output_dir))
        return written

    def _copy_stylesheet(self) -> Path:
        target = self.output_dir / STYLESHEET_OUTPUT
        shutil.copyfile(self.stylesheet, target)
        return target
