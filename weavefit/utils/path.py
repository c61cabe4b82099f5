#!filepath: weavefit/utils/path.py
from pathlib import Path
from typing import Optional

from weavefit.utils.logger import logs


class PathManager:
    """
    Project layout:

    <root>/
     ├── weavefit/            (package)
     │     └── config/base.yml
     ├── data/                (input tables)
     └── reports/<run_id>/    (analysis artifacts)

    Relative paths in config are resolved against root. Root is the
    source checkout holding the package (pyproject.toml beside it); an
    installed package has no checkout, so root falls back to cwd().
    """

    _root: Optional[Path] = None

    # ---------------------------------------------------------
    # root detection
    # ---------------------------------------------------------
    @classmethod
    def detect_root(cls, anchor: Path | None = None) -> Path:
        """
        weavefit/utils/path.py → parents[2] = project root
        """
        current = Path(anchor if anchor is not None else __file__).resolve()

        try:
            root = current.parents[2]
        except IndexError:
            root = None

        if root is None or not (root / "pyproject.toml").exists():
            logs.debug("[PathManager] no source checkout, root = cwd()")
            return Path.cwd()

        logs.debug(f"[PathManager] detect_root = {root}")
        return root

    @classmethod
    def root(cls) -> Path:
        if cls._root is None:
            cls._root = cls.detect_root()
        return cls._root

    @classmethod
    def set_root(cls, new_root: Path | str | None):
        if new_root is None:
            cls._root = None
        else:
            cls._root = Path(new_root).resolve()
        logs.debug(f"[PathManager] set_root = {cls._root}")

    @classmethod
    def resolve(cls, path: Path | str) -> Path:
        p = Path(path)
        return p if p.is_absolute() else cls.root() / p

    # ---------------------------------------------------------
    # Top-level dirs
    # ---------------------------------------------------------
    @classmethod
    def package_dir(cls) -> Path:
        return Path(__file__).resolve().parents[1]

    @classmethod
    def default_config_file(cls) -> Path:
        return cls.package_dir() / "config" / "base.yml"

    # ---------------------------------------------------------
    # reports/
    # ---------------------------------------------------------
    @classmethod
    def reports_dir(cls, output_dir: Path | str = "reports") -> Path:
        return cls.resolve(output_dir)

    @classmethod
    def run_dir(cls, run_id: str, output_dir: Path | str = "reports") -> Path:
        return cls.reports_dir(output_dir) / run_id
