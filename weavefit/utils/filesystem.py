#!filepath: weavefit/utils/filesystem.py
from pathlib import Path

from weavefit.utils.logger import logs


class FileSystem:
    """
    File system helpers
    - create directories on demand
    - atomic text writes (tmp file → rename)
    """

    @staticmethod
    def ensure_dir(path: str | Path) -> Path:
        p = Path(path)
        if not p.exists():
            p.mkdir(parents=True, exist_ok=True)
            logs.debug(f"[FS] mkdir: {p}")
        return p

    @staticmethod
    def safe_write_text(path: str | Path, text: str) -> Path:
        """
        Atomic write:
            1) write tmp file
            2) rename → final file
        """
        path = Path(path)
        FileSystem.ensure_dir(path.parent)

        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)

        logs.debug(f"[FS] atomic write done: {path}")
        return path
