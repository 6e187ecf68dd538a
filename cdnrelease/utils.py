"""General utils functions"""

import hashlib
import shutil
from pathlib import Path
from typing import List

import humanfriendly


def sha1_checksum(path: Path, chunk_size: int = 65536) -> str:
    """Hex SHA-1 digest of a file."""
    digest = hashlib.sha1()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


def format_size(num_bytes) -> str:
    if num_bytes is None:
        return "-"
    return humanfriendly.format_size(num_bytes)


def collect_files(directory: Path, base_dir: Path) -> List[str]:
    """Relative POSIX paths of every file below ``directory``, sorted."""
    return sorted(
        path.relative_to(base_dir).as_posix()
        for path in Path(directory).rglob("*")
        if path.is_file()
    )


def replace_tree(src: Path, dst: Path) -> None:
    """Make ``dst`` a byte-identical copy of the directory ``src``."""
    if dst.exists():
        shutil.rmtree(dst)
    shutil.copytree(src, dst)


def copy_or_remove(src: Path, dst: Path) -> bool:
    """
    Copy ``src`` over ``dst``; when ``src`` does not exist remove ``dst``.

    Returns:
        True if a file was copied
    """
    if src.is_file():
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)
        return True
    if dst.exists():
        dst.unlink()
    return False
