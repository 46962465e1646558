from __future__ import annotations

from contextlib import contextmanager
import hashlib
import os
from pathlib import Path
import re
import tempfile
from typing import Iterator

from slugify import slugify

from . import config


def slug_from_title(title: str) -> str:
    slug = slugify(title)
    slug = re.sub(r"[^a-z0-9-]+", "-", slug.lower()).strip("-")
    if not slug:
        slug = hashlib.md5(title.encode("utf-8")).hexdigest()[:12]
    return slug


def output_path(title: str, base_dir: Path | None = None) -> Path:
    root = base_dir or config.out_dir()
    return root / f"{slug_from_title(title)}.pdf"


@contextmanager
def atomic_output(path: Path) -> Iterator[Path]:
    """
    Yield a temporary path beside ``path`` and move it into place on success.
    On any error the temporary file is removed and ``path`` is left untouched.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent)
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        yield tmp_path
        # mkstemp creates 0600; finished files get the usual umask-derived mode
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(tmp_path, 0o666 & ~umask)
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
