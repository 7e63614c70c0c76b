import os
from dataclasses import dataclass
from pathlib import Path

from thumbnails.types import ThumbnailType


PROJECT_ROOT = Path(__file__).resolve().parent.parent

def _is_container_runtime():
    if os.path.exists("/.dockerenv"):
        return True
    return os.path.isdir("/data")


def _default_root_paths():
    if _is_container_runtime():
        return {
            "data": Path("/data"),
            "logs": Path("/logs"),
        }
    base = PROJECT_ROOT / "data"
    return {
        "data": base,
        "logs": base / "logs",
    }


_DEFAULTS = _default_root_paths()

DATA_DIR = Path(os.environ.get("THUMBNAILER_DATA_DIR", _DEFAULTS["data"])).resolve()
THUMBNAILS_DIR = Path(os.environ.get("THUMBNAILER_THUMBNAILS_DIR", DATA_DIR / "thumbnails")).resolve()
PREVIEWS_DIR = Path(os.environ.get("THUMBNAILER_PREVIEWS_DIR", DATA_DIR / "previews")).resolve()
VIDEOS_DIR = Path(os.environ.get("THUMBNAILER_VIDEOS_DIR", DATA_DIR / "videos")).resolve()
LOG_DIR = Path(os.environ.get("THUMBNAILER_LOG_DIR", _DEFAULTS["logs"])).resolve()
DB_PATH = Path(os.environ.get("THUMBNAILER_DB_PATH", DATA_DIR / "database" / "db.sqlite")).resolve()
DEFAULT_AUDIO_BACKGROUND = Path(
    os.environ.get("THUMBNAILER_AUDIO_BACKGROUND", DATA_DIR / "assets" / "default-audio-background.jpg")
).resolve()


@dataclass(frozen=True)
class StoragePaths:
    thumbnails_dir: str
    previews_dir: str
    videos_dir: str
    log_dir: str
    db_path: str
    default_audio_background: str

    def dir_for(self, thumbnail_type: ThumbnailType) -> str:
        """Return the directory holding artifacts of ``thumbnail_type``."""
        if thumbnail_type is ThumbnailType.MINIATURE:
            return self.thumbnails_dir
        if thumbnail_type is ThumbnailType.PREVIEW:
            return self.previews_dir
        raise ValueError(f"Unknown thumbnail type: {thumbnail_type!r}")


def ensure_dir(path):
    if path:
        os.makedirs(path, exist_ok=True)


def _is_within_base(path, base_dir):
    real = os.path.realpath(path)
    base = os.path.realpath(base_dir)
    return os.path.commonpath([real, base]) == base


def resolve_dir(path, base_dir):
    if not path:
        return base_dir
    if os.path.isabs(path):
        resolved = os.path.abspath(path)
    else:
        resolved = os.path.abspath(os.path.join(base_dir, path))
    if not _is_within_base(resolved, base_dir):
        # All writes stay under explicit base dirs.
        raise ValueError(f"Path must be within base directory: {base_dir}")
    return resolved


def build_storage_paths(root=None):
    """Resolve storage directories, creating them when missing.

    ``root`` relocates every directory under one base (tests, one-off runs);
    without it the environment-driven module defaults apply.
    """
    if root is not None:
        base = Path(root).resolve()
        thumbnails_dir = base / "thumbnails"
        previews_dir = base / "previews"
        videos_dir = base / "videos"
        log_dir = base / "logs"
        db_path = base / "database" / "db.sqlite"
        background = base / "assets" / DEFAULT_AUDIO_BACKGROUND.name
    else:
        thumbnails_dir = THUMBNAILS_DIR
        previews_dir = PREVIEWS_DIR
        videos_dir = VIDEOS_DIR
        log_dir = LOG_DIR
        db_path = DB_PATH
        background = DEFAULT_AUDIO_BACKGROUND

    for d in (
        thumbnails_dir,
        previews_dir,
        videos_dir,
        log_dir,
        db_path.parent,
        background.parent,
    ):
        ensure_dir(d)

    return StoragePaths(
        thumbnails_dir=str(thumbnails_dir),
        previews_dir=str(previews_dir),
        videos_dir=str(videos_dir),
        log_dir=str(log_dir),
        db_path=str(db_path),
        default_audio_background=str(background),
    )
