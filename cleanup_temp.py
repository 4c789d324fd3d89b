import argparse
import logging
import os
import stat
import time

import config
from utils.errors import EntryAccessError, ListingError
from utils.log_utils import setup_logging

logger = logging.getLogger(__name__)

def _list_entries(path):
    try:
        return os.listdir(path)
    except OSError as e:
        raise ListingError(path, cause=e) from e

def _expire_entry(fpath, now, max_age_sec):
    """Remove fpath if it is a file older than max_age_sec. Returns True when removed."""
    try:
        st = os.stat(fpath)
    except OSError as e:
        raise EntryAccessError(fpath, cause=e, action="stat") from e

    if not stat.S_ISREG(st.st_mode):
        logger.debug(f"[cleanup] Skipping non-file entry {fpath}", extra={"path": fpath})
        return False
    if now - st.st_mtime <= max_age_sec:
        return False

    try:
        os.remove(fpath)
    except OSError as e:
        raise EntryAccessError(fpath, cause=e, action="delete") from e
    return True

def cleanup_temp(path=config.TEMP_UPLOAD_DIR, max_age_sec=config.CLEANUP_MAX_AGE_SEC, now=None):
    if max_age_sec < 0:
        raise ValueError("max_age_sec must be >= 0")
    if now is None:
        now = time.time()

    logger.info(f"[cleanup] Scanning {path}", extra={"path": path})
    try:
        entries = _list_entries(path)
    except ListingError as e:
        # skip this cycle; the next scheduled one retries
        logger.error(f"[cleanup] {e}", extra={"path": path})
        return 0

    deleted = []
    for fname in entries:
        fpath = os.path.join(path, fname)
        try:
            if _expire_entry(fpath, now, max_age_sec):
                deleted.append(fname)
        except EntryAccessError as e:
            logger.error(f"[cleanup] {e}", extra={"path": fpath})

    logger.info(
        f"[cleanup] Checked {len(entries)} files, removed {len(deleted)} old files: {deleted}",
        extra={"path": path, "examined": len(entries), "deleted": len(deleted)},
    )
    return len(deleted)

def main(argv=None):
    parser = argparse.ArgumentParser(description="Remove expired temporary uploads.")
    parser.add_argument("--path", default=config.TEMP_UPLOAD_DIR)
    parser.add_argument("--max-age-sec", type=float, default=config.CLEANUP_MAX_AGE_SEC)
    args = parser.parse_args(argv)

    setup_logging(config.LOG_LEVEL, config.LOG_FORMAT)
    return cleanup_temp(args.path, args.max_age_sec)

if __name__ == "__main__":
    main()
