import os
import logging

from utils.errors import DirectoryCreationError

logger = logging.getLogger(__name__)

def ensure_directory(path):
    if os.path.isdir(path):
        return True
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        # writers to this path will fail on their own later
        err = DirectoryCreationError(path, cause=e)
        logger.error(str(err), extra={"path": path})
        return False
    logger.info(f"Created directory {path}", extra={"path": path})
    return True
