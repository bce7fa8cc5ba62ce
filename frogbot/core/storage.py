"""이 파일은 .py 저장 경로 모듈로 브랜치 다운로드용 임시 작업 공간을 관리합니다."""

from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import TEMP_DIR_PREFIX

logger = logging.getLogger(__name__)


@contextmanager
def temp_workspace(label: str = "") -> Iterator[Path]:
    # PR마다 독립된 디렉토리를 만들고, 성공/실패와 관계없이 반드시 삭제한다.
    prefix = f"{TEMP_DIR_PREFIX}{label}-" if label else TEMP_DIR_PREFIX
    path = Path(tempfile.mkdtemp(prefix=prefix))
    logger.debug("Created workspace %s", path)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Removed workspace %s", path)
