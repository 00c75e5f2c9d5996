from asyncio import create_subprocess_exec

import logging
import os
import re
import shutil
from pathlib import Path
from subprocess import DEVNULL, PIPE

logger = logging.getLogger(__name__)

SD_LISTEN_FDS_START = 3


def get_bin(name: str) -> str:
    return shutil.which(name) or name


def redact_url(url: str) -> str:
    """Hide the credentials part of a clone url, for logging."""
    return re.sub(r'(?<=://)[^/@]+@', '***@', url)


def _describe(args: tuple[str | Path, ...]) -> list[str]:
    return [redact_url(str(arg)) for arg in args]


async def async_run(
    *args: str | Path,
    cwd: Path | str | None = None,
    env: dict[str, str] | None = None,
) -> tuple[int, bytes, bytes]:
    logger.debug(f'Running {_describe(args)}')
    p = await create_subprocess_exec(
        *args, cwd=cwd, env=env, stdin=DEVNULL, stdout=PIPE, stderr=PIPE
    )
    stdout, stderr = await p.communicate()
    logger.debug(f'Process exited with code {p.returncode}')
    return p.returncode, stdout, stderr


def inherited_listen_fd() -> int | None:
    """First socket handed over by systemd style socket activation, if any."""
    if os.getenv('LISTEN_PID', str(os.getpid())) != str(os.getpid()):
        return None
    try:
        count = int(os.getenv('LISTEN_FDS', '0'))
    except ValueError:
        return None
    return SD_LISTEN_FDS_START if count > 0 else None


GIT = get_bin('git')
