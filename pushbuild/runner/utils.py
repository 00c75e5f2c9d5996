import os
import re
import shutil
from pathlib import Path

from pushbuild.exceptions import SetupError
from pushbuild.runtime import decode_output
from pushbuild.schemas import SetupErrorKind
from pushbuild.utils import GIT, async_run, redact_url

PLATFORM_FILE = '.platform'
DOCKERFILE = 'Dockerfile'


async def checkout_branch(clone_url: str, branch: str, at: Path):
    exit_code, stdout, stderr = await async_run(
        GIT,
        'clone',
        '--depth',
        '1',
        '--single-branch',
        '--branch',
        branch,
        '--',
        clone_url,
        '.',
        cwd=at,
        # Never wait for credentials on the server's terminal
        env={**os.environ, 'GIT_TERMINAL_PROMPT': '0'},
    )
    if exit_code:
        output = decode_output(stdout, stderr)
        raise SetupError(
            SetupErrorKind.source_control,
            redact_url(output.stderr.strip())
            or f'git clone exited with code {exit_code}',
        )


def read_platform(workdir: Path) -> str:
    file = workdir / PLATFORM_FILE
    try:
        raw = file.read_bytes()
    except OSError as e:
        raise SetupError(
            SetupErrorKind.filesystem, f'Cannot read {PLATFORM_FILE}: {e.strerror}'
        ) from e
    try:
        platform = raw.decode().strip()
    except UnicodeDecodeError as e:
        raise SetupError(
            SetupErrorKind.decoding, f'{PLATFORM_FILE} is not valid UTF-8'
        ) from e
    # Used as a directory name below dockerfiles_dir
    if not re.fullmatch(r'\w[\w.\-]*', platform):
        raise SetupError(
            SetupErrorKind.configuration, f'Invalid platform name {platform!r}'
        )
    return platform


def overlay_dockerfile(dockerfiles_dir: Path, platform: str, workdir: Path):
    template = dockerfiles_dir / platform / DOCKERFILE
    if not template.is_file():
        raise SetupError(
            SetupErrorKind.filesystem, f'No {DOCKERFILE} for platform {platform}'
        )
    target = workdir / DOCKERFILE
    # The submitted file may be a symlink pointing outside the workspace
    target.unlink(missing_ok=True)
    shutil.copyfile(template, target)
