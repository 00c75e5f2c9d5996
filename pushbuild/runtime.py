import logging
from pathlib import Path
from typing import Protocol, Sequence

from pushbuild.exceptions import SetupError
from pushbuild.schemas import CommandResult, Output, SetupErrorKind
from pushbuild.utils import async_run, get_bin

logger = logging.getLogger(__name__)


def decode_output(stdout: bytes, stderr: bytes) -> Output:
    try:
        return Output(stdout=stdout.decode(), stderr=stderr.decode())
    except UnicodeDecodeError as e:
        raise SetupError(
            SetupErrorKind.decoding, f'Process output is not valid UTF-8: {e}'
        ) from e


class ContainerRuntime(Protocol):
    async def build(self, context: Path) -> CommandResult:
        ...

    async def run(
        self, image: str, args: Sequence[str] = (), entrypoint: str | None = None
    ) -> CommandResult:
        ...

    async def remove_image(self, image: str) -> CommandResult:
        ...


class DockerRuntime:
    """Talks to a docker compatible CLI (docker, podman)."""

    binary: str

    def __init__(self, binary: str = 'docker'):
        self.binary = get_bin(binary)

    async def _exec(self, *args: str | Path) -> CommandResult:
        exit_code, stdout, stderr = await async_run(self.binary, *args)
        return CommandResult(exit_code=exit_code, output=decode_output(stdout, stderr))

    async def build(self, context: Path) -> CommandResult:
        return await self._exec('build', '--rm', '--quiet', '--network=none', context)

    async def run(
        self, image: str, args: Sequence[str] = (), entrypoint: str | None = None
    ) -> CommandResult:
        cmd = ['run', '--rm']
        if entrypoint is not None:
            cmd.extend(('--entrypoint', entrypoint))
        return await self._exec(*cmd, image, *args)

    async def remove_image(self, image: str) -> CommandResult:
        return await self._exec('rmi', image)
