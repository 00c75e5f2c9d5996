import asyncio
import logging
import shutil
from pathlib import Path
from tempfile import mkdtemp
from typing import Awaitable, Callable

from pushbuild.exceptions import SetupError
from pushbuild.runner.utils import checkout_branch, overlay_dockerfile, read_platform
from pushbuild.runtime import ContainerRuntime
from pushbuild.schemas import (
    CommandResult,
    ExecutionOutcome,
    RunAndTestFailure,
    RunFailure,
    SetupErrorKind,
    Success,
    TestFailure,
)

logger = logging.getLogger(__name__)

# Every platform image is started as `<entrypoint> <server> <player>`
RUN_ARGS = ('localhost', 'player')
TEST_ENTRYPOINT = './test.sh'

Checkout = Callable[[str, str, Path], Awaitable[None]]


def classify(run: CommandResult, test: CommandResult) -> ExecutionOutcome:
    match (run.ok, test.ok):
        case (True, True):
            return Success(test=test.output)
        case (False, False):
            return RunAndTestFailure(run=run.output, test=test.output)
        case (False, True):
            return RunFailure(run=run.output)
        case _:
            return TestFailure(test=test.output)


class Pipeline:
    """Clones a submission, builds its platform image and runs it twice.

    `run` returns the outcome of the run and test phases, or raises
    `SetupError` when the image could not be produced.
    """

    runtime: ContainerRuntime
    dockerfiles_dir: Path
    checkout: Checkout

    def __init__(
        self,
        runtime: ContainerRuntime,
        dockerfiles_dir: Path,
        checkout: Checkout = checkout_branch,
    ):
        self.runtime = runtime
        self.dockerfiles_dir = dockerfiles_dir
        self.checkout = checkout

    async def run(self, clone_url: str, branch: str) -> ExecutionOutcome:
        try:
            image = await self.build_image(clone_url, branch)
            try:
                run = await self.runtime.run(image, RUN_ARGS)
                test = await self.runtime.run(image, entrypoint=TEST_ENTRYPOINT)
            finally:
                await self.remove_image(image)
        except OSError as e:
            raise SetupError(SetupErrorKind.filesystem, str(e)) from e

        outcome = classify(run, test)
        logger.info(f'{branch}: {outcome.kind}')
        return outcome

    async def build_image(self, clone_url: str, branch: str) -> str:
        # Blocking filesystem calls on the clone go through worker threads
        workdir = Path(await asyncio.to_thread(mkdtemp, suffix='submission'))
        try:
            await self.checkout(clone_url, branch, workdir)
            logger.info(f'Checked out {branch}')

            platform = await asyncio.to_thread(read_platform, workdir)
            logger.info(f'Using platform {platform}')
            await asyncio.to_thread(
                overlay_dockerfile, self.dockerfiles_dir, platform, workdir
            )

            build = await self.runtime.build(workdir)
        finally:
            await asyncio.to_thread(shutil.rmtree, workdir)

        if not build.ok:
            raise SetupError(
                SetupErrorKind.container_build,
                f'Container build exited with code {build.exit_code}',
                build.output,
            )
        image = build.output.stdout.strip()
        if not image:
            raise SetupError(
                SetupErrorKind.container_build,
                'Container build did not report an image id',
                build.output,
            )
        logger.info(f'Built image {image}')
        return image

    async def remove_image(self, image: str):
        try:
            result = await self.runtime.remove_image(image)
        except (OSError, SetupError):
            logger.exception(f'Failed to delete image {image}')
            return
        if result.ok:
            logger.info(f'Deleted image {image}')
        else:
            logger.error(
                f'Failed to delete image {image}:\n'
                f'{result.output.stdout}\n{result.output.stderr}'
            )
