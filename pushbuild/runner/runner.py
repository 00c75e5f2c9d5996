import logging

from pushbuild.exceptions import SetupError
from pushbuild.ledger import ResultLedger
from pushbuild.runner.pipeline import Pipeline
from pushbuild.schemas import SetupErrorKind, SetupFailed, outcome_to_log_result

logger = logging.getLogger(__name__)


class SubmissionRunner:
    """Runs the pipeline for a ledger entry and records what came out of it."""

    pipeline: Pipeline
    ledger: ResultLedger

    def __init__(self, pipeline: Pipeline, ledger: ResultLedger):
        self.pipeline = pipeline
        self.ledger = ledger

    async def run(self, index: int, clone_url: str, branch: str):
        logger.info(f'Submission {index}: testing {branch}')
        try:
            outcome = await self.pipeline.run(clone_url, branch)
        except SetupError as e:
            logger.warning(f'Submission {index}: setup error ({e.kind.value}): {e}')
            result = SetupFailed(error_kind=e.kind, message=e.message, output=e.output)
        except Exception as e:
            logger.exception(f'Submission {index}: unexpected error')
            result = SetupFailed(error_kind=SetupErrorKind.internal, message=repr(e))
        else:
            result = outcome_to_log_result(outcome)
        self.ledger.complete_at(index, result)
