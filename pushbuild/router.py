import logging
from pydantic import BaseModel
from typing import Sequence

from pushbuild.config import RepoSettings
from pushbuild.dispatch import Dispatcher
from pushbuild.ledger import ResultLedger
from pushbuild.runner import SubmissionRunner
from pushbuild.schemas import LogEntry
from pushbuild.schemas.webhook import PushEvent

logger = logging.getLogger(__name__)

REF_PREFIX = 'refs/heads/'
ACCEPTED_BRANCHES = ('master', 'submission')
SUBMISSION_BRANCH_PREFIX = 'submissions/'

MSG_ACCEPTED = 'Running Test!'
MSG_SKIPPED = 'Skipping none master|submission branch'
MSG_UNKNOWN_REPO = 'Unknown Repository {url}'


class RouteResult(BaseModel):
    accepted: bool
    message: str
    index: int | None = None


def branch_from_ref(ref: str) -> str:
    return ref.removeprefix(REF_PREFIX)


def is_branch_accepted(branch: str) -> bool:
    return branch in ACCEPTED_BRANCHES or branch.startswith(SUBMISSION_BRANCH_PREFIX)


class SubmissionRouter:
    repos: Sequence[RepoSettings]
    ledger: ResultLedger
    dispatcher: Dispatcher
    runner: SubmissionRunner

    def __init__(
        self,
        repos: Sequence[RepoSettings],
        ledger: ResultLedger,
        dispatcher: Dispatcher,
        runner: SubmissionRunner,
    ):
        self.repos = repos
        self.ledger = ledger
        self.dispatcher = dispatcher
        self.runner = runner

    def find_repo(self, http_url: str) -> RepoSettings | None:
        for repo in self.repos:
            if repo.match_url == http_url:
                return repo
        return None

    def submit(self, event: PushEvent) -> RouteResult:
        # Must be called from the event loop that runs the pipelines
        branch = branch_from_ref(event.ref)
        # Checked for every repository alike, before looking the repository up
        if not is_branch_accepted(branch):
            logger.info(f'Skipping branch {branch}')
            return RouteResult(accepted=False, message=MSG_SKIPPED)

        url = event.repository.git_http_url
        repo = self.find_repo(url)
        if repo is None:
            logger.info(f'Unknown repository {url}')
            return RouteResult(
                accepted=False, message=MSG_UNKNOWN_REPO.format(url=url)
            )

        index = self.ledger.append(LogEntry(repository=repo.match_url, branch=branch))
        logger.info(f'Submission {index}: accepted {repo.match_url} {branch}')
        self.dispatcher.spawn(
            self.runner.run(index, repo.resolved_clone_url, branch)
        )
        return RouteResult(accepted=True, message=MSG_ACCEPTED, index=index)
