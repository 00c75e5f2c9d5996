from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Literal


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Output(_Frozen):
    stdout: str
    stderr: str


class CommandResult(_Frozen):
    exit_code: int
    output: Output

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class SetupErrorKind(str, Enum):
    source_control = 'source_control'
    filesystem = 'filesystem'
    configuration = 'configuration'
    decoding = 'decoding'
    container_build = 'container_build'
    internal = 'internal'


# Outcome of a pipeline whose image was built, keyed by the run/test exit status


class Success(_Frozen):
    kind: Literal['success'] = 'success'
    test: Output


class RunFailure(_Frozen):
    kind: Literal['run_failure'] = 'run_failure'
    run: Output


class TestFailure(_Frozen):
    __test__ = False

    kind: Literal['test_failure'] = 'test_failure'
    test: Output


class RunAndTestFailure(_Frozen):
    kind: Literal['run_and_test_failure'] = 'run_and_test_failure'
    run: Output
    test: Output


ExecutionOutcome = Annotated[
    Success | RunFailure | TestFailure | RunAndTestFailure,
    Field(discriminator='kind'),
]


# Ledger results


class InProgress(_Frozen):
    kind: Literal['in_progress'] = 'in_progress'


class Passed(_Frozen):
    kind: Literal['success'] = 'success'
    output: Output


class SetupFailed(_Frozen):
    kind: Literal['setup_error'] = 'setup_error'
    error_kind: SetupErrorKind
    message: str
    output: Output | None = None


class TestError(_Frozen):
    __test__ = False

    kind: Literal['test_error'] = 'test_error'
    run_log: Output | None = None
    test_log: Output | None = None


LogResult = Annotated[
    InProgress | Passed | SetupFailed | TestError,
    Field(discriminator='kind'),
]


class LogEntry(_Frozen):
    repository: str
    branch: str
    result: LogResult = InProgress()

    @property
    def in_progress(self) -> bool:
        return isinstance(self.result, InProgress)


def outcome_to_log_result(outcome: ExecutionOutcome) -> Passed | TestError:
    match outcome:
        case Success(test=test):
            return Passed(output=test)
        case RunFailure(run=run):
            return TestError(run_log=run)
        case TestFailure(test=test):
            return TestError(test_log=test)
        case RunAndTestFailure(run=run, test=test):
            return TestError(run_log=run, test_log=test)
    raise TypeError(f'Unknown outcome {outcome!r}')
