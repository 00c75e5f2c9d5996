from pushbuild.runner.pipeline import Pipeline, classify
from pushbuild.runner.runner import SubmissionRunner

__all__ = ['Pipeline', 'SubmissionRunner', 'classify']
