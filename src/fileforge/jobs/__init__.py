"""Client-side job lifecycle engine.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from .collection import OrderedCollection
from .controller import JobController
from .dimensions import AspectRatio, DimensionConstraintSolver
from .errors import JobError, PollingError, RetrievalError, SubmissionError, ValidationError
from .files import LocalFilePicker, SelectedFile
from .job import Job, JobSnapshot, JobStatus
from .operations import OPERATIONS, JobKind, get_operation
from .poller import PollerState, ProgressPoller, ProgressReport
from .retriever import ResultRetriever, derive_filename
from .submitter import JobSubmitter
from .validation import ValidationPolicy, ValidationResult

__all__ = [
    'AspectRatio',
    'DimensionConstraintSolver',
    'Job',
    'JobController',
    'JobError',
    'JobKind',
    'JobSnapshot',
    'JobStatus',
    'JobSubmitter',
    'LocalFilePicker',
    'OPERATIONS',
    'OrderedCollection',
    'PollerState',
    'PollingError',
    'ProgressPoller',
    'ProgressReport',
    'ResultRetriever',
    'RetrievalError',
    'SelectedFile',
    'SubmissionError',
    'ValidationError',
    'ValidationPolicy',
    'ValidationResult',
    'derive_filename',
    'get_operation',
]
