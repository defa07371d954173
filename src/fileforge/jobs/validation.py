"""Validation policy gating input before it reaches a Job.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .errors import ValidationError
from .files import SelectedFile
from .operations import Operation, get_operation


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation: `OK` or a rejection carrying a reason."""

    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    def __bool__(self) -> bool:
        return self.ok

    def to_error(self) -> ValidationError:
        return ValidationError(self.reason or "")


OK = ValidationResult()


def rejected(reason: str) -> ValidationResult:
    return ValidationResult(reason=reason)


class ValidationPolicy:
    """Predicate set for one operation kind.

    Every method is total: malformed candidates produce a rejection, never an
    exception, and nothing passed in is mutated.
    """

    def __init__(self, operation: Operation):
        self.operation = operation

    @classmethod
    def for_kind(cls, kind) -> "ValidationPolicy":
        return cls(get_operation(kind))

    def validate(self, candidate: SelectedFile) -> ValidationResult:
        """Check a single file: size ceiling, accepted type, then decode."""
        op = self.operation
        if candidate.size_bytes > op.max_file_size:
            return rejected(f'File "{candidate.name}" exceeds {op.max_file_size_mb}MB limit.')

        if candidate.mime_type not in op.accepted_types:
            if op.accepted_types == {"application/pdf"}:
                return rejected(f'File "{candidate.name}" is not a PDF.')
            return rejected(f'File "{candidate.name}" is not a supported {op.type_label}.')

        if op.requires_dimensions:
            dims = candidate.dimensions
            if dims is None or dims.width <= 0 or dims.height <= 0:
                return rejected(f'File "{candidate.name}" could not be read as an image.')

        return OK

    def validate_batch(self, candidates: Iterable[SelectedFile]) -> ValidationResult:
        for candidate in candidates:
            result = self.validate(candidate)
            if not result:
                return result
        return OK

    def validate_cardinality(self, count: int) -> ValidationResult:
        op = self.operation
        if count < op.min_files and op.min_files > 1:
            return rejected(f"Cannot merge: at least {op.min_files} files required.")
        if count == 0:
            return rejected("Please select a file first.")
        if op.max_files is not None and count > op.max_files:
            return rejected("Only one file can be processed at a time.")
        return OK

    def validate_submission(self, inputs: Sequence[SelectedFile], options) -> ValidationResult:
        """Full check run when the user initiates a job."""
        result = self.validate_batch(inputs)
        if not result:
            return result

        result = self.validate_cardinality(len(inputs))
        if not result:
            return result

        reason = options.validate(inputs)
        if reason:
            return rejected(reason)
        return OK
