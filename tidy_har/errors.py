from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Sequence


class TidyHarError(Exception):
    """Base class for errors that abort a pipeline run."""


class MalformedInputError(TidyHarError, ValueError):
    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{self.path}: {message}"
        super().__init__(message)


class UnknownActivityError(TidyHarError, ValueError):
    def __init__(self, codes: Iterable[int], location: Optional[str] = None) -> None:
        self.codes = sorted({int(c) for c in codes})
        # e.g. "test/Y_test.txt line 1"
        self.location = location
        message = f"Activity code(s) {self.codes} have no entry in the activity dictionary"
        if location is not None:
            message += f" (first at {location})"
        super().__init__(message)


class CategorizationCollisionError(TidyHarError, ValueError):
    def __init__(self, message: str, feature_names: Sequence[str] = ()) -> None:
        self.feature_names = list(feature_names)
        super().__init__(message)


class OutputAlreadyExistsError(TidyHarError, FileExistsError):
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Output file already exists: {self.path}")
