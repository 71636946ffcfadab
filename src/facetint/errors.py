"""Exception types for facetint.

Insufficient-data conditions are not errors: samplers report them as
``UnknownAttribute`` results. Exceptions are reserved for broken upstream
contracts (a detection without a usable box).
"""


class FacetintError(ValueError):
    """Base class for facetint errors."""


class MalformedDetectionError(FacetintError):
    """Raised when a face detection violates the detector contract.

    Attributes:
        face_id: Identifier of the offending detection (may be None).
        problem: Short description of what is wrong.
    """

    def __init__(self, face_id, problem: str):
        self.face_id = face_id
        self.problem = problem
        super().__init__(f"Malformed face detection {face_id!r}: {problem}")


__all__ = ["FacetintError", "MalformedDetectionError"]
