"""Backend protocol for face detection."""

from typing import Protocol

from facetint.types import DetectionResult, PixelBuffer


class DetectorBackend(Protocol):
    """Protocol for detector backends.

    Implementations should be swappable without changing analyzer logic.
    A backend must report landmark groups in image pixel coordinates.
    """

    def initialize(self, device: str = "cpu") -> None:
        """Initialize the backend and load models."""
        ...

    def detect(self, pixels: PixelBuffer) -> DetectionResult:
        """Detect faces (and optionally bodies, hands, gestures).

        Args:
            pixels: RGBA image.

        Returns:
            DetectionResult with faces in detector order.
        """
        ...

    def cleanup(self) -> None:
        """Release resources and unload models."""
        ...


__all__ = ["DetectorBackend"]
