"""Base backend interface for page selection operations."""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Tuple


class Backend(ABC):
    """Abstract base class for PDF page operation backends."""

    SUPPORTED_OPERATIONS: List[str] = []

    def supports(self, operation: str, format: str = "") -> bool:
        """
        Check if this backend can handle the specified operation.

        Args:
            operation: The operation name (e.g., "select", "grep")
            format: Optional format hint (e.g., "pdf")

        Returns:
            True if this backend supports the operation, False otherwise
        """
        return operation in self.SUPPORTED_OPERATIONS

    @abstractmethod
    def process(
        self,
        data: bytes,
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        """
        Run an operation against a PDF.

        Args:
            data: Raw PDF bytes
            operation: Operation to perform
            options: Operation-specific options

        Returns:
            Tuple of (output_data, format, metadata)
            - output_data: Processed output bytes
            - format: Output format ("pdf" or "json")
            - metadata: Additional information about the processing

        Raises:
            ValueError: If operation is not supported or options are invalid
                        (page range errors are ValueError subclasses)
            RuntimeError: If processing fails
        """
        pass
