"""
Custom exceptions for the sync pipeline with structured error context.

Every pipeline error carries a context dict so it can be logged with
``extra={"error_context": exc.to_dict()}`` and inspected from the run
history without parsing message strings.

Exception Hierarchy:
    ETLException (base)
    ├── ExtractionError
    │   └── OperationalStoreError
    ├── TransformationError
    ├── LoadError
    │   ├── WarehouseError
    │   └── PartialInsertError
    ├── SchemaProvisioningError
    └── MergeError
"""

from typing import Optional, Dict, Any, List
from datetime import datetime
from pydantic import BaseModel


class ETLException(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (entity type, table, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += (
                f" | Caused by: {type(self.original_exception).__name__}: "
                f"{self.original_exception}"
            )

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for failures reading the operational store."""
    pass


class OperationalStoreError(ExtractionError):
    """
    Raised when the operational store cannot be reached or queried.

    Context should include:
        - database: Name of the MongoDB database
        - collection: Collection being queried (if applicable)
    """
    pass


# ============================================================================
# Transformation Errors
# ============================================================================

class TransformationError(ETLException):
    """
    Raised when a source record cannot be mapped to its warehouse row.

    Context should include:
        - entity_type: Entity type being transformed
        - record_id: ``_id`` of the offending source document
    """
    pass


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(ETLException):
    """Base exception for warehouse write failures."""
    pass


class WarehouseError(LoadError):
    """
    Raised when a warehouse request fails as a whole.

    Context should include:
        - table_name: Target table
        - operation: INSERT, CREATE_TABLE, CREATE_DATASET, QUERY
    """
    pass


class RowInsertError(BaseModel):
    """One rejected row of a streaming insert, independent of driver shape."""

    row_index: int
    reason: Optional[str] = None
    message: Optional[str] = None
    location: Optional[str] = None


class PartialInsertError(LoadError):
    """
    Raised when some rows of a batch were rejected by the warehouse.

    The accepted rows are already written; ``inserted_count`` reports them
    and ``row_errors`` lists the rejected ones.
    """

    def __init__(
        self,
        message: str,
        row_errors: List[RowInsertError],
        inserted_count: int = 0,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message, context, original_exception)
        self.row_errors = row_errors
        self.inserted_count = inserted_count
        self.context["rejected_rows"] = len(row_errors)
        self.context["inserted_rows"] = inserted_count

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["row_errors"] = [e.model_dump() for e in self.row_errors]
        return data


# ============================================================================
# Schema / Merge Errors
# ============================================================================

class SchemaProvisioningError(ETLException):
    """
    Raised when the warehouse dataset or a table cannot be provisioned.

    Fatal to the provisioning command only.
    """
    pass


class MergeError(ETLException):
    """
    Raised when the one-shot merge tool cannot upsert a document.

    Context should include:
        - collection: Target collection name
        - natural_key: The key that failed
    """
    pass
