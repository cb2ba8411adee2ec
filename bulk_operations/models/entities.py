"""
Bulk Operation Entities

Defines Pydantic models for the operations a bulk run accepts and the
results it produces.

Operations form a tagged union discriminated on `type`; each variant
carries only the fields its semantics require, so a constructed operation is
always structurally valid. Outcomes and reports are frozen once built.

Typical usage from external projects:

    from bulk_operations import CreateOperation, SubmitOperation

    operations = [
        CreateOperation(resource_type="Customer", document={"customer_name": "ACME"}),
        SubmitOperation(resource_type="Sales Invoice", identifier="SINV-0001"),
    ]
    report = await manager.run_batch(operations, rollback_on_failure=True)
    print(f"{report.completed_count} completed, {report.failed_count} failed")
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator
)

from document_gateway import ErrorKind


class OperationType(str, Enum):
    """
    The five kinds of step a batch may contain.
    """
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SUBMIT = "submit"
    CANCEL = "cancel"


class OperationStatus(str, Enum):
    """
    Overall status of a bulk run.
    """
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"  # Some operations succeeded and some failed
    ROLLED_BACK = "rolled_back"


class OperationBase(BaseModel):
    """
    Fields shared by every operation variant.

    Raw input may use the backend's own field names: `doctype` is accepted
    for resource_type.
    """
    resource_type: str = Field(
        ...,
        validation_alias=AliasChoices("resource_type", "doctype"),
        description="Backend resource type (doctype), e.g. 'Sales Invoice'"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("resource_type")
    @classmethod
    def validate_resource_type(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("resource_type must not be empty")
        return v

    @property
    def operation_type(self) -> OperationType:
        return OperationType(self.type)


class CreateOperation(OperationBase):
    """Create a new document."""
    type: Literal["create"] = "create"
    document: Dict[str, Any] = Field(
        ...,
        validation_alias=AliasChoices("document", "doc"),
        description="Field values of the new document"
    )

    @field_validator("document")
    @classmethod
    def validate_document(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        if not v:
            raise ValueError("document must not be empty")
        return v


class TargetedOperation(OperationBase):
    """
    Base for operations that act on an existing document.

    `name` is accepted for identifier.
    """
    identifier: str = Field(
        ...,
        validation_alias=AliasChoices("identifier", "name"),
        description="Unique key of the document within its resource type"
    )

    @field_validator("identifier", mode="before")
    @classmethod
    def validate_identifier(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("identifier must not be empty")
        return v


class UpdateOperation(TargetedOperation):
    """Apply a partial patch to an existing document."""
    type: Literal["update"] = "update"
    patch: Dict[str, Any] = Field(..., description="Fields to change")

    @field_validator("patch")
    @classmethod
    def validate_patch(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        if not v:
            raise ValueError("patch must not be empty")
        return v


class DeleteOperation(TargetedOperation):
    """Delete an existing document."""
    type: Literal["delete"] = "delete"


class SubmitOperation(TargetedOperation):
    """Move a draft document to the submitted state."""
    type: Literal["submit"] = "submit"


class CancelOperation(TargetedOperation):
    """Move a submitted document to the cancelled state."""
    type: Literal["cancel"] = "cancel"


Operation = Annotated[
    Union[CreateOperation, UpdateOperation, DeleteOperation, SubmitOperation, CancelOperation],
    Field(discriminator="type")
]

OPERATION_MODELS = {
    OperationType.CREATE: CreateOperation,
    OperationType.UPDATE: UpdateOperation,
    OperationType.DELETE: DeleteOperation,
    OperationType.SUBMIT: SubmitOperation,
    OperationType.CANCEL: CancelOperation,
}


class OperationOutcome(BaseModel):
    """
    Result of one attempted operation.

    Exactly one outcome exists per attempted operation and its index is the
    operation's position in the input list.
    """
    index: int = Field(..., ge=0, description="Position of the operation in the batch")
    succeeded: bool
    payload: Optional[Any] = Field(None, description="Gateway payload for successful operations")
    error_message: Optional[str] = Field(None, description="Gateway error message for failed operations")
    error_kind: Optional[ErrorKind] = Field(
        None,
        description="Classification of the failure, None for unexpected faults"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def success(cls, index: int, payload: Any = None) -> "OperationOutcome":
        return cls(index=index, succeeded=True, payload=payload)

    @classmethod
    def failure(
        cls,
        index: int,
        error_message: str,
        error_kind: Optional[ErrorKind] = None
    ) -> "OperationOutcome":
        return cls(index=index, succeeded=False, error_message=error_message, error_kind=error_kind)


class BatchReport(BaseModel):
    """
    Final report of a bulk run.

    completed_count + failed_count always equals len(outcomes). When the run
    stopped early for a rollback, operations after the failing one were never
    attempted and have no outcome.
    """
    outcomes: Tuple[OperationOutcome, ...] = ()
    rolled_back: bool = False
    completed_count: int = Field(0, ge=0)
    failed_count: int = Field(0, ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_counts(self) -> "BatchReport":
        if self.completed_count + self.failed_count != len(self.outcomes):
            raise ValueError("completed_count + failed_count must equal the number of outcomes")
        return self

    @property
    def total_count(self) -> int:
        """Number of operations that were attempted."""
        return self.completed_count + self.failed_count

    @property
    def success_rate(self) -> float:
        """Success rate as a percentage."""
        if self.total_count == 0:
            return 0.0
        return (self.completed_count / self.total_count) * 100

    @property
    def status(self) -> OperationStatus:
        if self.rolled_back:
            return OperationStatus.ROLLED_BACK
        if self.failed_count == 0:
            return OperationStatus.SUCCESS
        if self.completed_count == 0:
            return OperationStatus.FAILED
        return OperationStatus.PARTIAL

    @property
    def failed_outcomes(self) -> List[OperationOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]


class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class PreviewIssue(BaseModel):
    """A single finding reported by server-side validation."""
    field: Optional[str] = None
    message: str
    severity: IssueSeverity = IssueSeverity.INFO


class EstimatedImpact(BaseModel):
    """Rough effect a previewed document would have once saved."""
    documents_affected: Optional[int] = None
    financial_impact: Optional[float] = None
    workflow_changes: Optional[List[str]] = None

    @property
    def is_empty(self) -> bool:
        return (self.documents_affected is None and self.financial_impact is None
                and not self.workflow_changes)


class TransactionPreview(BaseModel):
    """
    Result of validating a document on the backend without saving it.
    """
    valid: bool
    issues: List[PreviewIssue] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    estimated_impact: Optional[EstimatedImpact] = None

    @property
    def errors(self) -> List[PreviewIssue]:
        return [issue for issue in self.issues if issue.severity == IssueSeverity.ERROR]
