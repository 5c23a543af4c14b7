"""Task-related Marshmallow schemas.

Wire names are camelCase (``createdAt``, ``dueDate``...); loaded data uses
the model attribute names.
"""

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate

from task_tracker.extensions import ma
from task_tracker.models import TaskStatus


def _not_blank(value: str) -> None:
    if not value.strip():
        raise ValidationError("Title must not be empty.")


class TaskSchema(ma.Schema):
    """Schema for task serialization."""

    id = fields.Int(dump_only=True)
    title = fields.Str(dump_only=True)
    description = fields.Str(dump_only=True, allow_none=True)
    status = fields.Enum(TaskStatus, dump_only=True)
    due_date = fields.DateTime(dump_only=True, format="iso", data_key="dueDate")
    created_at = fields.DateTime(dump_only=True, format="iso", data_key="createdAt")
    updated_at = fields.DateTime(dump_only=True, format="iso", data_key="updatedAt")


class TaskCreateSchema(Schema):
    """Schema for task creation validation."""

    title = fields.Str(required=True, validate=[validate.Length(min=1, max=255), _not_blank])
    description = fields.Str(allow_none=True)
    status = fields.Enum(TaskStatus)


class TaskUpdateSchema(Schema):
    """Schema for task update validation. Every field is optional."""

    title = fields.Str(validate=[validate.Length(min=1, max=255), _not_blank])
    description = fields.Str(allow_none=True)
    status = fields.Enum(TaskStatus)
    due_date = fields.DateTime(allow_none=True, data_key="dueDate")


class TaskListQuerySchema(Schema):
    """Query string accepted by the task listing."""

    class Meta:
        unknown = EXCLUDE

    status = fields.Enum(TaskStatus)


class TaskStatsSchema(ma.Schema):
    """Schema for completion statistics."""

    total = fields.Int()
    by_status = fields.Dict(keys=fields.Str(), values=fields.Int(), data_key="byStatus")
    percent_completed = fields.Float(data_key="percentCompleted")
