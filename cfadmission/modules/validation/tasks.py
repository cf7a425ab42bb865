"""Task admission: required fields, sequence ID and cancel transitions."""

from cfadmission.modules.errors import (
    cancelation_not_possible_error,
    immutable_field_error,
    structural_error,
)
from cfadmission.modules.resources import (
    TASK,
    TASK_FAILED_CONDITION,
    TASK_SUCCEEDED_CONDITION,
    CFTask,
)

from .base import ResourceValidator

MISSING_FIELD_ERROR_TEMPLATE = "missing required field '%s'"
NEGATIVE_SEQUENCE_ID_ERROR = "SequenceID cannot be negative"


class TaskValidator(ResourceValidator):
    """Tasks have no user-chosen name, so nothing is claimed."""

    kind = TASK

    async def validate_create(self, task: CFTask) -> None:
        self.check_structure(task)

    async def validate_update(self, old_task: CFTask, task: CFTask) -> None:
        self.check_structure(task)

        if old_task.status.sequence_id != task.status.sequence_id:
            raise immutable_field_error("CFTask.Status.SequenceID")

        if task.spec.canceled and not old_task.spec.canceled:
            self.check_cancelable(old_task)

    def check_structure(self, task: CFTask) -> None:
        if not task.spec.command:
            raise structural_error(MISSING_FIELD_ERROR_TEMPLATE % "Spec.Command")
        if not task.spec.app_ref.name:
            raise structural_error(MISSING_FIELD_ERROR_TEMPLATE % "Spec.AppRef.Name")
        if task.status.sequence_id < 0:
            raise structural_error(NEGATIVE_SEQUENCE_ID_ERROR)

    def check_cancelable(self, task: CFTask) -> None:
        for condition_type, state in (
            (TASK_SUCCEEDED_CONDITION, "SUCCEEDED"),
            (TASK_FAILED_CONDITION, "FAILED"),
        ):
            if task.status.condition_true(condition_type):
                raise cancelation_not_possible_error(
                    f"Task state is {state} and therefore cannot be canceled"
                )
