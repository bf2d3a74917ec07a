"""Domain enumerations for the remediation workflow engine."""

from enum import Enum, IntEnum


class WorkflowActionType(IntEnum):
    """Action types a workflow can execute.

    Codes match the integers stored in action payloads. Anything that is not
    in the mapping table resolves to UNSUPPORTED instead of raising.
    """

    UNSUPPORTED = 0
    EMAIL_NOTIFICATION = 1
    WEBHOOK = 2
    LOG_ENTRY = 3
    UPDATE_DEVICE_TAGS = 4

    @property
    def display_name(self) -> str:
        """PascalCase name as used in stored payloads and execution logs."""
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, raw: object) -> "WorkflowActionType":
        """Map a stored code or name to an action type.

        Accepts integers (1-4), numeric strings, PascalCase names
        ("EmailNotification") and snake/upper case names ("email_notification").
        Booleans and unknown values map to UNSUPPORTED.
        """
        if isinstance(raw, bool):
            return cls.UNSUPPORTED
        if isinstance(raw, int):
            return _BY_CODE.get(raw, cls.UNSUPPORTED)
        if isinstance(raw, str):
            key = raw.strip()
            if key.isdigit():
                return _BY_CODE.get(int(key), cls.UNSUPPORTED)
            return _BY_NAME.get(key.replace("_", "").lower(), cls.UNSUPPORTED)
        return cls.UNSUPPORTED


_DISPLAY_NAMES: dict[WorkflowActionType, str] = {
    WorkflowActionType.UNSUPPORTED: "Unsupported",
    WorkflowActionType.EMAIL_NOTIFICATION: "EmailNotification",
    WorkflowActionType.WEBHOOK: "Webhook",
    WorkflowActionType.LOG_ENTRY: "LogEntry",
    WorkflowActionType.UPDATE_DEVICE_TAGS: "UpdateDeviceTags",
}

_BY_CODE: dict[int, WorkflowActionType] = {
    1: WorkflowActionType.EMAIL_NOTIFICATION,
    2: WorkflowActionType.WEBHOOK,
    3: WorkflowActionType.LOG_ENTRY,
    4: WorkflowActionType.UPDATE_DEVICE_TAGS,
}

_BY_NAME: dict[str, WorkflowActionType] = {
    "emailnotification": WorkflowActionType.EMAIL_NOTIFICATION,
    "webhook": WorkflowActionType.WEBHOOK,
    "logentry": WorkflowActionType.LOG_ENTRY,
    "updatedevicetags": WorkflowActionType.UPDATE_DEVICE_TAGS,
}


class WorkflowEvaluationState(str, Enum):
    """Per-workflow state within one evaluation pass.

    NOT_EVALUATED -> SKIPPED | NOT_MATCHED | MATCHED
    MATCHED -> RUNNING -> COMPLETED | FAILED
    """

    NOT_EVALUATED = "not_evaluated"
    SKIPPED = "skipped"
    NOT_MATCHED = "not_matched"
    MATCHED = "matched"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ActionErrorCode(str, Enum):
    """Error codes attached to failed action outcomes."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UNSUPPORTED_ACTION_TYPE = "UNSUPPORTED_ACTION_TYPE"
    ACTION_EXECUTION_ERROR = "ACTION_EXECUTION_ERROR"
    ACTION_FAILED = "ACTION_FAILED"
    CANCELLED = "CANCELLED"
