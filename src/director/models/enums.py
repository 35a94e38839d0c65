"""Shared enums for models."""

from enum import Enum


class Platform(str, Enum):
    """Distribution platform."""

    YOUTUBE = "YouTube"
    TIKTOK = "TikTok"
    INSTAGRAM = "Instagram"
    LINKEDIN = "LinkedIn"
    TWITTER = "Twitter"


class Frequency(str, Enum):
    """Automation cadence."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class AutomationStatus(str, Enum):
    """Automation lifecycle status."""

    IDLE = "idle"
    RUNNING = "running"
    SCHEDULED = "scheduled"
    ERROR = "error"


class StepType(str, Enum):
    """Pipeline stage of a step."""

    IDEATION = "ideation"
    SCRIPT = "script"
    RECORDING = "recording"
    EDITING = "editing"
    THUMBNAIL = "thumbnail"
    CAPTIONS = "captions"
    DISTRIBUTION = "distribution"
    ANALYTICS = "analytics"


class RunStatus(str, Enum):
    """Outcome of a single run."""

    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    FAILED = "failed"


class RunMessageKind(str, Enum):
    """What a run log message records."""

    STEP = "step"
    REVIEW = "review"
    FAILURE = "failure"
