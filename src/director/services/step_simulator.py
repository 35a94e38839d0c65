"""Simulated execution of pipeline steps.

No real production work happens here: a simulator only describes what the
step would do. Simulators signal an unrecoverable step by raising
``StepFailedError``.
"""

from dataclasses import dataclass
from typing import Protocol

from src.director.models import Automation, RunMessageKind, Step, StepType

_ACTIONS: dict[StepType, str] = {
    StepType.IDEATION: "Generating concepts",
    StepType.SCRIPT: "Drafting script",
    StepType.RECORDING: "Capturing footage",
    StepType.EDITING: "Editing cut",
    StepType.THUMBNAIL: "Designing thumbnails",
    StepType.CAPTIONS: "Writing captions",
    StepType.DISTRIBUTION: "Publishing",
    StepType.ANALYTICS: "Collecting telemetry",
}


@dataclass(frozen=True)
class StepEvent:
    kind: RunMessageKind
    message: str


class StepSimulator(Protocol):
    async def simulate(self, automation: Automation, step: Step) -> list[StepEvent]: ...


class DescriptiveStepSimulator:
    """Default simulator: always succeeds and narrates each step.

    It never suspends, so the run timeout cannot interrupt it.
    """

    async def simulate(self, automation: Automation, step: Step) -> list[StepEvent]:
        events = [StepEvent(RunMessageKind.STEP, self.describe(automation, step))]
        if step.requires_human_review:
            events.append(
                StepEvent(
                    RunMessageKind.REVIEW,
                    f"Review checkpoint: '{step.title}' flagged for human approval",
                )
            )
        return events

    @staticmethod
    def describe(automation: Automation, step: Step) -> str:
        message = f"[{step.type.value}] {_ACTIONS[step.type]}: {step.title}"
        if step.type == StepType.DISTRIBUTION:
            channels = automation.schedule.distribution_channels or [
                automation.primary_platform,
                *automation.cross_post,
            ]
            message += f" to {', '.join(channel.value for channel in channels)}"
        elif step.type == StepType.IDEATION:
            message += f" for {automation.target_audience}"
        if step.tools:
            message += f" (tools: {', '.join(step.tools)})"
        return message
