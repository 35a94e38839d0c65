"""Default step templates and completion of partially specified steps."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from src.director.models import Step, StepType


@dataclass(frozen=True)
class StepTemplate:
    title: str
    description: str
    duration_minutes: float
    tools: tuple[str, ...]
    requires_human_review: bool = False


CATALOG: dict[StepType, StepTemplate] = {
    StepType.IDEATION: StepTemplate(
        title="Trend & Hook Ideation",
        description="Scan trend signals and draft hooks calibrated to the persona.",
        duration_minutes=15,
        tools=("Trend Radar", "Hook Library"),
    ),
    StepType.SCRIPT: StepTemplate(
        title="Script Scaffolding",
        description="Turn the winning hook into a beat-by-beat script.",
        duration_minutes=20,
        tools=("Script Composer",),
        requires_human_review=True,
    ),
    StepType.RECORDING: StepTemplate(
        title="Voice & B-Roll Capture",
        description="Record narration and assemble b-roll from the asset vault.",
        duration_minutes=30,
        tools=("Voice Studio", "Asset Vault"),
    ),
    StepType.EDITING: StepTemplate(
        title="Motion Edit",
        description="Apply motion templates and a scene breakdown tuned for retention.",
        duration_minutes=45,
        tools=("Motion Templates", "Scene Splitter"),
        requires_human_review=True,
    ),
    StepType.THUMBNAIL: StepTemplate(
        title="Thumbnail Variants",
        description="Generate thumbnail variants for CTR testing.",
        duration_minutes=10,
        tools=("Thumbnail Lab",),
    ),
    StepType.CAPTIONS: StepTemplate(
        title="Caption Pack",
        description="Produce captions and on-screen text for every channel.",
        duration_minutes=10,
        tools=("Caption Engine",),
    ),
    StepType.DISTRIBUTION: StepTemplate(
        title="Multi-Platform Distribution",
        description="Publish with per-platform metadata and posting windows.",
        duration_minutes=5,
        tools=("Channel Scheduler",),
    ),
    StepType.ANALYTICS: StepTemplate(
        title="Telemetry Review",
        description="Collect retention, CTR and engagement signals for the next iteration.",
        duration_minutes=10,
        tools=("Retention Insights",),
    ),
}

DEFAULT_PIPELINE: tuple[StepType, ...] = tuple(StepType)


def step_from_template(step_type: StepType, **overrides: Any) -> Step:
    template = CATALOG[step_type]
    fields: dict[str, Any] = {
        "type": step_type,
        "title": template.title,
        "description": template.description,
        "duration_minutes": template.duration_minutes,
        "tools": list(template.tools),
        "requires_human_review": template.requires_human_review,
    }
    fields.update({key: value for key, value in overrides.items() if value is not None})
    return Step(**fields)


def default_steps() -> list[Step]:
    """The full eight-stage pipeline used when an automation has no steps."""
    return [step_from_template(step_type) for step_type in DEFAULT_PIPELINE]


def build_steps(
    inputs: Iterable[dict[str, Any]],
    existing: Iterable[Step] = (),
) -> list[Step]:
    """Complete partially specified steps, preserving input order.

    Each input holds only the fields the caller provided. An input whose
    ``id`` matches an existing step is merged onto that step; anything else
    starts from the catalog template of its type. A missing type takes the
    default pipeline's type at the same position.
    """
    by_id = {step.id: step for step in existing}
    steps: list[Step] = []
    for index, provided in enumerate(inputs):
        current = by_id.get(provided.get("id") or "")
        if current is not None:
            merged = current.model_dump()
            merged.update({key: value for key, value in provided.items() if value is not None})
            steps.append(Step(**merged))
            continue
        step_type = provided.get("type") or DEFAULT_PIPELINE[index % len(DEFAULT_PIPELINE)]
        overrides = {key: value for key, value in provided.items() if key != "type"}
        steps.append(step_from_template(StepType(step_type), **overrides))
    return steps
