"""Test data factories using polyfactory."""

from tests.factories.automation import AutomationCreateFactory, StepInputFactory

__all__ = ["AutomationCreateFactory", "StepInputFactory"]
