"""Adobe automation pipeline for pdfbridge.

Components:
    - ScriptGenerator: Builds ExtendScript/AppleScript payloads for a job
    - ProcessSupervisor: Launches the automation runtime with a hard timeout
    - OutcomeClassifier: Turns raw process output into a ClassifiedResult
    - AutomationSession: Serializes jobs against the desktop applications
"""

from pdfbridge.automation.classifier import OutcomeClassifier
from pdfbridge.automation.models import (
    AutomationJob,
    AutomationScript,
    ClassifiedResult,
    JobMode,
    LaunchFailure,
    MissingResourceFailure,
    ProcessOutcome,
    RetryState,
    ScriptLanguage,
    Success,
    TimeoutFailure,
    ValidationFailure,
)
from pdfbridge.automation.scripts import ScriptGenerator
from pdfbridge.automation.session import AutomationSession, get_automation_session
from pdfbridge.automation.supervisor import LaunchCommandBuilder, ProcessSupervisor

__all__ = [
    "AutomationJob",
    "AutomationScript",
    "AutomationSession",
    "ClassifiedResult",
    "JobMode",
    "LaunchCommandBuilder",
    "LaunchFailure",
    "MissingResourceFailure",
    "OutcomeClassifier",
    "ProcessOutcome",
    "ProcessSupervisor",
    "RetryState",
    "ScriptGenerator",
    "ScriptLanguage",
    "Success",
    "TimeoutFailure",
    "ValidationFailure",
    "get_automation_session",
]
