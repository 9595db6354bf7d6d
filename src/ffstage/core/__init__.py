"""Core / service layer: models, protocols and orchestration logic.

Rules
-----
* No ``print()`` calls.
* No direct process or filesystem access; side effects go through the
  protocols in :mod:`ffstage.core.protocols`.
* No imports from ``cli`` or ``infra``.
"""

from ffstage.core.models import (
    Destination,
    DestinationKind,
    InputSpec,
    InvocationResult,
    OutputSpec,
    ProbeInfo,
    RateParameters,
    StreamInfo,
    ValidationResult,
)
from ffstage.core.parameters import ParameterAssembler
from ffstage.core.probe_service import ProbeService
from ffstage.core.rates import RateParameterGenerator
from ffstage.core.stream_inspector import StreamInspector
from ffstage.core.transcode_service import TranscodeService
from ffstage.core.validation import ContentValidator

__all__: list[str] = [
    "ContentValidator",
    "Destination",
    "DestinationKind",
    "InputSpec",
    "InvocationResult",
    "OutputSpec",
    "ParameterAssembler",
    "ProbeInfo",
    "ProbeService",
    "RateParameterGenerator",
    "RateParameters",
    "StreamInfo",
    "StreamInspector",
    "TranscodeService",
    "ValidationResult",
]
