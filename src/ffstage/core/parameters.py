"""Argument-vector assembly for ffmpeg invocations.

The order of the emitted argv is fixed::

    <input parameters> -i <input> [<rate parameters>] <output parameters> [-y] <destination>

Validation happens here, before any process is spawned.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ffstage.core.models import (
    AssembledInvocation,
    Destination,
    DestinationKind,
    InputSpec,
    OutputSpec,
    target_format_of,
)
from ffstage.core.protocols import FileSystem
from ffstage.core.rates import RateParameterGenerator
from ffstage.exceptions import (
    FfstageError,
    MissingInputError,
    MissingOutputTargetError,
)

logger = logging.getLogger(__name__)

RateGeneratorFactory = Callable[[], RateParameterGenerator]


class ParameterAssembler:
    """Builds argv and resolves destinations.

    Parameters
    ----------
    file_system:
        Used for the input existence check and temp-file allocation.
    rate_generator_factory:
        Returns a fresh :class:`RateParameterGenerator` per invocation
        that requests rate matching.  Optional when rate matching is
        never used.
    """

    def __init__(
        self,
        file_system: FileSystem,
        rate_generator_factory: RateGeneratorFactory | None = None,
    ) -> None:
        self._fs = file_system
        self._rate_generator_factory = rate_generator_factory

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def assemble(
        self,
        input_spec: InputSpec | None,
        output_spec: OutputSpec | None = None,
    ) -> AssembledInvocation:
        """Validate the specs and return the argv plus its destination.

        Raises
        ------
        MissingInputError
            If the input path is unset or not an existing file.
        MissingOutputTargetError
            If *output_spec* has neither ``path`` nor ``postfix``.
        """
        if input_spec is None or not input_spec.path or not self._fs.is_file(input_spec.path):
            raise MissingInputError(
                "input.path not set or not found",
                hint=f"Checked: {input_spec.path!r}" if input_spec and input_spec.path else None,
            )
        if output_spec is not None and not output_spec.path and not output_spec.postfix:
            raise MissingOutputTargetError(
                "output.path and output.postfix not set",
                hint="Pass an explicit output path or a postfix such as '.mp3'.",
            )

        arguments: list[str] = [*input_spec.parameters, "-i", input_spec.path]

        if output_spec is not None:
            if output_spec.match_input_rates:
                arguments.extend(self._rate_arguments(input_spec.path, output_spec))
            arguments.extend(output_spec.parameters)

        destination = self.resolve_destination(output_spec)
        arguments.extend(destination.arguments())
        return AssembledInvocation(arguments=tuple(arguments), destination=destination)

    def resolve_destination(self, output_spec: OutputSpec | None) -> Destination:
        """Decide where ffmpeg writes.

        * explicit ``path`` → used as-is, no overwrite flag;
        * ``postfix`` only → fresh temp file, overwrite flag;
        * no output spec → null muxer.
        """
        if output_spec is None:
            return Destination(DestinationKind.DISCARD)
        if output_spec.path:
            return Destination(DestinationKind.EXPLICIT, output_spec.path)
        if output_spec.postfix:
            generated = self._fs.allocate_temp_file(suffix=output_spec.postfix)
            return Destination(DestinationKind.GENERATED, str(generated))
        raise MissingOutputTargetError("output.path and output.postfix not set")

    # ------------------------------------------------------------------
    # Rate matching
    # ------------------------------------------------------------------

    def _rate_arguments(self, source_path: str, output_spec: OutputSpec) -> list[str]:
        if self._rate_generator_factory is None:
            raise FfstageError("Rate matching requested but no probe service is configured.")

        generator = self._rate_generator_factory()
        try:
            generator.match_source(source_path)
        except FfstageError as exc:
            logger.warning(
                "Could not match rates of %s (%s); using default rates.", source_path, exc,
            )
            generator.use_defaults()

        target = target_format_of(output_spec.path or output_spec.postfix or "")
        return generator.generate_parameters(target)
