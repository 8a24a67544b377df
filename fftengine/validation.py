"""Differential validation of FFT implementations against the reference.

The harness runs the reference and a candidate over the same input,
captures the state after every stage, and compares the two step by step.
A divergence is reported at the first checkpoint where it appears, which
pins a bug to one stage (or to the reorder pass) instead of only to the
final output.

Example:
    harness = ValidationHarness()
    report = harness.run(UnrolledFFT8(), signal)
    report.raise_for_failure()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Sequence

import numpy as np

from fftengine.config import get_config
from fftengine.core.base import FINAL_CHECKPOINT, Checkpoint, FFTImplementation
from fftengine.core.reference import ReferenceFFT
from fftengine.errors import ValidationFailure
from fftengine.registry import ImplementationDescriptor, ImplementationRegistry, get_registry
from fftengine.signals import generate_test_signal
from fftengine.typing import NDArrayFloat, SignalLike

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_SIZES = (8, 64, 1024)


class ValidationState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class CheckpointResult:
    name: str
    error: float
    passed: bool


@dataclass
class ValidationReport:
    """Outcome of one harness run (one candidate, one input, one direction)."""

    implementation: str
    size: int
    forward: bool
    tolerance: float
    signal: str = ""
    state: ValidationState = ValidationState.NOT_STARTED
    checkpoints: list[CheckpointResult] = field(default_factory=list)
    current_checkpoint: str | None = None
    failed_checkpoint: str | None = None
    compared_final_only: bool = False

    @property
    def passed(self) -> bool:
        return self.state is ValidationState.PASSED

    @property
    def max_error(self) -> float:
        return max((c.error for c in self.checkpoints), default=0.0)

    @property
    def error(self) -> float | None:
        """Error at the failing checkpoint, or None if nothing failed."""
        for result in self.checkpoints:
            if not result.passed:
                return result.error
        return None

    def raise_for_failure(self) -> None:
        if self.state is ValidationState.FAILED:
            raise ValidationFailure(
                self.implementation,
                self.failed_checkpoint or FINAL_CHECKPOINT,
                self.error if self.error is not None else float("inf"),
                self.tolerance,
            )

    def as_dict(self) -> dict[str, Any]:
        return {
            "implementation": self.implementation,
            "size": self.size,
            "direction": "forward" if self.forward else "inverse",
            "signal": self.signal,
            "state": self.state.value,
            "tolerance": self.tolerance,
            "max_error": self.max_error,
            "failed_checkpoint": self.failed_checkpoint,
            "compared_final_only": self.compared_final_only,
            "checkpoints": {c.name: c.error for c in self.checkpoints},
        }


def checkpoint_error(
    expected_re: NDArrayFloat,
    expected_im: NDArrayFloat,
    actual_re: NDArrayFloat,
    actual_im: NDArrayFloat,
) -> float:
    """Max abs difference of real or imaginary parts, relative to max(1, peak)."""
    if np.shape(actual_re) != np.shape(expected_re) or np.shape(actual_im) != np.shape(expected_im):
        return float("inf")
    if expected_re.size == 0:
        return 0.0
    diff = float(np.max(np.abs(np.concatenate((actual_re - expected_re, actual_im - expected_im)))))
    peak = float(np.max(np.hypot(expected_re, expected_im)))
    return diff / max(1.0, peak)


class ValidationHarness:
    """Step-by-step comparison of a candidate against the reference.

    Args:
        reference: Implementation treated as ground truth (default ReferenceFFT)
        tolerance: Allowed relative error per checkpoint (default from config)
    """

    def __init__(
        self,
        reference: FFTImplementation | None = None,
        tolerance: float | None = None,
    ) -> None:
        self.reference = reference if reference is not None else ReferenceFFT()
        self.tolerance = tolerance if tolerance is not None else get_config().validation.tolerance

    def run(
        self,
        candidate: Any,
        real: SignalLike,
        imag: SignalLike | None = None,
        forward: bool = True,
        label: str = "",
    ) -> ValidationReport:
        """Compare ``candidate`` with the reference on one input.

        Errors raised by either implementation propagate unchanged.
        """
        report = ValidationReport(
            implementation=getattr(candidate, "name", type(candidate).__name__),
            size=len(real),
            forward=forward,
            tolerance=self.tolerance,
            signal=label,
        )
        report.state = ValidationState.RUNNING

        expected = self.reference.staged(real, imag, forward)
        actual = self._candidate_checkpoints(candidate, real, imag, forward)
        if [c[0] for c in actual] != [c[0] for c in expected]:
            report.compared_final_only = True
            expected = expected[-1:]
            actual = [c for c in actual if c[0] == FINAL_CHECKPOINT][-1:]
            if not actual:
                raise ValueError(f"{report.implementation} produced no '{FINAL_CHECKPOINT}' result")

        for (name, exp_re, exp_im), (_, act_re, act_im) in zip(expected, actual):
            report.current_checkpoint = name
            error = checkpoint_error(exp_re, exp_im, act_re, act_im)
            # NaN compares false and fails
            ok = error <= self.tolerance
            report.checkpoints.append(CheckpointResult(name, error, ok))
            if not ok:
                report.state = ValidationState.FAILED
                report.failed_checkpoint = name
                logger.warning(
                    f"{report.implementation} diverged from reference at '{name}' "
                    f"(size {report.size}, {'forward' if forward else 'inverse'}, "
                    f"error {error:.3e} > {self.tolerance:.1e})"
                )
                return report

        report.current_checkpoint = None
        report.state = ValidationState.PASSED
        return report

    @staticmethod
    def _candidate_checkpoints(
        candidate: Any,
        real: SignalLike,
        imag: SignalLike | None,
        forward: bool,
    ) -> list[Checkpoint]:
        staged = getattr(candidate, "staged", None)
        if callable(staged):
            return list(staged(real, imag, forward))
        spectrum = candidate.transform(real, imag, forward)
        return [(FINAL_CHECKPOINT, np.asarray(spectrum.real), np.asarray(spectrum.imag))]


def standard_battery(size: int, seed: int | None = None) -> list[tuple[str, NDArrayFloat, NDArrayFloat]]:
    """Named (label, real, imag) inputs used to exercise an implementation."""
    if seed is None:
        seed = get_config().validation.seed
    zeros = np.zeros(size, dtype=np.float64)
    rng = np.random.default_rng(seed)
    battery = [("zero", zeros, zeros)]
    for kind in ("impulse", "dc", "sine", "cosine", "mixed", "random"):
        battery.append((kind, generate_test_signal(size, kind, seed=seed), zeros))
    battery.append(("uniform-random", rng.uniform(-1.0, 1.0, size), zeros))
    battery.append(("complex-random", rng.standard_normal(size), rng.standard_normal(size)))
    return battery


def validate_implementation(
    implementation: FFTImplementation | ImplementationDescriptor,
    sizes: Sequence[int] | None = None,
    *,
    harness: ValidationHarness | None = None,
    seed: int | None = None,
) -> list[ValidationReport]:
    """Run the standard battery in both directions.

    Fixed-size implementations are checked at their own size; generic ones
    at ``sizes`` (default 8, 64 and 1024).
    """
    if isinstance(implementation, ImplementationDescriptor):
        implementation = implementation.create()
    harness = harness or ValidationHarness()
    if sizes is None:
        sizes = (
            (implementation.fixed_size,)
            if implementation.fixed_size is not None
            else DEFAULT_REFERENCE_SIZES
        )

    reports = []
    for size in sizes:
        for label, real, imag in standard_battery(size, seed):
            for forward in (True, False):
                reports.append(harness.run(implementation, real, imag, forward, label=label))
    failed = sum(1 for r in reports if not r.passed)
    logger.debug(f"Validated {implementation.name}: {len(reports) - failed}/{len(reports)} runs passed")
    return reports


def validate_registry(
    registry: ImplementationRegistry | None = None,
    *,
    harness: ValidationHarness | None = None,
    names: Iterable[str] | None = None,
) -> dict[str, list[ValidationReport]]:
    """Validate every declared implementation (or only ``names``)."""
    registry = registry or get_registry()
    wanted = set(names) if names is not None else None
    results: dict[str, list[ValidationReport]] = {}
    for descriptor in registry.descriptors():
        if wanted is not None and descriptor.name not in wanted:
            continue
        results[descriptor.name] = validate_implementation(descriptor, harness=harness)
    return results
