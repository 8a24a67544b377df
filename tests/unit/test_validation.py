"""Unit tests for the differential validation harness."""

import logging

import numpy as np
import pytest

from fftengine.core.reference import ReferenceFFT, dif_fft
from fftengine.errors import UnsupportedSizeError, ValidationFailure
from fftengine.registry import get_registry
from fftengine.validation import (
    ValidationHarness,
    ValidationReport,
    ValidationState,
    checkpoint_error,
    standard_battery,
    validate_implementation,
    validate_registry,
)
from fftengine.variants.table_driven import TableDrivenFFT
from fftengine.variants.unrolled import UnrolledFFT8


class BrokenStageFFT(ReferenceFFT):
    """Reference kernel with the imaginary parts negated after one stage."""

    def __init__(self, broken_stage: int) -> None:
        self.broken_stage = broken_stage

    def _execute(self, re, im, forward, hook):
        def tamper(name, work_re, work_im):
            if name == f"stage {self.broken_stage}":
                work_im *= -1.0
            if hook is not None:
                hook(name, work_re, work_im)

        return dif_fft(re, im, forward, tamper)

    @property
    def name(self) -> str:
        return f"broken-stage-{self.broken_stage}"


class TransformOnly:
    """Candidate exposing transform() but no checkpoints."""

    name = "transform-only"

    def __init__(self, scale: float = 1.0) -> None:
        self.scale = scale

    def transform(self, real, imag=None, forward=True):
        spectrum = ReferenceFFT().transform(real, imag, forward)
        return type(spectrum)(spectrum.real * self.scale, spectrum.imag * self.scale)


@pytest.fixture
def harness() -> ValidationHarness:
    return ValidationHarness()


class TestHarnessRun:
    """Tests for single harness runs."""

    def test_passing_candidate(self, harness, random_signal):
        real, imag = random_signal(8)
        report = harness.run(UnrolledFFT8(), real, imag)

        assert report.state is ValidationState.PASSED
        assert report.passed
        assert [c.name for c in report.checkpoints] == [
            "stage 1", "stage 2", "stage 3", "reorder", "final"
        ]
        assert report.max_error < 1e-12
        assert report.current_checkpoint is None
        report.raise_for_failure()

    @pytest.mark.parametrize("stage", [1, 2, 4])
    def test_localises_injected_bug(self, harness, random_signal, stage):
        """Test a divergence is reported at the stage that introduced it."""
        real, imag = random_signal(16)

        report = harness.run(BrokenStageFFT(stage), real, imag)

        assert report.state is ValidationState.FAILED
        assert report.failed_checkpoint == f"stage {stage}"
        assert len(report.checkpoints) == stage
        assert all(c.passed for c in report.checkpoints[:-1])
        assert report.error > 1e-3

    def test_failure_is_logged(self, harness, random_signal, caplog):
        real, imag = random_signal(16)
        with caplog.at_level(logging.WARNING, logger="fftengine.validation"):
            harness.run(BrokenStageFFT(3), real, imag)
        assert "diverged from reference at 'stage 3'" in caplog.text

    def test_raise_for_failure(self, harness, random_signal):
        real, imag = random_signal(16)
        report = harness.run(BrokenStageFFT(2), real, imag, forward=False)

        with pytest.raises(ValidationFailure) as exc:
            report.raise_for_failure()
        assert exc.value.checkpoint == "stage 2"
        assert exc.value.implementation == "broken-stage-2"
        assert isinstance(exc.value, AssertionError)

    def test_final_only_comparison(self, harness, random_signal):
        """Test candidates without staged() are compared on the output."""
        real, imag = random_signal(32)

        report = harness.run(TransformOnly(), real, imag)

        assert report.passed
        assert report.compared_final_only
        assert [c.name for c in report.checkpoints] == ["final"]

    def test_final_only_failure(self, harness, random_signal):
        real, imag = random_signal(32)

        report = harness.run(TransformOnly(scale=1.01), real, imag)

        assert report.state is ValidationState.FAILED
        assert report.failed_checkpoint == "final"

    def test_candidate_errors_propagate(self, harness):
        with pytest.raises(UnsupportedSizeError):
            harness.run(UnrolledFFT8(), np.ones(16))

    def test_tolerance_override(self, random_signal):
        real, imag = random_signal(32)
        report = ValidationHarness(tolerance=0.1).run(TransformOnly(scale=1.001), real, imag)
        assert report.passed

    def test_tolerance_from_config(self):
        assert ValidationHarness().tolerance == 1e-9


class TestReport:
    """Tests for ValidationReport bookkeeping."""

    def test_initial_state(self):
        report = ValidationReport("x", size=8, forward=True, tolerance=1e-9)
        assert report.state is ValidationState.NOT_STARTED
        assert report.error is None
        report.raise_for_failure()

    def test_as_dict(self, harness, random_signal):
        real, imag = random_signal(16)
        data = harness.run(BrokenStageFFT(1), real, imag, forward=False, label="noise").as_dict()

        assert data["state"] == "failed"
        assert data["direction"] == "inverse"
        assert data["signal"] == "noise"
        assert data["failed_checkpoint"] == "stage 1"
        assert list(data["checkpoints"]) == ["stage 1"]


class TestCheckpointError:
    """Tests for the relative error metric."""

    def test_relative_to_peak(self):
        expected = np.array([100.0, 0.0])
        actual = np.array([101.0, 0.0])
        zeros = np.zeros(2)
        assert checkpoint_error(expected, zeros, actual, zeros) == pytest.approx(0.01)

    def test_absolute_below_unit_peak(self):
        expected = np.array([0.1, 0.0])
        zeros = np.zeros(2)
        assert checkpoint_error(expected, zeros, expected + 0.5, zeros) == pytest.approx(0.5)

    def test_nan_fails(self):
        zeros = np.zeros(4)
        actual = np.array([0.0, np.nan, 0.0, 0.0])
        error = checkpoint_error(zeros, zeros, zeros, actual)
        assert not error <= 1e-9

    def test_shape_mismatch(self):
        assert checkpoint_error(np.zeros(4), np.zeros(4), np.zeros(2), np.zeros(2)) == float("inf")


class TestBattery:
    """Tests for the standard validation battery."""

    def test_battery_contents(self):
        labels = [label for label, _, _ in standard_battery(16)]
        assert labels == [
            "zero", "impulse", "dc", "sine", "cosine", "mixed", "random",
            "uniform-random", "complex-random",
        ]

    def test_battery_is_seeded(self):
        first = standard_battery(32, seed=7)
        second = standard_battery(32, seed=7)
        for (_, re_a, im_a), (_, re_b, im_b) in zip(first, second):
            np.testing.assert_array_equal(re_a, re_b)
            np.testing.assert_array_equal(im_a, im_b)

    def test_validate_fixed_size(self):
        reports = validate_implementation(TableDrivenFFT(64))

        assert len(reports) == 18
        assert all(r.passed for r in reports)
        assert {r.size for r in reports} == {64}

    def test_validate_descriptor(self):
        reports = validate_implementation(get_registry().resolve(16))
        assert all(r.implementation == "unrolled-16" for r in reports)
        assert all(r.passed for r in reports)

    def test_validate_generic_sizes(self):
        reports = validate_implementation(ReferenceFFT(), sizes=[2, 4])
        assert len(reports) == 36

    def test_validate_detects_bug(self):
        reports = validate_implementation(BrokenStageFFT(2), sizes=[8])
        failed = [r for r in reports if not r.passed]
        assert failed
        assert all(r.failed_checkpoint == "stage 2" for r in failed)

    def test_validate_registry_subset(self):
        results = validate_registry(names=["unrolled-4", "table-driven-128"])
        assert set(results) == {"unrolled-4", "table-driven-128"}

    def test_every_declared_implementation_passes(self):
        results = validate_registry()

        assert len(results) == 16
        failures = [r.as_dict() for reports in results.values() for r in reports if not r.passed]
        assert failures == []
