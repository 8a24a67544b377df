"""Implementation registry with size-based selection.

Variant modules declare, at import time, which size each implementation
handles and with what priority. The default registry imports those modules
once on first use and builds a static table:

    size -> [descriptor, ...]   (highest priority first, then declaration order)

``resolve(size)`` returns the head of that list, or the reference
descriptor when nothing is declared for the size. Sizes that are not a
power of two are rejected rather than falling back.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

import numpy as np

from fftengine.config import get_config
from fftengine.core.base import FFTImplementation
from fftengine.core.bitreverse import is_power_of_two
from fftengine.core.reference import ReferenceFFT
from fftengine.core.spectrum import Spectrum
from fftengine.core.twiddle import warm
from fftengine.errors import InvalidSizeError
from fftengine.typing import NDArrayComplex, SignalLike

logger = logging.getLogger(__name__)

ImplementationFactory = Callable[[], FFTImplementation]
_T = TypeVar("_T", bound=type)

REFERENCE_PRIORITY = 1


@dataclass(frozen=True)
class ImplementationDescriptor:
    """Binding of a concrete implementation to the size it claims.

    Attributes:
        name: Unique identifier (e.g. 'unrolled-8')
        size: Supported size, or None for the reference (any power of two)
        priority: Higher wins when several implementations claim a size
        factory: Zero-argument callable creating the implementation
        description: One-line human readable summary
        characteristics: Short tags describing the strategy
        order: Declaration order, used to break priority ties
    """

    name: str
    size: int | None
    priority: int
    factory: ImplementationFactory
    description: str = ""
    characteristics: tuple[str, ...] = ()
    order: int = 0

    @property
    def is_reference(self) -> bool:
        return self.size is None

    def create(self) -> FFTImplementation:
        return self.factory()


REFERENCE = ImplementationDescriptor(
    name="reference",
    size=None,
    priority=REFERENCE_PRIORITY,
    factory=ReferenceFFT,
    description="Generic FFT implementation (Cooley-Tukey algorithm)",
    characteristics=ReferenceFFT.characteristics,
)

# Static declarations collected from the variant modules, in import order.
_DECLARATIONS: list[dict[str, Any]] = []


def declare(
    size: int,
    factory: ImplementationFactory,
    priority: int = 10,
    name: str | None = None,
    description: str = "",
    characteristics: Iterable[str] = (),
) -> None:
    """Declare an implementation for the default registry."""
    _DECLARATIONS.append(
        {
            "size": size,
            "factory": factory,
            "priority": priority,
            "name": name,
            "description": description,
            "characteristics": tuple(characteristics),
        }
    )


def register(size: int, priority: int = 10, name: str | None = None) -> Callable[[_T], _T]:
    """Class decorator declaring a fixed-size implementation.

    Args:
        size: The transform size the class handles
        priority: Selection priority (higher wins)
        name: Identifier; defaults to the class name
    """

    def decorator(cls: _T) -> _T:
        doc = (cls.__doc__ or "").strip().splitlines()
        declare(
            size=size,
            factory=cls,
            priority=priority,
            name=name or cls.__name__,
            description=doc[0] if doc else "",
            characteristics=getattr(cls, "characteristics", ()),
        )
        return cls

    return decorator


def _check_size(size: int) -> None:
    if isinstance(size, bool) or not is_power_of_two(size):
        raise InvalidSizeError(f"Size must be a power of 2, got: {size}", size=size)


class ImplementationRegistry:
    """Size -> implementation table with priority-based selection.

    Thread-safe: registration takes a lock, and shared implementation
    instances are created with idempotent insert.
    """

    def __init__(
        self,
        reference: ImplementationDescriptor = REFERENCE,
        *,
        use_variants: bool = True,
        disabled: Iterable[str] = (),
    ) -> None:
        self.reference = reference
        self.use_variants = use_variants
        self.disabled = frozenset(disabled)
        self._entries: dict[int, list[ImplementationDescriptor]] = {}
        self._instances: dict[ImplementationDescriptor, FFTImplementation] = {}
        self._order = itertools.count(1)
        self._lock = threading.Lock()

    def register(
        self,
        size: int,
        factory: ImplementationFactory,
        priority: int = 10,
        name: str | None = None,
        description: str = "",
        characteristics: Iterable[str] = (),
    ) -> ImplementationDescriptor:
        """Register an implementation for one size.

        Raises:
            InvalidSizeError: If size is not a power of two
        """
        _check_size(size)
        if factory is None:
            raise ValueError("Implementation factory cannot be None")

        with self._lock:
            descriptor = ImplementationDescriptor(
                name=name or f"{getattr(factory, '__name__', 'implementation')}-{size}",
                size=size,
                priority=int(priority),
                factory=factory,
                description=description,
                characteristics=tuple(characteristics),
                order=next(self._order),
            )
            entries = self._entries.setdefault(size, [])
            entries.append(descriptor)
            entries.sort(key=lambda d: (-d.priority, d.order))
        logger.debug(f"Registered {descriptor.name} for size {size} (priority {descriptor.priority})")
        return descriptor

    def unregister(self, size: int) -> bool:
        """Remove every implementation declared for a size."""
        with self._lock:
            removed = self._entries.pop(size, None)
            if removed:
                for descriptor in removed:
                    self._instances.pop(descriptor, None)
        return removed is not None

    def candidates(self, size: int) -> list[ImplementationDescriptor]:
        """Declared implementations for a size, best first."""
        _check_size(size)
        return list(self._entries.get(size, ()))

    def resolve(self, size: int) -> ImplementationDescriptor:
        """Return the implementation that would run for ``size``.

        Raises:
            InvalidSizeError: If size is not a power of two
        """
        _check_size(size)
        if self.use_variants:
            for descriptor in self._entries.get(size, ()):
                if descriptor.name not in self.disabled:
                    return descriptor
        return self.reference

    def get_implementation(self, size: int) -> FFTImplementation:
        """Return a shared instance of the resolved implementation."""
        descriptor = self.resolve(size)
        instance = self._instances.get(descriptor)
        if instance is None:
            instance = descriptor.create()
            with self._lock:
                instance = self._instances.setdefault(descriptor, instance)
        return instance

    def transform(
        self,
        real: SignalLike,
        imag: SignalLike | None = None,
        forward: bool = True,
    ) -> Spectrum:
        """Transform with whichever implementation resolves for len(real)."""
        return self.get_implementation(len(real)).transform(real, imag, forward)

    def implementation_count(self, size: int) -> int:
        return len(self._entries.get(size, ()))

    def supported_sizes(self) -> list[int]:
        return sorted(self._entries)

    def descriptors(self) -> list[ImplementationDescriptor]:
        """Every declared descriptor, by size then selection order."""
        return [d for size in self.supported_sizes() for d in self._entries[size]]

    def describe(self, size: int) -> str:
        if isinstance(size, bool) or not is_power_of_two(size):
            return "Invalid size (not power of 2)"
        descriptor = self.resolve(size)
        if descriptor.is_reference:
            return f"{descriptor.description} (generic fallback for size {size})"
        return f"{descriptor.description} (priority: {descriptor.priority})"

    def report(self) -> str:
        """Multi-line listing of every declared size and its alternatives."""
        lines = ["FFT implementation registry:"]
        for size in self.supported_sizes():
            lines.append(f"Size {size}: {self.describe(size)}")
            alternatives = [d for d in self._entries[size] if d is not self.resolve(size)]
            if alternatives:
                lines.append("  Alternative implementations:")
                for descriptor in alternatives:
                    flag = " [disabled]" if descriptor.name in self.disabled else ""
                    lines.append(
                        f"    - {descriptor.name}: {descriptor.description} "
                        f"(priority: {descriptor.priority}){flag}"
                    )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ImplementationRegistry(sizes={self.supported_sizes()})"


_default: ImplementationRegistry | None = None
_default_lock = threading.Lock()


def _ensure_declared() -> None:
    """Import the variant modules so their declarations run."""
    from fftengine.variants import passthrough, table_driven, unrolled  # noqa: F401


def build_default_registry() -> ImplementationRegistry:
    """Build a registry holding every declared variant, honouring config."""
    _ensure_declared()
    cfg = get_config()
    warm(cfg.twiddle.precompute_sizes)
    registry = ImplementationRegistry(
        use_variants=cfg.registry.use_variants, disabled=cfg.registry.disabled
    )
    for declaration in _DECLARATIONS:
        registry.register(**declaration)
    logger.debug(f"Registered FFT implementations: {[d.name for d in registry.descriptors()]}")
    return registry


def get_registry() -> ImplementationRegistry:
    """Return the process-wide registry, building it on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = build_default_registry()
    return _default


def reset_registry() -> None:
    """Forget the process-wide registry; the next call rebuilds it."""
    global _default
    with _default_lock:
        _default = None


def resolve(size: int) -> ImplementationDescriptor:
    return get_registry().resolve(size)


def transform(
    real: SignalLike,
    imag: SignalLike | None = None,
    forward: bool = True,
) -> Spectrum:
    """Compute the unitary DFT of a power-of-two signal.

    Args:
        real: Real parts (length N, a power of two)
        imag: Imaginary parts, or None for a real signal
        forward: False for the inverse transform

    Raises:
        InvalidSizeError: If N is not a power of two or lengths differ
    """
    return get_registry().transform(real, imag, forward)


def fft(x: SignalLike) -> NDArrayComplex:
    """Forward unitary FFT of a complex array, kernel exp(+2j*pi*k*n/N)."""
    arr = np.asarray(x, dtype=np.complex128)
    return transform(arr.real, arr.imag, True).to_complex()


def ifft(x: SignalLike) -> NDArrayComplex:
    """Inverse unitary FFT of a complex array, kernel exp(-2j*pi*k*n/N)."""
    arr = np.asarray(x, dtype=np.complex128)
    return transform(arr.real, arr.imag, False).to_complex()
