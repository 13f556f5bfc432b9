"""
Foreign function registrar.

Installs native bindings into a Lua runtime's global namespace. A
binding is a descriptor: the guest-visible name, the host callable,
and one ArgSpec per positional argument. The registrar composes the
argument adapters around the host callable, so host code only ever
sees converted values and never touches the guest's call frame.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple

from .marshal import Adapter, Mismatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArgSpec:
    """
    One positional argument of a binding.

    Attributes:
        name: Argument name, for diagnostics
        adapter: Converts the guest value
        default: Used when the argument is missing or mismatched
    """
    name: str
    adapter: Adapter
    default: Any = None


@dataclass(frozen=True)
class NativeBinding:
    """
    A guest-callable host function.

    Attributes:
        name: Global name in the guest
        impl: Host implementation, called with converted arguments
        args: Ordered argument contract
        aliases: Additional global names for the same function
    """
    name: str
    impl: Callable[..., Any]
    args: Tuple[ArgSpec, ...] = ()
    aliases: Tuple[str, ...] = ()

    @property
    def names(self) -> Tuple[str, ...]:
        return (self.name, *self.aliases)


class FunctionRegistrar:
    """
    Installs NativeBindings into one Lua runtime.

    Usage:
        registrar = FunctionRegistrar(runtime)
        registrar.register_function(
            "gWidth", surface_width, args=(),
        )
        registrar.register_all(build_bindings(api))
    """

    def __init__(self, runtime):
        """
        Initialize the registrar.

        Args:
            runtime: lupa LuaRuntime receiving the bindings
        """
        self._runtime = runtime
        self._globals = runtime.globals()
        self._installed: Dict[str, NativeBinding] = {}
        self.mismatch_count = 0

    @property
    def installed(self) -> Dict[str, NativeBinding]:
        """Installed bindings by guest name (aliases included)."""
        return dict(self._installed)

    def register(self, binding: NativeBinding) -> None:
        """Install one binding under its name and aliases."""
        entry = self._make_entry(binding)
        for name in binding.names:
            if name in self._installed:
                logger.warning(f"Replacing native binding: {name}")
            self._globals[name] = entry
            self._installed[name] = binding

    def register_function(
        self,
        name: str,
        impl: Callable[..., Any],
        args: Sequence[ArgSpec] = (),
        aliases: Sequence[str] = (),
    ) -> NativeBinding:
        """Build and install a binding in one step."""
        binding = NativeBinding(name, impl, tuple(args), tuple(aliases))
        self.register(binding)
        return binding

    def register_all(self, bindings: Iterable[NativeBinding]) -> None:
        for binding in bindings:
            self.register(binding)

    # ─────────────────────────────────────────────────────────────────────────
    # Marshalling
    # ─────────────────────────────────────────────────────────────────────────

    def convert_arguments(self, binding: NativeBinding, raw_args: Sequence[Any]) -> List[Any]:
        """
        Convert guest arguments per the binding's contract.

        Missing trailing arguments and mismatched ones both become the
        ArgSpec default. Extra arguments are ignored.
        """
        values = []
        for index, arg in enumerate(binding.args):
            if index >= len(raw_args):
                values.append(arg.default)
                continue

            outcome = arg.adapter(raw_args[index])
            if isinstance(outcome, Mismatch):
                self.mismatch_count += 1
                # nil for an optional argument is the usual way to skip it
                if raw_args[index] is not None:
                    logger.debug(
                        f"{binding.name}: argument {index + 1} ({arg.name}) "
                        f"{outcome.describe()}, using default {arg.default!r}"
                    )
                values.append(arg.default)
            else:
                values.append(outcome.value)
        return values

    def to_guest(self, value: Any) -> Any:
        """
        Convert a host result for the guest.

        dicts and lists become new tables, tuples become multiple
        return values, None returns nothing useful (nil).
        """
        if isinstance(value, tuple):
            return tuple(self.to_guest(item) for item in value)
        if isinstance(value, dict):
            return self._runtime.table_from(
                {key: self.to_guest(item) for key, item in value.items()}
            )
        if isinstance(value, list):
            return self._runtime.table_from([self.to_guest(item) for item in value])
        return value

    def _make_entry(self, binding: NativeBinding) -> Callable[..., Any]:
        """The Python callable the guest actually calls."""

        def entry(*raw_args):
            args = self.convert_arguments(binding, raw_args)
            return self.to_guest(binding.impl(*args))

        entry.__name__ = binding.name
        return entry
