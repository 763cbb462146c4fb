"""Global registry for sampler configurations.

Every sampler the package exposes is described by a configuration dict
(parameter declarations, defaults, request transforms, output columns and
the engine method that runs it). Built-in samplers are registered at import
time; users can register their own configurations or lazy factories.

Examples
--------
List available samplers:

>>> from ssm_rvs.config import get_sampler_registry
>>> get_sampler_registry().list_samplers()[:3]
['rlba', 'rlba_n1', 'rnorm']
"""

import copy
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class SamplerConfigRegistry:
    """Global registry for sampler configurations.

    Supports both direct config registration and factory functions for lazy
    loading.
    """

    def __init__(self):
        self._configs: dict[str, dict] = {}
        self._factories: dict[str, Callable[[], dict]] = {}

    def _check_free(self, name: str) -> None:
        if name in self._configs or name in self._factories:
            raise ValueError(
                f"Sampler '{name}' is already registered. "
                f"Use a different name or unregister the existing sampler first."
            )

    def register_config(self, name: str, config: dict) -> None:
        """Register a sampler configuration directly.

        Parameters
        ----------
        name : str
            Unique name for the sampler (e.g., "rlba", "my_sampler")
        config : dict
            Configuration dictionary containing at minimum:
            - 'name': Sampler name
            - 'param_specs': List of ParamSpec declarations
            - 'default_params': Defaults for every declared parameter
            - 'engine_method': Name of the engine method to dispatch to

        Raises
        ------
        ValueError
            If name already registered (either as config or factory)
        """
        self._check_free(name)
        missing = [
            key
            for key in ("param_specs", "default_params", "engine_method")
            if key not in config
        ]
        if missing:
            raise ValueError(f"Sampler config '{name}' is missing keys: {missing}")
        self._configs[name] = config
        logger.debug("Registered sampler config '%s'", name)

    def register_factory(self, name: str, factory: Callable[[], dict]) -> None:
        """Register a sampler config factory function.

        The factory is called on every access, so the config is only created
        when it is first needed.
        """
        self._check_free(name)
        self._factories[name] = factory
        logger.debug("Registered sampler config factory '%s'", name)

    def unregister(self, name: str) -> None:
        """Remove a sampler from the registry.

        Raises
        ------
        KeyError
            If sampler name not registered
        """
        if name in self._configs:
            del self._configs[name]
        elif name in self._factories:
            del self._factories[name]
        else:
            raise KeyError(f"Sampler '{name}' is not registered.")

    def get(self, name: str) -> dict:
        """Get sampler configuration by name.

        Returns a deep copy of the configuration to prevent accidental mutation
        of the registered config.

        Raises
        ------
        KeyError
            If sampler name not registered
        """
        if name in self._configs:
            return copy.deepcopy(self._configs[name])

        if name in self._factories:
            return self._factories[name]()

        available = self.list_samplers()
        raise KeyError(
            f"Sampler '{name}' is not registered. Available samplers: {available}"
        )

    def has_sampler(self, name: str) -> bool:
        """Check if sampler name is registered."""
        return name in self._configs or name in self._factories

    def list_samplers(self) -> list[str]:
        """List all registered sampler names, sorted."""
        return sorted(list(self._configs.keys()) + list(self._factories.keys()))

    def __repr__(self) -> str:
        n_configs = len(self._configs)
        n_factories = len(self._factories)
        total = n_configs + n_factories
        return (
            f"SamplerConfigRegistry({total} samplers: {n_configs} direct, "
            f"{n_factories} factories)"
        )


# Global singleton instance
_GLOBAL_SAMPLER_REGISTRY = SamplerConfigRegistry()


def register_sampler_config(name: str, config: dict) -> None:
    """Register a sampler configuration globally.

    Once registered, the sampler can be used with :func:`ssm_rvs.sample`
    and :class:`ssm_rvs.Sampler` just like the built-in ones, provided its
    ``engine_method`` is one the engines implement.

    Examples
    --------
    A uniform sampler with different defaults:

    >>> from ssm_rvs.config import get_sampler_registry, register_sampler_config
    >>> config = get_sampler_registry().get("runif")
    >>> config["name"] = "runif_pm1"
    >>> config["default_params"] = {"min": -1.0, "max": 1.0}
    >>> register_sampler_config("runif_pm1", config)
    """
    _GLOBAL_SAMPLER_REGISTRY.register_config(name, config)


def register_sampler_config_factory(name: str, factory: Callable[[], dict]) -> None:
    """Register a sampler config factory function globally."""
    _GLOBAL_SAMPLER_REGISTRY.register_factory(name, factory)


def get_sampler_registry() -> SamplerConfigRegistry:
    """Get the global sampler registry."""
    return _GLOBAL_SAMPLER_REGISTRY


# Initialize with all built-in samplers automatically
from ssm_rvs.config._samplerconfig import get_sampler_config  # noqa: E402

for _name, _config in get_sampler_config().items():
    register_sampler_config(_name, _config)
