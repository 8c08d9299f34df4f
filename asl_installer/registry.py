"""
Registry for add-on components.

Component modules register themselves with a decorator; the command line
and the orchestrator both read the registered metadata.
"""

from typing import Any, Dict, Iterable, List, Optional, Type

from asl_installer.base_component import BaseComponent


class ComponentRegistry:
    """
    Registry for component modules.

    Metadata keys used by the installer: ``flag``, ``long_flag``,
    ``display_name``, ``order`` and ``description``.
    """

    _registry: Dict[str, Type["BaseComponent"]] = {}

    @classmethod
    def register(cls, name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Decorator for registering component classes.

        Args:
            name: The name of the component.
            metadata: Optional metadata for the component.

        Returns:
            A decorator function that registers the component class.
        """

        def decorator(
            component_class: Type["BaseComponent"],
        ) -> Type["BaseComponent"]:
            if name in cls._registry:
                raise ValueError(
                    f"Component with name '{name}' already registered"
                )

            if metadata:
                component_class.metadata = metadata

            cls._registry[name] = component_class
            return component_class

        return decorator

    @classmethod
    def get_component(cls, name: str) -> Type["BaseComponent"]:
        """
        Get a component class by name.

        Raises:
            KeyError: If no component with the given name is registered.
        """
        if name not in cls._registry:
            raise KeyError(f"No component registered with name '{name}'")

        return cls._registry[name]

    @classmethod
    def get_all_components(cls) -> Dict[str, Type["BaseComponent"]]:
        """
        Get all registered components.

        Returns:
            A dictionary mapping component names to component classes.
        """
        return cls._registry.copy()

    @classmethod
    def ordered(cls, components: Iterable[str]) -> List[str]:
        """
        Return ``components`` without duplicates, sorted into installation order.

        Raises:
            KeyError: If any of the components is not registered.
        """
        unique = dict.fromkeys(components)
        return sorted(
            unique,
            key=lambda name: (
                int(cls.get_component(name).metadata.get("order", 0)),
                name,
            ),
        )
