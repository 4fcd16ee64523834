"""
Base server factory.

Holds one server instance per factory class for the lifetime of the process.
"""

from abc import ABCMeta, abstractmethod
from typing import Any, ClassVar, Optional


class BaseServerFactory[T](metaclass=ABCMeta):
    """Create a server once, hand it out afterwards.

    Subclasses only implement :meth:`_build`. The instance lives on the
    subclass, so each concrete factory has its own slot.

    Examples
    --------
    .. code-block:: python

        from slack_cheer.webhook.app import web_factory

        app = web_factory.create(service=service)
        assert web_factory.get() is app
        web_factory.reset()
    """

    _instance: ClassVar[Optional[Any]] = None

    @classmethod
    @abstractmethod
    def _build(cls, **kwargs) -> T:
        """Build a new server instance from *kwargs*."""

    @classmethod
    def create(cls, **kwargs) -> T:
        """Build the server and remember it.

        Raises
        ------
        AssertionError
            If an instance was already created and not reset.
        """
        assert cls._instance is None, f"{cls.__name__} already created its server instance."
        cls._instance = cls._build(**kwargs)
        return cls._instance

    @classmethod
    def get(cls) -> T:
        """Return the created server instance."""
        assert cls._instance is not None, f"{cls.__name__} has not created a server instance yet."
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the server instance (used between tests)."""
        cls._instance = None
