"""Client abstraction for the provider's network configuration endpoints."""
from abc import ABC, abstractmethod
from pathlib import Path


class NetworkConfigClient(ABC):
    """Read and apply a subscription's network configuration.

    Implementations are expected to be authenticated already; the pipeline
    only calls the two methods below.
    """

    subscription_id: str = ""

    @abstractmethod
    def get_configuration(self) -> str:
        """Return the current NetworkConfiguration XML text.

        Returns an empty string when the subscription has no network
        configuration yet.
        """
        pass

    @abstractmethod
    def apply_configuration(self, path: str | Path) -> None:
        """Submit the configuration file at path.

        Blocks until the provider reports the change as complete.
        """
        pass

    def close(self) -> None:
        """Release any held resources."""
        pass

    # Context manager support
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
