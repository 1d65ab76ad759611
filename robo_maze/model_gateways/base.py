from abc import ABC, abstractmethod
from typing import Optional


class OracleError(RuntimeError):
    """The text-generation service could not produce an answer."""


class ModelAdapter(ABC):
    @abstractmethod
    def generate(self, prompt: str, system: Optional[str] = None) -> str:
        raise NotImplementedError

    def name(self) -> str:
        return self.__class__.__name__
