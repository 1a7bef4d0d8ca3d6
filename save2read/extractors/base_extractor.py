from abc import ABC, abstractmethod
from typing import Optional


class TitleExtractionError(RuntimeError):
    pass


class TitleExtractor(ABC):
    @abstractmethod
    def extract_title(self, url: str) -> Optional[str]:
        """
        Fetches the page at ``url`` and returns its <title>.

        Returns:
            Optional[str]: the stripped title, or None when the page has none.

        Raises:
            TitleExtractionError: the page could not be fetched.
        """
        pass
