from abc import ABC, abstractmethod
from typing import Optional

from .models import Article, ArticleData


class ArticleRepository(ABC):
    """
    Saved links, split into a pending and an archived list per user.
    """

    @abstractmethod
    def add(self, article: ArticleData) -> int:
        """
        Persist a new pending link and return its id.
        """
        raise NotImplementedError

    @abstractmethod
    def get_pending(self, link_id: int) -> Optional[Article]: ...

    @abstractmethod
    def pending_list(self, user_id: int) -> list[Article]: ...

    @abstractmethod
    def archived_list(self, user_id: int) -> list[Article]: ...

    @abstractmethod
    def archive(self, user_id: int, link_id: int) -> Optional[int]:
        """
        Move a pending link to the archive in one transaction.

        Returns the archived id, or None when the link does not exist
        or belongs to another user.
        """
        raise NotImplementedError

    @abstractmethod
    def delete_pending(self, user_id: int, link_id: int) -> None: ...

    @abstractmethod
    def delete_archived(self, user_id: int, link_id: int) -> None: ...
