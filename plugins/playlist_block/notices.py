"""
Editor notices shown above the playlist block.
"""

import uuid
from dataclasses import dataclass, field
from typing import List


@dataclass
class Notice:
    """A notice displayed in the block."""
    content: str
    status: str = "info"  # info/success/warning/error
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    is_dismissible: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": self.status,
            "content": self.content,
            "is_dismissible": self.is_dismissible,
        }


class NoticeBoard:
    """Notice list of one block."""

    def __init__(self):
        self._notices: List[Notice] = []

    @property
    def notices(self) -> List[Notice]:
        return list(self._notices)

    @property
    def errors(self) -> List[Notice]:
        return [n for n in self._notices if n.status == "error"]

    def create_notice(self, content: str, status: str = "info") -> Notice:
        notice = Notice(content=content, status=status)
        self._notices.append(notice)
        return notice

    def create_error_notice(self, content: str) -> Notice:
        return self.create_notice(content, status="error")

    def remove_notice(self, notice_id: str) -> bool:
        before = len(self._notices)
        self._notices = [n for n in self._notices if n.id != notice_id]
        return len(self._notices) != before

    def remove_all_notices(self) -> int:
        count = len(self._notices)
        self._notices.clear()
        return count
