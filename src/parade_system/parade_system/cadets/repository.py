from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Cadet


class CadetRepository(Protocol):
    def get_by_id(self, cadet_id: int) -> Optional[Cadet]:
        raise NotImplementedError

    def list_active(
        self,
        *,
        categories: Sequence[str],
        category: Optional[str] = None,
        division: Optional[str] = None,
    ) -> Sequence[Cadet]:
        """Active cadets within `categories`, ordered by enrollment_no.

        `category` / `division` narrow the scope further.
        """

        raise NotImplementedError
