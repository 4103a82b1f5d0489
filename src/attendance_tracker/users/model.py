from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import WorkMode


@dataclass(frozen=True)
class Employee:
    """Domain entity: the signed-in employee.

    Note: Only ``user_id`` and ``work_mode`` drive attendance decisions.
    """

    user_id: str
    name: str
    work_mode: WorkMode
    employee_id: Optional[str] = None
    email: Optional[str] = None
