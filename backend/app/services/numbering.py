"""Invoice number allocation.

Two separate mechanisms live here and they can disagree: the suggestion
parses the last digit run of existing numbers, while availability is an
exact string comparison inside a folder scope.
"""

import re
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from backend.app.crud.crud_invoice import invoice_crud

NUMBER_WIDTH = 3
_DIGIT_RUN = re.compile(r"\d+")


def last_number_in(invoice_number: str) -> int:
    runs = _DIGIT_RUN.findall(invoice_number or "")
    if not runs:
        return 0
    return int(runs[-1])


def format_invoice_number(number: int, prefix: Optional[str] = None) -> str:
    padded = str(number).zfill(NUMBER_WIDTH)
    if prefix:
        return f"{prefix}-{padded}"
    return padded


def next_invoice_number(numbers: Iterable[str], prefix: Optional[str] = None) -> str:
    """
    Suggest the number following the highest one already used.

    `numbers` must already be scoped and free of deleted invoices.
    """
    highest = max((last_number_in(number) for number in numbers), default=0)
    return format_invoice_number(highest + 1, prefix)


def is_invoice_number_available(
    db: Session,
    owner_id: int,
    invoice_number: str,
    folder_id: Optional[int],
    exclude_invoice_id: Optional[int] = None,
) -> bool:
    return not invoice_crud.number_taken(
        db,
        owner_id=owner_id,
        folder_id=folder_id,
        invoice_number=invoice_number,
        exclude_id=exclude_invoice_id,
    )


def get_next_invoice_number_for_folder(
    db: Session, owner_id: int, folder_id: Optional[int], prefix: Optional[str] = None
) -> str:
    numbers = invoice_crud.numbers_in_scope(db, owner_id=owner_id, folder_id=folder_id)
    return next_invoice_number(numbers, prefix)
