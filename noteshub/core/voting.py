# noteshub/core/voting.py
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from noteshub.core.errors import TransferFailed, UploadNotFound
from noteshub.models.account import Account
from noteshub.models.upload import UploadRecord
from noteshub.models.vote import Vote, VoteDirection

logger = logging.getLogger(__name__)

_COUNTERS = {
    VoteDirection.UP: UploadRecord.upvotes,
    VoteDirection.DOWN: UploadRecord.downvotes,
}


@dataclass
class VoteResult:
    upload_id: int
    upvotes: int
    downvotes: int
    direction: Optional[VoteDirection]


def votes_for(db: Session, account: Account) -> Dict[int, str]:
    """The account's vote mapping: ``{upload_id: "up" | "down"}``."""
    rows = db.query(Vote.upload_id, Vote.direction).filter(Vote.account_id == account.id).all()
    return {upload_id: direction for upload_id, direction in rows}


def cast_vote(db: Session, account: Account, upload_id: int, direction) -> VoteResult:
    """Add, swap or retract the account's vote on one upload.

    Same direction as the recorded one retracts it, the opposite direction
    swaps it, and no recorded vote adds one. Counters move with
    ``column + delta`` updates in the same transaction as the vote row.
    """
    direction = VoteDirection(direction)

    if db.get(UploadRecord, upload_id) is None:
        raise UploadNotFound()

    vote = (
        db.query(Vote)
        .filter(Vote.account_id == account.id, Vote.upload_id == upload_id)
        .with_for_update()
        .first()
    )
    current = VoteDirection(vote.direction) if vote else None

    deltas = {VoteDirection.UP: 0, VoteDirection.DOWN: 0}
    if current is direction:
        deltas[direction] -= 1
        db.delete(vote)
        recorded = None
    elif current is direction.opposite:
        deltas[current] -= 1
        deltas[direction] += 1
        vote.direction = direction.value
        recorded = direction
    else:
        deltas[direction] += 1
        db.add(Vote(account_id=account.id, upload_id=upload_id, direction=direction.value))
        recorded = direction

    values = {
        column.key: column + deltas[d]
        for d, column in _COUNTERS.items()
        if deltas[d]
    }
    try:
        db.execute(
            update(UploadRecord)
            .where(UploadRecord.id == upload_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("vote by account %s on upload %s failed: %s", account.id, upload_id, exc)
        raise TransferFailed("Vote failed, please try again") from exc

    upvotes, downvotes = (
        db.query(UploadRecord.upvotes, UploadRecord.downvotes)
        .filter(UploadRecord.id == upload_id)
        .one()
    )
    logger.info(
        "account %s voted %s on upload %s (was %s): %d/%d",
        account.id, direction.value, upload_id, current.value if current else None, upvotes, downvotes,
    )
    return VoteResult(upload_id, upvotes, downvotes, recorded)
