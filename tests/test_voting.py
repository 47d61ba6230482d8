import itertools
import random

import pytest

from noteshub.core.errors import UploadNotFound
from noteshub.core.voting import cast_vote, votes_for
from noteshub.models import UploadRecord, Vote, VoteDirection


def _counts(db, upload_id):
    db.expire_all()
    record = db.get(UploadRecord, upload_id)
    return record.upvotes, record.downvotes


def _recorded(db, account, upload_id):
    return votes_for(db, account).get(upload_id)


def test_add_retract_swap(db, make_account, make_upload):
    account = make_account(has_contributed=True)
    record = make_upload(account)

    result = cast_vote(db, account, record.id, "up")
    assert (result.upvotes, result.downvotes, result.direction) == (1, 0, VoteDirection.UP)

    result = cast_vote(db, account, record.id, "up")
    assert (result.upvotes, result.downvotes, result.direction) == (0, 0, None)
    assert _recorded(db, account, record.id) is None

    cast_vote(db, account, record.id, VoteDirection.DOWN)
    assert _counts(db, record.id) == (0, 1)

    result = cast_vote(db, account, record.id, "up")
    assert (result.upvotes, result.downvotes) == (1, 0)
    assert _recorded(db, account, record.id) == "up"


def test_votes_from_different_accounts_add_up(db, make_account, make_upload):
    alice = make_account("a@x.edu", "Alice", True)
    bob = make_account("b@x.edu", "Bob", True)
    record = make_upload(alice)

    cast_vote(db, alice, record.id, "up")
    cast_vote(db, bob, record.id, "up")
    assert _counts(db, record.id) == (2, 0)

    cast_vote(db, bob, record.id, "down")
    assert _counts(db, record.id) == (1, 1)


def test_unknown_upload(db, make_account):
    account = make_account(has_contributed=True)

    with pytest.raises(UploadNotFound):
        cast_vote(db, account, 12345, "up")


def test_unknown_direction(db, make_account, make_upload):
    account = make_account(has_contributed=True)
    record = make_upload(account)

    with pytest.raises(ValueError):
        cast_vote(db, account, record.id, "sideways")
    assert _counts(db, record.id) == (0, 0)


def test_counters_match_mapping_after_random_votes(db, make_account, make_upload):
    accounts = [make_account(f"u{i}@x.edu", f"user{i}", True) for i in range(4)]
    uploads = [make_upload(accounts[0]), make_upload(accounts[1])]
    rng = random.Random(3157)

    # same direction as the last effective call retracts, anything else records it
    expected = {}
    for _ in range(200):
        account = rng.choice(accounts)
        record = rng.choice(uploads)
        direction = rng.choice(["up", "down"])
        key = (account.id, record.id)
        expected[key] = None if expected.get(key) == direction else direction
        cast_vote(db, account, record.id, direction)

    for record in uploads:
        up = db.query(Vote).filter_by(upload_id=record.id, direction="up").count()
        down = db.query(Vote).filter_by(upload_id=record.id, direction="down").count()
        assert _counts(db, record.id) == (up, down)
        assert up == sum(1 for (_, u), d in expected.items() if u == record.id and d == "up")
        assert down == sum(1 for (_, u), d in expected.items() if u == record.id and d == "down")

    for account, record in itertools.product(accounts, uploads):
        assert _recorded(db, account, record.id) == expected.get((account.id, record.id))
