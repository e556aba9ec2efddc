"""Tests for transfer mirroring."""

from datetime import date
from decimal import Decimal

import pytest

from duoledger.domain.entities import SubCategoryMarker, TransactionDraft, TransactionKind
from duoledger.domain.errors import ValidationError
from duoledger.domain.mirroring import build_mirror, expand_transfer, needs_mirror


def _draft(kind=TransactionKind.TRANSFER, party="Burimi", amount="500"):
    return TransactionDraft(
        date=date(2025, 1, 2),
        account="Cash",
        kind=kind,
        sub_category="Transfere",
        party=party,
        amount=Decimal(amount),
        marker=SubCategoryMarker.NONE,
        notes="rent share",
        description="January",
        created_by="admin",
    )


def test_mirror_swaps_party_and_negates_amount(parties):
    original = _draft()
    mirror = build_mirror(original, parties)

    assert mirror.party == "Skenderi"
    assert mirror.amount == Decimal("-500")
    assert original.amount + mirror.amount == 0


def test_mirror_keeps_other_fields(parties):
    original = _draft()
    mirror = build_mirror(original, parties)

    assert mirror.date == original.date
    assert mirror.account == original.account
    assert mirror.kind is TransactionKind.TRANSFER
    assert mirror.sub_category == original.sub_category
    assert mirror.notes == original.notes
    assert mirror.description == original.description
    assert mirror.created_by == "admin"


def test_mirror_of_second_party(parties):
    mirror = build_mirror(_draft(party="Skenderi", amount="-75.50"), parties)

    assert mirror.party == "Burimi"
    assert mirror.amount == Decimal("75.50")


def test_untracked_party_rejected(parties):
    with pytest.raises(ValidationError) as excinfo:
        build_mirror(_draft(party="Guest"), parties)

    assert "Guest" in str(excinfo.value)


def test_income_is_not_mirrored(parties):
    income = _draft(kind=TransactionKind.INCOME)

    assert not needs_mirror(income)
    assert expand_transfer(income, parties) == [income]
    with pytest.raises(ValidationError):
        build_mirror(income, parties)


def test_expand_transfer_returns_both_legs(parties):
    legs = expand_transfer(_draft(), parties)

    assert [leg.party for leg in legs] == ["Burimi", "Skenderi"]
    assert sum(leg.amount for leg in legs) == 0
