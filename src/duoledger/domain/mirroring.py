"""Transfer mirroring between the two tracked parties."""

from dataclasses import replace

from duoledger.domain.entities import PartyPair, TransactionDraft, TransactionKind
from duoledger.domain.errors import ValidationError, unknown_party


def needs_mirror(draft: TransactionDraft) -> bool:
    """Only transfers are mirrored."""
    return draft.kind is TransactionKind.TRANSFER


def build_mirror(draft: TransactionDraft, parties: PartyPair) -> TransactionDraft:
    """Return the counterpart leg of a transfer.

    The mirror keeps every field of the original except the party, which
    becomes the other tracked party, and the amount, which is negated. The two
    amounts therefore always sum to zero.

    Raises:
        ValidationError: If the draft is not a transfer or its party is untracked
    """
    if not needs_mirror(draft):
        raise ValidationError(f"Only transfers are mirrored, got {draft.kind.label}")
    if draft.party not in parties:
        raise ValidationError(
            f"Transfers must be recorded for a tracked party: {unknown_party(draft.party, parties.as_tuple())}"
        )
    return replace(draft, party=parties.other(draft.party), amount=-draft.amount)


def expand_transfer(draft: TransactionDraft, parties: PartyPair) -> list[TransactionDraft]:
    """Return the drafts to insert for one user entry.

    Income and expense entries are stored as-is; a transfer becomes the
    original leg followed by its mirror.
    """
    if not needs_mirror(draft):
        return [draft]
    return [draft, build_mirror(draft, parties)]
