"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested transaction does not exist."""


class PermissionDeniedError(DomainError):
    """Actor lacks the capability required for a mutation."""


class MirrorConsistencyError(DomainError):
    """The two legs of a transfer could not be persisted together."""


class AggregationInputError(DomainError):
    """A row reached the aggregation engine with an unknown category."""


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def permission_denied(actor_name: str, action: str) -> str:
    """Return message when an actor may not perform an action."""
    return f"User '{actor_name}' is not allowed to {action} transactions"


def unknown_category(value: object) -> str:
    """Return message for a category outside the closed set."""
    return (
        f'category "{value}" is invalid '
        '(must be "Te Hyra", "Shpenzime", or "Transfere")'
    )


def unknown_party(value: str, parties: tuple[str, str]) -> str:
    """Return message for a party outside the tracked pair."""
    return f'name "{value}" is invalid (must be "{parties[0]}" or "{parties[1]}")'


def mirror_failed(party: str, counterpart: str) -> str:
    """Return message when a transfer pair could not be stored."""
    return (
        f"Transfer from {party} to {counterpart} was not recorded: "
        "both legs must be stored together"
    )
