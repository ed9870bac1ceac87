# services/lifecycle.py
import logging

from pymongo import ReturnDocument

from utils.dates import utcnow
from utils.errors import BadRequestError, InvalidTransitionError, provider_errors

logger = logging.getLogger(__name__)


class StatusMachine:
    """Legal status changes for one kind of document.

    ``transitions`` maps ``(from_status, event)`` to the new status. Events
    listed in ``internal_events`` are only fired by the flows that own them
    (renewal, follow-up) and can't be requested by naming a target status.
    """

    def __init__(self, entity, states, transitions, messages=None, stamps=None, internal_events=()):
        self.entity = entity
        self.states = tuple(states)
        self.transitions = dict(transitions)
        self.messages = messages or {}
        self.stamps = stamps or {}
        self.internal_events = frozenset(internal_events)

    def validate_status(self, status):
        if status not in self.states:
            raise BadRequestError(f"Invalid status. Must be one of: {', '.join(self.states)}")

    def next_status(self, current, event):
        try:
            return self.transitions[(current, event)]
        except KeyError:
            message = self.messages.get((current, event))
            raise InvalidTransitionError(message or f"Cannot {event} a {self.entity} with status {current}.")

    def event_for(self, current, target):
        self.validate_status(target)
        for (source, event), dest in self.transitions.items():
            if source == current and dest == target and event not in self.internal_events:
                return event
        raise InvalidTransitionError(f"Cannot change {self.entity} status from {current} to {target}.")


CARGO = StatusMachine(
    "cargo",
    states=("Pending", "In Transit", "Delivered", "Cancelled"),
    transitions={
        ("Pending", "dispatch"): "In Transit",
        ("In Transit", "deliver"): "Delivered",
        ("Pending", "cancel"): "Cancelled",
        ("In Transit", "cancel"): "Cancelled",
    },
    messages={
        ("Delivered", "cancel"): "Cannot cancel a cargo that has already been delivered.",
        ("Cancelled", "cancel"): "This cargo booking is already cancelled.",
    },
)

COMPLAINT = StatusMachine(
    "complaint",
    states=("Pending", "In Progress", "Resolved", "Rejected"),
    transitions={
        ("Pending", "respond"): "Pending",
        ("In Progress", "respond"): "In Progress",
        ("Pending", "start"): "In Progress",
        ("Pending", "resolve"): "Resolved",
        ("In Progress", "resolve"): "Resolved",
        ("Pending", "reject"): "Rejected",
        ("In Progress", "reject"): "Rejected",
        ("Resolved", "reopen"): "In Progress",
    },
    stamps={"Resolved": "resolved_at"},
    internal_events=("reopen",),
)

SEASON_PASS = StatusMachine(
    "season pass",
    states=("Pending", "Active", "Expired", "Cancelled"),
    transitions={
        ("Pending", "approve"): "Active",
        ("Pending", "cancel"): "Cancelled",
        ("Active", "cancel"): "Cancelled",
        ("Active", "expire"): "Expired",
        ("Active", "renew"): "Expired",
        ("Expired", "renew"): "Expired",
    },
    messages={
        ("Pending", "renew"): "Only active or expired passes can be renewed.",
        ("Cancelled", "renew"): "Only active or expired passes can be renewed.",
        ("Cancelled", "cancel"): "This season pass is already cancelled.",
    },
    internal_events=("renew",),
)

BOOKING = StatusMachine(
    "booking",
    states=("Confirmed", "Cancelled"),
    transitions={
        ("Confirmed", "cancel"): "Cancelled",
    },
    messages={
        ("Cancelled", "cancel"): "This booking is already cancelled.",
    },
    stamps={"Cancelled": "cancelled_at"},
)


def apply_transition(collection, document, machine, event, extra=None, error_message=None):
    """Move ``document`` along ``event`` with a single conditional update.

    The update only matches while the stored status is still the one that
    was read, so a concurrent change fails instead of being overwritten.
    Returns the updated document.
    """
    current = document["status"]
    target = machine.next_status(current, event)
    now = utcnow()

    fields = {"status": target, "updated_at": now}
    if target in machine.stamps:
        fields[machine.stamps[target]] = now
    if extra:
        fields.update(extra)

    with provider_errors(error_message or f"Failed to update {machine.entity} status. Please try again."):
        updated = collection.find_one_and_update(
            {"_id": document["_id"], "status": current},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    if updated is None:
        logger.warning("%s %s changed status concurrently, %s refused", machine.entity, document["_id"], event)
        raise InvalidTransitionError(f"The {machine.entity} was modified by someone else. Please reload and try again.")

    logger.info("%s %s: %s -> %s (%s)", machine.entity, document["_id"], current, target, event)
    return updated
