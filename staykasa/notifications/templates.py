"""Title/message templates for booking notifications, keyed by event type."""

import logging

logger = logging.getLogger(__name__)

TEMPLATES = {
    "booking_created": {
        "title": "New booking: {property_title}",
        "message": (
            "{guest_name} booked {property_title} from {check_in} to {check_out} "
            "for {guests} guest(s). Total: {total_price}. Status: {status}."
        ),
    },
    "booking_confirmation": {
        "title": "Booking received: {property_title}",
        "message": (
            "Your booking at {property_title} is {status}.\n"
            "- Check-in: {check_in}\n"
            "- Check-out: {check_out}\n"
            "- Guests: {guests}\n"
            "- Total Price: {total_price}"
        ),
    },
    "booking_confirmed": {
        "title": "Booking confirmed: {property_title}",
        "message": "Your stay at {property_title} from {check_in} to {check_out} has been confirmed.",
    },
    "booking_cancelled": {
        "title": "Booking cancelled: {property_title}",
        "message": "The booking at {property_title} ({check_in} to {check_out}) has been cancelled.",
    },
    "booking_completed": {
        "title": "Stay completed: {property_title}",
        "message": "Your stay at {property_title} has been completed. We hope you enjoyed it!",
    },
}

VALID_EVENT_TYPES = set(TEMPLATES.keys())


class _Defaults(dict):
    """format_map helper that leaves unknown placeholders visible instead of raising."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render(event_type: str, payload: dict) -> tuple[str, str]:
    """Return ``(title, message)`` for an event."""
    template = TEMPLATES.get(event_type)
    if template is None:
        logger.warning("No notification template for event type %r", event_type)
        return event_type.replace("_", " ").capitalize(), ""
    values = _Defaults(payload)
    return template["title"].format_map(values), template["message"].format_map(values)
