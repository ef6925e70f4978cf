# parking_gate/services/event_dispatcher.py
"""Wires the reactive rules to the collections whose changes trigger them."""

from parking_gate.services.change_feed import BARRIERS, TICKETS, ChangeFeed, change_feed
from parking_gate.services.consistency_service import handle_ticket_change
from parking_gate.services.barrier_service import handle_barrier_change
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)


def register_reactions(feed: ChangeFeed = change_feed):
    # Ticket status → spot occupancy
    feed.subscribe(TICKETS, handle_ticket_change)

    # Barrier closed → open → auto-close
    feed.subscribe(BARRIERS, handle_barrier_change)

    logger.info("Reactive rules registered: spot/ticket sync, barrier safety closer")
