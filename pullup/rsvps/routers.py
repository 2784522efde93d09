from fastapi import APIRouter

from .features.get_dinner_slots.router import router as get_dinner_slots_router
from .features.get_event.router import router as get_event_router
from .features.get_event_stats.router import router as get_event_stats_router
from .features.list_guests.router import router as list_guests_router
from .features.revise_rsvp.router import router as revise_rsvp_router
from .features.submit_rsvp.router import router as submit_rsvp_router
from .features.update_event.router import router as update_event_router

router = APIRouter()

router.include_router(get_event_router)
router.include_router(submit_rsvp_router)
router.include_router(get_dinner_slots_router)

host_router = APIRouter()

host_router.include_router(update_event_router)
host_router.include_router(revise_rsvp_router)
host_router.include_router(list_guests_router)
host_router.include_router(get_event_stats_router)
