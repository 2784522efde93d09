EVENT_URL = "/events/{slug}"
SUBMIT_RSVP_URL = "/events/{slug}/rsvp"
DINNER_SLOTS_URL = "/events/{slug}/dinner-slots"

HOST_EVENT_URL = "/host/events/{slug}"
REVISE_RSVP_URL = "/host/events/{slug}/rsvps/{rsvp_id}"
LIST_GUESTS_URL = "/host/events/{slug}/guests"
EVENT_STATS_URL = "/host/events/{slug}/stats"
