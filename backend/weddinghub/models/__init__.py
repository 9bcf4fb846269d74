from weddinghub.models.user import User
from weddinghub.models.event import Event
from weddinghub.models.vendor import Vendor
from weddinghub.models.booking import Booking

__all__ = ["User", "Event", "Vendor", "Booking"]
