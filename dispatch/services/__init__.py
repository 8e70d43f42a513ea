# services/__init__.py

from .dispatch_engine import DispatchEngine
from .event_bus import EventBus
from .geo_tracker import GeoTracker
from .offer_timer import OfferTimer
from .pricing import quote_price

__all__ = ['DispatchEngine', 'EventBus', 'GeoTracker', 'OfferTimer', 'quote_price']
