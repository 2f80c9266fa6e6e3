from revpilot.modules.store.booking_store import BookingStore

__all__ = ["BookingStore"]
