"""TourHub — tourism booking platform backend.

REST API for tour packages, guide profiles, bookings, wishlists,
community content, and payments. Access control (token verification,
admin-only and owner-only policies) is layered over every resource.
"""

__version__ = "0.1.0"
