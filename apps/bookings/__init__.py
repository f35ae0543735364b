"""Bookings app package.

Hotel room reservation engine: availability calendars, conflict checks,
the booking lifecycle and pricing. Writes for a room are serialized by a
per-room lock plus a row lock on the room inside one transaction.
"""
